import asyncio
import logging
import os

from http_server.request import BadRequest, Request
from http_server.response import Response, error, response
from http_server.server import HTTPServer
from recordstore import RecordStore
from recordstore.models import Record, RecordFormatError

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger()


async def main():
    server = HTTPServer(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8080")),
    )
    store = RecordStore()
    register_routes(server, store)
    logger.debug(f"Registered routes: {sorted(server.routes)}")
    await server.start()


def register_routes(server: HTTPServer, store: RecordStore):

    @server.route("/records", ["PUT"])
    async def put(request: Request) -> Response:
        try:
            record = Record.from_dict(request.json)
        except RecordFormatError as e:
            return error(400, str(e))

        row_id = store.insert_record(record)
        return response(status_code=200).json({"row_id": row_id})

    @server.route("/records/batch", ["POST"])
    async def batch_put(request: Request) -> Response:
        items = request.require("records")
        if not isinstance(items, list):
            raise BadRequest("'records' must be an array", param="records")

        try:
            # Validate everything before touching the store
            records = [Record.from_dict(item) for item in items]
        except RecordFormatError as e:
            return error(400, str(e))

        row_ids = store.insert_many(records)
        return response(status_code=200).json({"row_ids": row_ids, "count": len(row_ids)})

    @server.route("/records", ["GET"])
    async def get(request: Request) -> Response:
        record_id = request.require_int("id")
        result = store.find_by_id(record_id)
        return response(status_code=200).json(
            {
                "found": result.found,
                "record": result.record.to_dict() if result.found else None,
                "comparisons": result.comparisons,
            }
        )

    @server.route("/records/range", ["GET"])
    async def get_range(request: Request) -> Response:
        lo = request.require_int("lo")
        hi = request.require_int("hi")
        result = store.range_by_id(lo, hi)
        return response(status_code=200).json(
            {
                "records": [record.to_dict() for record in result.records],
                "comparisons": result.comparisons,
            }
        )

    @server.route("/records/prefix", ["GET"])
    async def get_prefix(request: Request) -> Response:
        # An empty prefix is legal and matches every record
        prefix = request.get("last", "")
        if not isinstance(prefix, str):
            raise BadRequest("'last' must be a string", param="last")

        result = store.prefix_by_secondary(prefix)
        return response(status_code=200).json(
            {
                "records": [record.to_dict() for record in result.records],
                "comparisons": result.comparisons,
            }
        )

    @server.route("/records", ["DELETE"])
    async def delete(request: Request) -> Response:
        record_id = request.require_int("id")
        success = store.delete_by_id(record_id)
        return response(status_code=200).json({"success": success})

    @server.route("/stats", ["GET"])
    async def stats(request: Request) -> Response:
        return response(status_code=200).json(store.stats().to_dict())


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
