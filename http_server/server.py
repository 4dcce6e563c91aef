import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from urllib.parse import parse_qs, urlparse

from .request import BadRequest, Request
from .response import Response, error

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response | dict]]

# Limits applied while reading a request
HEADER_TIMEOUT_S = 5.0
BODY_TIMEOUT_S = 30.0
MAX_BODY_BYTES = 10 * 1024 * 1024


class HTTPServer:
    def __init__(self, host: str = "0.0.0.0", port: int = 8080):
        self.host = host
        self.port = port
        self.routes: dict[tuple[str, str], Handler] = {}
        self._server: asyncio.Server | None = None

    def route(self, path: str, methods: list[str] | None = None):
        """Decorator registering a handler for a path and set of methods."""
        methods = methods or ["GET"]

        def decorator(handler: Handler) -> Handler:
            for method in methods:
                self.routes[(method.upper(), path)] = handler
            return handler

        return decorator

    async def parse_request(self, reader: asyncio.StreamReader) -> Request | None:
        """Read one request off the stream; None on EOF, timeout or garbage."""
        try:
            request_line = await asyncio.wait_for(reader.readline(), timeout=HEADER_TIMEOUT_S)
            if not request_line:
                return None

            method, target, version = request_line.decode("utf-8").strip().split(" ", 2)
            url = urlparse(target)

            headers = {}
            while True:
                line = await asyncio.wait_for(reader.readline(), timeout=HEADER_TIMEOUT_S)
                if line in (b"\r\n", b"\n", b""):
                    break
                name, sep, value = line.decode("utf-8").partition(":")
                if sep:
                    headers[name.strip().lower()] = value.strip()

            body = b""
            content_length = int(headers.get("content-length", 0))
            if content_length > MAX_BODY_BYTES:
                raise ValueError(f"Request body too large: {content_length} bytes")
            if content_length > 0:
                body = await asyncio.wait_for(
                    reader.readexactly(content_length), timeout=BODY_TIMEOUT_S
                )

            return Request(
                method=method.upper(),
                path=url.path,
                headers=headers,
                query_params=parse_qs(url.query),
                body=body,
                version=version,
            )
        except asyncio.TimeoutError:
            return None
        except (ValueError, UnicodeDecodeError, asyncio.IncompleteReadError) as e:
            logger.error(f"Error parsing request: {e}")
            return None

    async def handle_request(self, request: Request) -> Response:
        """Dispatch to the matching handler and coerce its result to a Response."""
        handler = self.routes.get((request.method, request.path))

        if handler is None:
            if any(path == request.path for _, path in self.routes):
                return error(405, f"Method {request.method} not allowed on {request.path}")
            return error(404, "Route Not Found")

        try:
            result = await handler(request)
        except BadRequest as e:
            return error(400, str(e))
        except Exception as e:
            logger.exception(f"Handler error on {request.method} {request.path}: {e}")
            return error(500, "Internal Server Error")

        if isinstance(result, Response):
            return result
        if isinstance(result, dict):
            return Response(
                status=200,
                headers={"content-type": "application/json"},
                body=json.dumps(result).encode(),
            )

        logger.error(f"Handler for {request.path} returned {type(result).__name__}")
        return error(500, "Internal Server Error")

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Serve requests on one connection until the client closes it."""
        peer = writer.get_extra_info("peername")

        try:
            while True:
                request = await self.parse_request(reader)
                if request is None:
                    break

                start_time = time.perf_counter()
                logger.debug(f"--> {request.method} {request.path}")

                resp = await self.handle_request(request)
                writer.write(resp.to_bytes())
                await writer.drain()

                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.debug(f"<-- {resp.status} - {len(resp.body)} bytes - {elapsed_ms:.2f}ms")

                if request.headers.get("connection", "").lower() == "close":
                    break
        except ConnectionResetError:
            pass
        except OSError as e:
            logger.error(f"Connection error from {peer}: {e}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def listen(self) -> tuple[str, int]:
        """Bind the listening socket and return the bound address."""
        self._server = await asyncio.start_server(self.handle_client, self.host, self.port)
        addr = self._server.sockets[0].getsockname()
        logger.info(f"Record store HTTP server listening on http://{addr[0]}:{addr[1]}")
        return addr[0], addr[1]

    async def start(self):
        """Bind if needed and serve until cancelled."""
        if self._server is None:
            await self.listen()

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            logger.info("Server shutdown requested")
        finally:
            await self.shutdown()

    async def shutdown(self):
        if self._server is None:
            return
        logger.info("Shutting down server...")
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("Server shutdown complete")
