import json
from dataclasses import dataclass, field
from typing import Any

STATUS_TEXT = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}


@dataclass
class Response:
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def reason(self) -> str:
        return STATUS_TEXT.get(self.status, "Unknown")

    def json(self, payload: Any) -> "Response":
        headers = dict(self.headers)
        headers["content-type"] = "application/json"
        return Response(
            status=self.status,
            headers=headers,
            body=json.dumps(payload).encode(),
        )

    def to_bytes(self) -> bytes:
        """Serialize status line, headers and body for the wire."""
        headers = {"content-type": "text/plain", **self.headers}
        headers["content-length"] = str(len(self.body))
        headers["connection"] = "keep-alive"
        headers["server"] = "RecordStoreHttp/1.0"

        head = f"HTTP/1.1 {self.status} {self.reason}\r\n"
        head += "".join(f"{key}: {value}\r\n" for key, value in headers.items())
        return head.encode() + b"\r\n" + self.body


def response(status_code: int = 200, headers: dict[str, str] | None = None) -> Response:
    return Response(status=status_code, headers={} if headers is None else dict(headers))


def error(status_code: int, message: str) -> Response:
    return response(status_code).json({"error": message})
