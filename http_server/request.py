import json
from dataclasses import dataclass, field
from typing import Any


class BadRequest(ValueError):
    """Raised by Request accessors when a parameter is missing or malformed."""

    def __init__(self, message: str, param: str | None = None):
        self.param = param
        super().__init__(message)


@dataclass
class Request:
    method: str
    path: str
    headers: dict[str, str]
    query_params: dict[str, list]
    body: bytes
    version: str
    _json: Any = field(init=False, repr=False, default=None)

    def __post_init__(self):
        if not self.body:
            return
        try:
            self._json = json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            self._json = None

    @property
    def json(self) -> Any:
        """Decoded JSON body, or None when the body is empty or not JSON."""
        return self._json

    def get(self, name: str, default: Any = None) -> Any:
        """Look a parameter up in the query string first, then the JSON body."""
        if not name:
            raise ValueError("Parameter name cannot be empty")

        values = self.query_params.get(name)
        if values:
            return values[0]

        if isinstance(self._json, dict) and name in self._json:
            return self._json[name]

        return default

    def require(self, name: str) -> Any:
        value = self.get(name)
        if value is None:
            raise BadRequest(f"Missing '{name}' parameter", param=name)
        return value

    def require_int(self, name: str) -> int:
        """Return a required parameter as an int, accepting numeric strings."""
        value = self.require(name)
        if isinstance(value, bool):
            raise BadRequest(f"'{name}' must be an integer", param=name)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise BadRequest(f"'{name}' must be an integer", param=name) from None

    def require_str(self, name: str) -> str:
        value = self.require(name)
        if not isinstance(value, str):
            raise BadRequest(f"'{name}' must be a string", param=name)
        return value
