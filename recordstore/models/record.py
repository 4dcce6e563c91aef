"""
Record and RowId for representing stored rows.
"""

from dataclasses import dataclass, field
from typing import Any

from recordstore.models.exceptions import RecordFormatError

# Position of a record in the heap. Assigned at append time, never reused.
RowId = int


@dataclass
class Record:
    """
    A student row stored in the heap.

    Attributes:
        id: Student id, the unique identifying key.
        last: Last name, the non-unique secondary key.
        first: First name.
        payload: Any further columns; never inspected by the store.
        deleted: Logical delete flag, the only field mutated after append.
    """

    id: int
    last: str
    first: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    deleted: bool = False

    @property
    def identifying_key(self) -> int:
        return self.id

    @property
    def secondary_key(self) -> str:
        return self.last

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first": self.first,
            "last": self.last,
            "payload": dict(self.payload),
            "deleted": self.deleted,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Record":
        """
        Build a record from a decoded JSON object.

        Unknown top-level fields are folded into payload. A "deleted" field is
        ignored: new records always start live.

        Raises:
            RecordFormatError: If data is not an object, or id / last are
                missing or of the wrong type.
        """
        if not isinstance(data, dict):
            raise RecordFormatError("record must be a JSON object")

        record_id = data.get("id")
        # bool is an int subclass but never a valid id
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise RecordFormatError("'id' must be an integer", field="id")

        last = data.get("last")
        if not isinstance(last, str):
            raise RecordFormatError("'last' must be a string", field="last")

        first = data.get("first", "")
        if not isinstance(first, str):
            raise RecordFormatError("'first' must be a string", field="first")

        payload = data.get("payload", {})
        if not isinstance(payload, dict):
            raise RecordFormatError("'payload' must be a JSON object", field="payload")

        extra = {
            k: v
            for k, v in data.items()
            if k not in ("id", "first", "last", "payload", "deleted")
        }
        return cls(id=record_id, last=last, first=first, payload={**payload, **extra})
