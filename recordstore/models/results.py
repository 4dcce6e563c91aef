"""
Result types returned by RecordStore queries.
"""

from dataclasses import dataclass
from typing import NamedTuple

from recordstore.models.record import Record


class FindResult(NamedTuple):
    """Point lookup result. A missing key is a normal outcome, not an error."""

    record: Record | None
    comparisons: int

    @property
    def found(self) -> bool:
        return self.record is not None


class ScanResult(NamedTuple):
    """Range or prefix scan result with the tree navigation cost."""

    records: list[Record]
    comparisons: int


@dataclass(frozen=True)
class StoreStats:
    """Snapshot of heap and index sizes."""

    heap_slots: int
    live_records: int
    deleted_slots: int
    unique_index_entries: int
    secondary_index_entries: int
    unique_index_height: int
    secondary_index_height: int

    def to_dict(self) -> dict[str, int]:
        return {
            "heap_slots": self.heap_slots,
            "live_records": self.live_records,
            "deleted_slots": self.deleted_slots,
            "unique_index_entries": self.unique_index_entries,
            "secondary_index_entries": self.secondary_index_entries,
            "unique_index_height": self.unique_index_height,
            "secondary_index_height": self.secondary_index_height,
        }
