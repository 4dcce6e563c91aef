"""
IndexedRecord protocol: what the record store needs to know about a record.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IndexedRecord(Protocol):
    """
    A record the store can index.

    The store reads the two keys and flips the deleted flag. Every other
    field is opaque payload that the store never inspects.
    """

    deleted: bool

    @property
    def identifying_key(self) -> Any:
        """Unique, totally ordered key (e.g. a student id)."""
        ...

    @property
    def secondary_key(self) -> str:
        """Non-unique string key (e.g. a last name), indexed case-folded."""
        ...
