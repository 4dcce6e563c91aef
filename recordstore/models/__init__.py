"""
Data models for the record store.
"""

from recordstore.models.exceptions import InvalidRowIdError, RecordFormatError
from recordstore.models.ordered import BinarySearchTree
from recordstore.models.record import Record, RowId
from recordstore.models.results import FindResult, ScanResult, StoreStats

__all__ = [
    "BinarySearchTree",
    "FindResult",
    "InvalidRowIdError",
    "Record",
    "RecordFormatError",
    "RowId",
    "ScanResult",
    "StoreStats",
]
