"""
Abstract base classes and protocols for the record store.
"""

from recordstore.interfaces.indexed_record import IndexedRecord
from recordstore.interfaces.ordered_index import OrderedIndex
from recordstore.interfaces.range_iterable import RangeIterable

__all__ = ["IndexedRecord", "OrderedIndex", "RangeIterable"]
