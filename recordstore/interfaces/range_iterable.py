"""
RangeIterable protocol for data structures that support range iteration.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Any


class RangeIterable(ABC):
    """
    Protocol for ordered data structures that can be walked over a key range.

    Implementations must support:
    - Full in-order iteration via __iter__
    - Closed-range iteration via iterator(start, end)
    - Callback traversal via range_apply(lo, hi, visit)
    """

    @abstractmethod
    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        """Return an iterator over all key-value pairs in ascending key order."""
        pass

    @abstractmethod
    def iterator(
        self, start: Any | None = None, end: Any | None = None
    ) -> Iterator[tuple[Any, Any]]:
        """
        Return an iterator over key-value pairs in the specified range.

        Args:
            start: Lower key (inclusive). If None, starts from the smallest key.
            end: Upper key (inclusive). If None, iterates to the largest key.

        Returns:
            Iterator yielding (key, value) tuples in ascending key order.
        """
        pass

    @abstractmethod
    def range_apply(self, lo: Any, hi: Any, visit: Callable[[Any, Any], None]) -> None:
        """
        Call visit(key, value) for every entry with lo <= key <= hi.

        A bound of None leaves that side of the range open.

        Entries are visited in ascending key order. The value handed to visit
        is the stored object itself, so mutable values may be edited in place.
        """
        pass
