"""
OrderedIndex abstract base class for instrumented ordered key-value indexes.
"""

from abc import abstractmethod
from typing import Any

from recordstore.interfaces.range_iterable import RangeIterable


class OrderedIndex(RangeIterable):
    """
    Abstract base class for ordered indexes with a comparison counter.

    Keys must be totally ordered. Every key comparison made while navigating
    the structure increments the counter; the counter is only zeroed by
    reset_metrics(), so callers reset it right before the operation whose
    cost they want to report.

    Implementations:
    - BinarySearchTree: unbalanced, shape follows insertion order
    """

    @abstractmethod
    def insert(self, key: Any, value: Any) -> None:
        """
        Insert a key-value pair.

        Args:
            key: The key to insert.
            value: The value to associate with the key.

        An existing key has its value silently replaced.
        """
        pass

    @abstractmethod
    def find(self, key: Any) -> Any | None:
        """
        Retrieve the value stored for a key.

        Args:
            key: The key to look up.

        Returns:
            The stored value object (not a copy) if found, None otherwise.
        """
        pass

    @abstractmethod
    def erase(self, key: Any) -> bool:
        """
        Remove a key and its value.

        Args:
            key: The key to remove.

        Returns:
            True if the key was found and removed, False otherwise.
        """
        pass

    @abstractmethod
    def has(self, key: Any) -> bool:
        pass

    @abstractmethod
    def size(self) -> int:
        """Return the number of entries."""
        pass

    @abstractmethod
    def height(self) -> int:
        """Return the number of nodes on the longest root-to-leaf path."""
        pass

    @property
    @abstractmethod
    def comparisons(self) -> int:
        """Key comparisons performed since the last reset_metrics()."""
        pass

    @abstractmethod
    def reset_metrics(self) -> None:
        """Zero the comparison counter."""
        pass

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Any) -> bool:
        return self.has(key)
