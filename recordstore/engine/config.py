"""
Configuration for the record store.
"""

import sys
from collections.abc import Callable
from dataclasses import dataclass


def casefold(key: str) -> str:
    """Default secondary key normalization: Unicode case folding."""
    return key.casefold()


def prefix_successor(prefix: str) -> str | None:
    """
    Return the smallest string that sorts after every string starting with prefix.

    Trailing characters already at the highest code point cannot be bumped
    and are dropped. None means no such string exists (empty prefix, or a
    prefix made only of the highest code point): the range is unbounded above.
    """
    stripped = prefix.rstrip(chr(sys.maxunicode))
    if not stripped:
        return None
    return stripped[:-1] + chr(ord(stripped[-1]) + 1)


@dataclass(frozen=True)
class StoreConfig:
    """
    Tunable behaviour of a RecordStore.

    Attributes:
        normalizer: Pure function applied to secondary keys and prefixes
            before they touch the secondary index.
        prefix_sentinel: Optional single character appended to a normalized
            prefix to form the upper bound of a prefix scan, e.g. "{" for
            ASCII-only data. It must sort after every character a normalized
            key can contain. When None the bound is the prefix's successor,
            which covers every code point.
    """

    normalizer: Callable[[str], str] = casefold
    prefix_sentinel: str | None = None

    def __post_init__(self) -> None:
        if not callable(self.normalizer):
            raise ValueError(f"normalizer must be callable, got {self.normalizer!r}")
        if self.prefix_sentinel is not None and (
            not isinstance(self.prefix_sentinel, str) or len(self.prefix_sentinel) != 1
        ):
            raise ValueError(
                f"prefix_sentinel must be a single character, got {self.prefix_sentinel!r}"
            )

    def prefix_bounds(self, prefix: str) -> tuple[str, str | None]:
        """
        Return the closed secondary index range covering a prefix.

        The range may hold one key that does not start with the prefix (the
        upper bound itself); callers check startswith on visited keys.
        """
        lower = self.normalizer(prefix)
        if self.prefix_sentinel is not None:
            return lower, lower + self.prefix_sentinel
        return lower, prefix_successor(lower)
