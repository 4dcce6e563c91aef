"""
RecordStore - append-only heap with a unique and a secondary index.
"""

import copy
import logging
from collections.abc import Iterable
from typing import Any

from recordstore.engine.config import StoreConfig
from recordstore.interfaces.ordered_index import OrderedIndex
from recordstore.models.exceptions import InvalidRowIdError
from recordstore.models.ordered import BinarySearchTree
from recordstore.models.record import Record, RowId
from recordstore.models.results import FindResult, ScanResult, StoreStats

logger = logging.getLogger(__name__)


class RecordStore:
    """
    In-memory record store.

    Provides:
    - insert_record(record): Append a record, superseding any record with the same id
    - delete_by_id(id): Logically delete the current record for an id
    - find_by_id(id): Point lookup on the unique index
    - range_by_id(lo, hi): Closed range scan on the unique index
    - prefix_by_secondary(prefix): Case-insensitive prefix scan on the secondary index

    Architecture:
    - The heap is a list that only grows; a RowId is a position in it
    - unique index: id -> RowId of the current record
    - secondary index: normalized last name -> list of RowIds, insertion ordered
    - Deleted slots stay in the heap with deleted=True and are filtered on read

    Records handed out by queries are the heap slots themselves and must be
    treated as read-only. Index maintenance never reads keys back from them.

    Not thread-safe: one caller must serialize all calls.
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        unique_index: OrderedIndex | None = None,
        secondary_index: OrderedIndex | None = None,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            config: Normalization and prefix scan settings.
            unique_index: Empty index for identifying keys (default: BinarySearchTree).
            secondary_index: Empty index for secondary keys (default: BinarySearchTree).
        """
        self._config = config or StoreConfig()
        self._heap: list[Record] = []
        # Normalized secondary key of each slot, captured at append time
        self._secondary_keys: list[str] = []
        self._unique_index = unique_index if unique_index is not None else BinarySearchTree()
        self._secondary_index = (
            secondary_index if secondary_index is not None else BinarySearchTree()
        )

        if self._unique_index.size() or self._secondary_index.size():
            raise ValueError("RecordStore indexes must start empty")

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def unique_index(self) -> OrderedIndex:
        return self._unique_index

    @property
    def secondary_index(self) -> OrderedIndex:
        return self._secondary_index

    def insert_record(self, record: Record) -> RowId:
        """
        Append a record and index it.

        If a record with the same id is already live it is superseded: its
        slot is marked deleted and dropped from both indexes before the new
        copy is appended.

        Args:
            record: The record to store. The heap keeps its own copy.

        Returns:
            RowId of the newly appended slot, which holds the live data.
        """
        key = record.identifying_key
        old_row_id = self._unique_index.find(key)

        if old_row_id is not None:
            self._retire(old_row_id)
            self._unique_index.erase(key)

        row_id = self._append(record)
        self._unique_index.insert(key, row_id)
        self._link_secondary(row_id)

        if old_row_id is not None:
            logger.debug(f"Overwrote id {key!r}: row {old_row_id} -> row {row_id}")
        return row_id

    def insert_many(self, records: Iterable[Record]) -> list[RowId]:
        """Insert records in order; later duplicates supersede earlier ones."""
        return [self.insert_record(record) for record in records]

    def delete_by_id(self, key: Any) -> bool:
        """
        Logically delete the current record for an id.

        Returns:
            True if a live record was deleted, False if the id was absent.
        """
        row_id = self._unique_index.find(key)
        if row_id is None:
            return False

        self._retire(row_id)
        self._unique_index.erase(key)
        logger.debug(f"Deleted id {key!r} at row {row_id}")
        return True

    def find_by_id(self, key: Any) -> FindResult:
        """Look up the live record for an id and report the comparisons made."""
        self._unique_index.reset_metrics()
        row_id = self._unique_index.find(key)
        comparisons = self._unique_index.comparisons

        if row_id is None or self._heap[row_id].deleted:
            return FindResult(None, comparisons)
        return FindResult(self._heap[row_id], comparisons)

    def range_by_id(self, lo: Any, hi: Any) -> ScanResult:
        """
        Return live records with lo <= id <= hi in ascending id order.

        The comparison count covers tree navigation only.
        """
        self._unique_index.reset_metrics()
        results: list[Record] = []

        def collect(_key: Any, row_id: RowId) -> None:
            record = self._heap[row_id]
            if not record.deleted:
                results.append(record)

        self._unique_index.range_apply(lo, hi, collect)
        return ScanResult(results, self._unique_index.comparisons)

    def prefix_by_secondary(self, prefix: str) -> ScanResult:
        """
        Return live records whose normalized last name starts with prefix.

        Records come back in normalized-key order, and in insertion order
        among records sharing a key. An empty prefix matches every record.
        """
        self._secondary_index.reset_metrics()
        lower, upper = self._config.prefix_bounds(prefix)
        results: list[Record] = []

        def collect(key: str, row_ids: list[RowId]) -> None:
            if not key.startswith(lower):
                return
            for row_id in row_ids:
                record = self._heap[row_id]
                if not record.deleted:
                    results.append(record)

        self._secondary_index.range_apply(lower, upper, collect)
        return ScanResult(results, self._secondary_index.comparisons)

    def record_at(self, row_id: RowId) -> Record:
        """
        Return the heap slot for a RowId, deleted or not.

        The slot is shared with the store; do not mutate it.

        Raises:
            InvalidRowIdError: If the RowId was never assigned.
        """
        if not 0 <= row_id < len(self._heap):
            raise InvalidRowIdError(row_id, len(self._heap))
        return self._heap[row_id]

    def heap_size(self) -> int:
        return len(self._heap)

    def stats(self) -> StoreStats:
        live = self._unique_index.size()
        return StoreStats(
            heap_slots=len(self._heap),
            live_records=live,
            deleted_slots=len(self._heap) - live,
            unique_index_entries=live,
            secondary_index_entries=self._secondary_index.size(),
            unique_index_height=self._unique_index.height(),
            secondary_index_height=self._secondary_index.height(),
        )

    def __len__(self) -> int:
        return self._unique_index.size()

    def _append(self, record: Record) -> RowId:
        row_id = len(self._heap)
        stored = copy.deepcopy(record)
        stored.deleted = False
        self._heap.append(stored)
        self._secondary_keys.append(self._config.normalizer(stored.secondary_key))
        return row_id

    def _normalized_key(self, row_id: RowId) -> str:
        return self._secondary_keys[row_id]

    def _link_secondary(self, row_id: RowId) -> None:
        key = self._normalized_key(row_id)
        row_ids = self._secondary_index.find(key)
        if row_ids is None:
            self._secondary_index.insert(key, [row_id])
        else:
            # Stored list is edited in place, no reinsertion
            row_ids.append(row_id)

    def _retire(self, row_id: RowId) -> None:
        """Mark a slot deleted and remove it from its secondary key list."""
        self._heap[row_id].deleted = True
        row_ids = self._secondary_index.find(self._normalized_key(row_id))
        if row_ids is not None:
            row_ids[:] = [r for r in row_ids if r != row_id]
