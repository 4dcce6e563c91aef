"""
Tests for RecordStore: index consistency under overwrite and logical delete.
"""

import random
import sys

import pytest

from recordstore.engine.config import StoreConfig, prefix_successor
from recordstore.engine.record_store import RecordStore
from recordstore.models.exceptions import InvalidRowIdError
from recordstore.models.ordered import BinarySearchTree
from recordstore.models.record import Record


def ids(records):
    return [record.id for record in records]


class TestInsert:
    """Tests for insert_record."""

    def test_row_ids_follow_heap_order(self, store, sample_records):
        assert [store.insert_record(r) for r in sample_records] == [0, 1, 2]
        assert store.heap_size() == 3
        assert len(store) == 3

    def test_heap_keeps_its_own_copy(self, store):
        record = Record(id=1, last="Smith", payload={"major": "CS"})
        row_id = store.insert_record(record)

        record.last = "Changed"
        record.payload["major"] = "Math"

        stored = store.record_at(row_id)
        assert stored is not record
        assert stored.last == "Smith"
        assert stored.payload == {"major": "CS"}

    def test_inserted_record_starts_live(self, store):
        row_id = store.insert_record(Record(id=1, last="x", deleted=True))
        assert not store.record_at(row_id).deleted
        assert store.find_by_id(1).found

    def test_overwrite_returns_new_row_id(self, store):
        assert store.insert_record(Record(id=5, last="Old")) == 0
        assert store.insert_record(Record(id=5, last="New")) == 1

        result = store.find_by_id(5)
        assert result.record is store.record_at(1)

    def test_overwrite_marks_stale_slot(self, store):
        store.insert_record(Record(id=1, last="Smith"))
        store.insert_record(Record(id=2, last="Smith"))
        store.insert_record(Record(id=1, last="Jones"))

        assert store.record_at(0).deleted
        assert not store.record_at(1).deleted
        assert not store.record_at(2).deleted
        assert sum(store.record_at(i).deleted for i in range(store.heap_size())) == 1

        assert ids(store.prefix_by_secondary("smith").records) == [2]
        assert [r.last for r in store.prefix_by_secondary("jones").records] == ["Jones"]
        assert [r.last for r in store.range_by_id(1, 2).records] == ["Jones", "Smith"]

    def test_overwrite_with_same_last_name(self, store):
        store.insert_record(Record(id=1, last="Smith", first="A"))
        store.insert_record(Record(id=1, last="SMITH", first="B"))

        assert store.secondary_index.find("smith") == [1]
        result = store.prefix_by_secondary("smith")
        assert [r.first for r in result.records] == ["B"]

    def test_heap_only_grows(self, store):
        sizes = []
        for last in ("a", "b", "c"):
            store.insert_record(Record(id=1, last=last))
            sizes.append(store.heap_size())
        store.delete_by_id(1)
        sizes.append(store.heap_size())
        assert sizes == [1, 2, 3, 3]

    def test_uniqueness_invariant(self, store):
        """Random inserts: each id maps to its most recent record, one entry per id."""
        rng = random.Random(7)
        latest = {}
        for n in range(400):
            key = rng.randrange(60)
            record = Record(id=key, last=rng.choice(["Smith", "Jones", "Lee"]), payload={"n": n})
            store.insert_record(record)
            latest[key] = n

            assert store.find_by_id(key).record.payload == {"n": n}

        assert store.unique_index.size() == len(latest)
        for key, n in latest.items():
            assert store.find_by_id(key).record.payload == {"n": n}

        live_rows = sum(len(rows) for _, rows in store.secondary_index)
        assert live_rows == len(latest)

    def test_insert_many(self, store, sample_records):
        row_ids = store.insert_many(sample_records + [Record(id=1, last="Again")])
        assert row_ids == [0, 1, 2, 3]
        assert store.find_by_id(1).record.last == "Again"


class TestDelete:
    """Tests for delete_by_id."""

    def test_delete_returns_true_then_false(self, populated_store):
        assert populated_store.delete_by_id(1) is True
        assert populated_store.delete_by_id(1) is False
        assert populated_store.delete_by_id(1) is False

    def test_deleted_record_stays_in_heap(self, populated_store):
        populated_store.delete_by_id(1)

        record = populated_store.record_at(0)
        assert record.id == 1
        assert record.deleted

        assert not populated_store.find_by_id(1).found
        assert 1 not in ids(populated_store.range_by_id(0, 10).records)
        assert 1 not in ids(populated_store.prefix_by_secondary("").records)

    def test_delete_absent_id(self, populated_store):
        assert populated_store.delete_by_id(42) is False
        assert populated_store.stats().deleted_slots == 0

    def test_delete_then_reinsert(self, populated_store):
        populated_store.delete_by_id(2)
        row_id = populated_store.insert_record(Record(id=2, last="Smithers", first="Again"))

        assert row_id == 3
        assert populated_store.find_by_id(2).record.first == "Again"
        assert populated_store.secondary_index.find("smithers") == [3]


class TestFind:
    """Tests for find_by_id."""

    def test_found(self, populated_store):
        result = populated_store.find_by_id(2)
        assert result.found
        assert result.record.last == "Smithers"
        assert result.comparisons == 2

    def test_not_found_is_a_result(self, populated_store):
        result = populated_store.find_by_id(99)
        assert not result.found
        assert result.record is None
        assert result.comparisons == 3

    def test_empty_store(self, store):
        assert store.find_by_id(1) == (None, 0)

    def test_counter_resets_between_calls(self, populated_store):
        first = populated_store.find_by_id(3)
        second = populated_store.find_by_id(3)
        assert first.comparisons == second.comparisons == 3

    def test_counter_not_polluted_by_writes(self, populated_store):
        populated_store.insert_record(Record(id=4, last="Lee"))
        populated_store.delete_by_id(4)
        assert populated_store.find_by_id(1).comparisons == 1


class TestRange:
    """Tests for range_by_id."""

    def test_range_matches_brute_force(self, store):
        rng = random.Random(11)
        keys = rng.sample(range(1000), 200)
        for key in keys:
            store.insert_record(Record(id=key, last=f"name{key % 7}"))
        for key in keys[::5]:
            store.delete_by_id(key)

        live = sorted(set(keys) - set(keys[::5]))
        for _ in range(50):
            lo = rng.randrange(-10, 1010)
            hi = rng.randrange(lo, 1020)
            result = store.range_by_id(lo, hi)
            assert ids(result.records) == [k for k in live if lo <= k <= hi]

    def test_bounds_are_inclusive(self, populated_store):
        assert ids(populated_store.range_by_id(1, 3).records) == [1, 2, 3]
        assert ids(populated_store.range_by_id(2, 2).records) == [2]

    def test_inverted_range_is_empty(self, populated_store):
        assert populated_store.range_by_id(3, 1).records == []

    def test_comparisons_reported(self, populated_store):
        first = populated_store.range_by_id(1, 3)
        second = populated_store.range_by_id(1, 3)
        assert first.comparisons > 0
        assert first.comparisons == second.comparisons


class TestPrefix:
    """Tests for prefix_by_secondary."""

    def test_scenario(self, populated_store):
        result = populated_store.prefix_by_secondary("smi")
        assert ids(result.records) == [1, 2]

        assert populated_store.delete_by_id(1)
        assert ids(populated_store.prefix_by_secondary("smi").records) == [2]
        assert not populated_store.find_by_id(1).found

    def test_case_insensitive(self, store):
        store.insert_many(
            [
                Record(id=1, last="Smith"),
                Record(id=2, last="SMITHERS"),
                Record(id=3, last="Smyth"),
                Record(id=4, last="smith"),
            ]
        )
        for prefix in ("smi", "SMI", "sMi"):
            assert ids(store.prefix_by_secondary(prefix).records) == [1, 4, 2]

        assert ids(store.prefix_by_secondary("sm").records) == [1, 4, 2, 3]

    def test_duplicates_keep_insertion_order(self, store):
        for key in (9, 3, 6):
            store.insert_record(Record(id=key, last="Lee"))
        assert ids(store.prefix_by_secondary("lee").records) == [9, 3, 6]

    def test_empty_prefix_matches_everything(self, populated_store):
        assert sorted(ids(populated_store.prefix_by_secondary("").records)) == [1, 2, 3]

    def test_no_match(self, populated_store):
        result = populated_store.prefix_by_secondary("zz")
        assert result.records == []
        assert result.comparisons > 0

    def test_non_ascii_keys_inside_range(self, store):
        store.insert_record(Record(id=1, last="Smø"))
        store.insert_record(Record(id=2, last="Sm~th"))
        assert ids(store.prefix_by_secondary("sm").records) == [2, 1]

    def test_read_time_filtering(self, populated_store):
        """A deleted slot left in a secondary list never reaches results."""
        populated_store.record_at(0).deleted = True
        assert populated_store.secondary_index.find("smith") == [0]
        assert ids(populated_store.prefix_by_secondary("smith").records) == [2]

    def test_keys_past_highest_code_point(self, store):
        top = chr(sys.maxunicode)
        store.insert_record(Record(id=1, last=f"Sm{top}a"))
        store.insert_record(Record(id=2, last="Smith"))
        store.insert_record(Record(id=3, last=f"{top}{top}x"))
        store.insert_record(Record(id=4, last="Sn"))

        assert ids(store.prefix_by_secondary("sm").records) == [2, 1]
        assert ids(store.prefix_by_secondary(f"sm{top}").records) == [1]
        assert ids(store.prefix_by_secondary(top).records) == [3]

    def test_successor_key_is_excluded(self, store):
        """The upper bound of the scan is itself a key but not a match."""
        store.insert_record(Record(id=1, last="Smj"))
        store.insert_record(Record(id=2, last="Smi"))
        assert ids(store.prefix_by_secondary("smi").records) == [2]

    def test_counter_resets_between_calls(self, populated_store):
        first = populated_store.prefix_by_secondary("smi")
        second = populated_store.prefix_by_secondary("smi")
        assert first.comparisons == second.comparisons


class TestConfig:
    """Tests for StoreConfig and injected collaborators."""

    def test_ascii_sentinel(self):
        store = RecordStore(StoreConfig(prefix_sentinel="{"))
        store.insert_record(Record(id=1, last="Smith"))
        store.insert_record(Record(id=2, last="Sm~th"))
        assert ids(store.prefix_by_secondary("sm").records) == [1]

    def test_custom_normalizer(self):
        store = RecordStore(StoreConfig(normalizer=lambda key: key.strip().lower()))
        store.insert_record(Record(id=1, last="  Smith "))
        assert store.secondary_index.find("smith") == [0]
        assert ids(store.prefix_by_secondary(" SM").records) == [1]

    @pytest.mark.parametrize("sentinel", ["", "{{", 7])
    def test_invalid_sentinel(self, sentinel):
        with pytest.raises(ValueError):
            StoreConfig(prefix_sentinel=sentinel)

    def test_invalid_normalizer(self):
        with pytest.raises(ValueError):
            StoreConfig(normalizer="lower")

    def test_prefix_bounds(self):
        assert StoreConfig(prefix_sentinel="{").prefix_bounds("SMI") == ("smi", "smi{")
        assert StoreConfig().prefix_bounds("SMI") == ("smi", "smj")
        assert StoreConfig().prefix_bounds("") == ("", None)

    def test_prefix_successor(self):
        top = chr(sys.maxunicode)
        assert prefix_successor("az") == "a{"
        assert prefix_successor(f"a{top}{top}") == "b"
        assert prefix_successor(top) is None
        assert prefix_successor("") is None

    def test_non_empty_index_rejected(self):
        tree = BinarySearchTree()
        tree.insert(1, 0)
        with pytest.raises(ValueError):
            RecordStore(unique_index=tree)


class TestReturnedRecords:
    """Index maintenance does not depend on callers leaving returned records alone."""

    def test_renamed_record_is_still_unlinked_on_delete(self, populated_store):
        populated_store.find_by_id(1).record.last = "Renamed"

        assert populated_store.delete_by_id(1)
        assert populated_store.secondary_index.find("smith") == []
        assert populated_store.secondary_index.find("renamed") is None

    def test_renamed_record_is_still_unlinked_on_overwrite(self, populated_store):
        populated_store.record_at(1).last = "Other"
        populated_store.insert_record(Record(id=2, last="Smithers", first="New"))

        assert populated_store.secondary_index.find("smithers") == [3]
        assert [r.first for r in populated_store.prefix_by_secondary("smithers").records] == ["New"]


class TestHeapAccess:
    """Tests for record_at and stats."""

    @pytest.mark.parametrize("row_id", [-1, 3, 100])
    def test_unassigned_row_id(self, populated_store, row_id):
        with pytest.raises(InvalidRowIdError):
            populated_store.record_at(row_id)

    def test_stats(self, populated_store):
        populated_store.insert_record(Record(id=1, last="Jones"))
        populated_store.delete_by_id(2)

        stats = populated_store.stats()
        assert stats.heap_slots == 4
        assert stats.live_records == 2
        assert stats.deleted_slots == 2
        assert stats.unique_index_entries == 2
        assert stats.secondary_index_entries == 3
        assert stats.unique_index_height == 2
        assert len(populated_store) == 2
