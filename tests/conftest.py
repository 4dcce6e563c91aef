"""
Shared pytest fixtures for record store tests.
"""

import pytest

from recordstore.engine.record_store import RecordStore
from recordstore.models.ordered import BinarySearchTree
from recordstore.models.record import Record


@pytest.fixture
def store():
    """Provide an empty RecordStore."""
    return RecordStore()


@pytest.fixture
def tree():
    """Provide a small tree shaped by its insertion order.

            50
           /  \\
         30    70
        /  \\
      20    40
    """
    bst = BinarySearchTree()
    for key in (50, 30, 70, 20, 40):
        bst.insert(key, f"v{key}")
    bst.reset_metrics()
    return bst


@pytest.fixture
def sample_records():
    """Provide the Smith / Smithers / Jones rows."""
    return [
        Record(id=1, last="Smith", first="Ada"),
        Record(id=2, last="Smithers", first="Waylon"),
        Record(id=3, last="Jones", first="Indiana"),
    ]


@pytest.fixture
def populated_store(store, sample_records):
    """Provide a store loaded with the sample rows."""
    store.insert_many(sample_records)
    return store
