"""
In-memory record store with secondary indexing.

This package provides an append-only record heap with two ordered indexes:
- insert_record(record) - append + index maintenance, overwrite by id
- delete_by_id(id) - logical delete
- find_by_id(id) - point lookup with comparison count
- range_by_id(lo, hi) - closed id range scan
- prefix_by_secondary(prefix) - case-insensitive last name prefix scan
"""

from recordstore.engine.record_store import RecordStore

__all__ = ["RecordStore"]
