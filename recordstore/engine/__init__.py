"""
Record store engine: heap management and index maintenance.
"""

from recordstore.engine.config import StoreConfig, casefold
from recordstore.engine.record_store import RecordStore

__all__ = ["RecordStore", "StoreConfig", "casefold"]
