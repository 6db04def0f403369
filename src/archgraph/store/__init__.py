"""
Record store adapters for archgraph.

Provides pluggable backends:
- RestRecordStore: the dashboard's HTTP API
- SQLiteRecordStore: local persistence
"""

from .base import RecordStore
from .http import RestRecordStore
from .sqlite import SQLiteRecordStore


def build_store(config) -> RecordStore:
    """Instantiate the backend selected by an ``ArchgraphConfig``."""
    from ..config import StoreBackend

    settings = config.store
    if settings.backend == StoreBackend.HTTP:
        return RestRecordStore(settings.api_url, timeout=settings.timeout)
    return SQLiteRecordStore(settings.db_path)


__all__ = ["RecordStore", "RestRecordStore", "SQLiteRecordStore", "build_store"]
