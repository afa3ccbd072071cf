"""Record store package."""

from recordkeeper.store.record_store import RecordStore

__all__ = ["RecordStore"]
