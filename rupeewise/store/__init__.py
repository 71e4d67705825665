"""In-memory record store."""

from rupeewise.store.record_store import ChangeHandler, RecordStore

__all__ = ["ChangeHandler", "RecordStore"]
