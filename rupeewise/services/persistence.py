"""
Persistence Adapter

Mirrors the record store into key-value storage and handles
whole-state export/import.

DESIGN DECISION: The adapter subscribes to store change events
instead of the store calling save functions. Each event names the
collection(s) it touched, and only those are rewritten.

Storage failures are logged and remembered in `last_error`; they
never undo or block the mutation that triggered them. The in-memory
state is the source of truth while the app runs.

A collection whose blob could not be read is never overwritten until a
later load reads it cleanly, or an import replaces it. A blob that reads
but does not parse is copied to `<key>.corrupt` before starting empty.
"""

import datetime
import json
from typing import Optional, Union

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from rupeewise.config import get_settings
from rupeewise.models.events import ChangeEvent
from rupeewise.models.records import (
    Budget,
    Debt,
    ExportDocument,
    RecordCollection,
    Transaction,
)
from rupeewise.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from rupeewise.store.record_store import RecordStore


logger = structlog.get_logger(__name__)


IMPORT_SUCCESS_MESSAGE = "Data imported successfully!"
IMPORT_FAILURE_MESSAGE = "Error importing data. Invalid file format."

BACKUP_FILENAME_TEMPLATE = "rupeewise_backup_{day}.json"

_ADAPTERS: dict[RecordCollection, TypeAdapter] = {
    RecordCollection.TRANSACTIONS: TypeAdapter(list[Transaction]),
    RecordCollection.DEBTS: TypeAdapter(list[Debt]),
    RecordCollection.BUDGETS: TypeAdapter(list[Budget]),
}


class ImportResult(BaseModel):
    """Outcome of importing a backup document."""

    success: bool
    message: str
    imported: list[RecordCollection] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


def backup_filename(day: Optional[datetime.date] = None) -> str:
    """Suggested file name for an export, e.g. rupeewise_backup_2024-03-15.json."""
    day = day or datetime.date.today()
    return BACKUP_FILENAME_TEMPLATE.format(day=day.isoformat())


class PersistenceAdapter:
    """
    Connects a RecordStore to a KeyValueStorageInterface.

    Usage:
        adapter = PersistenceAdapter(LocalFileStorage("~/.rupeewise"))
        adapter.load(store)
        adapter.attach(store)
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key_prefix: Optional[str] = None,
    ):
        self.storage = storage
        self.key_prefix = key_prefix if key_prefix is not None else get_settings().storage.key_prefix
        self.last_error: Optional[str] = None
        self._store: Optional[RecordStore] = None
        # Collections whose stored blob must not be overwritten
        self._unreadable: set[RecordCollection] = set()

    def key_for(self, collection: RecordCollection) -> str:
        return f"{self.key_prefix}{collection.value}"

    @property
    def unreadable(self) -> list[RecordCollection]:
        """Collections whose saves are held back after a failed read."""
        return [c for c in RecordCollection if c in self._unreadable]

    # =========================================================================
    # LOAD
    # =========================================================================

    def _read_collection(self, collection: RecordCollection) -> Optional[list]:
        """
        Read and parse one collection.

        Returns None when the key is absent or cannot be read; the store
        keeps its current content and the collection is held back from
        saving. A blob that does not parse is copied aside and treated as
        an empty collection.
        """
        key = self.key_for(collection)
        try:
            raw = self.storage.read(key)
        except StorageError as e:
            logger.error("collection_read_failed", key=key, error=str(e))
            self.last_error = str(e)
            self._unreadable.add(collection)
            return None

        if raw is None:
            self._unreadable.discard(collection)
            return None

        try:
            records = _ADAPTERS[collection].validate_json(raw)
            # Same uniqueness rules as an imported backup
            ExportDocument.model_validate({collection.value: records})
        except ValidationError as e:
            logger.error(
                "collection_corrupt",
                key=key,
                error_count=e.error_count(),
                error=str(e)[:500],
            )
            if not self._keep_corrupt_copy(key, raw):
                self._unreadable.add(collection)
                return None
            self._unreadable.discard(collection)
            return []

        self._unreadable.discard(collection)
        return records

    def _keep_corrupt_copy(self, key: str, raw: str) -> bool:
        """Copy an unparseable blob to `<key>.corrupt`."""
        corrupt_key = f"{key}.corrupt"
        try:
            self.storage.write(corrupt_key, raw)
        except StorageError as e:
            logger.error("corrupt_copy_failed", key=corrupt_key, error=str(e))
            self.last_error = str(e)
            return False

        logger.warning("corrupt_copy_kept", key=corrupt_key)
        return True

    def load(self, store: RecordStore) -> list[RecordCollection]:
        """
        Populate the store from storage.

        Collections with no stored blob keep their current content.

        Returns:
            The collections that were loaded
        """
        loaded = {
            collection: self._read_collection(collection)
            for collection in RecordCollection
        }

        replaced = store.replace_collections(
            transactions=loaded[RecordCollection.TRANSACTIONS],
            debts=loaded[RecordCollection.DEBTS],
            budgets=loaded[RecordCollection.BUDGETS],
        )

        logger.info(
            "store_loaded",
            collections=[c.value for c in replaced],
            transactions=len(store.transactions),
            debts=len(store.debts),
            budgets=len(store.budgets),
        )
        return replaced

    # =========================================================================
    # SAVE
    # =========================================================================

    def attach(self, store: RecordStore) -> None:
        """Start saving the store's collections whenever they change."""
        if self._store is not None and self._store is not store:
            self.detach()
        self._store = store
        store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._store is not None:
            self._store.unsubscribe(self._on_change)
            self._store = None

    def _on_change(self, event: ChangeEvent) -> None:
        if self._store is None:
            return
        for collection in event.collections:
            self.save_collection(self._store, collection)

    def _serialize(self, store: RecordStore, collection: RecordCollection) -> bytes:
        records = getattr(store, collection.value)
        return _ADAPTERS[collection].dump_json(records, by_alias=True)

    def save_collection(self, store: RecordStore, collection: RecordCollection) -> bool:
        """
        Write one collection to storage.

        Returns:
            True on success. Failures are logged, not raised.
        """
        key = self.key_for(collection)
        if collection in self._unreadable:
            self.last_error = f"{key} could not be read; not overwriting it"
            logger.error("collection_save_skipped", key=key)
            return False

        try:
            self.storage.write(key, self._serialize(store, collection).decode("utf-8"))
        except StorageError as e:
            self.last_error = str(e)
            logger.error("collection_save_failed", key=key, error=str(e))
            return False

        self.last_error = None
        return True

    def save_all(self, store: RecordStore) -> bool:
        results = [self.save_collection(store, c) for c in RecordCollection]
        return all(results)

    # =========================================================================
    # EXPORT / IMPORT
    # =========================================================================

    def export_document(
        self,
        store: RecordStore,
        exported_at: Optional[datetime.datetime] = None,
    ) -> str:
        """Serialize the whole state as a pretty-printed backup document."""
        document = ExportDocument(
            transactions=store.transactions,
            debts=store.debts,
            budgets=store.budgets,
            export_date=exported_at or datetime.datetime.now(datetime.timezone.utc),
        )
        return document.model_dump_json(by_alias=True, indent=2)

    def import_document(self, store: RecordStore, raw: Union[str, bytes]) -> ImportResult:
        """
        Replace collections from a backup document.

        Each collection whose key is present is replaced wholesale;
        absent keys leave that collection untouched. On any failure the
        store is left exactly as it was.
        """
        try:
            data = json.loads(raw)
        except (ValueError, TypeError) as e:
            return self._import_failed(f"Not valid JSON: {e}")

        if not isinstance(data, dict):
            return self._import_failed("Document is not a JSON object")

        if not any(c.value in data for c in RecordCollection):
            return self._import_failed("Document has no transactions, debts or budgets")

        try:
            document = ExportDocument.model_validate(data)
        except ValidationError as e:
            return self._import_failed(
                *[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            )

        # A deliberate import may overwrite a collection that failed to load
        for collection in RecordCollection:
            if getattr(document, collection.value) is not None:
                self._unreadable.discard(collection)

        imported = store.replace_collections(
            transactions=document.transactions,
            debts=document.debts,
            budgets=document.budgets,
        )

        logger.info(
            "backup_imported",
            collections=[c.value for c in imported],
            export_date=document.export_date.isoformat() if document.export_date else None,
        )
        return ImportResult(
            success=True,
            message=IMPORT_SUCCESS_MESSAGE,
            imported=imported,
        )

    def _import_failed(self, *errors: str) -> ImportResult:
        logger.warning("backup_import_rejected", errors=list(errors)[:10])
        return ImportResult(
            success=False,
            message=IMPORT_FAILURE_MESSAGE,
            errors=list(errors),
        )
