"""
Persistence Adapter

The bridge between a record store and its storage backend.

CONTRACT (per domain):
- load_all() never raises: a failed load is logged and reads as []
- insert()/update() return the stored record, or None on failure
- delete() returns whether the record is gone

Write failures are reported to the user through the injected notifier.
Callers must only touch their in-memory collection after a non-None /
True result; this adapter never hands back a record the backend did
not confirm.
"""

from typing import Callable, Optional

from recordkeeper.audit import AuditLogger
from recordkeeper.models.records import Draft, Record, utc_now
from recordkeeper.models.schema import RecordSchema
from recordkeeper.services.storage.interface import (
    RecordStorageInterface,
    StorageError,
)


Notifier = Callable[[str], None]


def _ignore(message: str) -> None:
    return None


class PersistenceAdapter:
    """Fail-soft wrapper around one domain's storage backend."""

    def __init__(
        self,
        storage: RecordStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        notify: Optional[Notifier] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._notify = notify or _ignore

    @property
    def schema(self) -> RecordSchema:
        return self._storage.schema

    @property
    def storage(self) -> RecordStorageInterface:
        return self._storage

    def set_notifier(self, notify: Optional[Notifier]) -> None:
        """Swap the user-facing failure channel (e.g. per UI session)."""
        self._notify = notify or _ignore

    async def load_all(self) -> list[Record]:
        """Fetch all records, newest first by the domain's order key."""
        domain = self.schema.name
        try:
            records = await self._storage.fetch_all()
            records = sorted(records, key=self.schema.order_value_of, reverse=True)
        except Exception as e:
            # Any backend failure reads as an empty domain
            self._audit_logger.log_load_failed(domain, str(e))
            return []

        self._audit_logger.log_records_loaded(domain, len(records))
        return records

    async def insert(self, draft: Draft) -> Optional[Record]:
        """Persist a candidate record; None if the backend refused it."""
        domain = self.schema.name
        try:
            record = await self._storage.insert(draft)
        except StorageError as e:
            self._audit_logger.log_write_failed(domain, "insert", str(e))
            self._notify(f"Could not save the {self.schema.label}. Please try again.")
            return None

        self._audit_logger.log_record_inserted(
            domain, record.id, self.schema.title_of(record)
        )
        return record

    async def update(self, record: Record) -> Optional[Record]:
        """
        Persist changes to an existing record; None on failure.

        Stamps updated_at with the current time on a copy, so the caller's
        record object is never modified.
        """
        domain = self.schema.name
        if self.schema.timestamped:
            stamped_at = max(utc_now(), record.created_at)
            record = record.model_copy(update={"updated_at": stamped_at})

        try:
            saved = await self._storage.update(record)
        except StorageError as e:
            self._audit_logger.log_write_failed(domain, "update", str(e), record.id)
            self._notify(f"Could not update the {self.schema.label}. Please try again.")
            return None

        self._audit_logger.log_record_updated(
            domain, saved.id, self.schema.title_of(saved)
        )
        return saved

    async def delete(self, record_id: str) -> bool:
        """Delete a record by id; False if the backend refused."""
        domain = self.schema.name
        try:
            deleted = await self._storage.delete(record_id)
        except StorageError as e:
            self._audit_logger.log_write_failed(domain, "delete", str(e), record_id)
            self._notify(f"Could not delete the {self.schema.label}. Please try again.")
            return False

        if deleted:
            self._audit_logger.log_record_deleted(domain, record_id)
        else:
            self._notify(f"Could not delete the {self.schema.label}. Please try again.")
        return deleted
