"""
Record Store

The authoritative in-memory collection for one domain, and the single
source of truth the UI reads from.

The store is only ever changed with records the backend has already
confirmed (see PersistenceAdapter). Each apply_* call builds a new list
instead of mutating the old one, so a snapshot taken from `records` stays
valid even if the store changes afterwards.
"""

from typing import Iterator, Optional

from recordkeeper.models.records import Record
from recordkeeper.models.schema import RecordSchema


class RecordStore:
    """In-memory collection of one domain's records, newest first."""

    def __init__(self, schema: RecordSchema):
        self._schema = schema
        self._records: list[Record] = []
        self.editing_id: Optional[str] = None

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    @property
    def ids(self) -> list[str]:
        return [record.id for record in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def get(self, record_id: str) -> Optional[Record]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def load(self, adapter) -> int:
        """Replace the collection with whatever the adapter loads."""
        self._records = list(await adapter.load_all())
        if self.editing_id is not None and self.get(self.editing_id) is None:
            self.editing_id = None
        return len(self._records)

    def apply_insert(self, record: Record) -> None:
        """Add a confirmed record at the front (newest first)."""
        if self.get(record.id) is not None:
            self.apply_update(record)
            return
        self._records = [record] + self._records

    def apply_update(self, record: Record) -> bool:
        """Replace the record with the same id; unknown ids are ignored."""
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                updated = list(self._records)
                updated[index] = record
                self._records = updated
                return True
        return False

    def apply_delete(self, record_id: str) -> bool:
        """Remove a confirmed-deleted record; returns whether it was present."""
        remaining = [record for record in self._records if record.id != record_id]
        removed = len(remaining) != len(self._records)
        self._records = remaining
        return removed
