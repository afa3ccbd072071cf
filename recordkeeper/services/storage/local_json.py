"""
Local JSON Storage Implementation

Each domain is one JSON array stored in `<data_dir>/<storage_key>.json`.
Entries use camelCase keys (createdAt, deviceType).

A missing blob reads as an empty collection. Malformed entries are skipped
(and logged) on read but kept in the file. A blob that is not a JSON array
raises StorageError and is never overwritten. Writes always rewrite the
whole blob; there are no partial writes. Ids and timestamps are generated
here, and a write is only reported as successful once the blob is on disk.
"""

import json
from pathlib import Path
from typing import Optional
from uuid import uuid4

import structlog

from recordkeeper.models.records import Draft, Record, utc_now
from recordkeeper.models.schema import RecordSchema
from recordkeeper.services.storage.interface import (
    NotFoundError,
    RecordStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class LocalJsonRecordStorage(RecordStorageInterface):
    """File-backed storage holding a whole domain in one serialized blob."""

    def __init__(
        self,
        schema: RecordSchema,
        data_dir: Path,
        storage_key: Optional[str] = None,
    ):
        super().__init__(schema)
        self._path = Path(data_dir) / f"{storage_key or schema.table}.json"

    @property
    def path(self) -> Path:
        return self._path

    def _read_payload(self) -> list:
        """
        Raw blob entries; an absent blob is an empty list.

        Raises:
            StorageError: if the blob exists but is unreadable or not a JSON array
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("blob_unreadable", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to read {self._path}: {e}")

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.error("blob_parse_failed", path=str(self._path), error=str(e))
            raise StorageError(f"{self._path} is not valid JSON: {e}")
        if not isinstance(payload, list):
            logger.error("blob_parse_failed", path=str(self._path), error="expected a JSON array")
            raise StorageError(f"{self._path} does not hold a JSON array")
        return payload

    def _parse_entries(self, payload: list) -> list[Record]:
        """Valid records of the payload; malformed entries are skipped."""
        records = []
        for entry in payload:
            try:
                records.append(self._schema.from_blob_entry(entry))
            except (TypeError, ValueError) as e:
                logger.warning(
                    "malformed_entry_skipped",
                    path=str(self._path),
                    record_id=entry.get("id") if isinstance(entry, dict) else None,
                    error=str(e),
                )
        return records

    def _write_payload(self, payload: list) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    @staticmethod
    def _entry_id(entry) -> Optional[str]:
        return entry.get("id") if isinstance(entry, dict) else None

    async def fetch_all(self) -> list[Record]:
        records = self._parse_entries(self._read_payload())
        records.sort(key=self._schema.order_value_of, reverse=True)
        return records

    # Writes work on the raw entries so that malformed ones are kept as they are

    async def insert(self, draft: Draft) -> Record:
        payload = self._read_payload()
        record = self._schema.materialize(draft, str(uuid4()), utc_now())
        self._write_payload([self._schema.to_blob_entry(record)] + payload)
        return record

    async def update(self, record: Record) -> Record:
        payload = self._read_payload()
        for index, entry in enumerate(payload):
            if self._entry_id(entry) == record.id:
                payload[index] = self._schema.to_blob_entry(record)
                self._write_payload(payload)
                return record
        raise NotFoundError(f"{self._schema.label} not found: {record.id}")

    async def delete(self, record_id: str) -> bool:
        payload = self._read_payload()
        remaining = [entry for entry in payload if self._entry_id(entry) != record_id]
        if len(remaining) != len(payload):
            self._write_payload(remaining)
        return True
