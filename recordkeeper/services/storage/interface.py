"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep a domain in the remote spreadsheet or on the device
2. Use in-memory storage for testing
3. Keep the store and form logic decoupled from storage implementation

One interface serves all three record domains; the RecordSchema handed to
each implementation supplies the table, columns and ordering.

Backends RAISE on failure. Converting failures into empty lists and
user notices is the persistence adapter's job, not the backend's.
"""

from abc import ABC, abstractmethod

from recordkeeper.models.records import Draft, Record
from recordkeeper.models.schema import RecordSchema


class RecordStorageInterface(ABC):
    """
    Abstract interface for record storage operations.

    Any storage implementation (Google Sheets, local JSON, etc.)
    must implement these methods.
    """

    def __init__(self, schema: RecordSchema):
        self._schema = schema

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @abstractmethod
    async def fetch_all(self) -> list[Record]:
        """
        Fetch every record of the domain.

        Returns:
            Records ordered by the schema's order key, descending

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def insert(self, draft: Draft) -> Record:
        """
        Persist a new record.

        Args:
            draft: The candidate record, without id or timestamps

        Returns:
            The full record as stored, with id and timestamps assigned

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update(self, record: Record) -> Record:
        """
        Replace an existing record.

        Args:
            record: The record with updated fields

        Returns:
            The record as stored

        Raises:
            StorageError: If the write fails
            NotFoundError: If the record doesn't exist
        """
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """
        Delete a record by ID.

        Returns:
            True once the record is gone (including when it was already gone)

        Raises:
            StorageError: If the delete fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
