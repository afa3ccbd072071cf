"""Services package."""

from recordkeeper.services.persistence import Notifier, PersistenceAdapter
from recordkeeper.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsRecordStorage,
    LocalJsonRecordStorage,
    NotFoundError,
    RecordStorageInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Persistence adapter
    "Notifier",
    "PersistenceAdapter",
    # Storage services
    "GoogleSheetsClient",
    "GoogleSheetsRecordStorage",
    "LocalJsonRecordStorage",
    "NotFoundError",
    "RecordStorageInterface",
    "StorageConnectionError",
    "StorageError",
]
