"""
Storage Services Package

Provides the abstract record storage interface and its two implementations:
Google Sheets (remote) and a JSON blob per domain (local).
"""

from recordkeeper.services.storage.interface import (
    NotFoundError,
    RecordStorageInterface,
    StorageConnectionError,
    StorageError,
)
from recordkeeper.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStorage,
)
from recordkeeper.services.storage.local_json import LocalJsonRecordStorage

__all__ = [
    # Interfaces
    "RecordStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordStorage",
    "LocalJsonRecordStorage",
]
