"""
Storage Services Package

Provides the record store interface and its implementations: a local JSON
document, a Google Sheets spreadsheet, and a decorator that tries the
remote one before falling back to the local one.
"""

from khata.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
)
from khata.services.storage.identity import next_id
from khata.services.storage.local import LocalRecordStore
from khata.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)
from khata.services.storage.fallback import FallbackRecordStore
from khata.services.storage.migration import migrate_local_to_remote

__all__ = [
    # Interface
    "RecordStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Identity allocation
    "next_id",
    # Implementations
    "FallbackRecordStore",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "LocalRecordStore",
    # Migration
    "migrate_local_to_remote",
]
