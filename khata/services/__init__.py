"""Services package."""

from khata.services.storage import (
    ConnectionError,
    FallbackRecordStore,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    LocalRecordStore,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
    migrate_local_to_remote,
    next_id,
)

__all__ = [
    "ConnectionError",
    "FallbackRecordStore",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "LocalRecordStore",
    "NotFoundError",
    "RecordStoreInterface",
    "StorageError",
    "migrate_local_to_remote",
    "next_id",
]
