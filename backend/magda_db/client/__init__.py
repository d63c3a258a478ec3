"""Client data-access layer."""

from magda_db.client.api import ApiClient, RowsAPI, TablesAPI, build_backend
from magda_db.client.base import Backend, ClientError, NotFoundError, TransportError, ValidationFailedError
from magda_db.client.database import DatabaseBackend
from magda_db.client.http import HttpBackend
from magda_db.client.local import JsonFileStorage, LocalStoreBackend, MemoryStorage, Storage

__all__ = [
    "ApiClient",
    "Backend",
    "ClientError",
    "DatabaseBackend",
    "HttpBackend",
    "JsonFileStorage",
    "LocalStoreBackend",
    "MemoryStorage",
    "NotFoundError",
    "RowsAPI",
    "Storage",
    "TablesAPI",
    "TransportError",
    "ValidationFailedError",
    "build_backend",
]
