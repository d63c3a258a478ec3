"""Resource facades returning ``ApiResponse`` envelopes over any backend."""

from __future__ import annotations

import logging
from pathlib import Path

from magda_db.client.base import Backend
from magda_db.client.database import DatabaseBackend
from magda_db.client.http import HttpBackend
from magda_db.client.local import JsonFileStorage, LocalStoreBackend, MemoryStorage
from magda_db.config import Settings
from magda_db.schemas.common import ApiResponse, DeleteResult
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite

logger = logging.getLogger(__name__)


class TablesAPI:
    """Table operations. Failures raise :class:`ClientError` subclasses."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def get_all(self) -> ApiResponse[list[TableRead]]:
        return ApiResponse[list[TableRead]](data=self.backend.list_tables())

    def get_one(self, table_id: int) -> ApiResponse[TableWithRowsRead]:
        return ApiResponse[TableWithRowsRead](data=self.backend.get_table(table_id))

    def create(self, payload: TableWrite) -> ApiResponse[TableRead]:
        return ApiResponse[TableRead](data=self.backend.create_table(payload))

    def update(self, table_id: int, payload: TableWrite) -> ApiResponse[TableRead]:
        return ApiResponse[TableRead](data=self.backend.update_table(table_id, payload))

    def delete(self, table_id: int) -> ApiResponse[DeleteResult]:
        self.backend.delete_table(table_id)
        return ApiResponse[DeleteResult](data=DeleteResult(id=table_id))


class RowsAPI:
    """Row operations, always addressed through the owning table."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def get_all(self, table_id: int) -> ApiResponse[list[RowRead]]:
        return ApiResponse[list[RowRead]](data=self.backend.list_rows(table_id))

    def get_one(self, table_id: int, row_id: int) -> ApiResponse[RowRead]:
        return ApiResponse[RowRead](data=self.backend.get_row(table_id, row_id))

    def create(self, table_id: int, payload: RowWrite) -> ApiResponse[RowRead]:
        return ApiResponse[RowRead](data=self.backend.create_row(table_id, payload))

    def update(self, table_id: int, row_id: int, payload: RowWrite) -> ApiResponse[RowRead]:
        return ApiResponse[RowRead](data=self.backend.update_row(table_id, row_id, payload))

    def delete(self, table_id: int, row_id: int) -> ApiResponse[DeleteResult]:
        self.backend.delete_row(table_id, row_id)
        return ApiResponse[DeleteResult](data=DeleteResult(id=row_id))


class ApiClient:
    """Both resource facades over one backend."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self.tables = TablesAPI(backend)
        self.rows = RowsAPI(backend)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiClient":
        """Pick the backend once, at startup."""

        return cls(build_backend(settings))


def build_backend(settings: Settings) -> Backend:
    """Resolve ``client_backend`` (``auto`` prefers the HTTP API, then the local store)."""

    choice = settings.client_backend
    if choice == "auto":
        choice = "http" if settings.api_base_url else "local"

    if choice == "http":
        if not settings.api_base_url:
            raise ValueError("client_backend=http requires api_base_url")
        logger.info("Using HTTP backend at %s", settings.api_base_url)
        return HttpBackend(base_url=settings.api_base_url, timeout_seconds=settings.api_timeout_seconds)

    if choice == "database":
        from magda_db.db.session import build_engine, build_session_factory

        logger.info("Using direct database backend")
        return DatabaseBackend(build_session_factory(build_engine(settings.database_url)))

    if settings.local_store_path:
        logger.info("Using local store at %s", settings.local_store_path)
        return LocalStoreBackend(JsonFileStorage(Path(settings.local_store_path).expanduser()))
    logger.info("No backend configured; using in-memory mock store")
    return LocalStoreBackend(MemoryStorage())
