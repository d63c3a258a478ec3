"""Client-side error types and the storage backend protocol."""

from __future__ import annotations

from typing import Protocol

from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite


class ClientError(RuntimeError):
    """Raised when a data-access call fails, whatever the backend."""

    def __init__(self, message: str, *, status_code: int | None = None, messages: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.messages = messages or [message]


class NotFoundError(ClientError):
    """The table or row does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class ValidationFailedError(ClientError):
    """The backend rejected the record."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages) or "Validation failed", status_code=422, messages=messages)


class TransportError(ClientError):
    """The request could not be completed or the reply could not be understood."""


class Backend(Protocol):
    """One storage variant behind the client facades."""

    def list_tables(self) -> list[TableRead]: ...

    def get_table(self, table_id: int) -> TableWithRowsRead: ...

    def create_table(self, payload: TableWrite) -> TableRead: ...

    def update_table(self, table_id: int, payload: TableWrite) -> TableRead: ...

    def delete_table(self, table_id: int) -> None: ...

    def list_rows(self, table_id: int) -> list[RowRead]: ...

    def get_row(self, table_id: int, row_id: int) -> RowRead: ...

    def create_row(self, table_id: int, payload: RowWrite) -> RowRead: ...

    def update_row(self, table_id: int, row_id: int, payload: RowWrite) -> RowRead: ...

    def delete_row(self, table_id: int, row_id: int) -> None: ...
