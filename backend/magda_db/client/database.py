"""Backend that talks to the database directly through the service layer."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from magda_db.client.base import NotFoundError, ValidationFailedError
from magda_db.errors import RecordInvalidError
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite
from magda_db.services import rows as row_services
from magda_db.services import tables as table_services


class DatabaseBackend:
    """Run each call in its own session, like one API request."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        except RecordInvalidError as exc:
            db.rollback()
            raise ValidationFailedError(exc.messages) from exc
        finally:
            db.close()

    @staticmethod
    def _table(db: Session, table_id: int) -> DataTable:
        table = table_services.get_table(db, table_id)
        if table is None:
            raise NotFoundError("Table not found")
        return table

    @classmethod
    def _row(cls, db: Session, table_id: int, row_id: int) -> DataRow:
        row = row_services.get_row(db, cls._table(db, table_id), row_id)
        if row is None:
            raise NotFoundError("Row not found")
        return row

    def list_tables(self) -> list[TableRead]:
        with self._session() as db:
            return [table_services.serialize_table(table) for table in table_services.list_tables(db)]

    def get_table(self, table_id: int) -> TableWithRowsRead:
        with self._session() as db:
            table = self._table(db, table_id)
            return table_services.serialize_table_with_rows(table, table_services.list_table_rows(db, table.id))

    def create_table(self, payload: TableWrite) -> TableRead:
        with self._session() as db:
            return table_services.serialize_table(table_services.create_table(db, payload))

    def update_table(self, table_id: int, payload: TableWrite) -> TableRead:
        with self._session() as db:
            table = self._table(db, table_id)
            return table_services.serialize_table(table_services.update_table(db, table, payload))

    def delete_table(self, table_id: int) -> None:
        with self._session() as db:
            table_services.delete_table(db, self._table(db, table_id))

    def list_rows(self, table_id: int) -> list[RowRead]:
        with self._session() as db:
            table = self._table(db, table_id)
            return [row_services.serialize_row(row) for row in row_services.list_rows(db, table)]

    def get_row(self, table_id: int, row_id: int) -> RowRead:
        with self._session() as db:
            return row_services.serialize_row(self._row(db, table_id, row_id))

    def create_row(self, table_id: int, payload: RowWrite) -> RowRead:
        with self._session() as db:
            table = self._table(db, table_id)
            return row_services.serialize_row(row_services.create_row(db, table, payload))

    def update_row(self, table_id: int, row_id: int, payload: RowWrite) -> RowRead:
        with self._session() as db:
            row = self._row(db, table_id, row_id)
            return row_services.serialize_row(row_services.update_row(db, row, payload))

    def delete_row(self, table_id: int, row_id: int) -> None:
        with self._session() as db:
            row_services.delete_row(db, self._row(db, table_id, row_id))
