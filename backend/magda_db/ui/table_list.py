"""Sidebar view: the table list and the create-table form."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from magda_db.client.api import ApiClient
from magda_db.client.base import ClientError
from magda_db.schemas.row import CellValue, RowWrite
from magda_db.schemas.table import COLUMN_TYPES, ColumnDefinition, TableRead, TableSchema, TableWrite
from magda_db.ui.cells import coerce_cell
from magda_db.ui.state import Confirm, ViewStatus, deny

logger = logging.getLogger(__name__)


@dataclass
class ColumnDraft:
    name: str = ""
    type: str = "text"


@dataclass
class TableDraft:
    """Form state of the create-table modal."""

    name: str = ""
    description: str = ""
    columns: list[ColumnDraft] = field(default_factory=lambda: [ColumnDraft()])
    rows: list[dict[str, str]] = field(default_factory=list)

    def add_column(self) -> None:
        self.columns.append(ColumnDraft())

    def update_column(self, index: int, *, name: str | None = None, column_type: str | None = None) -> None:
        column = self.columns[index]
        if name is not None:
            column.name = name
        if column_type is not None:
            if column_type not in COLUMN_TYPES:
                raise ValueError(f"Column type must be one of {', '.join(COLUMN_TYPES)}")
            column.type = column_type

    def remove_column(self, index: int) -> None:
        del self.columns[index]

    def add_row(self) -> None:
        self.rows.append({})

    def update_row(self, index: int, column_name: str, value: str) -> None:
        self.rows[index][column_name] = value

    def remove_row(self, index: int) -> None:
        del self.rows[index]

    def named_columns(self) -> list[ColumnDefinition]:
        """Columns with a non-blank name, in form order."""

        return [
            ColumnDefinition(name=column.name.strip(), type=column.type)
            for column in self.columns
            if column.name.strip()
        ]

    def to_payload(self) -> TableWrite:
        return TableWrite(
            name=self.name,
            description=self.description,
            table_schema=TableSchema(columns=self.named_columns()),
        )

    def initial_rows(self) -> list[RowWrite]:
        """Row payloads for pre-filled rows, restricted to the declared columns."""

        columns = self.named_columns()
        payloads: list[RowWrite] = []
        for values in self.rows:
            data: dict[str, CellValue] = {
                column.name: coerce_cell(values.get(column.name, ""), column.type) for column in columns
            }
            payloads.append(RowWrite(data=data))
        return payloads


class TableListView:
    """Holds the fetched table list and the create/delete actions."""

    def __init__(self, api: ApiClient, *, confirm: Confirm = deny) -> None:
        self.api = api
        self.confirm = confirm
        self.status = ViewStatus.LOADING
        self.tables: list[TableRead] = []
        self.error: str | None = None
        self.notice: str | None = None
        self.selected_id: int | None = None

    def load(self) -> None:
        self.status = ViewStatus.LOADING
        try:
            response = self.api.tables.get_all()
        except ClientError:
            logger.exception("Failed to load tables")
            self.error = "Failed to load tables"
            self.status = ViewStatus.ERROR
            return
        self.tables = response.data
        self.error = None
        self.status = ViewStatus.READY

    def create_table(self, draft: TableDraft) -> int | None:
        """Create the table, then its initial rows one by one.

        Returns the new table id to navigate to, or ``None`` on failure.
        """

        self.notice = None
        try:
            created = self.api.tables.create(draft.to_payload()).data
        except ClientError as exc:
            logger.exception("Failed to create table")
            self.notice = _failure_notice("Failed to create table", exc)
            return None

        for payload in draft.initial_rows():
            try:
                self.api.rows.create(created.id, payload)
            except ClientError:
                logger.exception("Failed to create initial row for table id=%s", created.id)
                self.notice = "Table created, but some rows could not be added"
                break

        self.load()
        self.selected_id = created.id
        return created.id

    def delete_table(self, table_id: int) -> bool:
        """Delete after confirmation. Returns ``True`` when the selected table went away."""

        self.notice = None
        if not self.confirm("Delete this table?"):
            return False
        try:
            self.api.tables.delete(table_id)
        except ClientError:
            logger.exception("Failed to delete table id=%s", table_id)
            self.notice = "Failed to delete table"
            return False

        self.load()
        if self.selected_id == table_id:
            self.selected_id = None
            return True
        return False


def _failure_notice(prefix: str, exc: ClientError) -> str:
    if exc.status_code == 422:
        return f"{prefix}: {', '.join(exc.messages)}"
    return prefix
