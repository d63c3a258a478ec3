"""Grid view of one table with inline editing."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from magda_db.client.api import ApiClient
from magda_db.client.base import ClientError
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import ColumnDefinition, TableSchema, TableWithRowsRead, TableWrite
from magda_db.ui.cells import coerce_cell, display_cell
from magda_db.ui.state import Confirm, Prompt, ViewStatus, deny, no_answer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellRef:
    row_id: int
    column_name: str


@dataclass
class FieldEdit:
    """In-progress edit of a table attribute, with the value to restore."""

    original: str
    value: str


class TableView:
    """Holds one table and its rows; re-fetches after every successful change."""

    def __init__(
        self,
        api: ApiClient,
        table_id: int,
        *,
        confirm: Confirm = deny,
        prompt: Prompt = no_answer,
    ) -> None:
        self.api = api
        self.table_id = table_id
        self.confirm = confirm
        self.prompt = prompt
        self.status = ViewStatus.LOADING
        self.table: TableWithRowsRead | None = None
        self.rows: list[RowRead] = []
        self.error: str | None = None
        self.notice: str | None = None
        self.editing_cell: CellRef | None = None
        self.edit_value = ""
        self.name_edit: FieldEdit | None = None
        self.description_edit: FieldEdit | None = None

    @property
    def columns(self) -> list[ColumnDefinition]:
        return self.table.columns() if self.table is not None else []

    def column(self, name: str) -> ColumnDefinition | None:
        return next((column for column in self.columns if column.name == name), None)

    def load(self) -> None:
        self.status = ViewStatus.LOADING
        try:
            response = self.api.tables.get_one(self.table_id)
        except ClientError:
            logger.exception("Failed to load table id=%s", self.table_id)
            self.error = "Failed to load table"
            self.status = ViewStatus.ERROR
            return
        self.table = response.data
        self.rows = list(response.data.rows)
        self.error = None
        self.status = ViewStatus.READY

    def _fail(self, message: str) -> None:
        logger.exception(message)
        self.notice = message

    # Rows

    def add_row(self) -> RowRead | None:
        """Append a row with every declared column set to an empty string."""

        self.notice = None
        data = {column.name: "" for column in self.columns}
        try:
            created = self.api.rows.create(self.table_id, RowWrite(data=data)).data
        except ClientError:
            self._fail("Failed to add row")
            return None
        self.load()
        return created

    def delete_row(self, row_id: int) -> bool:
        self.notice = None
        if not self.confirm("Delete this row?"):
            return False
        try:
            self.api.rows.delete(self.table_id, row_id)
        except ClientError:
            self._fail("Failed to delete row")
            return False
        self.load()
        return True

    # Cell editing

    def begin_edit(self, row_id: int, column_name: str) -> None:
        """Focus one cell; any other in-progress cell edit is dropped."""

        row = next((row for row in self.rows if row.id == row_id), None)
        current = row.data.get(column_name) if row is not None else None
        self.editing_cell = CellRef(row_id=row_id, column_name=column_name)
        self.edit_value = display_cell(current)

    def set_edit_value(self, value: str) -> None:
        self.edit_value = value

    def cancel_edit(self) -> None:
        self.editing_cell = None
        self.edit_value = ""

    def handle_key(self, key: str) -> None:
        """``Enter`` commits and ``Escape`` discards the focused edit."""

        if key == "Enter":
            self.commit_edit()
        elif key == "Escape":
            self.cancel_edit()

    def commit_edit(self) -> bool:
        """Write the focused cell back.

        Reads the stored row, merges the single changed key into a copy of its
        data and sends the whole copy.
        """

        if self.editing_cell is None:
            return False
        cell, text = self.editing_cell, self.edit_value
        self.cancel_edit()
        self.notice = None

        column = self.column(cell.column_name)
        value = coerce_cell(text, column.type if column is not None else "text")
        try:
            current = self.api.rows.get_one(self.table_id, cell.row_id).data
            merged = {**current.data, cell.column_name: value}
            self.api.rows.update(self.table_id, cell.row_id, RowWrite(data=merged))
        except ClientError:
            self._fail("Failed to update cell")
            return False
        self.load()
        return True

    # Table attributes

    def begin_rename(self) -> None:
        if self.table is not None:
            self.name_edit = FieldEdit(original=self.table.name, value=self.table.name)

    def commit_rename(self) -> bool:
        """Save the new name; unchanged or blank names make no request."""

        edit, self.name_edit = self.name_edit, None
        if edit is None or self.table is None:
            return False
        new_name = edit.value.strip()
        if not new_name or new_name == edit.original:
            return False
        return self._save_table(self.table, name=new_name, failure="Failed to rename table")

    def begin_description_edit(self) -> None:
        if self.table is not None:
            current = self.table.description or ""
            self.description_edit = FieldEdit(original=current, value=current)

    def commit_description(self) -> bool:
        edit, self.description_edit = self.description_edit, None
        if edit is None or self.table is None:
            return False
        new_description = edit.value.strip()
        if new_description == edit.original:
            return False
        return self._save_table(self.table, description=new_description, failure="Failed to update description")

    def cancel_table_edit(self) -> None:
        self.name_edit = None
        self.description_edit = None

    def _save_table(
        self,
        table: TableWithRowsRead,
        *,
        failure: str,
        name: str | None = None,
        description: str | None = None,
        schema: TableSchema | None = None,
    ) -> bool:
        """Send name, description and schema together; the table keeps its old values on failure."""

        payload = TableWrite(
            name=name if name is not None else table.name,
            description=description if description is not None else table.description,
            table_schema=schema if schema is not None else self._current_schema(table),
        )
        self.notice = None
        try:
            self.api.tables.update(self.table_id, payload)
        except ClientError as exc:
            logger.exception(failure)
            self.notice = f"{failure}: {', '.join(exc.messages)}" if exc.status_code == 422 else failure
            return False
        self.load()
        return True

    # Columns

    @staticmethod
    def _current_schema(table: TableWithRowsRead) -> TableSchema:
        try:
            return TableSchema.model_validate(table.table_schema)
        except ValidationError:
            return TableView._schema_with(table, table.columns())

    @staticmethod
    def _schema_with(table: TableWithRowsRead, columns: list[ColumnDefinition]) -> TableSchema:
        document = dict(table.table_schema)
        document["columns"] = [column.model_dump() for column in columns]
        return TableSchema.model_validate(document)

    def add_column(self) -> bool:
        """Ask for a name and append a text column to the schema."""

        if self.table is None:
            return False
        answer = self.prompt("Column name:")
        name = (answer or "").strip()
        if not name:
            return False
        if self.column(name) is not None:
            self.notice = f"Column {name!r} already exists"
            return False
        schema = self._schema_with(self.table, [*self.columns, ColumnDefinition(name=name, type="text")])
        return self._save_table(self.table, schema=schema, failure="Failed to add column")

    def remove_column(self, column_name: str) -> bool:
        """Drop a column from the schema, then strip it from each row.

        Rows are updated one request at a time; a failure stops the loop and
        leaves earlier rows already stripped.
        """

        if self.table is None or self.column(column_name) is None:
            return False
        if not self.confirm(f'Delete column "{column_name}"? Its values are removed from every row.'):
            return False
        schema = self._schema_with(self.table, [column for column in self.columns if column.name != column_name])
        rows = list(self.rows)
        if not self._save_table(self.table, schema=schema, failure="Failed to remove column"):
            return False

        for row in rows:
            if column_name not in row.data:
                continue
            data = {key: value for key, value in row.data.items() if key != column_name}
            try:
                self.api.rows.update(self.table_id, row.id, RowWrite(data=data))
            except ClientError:
                self._fail("Failed to remove column from every row")
                break
        self.load()
        return self.notice is None
