"""Table request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from magda_db.schemas.row import RowRead

ColumnType = Literal["text", "number", "date"]
COLUMN_TYPES: tuple[str, ...] = ("text", "number", "date")


class ColumnDefinition(BaseModel):
    """One declared column. The type is advisory only; other keys are kept."""

    model_config = ConfigDict(extra="allow")

    name: str
    type: ColumnType = "text"


class TableSchema(BaseModel):
    """Declared structure of a table; unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    columns: list[ColumnDefinition] = Field(default_factory=list)

    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def to_document(self) -> dict[str, Any]:
        """Dump to JSON, keeping an empty schema empty."""

        document: dict[str, Any] = dict(self.model_extra or {})
        if "columns" in self.model_fields_set:
            document["columns"] = [column.model_dump(mode="json") for column in self.columns]
        return document


class TableWrite(BaseModel):
    """Mutable table fields.

    Only fields present in the payload are applied on update. Presence and
    uniqueness are checked by the service layer so that failures are reported
    as validation messages rather than request-shape errors.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    description: str | None = None
    table_schema: TableSchema | None = Field(default=None, alias="schema")

    def schema_document(self) -> dict[str, Any] | None:
        """Return the schema as the JSON document to store."""

        if self.table_schema is None:
            return None
        return self.table_schema.to_document()


class TableEnvelope(BaseModel):
    """Request body wrapper: ``{"table": {...}}``."""

    table: TableWrite


class TableRead(BaseModel):
    """Serialized table."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str | None = None
    table_schema: dict[str, Any] = Field(default_factory=dict, alias="schema")
    created_at: datetime
    updated_at: datetime

    def columns(self) -> list[ColumnDefinition]:
        """Return the declared columns, ignoring malformed entries."""

        raw_columns = self.table_schema.get("columns")
        if not isinstance(raw_columns, list):
            return []
        columns: list[ColumnDefinition] = []
        for item in raw_columns:
            if isinstance(item, dict) and isinstance(item.get("name"), str):
                column_type = item.get("type")
                columns.append(
                    ColumnDefinition.model_validate(
                        {**item, "type": column_type if column_type in COLUMN_TYPES else "text"}
                    )
                )
        return columns


class TableWithRowsRead(TableRead):
    """Table payload with its rows embedded."""

    rows: list[RowRead] = Field(default_factory=list)
