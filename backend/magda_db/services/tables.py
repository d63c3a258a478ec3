"""Table persistence services."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from magda_db.errors import RecordInvalidError
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite
from magda_db.services.rows import serialize_row
from magda_db.services.validation import NAME_TAKEN, table_errors

logger = logging.getLogger(__name__)


def serialize_table(table: DataTable) -> TableRead:
    """Build the API representation of a table."""

    return TableRead(
        id=table.id,
        name=table.name,
        description=table.description,
        table_schema=table.schema_json,
        created_at=table.created_at,
        updated_at=table.updated_at,
    )


def serialize_table_with_rows(table: DataTable, rows: list[DataRow]) -> TableWithRowsRead:
    """Build the show payload: the table plus its rows."""

    return TableWithRowsRead(
        **serialize_table(table).model_dump(),
        rows=[serialize_row(row) for row in rows],
    )


def list_tables(db: Session) -> list[DataTable]:
    """Return every table, newest first."""

    stmt = select(DataTable).order_by(DataTable.created_at.desc(), DataTable.id.desc())
    return list(db.scalars(stmt).all())


def get_table(db: Session, table_id: int) -> DataTable | None:
    """Return one table or ``None``."""

    return db.scalar(select(DataTable).where(DataTable.id == table_id))


def list_table_rows(db: Session, table_id: int) -> list[DataRow]:
    """Return a table's rows in creation order, as embedded in the show payload."""

    stmt = (
        select(DataRow)
        .where(DataRow.table_id == table_id)
        .order_by(DataRow.created_at.asc(), DataRow.id.asc())
    )
    return list(db.scalars(stmt).all())


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(DataTable.id).where(DataTable.name == name)
    if exclude_id is not None:
        stmt = stmt.where(DataTable.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def _commit_or_invalid(db: Session) -> None:
    # Two concurrent creates can both pass the uniqueness check; the unique index decides.
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise RecordInvalidError([NAME_TAKEN]) from exc


def create_table(db: Session, payload: TableWrite) -> DataTable:
    """Validate and persist a new table. ``schema`` defaults to ``{}``."""

    schema = payload.schema_document()
    if schema is None:
        schema = {}
    messages = table_errors(payload.name, schema, lambda name: _name_taken(db, name))
    if messages:
        raise RecordInvalidError(messages)

    table = DataTable(name=payload.name, description=payload.description, schema_json=schema)
    db.add(table)
    _commit_or_invalid(db)
    db.refresh(table)
    logger.info("Created table id=%s name=%r", table.id, table.name)
    return table


def update_table(db: Session, table: DataTable, payload: TableWrite) -> DataTable:
    """Replace the supplied fields of a table.

    The schema document is replaced as a whole, never merged.
    """

    fields = payload.model_fields_set
    name = payload.name if "name" in fields else table.name
    description = payload.description if "description" in fields else table.description
    schema = payload.schema_document() if "table_schema" in fields else table.schema_json

    messages = table_errors(name, schema, lambda candidate: _name_taken(db, candidate, exclude_id=table.id))
    if messages:
        raise RecordInvalidError(messages)

    table.name = name
    table.description = description
    table.schema_json = schema
    _commit_or_invalid(db)
    db.refresh(table)
    return table


def delete_table(db: Session, table: DataTable) -> int:
    """Delete a table and every row it owns. Returns the number of rows removed."""

    table_id = table.id
    removed = db.execute(delete(DataRow).where(DataRow.table_id == table_id)).rowcount or 0
    db.delete(table)
    db.commit()
    logger.info("Deleted table id=%s with %s rows", table_id, removed)
    return removed
