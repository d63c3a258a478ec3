"""Row persistence services, always scoped to a parent table."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from magda_db.errors import RecordInvalidError
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.services.validation import row_errors

logger = logging.getLogger(__name__)


def serialize_row(row: DataRow) -> RowRead:
    """Build the API representation of a row."""

    return RowRead(
        id=row.id,
        table_id=row.table_id,
        data=row.data_json,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def list_rows(db: Session, table: DataTable) -> list[DataRow]:
    """Return a table's rows, newest first."""

    stmt = (
        select(DataRow)
        .where(DataRow.table_id == table.id)
        .order_by(DataRow.created_at.desc(), DataRow.id.desc())
    )
    return list(db.scalars(stmt).all())


def get_row(db: Session, table: DataTable, row_id: int) -> DataRow | None:
    """Return a row only if it belongs to ``table``."""

    return db.scalar(select(DataRow).where(DataRow.id == row_id, DataRow.table_id == table.id))


def create_row(db: Session, table: DataTable, payload: RowWrite) -> DataRow:
    """Persist a row under ``table``. Missing data defaults to ``{}``.

    Keys and values are not checked against the table's declared columns.
    """

    data = payload.data if payload.data is not None else {}
    row = DataRow(table_id=table.id, data_json=dict(data))
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created row id=%s in table id=%s", row.id, table.id)
    return row


def update_row(db: Session, row: DataRow, payload: RowWrite) -> DataRow:
    """Replace a row's data document wholesale when supplied."""

    if "data" not in payload.model_fields_set:
        return row
    messages = row_errors(payload.data)
    if messages:
        raise RecordInvalidError(messages)
    row.data_json = dict(payload.data)
    db.commit()
    db.refresh(row)
    return row


def delete_row(db: Session, row: DataRow) -> None:
    """Delete one row."""

    row_id, table_id = row.id, row.table_id
    db.delete(row)
    db.commit()
    logger.info("Deleted row id=%s from table id=%s", row_id, table_id)
