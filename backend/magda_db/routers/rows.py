"""Row resource routes, nested under a table."""

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.orm import Session

from magda_db.db.dependencies import get_db
from magda_db.errors import RecordNotFoundError
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.routers.dependencies import ROW_NOT_FOUND, parse_record_id, resolve_table
from magda_db.schemas.row import RowEnvelope, RowRead
from magda_db.services.rows import (
    create_row,
    delete_row,
    get_row,
    list_rows,
    serialize_row,
    update_row,
)

router = APIRouter(prefix="/tables/{table_id}/rows")


def resolve_row(
    row_id: str = Path(...),
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> DataRow:
    record_id = parse_record_id(row_id)
    row = get_row(db, table, record_id) if record_id is not None else None
    if row is None:
        raise RecordNotFoundError(ROW_NOT_FOUND)
    return row


@router.get("", response_model=list[RowRead])
def get_rows(
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> list[RowRead]:
    """List a table's rows, newest first."""

    return [serialize_row(row) for row in list_rows(db, table)]


@router.get("/{row_id}", response_model=RowRead)
def get_one_row(row: DataRow = Depends(resolve_row)) -> RowRead:
    """Fetch one row of a table."""

    return serialize_row(row)


@router.post("", response_model=RowRead, status_code=201)
def post_row(
    payload: RowEnvelope,
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> RowRead:
    """Create a row; data defaults to an empty document."""

    return serialize_row(create_row(db, table, payload.row))


@router.put("/{row_id}", response_model=RowRead)
def put_row(
    payload: RowEnvelope,
    row: DataRow = Depends(resolve_row),
    db: Session = Depends(get_db),
) -> RowRead:
    """Replace a row's data document."""

    return serialize_row(update_row(db, row, payload.row))


@router.delete("/{row_id}", status_code=204, response_class=Response)
def remove_row(
    row: DataRow = Depends(resolve_row),
    db: Session = Depends(get_db),
) -> Response:
    """Delete one row."""

    delete_row(db, row)
    return Response(status_code=204)
