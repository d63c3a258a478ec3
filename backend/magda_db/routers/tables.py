"""Table resource routes."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from magda_db.db.dependencies import get_db
from magda_db.models.data_table import DataTable
from magda_db.routers.dependencies import resolve_table
from magda_db.schemas.table import TableEnvelope, TableRead, TableWithRowsRead
from magda_db.services.tables import (
    create_table,
    delete_table,
    list_table_rows,
    list_tables,
    serialize_table,
    serialize_table_with_rows,
    update_table,
)

router = APIRouter(prefix="/tables")


@router.get("", response_model=list[TableRead])
def get_tables(db: Session = Depends(get_db)) -> list[TableRead]:
    """List all tables, newest first."""

    return [serialize_table(table) for table in list_tables(db)]


@router.get("/{table_id}", response_model=TableWithRowsRead)
def get_table_with_rows(
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> TableWithRowsRead:
    """Fetch one table together with its rows."""

    return serialize_table_with_rows(table, list_table_rows(db, table.id))


@router.post("", response_model=TableRead, status_code=201)
def post_table(payload: TableEnvelope, db: Session = Depends(get_db)) -> TableRead:
    """Create a table."""

    return serialize_table(create_table(db, payload.table))


@router.put("/{table_id}", response_model=TableRead)
def put_table(
    payload: TableEnvelope,
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> TableRead:
    """Replace a table's name, description and schema."""

    return serialize_table(update_table(db, table, payload.table))


@router.delete("/{table_id}", status_code=204, response_class=Response)
def remove_table(
    table: DataTable = Depends(resolve_table),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a table and all of its rows."""

    delete_table(db, table)
    return Response(status_code=204)
