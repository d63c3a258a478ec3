"""Path resolution dependencies shared by the table and row routes."""

from fastapi import Depends, Path
from sqlalchemy.orm import Session

from magda_db.db.dependencies import get_db
from magda_db.errors import RecordNotFoundError
from magda_db.models.data_table import DataTable
from magda_db.services.tables import get_table

TABLE_NOT_FOUND = "Table not found"
ROW_NOT_FOUND = "Row not found"

# Ids are 32-bit integer columns.
MAX_RECORD_ID = 2**31 - 1


def parse_record_id(raw: str) -> int | None:
    """Return the integer id in a path segment, or ``None`` when it cannot exist."""

    try:
        value = int(raw)
    except ValueError:
        return None
    return value if 0 < value <= MAX_RECORD_ID else None


def resolve_table(
    table_id: str = Path(...),
    db: Session = Depends(get_db),
) -> DataTable:
    """Load the table named in the path or stop with a 404."""

    record_id = parse_record_id(table_id)
    table = get_table(db, record_id) if record_id is not None else None
    if table is None:
        raise RecordNotFoundError(TABLE_NOT_FOUND)
    return table
