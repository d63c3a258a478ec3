"""Row request/response schemas."""

from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict

# Dates travel as ISO-8601 text.
CellValue = Union[str, int, float, bool, None]
RowData = dict[str, CellValue]


class RowWrite(BaseModel):
    """Mutable row fields. ``data`` replaces the stored document wholesale."""

    model_config = ConfigDict(extra="ignore")

    data: RowData | None = None


class RowEnvelope(BaseModel):
    """Request body wrapper: ``{"row": {...}}``."""

    row: RowWrite


class RowRead(BaseModel):
    """Serialized row."""

    id: int
    table_id: int
    data: RowData
    created_at: datetime
    updated_at: datetime
