"""Turning edited text into cell values."""

from __future__ import annotations

import math

from magda_db.schemas.row import CellValue


def coerce_cell(text: str, column_type: str) -> CellValue:
    """Interpret input for a column.

    Number columns store ints or floats when the text parses; anything else
    is kept as text, since row data is not checked against the schema.
    """

    if column_type != "number":
        return text
    stripped = text.strip()
    if not stripped:
        return ""
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        number = float(stripped)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def display_cell(value: CellValue) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
