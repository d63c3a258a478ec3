"""Presence and uniqueness rules shared by every storage backend."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

NAME_BLANK = "Name can't be blank"
NAME_TAKEN = "Name has already been taken"
SCHEMA_BLANK = "Schema can't be blank"
DATA_BLANK = "Data can't be blank"


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def table_errors(
    name: str | None,
    schema: dict[str, Any] | None,
    name_taken: Callable[[str], bool],
) -> list[str]:
    """Return validation messages for a table's effective attributes."""

    messages: list[str] = []
    if is_blank(name):
        messages.append(NAME_BLANK)
    elif name_taken(name):
        messages.append(NAME_TAKEN)
    if schema is None:
        messages.append(SCHEMA_BLANK)
    return messages


def row_errors(data: dict[str, Any] | None) -> list[str]:
    """Return validation messages for a row's effective data."""

    return [DATA_BLANK] if data is None else []
