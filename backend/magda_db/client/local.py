"""Mock backend keeping tables and rows as JSON documents in a key-value store.

Used when no API or database is configured. The storage is injected, so a
process can run against memory (tests, throwaway sessions) or a JSON file
(state that survives restarts).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from magda_db.client.base import NotFoundError, ValidationFailedError
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite
from magda_db.services.validation import row_errors, table_errors

logger = logging.getLogger(__name__)

TABLES_KEY = "mockTables"
ROWS_KEY = "mockRows"
NEXT_IDS_KEY = "mockNextIds"


class Storage(Protocol):
    """String key-value store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage; state is lost with the instance."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStorage:
    """Storage persisted as one JSON object in a file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        items = json.loads(text)
        return items if isinstance(items, dict) else {}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def sample_documents() -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Return the first-run sample: one contacts table with two rows."""

    now = _now()
    tables = [
        {
            "id": 1,
            "name": "Contacts",
            "description": "My contact list",
            "schema": {
                "columns": [
                    {"name": "Name", "type": "text"},
                    {"name": "Email", "type": "text"},
                    {"name": "Phone", "type": "text"},
                ]
            },
            "created_at": now,
            "updated_at": now,
        }
    ]
    rows = [
        {
            "id": 1,
            "table_id": 1,
            "data": {"Name": "John Doe", "Email": "john@example.com", "Phone": "555-0100"},
            "created_at": now,
            "updated_at": now,
        },
        {
            "id": 2,
            "table_id": 1,
            "data": {"Name": "Jane Smith", "Email": "jane@example.com", "Phone": "555-0101"},
            "created_at": now,
            "updated_at": now,
        },
    ]
    return tables, rows


class LocalStoreBackend:
    """Backend over a :class:`Storage`, applying the same rules as the server."""

    def __init__(self, storage: Storage, *, seed: bool = True) -> None:
        self.storage = storage
        if seed and not self._load(TABLES_KEY):
            tables, rows = sample_documents()
            self._save(TABLES_KEY, tables)
            self._save(ROWS_KEY, rows)
            logger.info("Seeded local store with %s sample table(s)", len(tables))

    def _load(self, key: str) -> list[dict[str, Any]]:
        raw = self.storage.get_item(key)
        if not raw:
            return []
        records = json.loads(raw)
        return records if isinstance(records, list) else []

    def _save(self, key: str, records: list[dict[str, Any]]) -> None:
        self.storage.set_item(key, json.dumps(records, ensure_ascii=False))

    def _next_id(self, key: str, records: list[dict[str, Any]]) -> int:
        """Allocate an id that is never handed out again, even after deletes."""

        raw = self.storage.get_item(NEXT_IDS_KEY)
        counters = json.loads(raw) if raw else {}
        if not isinstance(counters, dict):
            counters = {}
        highest = max((int(record["id"]) for record in records), default=0)
        record_id = max(int(counters.get(key, 1)), highest + 1)
        counters[key] = record_id + 1
        self.storage.set_item(NEXT_IDS_KEY, json.dumps(counters))
        return record_id

    def _find_table(self, tables: list[dict[str, Any]], table_id: int) -> dict[str, Any]:
        for table in tables:
            if table["id"] == table_id:
                return table
        raise NotFoundError("Table not found")

    def _table_rows(self, table_id: int) -> list[dict[str, Any]]:
        return [row for row in self._load(ROWS_KEY) if row["table_id"] == table_id]

    def list_tables(self) -> list[TableRead]:
        tables = [TableRead.model_validate(table) for table in self._load(TABLES_KEY)]
        return sorted(tables, key=lambda table: (table.created_at, table.id), reverse=True)

    def get_table(self, table_id: int) -> TableWithRowsRead:
        table = self._find_table(self._load(TABLES_KEY), table_id)
        rows = sorted(
            (RowRead.model_validate(row) for row in self._table_rows(table_id)),
            key=lambda row: (row.created_at, row.id),
        )
        return TableWithRowsRead.model_validate({**table, "rows": [row.model_dump() for row in rows]})

    def create_table(self, payload: TableWrite) -> TableRead:
        tables = self._load(TABLES_KEY)
        schema = payload.schema_document()
        if schema is None:
            schema = {}
        messages = table_errors(
            payload.name,
            schema,
            lambda name: any(table["name"] == name for table in tables),
        )
        if messages:
            raise ValidationFailedError(messages)

        now = _now()
        record = {
            "id": self._next_id(TABLES_KEY, tables),
            "name": payload.name,
            "description": payload.description,
            "schema": schema,
            "created_at": now,
            "updated_at": now,
        }
        tables.append(record)
        self._save(TABLES_KEY, tables)
        return TableRead.model_validate(record)

    def update_table(self, table_id: int, payload: TableWrite) -> TableRead:
        tables = self._load(TABLES_KEY)
        table = self._find_table(tables, table_id)
        fields = payload.model_fields_set
        name = payload.name if "name" in fields else table["name"]
        description = payload.description if "description" in fields else table.get("description")
        schema = payload.schema_document() if "table_schema" in fields else table["schema"]
        messages = table_errors(
            name,
            schema,
            lambda candidate: any(
                other["name"] == candidate and other["id"] != table_id for other in tables
            ),
        )
        if messages:
            raise ValidationFailedError(messages)

        table.update(name=name, description=description, schema=schema, updated_at=_now())
        self._save(TABLES_KEY, tables)
        return TableRead.model_validate(table)

    def delete_table(self, table_id: int) -> None:
        tables = self._load(TABLES_KEY)
        self._find_table(tables, table_id)
        self._save(TABLES_KEY, [table for table in tables if table["id"] != table_id])
        self._save(ROWS_KEY, [row for row in self._load(ROWS_KEY) if row["table_id"] != table_id])

    def list_rows(self, table_id: int) -> list[RowRead]:
        self._find_table(self._load(TABLES_KEY), table_id)
        rows = [RowRead.model_validate(row) for row in self._table_rows(table_id)]
        return sorted(rows, key=lambda row: (row.created_at, row.id), reverse=True)

    def _find_row(self, rows: list[dict[str, Any]], table_id: int, row_id: int) -> dict[str, Any]:
        self._find_table(self._load(TABLES_KEY), table_id)
        for row in rows:
            if row["id"] == row_id and row["table_id"] == table_id:
                return row
        raise NotFoundError("Row not found")

    def get_row(self, table_id: int, row_id: int) -> RowRead:
        return RowRead.model_validate(self._find_row(self._load(ROWS_KEY), table_id, row_id))

    def create_row(self, table_id: int, payload: RowWrite) -> RowRead:
        self._find_table(self._load(TABLES_KEY), table_id)
        rows = self._load(ROWS_KEY)
        now = _now()
        record = {
            "id": self._next_id(ROWS_KEY, rows),
            "table_id": table_id,
            "data": dict(payload.data) if payload.data is not None else {},
            "created_at": now,
            "updated_at": now,
        }
        rows.append(record)
        self._save(ROWS_KEY, rows)
        return RowRead.model_validate(record)

    def update_row(self, table_id: int, row_id: int, payload: RowWrite) -> RowRead:
        rows = self._load(ROWS_KEY)
        row = self._find_row(rows, table_id, row_id)
        if "data" in payload.model_fields_set:
            messages = row_errors(payload.data)
            if messages:
                raise ValidationFailedError(messages)
            row.update(data=dict(payload.data), updated_at=_now())
            self._save(ROWS_KEY, rows)
        return RowRead.model_validate(row)

    def delete_row(self, table_id: int, row_id: int) -> None:
        rows = self._load(ROWS_KEY)
        self._find_row(rows, table_id, row_id)
        self._save(ROWS_KEY, [row for row in rows if not (row["id"] == row_id and row["table_id"] == table_id)])
