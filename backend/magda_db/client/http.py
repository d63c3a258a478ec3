"""JSON-over-HTTP backend for the REST API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib import error as urllib_error
from urllib import request as urllib_request

from pydantic import ValidationError

from magda_db.client.base import NotFoundError, TransportError, ValidationFailedError
from magda_db.schemas.row import RowRead, RowWrite
from magda_db.schemas.table import TableRead, TableWithRowsRead, TableWrite

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpBackend:
    """Minimal REST client using stdlib HTTP."""

    base_url: str
    timeout_seconds: int = 30

    def list_tables(self) -> list[TableRead]:
        payload = self._request("GET", "/tables")
        return self._parse_list(TableRead, payload)

    def get_table(self, table_id: int) -> TableWithRowsRead:
        return self._parse(TableWithRowsRead, self._request("GET", f"/tables/{table_id}"))

    def create_table(self, payload: TableWrite) -> TableRead:
        body = {"table": _dump(payload)}
        return self._parse(TableRead, self._request("POST", "/tables", body))

    def update_table(self, table_id: int, payload: TableWrite) -> TableRead:
        body = {"table": _dump(payload)}
        return self._parse(TableRead, self._request("PUT", f"/tables/{table_id}", body))

    def delete_table(self, table_id: int) -> None:
        self._request("DELETE", f"/tables/{table_id}")

    def list_rows(self, table_id: int) -> list[RowRead]:
        return self._parse_list(RowRead, self._request("GET", f"/tables/{table_id}/rows"))

    def get_row(self, table_id: int, row_id: int) -> RowRead:
        return self._parse(RowRead, self._request("GET", f"/tables/{table_id}/rows/{row_id}"))

    def create_row(self, table_id: int, payload: RowWrite) -> RowRead:
        body = {"row": _dump(payload)}
        return self._parse(RowRead, self._request("POST", f"/tables/{table_id}/rows", body))

    def update_row(self, table_id: int, row_id: int, payload: RowWrite) -> RowRead:
        body = {"row": _dump(payload)}
        return self._parse(RowRead, self._request("PUT", f"/tables/{table_id}/rows/{row_id}", body))

    def delete_row(self, table_id: int, row_id: int) -> None:
        self._request("DELETE", f"/tables/{table_id}/rows/{row_id}")

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url.rstrip('/')}{path}"
        req = urllib_request.Request(
            url=url,
            data=json.dumps(body).encode("utf-8") if body is not None else None,
            method=method,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise _error_from_response(exc.code, detail) from exc
        except urllib_error.URLError as exc:
            raise TransportError(f"{method} {url} failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise TransportError(f"{method} {url} timed out") from exc

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TransportError(f"{method} {url} returned a non-JSON response") from exc

    @staticmethod
    def _parse(model, payload: Any):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(f"Unexpected {model.__name__} payload") from exc

    @classmethod
    def _parse_list(cls, model, payload: Any) -> list:
        if not isinstance(payload, list):
            raise TransportError(f"Expected a list of {model.__name__} records")
        return [cls._parse(model, item) for item in payload]


def _dump(payload: TableWrite | RowWrite) -> dict[str, Any]:
    body = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(payload, TableWrite) and "table_schema" in payload.model_fields_set:
        body["schema"] = payload.schema_document()
    return body


def _error_from_response(status_code: int, detail: str) -> Exception:
    try:
        decoded = json.loads(detail) if detail else {}
    except json.JSONDecodeError:
        decoded = {}
    if not isinstance(decoded, dict):
        decoded = {}

    if status_code == 404:
        return NotFoundError(str(decoded.get("error") or "Not found"))
    if status_code == 422:
        errors = decoded.get("errors")
        messages = [str(item) for item in errors] if isinstance(errors, list) else [detail or "Validation failed"]
        return ValidationFailedError(messages)
    logger.warning("API returned HTTP %s: %s", status_code, detail)
    message = decoded.get("error") if isinstance(decoded.get("error"), str) else f"HTTP {status_code}"
    return TransportError(message, status_code=status_code)
