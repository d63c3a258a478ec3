from __future__ import annotations

import io
import json
import unittest
from unittest import mock
from urllib import error as urllib_error

from magda_db.client import HttpBackend, NotFoundError, TransportError, ValidationFailedError
from magda_db.schemas.row import RowWrite
from magda_db.schemas.table import TableWrite

TABLE = {
    "id": 1,
    "name": "Contacts",
    "description": None,
    "schema": {"columns": [{"name": "Name", "type": "text"}]},
    "created_at": "2025-01-01T00:00:00Z",
    "updated_at": "2025-01-01T00:00:00Z",
}
ROW = {
    "id": 7,
    "table_id": 1,
    "data": {"Name": "Alice"},
    "created_at": "2025-01-01T00:00:00Z",
    "updated_at": "2025-01-01T00:00:00Z",
}


def _reply(urlopen: mock.MagicMock, body: bytes) -> None:
    urlopen.return_value.__enter__.return_value.read.return_value = body


def _http_error(code: int, payload: object) -> urllib_error.HTTPError:
    body = json.dumps(payload).encode("utf-8")
    return urllib_error.HTTPError("http://api.test/api", code, "error", None, io.BytesIO(body))


@mock.patch("magda_db.client.http.urllib_request.urlopen")
class HttpBackendTests(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = HttpBackend(base_url="http://api.test/api/", timeout_seconds=3)

    def _sent(self, urlopen: mock.MagicMock):
        request = urlopen.call_args.args[0]
        body = json.loads(request.data.decode("utf-8")) if request.data else None
        return request.get_method(), request.full_url, body

    def test_create_table_wraps_payload_and_parses_record(self, urlopen: mock.MagicMock) -> None:
        _reply(urlopen, json.dumps(TABLE).encode("utf-8"))

        created = self.backend.create_table(
            TableWrite.model_validate({"name": "Contacts", "schema": {"columns": [{"name": "Name"}]}})
        )

        method, url, body = self._sent(urlopen)
        self.assertEqual(method, "POST")
        self.assertEqual(url, "http://api.test/api/tables")
        self.assertEqual(body, {"table": {"name": "Contacts", "schema": {"columns": [{"name": "Name", "type": "text"}]}}})
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 3)
        self.assertEqual(created.id, 1)
        self.assertEqual(created.table_schema["columns"][0]["name"], "Name")

    def test_update_row_sends_only_data(self, urlopen: mock.MagicMock) -> None:
        _reply(urlopen, json.dumps(ROW).encode("utf-8"))

        updated = self.backend.update_row(1, 7, RowWrite(data={"Name": "Alice"}))

        method, url, body = self._sent(urlopen)
        self.assertEqual((method, url), ("PUT", "http://api.test/api/tables/1/rows/7"))
        self.assertEqual(body, {"row": {"data": {"Name": "Alice"}}})
        self.assertEqual(updated.data, {"Name": "Alice"})

    def test_list_and_show(self, urlopen: mock.MagicMock) -> None:
        _reply(urlopen, json.dumps([TABLE]).encode("utf-8"))
        self.assertEqual([table.name for table in self.backend.list_tables()], ["Contacts"])

        _reply(urlopen, json.dumps({**TABLE, "rows": [ROW]}).encode("utf-8"))
        shown = self.backend.get_table(1)
        self.assertEqual([row.id for row in shown.rows], [7])

    def test_delete_accepts_empty_no_content_reply(self, urlopen: mock.MagicMock) -> None:
        _reply(urlopen, b"")

        self.assertIsNone(self.backend.delete_row(1, 7))
        method, url, body = self._sent(urlopen)
        self.assertEqual((method, url, body), ("DELETE", "http://api.test/api/tables/1/rows/7", None))

    def test_not_found_reply_carries_server_message(self, urlopen: mock.MagicMock) -> None:
        urlopen.side_effect = _http_error(404, {"error": "Table not found"})

        with self.assertRaises(NotFoundError) as ctx:
            self.backend.get_table(99)
        self.assertEqual(ctx.exception.message, "Table not found")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_unprocessable_reply_carries_messages(self, urlopen: mock.MagicMock) -> None:
        urlopen.side_effect = _http_error(422, {"errors": ["Name has already been taken"]})

        with self.assertRaises(ValidationFailedError) as ctx:
            self.backend.create_table(TableWrite(name="Contacts"))
        self.assertEqual(ctx.exception.messages, ["Name has already been taken"])

    def test_server_error_is_a_transport_error(self, urlopen: mock.MagicMock) -> None:
        urlopen.side_effect = _http_error(500, {"error": "Internal server error"})

        with self.assertRaises(TransportError) as ctx:
            self.backend.list_tables()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.message, "Internal server error")

    def test_unreachable_server_is_a_transport_error(self, urlopen: mock.MagicMock) -> None:
        urlopen.side_effect = urllib_error.URLError("connection refused")

        with self.assertRaises(TransportError) as ctx:
            self.backend.list_rows(1)
        self.assertIn("connection refused", ctx.exception.message)

    def test_unexpected_payload_is_a_transport_error(self, urlopen: mock.MagicMock) -> None:
        _reply(urlopen, b'{"id": "x"}')

        with self.assertRaises(TransportError):
            self.backend.get_row(1, 7)


if __name__ == "__main__":
    unittest.main()
