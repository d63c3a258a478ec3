"""The same client scenarios run against the local store and the database backend."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from magda_db.client import (
    ApiClient,
    DatabaseBackend,
    HttpBackend,
    JsonFileStorage,
    LocalStoreBackend,
    MemoryStorage,
    NotFoundError,
    ValidationFailedError,
    build_backend,
)
from magda_db.config import Settings
from magda_db.models.base import Base
from magda_db.schemas.row import RowWrite
from magda_db.schemas.table import TableWrite


class _ClientScenarios:
    """Mixed into one TestCase per backend; ``make_client`` returns an empty client."""

    def make_client(self) -> ApiClient:
        raise NotImplementedError

    def test_contacts_end_to_end(self) -> None:
        api = self.make_client()
        table = api.tables.create(
            TableWrite.model_validate({"name": "Contacts", "schema": {"columns": [{"name": "Name", "type": "text"}]}})
        ).data
        row = api.rows.create(table.id, RowWrite(data={"Name": "Alice"})).data
        api.rows.update(table.id, row.id, RowWrite(data={"Name": "Alicia"}))

        shown = api.tables.get_one(table.id).data
        self.assertEqual([item.data for item in shown.rows], [{"Name": "Alicia"}])

        deleted = api.tables.delete(table.id)
        self.assertEqual(deleted.data.id, table.id)
        self.assertTrue(deleted.data.deleted)

        with self.assertRaises(NotFoundError) as table_missing:
            api.tables.get_one(table.id)
        self.assertEqual(table_missing.exception.message, "Table not found")
        with self.assertRaises(NotFoundError):
            api.rows.get_one(table.id, row.id)

    def test_validation_failures(self) -> None:
        api = self.make_client()
        api.tables.create(TableWrite(name="Contacts"))

        with self.assertRaises(ValidationFailedError) as duplicate:
            api.tables.create(TableWrite(name="Contacts"))
        self.assertEqual(duplicate.exception.messages, ["Name has already been taken"])
        self.assertEqual(duplicate.exception.status_code, 422)

        with self.assertRaises(ValidationFailedError) as blank:
            api.tables.create(TableWrite(name=""))
        self.assertEqual(blank.exception.messages, ["Name can't be blank"])

    def test_schema_defaults_and_update_replaces_row_data(self) -> None:
        api = self.make_client()
        table = api.tables.create(TableWrite(name="Notes")).data
        self.assertEqual(table.table_schema, {})

        row = api.rows.create(table.id, RowWrite()).data
        self.assertEqual(row.data, {})
        api.rows.update(table.id, row.id, RowWrite(data={"a": "1", "b": 2}))
        updated = api.rows.update(table.id, row.id, RowWrite(data={"b": 3})).data

        self.assertEqual(updated.data, {"b": 3})
        self.assertEqual(api.rows.get_one(table.id, row.id).data.data, {"b": 3})

    def test_row_must_belong_to_table(self) -> None:
        api = self.make_client()
        first = api.tables.create(TableWrite(name="First")).data
        second = api.tables.create(TableWrite(name="Second")).data
        row = api.rows.create(first.id, RowWrite(data={"x": "y"})).data

        with self.assertRaises(NotFoundError) as ctx:
            api.rows.get_one(second.id, row.id)
        self.assertEqual(ctx.exception.message, "Row not found")
        with self.assertRaises(NotFoundError):
            api.rows.delete(second.id, row.id)
        self.assertEqual([item.id for item in api.rows.get_all(first.id).data], [row.id])

    def test_deleted_ids_are_not_reissued(self) -> None:
        api = self.make_client()
        api.tables.create(TableWrite(name="Keep"))
        old = api.tables.create(TableWrite(name="Old")).data
        old_row = api.rows.create(old.id, RowWrite(data={"Name": "Bob"})).data
        api.tables.delete(old.id)

        new = api.tables.create(TableWrite(name="New")).data
        new_row = api.rows.create(new.id, RowWrite(data={"Name": "Carol"})).data

        self.assertNotEqual(new.id, old.id)
        self.assertNotEqual(new_row.id, old_row.id)
        with self.assertRaises(NotFoundError):
            api.tables.get_one(old.id)
        with self.assertRaises(NotFoundError):
            api.rows.get_one(old.id, old_row.id)

    def test_listings_are_newest_first(self) -> None:
        api = self.make_client()
        names = [table.name for table in api.tables.get_all().data]
        created = [api.tables.create(TableWrite(name=f"T{index}")).data for index in range(3)]

        listed = [table.name for table in api.tables.get_all().data]
        self.assertEqual(listed[:3], [table.name for table in reversed(created)])
        self.assertEqual(listed[3:], names)

        rows = [api.rows.create(created[0].id, RowWrite(data={"n": index})).data for index in range(3)]
        self.assertEqual([row.id for row in api.rows.get_all(created[0].id).data], [row.id for row in reversed(rows)])
        self.assertEqual([row.id for row in api.tables.get_one(created[0].id).data.rows], [row.id for row in rows])


class LocalStoreBackendTests(_ClientScenarios, unittest.TestCase):
    def make_client(self) -> ApiClient:
        return ApiClient(LocalStoreBackend(MemoryStorage(), seed=False))

    def test_first_run_is_seeded_once(self) -> None:
        storage = MemoryStorage()
        api = ApiClient(LocalStoreBackend(storage))

        tables = api.tables.get_all().data
        self.assertEqual([table.name for table in tables], ["Contacts"])
        self.assertEqual([column.name for column in tables[0].columns()], ["Name", "Email", "Phone"])
        rows = api.tables.get_one(tables[0].id).data.rows
        self.assertEqual([row.data["Name"] for row in rows], ["John Doe", "Jane Smith"])

        api.tables.delete(tables[0].id)
        api.tables.create(TableWrite(name="Mine"))
        reopened = ApiClient(LocalStoreBackend(storage))
        self.assertEqual([table.name for table in reopened.tables.get_all().data], ["Mine"])

    def test_file_storage_survives_reopen(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "store" / "magda.json"
            api = ApiClient(LocalStoreBackend(JsonFileStorage(path), seed=False))
            table = api.tables.create(TableWrite(name="Contacts")).data
            api.rows.create(table.id, RowWrite(data={"Name": "Alice"}))

            reopened = ApiClient(LocalStoreBackend(JsonFileStorage(path)))
            shown = reopened.tables.get_one(table.id).data

            self.assertEqual(shown.name, "Contacts")
            self.assertEqual([row.data for row in shown.rows], [{"Name": "Alice"}])
            stored = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(set(stored), {"mockTables", "mockRows", "mockNextIds"})


class DatabaseBackendTests(_ClientScenarios, unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)

    @classmethod
    def tearDownClass(cls) -> None:
        cls.engine.dispose()

    def setUp(self) -> None:
        Base.metadata.drop_all(self.engine)
        Base.metadata.create_all(self.engine)

    def make_client(self) -> ApiClient:
        return ApiClient(DatabaseBackend(self.SessionLocal))


class BuildBackendTests(unittest.TestCase):
    def test_auto_prefers_http_when_api_url_is_set(self) -> None:
        backend = build_backend(Settings(api_base_url="http://localhost:8000/api", api_timeout_seconds=5))

        self.assertIsInstance(backend, HttpBackend)
        self.assertEqual(backend.timeout_seconds, 5)

    def test_auto_without_configuration_uses_memory_store(self) -> None:
        backend = build_backend(Settings(api_base_url=None, local_store_path=None, client_backend="auto"))

        self.assertIsInstance(backend, LocalStoreBackend)
        self.assertIsInstance(backend.storage, MemoryStorage)

    def test_local_with_path_uses_file_storage(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            backend = build_backend(Settings(client_backend="local", local_store_path=str(Path(tmp) / "s.json")))

            self.assertIsInstance(backend.storage, JsonFileStorage)

    def test_http_without_url_is_a_configuration_error(self) -> None:
        with self.assertRaises(ValueError):
            build_backend(Settings(client_backend="http", api_base_url=None))

    def test_database_choice_uses_configured_url(self) -> None:
        backend = build_backend(Settings(client_backend="database", database_url="sqlite+pysqlite:///:memory:"))

        self.assertIsInstance(backend, DatabaseBackend)


if __name__ == "__main__":
    unittest.main()
