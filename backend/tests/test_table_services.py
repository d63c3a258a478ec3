"""Service-level tests for table persistence and validation."""

from __future__ import annotations

import unittest

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from magda_db.errors import RecordInvalidError
from magda_db.models.base import Base
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.schemas.row import RowWrite
from magda_db.schemas.table import TableWrite
from magda_db.services.rows import create_row, get_row
from magda_db.services.tables import (
    create_table,
    delete_table,
    get_table,
    list_table_rows,
    list_tables,
    serialize_table,
    update_table,
)


class TableServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(DataRow))
        self.db.execute(delete(DataTable))
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def _table_count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(DataTable))

    def test_create_without_schema_defaults_to_empty_document(self) -> None:
        table = create_table(self.db, TableWrite(name="Contacts"))

        self.assertEqual(table.schema_json, {})
        self.assertEqual(serialize_table(table).model_dump(by_alias=True)["schema"], {})

    def test_create_keeps_declared_columns_and_defaults_column_type(self) -> None:
        payload = TableWrite.model_validate(
            {"name": "Contacts", "schema": {"columns": [{"name": "Name"}, {"name": "Age", "type": "number"}]}}
        )
        table = create_table(self.db, payload)

        self.assertEqual(
            table.schema_json,
            {"columns": [{"name": "Name", "type": "text"}, {"name": "Age", "type": "number"}]},
        )

    def test_duplicate_name_is_rejected_and_not_persisted(self) -> None:
        create_table(self.db, TableWrite(name="Contacts"))

        with self.assertRaises(RecordInvalidError) as ctx:
            create_table(self.db, TableWrite(name="Contacts", description="again"))

        self.assertEqual(ctx.exception.messages, ["Name has already been taken"])
        self.assertEqual(self._table_count(), 1)

    def test_blank_name_is_rejected(self) -> None:
        with self.assertRaises(RecordInvalidError) as ctx:
            create_table(self.db, TableWrite(name="   "))

        self.assertEqual(ctx.exception.messages, ["Name can't be blank"])
        self.assertEqual(self._table_count(), 0)

    def test_update_replaces_schema_wholesale(self) -> None:
        table = create_table(
            self.db,
            TableWrite.model_validate({"name": "Contacts", "schema": {"columns": [{"name": "Name"}], "view": "grid"}}),
        )

        updated = update_table(
            self.db,
            table,
            TableWrite.model_validate({"schema": {"columns": [{"name": "Email", "type": "text"}]}}),
        )

        self.assertEqual(updated.schema_json, {"columns": [{"name": "Email", "type": "text"}]})
        self.assertEqual(updated.name, "Contacts")

    def test_update_keeping_own_name_is_not_a_conflict(self) -> None:
        table = create_table(self.db, TableWrite(name="Contacts"))

        updated = update_table(self.db, table, TableWrite(name="Contacts", description="Friends"))

        self.assertEqual(updated.description, "Friends")

    def test_update_rejects_null_schema_and_taken_name(self) -> None:
        create_table(self.db, TableWrite(name="Projects"))
        table = create_table(self.db, TableWrite(name="Contacts"))

        with self.assertRaises(RecordInvalidError) as ctx:
            update_table(self.db, table, TableWrite.model_validate({"name": "Projects", "schema": None}))

        self.assertEqual(ctx.exception.messages, ["Name has already been taken", "Schema can't be blank"])
        self.db.expire_all()
        self.assertEqual(get_table(self.db, table.id).name, "Contacts")

    def test_list_tables_is_newest_first(self) -> None:
        first = create_table(self.db, TableWrite(name="First"))
        second = create_table(self.db, TableWrite(name="Second"))

        self.assertEqual([table.id for table in list_tables(self.db)], [second.id, first.id])

    def test_delete_table_removes_its_rows(self) -> None:
        table = create_table(self.db, TableWrite(name="Contacts"))
        other = create_table(self.db, TableWrite(name="Projects"))
        row_ids = [create_row(self.db, table, RowWrite(data={"Name": name})).id for name in ("Alice", "Bob")]
        kept = create_row(self.db, other, RowWrite(data={"Title": "Garage"}))

        removed = delete_table(self.db, table)

        self.assertEqual(removed, 2)
        self.assertIsNone(get_table(self.db, table.id))
        remaining = self.db.scalars(select(DataRow.id)).all()
        self.assertEqual(remaining, [kept.id])
        for row_id in row_ids:
            self.assertIsNone(get_row(self.db, other, row_id))
        self.assertEqual([row.id for row in list_table_rows(self.db, other.id)], [kept.id])


if __name__ == "__main__":
    unittest.main()
