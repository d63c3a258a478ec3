"""Seed sample tables (contacts, projects, expenses) with a few rows each.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete
from sqlalchemy.orm import Session

# Make `magda_db` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from magda_db.db.session import SessionLocal
from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable
from magda_db.schemas.row import RowWrite
from magda_db.schemas.table import TableSchema, TableWrite
from magda_db.services.rows import create_row
from magda_db.services.tables import create_table


def build_demo_tables() -> list[tuple[TableWrite, list[dict[str, str]]]]:
    """Return deterministic demo tables with their rows."""

    def table(name: str, description: str, columns: list[tuple[str, str]]) -> TableWrite:
        return TableWrite(
            name=name,
            description=description,
            table_schema=TableSchema.model_validate(
                {"columns": [{"name": column, "type": column_type} for column, column_type in columns]}
            ),
        )

    return [
        (
            table(
                "Contacts",
                "My friends and family contact information",
                [("name", "text"), ("email", "text"), ("phone", "text"), ("notes", "text")],
            ),
            [
                {"name": "Alice Johnson", "email": "alice@example.com", "phone": "555-0101", "notes": "Best friend from college"},
                {"name": "Bob Smith", "email": "bob@example.com", "phone": "555-0102", "notes": "Coworker"},
                {"name": "Charlie Brown", "email": "charlie@example.com", "phone": "555-0103", "notes": "Neighbor"},
            ],
        ),
        (
            table(
                "Projects",
                "My personal and work projects",
                [("project_name", "text"), ("status", "text"), ("priority", "text"), ("deadline", "text")],
            ),
            [
                {"project_name": "Build database app", "status": "In Progress", "priority": "High", "deadline": "2025-01-15"},
                {"project_name": "Learn React", "status": "Completed", "priority": "Medium", "deadline": "2024-12-01"},
                {"project_name": "Organize garage", "status": "Not Started", "priority": "Low", "deadline": "2025-02-01"},
            ],
        ),
        (
            table(
                "Monthly Expenses",
                "Track my monthly expenses",
                [("category", "text"), ("amount", "number"), ("date", "text"), ("description", "text")],
            ),
            [
                {"category": "Groceries", "amount": "150.50", "date": "2024-12-05", "description": "Weekly shopping"},
                {"category": "Utilities", "amount": "85.00", "date": "2024-12-01", "description": "Electric bill"},
                {"category": "Entertainment", "amount": "45.00", "date": "2024-12-08", "description": "Movie tickets"},
            ],
        ),
    ]


def reset_all(db: Session) -> None:
    """Remove every row and table."""

    db.execute(delete(DataRow))
    db.execute(delete(DataTable))
    db.commit()


def seed(db: Session) -> tuple[int, int]:
    """Create the demo tables and rows. Returns (tables, rows) created."""

    table_count = row_count = 0
    for payload, rows in build_demo_tables():
        created = create_table(db, payload)
        table_count += 1
        for data in rows:
            create_row(db, created, RowWrite(data=data))
            row_count += 1
    return table_count, row_count


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed sample tables and rows.")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing tables and rows before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    with SessionLocal() as db:
        if not args.no_reset:
            reset_all(db)
        table_count, row_count = seed(db)

    print("Seed data created successfully!")
    print(f"Created {table_count} tables with {row_count} total rows")
    print()
    print("Inspect:")
    print("  GET /api/tables")


if __name__ == "__main__":
    main()
