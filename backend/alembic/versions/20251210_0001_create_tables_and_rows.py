"""create tables and rows

Revision ID: 20251210_0001
Revises:
Create Date: 2025-12-10 20:58:30
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20251210_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "tables",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("schema", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_tables_name", "tables", ["name"], unique=True)
    op.create_index("ix_tables_created_at", "tables", ["created_at"], unique=False)

    op.create_table(
        "rows",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("table_id", sa.Integer(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["table_id"], ["tables.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_rows_table_id", "rows", ["table_id"], unique=False)
    op.create_index("ix_rows_created_at", "rows", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_rows_created_at", table_name="rows")
    op.drop_index("ix_rows_table_id", table_name="rows")
    op.drop_table("rows")
    op.drop_index("ix_tables_created_at", table_name="tables")
    op.drop_index("ix_tables_name", table_name="tables")
    op.drop_table("tables")
