"""User-defined table ORM model."""

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from magda_db.models.base import Base, IdMixin, TimestampMixin


class DataTable(Base, IdMixin, TimestampMixin):
    """A user-defined record kind with a free-form column schema."""

    __tablename__ = "tables"
    # Deleted ids are never reissued.
    __table_args__ = {"sqlite_autoincrement": True}

    name: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    schema_json: Mapped[dict[str, Any]] = mapped_column("schema", JSON, default=dict, nullable=False)
