"""Row ORM model."""

from typing import Any

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from magda_db.models.base import Base, IdMixin, TimestampMixin


class DataRow(Base, IdMixin, TimestampMixin):
    """One record of a user-defined table, stored as a JSON document."""

    __tablename__ = "rows"
    __table_args__ = {"sqlite_autoincrement": True}

    table_id: Mapped[int] = mapped_column(
        ForeignKey("tables.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    data_json: Mapped[dict[str, Any]] = mapped_column("data", JSON, default=dict, nullable=False)
