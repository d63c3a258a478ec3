"""SQLAlchemy metadata registry import for Alembic."""

from magda_db.models import DataRow, DataTable
from magda_db.models.base import Base

__all__ = ["Base", "DataTable", "DataRow"]
