"""ORM models package exports."""

from magda_db.models.data_row import DataRow
from magda_db.models.data_table import DataTable

__all__ = ["DataTable", "DataRow"]
