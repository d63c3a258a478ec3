"""View models for the table list and the table grid."""

from magda_db.ui.state import ViewStatus
from magda_db.ui.table_list import ColumnDraft, TableDraft, TableListView
from magda_db.ui.table_view import CellRef, TableView

__all__ = ["CellRef", "ColumnDraft", "TableDraft", "TableListView", "TableView", "ViewStatus"]
