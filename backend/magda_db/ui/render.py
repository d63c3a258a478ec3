"""Plain-text rendering of the views for terminal use."""

from __future__ import annotations

from magda_db.ui.cells import display_cell
from magda_db.ui.state import ViewStatus
from magda_db.ui.table_list import TableListView
from magda_db.ui.table_view import TableView

MAX_CELL_WIDTH = 32


def _clip(text: str, width: int = MAX_CELL_WIDTH) -> str:
    text = text.replace("\n", " ")
    return text if len(text) <= width else text[: width - 1] + "…"


def render_table_list(view: TableListView) -> str:
    if view.status is ViewStatus.LOADING:
        return "Loading..."
    if view.status is ViewStatus.ERROR:
        return view.error or "Failed to load tables"
    if not view.tables:
        return "No tables yet. Create one to get started."
    lines = []
    for table in view.tables:
        marker = "*" if table.id == view.selected_id else " "
        lines.append(f"{marker} [{table.id}] {table.name} ({len(table.columns())} columns)")
    if view.notice:
        lines.append(f"! {view.notice}")
    return "\n".join(lines)


def render_table_view(view: TableView) -> str:
    """Render the header and the grid, with a row number column."""

    if view.status is ViewStatus.LOADING:
        return "Loading..."
    if view.status is ViewStatus.ERROR:
        return view.error or "Failed to load table"
    if view.table is None:
        return "Table not found"

    columns = view.columns
    header = ["#", *(f"{column.name} ({column.type})" for column in columns), "id"]
    body: list[list[str]] = []
    for index, row in enumerate(view.rows, start=1):
        cells = [_clip(display_cell(row.data.get(column.name))) for column in columns]
        body.append([str(index), *cells, str(row.id)])

    widths = [len(title) for title in header]
    for line in body:
        widths = [max(width, len(cell)) for width, cell in zip(widths, line)]

    def fmt(cells: list[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [view.table.name]
    if view.table.description:
        lines.append(view.table.description)
    lines.append("")
    lines.append(fmt(header))
    lines.append("-+-".join("-" * width for width in widths))
    if body:
        lines.extend(fmt(line) for line in body)
    else:
        lines.append('No data yet. Use "add-row" to get started.')
    if view.notice:
        lines.append(f"! {view.notice}")
    return "\n".join(lines)
