"""Terminal front end driving the table list and table grid views.

Usage:
    magda-db tables
    magda-db create Contacts --column Name:text --column Age:number --row Name=Alice Age=31
    magda-db show 1
    magda-db edit 1 3 Name "Alicia"
    magda-db remove-column 1 Age --yes
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from magda_db.client.api import ApiClient
from magda_db.config import Settings, get_settings
from magda_db.schemas.table import COLUMN_TYPES
from magda_db.ui.render import render_table_list, render_table_view
from magda_db.ui.state import Confirm, ViewStatus
from magda_db.ui.table_list import TableDraft, TableListView
from magda_db.ui.table_view import TableView

logger = logging.getLogger(__name__)


def ask(message: str) -> bool:
    """Interactive yes/no confirmation on stdin."""

    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _column_spec(value: str) -> tuple[str, str]:
    name, _, column_type = value.partition(":")
    column_type = column_type or "text"
    if not name.strip():
        raise argparse.ArgumentTypeError("column name is empty")
    if column_type not in COLUMN_TYPES:
        raise argparse.ArgumentTypeError(f"column type must be one of {', '.join(COLUMN_TYPES)}")
    return name.strip(), column_type


def _cell_assignment(value: str) -> tuple[str, str]:
    key, sep, cell = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError("expected KEY=VALUE")
    return key.strip(), cell


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(prog="magda-db", description="Spreadsheet-style tables from the terminal.")
    parser.add_argument("--backend", choices=["auto", "http", "database", "local"], help="Storage backend to use.")
    parser.add_argument("--api-url", help="Base URL of the REST API, e.g. http://localhost:8000/api")
    parser.add_argument("--store", help="JSON file for the local mock store.")
    parser.add_argument("--yes", "-y", action="store_true", help="Answer yes to confirmations.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tables", help="List tables.")

    show = sub.add_parser("show", help="Show one table with its rows.")
    show.add_argument("table_id", type=int)

    create = sub.add_parser("create", help="Create a table.")
    create.add_argument("name")
    create.add_argument("--description", default="")
    create.add_argument("--column", dest="columns", action="append", type=_column_spec, default=[], metavar="NAME[:TYPE]")
    create.add_argument("--row", dest="rows", action="append", nargs="+", type=_cell_assignment, default=[], metavar="KEY=VALUE")

    delete_table = sub.add_parser("delete-table", help="Delete a table and all its rows.")
    delete_table.add_argument("table_id", type=int)

    rename = sub.add_parser("rename", help="Rename a table.")
    rename.add_argument("table_id", type=int)
    rename.add_argument("name")

    describe = sub.add_parser("describe", help="Change a table's description.")
    describe.add_argument("table_id", type=int)
    describe.add_argument("description")

    add_row = sub.add_parser("add-row", help="Append an empty row.")
    add_row.add_argument("table_id", type=int)

    delete_row = sub.add_parser("delete-row", help="Delete a row.")
    delete_row.add_argument("table_id", type=int)
    delete_row.add_argument("row_id", type=int)

    edit = sub.add_parser("edit", help="Set one cell.")
    edit.add_argument("table_id", type=int)
    edit.add_argument("row_id", type=int)
    edit.add_argument("column")
    edit.add_argument("value")

    add_column = sub.add_parser("add-column", help="Append a text column.")
    add_column.add_argument("table_id", type=int)
    add_column.add_argument("name")

    remove_column = sub.add_parser("remove-column", help="Remove a column and its values.")
    remove_column.add_argument("table_id", type=int)
    remove_column.add_argument("name")

    return parser.parse_args(argv)


def settings_for(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command-line overrides to the loaded settings."""

    updates: dict[str, object] = {}
    if args.backend:
        updates["client_backend"] = args.backend
    if args.api_url:
        updates["api_base_url"] = args.api_url
    if args.store:
        updates["local_store_path"] = args.store
    return base.model_copy(update=updates) if updates else base


def _finish(text: str, notice: str | None, ok: bool) -> int:
    print(text)
    if not ok and notice and notice not in text:
        print(f"! {notice}", file=sys.stderr)
    return 0 if ok else 1


def run(args: argparse.Namespace, api: ApiClient, confirm: Confirm) -> int:
    """Execute one parsed command against a client."""

    if args.command in {"tables", "create", "delete-table"}:
        sidebar = TableListView(api, confirm=confirm)
        if args.command == "tables":
            sidebar.load()
            return _finish(render_table_list(sidebar), sidebar.error, sidebar.status is ViewStatus.READY)

        if args.command == "create":
            draft = TableDraft(name=args.name, description=args.description, columns=[])
            for index, (name, column_type) in enumerate(args.columns):
                draft.add_column()
                draft.update_column(index, name=name, column_type=column_type)
            for index, assignments in enumerate(args.rows):
                draft.add_row()
                for key, value in assignments:
                    draft.update_row(index, key, value)
            table_id = sidebar.create_table(draft)
            if table_id is None:
                return _finish(sidebar.notice or "Failed to create table", None, False)
            view = TableView(api, table_id)
            view.load()
            return _finish(render_table_view(view), sidebar.notice, sidebar.notice is None)

        sidebar.load()
        sidebar.delete_table(args.table_id)
        return _finish(render_table_list(sidebar), sidebar.notice, sidebar.notice is None)

    view = TableView(api, args.table_id, confirm=confirm, prompt=lambda _: getattr(args, "name", None))
    view.load()
    if view.status is not ViewStatus.READY:
        return _finish(render_table_view(view), view.error, False)

    if args.command == "rename":
        view.begin_rename()
        view.name_edit.value = args.name
        view.commit_rename()
    elif args.command == "describe":
        view.begin_description_edit()
        view.description_edit.value = args.description
        view.commit_description()
    elif args.command == "add-row":
        view.add_row()
    elif args.command == "delete-row":
        view.delete_row(args.row_id)
    elif args.command == "edit":
        view.begin_edit(args.row_id, args.column)
        view.set_edit_value(args.value)
        view.handle_key("Enter")
    elif args.command == "add-column":
        view.add_column()
    elif args.command == "remove-column":
        view.remove_column(args.name)

    ok = view.notice is None and view.status is ViewStatus.READY
    return _finish(render_table_view(view), view.notice or view.error, ok)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = settings_for(args, get_settings())
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    confirm: Confirm = (lambda _: True) if args.yes else ask
    try:
        api = ApiClient.from_settings(settings)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return run(args, api, confirm)


if __name__ == "__main__":
    raise SystemExit(main())
