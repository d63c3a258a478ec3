"""Client doubles shared by the view and CLI tests."""

from __future__ import annotations

from magda_db.client import ApiClient, LocalStoreBackend, MemoryStorage, TransportError
from magda_db.schemas.row import RowWrite
from magda_db.schemas.table import TableWrite


class RecordingBackend:
    """Local store wrapper that logs calls and can fail chosen operations."""

    def __init__(self) -> None:
        self.inner = LocalStoreBackend(MemoryStorage(), seed=False)
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.fail_after: dict[str, int] = {}

    def __getattr__(self, name: str):
        target = getattr(self.inner, name)

        def call(*args):
            self.calls.append((name, *args))
            remaining = self.fail_after.get(name)
            if remaining is not None:
                if remaining <= 0:
                    raise TransportError(f"{name} failed")
                self.fail_after[name] = remaining - 1
            if name in self.fail_on:
                raise TransportError(f"{name} failed")
            return target(*args)

        return call

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def reset(self) -> None:
        self.calls.clear()


def contacts_client() -> tuple[ApiClient, RecordingBackend, int]:
    """Client holding a Contacts table with Name/Age columns and two rows."""

    backend = RecordingBackend()
    api = ApiClient(backend)
    table = api.tables.create(
        TableWrite.model_validate(
            {
                "name": "Contacts",
                "description": "People",
                "schema": {"columns": [{"name": "Name", "type": "text"}, {"name": "Age", "type": "number"}]},
            }
        )
    ).data
    api.rows.create(table.id, RowWrite(data={"Name": "Alice", "Age": 31}))
    api.rows.create(table.id, RowWrite(data={"Name": "Bob", "Age": 40}))
    backend.reset()
    return api, backend, table.id
