"""View state shared by the UI views."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

Confirm = Callable[[str], bool]
Prompt = Callable[[str], "str | None"]


class ViewStatus(str, Enum):
    """Lifecycle of one view's fetched data."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def deny(_: str) -> bool:
    return False


def no_answer(_: str) -> str | None:
    return None
