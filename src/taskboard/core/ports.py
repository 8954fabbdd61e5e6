# src/taskboard/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from ..tasks.task_models import BoardState

Snapshot = dict[str, Any]
# Persisted record: {"tasks": [...], "customFields": [...], "groupOrder": {...}}.

StateListener = Callable[[BoardState], None]


class SnapshotSlot(Protocol):
    """
    One named durable slot holding the latest board snapshot.

    Last writer wins; there is a single writer (the persistence adapter) and a
    single reader (startup hydration).
    """

    def read(self) -> Snapshot | None: ...

    def write(self, snapshot: Snapshot) -> None: ...

    def clear(self) -> None: ...
