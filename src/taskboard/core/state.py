# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.persistence import PersistenceAdapter
from .ports import SnapshotSlot
from .store import TaskStore


@dataclass
class AppState:
    # Settings live on the state so handlers never read global config.
    settings: Any

    store: TaskStore
    slot: SnapshotSlot
    persistence: PersistenceAdapter
