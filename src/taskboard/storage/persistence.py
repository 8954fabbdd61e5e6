# src/taskboard/storage/persistence.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.ports import SnapshotSlot
from ..core.store import TaskStore
from ..tasks.task_actions import load_state
from ..tasks.task_models import BoardState

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    """
    Bridges a TaskStore and one SnapshotSlot.

    - start(): hydrate once from the slot (LOAD_STATE), then follow commits
    - every committed change is written back; an empty board clears the slot
    - I/O failures are logged and never roll back the in-memory state
    """

    def __init__(self, store: TaskStore, slot: SnapshotSlot) -> None:
        self._store = store
        self._slot = slot
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> bool:
        """Hydrate and attach. Returns True if a persisted snapshot was loaded."""
        loaded = self.hydrate()
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self.save)
        return loaded

    def hydrate(self) -> bool:
        try:
            raw = self._slot.read()
        except Exception:
            logger.exception("Failed to read persisted board; keeping defaults.")
            return False

        if raw is None:
            logger.info("No persisted board found; starting from defaults.")
            return False

        try:
            state = BoardState.from_dict(raw, group_by=self._store.group_by)
        except Exception:
            logger.exception("Persisted board is malformed; keeping defaults.")
            return False

        self._store.dispatch(load_state(state))
        logger.info(
            "Loaded board: %d tasks, %d custom fields",
            len(state.tasks),
            len(state.custom_fields),
        )
        return True

    def save(self, state: BoardState) -> None:
        try:
            if not state.tasks:
                self._slot.clear()
                return
            self._slot.write(state.to_dict())
        except Exception:
            logger.exception("Failed to persist board (%d tasks).", len(state.tasks))

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
