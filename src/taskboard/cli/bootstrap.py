# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the snapshot slot (JSON file or SQLite),
- wires store + persistence into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import SnapshotSlot
from ..core.state import AppState
from ..core.store import TaskStore
from ..storage.json_slot import JsonFileSlot
from ..storage.persistence import PersistenceAdapter
from ..storage.seed import demo_state
from ..storage.sqlite_slot import SqliteSlot
from ..tasks.task_models import BoardState, GroupField

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_slot(settings) -> SnapshotSlot:
    if getattr(settings, "storage", "json") == "sqlite":
        return SqliteSlot(settings.db_path, name=settings.slot_name)
    return JsonFileSlot(settings.snapshot_path)


def create_initial_state(*, settings=None, slot: SnapshotSlot | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the slot) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    Persistence is wired but not started; call start_app() to hydrate.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    group_by = GroupField.parse(getattr(settings, "group_by", "status"))
    initial = demo_state(group_by) if getattr(settings, "seed_demo", False) else BoardState()

    store = TaskStore(
        initial,
        group_by=group_by,
        history_limit=getattr(settings, "history_limit", 50),
    )
    if slot is None:
        slot = create_slot(settings)

    return AppState(
        settings=settings,
        store=store,
        slot=slot,
        persistence=PersistenceAdapter(store, slot),
    )


def start_app(state: AppState) -> None:
    loaded = state.persistence.start()
    logger.info(
        "Board ready: %d tasks (persisted=%s, group_by=%s)",
        len(state.store.state.tasks),
        loaded,
        state.store.group_by.value,
    )


def shutdown_app(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.persistence.close()
    except Exception:
        logger.exception("Failed to detach persistence.")

    try:
        state.store.close()
    except Exception:
        logger.debug("Store close failed.", exc_info=True)
