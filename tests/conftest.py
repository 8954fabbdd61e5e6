# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.core.store import TaskStore, provide_store
from taskboard.storage.json_slot import JsonFileSlot
from taskboard.storage.persistence import PersistenceAdapter
from taskboard.tasks.task_models import GroupField


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        group_by="status",
        history_limit=50,
        seed_demo=False,
        storage="json",
        slot_name="taskState",
        data_dir=tmp_path,
        snapshot_path=tmp_path / "taskState.json",
        db_path=tmp_path / "taskboard.sqlite3",
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore(group_by=GroupField.STATUS)


@pytest.fixture()
def state(settings: SimpleNamespace) -> Iterator[AppState]:
    """
    AppState wired with a real JSON slot under tmp_path, bound via provide_store().

    NOTE: persistence is started, so every command also exercises the save path.
    """
    store = TaskStore(group_by=GroupField.STATUS)
    slot = JsonFileSlot(settings.snapshot_path)
    app = AppState(
        settings=settings,
        store=store,
        slot=slot,
        persistence=PersistenceAdapter(store, slot),
    )
    app.persistence.start()
    with provide_store(store):
        yield app
    app.persistence.close()
    store.close()
