# tests/test_bootstrap.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.cli.bootstrap import create_initial_state, create_slot, shutdown_app, start_app
from taskboard.config import Settings
from taskboard.logging_setup import _ConsoleNoiseFilter, parse_level, setup_logging
from taskboard.storage.json_slot import JsonFileSlot
from taskboard.storage.sqlite_slot import SqliteSlot
from taskboard.tasks import task_actions as actions
from taskboard.tasks.grouping import partition_problems
from taskboard.tasks.task_models import GroupField

from .fakes import MemorySlot


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKBOARD_STORAGE", "SQLite")
    monkeypatch.setenv("TASKBOARD_GROUP_BY", "nonsense")
    monkeypatch.setenv("TASKBOARD_HISTORY_LIMIT", "abc")
    monkeypatch.setenv("TASKBOARD_SEED_DEMO", "yes")
    monkeypatch.delenv("TASKBOARD_SNAPSHOT_PATH", raising=False)
    monkeypatch.delenv("TASKBOARD_DB_PATH", raising=False)
    monkeypatch.delenv("TASKBOARD_SLOT_NAME", raising=False)

    s = Settings.from_env()
    assert s.storage == "sqlite"
    assert s.group_by == "status"
    assert s.history_limit == 50
    assert s.seed_demo is True
    assert s.snapshot_path == tmp_path / "taskState.json"
    assert s.db_path == tmp_path / "taskboard.sqlite3"


def test_create_slot_picks_backend(settings: SimpleNamespace) -> None:
    assert isinstance(create_slot(settings), JsonFileSlot)
    settings.storage = "sqlite"
    assert isinstance(create_slot(settings), SqliteSlot)


def test_seeded_board_is_used_when_nothing_persisted(settings: SimpleNamespace) -> None:
    settings.seed_demo = True
    settings.group_by = "priority"
    slot = MemorySlot()

    state = create_initial_state(settings=settings, slot=slot)
    start_app(state)

    assert state.store.group_by is GroupField.PRIORITY
    assert len(state.store.state.tasks) == 6
    assert partition_problems(state.store.state, GroupField.PRIORITY) == []
    assert not state.store.can_undo

    shutdown_app(state)
    assert state.store.closed


def test_persisted_board_wins_over_seed(settings: SimpleNamespace) -> None:
    settings.seed_demo = True
    slot = MemorySlot(data={"tasks": [{"id": 42, "title": "kept"}]})

    state = create_initial_state(settings=settings, slot=slot)
    start_app(state)
    assert state.store.state.task_ids() == [42]
    shutdown_app(state)


def test_restart_round_trip_through_json_file(settings: SimpleNamespace) -> None:
    first = create_initial_state(settings=settings)
    start_app(first)
    first.store.dispatch(actions.add_custom_field({"name": "points", "type": "number"}))
    first.store.dispatch(actions.add_task({"id": 1, "title": "persist me", "points": 5}))
    shutdown_app(first)

    second = create_initial_state(settings=settings)
    start_app(second)
    assert second.store.state == first.store.state
    shutdown_app(second)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskboard.test").info("hello log")
        for h in root.handlers:
            h.flush()
        assert log_file.exists()
        assert "hello log" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        logging.captureWarnings(False)


def test_parse_level_and_console_filter() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("nonsense") == logging.INFO
    assert parse_level(logging.WARNING) == logging.WARNING

    noise = _ConsoleNoiseFilter()

    def record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert noise.filter(record("taskboard.cli.commands", logging.DEBUG))
    assert not noise.filter(record("taskboard.storage.json_slot", logging.DEBUG))
    assert noise.filter(record("taskboard.storage.persistence", logging.ERROR))
    assert not noise.filter(record("urllib3", logging.WARNING))
    assert noise.filter(record("urllib3", logging.ERROR))


def test_history_limit_setting_is_capped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKBOARD_HISTORY_LIMIT", "200")
    assert Settings.from_env().history_limit == 50

    monkeypatch.setenv("TASKBOARD_HISTORY_LIMIT", "-3")
    assert Settings.from_env().history_limit == 0

    monkeypatch.setenv("TASKBOARD_HISTORY_LIMIT", "10")
    assert Settings.from_env().history_limit == 10
