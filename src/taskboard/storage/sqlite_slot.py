# src/taskboard/storage/sqlite_slot.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path

from ..core.ports import Snapshot
from ..tasks.task_models import SnapshotError

logger = logging.getLogger(__name__)

DEFAULT_SLOT_NAME = "taskState"


class SqliteSlot:
    """
    Snapshot slot stored as one row of a SQLite key-value table.

    The schema is intentionally simple:
    - slots(name PRIMARY KEY, data TEXT, updated_at REAL)
    - one row per named slot, upserted on write, deleted on clear

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "taskboard.sqlite3", name: str = DEFAULT_SLOT_NAME) -> None:
        self._db_path = Path(db_path)
        self._name = name
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteSlot ready db=%s slot=%s", self._db_path, self._name)

    @property
    def name(self) -> str:
        return self._name

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS slots (
                    name TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def read(self) -> Snapshot | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT data FROM slots WHERE name = ?", (self._name,))
            row = cur.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        try:
            data = json.loads(row["data"])
        except json.JSONDecodeError as e:
            raise SnapshotError(f"slot {self._name} is not valid JSON") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"slot {self._name} must hold a JSON object")
        return data

    def write(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot, ensure_ascii=False)
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO slots(name, data, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                (self._name, payload, time.time()),
            )
            conn.commit()
            logger.debug("Slot %s written (%d bytes)", self._name, len(payload))
        finally:
            conn.close()

    def clear(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM slots WHERE name = ?", (self._name,))
            conn.commit()
            logger.debug("Slot %s cleared", self._name)
        finally:
            conn.close()
