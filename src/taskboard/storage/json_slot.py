# src/taskboard/storage/json_slot.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..core.ports import Snapshot
from ..tasks.task_models import SnapshotError

logger = logging.getLogger(__name__)


class JsonFileSlot:
    """
    Snapshot slot stored as one JSON file.

    Writes go to a sibling .tmp file first and are moved into place with
    os.replace, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Snapshot | None:
        if not self._path.exists():
            return None
        raw = self._path.read_text("utf-8")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"snapshot {self._path} is not valid JSON") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"snapshot {self._path} must hold a JSON object")
        return data

    def write(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)
        logger.debug("Snapshot written to %s", self._path)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.debug("Snapshot cleared at %s", self._path)
