# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a safe default; invalid values fall back to it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.history import MAX_HISTORY_LENGTH

ENV_PREFIX = "TASKBOARD"

STORAGE_BACKENDS = ("json", "sqlite")
GROUP_FIELDS = ("status", "priority")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Board behaviour ----
    group_by: str
    history_limit: int
    seed_demo: bool

    # ---- Persistence ----
    storage: str
    slot_name: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    snapshot_path: Path
    db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        group_by = _env_choice(_k("GROUP_BY"), GROUP_FIELDS, "status")
        history_limit = min(
            MAX_HISTORY_LENGTH, max(0, _env_int(_k("HISTORY_LIMIT"), MAX_HISTORY_LENGTH))
        )
        seed_demo = _env_bool(_k("SEED_DEMO"), False)

        storage = _env_choice(_k("STORAGE"), STORAGE_BACKENDS, "json")
        slot_name = _env(_k("SLOT_NAME"), "taskState").strip() or "taskState"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        snapshot_path = _env_path(_k("SNAPSHOT_PATH"), data_dir / f"{slot_name}.json")
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskboard.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            group_by=group_by,
            history_limit=history_limit,
            seed_demo=seed_demo,
            storage=storage,
            slot_name=slot_name,
            data_dir=data_dir,
            snapshot_path=snapshot_path,
            db_path=db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
