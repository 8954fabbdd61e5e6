# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskboard.log"

# Loggers that fire on every committed change; on the console they only show warnings.
_PER_COMMIT_LOGGERS = (
    "taskboard.storage.json_slot",
    "taskboard.storage.sqlite_slot",
    "taskboard.core.store",
)


def parse_level(name: str | int | None, default: int = logging.INFO) -> int:
    """Map "debug"/"INFO"/20 to a logging level; unknown names give `default`."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable:
    - board logs pass, except per-commit slot/store chatter below WARNING
    - captured Python warnings ('py.warnings') only at ERROR+
    - any other library only at ERROR+
    """

    def __init__(self, package: str = "taskboard") -> None:
        super().__init__()
        self._package = package

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == self._package or name.startswith(self._package + "."):
            if name.startswith(_PER_COMMIT_LOGGERS):
                return record.levelno >= logging.WARNING
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Install two root handlers and return the log file path.

    - stderr: filtered for interactive use, at `console_level`
    - <log_dir>/taskboard.log: every record at `file_level`, dispatches included

    Existing root handlers are replaced, so calling it twice does not duplicate output.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(parse_level(console_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(parse_level(file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
