# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, hydrates the board from its snapshot
slot, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, shutdown_app, start_app
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import parse_level, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    log_file = setup_logging(
        log_dir=settings.data_dir, console_level=parse_level(settings.log_level)
    )
    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)
    try:
        start_app(state)
        run_console_loop(state)
    finally:
        shutdown_app(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
