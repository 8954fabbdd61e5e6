# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import add_plain_title
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..core.store import provide_store

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def handle_line(state: AppState, line: str) -> str | None:
    """
    One REPL step: slash commands go to the registry, plain text becomes the
    title of a new task exactly as typed. Returns the reply, or None for blank input.
    """
    line = line.strip()
    if not line:
        return None

    try:
        if not line.startswith("/"):
            return add_plain_title(state, line)
        return command_registry.handle(state, line)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(
    state: AppState,
    *,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store.state.tasks))
    output_fn(f"[{_ts_local()}] [CONSOLE] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    with provide_store(state.store):
        while True:
            try:
                user_input = input_fn(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                output_fn("")
                break

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            reply = handle_line(state, user_input)
            if reply is not None:
                output_fn(f"[{_ts_local()}] {reply}")

    logger.info("Console connector finished.")
