# src/taskboard/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from typing import Any

from ..core.state import AppState
from ..tasks import task_actions as actions
from ..tasks.grouping import partition_problems, reorder_bucket
from ..tasks.queries import filter_tasks, paginate, sort_tasks
from ..tasks.task_models import CORE_FIELDS, CustomFieldType, TaskPriority, TaskStatus
from .render import format_task, render_board, render_list

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "y", "on", "x"}
_FALSE = {"0", "false", "no", "n", "off", ""}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /undo, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_args(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `key=value` tokens from positional ones."""
    positional: list[str] = []
    pairs: dict[str, str] = {}
    for token in args:
        key, sep, value = token.partition("=")
        if sep and key:
            pairs[key] = value
        else:
            positional.append(token)
    return positional, pairs


def _parse_ids(tokens: list[str]) -> list[int] | None:
    ids: list[int] = []
    for token in tokens:
        for piece in token.split(","):
            piece = piece.strip().lstrip("#")
            if not piece:
                continue
            try:
                ids.append(int(piece))
            except ValueError:
                return None
    return ids


def _coerce_fields(state: AppState, pairs: dict[str, str]) -> tuple[dict[str, Any], str | None]:
    """
    Validate `key=value` pairs against core fields and the custom-field schema.
    Returns (fields, error); the store itself never validates.
    """
    schema = {f.name.lower(): f for f in state.store.state.custom_fields}
    fields: dict[str, Any] = {}

    for key, raw in pairs.items():
        lower = key.lower()
        if lower == "title":
            fields["title"] = raw
        elif lower == "status":
            if raw.lower() not in {s.value for s in TaskStatus}:
                return {}, f"Invalid status: {raw}. Use one of: {', '.join(TaskStatus)}."
            fields["status"] = TaskStatus(raw.lower())
        elif lower == "priority":
            if raw.lower() not in {p.value for p in TaskPriority}:
                return {}, f"Invalid priority: {raw}. Use one of: {', '.join(TaskPriority)}."
            fields["priority"] = TaskPriority(raw.lower())
        elif lower in schema:
            f = schema[lower]
            if f.type is CustomFieldType.NUMBER:
                try:
                    fields[f.name] = int(raw)
                except ValueError:
                    try:
                        fields[f.name] = float(raw)
                    except ValueError:
                        return {}, f"Field {f.name} expects a number, got {raw!r}."
            elif f.type is CustomFieldType.CHECKBOX:
                if raw.lower() in _TRUE:
                    fields[f.name] = True
                elif raw.lower() in _FALSE:
                    fields[f.name] = False
                else:
                    return {}, f"Field {f.name} expects yes/no, got {raw!r}."
            else:
                fields[f.name] = raw
        else:
            return {}, f"Unknown field: {key}. Use /fields to list custom fields."

    return fields, None


def _missing(state: AppState, ids: list[int]) -> list[int]:
    return [i for i in ids if state.store.state.find_task(i) is None]


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    board = store.state
    history = store.history
    return (
        "Status:\n"
        f"  Tasks: {len(board.tasks)}\n"
        f"  Custom fields: {len(board.custom_fields)}\n"
        f"  Grouped by: {store.group_by.value}\n"
        f"  Undo steps: {len(history.past)} | Redo steps: {len(history.future)}\n"
        f"  Storage: {getattr(state.settings, 'storage', 'json')}"
    )


def cmd_board(state: AppState, args: list[str]) -> str:
    return render_board()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [title=..] [status=a,b] [priority=a,b] [<field>=..] [sort=field] [desc] [page=N] [size=N]
    """
    positional, pairs = _split_args(args)
    board = state.store.state

    title = pairs.pop("title", "")
    statuses = [s for s in pairs.pop("status", "").split(",") if s]
    priorities = [p for p in pairs.pop("priority", "").split(",") if p]
    sort_field = pairs.pop("sort", "") or None
    try:
        page = int(pairs.pop("page", "1"))
        size = int(pairs.pop("size", "10"))
    except ValueError:
        return "Usage: /list ... page=N size=N (numbers)."

    custom, error = _coerce_fields(state, pairs)
    if error:
        return error

    tasks = filter_tasks(
        board.tasks, title=title, statuses=statuses, priorities=priorities, custom=custom
    )
    tasks = sort_tasks(tasks, sort_field, descending="desc" in positional)
    result = paginate(tasks, page, size)

    body = render_list(
        list(result.items), board.custom_fields, start=(result.page - 1) * result.page_size + 1
    )
    return f"{body}\nPage {result.page}/{max(1, result.total_pages)} ({result.total_items} tasks)"


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [status=..] [priority=..] [<field>=..]"""
    positional, pairs = _split_args(args)
    fields, error = _coerce_fields(state, pairs)
    if error:
        return error

    title = " ".join(positional).strip() or str(fields.get("title", "")).strip()
    if not title:
        return "Usage: /add <title> [status=..] [priority=..] [<field>=..]"
    fields["title"] = title
    return _dispatch_add(state, fields)


def add_plain_title(state: AppState, text: str) -> str:
    """Add a task titled with `text` as typed; no key=value parsing."""
    title = text.strip()
    if not title:
        return "Usage: type a task title, or /add <title> [status=..] [priority=..]"
    return _dispatch_add(state, {"title": title})


def _dispatch_add(state: AppState, fields: dict[str, Any]) -> str:
    board = state.store.dispatch(actions.add_task(fields))
    return f"Added {format_task(board.tasks[0], board.custom_fields)}"


def cmd_set(state: AppState, args: list[str]) -> str:
    """/set <id> key=value ..."""
    positional, pairs = _split_args(args)
    ids = _parse_ids(positional)
    if not ids or len(ids) != 1 or not pairs:
        return "Usage: /set <id> key=value ..."
    if _missing(state, ids):
        return f"Task #{ids[0]} not found."

    fields, error = _coerce_fields(state, pairs)
    if error:
        return error

    board = state.store.dispatch(actions.update_task(ids[0], fields))
    task = board.find_task(ids[0])
    return f"Updated {format_task(task, board.custom_fields)}" if task else "Updated."


def cmd_bulk(state: AppState, args: list[str]) -> str:
    """/bulk <id,id,...> key=value ..."""
    positional, pairs = _split_args(args)
    ids = _parse_ids(positional)
    if not ids or not pairs:
        return "Usage: /bulk <id,id,...> key=value ..."

    fields, error = _coerce_fields(state, pairs)
    if error:
        return error

    missing = _missing(state, ids)
    found = [i for i in ids if i not in missing]
    if not found:
        return "None of these tasks exist."

    state.store.dispatch(actions.bulk_update_tasks({i: fields for i in found}))
    note = f" (not found: {', '.join(map(str, missing))})" if missing else ""
    return f"Updated {len(found)} task(s){note}."


def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <id> ..."""
    ids = _parse_ids(args)
    if not ids:
        return "Usage: /done <id> ..."
    missing = set(_missing(state, ids))
    found = [i for i in ids if i not in missing]
    if not found:
        return "None of these tasks exist."

    if len(found) == 1:
        state.store.dispatch(actions.update_task(found[0], {"status": TaskStatus.COMPLETED}))
    else:
        state.store.dispatch(
            actions.bulk_update_tasks({i: {"status": TaskStatus.COMPLETED} for i in found})
        )
    return f"Completed {len(found)} task(s)."


def cmd_rm(state: AppState, args: list[str]) -> str:
    """/rm <id> ..."""
    ids = _parse_ids(args)
    if not ids:
        return "Usage: /rm <id> ..."
    missing = set(_missing(state, ids))
    found = [i for i in ids if i not in missing]
    if not found:
        return "None of these tasks exist."

    if len(found) == 1:
        state.store.dispatch(actions.delete_task(found[0]))
    else:
        state.store.dispatch(actions.bulk_delete_tasks(found))
    return f"Deleted {len(found)} task(s). Use /undo to restore."


def cmd_fields(state: AppState, args: list[str]) -> str:
    fields = state.store.state.custom_fields
    if not fields:
        return "No custom fields. Add one with /field add <name> <text|number|checkbox>."
    lines = ["Custom fields:"]
    lines.extend(f"  {f.name} ({f.type.value})" for f in fields)
    return "\n".join(lines)


def cmd_field(state: AppState, args: list[str]) -> str:
    """
    /field add <name> <text|number|checkbox>
    /field rm <name>
    """
    usage = "Usage: /field add <name> <text|number|checkbox> | /field rm <name>"
    if not args:
        return usage

    sub = args[0].lower()
    board = state.store.state

    if sub == "add" and len(args) == 3:
        name, raw_type = args[1].strip(), args[2].lower()
        if raw_type not in {t.value for t in CustomFieldType}:
            return f"Invalid field type: {raw_type}. Use text, number or checkbox."
        if name.lower() in CORE_FIELDS:
            return f"{name} is a built-in task field."
        if any(f.name.lower() == name.lower() for f in board.custom_fields):
            return f"Field {name} already exists."
        state.store.dispatch(
            actions.add_custom_field({"name": name, "type": raw_type})
        )
        return f"Added field {name} ({raw_type})."

    if sub in ("rm", "remove") and len(args) == 2:
        name = next((f.name for f in board.custom_fields if f.name.lower() == args[1].lower()), None)
        if name is None:
            return f"Field {args[1]} not found."
        state.store.dispatch(actions.remove_custom_field(name))
        return f"Removed field {name}. Undo re-adds it with empty values."

    return usage


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <id> <position>: reorder a task inside its own bucket (1 = top)."""
    if len(args) != 2:
        return "Usage: /move <id> <position>"
    ids = _parse_ids(args[:1])
    try:
        position = int(args[1])
    except ValueError:
        return "Usage: /move <id> <position>"
    if not ids:
        return "Usage: /move <id> <position>"

    task_id = ids[0]
    order = state.store.state.group_order
    key = next((k for k, bucket in order.items() if task_id in bucket), None)
    if key is None:
        return f"Task #{task_id} is not on the board."

    bucket = [i for i in order[key] if i != task_id]
    index = min(max(position - 1, 0), len(bucket))
    bucket.insert(index, task_id)
    state.store.dispatch(actions.update_group_order(reorder_bucket(order, key, bucket)))
    return f"Moved #{task_id} to position {index + 1} in {key}."


def cmd_undo(state: AppState, args: list[str]) -> str:
    if not state.store.can_undo:
        return "Nothing to undo."
    state.store.undo()
    return "Undone."


def cmd_redo(state: AppState, args: list[str]) -> str:
    if not state.store.can_redo:
        return "Nothing to redo."
    state.store.redo()
    return "Redone."


def cmd_check(state: AppState, args: list[str]) -> str:
    problems = partition_problems(state.store.state, state.store.group_by)
    if not problems:
        return "Board is consistent."
    logger.warning("Board consistency check found %d problem(s)", len(problems))
    return "Board problems:\n" + "\n".join(f"  - {p}" for p in problems)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show board and history status.")
registry.register("board", cmd_board, help_text="Show the board grouped into buckets.", aliases=["b"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [title=..] [status=a,b] [priority=..] [sort=field] [desc] [page=N] [size=N].",
    aliases=["ls"],
)
registry.register("add", cmd_add, help_text="Add a task: /add <title> [status=..] [priority=..].")
registry.register("set", cmd_set, help_text="Update a task: /set <id> key=value ...")
registry.register("bulk", cmd_bulk, help_text="Update many tasks: /bulk <id,id> key=value ...")
registry.register("done", cmd_done, help_text="Mark tasks completed: /done <id> ...")
registry.register("rm", cmd_rm, help_text="Delete tasks: /rm <id> ...", aliases=["del"])
registry.register("fields", cmd_fields, help_text="List custom fields.")
registry.register(
    "field", cmd_field, help_text="Custom fields: /field add <name> <type> | /field rm <name>."
)
registry.register("move", cmd_move, help_text="Reorder within a bucket: /move <id> <position>.")
registry.register("undo", cmd_undo, help_text="Undo the last change.", aliases=["u"])
registry.register("redo", cmd_redo, help_text="Redo the last undone change.", aliases=["r"])
registry.register("check", cmd_check, help_text="Verify bucket/task consistency.")
