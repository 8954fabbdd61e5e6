# src/taskboard/tasks/applier.py

"""
Pure state transitions: (BoardState, Action) -> BoardState.

Lookup misses (unknown task id, unknown field name) return the input state
object unchanged, and so does a payload that cannot be decoded (logged at
WARNING). History control actions (UNDO/REDO) are not handled here.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from . import grouping
from .task_actions import Action, ActionKind
from .task_models import BoardState, CustomField, GroupField, SnapshotError, Task

logger = logging.getLogger(__name__)

Handler = Callable[[BoardState, Mapping[str, Any], GroupField], BoardState]


def next_task_id(state: BoardState) -> int:
    """Clock-based id, bumped past the largest existing id to stay monotonic."""
    now_ms = int(time.time() * 1000)
    return max(now_ms, max(state.task_ids(), default=0) + 1)


def _coerce_id(raw: Any) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _add_task(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    task = Task.coerce(payload.get("task") or {})
    task_id = task.id if task.id is not None else next_task_id(state)
    task = replace(task, id=task_id).conformed(state.custom_fields)

    order = grouping.insert_head(state.group_order, task.group_key(group_by), task_id)
    return replace(state, tasks=(task, *state.tasks), group_order=order)


def _update_task(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    task_id = _coerce_id(payload.get("id"))
    old = state.find_task(task_id) if task_id is not None else None
    if old is None:
        return state

    new = old.merged(payload.get("fields") or {}, state.field_names())
    order = state.group_order
    old_key, new_key = old.group_key(group_by), new.group_key(group_by)
    if old_key != new_key:
        order = grouping.move_to_tail(order, task_id, new_key)

    tasks = tuple(new if t.id == task_id else t for t in state.tasks)
    return replace(state, tasks=tasks, group_order=order)


def _bulk_update(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    updates: dict[int, Mapping[str, Any]] = {}
    for raw_id, fields in (payload.get("updates") or {}).items():
        task_id = _coerce_id(raw_id)
        if task_id is not None:
            updates[task_id] = fields or {}

    known = {t.id: t for t in state.tasks if t.id in updates}
    if not known:
        return state

    schema = state.field_names()
    merged = {tid: known[tid].merged(updates[tid], schema) for tid in updates if tid in known}

    order = state.group_order
    for tid, new in merged.items():
        old_key, new_key = known[tid].group_key(group_by), new.group_key(group_by)
        if old_key != new_key:
            order = grouping.move_to_tail(order, tid, new_key)

    tasks = tuple(merged.get(t.id, t) for t in state.tasks)
    return replace(state, tasks=tasks, group_order=order)


def _delete_task(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    task_id = _coerce_id(payload.get("id"))
    if task_id is None or state.find_task(task_id) is None:
        return state
    return replace(
        state,
        tasks=tuple(t for t in state.tasks if t.id != task_id),
        group_order=grouping.strip_ids(state.group_order, {task_id}),
    )


def _bulk_delete(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    ids = {i for i in (_coerce_id(r) for r in payload.get("ids") or []) if i is not None}
    if not any(t.id in ids for t in state.tasks):
        return state
    return replace(
        state,
        tasks=tuple(t for t in state.tasks if t.id not in ids),
        group_order=grouping.strip_ids(state.group_order, ids),
    )


def _bulk_restore(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    restored = [Task.coerce(t).conformed(state.custom_fields) for t in payload.get("tasks") or []]
    restored = [t for t in restored if t.id is not None]
    if not restored:
        return state

    order = state.group_order
    for task in restored:
        if task.id is not None:
            order = grouping.append_tail(order, task.group_key(group_by), task.id)

    return replace(state, tasks=(*restored, *state.tasks), group_order=order)


def _add_custom_field(
    state: BoardState, payload: Mapping[str, Any], group_by: GroupField
) -> BoardState:
    new_field = CustomField.coerce(payload.get("field") or {})
    zero = new_field.type.zero_value()
    tasks = tuple(replace(t, custom={**t.custom, new_field.name: zero}) for t in state.tasks)
    return replace(state, tasks=tasks, custom_fields=(new_field, *state.custom_fields))


def _remove_custom_field(
    state: BoardState, payload: Mapping[str, Any], group_by: GroupField
) -> BoardState:
    name = payload.get("name")
    if not isinstance(name, str) or state.find_field(name) is None:
        return state

    tasks = tuple(
        replace(t, custom={k: v for k, v in t.custom.items() if k != name}) for t in state.tasks
    )
    fields = tuple(f for f in state.custom_fields if f.name != name)
    return replace(state, tasks=tasks, custom_fields=fields)


def _update_group_order(
    state: BoardState, payload: Mapping[str, Any], group_by: GroupField
) -> BoardState:
    return replace(state, group_order=grouping.normalize_order(payload.get("order") or {}))


def _load_state(state: BoardState, payload: Mapping[str, Any], group_by: GroupField) -> BoardState:
    raw = payload.get("state")
    if raw is None:
        return state
    return BoardState.coerce(raw, group_by=group_by)


_HANDLERS: dict[ActionKind, Handler] = {
    ActionKind.ADD_TASK: _add_task,
    ActionKind.UPDATE_TASK: _update_task,
    ActionKind.BULK_UPDATE_TASKS: _bulk_update,
    ActionKind.DELETE_TASK: _delete_task,
    ActionKind.BULK_DELETE_TASKS: _bulk_delete,
    ActionKind.BULK_RESTORE_TASKS: _bulk_restore,
    ActionKind.ADD_CUSTOM_FIELD: _add_custom_field,
    ActionKind.REMOVE_CUSTOM_FIELD: _remove_custom_field,
    ActionKind.UPDATE_GROUP_ORDER: _update_group_order,
    ActionKind.LOAD_STATE: _load_state,
}


def apply_action(
    state: BoardState, action: Action, *, group_by: GroupField = GroupField.STATUS
) -> BoardState:
    handler = _HANDLERS.get(action.kind)
    if handler is None:
        return state
    try:
        return handler(state, action.payload or {}, group_by)
    except (SnapshotError, TypeError, ValueError) as e:
        logger.warning("Ignoring %s with malformed payload: %s", action.kind.value, e)
        return state
