# src/taskboard/tasks/task_actions.py

"""
Action vocabulary for the board store.

An Action is a tagged value: `kind` plus a plain payload dict. Constructors
below build the payload shapes the applier expects.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .task_models import BoardState, CustomField, Task, to_plain


class ActionKind(StrEnum):
    ADD_TASK = "ADD_TASK"
    UPDATE_TASK = "UPDATE_TASK"
    DELETE_TASK = "DELETE_TASK"
    BULK_UPDATE_TASKS = "BULK_UPDATE_TASKS"
    BULK_DELETE_TASKS = "BULK_DELETE_TASKS"
    BULK_RESTORE_TASKS = "BULK_RESTORE_TASKS"
    ADD_CUSTOM_FIELD = "ADD_CUSTOM_FIELD"
    REMOVE_CUSTOM_FIELD = "REMOVE_CUSTOM_FIELD"
    UPDATE_GROUP_ORDER = "UPDATE_GROUP_ORDER"
    UNDO = "UNDO"
    REDO = "REDO"
    LOAD_STATE = "LOAD_STATE"


# Never recorded in history; never clear the redo stack.
HISTORY_CONTROL: frozenset[ActionKind] = frozenset(
    {ActionKind.UNDO, ActionKind.REDO, ActionKind.LOAD_STATE}
)


@dataclass(frozen=True, slots=True)
class Action:
    kind: ActionKind
    payload: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "payload": to_plain(self.payload or {})}


def add_task(task: Task | Mapping[str, Any]) -> Action:
    return Action(ActionKind.ADD_TASK, {"task": task})


def update_task(task_id: int, fields: Mapping[str, Any]) -> Action:
    return Action(ActionKind.UPDATE_TASK, {"id": int(task_id), "fields": dict(fields)})


def delete_task(task_id: int) -> Action:
    return Action(ActionKind.DELETE_TASK, {"id": int(task_id)})


def bulk_update_tasks(updates: Mapping[int, Mapping[str, Any]]) -> Action:
    return Action(
        ActionKind.BULK_UPDATE_TASKS,
        {"updates": {int(k): dict(v) for k, v in updates.items()}},
    )


def bulk_delete_tasks(ids: Iterable[int]) -> Action:
    return Action(ActionKind.BULK_DELETE_TASKS, {"ids": [int(i) for i in ids]})


def bulk_restore_tasks(tasks: Sequence[Task | Mapping[str, Any]]) -> Action:
    return Action(ActionKind.BULK_RESTORE_TASKS, {"tasks": list(tasks)})


def add_custom_field(custom_field: CustomField | Mapping[str, Any]) -> Action:
    return Action(ActionKind.ADD_CUSTOM_FIELD, {"field": custom_field})


def remove_custom_field(name: str) -> Action:
    return Action(ActionKind.REMOVE_CUSTOM_FIELD, {"name": name})


def update_group_order(order: Mapping[str, Sequence[int]]) -> Action:
    return Action(ActionKind.UPDATE_GROUP_ORDER, {"order": order})


def load_state(state: BoardState | Mapping[str, Any]) -> Action:
    return Action(ActionKind.LOAD_STATE, {"state": state})


def undo() -> Action:
    return Action(ActionKind.UNDO)


def redo() -> Action:
    return Action(ActionKind.REDO)
