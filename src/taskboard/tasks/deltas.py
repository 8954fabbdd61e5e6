# src/taskboard/tasks/deltas.py

"""
Reversible history entries.

A Delta carries only data: the kind of the applied action, the payload needed
to replay it (redo), and the payload of its inverse (undo). The inverse kind is
looked up in INVERSE_KINDS when the entry is undone, so deltas stay
serializable.

Known gaps, kept on purpose:
- REMOVE_CUSTOM_FIELD is lossy: undo re-adds the field with zero values,
  per-task values are gone.
- UPDATE_TASK stores only the touched fields' pre-images, while
  BULK_UPDATE_TASKS stores whole pre-image tasks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from .grouping import normalize_order
from .task_actions import Action, ActionKind
from .task_models import BoardState, CustomField, Task, to_plain

logger = logging.getLogger(__name__)

INVERSE_KINDS: Final[dict[ActionKind, ActionKind]] = {
    ActionKind.ADD_TASK: ActionKind.DELETE_TASK,
    ActionKind.UPDATE_TASK: ActionKind.UPDATE_TASK,
    ActionKind.BULK_UPDATE_TASKS: ActionKind.BULK_UPDATE_TASKS,
    ActionKind.DELETE_TASK: ActionKind.ADD_TASK,
    ActionKind.BULK_DELETE_TASKS: ActionKind.BULK_RESTORE_TASKS,
    ActionKind.BULK_RESTORE_TASKS: ActionKind.BULK_DELETE_TASKS,
    ActionKind.ADD_CUSTOM_FIELD: ActionKind.REMOVE_CUSTOM_FIELD,
    ActionKind.REMOVE_CUSTOM_FIELD: ActionKind.ADD_CUSTOM_FIELD,
    ActionKind.UPDATE_GROUP_ORDER: ActionKind.UPDATE_GROUP_ORDER,
}


@dataclass(frozen=True, slots=True)
class Delta:
    action_kind: ActionKind
    snapshot_payload: Mapping[str, Any]
    inverse_payload: Mapping[str, Any]

    @property
    def inverse(self) -> Action:
        return Action(INVERSE_KINDS[self.action_kind], self.inverse_payload)

    def forward(self) -> Action:
        """The action to re-apply on redo."""
        return Action(self.action_kind, self.snapshot_payload)

    def to_dict(self) -> dict[str, Any]:
        return {
            "actionKind": self.action_kind.value,
            "snapshotPayload": to_plain(self.snapshot_payload),
            "inverse": self.inverse.to_dict(),
        }


DeltaBuilder = Callable[[Mapping[str, Any], BoardState, BoardState], "Delta | None"]


def _id(raw: Any) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _for_add_task(payload: Mapping[str, Any], before: BoardState, after: BoardState) -> Delta | None:
    # The applier prepends, so the new task sits at the head of `after`.
    if after is before or not after.tasks:
        return None
    added = after.tasks[0]
    if added.id is None:
        return None
    return Delta(ActionKind.ADD_TASK, {"task": added}, {"id": added.id})


def _for_update_task(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    task_id = _id(payload.get("id"))
    original = before.find_task(task_id) if task_id is not None else None
    if original is None:
        return None

    fields = dict(payload.get("fields") or {})
    pre_image = {k: original.get(k) for k in fields if k != "id" and original.has(k)}
    return Delta(
        ActionKind.UPDATE_TASK,
        {"id": task_id, "fields": fields},
        {"id": task_id, "fields": pre_image},
    )


def _for_bulk_update(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    updates = {
        tid: dict(fields or {})
        for tid, fields in ((_id(k), v) for k, v in (payload.get("updates") or {}).items())
        if tid is not None
    }
    touched = [t for t in before.tasks if t.id in updates]
    if not touched:
        return None
    return Delta(
        ActionKind.BULK_UPDATE_TASKS,
        {"updates": updates},
        {"updates": {t.id: t.to_dict() for t in touched}},
    )


def _for_delete_task(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    task_id = _id(payload.get("id"))
    victim = before.find_task(task_id) if task_id is not None else None
    if victim is None:
        return None
    return Delta(ActionKind.DELETE_TASK, {"id": task_id}, {"task": victim})


def _for_bulk_delete(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    ids = {i for i in (_id(r) for r in payload.get("ids") or []) if i is not None}
    victims = [t for t in before.tasks if t.id in ids]
    if not victims:
        return None
    return Delta(
        ActionKind.BULK_DELETE_TASKS,
        {"ids": [t.id for t in victims]},
        {"tasks": victims},
    )


def _for_bulk_restore(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    restored = [Task.coerce(t) for t in payload.get("tasks") or []]
    restored = [t for t in restored if t.id is not None]
    if not restored:
        return None
    return Delta(
        ActionKind.BULK_RESTORE_TASKS,
        {"tasks": restored},
        {"ids": [t.id for t in restored]},
    )


def _for_add_custom_field(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    new_field = CustomField.coerce(payload.get("field") or {})
    return Delta(ActionKind.ADD_CUSTOM_FIELD, {"field": new_field}, {"name": new_field.name})


def _for_remove_custom_field(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    name = payload.get("name")
    removed = before.find_field(name) if isinstance(name, str) else None
    if removed is None:
        return None
    return Delta(ActionKind.REMOVE_CUSTOM_FIELD, {"name": name}, {"field": removed})


def _for_update_group_order(
    payload: Mapping[str, Any], before: BoardState, after: BoardState
) -> Delta | None:
    return Delta(
        ActionKind.UPDATE_GROUP_ORDER,
        {"order": normalize_order(payload.get("order") or {})},
        {"order": dict(before.group_order)},
    )


_BUILDERS: dict[ActionKind, DeltaBuilder] = {
    ActionKind.ADD_TASK: _for_add_task,
    ActionKind.UPDATE_TASK: _for_update_task,
    ActionKind.BULK_UPDATE_TASKS: _for_bulk_update,
    ActionKind.DELETE_TASK: _for_delete_task,
    ActionKind.BULK_DELETE_TASKS: _for_bulk_delete,
    ActionKind.BULK_RESTORE_TASKS: _for_bulk_restore,
    ActionKind.ADD_CUSTOM_FIELD: _for_add_custom_field,
    ActionKind.REMOVE_CUSTOM_FIELD: _for_remove_custom_field,
    ActionKind.UPDATE_GROUP_ORDER: _for_update_group_order,
}


def make_delta(action: Action, before: BoardState, after: BoardState) -> Delta | None:
    """
    Build the history entry for `action`, or None when it cannot be undone.

    None is returned for history control actions and for lookup misses; the
    caller still commits `after` in that case.
    """
    builder = _BUILDERS.get(action.kind)
    if builder is None:
        return None
    delta = builder(action.payload or {}, before, after)
    if delta is None:
        logger.debug("No delta recorded for %s (lookup miss)", action.kind.value)
    return delta
