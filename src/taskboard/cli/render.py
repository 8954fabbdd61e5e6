# src/taskboard/cli/render.py

"""Plain-text views of the board. Views read the store bound by provide_store()."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..core.store import TaskStore, use_store
from ..tasks.task_models import CustomField, GroupField, Task, TaskPriority, TaskStatus

STATUS_LABELS: dict[str, str] = {
    TaskStatus.NOT_STARTED: "Todo",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Done",
}

PRIORITY_LABELS: dict[str, str] = {
    TaskPriority.NONE: "No priority",
    TaskPriority.LOW: "Low",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.HIGH: "High",
    TaskPriority.URGENT: "Urgent",
}


def bucket_label(key: str, group_by: GroupField) -> str:
    labels = STATUS_LABELS if group_by is GroupField.STATUS else PRIORITY_LABELS
    return labels.get(key, key)


def _bucket_keys(order_keys: Iterable[str], group_by: GroupField) -> list[str]:
    declared = [m.value for m in (TaskStatus if group_by is GroupField.STATUS else TaskPriority)]
    extra = [k for k in order_keys if k not in declared]
    return declared + extra


def format_value(value: object) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_task(task: Task, custom_fields: Sequence[CustomField] = ()) -> str:
    parts = [f"#{task.id}", task.title or "<untitled>", f"[{task.status.value}/{task.priority.value}]"]
    for f in custom_fields:
        parts.append(f"{f.name}={format_value(task.custom.get(f.name, ''))}")
    return "  ".join(parts)


def render_board(store: TaskStore | None = None) -> str:
    """One section per bucket, ids in GroupOrder sequence."""
    store = store or use_store()
    state = store.state
    by_id = {t.id: t for t in state.tasks}

    lines: list[str] = []
    for key in _bucket_keys(state.group_order, store.group_by):
        ids = [i for i in state.group_order.get(key, ()) if i in by_id]
        lines.append(f"== {bucket_label(key, store.group_by)} ({len(ids)}) ==")
        if not ids:
            lines.append("  (empty)")
        for task_id in ids:
            lines.append("  " + format_task(by_id[task_id], state.custom_fields))
    return "\n".join(lines)


def render_list(
    tasks: Sequence[Task], custom_fields: Sequence[CustomField] = (), *, start: int = 1
) -> str:
    if not tasks:
        return "No tasks."
    return "\n".join(
        f"{i}. {format_task(t, custom_fields)}" for i, t in enumerate(tasks, start=start)
    )
