# src/taskboard/storage/seed.py

from __future__ import annotations

from ..tasks.grouping import derive_group_order
from ..tasks.task_models import BoardState, GroupField, Task, TaskPriority, TaskStatus

_DEMO_TASKS: tuple[tuple[str, TaskStatus, TaskPriority], ...] = (
    ("Write project brief", TaskStatus.COMPLETED, TaskPriority.HIGH),
    ("Set up repository", TaskStatus.COMPLETED, TaskPriority.MEDIUM),
    ("Design board layout", TaskStatus.IN_PROGRESS, TaskPriority.HIGH),
    ("Draft onboarding notes", TaskStatus.IN_PROGRESS, TaskPriority.LOW),
    ("Plan release checklist", TaskStatus.NOT_STARTED, TaskPriority.URGENT),
    ("Collect feedback", TaskStatus.NOT_STARTED, TaskPriority.NONE),
)


def demo_state(group_by: GroupField = GroupField.STATUS) -> BoardState:
    """Small fixed board for first runs; group order is derived from list order."""
    tasks = tuple(
        Task(id=i, title=title, status=status, priority=priority)
        for i, (title, status, priority) in enumerate(_DEMO_TASKS, start=1)
    )
    return BoardState(tasks=tasks, group_order=derive_group_order(tasks, group_by))
