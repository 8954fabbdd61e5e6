# src/taskboard/tasks/queries.py

"""Read-only list helpers used by the console views: filter, sort, paginate."""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .task_models import CustomValue, Task, TaskPriority, TaskStatus

T = TypeVar("T")

STATUS_ORDER: tuple[TaskStatus, ...] = tuple(TaskStatus)
PRIORITY_ORDER: tuple[TaskPriority, ...] = tuple(TaskPriority)


def filter_tasks(
    tasks: Iterable[Task],
    *,
    title: str = "",
    statuses: Collection[str] = (),
    priorities: Collection[str] = (),
    custom: Mapping[str, CustomValue] | None = None,
) -> list[Task]:
    """
    Case-insensitive title substring match, plus optional status/priority
    membership and exact custom-field values. Empty filters match everything.
    """
    needle = title.lower()
    out: list[Task] = []
    for task in tasks:
        if needle and needle not in task.title.lower():
            continue
        if statuses and task.status.value not in statuses:
            continue
        if priorities and task.priority.value not in priorities:
            continue
        if custom and any(task.custom.get(k) != v for k, v in custom.items()):
            continue
        out.append(task)
    return out


def _sort_key(task: Task, field: str) -> tuple[int, Any]:
    if field == "status":
        return (0, STATUS_ORDER.index(task.status))
    if field == "priority":
        return (0, PRIORITY_ORDER.index(task.priority))

    value = task.get(field)
    if value is None:
        return (2, 0)
    if isinstance(value, bool):
        # checked before unchecked in ascending order
        return (0, 0 if value else 1)
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value).lower())


def sort_tasks(tasks: Sequence[Task], field: str | None, *, descending: bool = False) -> list[Task]:
    """Stable sort; status and priority use their declared order, not alphabetical."""
    if not field:
        return list(tasks)
    return sorted(tasks, key=lambda t: _sort_key(t, field), reverse=descending)


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    page: int
    page_size: int
    total_pages: int
    total_items: int

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def paginate(items: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    """Slice one page; an out-of-range page is clamped to the last (or first) page."""
    page_size = max(1, int(page_size))
    total_pages = math.ceil(len(items) / page_size)
    page = min(max(1, int(page)), max(1, total_pages))
    start = (page - 1) * page_size
    return Page(
        items=tuple(items[start : start + page_size]),
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_items=len(items),
    )
