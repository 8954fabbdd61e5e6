# src/taskboard/tasks/grouping.py

"""
Bucket bookkeeping for GroupOrder.

All helpers return a new dict and never mutate their input. Bucket keys are
the string value of the task's grouping field (status or priority).
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .task_models import BoardState, GroupField, GroupOrder, Task


def derive_group_order(tasks: Iterable[Task], group_by: GroupField) -> GroupOrder:
    """Group task ids by their grouping field, keeping list order."""
    buckets: dict[str, list[int]] = {}
    for task in tasks:
        if task.id is None:
            continue
        buckets.setdefault(task.group_key(group_by), []).append(task.id)
    return {k: tuple(v) for k, v in buckets.items()}


def normalize_order(order: Mapping[str, Sequence[int]]) -> GroupOrder:
    return {str(k): tuple(int(i) for i in ids) for k, ids in order.items()}


def strip_ids(order: GroupOrder, ids: Collection[int]) -> GroupOrder:
    """
    Remove `ids` from every bucket they appear in.

    A bucket emptied by the removal is dropped; buckets that were already
    empty (e.g. set by UPDATE_GROUP_ORDER) are kept as they are.
    """
    if not ids:
        return dict(order)
    out: GroupOrder = {}
    for key, bucket in order.items():
        kept = tuple(i for i in bucket if i not in ids)
        if kept or not bucket:
            out[key] = kept
    return out


def insert_head(order: GroupOrder, key: str, task_id: int) -> GroupOrder:
    out = strip_ids(order, {task_id})
    out[key] = (task_id, *out.get(key, ()))
    return out


def append_tail(order: GroupOrder, key: str, task_id: int) -> GroupOrder:
    out = strip_ids(order, {task_id})
    out[key] = (*out.get(key, ()), task_id)
    return out


def move_to_tail(order: GroupOrder, task_id: int, new_key: str) -> GroupOrder:
    """Membership change: the id leaves whatever bucket held it and joins the tail of `new_key`."""
    return append_tail(order, new_key, task_id)


def reorder_bucket(order: GroupOrder, key: str, ids: Sequence[int]) -> GroupOrder:
    """Full map for UPDATE_GROUP_ORDER with one bucket replaced by `ids`."""
    out = dict(order)
    out[str(key)] = tuple(int(i) for i in ids)
    return out


def partition_problems(state: BoardState, group_by: GroupField) -> list[str]:
    """
    Describe every way GroupOrder fails to partition the current task ids.

    Empty list means: each bucket holds exactly the ids of tasks mapped to it,
    no id is duplicated, no id is stale, and no task is missing.
    """
    problems: list[str] = []
    by_id = {t.id: t for t in state.tasks}
    seen: set[int] = set()

    for key, ids in state.group_order.items():
        for task_id in ids:
            if task_id in seen:
                problems.append(f"duplicate id {task_id} (bucket {key})")
                continue
            seen.add(task_id)
            task = by_id.get(task_id)
            if task is None:
                problems.append(f"stale id {task_id} in bucket {key}")
            elif task.group_key(group_by) != key:
                problems.append(
                    f"id {task_id} in bucket {key} but task is {task.group_key(group_by)}"
                )

    for task_id in by_id:
        if task_id not in seen:
            problems.append(f"missing id {task_id}")

    return problems
