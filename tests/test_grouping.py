# tests/test_grouping.py

from __future__ import annotations

from taskboard.tasks import grouping
from taskboard.tasks.task_models import BoardState, GroupField, Task, TaskStatus


def test_derive_group_order_keeps_list_order() -> None:
    tasks = [
        Task(id=1, status=TaskStatus.COMPLETED),
        Task(id=2),
        Task(id=3, status=TaskStatus.COMPLETED),
        Task(id=None, title="never added"),
    ]
    assert grouping.derive_group_order(tasks, GroupField.STATUS) == {
        "completed": (1, 3),
        "not_started": (2,),
    }


def test_strip_ids_drops_only_buckets_it_empties() -> None:
    order = {"a": (1, 2), "b": (3,), "c": ()}
    assert grouping.strip_ids(order, {2, 3}) == {"a": (1,), "c": ()}
    # input is never mutated
    assert order == {"a": (1, 2), "b": (3,), "c": ()}


def test_insert_head_and_append_tail_never_duplicate() -> None:
    order = {"a": (1, 2)}
    assert grouping.insert_head(order, "a", 2) == {"a": (2, 1)}
    assert grouping.append_tail(order, "a", 1) == {"a": (2, 1)}
    assert grouping.move_to_tail(order, 1, "b") == {"a": (2,), "b": (1,)}


def test_reorder_bucket_leaves_other_buckets() -> None:
    order = {"a": (1, 2, 3), "b": (4,)}
    assert grouping.reorder_bucket(order, "a", [3, 1, 2]) == {"a": (3, 1, 2), "b": (4,)}


def test_normalize_order_coerces_keys_and_ids() -> None:
    assert grouping.normalize_order({"a": ["1", 2]}) == {"a": (1, 2)}


def test_partition_problems_reports_each_kind() -> None:
    state = BoardState(
        tasks=(Task(id=1), Task(id=2), Task(id=3, status=TaskStatus.COMPLETED)),
        group_order={"not_started": (1, 1, 9), "in_progress": (3,)},
    )
    problems = grouping.partition_problems(state, GroupField.STATUS)

    assert "duplicate id 1 (bucket not_started)" in problems
    assert "stale id 9 in bucket not_started" in problems
    assert "id 3 in bucket in_progress but task is completed" in problems
    assert "missing id 2" in problems
    assert len(problems) == 4


def test_partition_problems_empty_for_consistent_board() -> None:
    tasks = (Task(id=1), Task(id=2, status=TaskStatus.IN_PROGRESS))
    state = BoardState(tasks=tasks, group_order=grouping.derive_group_order(tasks, GroupField.STATUS))
    assert grouping.partition_problems(state, GroupField.STATUS) == []
