# tests/test_history.py

from __future__ import annotations

from taskboard.tasks import task_actions as actions
from taskboard.tasks.grouping import partition_problems
from taskboard.tasks.history import MAX_HISTORY_LENGTH, HistoryState, reduce_history
from taskboard.tasks.task_models import BoardState, GroupField, TaskStatus


def _run(history: HistoryState, *steps: actions.Action) -> HistoryState:
    for action in steps:
        history = reduce_history(history, action)
    return history


def test_update_undo_redo_restores_status_and_buckets() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_task({"title": "A", "status": "not_started", "priority": "low"}),
    )
    x = h.present.tasks[0].id
    assert x is not None
    added = h.present

    h = _run(h, actions.update_task(x, {"status": "completed"}))
    assert h.present.find_task(x).status is TaskStatus.COMPLETED
    assert x not in h.present.group_order.get("not_started", ())
    assert h.present.group_order["completed"] == (x,)
    completed = h.present

    h = _run(h, actions.undo())
    assert h.present.find_task(x).status is TaskStatus.NOT_STARTED
    assert h.present == added
    assert h.can_redo

    h = _run(h, actions.redo())
    assert h.present == completed


def test_bulk_delete_undo_restores_tasks_at_head_and_ids_in_buckets() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_task({"id": 1, "title": "one"}),
        actions.add_task({"id": 2, "title": "two", "status": "in_progress"}),
        actions.add_task({"id": 3, "title": "three"}),
    )
    before = h.present

    h = _run(h, actions.bulk_delete_tasks([1, 2]))
    assert h.present.task_ids() == [3]
    assert all(i not in ids for ids in h.present.group_order.values() for i in (1, 2))

    h = _run(h, actions.undo())
    assert h.present.task_ids()[:2] == [2, 1]
    assert {t.id: t for t in h.present.tasks} == {t.id: t for t in before.tasks}
    assert 1 in h.present.group_order["not_started"]
    assert h.present.group_order["in_progress"] == (2,)
    assert partition_problems(h.present, GroupField.STATUS) == []


def test_past_is_capped_and_earliest_add_is_unreachable() -> None:
    h = HistoryState(present=BoardState())
    for i in range(1, MAX_HISTORY_LENGTH + 2):
        h = reduce_history(h, actions.add_task({"id": i, "title": f"t{i}"}))

    assert len(h.past) == MAX_HISTORY_LENGTH
    assert len(h.present.tasks) == MAX_HISTORY_LENGTH + 1

    for _ in range(MAX_HISTORY_LENGTH + 5):
        h = reduce_history(h, actions.undo())

    assert not h.can_undo
    assert h.present.task_ids() == [1]
    assert len(h.future) == MAX_HISTORY_LENGTH


def test_redo_after_undo_reproduces_state_exactly() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_task({"id": 1, "title": "one"}),
        actions.add_custom_field({"name": "points", "type": "number"}),
        actions.update_group_order({"not_started": [1], "completed": []}),
    )
    target = h.present
    for _ in range(3):
        h = reduce_history(h, actions.undo())
    assert h.present == BoardState()
    for _ in range(3):
        h = reduce_history(h, actions.redo())
    assert h.present == target


def test_new_action_clears_future_but_a_miss_is_not_recorded() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_task({"id": 1, "title": "one"}),
        actions.update_task(1, {"title": "uno"}),
        actions.undo(),
    )
    assert len(h.past) == 1 and len(h.future) == 1

    h = reduce_history(h, actions.delete_task(404))
    assert len(h.past) == 1
    assert h.future == ()


def test_undo_and_redo_on_empty_stacks_return_same_history() -> None:
    h = HistoryState(present=BoardState())
    assert reduce_history(h, actions.undo()) is h
    assert reduce_history(h, actions.redo()) is h


def test_load_state_clears_both_stacks() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_task({"id": 1, "title": "one"}),
        actions.add_task({"id": 2, "title": "two"}),
        actions.undo(),
    )
    h = reduce_history(h, actions.load_state({"tasks": [{"id": 9, "title": "loaded"}]}))
    assert h.present.task_ids() == [9]
    assert h.past == () and h.future == ()


def test_remove_custom_field_undo_is_lossy() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_custom_field({"name": "points", "type": "number"}),
        actions.add_task({"id": 1, "title": "one", "points": 8}),
        actions.remove_custom_field("points"),
        actions.undo(),
    )
    assert h.present.field_names() == ["points"]
    assert h.present.find_task(1).custom == {"points": 0}


def test_custom_limit_bounds_both_stacks() -> None:
    h = HistoryState(present=BoardState())
    for i in range(1, 6):
        h = reduce_history(h, actions.add_task({"id": i}), limit=3)
    assert len(h.past) == 3
    for _ in range(3):
        h = reduce_history(h, actions.undo(), limit=3)
    assert len(h.future) == 3
    assert h.present.task_ids() == [2, 1]


def test_limit_above_cap_still_keeps_fifty() -> None:
    h = HistoryState(present=BoardState())
    for i in range(1, MAX_HISTORY_LENGTH + 30):
        h = reduce_history(h, actions.add_task({"id": i}), limit=200)
    assert len(h.past) == MAX_HISTORY_LENGTH

    for _ in range(MAX_HISTORY_LENGTH + 30):
        h = reduce_history(h, actions.undo(), limit=200)
    assert len(h.future) == MAX_HISTORY_LENGTH


def test_bulk_update_undo_redo_through_history() -> None:
    h = _run(
        HistoryState(present=BoardState()),
        actions.add_custom_field({"name": "points", "type": "number"}),
        actions.add_task({"id": 1, "title": "one"}),
        actions.add_task({"id": 2, "title": "two", "status": "in_progress"}),
    )
    start = h.present

    h = _run(
        h,
        actions.bulk_update_tasks(
            {1: {"status": "completed", "points": 3}, 2: {"title": "renamed"}}
        ),
    )
    after = h.present
    assert after.find_task(1).status is TaskStatus.COMPLETED
    assert after.find_task(1).custom == {"points": 3}
    assert after.find_task(2).title == "renamed"
    assert partition_problems(after, GroupField.STATUS) == []

    h = _run(h, actions.undo())
    assert h.present == start
    assert partition_problems(h.present, GroupField.STATUS) == []

    h = _run(h, actions.redo())
    assert h.present == after
    assert partition_problems(h.present, GroupField.STATUS) == []


def test_malformed_payload_is_not_recorded() -> None:
    h = _run(HistoryState(present=BoardState()), actions.add_task({"id": 1}))
    before = h.present

    h = _run(h, actions.add_custom_field({"name": "due", "type": "date"}))
    assert h.present is before
    assert len(h.past) == 1
