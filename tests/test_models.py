# tests/test_models.py

from __future__ import annotations

import pytest

from taskboard.tasks.task_models import (
    BoardState,
    CustomField,
    CustomFieldType,
    GroupField,
    SnapshotError,
    Task,
    TaskPriority,
    TaskStatus,
    to_plain,
)


def test_enum_parse_falls_back_to_defaults() -> None:
    assert TaskStatus.parse("Completed") is TaskStatus.COMPLETED
    assert TaskStatus.parse("blocked") is TaskStatus.NOT_STARTED
    assert TaskStatus.parse(None) is TaskStatus.NOT_STARTED
    assert TaskPriority.parse("URGENT") is TaskPriority.URGENT
    assert TaskPriority.parse("critical") is TaskPriority.NONE
    assert GroupField.parse("priority") is GroupField.PRIORITY
    assert GroupField.parse("assignee") is GroupField.STATUS


def test_zero_values_per_field_type() -> None:
    assert CustomFieldType.TEXT.zero_value() == ""
    assert CustomFieldType.NUMBER.zero_value() == 0
    assert CustomFieldType.CHECKBOX.zero_value() is False


def test_task_dict_is_flat_and_round_trips_custom_values() -> None:
    task = Task(id=3, title="t", status=TaskStatus.IN_PROGRESS, custom={"points": 5})
    raw = task.to_dict()
    assert raw == {
        "id": 3,
        "title": "t",
        "status": "in_progress",
        "priority": "none",
        "points": 5,
    }
    assert Task.from_dict(raw) == task


def test_task_from_dict_rejects_bad_id() -> None:
    with pytest.raises(SnapshotError):
        Task.from_dict({"id": "abc"})
    assert Task.from_dict({"id": "12"}).id == 12


def test_merged_and_conformed_respect_schema() -> None:
    schema = (CustomField("points", CustomFieldType.NUMBER),)
    task = Task(id=1, custom={"old": "x"}).conformed(schema)
    assert task.custom == {"points": 0}

    merged = task.merged({"points": 3, "old": "y", "status": "completed"}, ["points"])
    assert merged.custom == {"points": 3}
    assert merged.status is TaskStatus.COMPLETED


def test_custom_field_coerce_rejects_unknown_type() -> None:
    with pytest.raises(SnapshotError):
        CustomField.coerce({"name": "x", "type": "date"})


def test_board_state_from_dict_validates_shape() -> None:
    with pytest.raises(SnapshotError):
        BoardState.from_dict([])  # type: ignore[arg-type]
    with pytest.raises(SnapshotError):
        BoardState.from_dict({"tasks": {"a": 1}})
    with pytest.raises(SnapshotError):
        BoardState.from_dict({"tasks": [{"title": "no id"}]})
    with pytest.raises(SnapshotError):
        BoardState.from_dict({"tasks": [], "groupOrder": ["x"]})


def test_board_state_record_round_trip() -> None:
    state = BoardState(
        tasks=(Task(id=1, title="a", custom={"flag": True}),),
        custom_fields=(CustomField("flag", CustomFieldType.CHECKBOX),),
        group_order={"not_started": (1,)},
    )
    record = state.to_dict()
    assert record["groupOrder"] == {"not_started": [1]}
    assert record["customFields"] == [{"name": "flag", "type": "checkbox"}]
    assert BoardState.from_dict(record) == state


def test_to_plain_handles_nested_models() -> None:
    plain = to_plain({"task": Task(id=1), "ids": (1, 2), "status": TaskStatus.COMPLETED})
    assert plain == {
        "task": {"id": 1, "title": "", "status": "not_started", "priority": "none"},
        "ids": [1, 2],
        "status": "completed",
    }
