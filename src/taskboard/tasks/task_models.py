# src/taskboard/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from .grouping import derive_group_order, normalize_order

CustomValue = str | int | float | bool
GroupOrder = dict[str, tuple[int, ...]]

CORE_FIELDS: tuple[str, ...] = ("id", "title", "status", "priority")


class SnapshotError(ValueError):
    """Raised when a persisted snapshot cannot be decoded into a BoardState."""


class TaskStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.NOT_STARTED
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.NOT_STARTED


class TaskPriority(StrEnum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        if not raw:
            return cls.NONE
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.NONE


class CustomFieldType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"

    def zero_value(self) -> CustomValue:
        if self is CustomFieldType.CHECKBOX:
            return False
        if self is CustomFieldType.NUMBER:
            return 0
        return ""


class GroupField(StrEnum):
    """Task attribute whose value selects the bucket in GroupOrder."""

    STATUS = "status"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: Any) -> GroupField:
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.STATUS


@dataclass(frozen=True, slots=True)
class CustomField:
    name: str
    type: CustomFieldType

    @classmethod
    def coerce(cls, raw: CustomField | Mapping[str, Any]) -> CustomField:
        if isinstance(raw, CustomField):
            return raw
        try:
            return cls(name=str(raw["name"]), type=CustomFieldType(str(raw["type"])))
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"invalid custom field: {raw!r}") from e

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type.value}


@dataclass(frozen=True, slots=True, kw_only=True)
class Task:
    """
    One tracked task.

    Core fields are fixed; per-schema values live in `custom`, keyed by
    CustomField.name. `id` is None only on a task that was never added.
    """

    id: int | None = None
    title: str = ""
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.NONE
    custom: dict[str, CustomValue] = field(default_factory=dict)

    def has(self, key: str) -> bool:
        return key in CORE_FIELDS or key in self.custom

    def get(self, key: str, default: Any = None) -> Any:
        if key in CORE_FIELDS:
            return getattr(self, key)
        return self.custom.get(key, default)

    def group_key(self, group_by: GroupField) -> str:
        return str(getattr(self, group_by.value))

    def merged(self, fields: Mapping[str, Any], schema: Iterable[str]) -> Task:
        """Return a copy with `fields` merged in; keys outside core + schema are ignored."""
        declared = set(schema)
        custom = dict(self.custom)
        core: dict[str, Any] = {}

        for key, value in fields.items():
            if key == "id":
                continue
            if key == "title":
                core["title"] = str(value)
            elif key == "status":
                core["status"] = TaskStatus.parse(value)
            elif key == "priority":
                core["priority"] = TaskPriority.parse(value)
            elif key in declared:
                custom[key] = value

        return replace(self, custom=custom, **core)

    def conformed(self, custom_fields: Sequence[CustomField]) -> Task:
        """Back-fill missing declared values and drop undeclared ones."""
        names = [f.name for f in custom_fields]
        if set(self.custom) == set(names):
            return self
        custom = {f.name: self.custom.get(f.name, f.type.zero_value()) for f in custom_fields}
        return replace(self, custom=custom)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
        }
        out.update(self.custom)
        return out

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        if not isinstance(raw, Mapping):
            raise SnapshotError(f"task must be an object, got {type(raw).__name__}")

        raw_id = raw.get("id")
        if raw_id is not None and (isinstance(raw_id, bool) or not isinstance(raw_id, int)):
            try:
                raw_id = int(raw_id)
            except (TypeError, ValueError) as e:
                raise SnapshotError(f"invalid task id: {raw_id!r}") from e

        custom = {k: v for k, v in raw.items() if k not in CORE_FIELDS}
        return cls(
            id=raw_id,
            title=str(raw.get("title") or ""),
            status=TaskStatus.parse(raw.get("status")),
            priority=TaskPriority.parse(raw.get("priority")),
            custom=custom,
        )

    @classmethod
    def coerce(cls, raw: Task | Mapping[str, Any]) -> Task:
        return raw if isinstance(raw, Task) else cls.from_dict(raw)


@dataclass(frozen=True, slots=True)
class BoardState:
    tasks: tuple[Task, ...] = ()
    custom_fields: tuple[CustomField, ...] = ()
    group_order: GroupOrder = field(default_factory=dict)

    def find_task(self, task_id: int) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def find_field(self, name: str) -> CustomField | None:
        for f in self.custom_fields:
            if f.name == name:
                return f
        return None

    def field_names(self) -> list[str]:
        return [f.name for f in self.custom_fields]

    def task_ids(self) -> list[int]:
        return [t.id for t in self.tasks if t.id is not None]

    def to_dict(self) -> dict[str, Any]:
        """Persisted record shape: {tasks, customFields, groupOrder}."""
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "customFields": [f.to_dict() for f in self.custom_fields],
            "groupOrder": {k: list(v) for k, v in self.group_order.items()},
        }

    @classmethod
    def from_dict(
        cls, raw: Mapping[str, Any], *, group_by: GroupField = GroupField.STATUS
    ) -> BoardState:
        """
        Decode a persisted record.

        A missing groupOrder is derived from task membership in list order.
        Raises SnapshotError on malformed input.
        """
        if not isinstance(raw, Mapping):
            raise SnapshotError(f"snapshot must be an object, got {type(raw).__name__}")

        raw_tasks = raw.get("tasks") or []
        raw_fields = raw.get("customFields") or []
        if not isinstance(raw_tasks, list) or not isinstance(raw_fields, list):
            raise SnapshotError("snapshot tasks/customFields must be lists")

        custom_fields = tuple(CustomField.coerce(f) for f in raw_fields)
        tasks = tuple(Task.from_dict(t).conformed(custom_fields) for t in raw_tasks)
        if any(t.id is None for t in tasks):
            raise SnapshotError("snapshot task without id")

        raw_order = raw.get("groupOrder")
        if raw_order is None:
            group_order = derive_group_order(tasks, group_by)
        elif isinstance(raw_order, Mapping):
            try:
                group_order = normalize_order(raw_order)
            except (TypeError, ValueError) as e:
                raise SnapshotError("snapshot groupOrder is malformed") from e
        else:
            raise SnapshotError("snapshot groupOrder must be an object")

        return cls(tasks=tasks, custom_fields=custom_fields, group_order=group_order)

    @classmethod
    def coerce(
        cls, raw: BoardState | Mapping[str, Any], *, group_by: GroupField = GroupField.STATUS
    ) -> BoardState:
        return raw if isinstance(raw, BoardState) else cls.from_dict(raw, group_by=group_by)


def to_plain(value: Any) -> Any:
    """Convert model objects inside action/delta payloads into JSON-ready data."""
    if isinstance(value, (Task, CustomField, BoardState)):
        return value.to_dict()
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
