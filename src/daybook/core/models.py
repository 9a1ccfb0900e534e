"""Pure planner domain model - no I/O dependencies."""

import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

UNCATEGORIZED_ID = "uncategorized"
ALL_CATEGORIES = "all"
GLOBAL_COMPLETION_KEY = "global_completion"

Value = float | int | bool | None
StatsLog = dict[str, dict[str, Value]]


def new_id() -> str:
    return str(uuid.uuid4())


def day_of_week(d: date) -> int:
    """Day of week with 0 = Sunday through 6 = Saturday."""
    return d.isoweekday() % 7


def _days(values) -> frozenset[int]:
    return frozenset(int(v) for v in values or ())


@dataclass(frozen=True)
class Category:
    """A task category."""

    id: str
    name: str
    color: str = "#6b7280"

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(id=data["id"], name=data["name"], color=data.get("color", "#6b7280"))

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color}


@dataclass(frozen=True)
class DayType:
    """A named preset selecting which categories' templates populate a day."""

    id: str
    name: str
    category_ids: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: dict) -> "DayType":
        return cls(
            id=data["id"],
            name=data["name"],
            category_ids=frozenset(data.get("categoryIds", [])),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "categoryIds": sorted(self.category_ids)}


@dataclass(frozen=True)
class SubtaskTemplate:
    """
    Subtask of a recurring template.

    An empty recurrence_days set inherits the parent's occurrence.
    """

    id: str
    text: str
    recurrence_days: frozenset[int] = frozenset()

    @classmethod
    def from_dict(cls, data: dict) -> "SubtaskTemplate":
        return cls(
            id=data["id"],
            text=data["text"],
            recurrence_days=_days(data.get("recurrenceDays")),
        )

    def to_dict(self) -> dict:
        data = {"id": self.id, "text": self.text}
        if self.recurrence_days:
            data["recurrenceDays"] = sorted(self.recurrence_days)
        return data


@dataclass(frozen=True)
class RecurringTaskTemplate:
    """Master definition of a task re-instantiated on matching dates."""

    id: str
    text: str
    category_id: str
    days_of_week: frozenset[int] = frozenset()
    subtasks: tuple[SubtaskTemplate, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "RecurringTaskTemplate":
        return cls(
            id=data["id"],
            text=data["text"],
            category_id=data.get("categoryId", UNCATEGORIZED_ID),
            days_of_week=_days(data.get("daysOfWeek")),
            subtasks=tuple(SubtaskTemplate.from_dict(st) for st in data.get("subtasks", [])),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "categoryId": self.category_id,
            "daysOfWeek": sorted(self.days_of_week),
            "subtasks": [st.to_dict() for st in self.subtasks],
        }


@dataclass(frozen=True)
class Subtask:
    """A subtask instance on a given day."""

    id: str
    text: str
    completed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Subtask":
        return cls(id=data["id"], text=data["text"], completed=bool(data.get("completed", False)))

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "completed": self.completed}


class TaskKind(Enum):
    """Whether a task stores its completion or derives it."""

    SIMPLE = "simple"  # completion stored on the task
    COMPOSITE = "composite"  # completion derived from subtasks


@dataclass(frozen=True)
class Task:
    """
    A task instance in a day's list.

    `done` is only authoritative for simple tasks. A task with subtasks is
    composite and its `completed` is always derived from them.
    """

    id: str
    text: str
    category_id: str
    is_recurring: bool = False
    subtasks: tuple[Subtask, ...] = ()
    done: bool = False

    @property
    def kind(self) -> TaskKind:
        return TaskKind.COMPOSITE if self.subtasks else TaskKind.SIMPLE

    @property
    def completed(self) -> bool:
        if self.subtasks:
            return all(st.completed for st in self.subtasks)
        return self.done

    def fraction_complete(self) -> float:
        """Share of this task that is done, 0.0 to 1.0."""
        if self.subtasks:
            return sum(1 for st in self.subtasks if st.completed) / len(self.subtasks)
        return 1.0 if self.done else 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            id=data["id"],
            text=data["text"],
            category_id=data.get("categoryId", UNCATEGORIZED_ID),
            is_recurring=bool(data.get("isRecurring", False)),
            subtasks=tuple(Subtask.from_dict(st) for st in data.get("subtasks") or []),
            done=bool(data.get("completed", False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "categoryId": self.category_id,
            "isRecurring": self.is_recurring,
            "subtasks": [st.to_dict() for st in self.subtasks],
        }


@dataclass(frozen=True)
class DailyLog:
    """One calendar day: the chosen day type and its task list."""

    date: date
    day_type_id: str | None = None
    tasks: tuple[Task, ...] = ()

    @classmethod
    def empty(cls, on: date) -> "DailyLog":
        return cls(date=on)

    def with_tasks(self, tasks) -> "DailyLog":
        return replace(self, tasks=tuple(tasks))

    @classmethod
    def from_dict(cls, data: dict) -> "DailyLog":
        return cls(
            date=date.fromisoformat(data["date"]),
            day_type_id=data.get("dayTypeId"),
            tasks=tuple(Task.from_dict(t) for t in data.get("tasks", [])),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "dayTypeId": self.day_type_id,
            "tasks": [t.to_dict() for t in self.tasks],
        }


DailyLogs = dict[str, DailyLog]


class TrackerType(Enum):
    """How a tracker's values are entered and reduced."""

    PERCENT = "percent"
    COUNT = "count"
    CHECK = "check"


@dataclass(frozen=True)
class GoalTracker:
    """
    A numeric or boolean goal.

    With linked_category_id set (a category id or ALL_CATEGORIES) the value
    is derived from task completion unless overridden; otherwise it is
    entered manually.
    """

    id: str
    name: str
    type: TrackerType
    target: float | None = None
    color: str | None = None
    linked_category_id: str | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.linked_category_id)

    @classmethod
    def from_dict(cls, data: dict) -> "GoalTracker":
        return cls(
            id=data["id"],
            name=data["name"],
            type=TrackerType(data.get("type", "percent")),
            target=data.get("target"),
            color=data.get("color"),
            linked_category_id=data.get("linkedCategoryId") or None,
        )

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name, "type": self.type.value}
        if self.target is not None:
            data["target"] = self.target
        if self.color:
            data["color"] = self.color
        if self.linked_category_id:
            data["linkedCategoryId"] = self.linked_category_id
        return data

