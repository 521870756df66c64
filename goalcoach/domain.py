"""Goal / Task / Subtask aggregate and its patch types.

A Goal owns its Tasks, a Task owns its Subtasks. ``progress`` is derived:
the only way to change a goal's task list is ``Goal.replace_tasks`` which
recomputes it, and every partial update goes through ``GoalPatch.apply_to``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum as PyEnum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _parse_dt(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


# ---------------------------------------------------------------------------
# enums
# ---------------------------------------------------------------------------


class Complexity(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _parse_complexity(value: Any) -> Complexity | None:
    if value is None or value == "":
        return None
    try:
        return Complexity(str(value).lower())
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# entities
# ---------------------------------------------------------------------------


@dataclass
class Subtask:
    id: str
    title: str
    completed: bool = False
    estimated_minutes: int | None = None
    context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "estimated_minutes": self.estimated_minutes,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subtask:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            completed=bool(data.get("completed", False)),
            estimated_minutes=data.get("estimated_minutes"),
            context=data.get("context"),
        )


@dataclass
class Task:
    id: str
    title: str
    completed: bool = False
    subtasks: list[Subtask] = field(default_factory=list)
    estimated_minutes: int | None = None
    complexity: Complexity | None = None
    context: str | None = None
    action_items: list[str] = field(default_factory=list)
    due_date: datetime | None = None
    added_to_calendar: bool = False
    reminder_enabled: bool = False
    reminder_time: datetime | None = None

    @property
    def all_subtasks_completed(self) -> bool:
        return bool(self.subtasks) and all(s.completed for s in self.subtasks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "estimated_minutes": self.estimated_minutes,
            "complexity": self.complexity.value if self.complexity else None,
            "context": self.context,
            "action_items": list(self.action_items),
            "due_date": _iso(self.due_date),
            "added_to_calendar": self.added_to_calendar,
            "reminder_enabled": self.reminder_enabled,
            "reminder_time": _iso(self.reminder_time),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            completed=bool(data.get("completed", False)),
            subtasks=[Subtask.from_dict(s) for s in data.get("subtasks") or []],
            estimated_minutes=data.get("estimated_minutes"),
            complexity=_parse_complexity(data.get("complexity")),
            context=data.get("context"),
            action_items=list(data.get("action_items") or []),
            due_date=_parse_dt(data.get("due_date")),
            added_to_calendar=bool(data.get("added_to_calendar", False)),
            reminder_enabled=bool(data.get("reminder_enabled", False)),
            reminder_time=_parse_dt(data.get("reminder_time")),
        )


def calculate_progress(tasks: list[Task]) -> int:
    """Percentage of completed tasks, rounded half up; 0 for an empty list."""
    total = len(tasks)
    if total == 0:
        return 0
    completed = sum(1 for t in tasks if t.completed)
    return (completed * 200 + total) // (total * 2)


@dataclass
class Goal:
    id: str
    title: str
    user_id: str = "anonymous"
    created_at: datetime = field(default_factory=_utcnow)
    tasks: list[Task] = field(default_factory=list)
    progress: int = 0
    roadblocks: str | None = None
    total_estimated_minutes: int | None = None
    time_constraint_minutes: int | None = None
    additional_info: str | None = None
    overall_suggestions: str | None = None
    notification_channels: list[str] = field(default_factory=list)
    last_progress_update: str | None = None

    def __post_init__(self) -> None:
        self.progress = calculate_progress(self.tasks)

    def replace_tasks(self, tasks: list[Task]) -> None:
        self.tasks = list(tasks)
        self.progress = calculate_progress(self.tasks)

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "user_id": self.user_id,
            "created_at": _iso(self.created_at),
            "tasks": [t.to_dict() for t in self.tasks],
            "progress": self.progress,
            "roadblocks": self.roadblocks,
            "total_estimated_minutes": self.total_estimated_minutes,
            "time_constraint_minutes": self.time_constraint_minutes,
            "additional_info": self.additional_info,
            "overall_suggestions": self.overall_suggestions,
            "notification_channels": list(self.notification_channels),
            "last_progress_update": self.last_progress_update,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Goal:
        # progress is recomputed in __post_init__, stored value is ignored
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            user_id=str(data.get("user_id") or "anonymous"),
            created_at=_parse_dt(data.get("created_at")) or _utcnow(),
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            roadblocks=data.get("roadblocks"),
            total_estimated_minutes=data.get("total_estimated_minutes"),
            time_constraint_minutes=data.get("time_constraint_minutes"),
            additional_info=data.get("additional_info"),
            overall_suggestions=data.get("overall_suggestions"),
            notification_channels=list(data.get("notification_channels") or []),
            last_progress_update=data.get("last_progress_update"),
        )


# ---------------------------------------------------------------------------
# creation / patch structs
# ---------------------------------------------------------------------------


@dataclass
class NewGoal:
    """Everything a caller may supply when creating a goal."""

    title: str
    user_id: str = "anonymous"
    tasks: list[Task] = field(default_factory=list)
    total_estimated_minutes: int | None = None
    time_constraint_minutes: int | None = None
    additional_info: str | None = None
    overall_suggestions: str | None = None
    notification_channels: list[str] = field(default_factory=list)

    def build(self, goal_id: str, created_at: datetime | None = None) -> Goal:
        return Goal(
            id=goal_id,
            title=self.title,
            user_id=self.user_id,
            created_at=created_at or _utcnow(),
            tasks=list(self.tasks),
            total_estimated_minutes=self.total_estimated_minutes,
            time_constraint_minutes=self.time_constraint_minutes,
            additional_info=self.additional_info,
            overall_suggestions=self.overall_suggestions,
            notification_channels=list(self.notification_channels),
        )


@dataclass
class GoalPatch:
    """Partial goal update. ``None`` means "leave as is"."""

    title: str | None = None
    tasks: list[Task] | None = None
    roadblocks: str | None = None
    total_estimated_minutes: int | None = None
    time_constraint_minutes: int | None = None
    additional_info: str | None = None
    overall_suggestions: str | None = None
    notification_channels: list[str] | None = None
    last_progress_update: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply_to(self, goal: Goal) -> Goal:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or f.name == "tasks":
                continue
            setattr(goal, f.name, value)
        if self.tasks is not None:
            goal.replace_tasks(self.tasks)
        return goal


@dataclass
class TaskPatch:
    """Partial task update parsed from chat or received over HTTP."""

    title: str | None = None
    completed: bool | None = None
    complexity: Complexity | None = None
    estimated_minutes: int | None = None
    due_date: datetime | None = None
    context: str | None = None
    added_to_calendar: bool | None = None
    reminder_enabled: bool | None = None
    reminder_time: datetime | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply_to(self, task: Task) -> Task:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                setattr(task, f.name, value)
        return task
