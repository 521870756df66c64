"""SQLAlchemy ORM models for GoalCoach."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from goalcoach.domain import Goal, Task


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


# ---------------------------------------------------------------------------
# base
# ---------------------------------------------------------------------------


class Base(AsyncAttrs, DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# goals
# ---------------------------------------------------------------------------


class GoalRecord(Base):
    """One goal row. Tasks and their subtasks live inside the ``tasks`` JSON column."""

    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(Text)
    user_id: Mapped[str] = mapped_column(String(255), default="anonymous", index=True)
    progress: Mapped[int] = mapped_column(Integer, default=0)
    tasks: Mapped[list] = mapped_column(JSON, default=list)
    total_estimated_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    time_constraint_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    additional_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    overall_suggestions: Mapped[str | None] = mapped_column(Text, nullable=True)
    notification_channels: Mapped[list] = mapped_column(JSON, default=list)
    last_progress_update: Mapped[str | None] = mapped_column(Text, nullable=True)
    roadblocks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_domain(self) -> Goal:
        return Goal(
            id=self.id,
            title=self.title,
            user_id=self.user_id,
            created_at=self.created_at,
            tasks=[Task.from_dict(t) for t in self.tasks or []],
            roadblocks=self.roadblocks,
            total_estimated_minutes=self.total_estimated_minutes,
            time_constraint_minutes=self.time_constraint_minutes,
            additional_info=self.additional_info,
            overall_suggestions=self.overall_suggestions,
            notification_channels=list(self.notification_channels or []),
            last_progress_update=self.last_progress_update,
        )

    def load_from(self, goal: Goal) -> None:
        """Copy every persisted field from the domain goal onto this row."""
        self.title = goal.title
        self.user_id = goal.user_id
        self.progress = goal.progress
        # a fresh list so the JSON column is flagged dirty
        self.tasks = [t.to_dict() for t in goal.tasks]
        self.roadblocks = goal.roadblocks
        self.total_estimated_minutes = goal.total_estimated_minutes
        self.time_constraint_minutes = goal.time_constraint_minutes
        self.additional_info = goal.additional_info
        self.overall_suggestions = goal.overall_suggestions
        self.notification_channels = list(goal.notification_channels)
        self.last_progress_update = goal.last_progress_update
