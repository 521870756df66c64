"""Goal decomposition: ask the LLM for a structured task breakdown."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from goalcoach.coach import prompts
from goalcoach.domain import Complexity, NewGoal, Subtask, Task
from goalcoach.providers.base import LLMProvider
from goalcoach.utils.ids import IdFactory, new_id


class DecompositionError(ValueError):
    """The breakdown returned by the LLM could not be understood."""


@dataclass
class GoalBreakdown:
    tasks: list[Task] = field(default_factory=list)
    total_estimated_minutes: int = 0
    overall_suggestions: str | None = None

    def to_new_goal(
        self,
        title: str,
        user_id: str,
        time_constraint_minutes: int | None = None,
        additional_info: str | None = None,
        notification_channels: list[str] | None = None,
    ) -> NewGoal:
        return NewGoal(
            title=title,
            user_id=user_id,
            tasks=self.tasks,
            total_estimated_minutes=self.total_estimated_minutes,
            time_constraint_minutes=time_constraint_minutes,
            additional_info=additional_info,
            overall_suggestions=self.overall_suggestions,
            notification_channels=list(notification_channels or []),
        )


def _minutes(value: Any) -> int | None:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return None
    return minutes if minutes > 0 else None


def _complexity(value: Any) -> Complexity | None:
    try:
        return Complexity(str(value).strip().lower())
    except ValueError:
        return None


def parse_breakdown(content: str, id_factory: IdFactory = new_id) -> GoalBreakdown:
    """Turn the JSON breakdown into tasks with fresh ids."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise DecompositionError(f"breakdown is not valid JSON: {e}") from e
    raw_tasks = data.get("tasks") if isinstance(data, dict) else None
    if not isinstance(raw_tasks, list):
        raise DecompositionError("breakdown has no 'tasks' list")

    tasks: list[Task] = []
    for raw in raw_tasks:
        if not isinstance(raw, dict) or not str(raw.get("title", "")).strip():
            continue
        subtasks = [
            Subtask(
                id=id_factory(),
                title=str(s["title"]).strip(),
                estimated_minutes=_minutes(s.get("estimatedMinutes")),
                context=s.get("context"),
            )
            for s in raw.get("subtasks") or []
            if isinstance(s, dict) and str(s.get("title", "")).strip()
        ]
        tasks.append(Task(
            id=id_factory(),
            title=str(raw["title"]).strip(),
            subtasks=subtasks,
            estimated_minutes=_minutes(raw.get("estimatedMinutes")),
            complexity=_complexity(raw.get("complexity")),
            context=raw.get("context"),
            action_items=[str(a) for a in raw.get("actionItems") or []],
        ))
    if not tasks:
        raise DecompositionError("breakdown contains no usable tasks")

    total = _minutes(data.get("totalEstimatedMinutes"))
    if total is None:
        total = sum(t.estimated_minutes or 0 for t in tasks)
    return GoalBreakdown(
        tasks=tasks,
        total_estimated_minutes=total,
        overall_suggestions=data.get("overallSuggestions"),
    )


class GoalDecomposer:
    def __init__(self, provider: LLMProvider, id_factory: IdFactory = new_id) -> None:
        self._provider = provider
        self._new_id = id_factory

    async def breakdown(
        self,
        title: str,
        time_constraint_minutes: int | None = None,
        additional_info: str | None = None,
    ) -> GoalBreakdown:
        """Raises ``LLMProviderError`` or ``DecompositionError``."""
        content = await self._provider.generate(
            prompts.DECOMPOSE_SYSTEM_PROMPT,
            prompts.decompose_prompt(title, time_constraint_minutes, additional_info),
            json_mode=True,
        )
        breakdown = parse_breakdown(content, self._new_id)
        logger.info(
            f"Decomposed {title!r} into {len(breakdown.tasks)} tasks "
            f"(~{breakdown.total_estimated_minutes} min)"
        )
        return breakdown
