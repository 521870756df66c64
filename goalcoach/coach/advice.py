"""Coaching extras: motivational messages, roadblock tips, task discussion.

Unlike the chat turn, these are best-effort: when no provider is configured
or the call fails, they log and fall back to canned advice.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any

from loguru import logger

from goalcoach.coach import prompts
from goalcoach.domain import Complexity, Goal, Task
from goalcoach.providers.base import LLMProvider, LLMProviderError

FALLBACK_ROADBLOCK_TIPS: tuple[str, ...] = (
    "Break down the challenge into smaller, more manageable tasks.",
    "Consider seeking help or advice from someone with expertise in this area.",
    "Take a short break and return with a fresh perspective.",
)
FALLBACK_DISCUSSION = (
    "I'd suggest breaking this task into smaller steps and tackling them one by one. "
    "If you're unsure how to proceed, research the specific parts that block you or "
    "ask someone with relevant experience for advice."
)


class CoachMessageType(str, PyEnum):
    ENCOURAGEMENT = "encouragement"
    TIP = "tip"
    CONGRATULATION = "congratulation"
    MILESTONE = "milestone"


@dataclass(frozen=True, slots=True)
class CoachMessage:
    message: str
    type: CoachMessageType = CoachMessageType.ENCOURAGEMENT


def coaching_context(goals: Sequence[Goal], user_name: str) -> dict[str, Any]:
    overall = round(sum(g.progress for g in goals) / len(goals)) if goals else 0
    return {
        "userName": user_name,
        "goals": [
            {
                "title": g.title,
                "progress": g.progress,
                "tasksCompleted": sum(1 for t in g.tasks if t.completed),
                "totalTasks": len(g.tasks),
                "hasRoadblocks": bool(g.roadblocks),
                "roadblockDescription": g.roadblocks or "",
                "timeConstraint": g.time_constraint_minutes or 0,
            }
            for g in goals
        ],
        "overallProgress": overall,
        "totalCompletedTasks": sum(1 for g in goals for t in g.tasks if t.completed),
        "totalTasks": sum(len(g.tasks) for g in goals),
        "hasGoalsWithRoadblocks": any(g.roadblocks for g in goals),
    }


class CoachAdvisor:
    def __init__(self, provider: LLMProvider) -> None:
        self._provider = provider

    async def coaching_message(self, goals: Sequence[Goal], user_name: str = "there") -> CoachMessage:
        if not self._provider.is_available():
            return CoachMessage("Keep going! You're making great progress on your goals.")
        try:
            content = await self._provider.generate(
                prompts.COACHING_SYSTEM_PROMPT,
                json.dumps(coaching_context(goals, user_name)),
                json_mode=True,
            )
            data = json.loads(content)
        except (LLMProviderError, json.JSONDecodeError) as e:
            logger.warning(f"Coaching message fell back to default: {e}")
            return CoachMessage("Keep pushing forward! Every small step counts toward your bigger goals.")
        if not isinstance(data, dict):
            return CoachMessage("Keep up the good work!")

        try:
            kind = CoachMessageType(data.get("type", "encouragement"))
        except ValueError:
            kind = CoachMessageType.ENCOURAGEMENT
        return CoachMessage(message=data.get("message") or "Keep up the good work!", type=kind)

    async def roadblock_tips(self, goal: Goal) -> list[str]:
        if not self._provider.is_available() or not goal.roadblocks:
            return list(FALLBACK_ROADBLOCK_TIPS)
        try:
            content = await self._provider.generate(
                prompts.ROADBLOCK_SYSTEM_PROMPT,
                f"Goal: {goal.title}\nRoadblock: {goal.roadblocks}",
                json_mode=True,
            )
            tips = json.loads(content).get("tips")
        except (LLMProviderError, json.JSONDecodeError, AttributeError) as e:
            logger.warning(f"Roadblock tips for goal {goal.id} fell back to defaults: {e}")
            return list(FALLBACK_ROADBLOCK_TIPS)
        if not isinstance(tips, list) or not tips:
            return list(FALLBACK_ROADBLOCK_TIPS)
        return [str(t) for t in tips]

    async def discuss_task(self, goal: Goal, task: Task, message: str) -> str:
        if not self._provider.is_available():
            return FALLBACK_DISCUSSION
        details = {
            "title": task.title,
            "context": task.context or "",
            "complexity": task.complexity.value if task.complexity else "medium",
            "estimatedMinutes": task.estimated_minutes or 0,
            "completed": task.completed,
            "actionItems": task.action_items,
            "subtasks": [
                {"title": s.title, "context": s.context or "", "completed": s.completed}
                for s in task.subtasks
            ],
            "goalTitle": goal.title,
        }
        try:
            reply = await self._provider.generate(
                prompts.DISCUSS_TASK_SYSTEM_PROMPT,
                f"Task: {json.dumps(details)}\n\nMy question/comment: {message}",
            )
        except LLMProviderError as e:
            logger.warning(f"Task discussion for {task.id} fell back to default: {e}")
            return FALLBACK_DISCUSSION
        return reply or FALLBACK_DISCUSSION

    async def analyze_task_difficulty(self, title: str, context: str | None = None) -> Complexity:
        prompt = f"Task: {title}" + (f"\nAdditional context: {context}" if context else "")
        try:
            reply = (await self._provider.generate(prompts.DIFFICULTY_SYSTEM_PROMPT, prompt)).lower()
        except LLMProviderError as e:
            logger.warning(f"Difficulty analysis fell back to medium: {e}")
            return Complexity.MEDIUM
        for tier in (Complexity.HIGH, Complexity.MEDIUM, Complexity.LOW):
            if tier.value in reply:
                return tier
        return Complexity.MEDIUM
