"""Dict-backed goal store for tests, the CLI and single-process dev servers."""

from __future__ import annotations

import copy

from loguru import logger

from goalcoach.domain import Goal, GoalPatch, NewGoal
from goalcoach.storage.base import GoalStore
from goalcoach.utils.ids import IdFactory, new_id


class InMemoryGoalStore(GoalStore):
    """Holds private copies; callers never share state with the store."""

    def __init__(self, id_factory: IdFactory = new_id) -> None:
        self._goals: dict[str, Goal] = {}
        self._new_id = id_factory

    async def get_goal(self, goal_id: str) -> Goal | None:
        goal = self._goals.get(goal_id)
        return copy.deepcopy(goal) if goal is not None else None

    async def get_goals(self, user_id: str | None = None) -> list[Goal]:
        return [
            copy.deepcopy(g)
            for g in self._goals.values()
            if user_id is None or g.user_id == user_id
        ]

    async def create_goal(self, new: NewGoal) -> Goal:
        goal = copy.deepcopy(new).build(self._new_id())
        self._goals[goal.id] = goal
        logger.debug(f"Created goal {goal.id} ({goal.title!r}, {len(goal.tasks)} tasks)")
        return copy.deepcopy(goal)

    async def update_goal(self, goal_id: str, patch: GoalPatch) -> Goal | None:
        goal = self._goals.get(goal_id)
        if goal is None:
            return None
        copy.deepcopy(patch).apply_to(goal)
        return copy.deepcopy(goal)

    async def delete_goal(self, goal_id: str) -> bool:
        return self._goals.pop(goal_id, None) is not None
