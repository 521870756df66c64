"""Storage interface for the goal aggregate.

Backends implement the five primitives; the completion helpers are shared
and route through the mutation engine and ``update_goal`` so progress is
always recomputed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from goalcoach.domain import Goal, GoalPatch, NewGoal
from goalcoach.goals import mutations


class GoalStore(ABC):
    @abstractmethod
    async def get_goal(self, goal_id: str) -> Goal | None: ...

    @abstractmethod
    async def get_goals(self, user_id: str | None = None) -> list[Goal]:
        """Goals in creation order, optionally restricted to one user."""

    @abstractmethod
    async def create_goal(self, new: NewGoal) -> Goal: ...

    @abstractmethod
    async def update_goal(self, goal_id: str, patch: GoalPatch) -> Goal | None:
        """Apply ``patch`` via ``GoalPatch.apply_to``; ``None`` if the goal is gone."""

    @abstractmethod
    async def delete_goal(self, goal_id: str) -> bool: ...

    async def close(self) -> None:
        return None

    async def update_task_completion(
        self, goal_id: str, task_id: str, completed: bool,
    ) -> Goal | None:
        goal = await self.get_goal(goal_id)
        if goal is None:
            return None
        updated = mutations.set_task_completion(goal, task_id, completed)
        if updated is None:
            return None
        return await self.update_goal(goal_id, GoalPatch(tasks=updated.tasks))

    async def update_subtask_completion(
        self, goal_id: str, task_id: str, subtask_id: str, completed: bool,
    ) -> Goal | None:
        goal = await self.get_goal(goal_id)
        if goal is None:
            return None
        updated = mutations.set_subtask_completion(goal, task_id, subtask_id, completed)
        if updated is None:
            return None
        return await self.update_goal(goal_id, GoalPatch(tasks=updated.tasks))
