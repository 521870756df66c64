"""Fan goal events out to the goal's enabled notification channels.

Channels run concurrently; one failing channel is logged and never blocks
the others or the caller.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from loguru import logger

from goalcoach.domain import Goal, Task
from goalcoach.notifications.messages import (
    goal_created_text,
    progress_update_text,
    roadblock_text,
    task_completed_text,
)


class NotificationChannel(Protocol):
    name: str

    async def send(self, text: str) -> None: ...


class NotificationService:
    def __init__(self, channels: list[NotificationChannel] | None = None) -> None:
        self._channels: dict[str, NotificationChannel] = {c.name: c for c in channels or []}

    @property
    def channel_names(self) -> list[str]:
        return list(self._channels)

    async def _dispatch(self, goal: Goal, text: str, channels: list[str] | None) -> int:
        """Send ``text`` to the requested (or the goal's) channels; return successes."""
        wanted = channels if channels else goal.notification_channels
        targets = [self._channels[name] for name in wanted if name in self._channels]
        if not targets:
            return 0
        results = await asyncio.gather(
            *(c.send(text) for c in targets), return_exceptions=True,
        )
        sent = 0
        for channel, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning(f"Notification via {channel.name} failed for goal {goal.id}: {result}")
            else:
                sent += 1
        return sent

    async def notify_goal_created(self, goal: Goal, channels: list[str] | None = None) -> int:
        return await self._dispatch(goal, goal_created_text(goal), channels)

    async def notify_task_completed(
        self, goal: Goal, task: Task, channels: list[str] | None = None,
    ) -> int:
        return await self._dispatch(goal, task_completed_text(goal, task), channels)

    async def notify_progress_update(
        self, goal: Goal, update: str, channels: list[str] | None = None,
    ) -> int:
        return await self._dispatch(goal, progress_update_text(goal, update), channels)

    async def notify_roadblock(
        self, goal: Goal, description: str, channels: list[str] | None = None,
    ) -> int:
        return await self._dispatch(goal, roadblock_text(goal, description), channels)
