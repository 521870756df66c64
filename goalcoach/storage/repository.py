"""SQLAlchemy-backed ``GoalStore``.

Each call opens its own session from the factory and commits on success.
Updates are last-write-wins: there is no version column.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from goalcoach.domain import Goal, GoalPatch, NewGoal
from goalcoach.storage.base import GoalStore
from goalcoach.storage.database import Database
from goalcoach.storage.models import GoalRecord
from goalcoach.utils.ids import IdFactory, new_id


class SqlGoalStore(GoalStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        id_factory: IdFactory = new_id,
        database: Database | None = None,
    ) -> None:
        self._factory = session_factory
        self._new_id = id_factory
        self._database = database

    @classmethod
    def from_database(cls, database: Database, id_factory: IdFactory = new_id) -> SqlGoalStore:
        return cls(database.session_factory, id_factory=id_factory, database=database)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def get_goal(self, goal_id: str) -> Goal | None:
        async with self._session() as s:
            row = await s.get(GoalRecord, goal_id)
            return row.to_domain() if row is not None else None

    async def get_goals(self, user_id: str | None = None) -> list[Goal]:
        stmt = select(GoalRecord).order_by(GoalRecord.created_at.asc())
        if user_id is not None:
            stmt = stmt.where(GoalRecord.user_id == user_id)
        async with self._session() as s:
            return [row.to_domain() for row in await s.scalars(stmt)]

    async def create_goal(self, new: NewGoal) -> Goal:
        goal = new.build(self._new_id())
        row = GoalRecord(id=goal.id, created_at=goal.created_at)
        row.load_from(goal)
        async with self._session() as s:
            s.add(row)
            await s.flush()
        logger.debug(f"Created goal {goal.id} ({goal.title!r}, {len(goal.tasks)} tasks)")
        return goal

    async def update_goal(self, goal_id: str, patch: GoalPatch) -> Goal | None:
        async with self._session() as s:
            row = await s.get(GoalRecord, goal_id)
            if row is None:
                return None
            goal = patch.apply_to(row.to_domain())
            row.load_from(goal)
            await s.flush()
            return goal

    async def delete_goal(self, goal_id: str) -> bool:
        async with self._session() as s:
            row = await s.get(GoalRecord, goal_id)
            if row is None:
                return False
            await s.delete(row)
            await s.flush()
            return True

    async def close(self) -> None:
        if self._database is not None:
            await self._database.dispose()
