"""Goal storage backends."""

from __future__ import annotations

from goalcoach.settings import GoalCoachSettings
from goalcoach.storage.base import GoalStore
from goalcoach.storage.memory import InMemoryGoalStore

__all__ = ["GoalStore", "InMemoryGoalStore", "build_store"]


async def build_store(settings: GoalCoachSettings) -> GoalStore:
    """Create the backend named by ``settings.storage_backend``."""
    if settings.storage_backend == "sql":
        from goalcoach.storage.database import Database
        from goalcoach.storage.repository import SqlGoalStore

        database = Database.from_settings(settings)
        await database.create_all_tables()
        return SqlGoalStore.from_database(database)
    return InMemoryGoalStore()
