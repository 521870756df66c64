"""Async database engine & session factory."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from goalcoach.settings import GoalCoachSettings
from goalcoach.storage.models import Base


class Database:
    """Owns one engine and its session factory. Built explicitly, never global."""

    def __init__(self, url: str, echo: bool = False) -> None:
        kwargs: dict[str, object] = {"echo": echo}
        if not url.startswith("sqlite"):
            kwargs.update(pool_pre_ping=True, pool_recycle=1800)
        self.engine: AsyncEngine = create_async_engine(url, **kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: GoalCoachSettings) -> Database:
        return cls(settings.database_url, echo=settings.debug)

    async def create_all_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
