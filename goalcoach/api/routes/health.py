"""Liveness check."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from goalcoach import __version__
from goalcoach.api.deps import SettingsDep

router = APIRouter()


class HealthOut(BaseModel):
    status: str
    version: str
    storage: str


@router.get("/health", response_model=HealthOut)
async def health(settings: SettingsDep) -> HealthOut:
    return HealthOut(status="ok", version=__version__, storage=settings.storage_backend)
