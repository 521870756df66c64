"""Request-scoped dependencies backed by ``app.state``."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from goalcoach.coach import CoachAdvisor, CoachChat, GoalDecomposer
from goalcoach.domain import Goal
from goalcoach.notifications import NotificationService
from goalcoach.providers import LLMProvider
from goalcoach.settings import GoalCoachSettings
from goalcoach.storage import GoalStore


def get_settings_dep(request: Request) -> GoalCoachSettings:
    return request.app.state.settings


def get_store(request: Request) -> GoalStore:
    return request.app.state.store


def get_provider(request: Request) -> LLMProvider:
    return request.app.state.provider


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier


SettingsDep = Annotated[GoalCoachSettings, Depends(get_settings_dep)]
StoreDep = Annotated[GoalStore, Depends(get_store)]
ProviderDep = Annotated[LLMProvider, Depends(get_provider)]
NotifierDep = Annotated[NotificationService, Depends(get_notifier)]


def get_chat(
    store: StoreDep, provider: ProviderDep, notifier: NotifierDep, settings: SettingsDep,
) -> CoachChat:
    return CoachChat(
        store,
        provider,
        notifier=notifier,
        minutes_per_task=settings.minutes_per_extracted_task,
    )


def get_decomposer(provider: ProviderDep) -> GoalDecomposer:
    return GoalDecomposer(provider)


def get_advisor(provider: ProviderDep) -> CoachAdvisor:
    return CoachAdvisor(provider)


ChatDep = Annotated[CoachChat, Depends(get_chat)]
DecomposerDep = Annotated[GoalDecomposer, Depends(get_decomposer)]
AdvisorDep = Annotated[CoachAdvisor, Depends(get_advisor)]


async def require_goal(store: GoalStore, goal_id: str) -> Goal:
    goal = await store.get_goal(goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")
    return goal
