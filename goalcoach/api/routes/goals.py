"""Goals API: create (with LLM breakdown), list, update tasks, report progress."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException, Response
from loguru import logger
from pydantic import BaseModel, Field

from goalcoach.api.deps import AdvisorDep, DecomposerDep, NotifierDep, StoreDep, require_goal
from goalcoach.domain import Complexity, Goal, GoalPatch, NewGoal, TaskPatch
from goalcoach.goals import mutations

router = APIRouter()


class SubtaskOut(BaseModel):
    id: str
    title: str
    completed: bool
    estimated_minutes: int | None = None
    context: str | None = None


class TaskOut(BaseModel):
    id: str
    title: str
    completed: bool
    subtasks: list[SubtaskOut] = []
    estimated_minutes: int | None = None
    complexity: str | None = None
    context: str | None = None
    action_items: list[str] = []
    due_date: str | None = None
    added_to_calendar: bool = False
    reminder_enabled: bool = False
    reminder_time: str | None = None


class GoalOut(BaseModel):
    id: str
    title: str
    user_id: str
    created_at: str | None
    tasks: list[TaskOut]
    progress: int
    roadblocks: str | None = None
    total_estimated_minutes: int | None = None
    time_constraint_minutes: int | None = None
    additional_info: str | None = None
    overall_suggestions: str | None = None
    notification_channels: list[str] = []
    last_progress_update: str | None = None

    @classmethod
    def of(cls, goal: Goal) -> GoalOut:
        return cls.model_validate(goal.to_dict())


class CreateGoalRequest(BaseModel):
    title: str = Field(min_length=1)
    user_id: str = "anonymous"
    time_constraint_minutes: int | None = Field(default=None, gt=0)
    additional_info: str | None = None
    notification_channels: list[str] = []
    # explicit task titles skip the LLM breakdown
    tasks: list[str] | None = None


class TaskUpdateRequest(BaseModel):
    title: str | None = None
    completed: bool | None = None
    complexity: Complexity | None = None
    estimated_minutes: int | None = Field(default=None, gt=0)
    due_date: datetime | None = None
    context: str | None = None
    added_to_calendar: bool | None = None
    reminder_enabled: bool | None = None
    reminder_time: datetime | None = None


class SubtaskUpdateRequest(BaseModel):
    completed: bool


class RoadblockRequest(BaseModel):
    description: str = Field(min_length=1)


class RoadblockOut(BaseModel):
    goal: GoalOut
    tips: list[str]


class ProgressUpdateRequest(BaseModel):
    update: str = Field(min_length=1)


class ProgressUpdateOut(BaseModel):
    goal: GoalOut
    notifications_sent: int


@router.post("", response_model=GoalOut, status_code=201)
async def create_goal(
    body: CreateGoalRequest,
    store: StoreDep,
    decomposer: DecomposerDep,
    notifier: NotifierDep,
) -> GoalOut:
    if body.tasks is not None:
        new = NewGoal(
            title=body.title,
            user_id=body.user_id,
            tasks=mutations.task_shells(t for t in body.tasks if t.strip()),
            time_constraint_minutes=body.time_constraint_minutes,
            additional_info=body.additional_info,
            notification_channels=body.notification_channels,
        )
    else:
        breakdown = await decomposer.breakdown(
            body.title, body.time_constraint_minutes, body.additional_info,
        )
        new = breakdown.to_new_goal(
            body.title,
            body.user_id,
            time_constraint_minutes=body.time_constraint_minutes,
            additional_info=body.additional_info,
            notification_channels=body.notification_channels,
        )
    goal = await store.create_goal(new)
    logger.info(f"Created goal {goal.id} ({goal.title!r}) with {len(goal.tasks)} tasks via API")
    await notifier.notify_goal_created(goal)
    return GoalOut.of(goal)


@router.get("", response_model=list[GoalOut])
async def list_goals(store: StoreDep, user_id: str | None = None) -> list[GoalOut]:
    return [GoalOut.of(g) for g in await store.get_goals(user_id)]


@router.get("/{goal_id}", response_model=GoalOut)
async def get_goal(goal_id: str, store: StoreDep) -> GoalOut:
    return GoalOut.of(await require_goal(store, goal_id))


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(goal_id: str, store: StoreDep) -> Response:
    if not await store.delete_goal(goal_id):
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")
    logger.info(f"Deleted goal {goal_id} via API")
    return Response(status_code=204)


@router.patch("/{goal_id}/tasks/{task_id}", response_model=GoalOut)
async def update_task(
    goal_id: str,
    task_id: str,
    body: TaskUpdateRequest,
    store: StoreDep,
    notifier: NotifierDep,
) -> GoalOut:
    goal = await require_goal(store, goal_id)
    task = goal.find_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    was_completed = task.completed

    updated: Goal | None = goal
    if body.completed is not None:
        updated = mutations.set_task_completion(goal, task_id, body.completed)
    patch = TaskPatch(**body.model_dump(exclude={"completed"}, exclude_none=True))
    if updated is not None and not patch.is_empty():
        updated = mutations.edit_task(updated, task_id, patch)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    stored = await store.update_goal(goal_id, GoalPatch(tasks=updated.tasks))
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")

    done = stored.find_task(task_id)
    if done is not None and done.completed and not was_completed:
        await notifier.notify_task_completed(stored, done)
    return GoalOut.of(stored)


@router.patch("/{goal_id}/tasks/{task_id}/subtasks/{subtask_id}", response_model=GoalOut)
async def update_subtask(
    goal_id: str,
    task_id: str,
    subtask_id: str,
    body: SubtaskUpdateRequest,
    store: StoreDep,
    notifier: NotifierDep,
) -> GoalOut:
    goal = await require_goal(store, goal_id)
    task = goal.find_task(task_id)
    was_completed = task.completed if task is not None else False

    stored = await store.update_subtask_completion(goal_id, task_id, subtask_id, body.completed)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Subtask {subtask_id} not found")

    done = stored.find_task(task_id)
    if done is not None and done.completed and not was_completed:
        await notifier.notify_task_completed(stored, done)
    return GoalOut.of(stored)


@router.post("/{goal_id}/roadblock", response_model=RoadblockOut)
async def report_roadblock(
    goal_id: str,
    body: RoadblockRequest,
    store: StoreDep,
    advisor: AdvisorDep,
    notifier: NotifierDep,
) -> RoadblockOut:
    await require_goal(store, goal_id)
    stored = await store.update_goal(goal_id, GoalPatch(roadblocks=body.description))
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")
    await notifier.notify_roadblock(stored, body.description)
    tips = await advisor.roadblock_tips(stored)
    return RoadblockOut(goal=GoalOut.of(stored), tips=tips)


@router.post("/{goal_id}/progress-update", response_model=ProgressUpdateOut)
async def progress_update(
    goal_id: str,
    body: ProgressUpdateRequest,
    store: StoreDep,
    notifier: NotifierDep,
) -> ProgressUpdateOut:
    await require_goal(store, goal_id)
    stored = await store.update_goal(goal_id, GoalPatch(last_progress_update=body.update))
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")
    sent = await notifier.notify_progress_update(stored, body.update)
    return ProgressUpdateOut(goal=GoalOut.of(stored), notifications_sent=sent)
