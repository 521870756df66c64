"""Coach API: chat turns, motivational messages, task discussion."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from goalcoach.api.deps import AdvisorDep, ChatDep, StoreDep, require_goal

router = APIRouter()


class HistoryMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    user_id: str = "anonymous"
    goal_id: str | None = None
    conversation_history: list[HistoryMessage] = []


class ChatOut(BaseModel):
    message: str
    type: str
    related_tasks: list[str]
    tasks_created: bool
    conversation_history: list[HistoryMessage]


class CoachMessageOut(BaseModel):
    message: str
    type: str


class DiscussRequest(BaseModel):
    message: str = Field(min_length=1)


class DiscussOut(BaseModel):
    reply: str


@router.post("/chat", response_model=ChatOut)
async def chat(body: ChatRequest, coach: ChatDep) -> ChatOut:
    history = [m.model_dump() for m in body.conversation_history]
    result = await coach.process_chat_turn(
        body.message,
        body.user_id,
        goal_id=body.goal_id,
        conversation_history=history,
    )
    return ChatOut(
        **result.to_dict(),
        conversation_history=[HistoryMessage(**m) for m in history],
    )


@router.get("/message", response_model=CoachMessageOut)
async def coaching_message(
    store: StoreDep,
    advisor: AdvisorDep,
    user_id: str = "anonymous",
    user_name: str = "there",
) -> CoachMessageOut:
    goals = await store.get_goals(user_id)
    msg = await advisor.coaching_message(goals, user_name)
    return CoachMessageOut(message=msg.message, type=msg.type.value)


@router.post("/goals/{goal_id}/tasks/{task_id}/discuss", response_model=DiscussOut)
async def discuss_task(
    goal_id: str,
    task_id: str,
    body: DiscussRequest,
    store: StoreDep,
    advisor: AdvisorDep,
) -> DiscussOut:
    goal = await require_goal(store, goal_id)
    task = goal.find_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return DiscussOut(reply=await advisor.discuss_task(goal, task, body.message))
