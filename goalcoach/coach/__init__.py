"""Coach services: chat orchestration, goal decomposition, advice."""

from goalcoach.coach.advice import CoachAdvisor, CoachMessage
from goalcoach.coach.chat import ChatResponse, CoachChat
from goalcoach.coach.decomposer import DecompositionError, GoalBreakdown, GoalDecomposer

__all__ = [
    "ChatResponse",
    "CoachAdvisor",
    "CoachChat",
    "CoachMessage",
    "DecompositionError",
    "GoalBreakdown",
    "GoalDecomposer",
]
