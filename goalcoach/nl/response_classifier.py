"""Coarse labelling of the coach's reply for client-side display."""

from __future__ import annotations

import re
from enum import Enum as PyEnum


class ResponseType(str, PyEnum):
    TASK_SUGGESTION = "task-suggestion"
    TASK_CREATION = "task-creation"
    ENCOURAGEMENT = "encouragement"
    QUESTION = "question"
    GENERAL = "general"

    @property
    def implies_new_tasks(self) -> bool:
        return self in (ResponseType.TASK_SUGGESTION, ResponseType.TASK_CREATION)


# stems match inside inflections ("added", "suggested"); "created" belongs to the task-creation rule
_SUGGESTION_VERB_RE = re.compile(r"create(?!d)|add|suggest")
_INTERROGATIVE_RE = re.compile(r"\b(?:what|how|when|why)\b")
ENCOURAGEMENT_PHRASES: tuple[str, ...] = ("great", "good job", "well done", "proud")


def classify_response(reply: str, user_message: str | None = None) -> ResponseType:
    """Label a generated reply. ``user_message`` is accepted but not consulted."""
    text = (reply or "").lower()

    if "task" in text and _SUGGESTION_VERB_RE.search(text):
        return ResponseType.TASK_SUGGESTION
    if "created" in text and "task" in text:
        return ResponseType.TASK_CREATION
    if "?" in text and _INTERROGATIVE_RE.search(text):
        return ResponseType.QUESTION
    if any(p in text for p in ENCOURAGEMENT_PHRASES):
        return ResponseType.ENCOURAGEMENT
    return ResponseType.GENERAL
