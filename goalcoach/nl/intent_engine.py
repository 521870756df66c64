"""Keyword intent detection for chat-driven goal and task changes.

Each detector is a pure function over the raw user message. They are a
best-effort classifier: a phrase match is enough, there is no negation
handling ("I don't want to ..." still reads as create-goal). A false
positive or negative only means a mutation is (not) attempted; the entity
resolver still has to find a safe target before anything changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

CREATE_GOAL_PHRASES: tuple[str, ...] = (
    "i want to", "i would like to", "i need to", "i wish to",
    "help me", "can you help me", "i have a goal", "my goal is",
    "i want", "i would like", "i need", "i wish", "i wanna",
)

REMOVE_KEYWORDS: tuple[str, ...] = (
    "remove", "delete", "eliminate", "get rid of", "cancel",
    "drop", "trash", "erase", "take off", "destroy", "kill",
    "wipe", "clear",
)

EDIT_KEYWORDS: tuple[str, ...] = (
    "edit", "change", "update", "modify", "alter", "revise",
    "rename", "adjust", "call", "name", "set",
)

COMPLETION_KEYWORDS: tuple[str, ...] = (
    "complete", "finish", "done", "mark", "check off", "check",
    "completed", "finished", "did", "accomplish", "achieved", "success",
)

# Narrower set used to pick "complete" over "edit attributes" once an
# edit intent has been detected ("mark it urgent" is an edit, not a completion).
COMPLETION_MUTATION_KEYWORDS: tuple[str, ...] = ("complete", "finish", "done")

GOAL_NOUNS: tuple[str, ...] = ("goal", "project", "objective")
TASK_NOUNS: tuple[str, ...] = ("task", "to-do", "todo", "item")

_GOAL_NUMBER_RE = re.compile(r"goal\s+\d+", re.I)
_TASK_NUMBER_RE = re.compile(r"task\s+\d+", re.I)
_HASH_NUMBER_RE = re.compile(r"#\d+")
_BARE_IT_RE = re.compile(r"\bit\b", re.I)


def _normalise(message: str | None) -> str:
    return (message or "").strip().lower()


def _contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    return any(p in text for p in phrases)


def _has_goal_target(text: str) -> bool:
    return _contains_any(text, GOAL_NOUNS) or bool(_GOAL_NUMBER_RE.search(text))


def _has_task_target(text: str) -> bool:
    return (
        _contains_any(text, TASK_NOUNS)
        or bool(_BARE_IT_RE.search(text))
        or bool(_TASK_NUMBER_RE.search(text))
        or bool(_HASH_NUMBER_RE.search(text))
    )


def detect_create_goal_intent(message: str | None) -> bool:
    text = _normalise(message)
    if not text:
        return False
    return _contains_any(text, CREATE_GOAL_PHRASES)


def detect_remove_goal_intent(message: str | None) -> bool:
    text = _normalise(message)
    if not text:
        return False
    return _contains_any(text, REMOVE_KEYWORDS) and _has_goal_target(text)


def detect_remove_task_intent(message: str | None) -> bool:
    """Task removal; never true when the message also reads as goal removal."""
    text = _normalise(message)
    if not text:
        return False
    return (
        _contains_any(text, REMOVE_KEYWORDS)
        and _has_task_target(text)
        and not detect_remove_goal_intent(text)
    )


def detect_edit_task_intent(message: str | None) -> bool:
    text = _normalise(message)
    if not text:
        return False
    if _contains_any(text, COMPLETION_KEYWORDS):
        return _has_task_target(text)
    return _contains_any(text, EDIT_KEYWORDS) and _has_task_target(text)


def detect_completion_intent(message: str | None) -> bool:
    text = _normalise(message)
    if not text:
        return False
    return _contains_any(text, COMPLETION_MUTATION_KEYWORDS)


@dataclass(frozen=True, slots=True)
class Intents:
    """All intents detected in one message. Several may hold at once."""

    create_goal: bool = False
    remove_goal: bool = False
    remove_task: bool = False
    edit_task: bool = False
    complete_task: bool = False

    @property
    def names(self) -> list[str]:
        return [
            name
            for name in ("create_goal", "remove_goal", "remove_task", "edit_task", "complete_task")
            if getattr(self, name)
        ]

    @property
    def any(self) -> bool:
        return bool(self.names)


class IntentEngine:
    """Runs every detector over a message and bundles the result."""

    def detect(self, text: str) -> Intents:
        edit = detect_edit_task_intent(text)
        intents = Intents(
            create_goal=detect_create_goal_intent(text),
            remove_goal=detect_remove_goal_intent(text),
            remove_task=detect_remove_task_intent(text),
            edit_task=edit,
            complete_task=edit and detect_completion_intent(text),
        )
        if intents.any:
            logger.debug(f"Detected intents {intents.names} in message: {text[:80]!r}")
        return intents
