"""Opportunistic extraction of task attribute edits from a chat message.

Every extractor is independent; ``parse_task_edit`` combines them into a
``TaskPatch`` holding only what was actually found.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from goalcoach.domain import Complexity, TaskPatch

# priority keywords; "not urgent" must be tested before "urgent"
_PRIORITY_RULES: tuple[tuple[re.Pattern[str], Complexity], ...] = (
    (re.compile(r"\blow priority\b|\bnot (?:urgent|important)\b"), Complexity.LOW),
    (re.compile(r"\bhigh priority\b|\burgent\b|\bimportant\b|\bcritical\b"), Complexity.HIGH),
    (re.compile(r"\b(?:medium|moderate) priority\b"), Complexity.MEDIUM),
)

_DIFFICULTY_RULES: tuple[tuple[re.Pattern[str], Complexity], ...] = (
    (re.compile(r"\b(?:hard|difficult|challenging)\b"), Complexity.HIGH),
    (re.compile(r"\bmedium difficulty\b|\bmoderate\b"), Complexity.MEDIUM),
    (re.compile(r"\b(?:easy|simple|basic)\b"), Complexity.LOW),
)

_MINUTES_RE = re.compile(r"(\d+)\s*(?:minutes|minute|mins|min)\b")

_DUE_RULES: tuple[tuple[re.Pattern[str], timedelta], ...] = (
    (re.compile(r"\btoday\b"), timedelta(0)),
    (re.compile(r"\btomorrow\b"), timedelta(days=1)),
    (re.compile(r"\bnext week\b"), timedelta(days=7)),
)

_QUOTE = "\"'“”‘’"
_TITLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b(?:to|as)\s+[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.I),
    re.compile(rf"\bmake\s+it\s+[{_QUOTE}]([^{_QUOTE}]+)[{_QUOTE}]", re.I),
    re.compile(r"\brename\b.*?\bto\s+([^,.!?]+)", re.I),
    re.compile(r"\bchange\b.*?\bname\b.*?\bto\s+([^,.!?]+)", re.I),
    re.compile(r"\bupdate\b.*?\btitle\b.*?\bto\s+([^,.!?]+)", re.I),
    re.compile(r"\b(?:call|name)\s+(?:it|this|that|the\s+task)\s+([^,.!?]+)", re.I),
)


def extract_complexity(message: str) -> Complexity | None:
    """Priority words first, then difficulty words; the last rule that fires wins."""
    text = message.lower()
    result: Complexity | None = None
    for rules in (_PRIORITY_RULES, _DIFFICULTY_RULES):
        for pattern, tier in rules:
            if pattern.search(text):
                result = tier
                break
    return result


def extract_estimated_minutes(message: str) -> int | None:
    m = _MINUTES_RE.search(message.lower())
    if m is None:
        return None
    minutes = int(m.group(1))
    return minutes if minutes > 0 else None


def extract_due_date(message: str, now: datetime | None = None) -> datetime | None:
    text = message.lower()
    for pattern, offset in _DUE_RULES:
        if pattern.search(text):
            return (now or datetime.now(tz=UTC)) + offset
    return None


def extract_new_title(message: str) -> str | None:
    for pattern in _TITLE_PATTERNS:
        m = pattern.search(message)
        if m:
            title = m.group(1).strip().strip(_QUOTE).strip()
            if title:
                return title
    return None


def parse_task_edit(message: str, now: datetime | None = None) -> TaskPatch:
    return TaskPatch(
        title=extract_new_title(message),
        complexity=extract_complexity(message),
        estimated_minutes=extract_estimated_minutes(message),
        due_date=extract_due_date(message, now),
    )
