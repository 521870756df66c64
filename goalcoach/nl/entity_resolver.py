"""Find which goal or task a chat message refers to.

Resolution order, first hit wins:

1. the candidate's whole title appears in the message (case-insensitive);
2. word overlap between message and title (best raw overlap wins);
3. an index reference: ``task 2``, ``#2``, or a named ordinal ("the first", "last");
4. a single candidate plus a generic target word ("it", "task", "goal", ...).

``None`` means there is no safe target and the caller must not guess.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Protocol, TypeVar

from loguru import logger

from goalcoach.domain import Goal, Task

# Goals are often referred to with shorter partial phrasing than tasks,
# hence the lower ratio.
GOAL_OVERLAP_RATIO = 0.4
TASK_OVERLAP_RATIO = 0.5
MIN_OVERLAP_WORDS = 3

GOAL_INDEX_NOUNS: tuple[str, ...] = ("goal", "project", "objective")
TASK_INDEX_NOUNS: tuple[str, ...] = ("task", "item", "to-do", "todo", "step")

GENERIC_TARGET_WORDS: frozenset[str] = frozenset({
    "it", "this", "that", "task", "tasks", "goal", "goals",
    "item", "to-do", "todo", "project", "objective",
})

ORDINALS: dict[str, int] = {
    "first": 0, "second": 1, "third": 2, "fourth": 3, "fifth": 4,
    "sixth": 5, "seventh": 6, "eighth": 7, "ninth": 8, "tenth": 9,
}

_WORD_RE = re.compile(r"[a-z0-9][a-z0-9'\-]*")
_HASH_INDEX_RE = re.compile(r"#(\d+)")
_ORDINAL_RE = re.compile(r"\b(" + "|".join([*ORDINALS, "last"]) + r")\b")


class _Titled(Protocol):
    title: str


T = TypeVar("T", bound=_Titled)


def _words(text: str) -> list[str]:
    return [w for w in _WORD_RE.findall(text.lower()) if len(w) > 2]


def overlap_count(message_words: list[str], title_words: list[str]) -> int:
    """Title words that share a substring relation with some message word."""
    count = 0
    for title_word in title_words:
        if any(mw in title_word or title_word in mw for mw in message_words):
            count += 1
    return count


def _match_exact(text: str, candidates: Sequence[T]) -> T | None:
    for candidate in candidates:
        title = candidate.title.strip().lower()
        if title and title in text:
            return candidate
    return None


def _match_partial(text: str, candidates: Sequence[T], ratio: float) -> T | None:
    message_words = _words(text)
    if not message_words:
        return None
    best: T | None = None
    best_count = 0
    for candidate in candidates:
        title_words = _words(candidate.title)
        if not title_words:
            continue
        count = overlap_count(message_words, title_words)
        qualifies = count >= MIN_OVERLAP_WORDS or count / len(title_words) >= ratio
        if qualifies and count > best_count:
            best, best_count = candidate, count
    return best


def _match_index(text: str, candidates: Sequence[T], index_nouns: tuple[str, ...]) -> T | None:
    nouns = "|".join(re.escape(n) for n in index_nouns)
    number = re.search(rf"\b(?:{nouns})\s+(?:number\s+|no\.?\s*)?(\d+)\b", text)
    if number is None:
        number = _HASH_INDEX_RE.search(text)
    if number is not None:
        index = int(number.group(1)) - 1
        if 0 <= index < len(candidates):
            return candidates[index]
        return None

    ordinal = _ORDINAL_RE.search(text)
    if ordinal is not None:
        word = ordinal.group(1)
        if word == "last":
            return candidates[-1]
        index = ORDINALS[word]
        if index < len(candidates):
            return candidates[index]
    return None


def _match_single(text: str, candidates: Sequence[T]) -> T | None:
    if len(candidates) != 1:
        return None
    if any(w in GENERIC_TARGET_WORDS for w in _WORD_RE.findall(text)):
        return candidates[0]
    return None


def resolve(
    message: str,
    candidates: Sequence[T],
    *,
    ratio: float,
    index_nouns: tuple[str, ...],
) -> T | None:
    text = (message or "").strip().lower()
    if not text or not candidates:
        return None

    for step, match in (
        ("exact", lambda: _match_exact(text, candidates)),
        ("partial", lambda: _match_partial(text, candidates, ratio)),
        ("index", lambda: _match_index(text, candidates, index_nouns)),
        ("single", lambda: _match_single(text, candidates)),
    ):
        found = match()
        if found is not None:
            logger.debug(f"Resolved {found.title!r} via {step} match")
            return found
    return None


def resolve_goal(message: str, goals: Sequence[Goal]) -> Goal | None:
    return resolve(message, goals, ratio=GOAL_OVERLAP_RATIO, index_nouns=GOAL_INDEX_NOUNS)


def resolve_task(message: str, tasks: Sequence[Task]) -> Task | None:
    return resolve(message, tasks, ratio=TASK_OVERLAP_RATIO, index_nouns=TASK_INDEX_NOUNS)
