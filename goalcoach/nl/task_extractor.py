"""Pull task titles out of list-like text in a generated reply."""

from __future__ import annotations

import re

_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+(.+)$")
_BULLET_RE = re.compile(r"^\s*[•\-*]\s+(.+)$")
_TASK_LABEL_RE = re.compile(r"^\s*task\s+\d+\b\s*:?\s*([^:\s].*)$", re.I)

_LINE_PATTERNS = (_NUMBERED_RE, _BULLET_RE, _TASK_LABEL_RE)


def _match_line(line: str) -> str | None:
    for pattern in _LINE_PATTERNS:
        m = pattern.match(line)
        if m:
            return m.group(1).strip()
    return None


def extract_tasks(text: str) -> list[str]:
    """Return one title per list line, in order, without exact duplicates."""
    titles: list[str] = []
    seen: set[str] = set()
    for line in (text or "").splitlines():
        title = _match_line(line)
        if not title or title in seen:
            continue
        seen.add(title)
        titles.append(title)
    return titles
