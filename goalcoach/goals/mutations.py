"""Pure mutations over the goal aggregate.

Every function works on a deep copy and returns the updated goal (with
``progress`` recomputed through ``Goal.replace_tasks``), or ``None`` when the
target does not exist and nothing was applied. Persisting the result is the
caller's job.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable

from goalcoach.domain import Goal, NewGoal, Task, TaskPatch
from goalcoach.utils.ids import IdFactory, new_id

GOAL_TITLE_MAX_CHARS = 50
DEFAULT_MINUTES_PER_TASK = 30

_SENTENCE_END_RE = re.compile(r"[.!?]")


def _copy_with_task(goal: Goal, task_id: str) -> tuple[Goal, Task] | None:
    updated = copy.deepcopy(goal)
    task = updated.find_task(task_id)
    if task is None:
        return None
    return updated, task


def set_task_completion(goal: Goal, task_id: str, completed: bool) -> Goal | None:
    """Set a task's flag. Subtasks are left untouched."""
    found = _copy_with_task(goal, task_id)
    if found is None:
        return None
    updated, task = found
    task.completed = completed
    updated.replace_tasks(updated.tasks)
    return updated


def complete_task(goal: Goal, task_id: str) -> Goal | None:
    return set_task_completion(goal, task_id, True)


def set_subtask_completion(
    goal: Goal, task_id: str, subtask_id: str, completed: bool,
) -> Goal | None:
    """Set a subtask's flag and roll completion up to the parent task.

    Roll-up only ever completes the parent: un-completing a subtask leaves
    the task flag as it was.
    """
    found = _copy_with_task(goal, task_id)
    if found is None:
        return None
    updated, task = found
    subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
    if subtask is None:
        return None
    subtask.completed = completed
    if task.all_subtasks_completed:
        task.completed = True
    updated.replace_tasks(updated.tasks)
    return updated


def edit_task(goal: Goal, task_id: str, patch: TaskPatch) -> Goal | None:
    found = _copy_with_task(goal, task_id)
    if found is None:
        return None
    updated, task = found
    patch.apply_to(task)
    updated.replace_tasks(updated.tasks)
    return updated


def remove_task(goal: Goal, task_id: str) -> Goal | None:
    if goal.find_task(task_id) is None:
        return None
    updated = copy.deepcopy(goal)
    updated.replace_tasks([t for t in updated.tasks if t.id != task_id])
    return updated


def task_shells(titles: Iterable[str], id_factory: IdFactory = new_id) -> list[Task]:
    """Bare tasks for extracted titles: no subtasks, nothing scheduled."""
    return [Task(id=id_factory(), title=title) for title in titles]


def append_tasks(goal: Goal, titles: Iterable[str], id_factory: IdFactory = new_id) -> Goal:
    updated = copy.deepcopy(goal)
    updated.replace_tasks([*updated.tasks, *task_shells(titles, id_factory)])
    return updated


def goal_title_from_message(message: str) -> str:
    """First sentence of the message, capped at 50 characters."""
    first = _SENTENCE_END_RE.split(message, maxsplit=1)[0].strip()
    if len(first) > GOAL_TITLE_MAX_CHARS:
        return first[: GOAL_TITLE_MAX_CHARS - 3] + "..."
    return first


def build_goal_from_tasks(
    message: str,
    titles: list[str],
    user_id: str,
    id_factory: IdFactory = new_id,
    minutes_per_task: int = DEFAULT_MINUTES_PER_TASK,
) -> NewGoal:
    return NewGoal(
        title=goal_title_from_message(message),
        user_id=user_id,
        tasks=task_shells(titles, id_factory),
        total_estimated_minutes=len(titles) * minutes_per_task,
    )
