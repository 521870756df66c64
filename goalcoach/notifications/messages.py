"""Plain-text bodies for goal event notifications."""

from __future__ import annotations

from goalcoach.domain import Goal, Task


def goal_created_text(goal: Goal) -> str:
    task_list = "\n".join(
        f"• {t.title} ({t.estimated_minutes or 0} mins, "
        f"{t.complexity.value if t.complexity else 'medium'} complexity)"
        for t in goal.tasks
    )
    constraint = f"{goal.time_constraint_minutes} minutes" if goal.time_constraint_minutes else "None"
    return (
        f"🎯 *New goal:* {goal.title}\n"
        f"*Estimated time:* {goal.total_estimated_minutes or 0} minutes\n"
        f"*Time constraint:* {constraint}\n"
        f"*Tasks:*\n{task_list}"
    )


def task_completed_text(goal: Goal, task: Task) -> str:
    return f"✅ Completed *{task.title}* in _{goal.title}_. Progress: {goal.progress}%"


def progress_update_text(goal: Goal, update: str) -> str:
    return f"📈 Progress on *{goal.title}* ({goal.progress}%):\n{update}"


def roadblock_text(goal: Goal, description: str) -> str:
    return f"🚧 Roadblock on *{goal.title}*:\n{description}"
