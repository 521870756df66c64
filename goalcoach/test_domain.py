from dataclasses import fields

from goalcoach.domain import Complexity, Goal, GoalPatch, NewGoal, Subtask, Task, TaskPatch, calculate_progress


def _tasks(done: int, total: int) -> list[Task]:
    return [Task(id=f"t{i}", title=f"Task {i}", completed=i < done) for i in range(total)]


def test_progress_rounds_half_up() -> None:
    assert calculate_progress([]) == 0
    assert calculate_progress(_tasks(1, 3)) == 33
    assert calculate_progress(_tasks(2, 3)) == 67
    assert calculate_progress(_tasks(1, 8)) == 13
    assert calculate_progress(_tasks(4, 4)) == 100


def test_goal_progress_is_always_derived() -> None:
    goal = Goal(id="g1", title="Ship it", tasks=_tasks(1, 2), progress=99)
    assert goal.progress == 50

    goal.replace_tasks(_tasks(2, 2))
    assert goal.progress == 100


def test_from_dict_ignores_stored_progress() -> None:
    data = Goal(id="g1", title="Ship it", tasks=_tasks(1, 4)).to_dict()
    data["progress"] = 80

    restored = Goal.from_dict(data)

    assert restored.progress == 25
    assert [t.id for t in restored.tasks] == ["t0", "t1", "t2", "t3"]


def test_dict_round_trip_keeps_nested_subtasks_and_complexity() -> None:
    task = Task(
        id="t1",
        title="Plan",
        subtasks=[Subtask(id="s1", title="Sketch", completed=True)],
        complexity=Complexity.HIGH,
        action_items=["open notebook"],
    )

    restored = Task.from_dict(task.to_dict())

    assert restored == task


def test_goal_patch_cannot_carry_progress() -> None:
    assert "progress" not in {f.name for f in fields(GoalPatch)}


def test_goal_patch_applies_only_given_fields_and_recomputes_progress() -> None:
    goal = Goal(id="g1", title="Old", tasks=_tasks(0, 2), roadblocks="tired")

    GoalPatch(title="New", tasks=_tasks(1, 2)).apply_to(goal)

    assert goal.title == "New"
    assert goal.roadblocks == "tired"
    assert goal.progress == 50


def test_patches_report_emptiness() -> None:
    assert GoalPatch().is_empty()
    assert TaskPatch().is_empty()
    assert not TaskPatch(completed=False).is_empty()


def test_new_goal_build_derives_progress() -> None:
    goal = NewGoal(title="Read more", tasks=_tasks(1, 1)).build("g9")

    assert goal.id == "g9"
    assert goal.user_id == "anonymous"
    assert goal.progress == 100
