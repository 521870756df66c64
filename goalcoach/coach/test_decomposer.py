import itertools
import json

import pytest

from goalcoach.coach.decomposer import DecompositionError, GoalDecomposer, parse_breakdown
from goalcoach.coach.prompts import decompose_prompt
from goalcoach.domain import Complexity
from goalcoach.providers.base import LLMProvider

BREAKDOWN = {
    "tasks": [
        {
            "title": "Choose a framework",
            "estimatedMinutes": 45,
            "complexity": "Medium",
            "context": "Everything else depends on it",
            "actionItems": ["Compare two options"],
            "subtasks": [
                {"title": "List requirements", "estimatedMinutes": 15},
                {"title": "  "},
            ],
        },
        {"title": "Build the landing page", "estimatedMinutes": "90", "complexity": "extreme"},
        {"estimatedMinutes": 10},
    ],
    "overallSuggestions": "Ship something small first.",
}


class JsonProvider(LLMProvider):
    def __init__(self, content: str) -> None:
        super().__init__(api_key="test")
        self.content = content
        self.json_mode: bool | None = None

    async def generate(self, system_prompt, user_prompt, *, model=None, json_mode=False) -> str:
        self.json_mode = json_mode
        return self.content


def _ids():
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


def test_parse_breakdown_builds_tasks_with_fresh_ids() -> None:
    breakdown = parse_breakdown(json.dumps(BREAKDOWN), _ids())

    assert [t.title for t in breakdown.tasks] == ["Choose a framework", "Build the landing page"]
    first, second = breakdown.tasks
    assert first.id == "id2"
    assert first.subtasks[0].id == "id1"
    assert [s.title for s in first.subtasks] == ["List requirements"]
    assert first.complexity is Complexity.MEDIUM
    assert first.action_items == ["Compare two options"]
    assert second.estimated_minutes == 90
    assert second.complexity is None
    assert breakdown.overall_suggestions == "Ship something small first."


def test_total_falls_back_to_sum_of_task_estimates() -> None:
    breakdown = parse_breakdown(json.dumps(BREAKDOWN), _ids())

    assert breakdown.total_estimated_minutes == 135


def test_explicit_total_wins() -> None:
    data = dict(BREAKDOWN, totalEstimatedMinutes=200)

    assert parse_breakdown(json.dumps(data), _ids()).total_estimated_minutes == 200


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps({"steps": []}), json.dumps({"tasks": [{"title": ""}]}), json.dumps([1, 2])],
)
def test_unusable_breakdowns_raise(content: str) -> None:
    with pytest.raises(DecompositionError):
        parse_breakdown(content, _ids())


def test_breakdown_converts_to_new_goal() -> None:
    new = parse_breakdown(json.dumps(BREAKDOWN), _ids()).to_new_goal(
        "Launch a startup", "u1", time_constraint_minutes=600, notification_channels=["slack"],
    )

    assert new.title == "Launch a startup"
    assert new.time_constraint_minutes == 600
    assert new.notification_channels == ["slack"]
    assert len(new.tasks) == 2


def test_decompose_prompt_mentions_constraint_and_context() -> None:
    prompt = decompose_prompt("Launch a startup", 120, "  solo founder ")

    assert 'Goal: "Launch a startup"' in prompt
    assert "within 120 minutes" in prompt
    assert '"solo founder"' in prompt
    assert "IMPORTANT" not in decompose_prompt("Launch a startup")


@pytest.mark.asyncio
async def test_decomposer_requests_json_mode() -> None:
    provider = JsonProvider(json.dumps(BREAKDOWN))

    breakdown = await GoalDecomposer(provider, _ids()).breakdown("Launch a startup")

    assert provider.json_mode is True
    assert len(breakdown.tasks) == 2
