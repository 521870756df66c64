import json

import httpx
import pytest

from goalcoach.domain import Complexity, Goal, Task
from goalcoach.notifications import build_notifier
from goalcoach.notifications.service import NotificationService
from goalcoach.notifications.slack import SlackWebhookChannel
from goalcoach.settings import GoalCoachSettings


class RecordingChannel:
    def __init__(self, name: str, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.sent: list[str] = []

    async def send(self, text: str) -> None:
        if self.fail:
            raise RuntimeError(f"{self.name} is down")
        self.sent.append(text)


def _goal(channels: list[str]) -> Goal:
    return Goal(
        id="g1",
        title="Run a 10k",
        tasks=[Task(id="t1", title="Buy shoes", estimated_minutes=30, complexity=Complexity.LOW)],
        total_estimated_minutes=30,
        notification_channels=channels,
    )


@pytest.mark.asyncio
async def test_dispatch_goes_to_the_goals_channels_only() -> None:
    email, slack = RecordingChannel("email"), RecordingChannel("slack")
    service = NotificationService([email, slack])

    sent = await service.notify_goal_created(_goal(["slack"]))

    assert sent == 1
    assert email.sent == []
    assert "Run a 10k" in slack.sent[0]
    assert "Buy shoes (30 mins, low complexity)" in slack.sent[0]


@pytest.mark.asyncio
async def test_failing_channel_does_not_block_the_others() -> None:
    broken, slack = RecordingChannel("email", fail=True), RecordingChannel("slack")
    service = NotificationService([broken, slack])
    goal = _goal(["email", "slack"])

    sent = await service.notify_task_completed(goal, goal.tasks[0])

    assert sent == 1
    assert "Buy shoes" in slack.sent[0]


@pytest.mark.asyncio
async def test_explicit_channels_override_and_unknown_names_are_ignored() -> None:
    slack = RecordingChannel("slack")
    service = NotificationService([slack])

    assert await service.notify_roadblock(_goal([]), "injured knee", channels=["slack", "pager"]) == 1
    assert await service.notify_progress_update(_goal([]), "ran 5k") == 0
    assert "injured knee" in slack.sent[0]


@pytest.mark.asyncio
async def test_slack_channel_posts_json_text() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="ok")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await SlackWebhookChannel("https://hooks.example/T1", client=client).send("hello")

    assert requests[0].url == "https://hooks.example/T1"
    assert json.loads(requests[0].content) == {"text": "hello"}


@pytest.mark.asyncio
async def test_slack_channel_raises_on_http_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500))

    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await SlackWebhookChannel("https://hooks.example/T1", client=client).send("hello")


def test_build_notifier_registers_slack_only_when_configured() -> None:
    assert build_notifier(GoalCoachSettings(slack_webhook_url="")).channel_names == []
    assert build_notifier(GoalCoachSettings(slack_webhook_url="https://hooks.example/T1")).channel_names == ["slack"]
