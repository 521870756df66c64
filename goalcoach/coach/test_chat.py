import itertools

import pytest

from goalcoach.coach.chat import CoachChat
from goalcoach.coach.prompts import NEW_GOAL_HINT
from goalcoach.domain import Complexity, NewGoal, Task
from goalcoach.nl.response_classifier import ResponseType
from goalcoach.notifications.service import NotificationService
from goalcoach.providers.base import LLMProvider, LLMProviderError
from goalcoach.storage.memory import InMemoryGoalStore


class FakeProvider(LLMProvider):
    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        super().__init__(api_key="test")
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, system_prompt, user_prompt, *, model=None, json_mode=False) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingChannel:
    name = "fake"

    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, text: str) -> None:
        self.sent.append(text)


def _ids(prefix: str):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def _store() -> InMemoryGoalStore:
    return InMemoryGoalStore(id_factory=_ids("g"))


async def _seed(store: InMemoryGoalStore, *titles: str, title: str = "Launch a blog") -> str:
    goal = await store.create_goal(NewGoal(
        title=title,
        user_id="u1",
        tasks=[Task(id=f"t{i}", title=t) for i, t in enumerate(titles, start=1)],
        notification_channels=["fake"],
    ))
    return goal.id


@pytest.mark.asyncio
async def test_new_goal_is_created_from_suggested_list() -> None:
    store = _store()
    provider = FakeProvider("Here are some tasks I suggest:\n1. Stretch daily\n2. Run 5k")
    coach = CoachChat(store, provider, id_factory=_ids("t"))
    history: list[dict[str, str]] = []

    result = await coach.process_chat_turn("I want to get fit. Any ideas?", "u1", conversation_history=history)

    goals = await store.get_goals("u1")
    assert len(goals) == 1
    assert goals[0].title == "I want to get fit"
    assert [t.title for t in goals[0].tasks] == ["Stretch daily", "Run 5k"]
    assert goals[0].total_estimated_minutes == 60
    assert result.type is ResponseType.TASK_SUGGESTION
    assert result.related_tasks == ["t1", "t2"]
    assert result.tasks_created
    assert [m["role"] for m in history] == ["user", "assistant"]
    assert NEW_GOAL_HINT in provider.calls[0][0]
    assert provider.calls[0][1] == "user: I want to get fit. Any ideas?"


@pytest.mark.asyncio
async def test_suggested_tasks_are_appended_to_the_goal_in_focus() -> None:
    store = _store()
    goal_id = await _seed(store, "Pick a platform")
    coach = CoachChat(store, FakeProvider("Let's add these tasks:\n- Write first post\n- Share it"), id_factory=_ids("n"))

    result = await coach.process_chat_turn("What next?", "u1", goal_id=goal_id)

    goal = await store.get_goal(goal_id)
    assert [t.title for t in goal.tasks] == ["Pick a platform", "Write first post", "Share it"]
    assert result.related_tasks == ["n1", "n2"]
    assert goal.progress == 0


@pytest.mark.asyncio
async def test_suggestions_without_goal_or_create_intent_change_nothing() -> None:
    store = _store()
    coach = CoachChat(store, FakeProvider("I suggest these tasks:\n1. Breathe"))

    result = await coach.process_chat_turn("What do you think?", "u1")

    assert await store.get_goals() == []
    assert not result.tasks_created
    assert result.related_tasks == []


@pytest.mark.asyncio
async def test_completing_a_task_by_name_updates_progress_and_notifies() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors", "Write the outline")
    channel = RecordingChannel()
    coach = CoachChat(store, FakeProvider("Great job!"), notifier=NotificationService([channel]))

    result = await coach.process_chat_turn("I finished the outline task, mark it done", "u1", goal_id=goal_id)

    goal = await store.get_goal(goal_id)
    assert goal.find_task("t2").completed
    assert goal.progress == 50
    assert result.type is ResponseType.ENCOURAGEMENT
    assert result.related_tasks == ["t2"]
    assert result.tasks_created
    assert len(channel.sent) == 1
    assert "Write the outline" in channel.sent[0]


@pytest.mark.asyncio
async def test_removing_a_task_by_index() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors", "Write the outline")
    coach = CoachChat(store, FakeProvider("Okay, it's gone."))

    result = await coach.process_chat_turn("Please remove task 1", "u1", goal_id=goal_id)

    goal = await store.get_goal(goal_id)
    assert [t.id for t in goal.tasks] == ["t2"]
    assert result.related_tasks == ["t1"]
    assert result.message == "Okay, it's gone."


@pytest.mark.asyncio
async def test_editing_task_attributes() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors", "Write the outline")
    coach = CoachChat(store, FakeProvider("Sure, updated."))

    await coach.process_chat_turn("Change task 1 to high priority, 45 minutes", "u1", goal_id=goal_id)

    task = (await store.get_goal(goal_id)).find_task("t1")
    assert task.complexity is Complexity.HIGH
    assert task.estimated_minutes == 45
    assert task.title == "Research competitors"
    assert not task.completed


@pytest.mark.asyncio
async def test_unresolved_target_skips_the_mutation() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors", "Write the outline", "Publish")
    coach = CoachChat(store, FakeProvider("Which one do you mean?"))

    result = await coach.process_chat_turn("remove task 9", "u1", goal_id=goal_id)

    assert len((await store.get_goal(goal_id)).tasks) == 3
    assert not result.tasks_created
    assert result.message == "Which one do you mean?"


@pytest.mark.asyncio
async def test_goal_removal_short_circuits_with_confirmation() -> None:
    store = _store()
    await _seed(store, title="Run a marathon")
    await _seed(store, title="Learn Spanish")
    coach = CoachChat(store, FakeProvider("Here are some tasks I suggest:\n1. Something"))

    result = await coach.process_chat_turn("Delete my Spanish goal", "u1")

    assert [g.title for g in await store.get_goals("u1")] == ["Run a marathon"]
    assert result.message.startswith('I\'ve deleted your goal "Learn Spanish".')
    assert result.type is ResponseType.GENERAL
    assert result.tasks_created


@pytest.mark.asyncio
async def test_provider_failure_propagates_without_mutation() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors")
    coach = CoachChat(store, FakeProvider(error=LLMProviderError("boom")))
    history: list[dict[str, str]] = []

    with pytest.raises(LLMProviderError):
        await coach.process_chat_turn("mark task 1 done", "u1", goal_id=goal_id, conversation_history=history)

    assert not (await store.get_goal(goal_id)).find_task("t1").completed
    assert history == [{"role": "user", "content": "mark task 1 done"}]


@pytest.mark.asyncio
async def test_unknown_goal_id_still_replies() -> None:
    coach = CoachChat(_store(), FakeProvider("How can I help?"))

    result = await coach.process_chat_turn("hello", "u1", goal_id="missing")

    assert result.message == "How can I help?"
    assert result.type is ResponseType.QUESTION
    assert not result.tasks_created


@pytest.mark.asyncio
async def test_goal_context_lists_the_goal_in_focus() -> None:
    store = _store()
    goal_id = await _seed(store, "Research competitors")
    provider = FakeProvider("ok")

    await CoachChat(store, provider).process_chat_turn("hi", "u1", goal_id=goal_id)

    system_prompt = provider.calls[0][0]
    assert '"Launch a blog"' in system_prompt
    assert "Research competitors (Not completed)" in system_prompt
    assert NEW_GOAL_HINT not in system_prompt


@pytest.mark.asyncio
async def test_added_tasks_reply_appends_to_the_goal() -> None:
    store = _store()
    goal_id = await _seed(store, "Pick a platform")
    reply = "I've added these tasks to your goal:\n- Write first post\n- Share it"
    coach = CoachChat(store, FakeProvider(reply), id_factory=_ids("n"))

    result = await coach.process_chat_turn("What next?", "u1", goal_id=goal_id)

    goal = await store.get_goal(goal_id)
    assert result.type is ResponseType.TASK_SUGGESTION
    assert [t.title for t in goal.tasks] == ["Pick a platform", "Write first post", "Share it"]
    assert result.related_tasks == ["n1", "n2"]
    assert result.tasks_created


@pytest.mark.asyncio
async def test_suggested_tasks_reply_creates_a_goal() -> None:
    store = _store()
    coach = CoachChat(store, FakeProvider("Here are some suggested tasks:\n1. Stretch\n2. Run"), id_factory=_ids("t"))

    result = await coach.process_chat_turn("I want to get fit", "u1")

    goals = await store.get_goals("u1")
    assert result.type is ResponseType.TASK_SUGGESTION
    assert [t.title for t in goals[0].tasks] == ["Stretch", "Run"]
