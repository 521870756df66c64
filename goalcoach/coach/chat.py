"""One chat turn with the coach: reply, detect intents, mutate goals.

A turn is a single sequential pass. The text-generation call is the only
suspension point besides storage I/O, and its failures propagate to the
caller untouched. A target that cannot be resolved simply skips its
mutation; the turn still returns the generated reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from goalcoach.coach import prompts
from goalcoach.domain import Goal, GoalPatch
from goalcoach.goals import mutations
from goalcoach.nl.edit_parser import parse_task_edit
from goalcoach.nl.entity_resolver import resolve_goal, resolve_task
from goalcoach.nl.intent_engine import IntentEngine, Intents
from goalcoach.nl.response_classifier import ResponseType, classify_response
from goalcoach.nl.task_extractor import extract_tasks
from goalcoach.notifications.service import NotificationService
from goalcoach.providers.base import LLMProvider
from goalcoach.storage.base import GoalStore
from goalcoach.utils.ids import IdFactory, new_id


@dataclass
class ChatResponse:
    message: str
    type: ResponseType
    related_tasks: list[str] = field(default_factory=list)
    # true whenever this turn changed stored goal data; clients refresh on it
    tasks_created: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "type": self.type.value,
            "related_tasks": list(self.related_tasks),
            "tasks_created": self.tasks_created,
        }


class CoachChat:
    """Conversation orchestrator. All collaborators are injected."""

    def __init__(
        self,
        store: GoalStore,
        provider: LLMProvider,
        id_factory: IdFactory = new_id,
        notifier: NotificationService | None = None,
        intent_engine: IntentEngine | None = None,
        minutes_per_task: int = mutations.DEFAULT_MINUTES_PER_TASK,
    ) -> None:
        self._store = store
        self._provider = provider
        self._new_id = id_factory
        self._notifier = notifier
        self._intents = intent_engine or IntentEngine()
        self._minutes_per_task = minutes_per_task

    async def process_chat_turn(
        self,
        message: str,
        user_id: str,
        goal_id: str | None = None,
        conversation_history: list[dict[str, str]] | None = None,
    ) -> ChatResponse:
        """Run one turn.

        ``conversation_history`` is appended to in place (user message, then
        the reply) so the caller can carry it into the next turn.

        Raises:
            LLMProviderError: the text-generation service failed.
        """
        history = conversation_history if conversation_history is not None else []
        history.append({"role": "user", "content": message})

        goal: Goal | None = None
        goals: list[Goal] = []
        if goal_id:
            goal = await self._store.get_goal(goal_id)
            if goal is None:
                logger.warning(f"Chat turn for unknown goal {goal_id}; continuing without goal context")
        else:
            goals = await self._store.get_goals(user_id)

        intents = self._intents.detect(message)

        system_prompt = prompts.chat_system_prompt(
            prompts.goal_context(goal, goals), new_goal=intents.create_goal,
        )
        reply = await self._provider.generate(system_prompt, prompts.flatten_history(history))
        history.append({"role": "assistant", "content": reply})

        reply_type = classify_response(reply, message)
        logger.debug(f"Reply classified as {reply_type.value}; intents={intents.names}")

        if intents.remove_goal:
            deleted = await self._remove_goal(message, user_id, goal, goals)
            if deleted is not None:
                return ChatResponse(
                    message=(
                        f'I\'ve deleted your goal "{deleted.title}". '
                        "Is there anything else you'd like to work on?"
                    ),
                    type=ResponseType.GENERAL,
                    tasks_created=True,
                )

        related: list[str] = []
        changed = False

        if goal is not None and (intents.remove_task or intents.edit_task):
            updated, touched = await self._mutate_task(message, goal, intents)
            if updated is not None:
                goal = updated
                related.extend(touched)
                changed = True

        if reply_type.implies_new_tasks:
            created = await self._create_tasks(message, user_id, reply, goal, intents)
            if created:
                related.extend(created)
                changed = True

        return ChatResponse(
            message=reply,
            type=reply_type,
            related_tasks=related,
            tasks_created=changed,
        )

    async def _remove_goal(
        self, message: str, user_id: str, goal: Goal | None, goals: list[Goal],
    ) -> Goal | None:
        target = goal
        if target is None:
            candidates = goals or await self._store.get_goals(user_id)
            target = resolve_goal(message, candidates)
        if target is None:
            logger.info("Goal removal requested but no goal matched; skipping")
            return None
        if not await self._store.delete_goal(target.id):
            logger.warning(f"Goal {target.id} vanished before it could be deleted")
            return None
        logger.info(f"Deleted goal {target.id} ({target.title!r}) from chat")
        return target

    async def _mutate_task(
        self, message: str, goal: Goal, intents: Intents,
    ) -> tuple[Goal | None, list[str]]:
        task = resolve_task(message, goal.tasks)
        if task is None:
            logger.info(f"Task change requested on goal {goal.id} but no task matched; skipping")
            return None, []

        if intents.remove_task:
            updated = mutations.remove_task(goal, task.id)
            action = "removed"
        elif intents.complete_task:
            updated = mutations.complete_task(goal, task.id)
            action = "completed"
        else:
            patch = parse_task_edit(message)
            if patch.is_empty():
                logger.info(f"Edit requested for task {task.id} but nothing to change was found")
                return None, []
            updated = mutations.edit_task(goal, task.id, patch)
            action = "edited"

        if updated is None:
            return None, []
        stored = await self._store.update_goal(goal.id, GoalPatch(tasks=updated.tasks))
        if stored is None:
            logger.warning(f"Goal {goal.id} disappeared while updating task {task.id}")
            return None, []
        logger.info(f"Task {task.id} ({task.title!r}) {action} on goal {goal.id}; progress={stored.progress}%")

        if action == "completed" and self._notifier is not None:
            done = stored.find_task(task.id)
            if done is not None:
                await self._notifier.notify_task_completed(stored, done)
        return stored, [task.id]

    async def _create_tasks(
        self,
        message: str,
        user_id: str,
        reply: str,
        goal: Goal | None,
        intents: Intents,
    ) -> list[str]:
        if not intents.create_goal and goal is None:
            return []
        titles = extract_tasks(reply)
        if not titles:
            logger.info("Reply suggested tasks but none could be extracted")
            return []

        if goal is None:
            new = mutations.build_goal_from_tasks(
                message, titles, user_id, self._new_id, self._minutes_per_task,
            )
            created = await self._store.create_goal(new)
            logger.info(f"Created goal {created.id} ({created.title!r}) with {len(created.tasks)} tasks from chat")
            if self._notifier is not None:
                await self._notifier.notify_goal_created(created)
            return [t.id for t in created.tasks]

        before = {t.id for t in goal.tasks}
        extended = mutations.append_tasks(goal, titles, self._new_id)
        stored = await self._store.update_goal(goal.id, GoalPatch(tasks=extended.tasks))
        if stored is None:
            logger.warning(f"Goal {goal.id} disappeared before tasks could be appended")
            return []
        added = [t.id for t in stored.tasks if t.id not in before]
        logger.info(f"Appended {len(added)} tasks to goal {goal.id}")
        return added
