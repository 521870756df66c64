"""Natural-language heuristics: intents, entity resolution, reply labelling, extraction."""

from goalcoach.nl.entity_resolver import resolve_goal, resolve_task
from goalcoach.nl.intent_engine import IntentEngine, Intents
from goalcoach.nl.response_classifier import ResponseType, classify_response
from goalcoach.nl.task_extractor import extract_tasks

__all__ = [
    "IntentEngine",
    "Intents",
    "ResponseType",
    "classify_response",
    "extract_tasks",
    "resolve_goal",
    "resolve_task",
]
