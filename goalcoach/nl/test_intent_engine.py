from goalcoach.nl.intent_engine import (
    IntentEngine,
    detect_completion_intent,
    detect_create_goal_intent,
    detect_edit_task_intent,
    detect_remove_goal_intent,
    detect_remove_task_intent,
)


def test_create_goal_matches_wish_phrases_case_insensitively() -> None:
    assert detect_create_goal_intent("I want to learn Spanish")
    assert detect_create_goal_intent("Can you HELP ME plan a wedding?")
    assert not detect_create_goal_intent("What's the weather like?")


def test_empty_message_has_no_intents() -> None:
    intents = IntentEngine().detect("")

    assert not intents.any
    assert intents.names == []
    assert not detect_remove_task_intent(None)


def test_goal_removal_excludes_task_removal() -> None:
    text = "Please delete my fitness goal"

    assert detect_remove_goal_intent(text)
    assert not detect_remove_task_intent(text)


def test_goal_removal_wins_even_when_a_task_noun_is_present() -> None:
    text = "Remove the goal with the task about cooking"

    assert detect_remove_goal_intent(text)
    assert not detect_remove_task_intent(text)


def test_task_removal_by_number_or_pronoun() -> None:
    assert detect_remove_task_intent("remove task 2")
    assert detect_remove_task_intent("get rid of it")
    assert detect_remove_task_intent("drop #3 please")
    assert not detect_remove_goal_intent("remove task 2")


def test_pronoun_target_needs_a_whole_word() -> None:
    # "priority" contains "it" but is not a reference to a task
    assert not detect_edit_task_intent("update the priority")
    assert detect_edit_task_intent("update it to high priority")


def test_completion_words_imply_edit_with_a_target() -> None:
    assert detect_edit_task_intent("I finished the outline task")
    assert not detect_edit_task_intent("I finished my lunch")


def test_completion_mutation_uses_the_narrow_keyword_set() -> None:
    assert detect_completion_intent("mark it done")
    assert not detect_completion_intent("mark it urgent")


def test_engine_bundles_complete_task_as_edit_plus_completion() -> None:
    engine = IntentEngine()

    done = engine.detect("Mark the outline task as done")
    assert done.edit_task and done.complete_task
    assert done.names == ["edit_task", "complete_task"]

    edit = engine.detect("Change it to high priority")
    assert edit.edit_task
    assert not edit.complete_task


def test_several_intents_can_hold_at_once() -> None:
    intents = IntentEngine().detect("I need to remove task 1")

    assert intents.create_goal
    assert intents.remove_task
