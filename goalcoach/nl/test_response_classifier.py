from goalcoach.nl.response_classifier import ResponseType, classify_response


def test_task_words_with_suggestion_verbs_are_suggestions() -> None:
    reply = "Here are some tasks I suggest:\n1. Stretch\n2. Run 5k"

    assert classify_response(reply) is ResponseType.TASK_SUGGESTION


def test_created_tasks_beat_encouragement() -> None:
    reply = "Great job! I've created 3 tasks for you."

    assert classify_response(reply, "help me get fit") is ResponseType.TASK_CREATION


def test_question_needs_mark_and_interrogative() -> None:
    assert classify_response("What would you like to focus on?") is ResponseType.QUESTION
    assert classify_response("Ready?") is ResponseType.GENERAL


def test_encouragement_phrases() -> None:
    assert classify_response("Well done, keep it up!") is ResponseType.ENCOURAGEMENT
    assert classify_response("I'm proud of you") is ResponseType.ENCOURAGEMENT


def test_everything_else_is_general() -> None:
    assert classify_response("Okay.") is ResponseType.GENERAL
    assert classify_response("") is ResponseType.GENERAL


def test_only_task_types_imply_new_tasks() -> None:
    assert ResponseType.TASK_SUGGESTION.implies_new_tasks
    assert ResponseType.TASK_CREATION.implies_new_tasks
    assert not ResponseType.QUESTION.implies_new_tasks
    assert not ResponseType.GENERAL.implies_new_tasks


def test_inflected_suggestion_verbs_still_count() -> None:
    added = "I've added these tasks to your goal:\n- Write first post\n- Share it"
    suggested = "Here are some suggested tasks:\n1. Stretch\n2. Run"

    assert classify_response(added) is ResponseType.TASK_SUGGESTION
    assert classify_response(suggested) is ResponseType.TASK_SUGGESTION
    assert classify_response("Let's create a task list") is ResponseType.TASK_SUGGESTION
