from goalcoach.nl.task_extractor import extract_tasks


def test_numbered_bullet_and_labelled_lines() -> None:
    reply = "\n".join([
        "Here's a plan:",
        "1. Research venues",
        "2) Book caterer",
        "- Send invites",
        "• Buy decorations",
        "  * Confirm RSVPs",
        "Task 6: Clean up",
        "Good luck!",
    ])

    assert extract_tasks(reply) == [
        "Research venues",
        "Book caterer",
        "Send invites",
        "Buy decorations",
        "Confirm RSVPs",
        "Clean up",
    ]


def test_exact_duplicates_are_dropped_keeping_first_position() -> None:
    reply = "1. Stretch\n2. Run\n3. Stretch\n4. stretch"

    assert extract_tasks(reply) == ["Stretch", "Run", "stretch"]


def test_prose_yields_nothing() -> None:
    assert extract_tasks("Keep going, you are doing well.") == []
    assert extract_tasks("") == []


def test_mixed_numbered_and_bullet_list() -> None:
    assert extract_tasks("1. Buy shoes\n2. Plan route\n- Stretch") == ["Buy shoes", "Plan route", "Stretch"]


def test_bare_task_labels_yield_no_title() -> None:
    assert extract_tasks("Task 1:") == []
    assert extract_tasks("Task 12") == []
    assert extract_tasks("Task 12: Review notes") == ["Review notes"]
