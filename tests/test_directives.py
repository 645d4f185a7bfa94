"""
Directive Extraction Tests
===========================
Validates:
1. Keyword rules turn assistant text into tasks
2. Unrecognised text and fallback strings yield nothing
3. The task board keeps the 2 newest and supports status changes
"""

from orbita.assistant.directives import DirectiveRule, TaskBoard, extract_directives
from orbita.config.settings import ASSISTANT_FALLBACK, ASSISTANT_EMPTY_RESPONSE, ASSISTANT_GREETING
from orbita.schemas import Task


def test_breathing_reset_yields_respiration_cycle():
    tasks = extract_directives("Let's try some breathing exercises to reset")
    assert len(tasks) == 1
    task = tasks[0]
    assert task.title == "Respiration Cycle Beta"
    assert task.priority == "high"
    assert task.category == "Focus"
    assert task.cognitive_load == 2
    assert task.status == "recommended"
    assert [s.title for s in task.sub_tasks] == ["Box Breathing (5-5-5)"]
    assert task.sub_tasks[0].completed is False


def test_nominal_text_yields_nothing():
    assert extract_directives("status nominal") == []
    assert extract_directives("") == []


def test_case_insensitive():
    assert [t.title for t in extract_directives("BREATHE. Hold for four.")] == ["Respiration Cycle Beta"]


def test_one_task_per_rule_even_with_repeated_keywords():
    tasks = extract_directives("Breathe, reset, breathe again, reset.")
    assert len(tasks) == 1


def test_multiple_rules_contribute():
    text = "Tachycardia potential. Initiate Neural Stand-down and begin a hydration cycle."
    titles = [t.title for t in extract_directives(text)]
    assert titles == ["Neural Stand-down", "Hydration Cycle"]


def test_fallback_texts_raise_no_tasks():
    for text in (ASSISTANT_FALLBACK, ASSISTANT_EMPTY_RESPONSE, ASSISTANT_GREETING):
        assert extract_directives(text) == []


def test_task_serialises_camel_case():
    data = extract_directives("reset")[0].model_dump(by_alias=True)
    assert data["cognitiveLoad"] == 2
    assert data["subTasks"][0]["title"] == "Box Breathing (5-5-5)"


def test_custom_rules():
    rule = DirectiveRule(("eject",), lambda: Task(
        id="t-x", title="Egress Drill", priority="low", category="Focus", cognitive_load=5,
    ))
    assert [t.title for t in extract_directives("prepare to EJECT", rules=[rule])] == ["Egress Drill"]
    assert extract_directives("reset", rules=[rule]) == []


def test_board_keeps_two_newest():
    board = TaskBoard()
    first = extract_directives("reset")
    second = extract_directives("hydrate")
    third = extract_directives("darkness rest")

    board.merge(first)
    board.merge(second)
    assert len(board.tasks) == 2
    board.merge(third)
    assert len(board.tasks) == 2
    assert [t.title for t in board.tasks] == ["Darkness Rest (15 min)", "Hydration Cycle"]


def test_board_merge_of_many_is_truncated():
    board = TaskBoard()
    board.merge(extract_directives("reset"))
    board.merge(extract_directives("stand down, hydrate, darkness"))
    assert [t.title for t in board.tasks] == ["Neural Stand-down", "Hydration Cycle"]


def test_board_empty_merge_is_noop():
    board = TaskBoard()
    board.merge(extract_directives("reset"))
    board.merge([])
    assert len(board.tasks) == 1


def test_status_change_and_unknown_id():
    board = TaskBoard()
    board.merge(extract_directives("reset"))
    task_id = board.tasks[0].id
    assert board.set_status(task_id, "postponed").status == "postponed"
    assert board.set_status("missing", "completed") is None


def test_toggle_subtask():
    board = TaskBoard()
    board.merge(extract_directives("reset"))
    task_id = board.tasks[0].id
    assert board.toggle_subtask(task_id, "st1").completed is True
    assert board.toggle_subtask(task_id, "st1").completed is False
    assert board.toggle_subtask(task_id, "st9") is None
    assert board.toggle_subtask("missing", "st1") is None


def test_task_ids_unique():
    ids = {t.id for _ in range(30) for t in extract_directives("reset")}
    assert len(ids) == 30
