import pytest

from quizflow.quiz_flow import FlowError, FlowQuestion, FlowState, QuizFlow

QUESTIONS = [
    FlowQuestion("Favourite colour?", ["Red", "Blue"]),
    FlowQuestion("Favourite animal?", ["Cat", "Dog", "Owl"]),
]


def test_load_without_questions_is_not_found() -> None:
    flow = QuizFlow()
    assert flow.load(None) == FlowState.NOT_FOUND
    assert QuizFlow().load([]) == FlowState.NOT_FOUND


def test_load_starts_at_first_question() -> None:
    flow = QuizFlow()
    assert flow.load(QUESTIONS) == FlowState.IN_PROGRESS
    assert flow.current_index == 0
    assert flow.current_question.question_text == "Favourite colour?"
    assert flow.progress() == (1, 2, 50)

    with pytest.raises(FlowError):
        flow.load(QUESTIONS)


def test_advance_requires_a_selection() -> None:
    flow = QuizFlow()
    flow.load(QUESTIONS)
    with pytest.raises(FlowError):
        flow.advance()
    assert flow.state == FlowState.IN_PROGRESS
    assert flow.current_index == 0
    assert flow.answers == []


def test_select_validates_and_overwrites() -> None:
    flow = QuizFlow()
    flow.load(QUESTIONS)
    with pytest.raises(FlowError):
        flow.select("Green")
    flow.select("Red")
    flow.select("Blue")
    assert flow.selected_option == "Blue"


def test_full_run_completes_once() -> None:
    flow = QuizFlow()
    flow.load(QUESTIONS)

    flow.select("Red")
    assert flow.advance() == FlowState.IN_PROGRESS
    assert flow.current_index == 1
    assert flow.selected_option is None

    flow.select("Owl")
    assert flow.advance() == FlowState.COMPLETED
    assert flow.answers == ["Red", "Owl"]
    assert flow.current_question is None
    assert flow.progress() == (2, 2, 100)

    with pytest.raises(FlowError):
        flow.select("Cat")
    with pytest.raises(FlowError):
        flow.advance()
    assert flow.answers == ["Red", "Owl"]


def test_select_before_load_is_rejected() -> None:
    flow = QuizFlow()
    with pytest.raises(FlowError):
        flow.select("Red")
    assert flow.progress() == (0, 0, 0)
