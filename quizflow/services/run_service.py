"""Service layer for quiz runs.

A run is a ``Response`` row; each request rebuilds the ``QuizFlow`` state
machine from it, applies one action and writes the result back.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession, selectinload

from quizflow.errors import NotFoundError, ValidationError
from quizflow.models.db.quiz import Quiz
from quizflow.models.db.response import Response, ResponseAnswer, RunStatus
from quizflow.quiz_flow import FlowQuestion, FlowState, QuizFlow
from quizflow.services.completion_service import find_completion_page
from quizflow.services.quiz_service import get_quiz_by_key
from quizflow.utils.tokens import generate_id

logger = logging.getLogger(__name__)


def _flow_questions(quiz: Quiz) -> list[FlowQuestion]:
    return [
        FlowQuestion(question_text=question.question_text, options=question.options)
        for question in quiz.questions
    ]


def build_flow(response: Response) -> QuizFlow:
    """Rebuild the state machine from a stored run."""
    flow = QuizFlow()
    flow.load(_flow_questions(response.quiz))
    if flow.state != FlowState.IN_PROGRESS:
        return flow
    flow.answers = [answer.selected_option for answer in response.answers]
    if response.is_completed:
        flow.current_index = len(flow.questions) - 1
        flow.state = FlowState.COMPLETED
    else:
        flow.current_index = response.current_index
        flow.selected_option = response.selected_option
    return flow


def get_public_quiz(db: DbSession, quiz_key: str) -> Quiz:
    """Look up a quiz respondents may take.

    Raises:
        NotFoundError: If the quiz is unknown, inactive or has no questions.
    """
    quiz = get_quiz_by_key(db, quiz_key)
    if not quiz.is_active or not quiz.questions:
        raise NotFoundError("Quiz not found")
    return quiz


def serialize_public_quiz(quiz: Quiz) -> dict[str, Any]:
    """Quiz as shown to respondents before they start."""
    return {
        "quizId": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "questionCount": quiz.question_count,
        "questions": [
            {"questionText": question.question_text, "options": question.options}
            for question in quiz.questions
        ],
        "startUrl": f"/api/quiz/{quiz.share_slug}/runs",
    }


def start_run(db: DbSession, quiz_key: str, respondent_identifier: str | None = None) -> Response:
    """Start a run of an active quiz."""
    quiz = get_public_quiz(db, quiz_key)

    response = Response(
        id=generate_id(),
        quiz_id=quiz.id,
        respondent_identifier=respondent_identifier,
    )
    db.add(response)
    db.commit()
    db.refresh(response)
    return response


def get_run(db: DbSession, run_id: str) -> Response:
    stmt = (
        select(Response)
        .options(
            selectinload(Response.answers),
            selectinload(Response.quiz).selectinload(Quiz.questions),
        )
        .where(Response.id == run_id)
    )
    response = db.execute(stmt).scalar_one_or_none()
    if response is None:
        raise NotFoundError("Run not found")
    return response


def select_option(db: DbSession, run_id: str, option: str) -> tuple[Response, QuizFlow]:
    response = get_run(db, run_id)
    flow = build_flow(response)
    flow.select(option)
    response.selected_option = flow.selected_option
    db.commit()
    return response, flow


def advance_run(db: DbSession, run_id: str) -> tuple[Response, QuizFlow]:
    """Commit the selected option; completes the run after the last question."""
    response = get_run(db, run_id)
    flow = build_flow(response)
    answered_index = flow.current_index
    state = flow.advance()

    stored_question = response.quiz.questions[answered_index]
    response.answers.append(
        ResponseAnswer(
            question_id=stored_question.id,
            question_index=answered_index,
            selected_option=flow.answers[-1],
        )
    )
    response.selected_option = None
    response.current_index = flow.current_index
    if state == FlowState.COMPLETED:
        response.status = RunStatus.COMPLETED.value
        response.completed_at = datetime.now(timezone.utc)
        logger.info(f"Run {response.id} completed quiz {response.quiz_id}")
    db.commit()
    return response, flow


def continue_url(db: DbSession, response: Response) -> str:
    """Destination of the completion page's primary button.

    Raises:
        ValidationError: If the run is not completed yet.
        NotFoundError: If the quiz has no completion page.
    """
    if not response.is_completed:
        raise ValidationError("Quiz is not completed yet")
    page = find_completion_page(db, response.quiz_id)
    if page is None:
        raise NotFoundError("Completion page not found")
    return page.document.primary_button_url


def serialize_run(response: Response, flow: QuizFlow, continue_to: str | None = None) -> dict[str, Any]:
    position, total, percent = flow.progress()
    question = flow.current_question
    return {
        "runId": response.id,
        "quizId": response.quiz_id,
        "quizTitle": response.quiz.title,
        "state": flow.state.value,
        "currentIndex": flow.current_index,
        "questionCount": total,
        "percentComplete": percent,
        "selectedOption": flow.selected_option,
        "question": (
            {"questionText": question.question_text, "options": question.options}
            if question is not None
            else None
        ),
        "answers": list(flow.answers),
        "continueUrl": continue_to,
    }
