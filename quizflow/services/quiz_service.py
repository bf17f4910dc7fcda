"""Service layer for quizzes and their questions."""
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession, selectinload

from quizflow.completion.document import CompletionDocument, is_submittable
from quizflow.completion.editor import REDIRECT_URL_REQUIRED
from quizflow.config import QUIZ_PATH_PREFIX
from quizflow.errors import NotFoundError, ValidationError
from quizflow.models.db.quiz import Question, Quiz
from quizflow.services.completion_service import save_completion_document
from quizflow.utils.tokens import build_public_url, generate_id, generate_share_token

logger = logging.getLogger(__name__)


def _clean_questions(questions: list[dict[str, Any]]) -> list[tuple[str, list[str]]]:
    """Validate submitted questions; blank options are dropped."""
    if not questions:
        raise ValidationError("At least one question is required")

    cleaned = []
    for position, question in enumerate(questions, start=1):
        text = str(question.get("questionText", "")).strip()
        if not text:
            raise ValidationError(f"Question {position}: text is required")
        options = [str(option).strip() for option in question.get("options", [])]
        options = [option for option in options if option]
        if len(options) < 2:
            raise ValidationError(f"Question {position}: at least 2 options are required")
        if len(set(options)) != len(options):
            raise ValidationError(f"Question {position}: options must be distinct")
        cleaned.append((text, options))
    return cleaned


def get_quiz(db: DbSession, quiz_id: str) -> Quiz:
    """Get quiz by ID.

    Raises:
        NotFoundError: If no quiz has this ID.
    """
    stmt = (
        select(Quiz)
        .options(selectinload(Quiz.questions), selectinload(Quiz.completion_page))
        .where(Quiz.id == quiz_id)
    )
    quiz = db.execute(stmt).scalar_one_or_none()
    if quiz is None:
        raise NotFoundError("Quiz not found")
    return quiz


def get_owned_quiz(db: DbSession, quiz_id: str, owner_id: int) -> Quiz:
    """Get quiz by ID, hiding quizzes of other owners."""
    quiz = get_quiz(db, quiz_id)
    if quiz.owner_id != owner_id:
        raise NotFoundError("Quiz not found")
    return quiz


def get_quiz_by_key(db: DbSession, key: str) -> Quiz:
    """Get quiz by share slug or ID."""
    stmt = (
        select(Quiz)
        .options(selectinload(Quiz.questions), selectinload(Quiz.completion_page))
        .where((Quiz.share_slug == key) | (Quiz.id == key))
    )
    quiz = db.execute(stmt).scalars().first()
    if quiz is None:
        raise NotFoundError("Quiz not found")
    return quiz


def list_quizzes(db: DbSession, owner_id: int) -> list[Quiz]:
    """List quizzes of an owner, newest first."""
    stmt = (
        select(Quiz)
        .options(selectinload(Quiz.questions), selectinload(Quiz.completion_page))
        .where(Quiz.owner_id == owner_id)
        .order_by(Quiz.created_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


def create_quiz(
    db: DbSession,
    owner_id: int,
    title: str,
    questions: list[dict[str, Any]],
    completion_document: CompletionDocument,
    description: str | None = None,
) -> Quiz:
    """Create a quiz with its questions and completion page.

    Raises:
        ValidationError: If the title is blank, a question is incomplete or the
            completion document has no redirect URL.
    """
    title = title.strip()
    if not title:
        raise ValidationError("Title is required")
    cleaned = _clean_questions(questions)
    if not is_submittable(completion_document):
        raise ValidationError(REDIRECT_URL_REQUIRED)

    quiz = Quiz(
        id=generate_id(),
        title=title,
        description=description.strip() if description else None,
        owner_id=owner_id,
        share_slug=generate_share_token(),
    )
    for index, (text, options) in enumerate(cleaned):
        question = Question(question_text=text, order_index=index)
        question.options = options
        quiz.questions.append(question)

    db.add(quiz)
    db.flush()
    # Commits the quiz together with its page
    save_completion_document(db, quiz.id, completion_document)
    db.refresh(quiz)
    logger.info(f"Created quiz {quiz.id} with {len(cleaned)} questions")
    return quiz


def update_quiz(
    db: DbSession,
    quiz: Quiz,
    title: str | None = None,
    description: str | None = None,
    is_active: bool | None = None,
) -> Quiz:
    """Update quiz metadata."""
    if title is not None:
        title = title.strip()
        if not title:
            raise ValidationError("Title is required")
        quiz.title = title
    if description is not None:
        quiz.description = description.strip() or None
    if is_active is not None:
        quiz.is_active = is_active
    db.commit()
    db.refresh(quiz)
    return quiz


def set_quiz_active(db: DbSession, quiz: Quiz, is_active: bool) -> Quiz:
    return update_quiz(db, quiz, is_active=is_active)


def delete_quiz(db: DbSession, quiz: Quiz) -> None:
    """Delete quiz with its questions, completion page and runs."""
    quiz_id = quiz.id
    db.delete(quiz)
    db.commit()
    logger.info(f"Deleted quiz {quiz_id}")


def share_url(quiz: Quiz, origin: str) -> str:
    """Public URL of a quiz."""
    return build_public_url(origin, quiz.share_slug, QUIZ_PATH_PREFIX)


def serialize_quiz(quiz: Quiz, origin: str, with_questions: bool = False) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "isActive": quiz.is_active,
        "shareSlug": quiz.share_slug,
        "shareUrl": share_url(quiz, origin),
        "completionPageId": quiz.completion_page.id if quiz.completion_page else None,
        "questionCount": quiz.question_count,
        "createdAt": quiz.created_at,
        "updatedAt": quiz.updated_at,
    }
    if with_questions:
        payload["questions"] = [
            {"id": question.id, "questionText": question.question_text, "options": question.options}
            for question in quiz.questions
        ]
    return payload
