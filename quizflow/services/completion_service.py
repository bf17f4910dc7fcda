"""Service layer for stored completion documents."""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession

from quizflow.completion.document import CompletionDocument, is_submittable
from quizflow.completion.editor import REDIRECT_URL_REQUIRED
from quizflow.config import COMPLETION_PATH_PREFIX
from quizflow.errors import NotFoundError, ValidationError
from quizflow.models.db.completion_page import CompletionPage
from quizflow.utils.tokens import build_public_url, generate_id

logger = logging.getLogger(__name__)


def find_completion_page(db: DbSession, quiz_id: str) -> CompletionPage | None:
    stmt = select(CompletionPage).where(CompletionPage.quiz_id == quiz_id)
    return db.execute(stmt).scalar_one_or_none()


def get_completion_page(db: DbSession, quiz_id: str) -> CompletionPage:
    """Get the completion page row of a quiz.

    Raises:
        NotFoundError: If the quiz has no completion page.
    """
    page = find_completion_page(db, quiz_id)
    if page is None:
        raise NotFoundError("Completion page not found")
    return page


def get_completion_document(db: DbSession, quiz_id: str) -> CompletionDocument:
    return get_completion_page(db, quiz_id).document


def get_completion_page_by_id(db: DbSession, page_id: str) -> CompletionPage | None:
    """Look up a page by its public id; None when unknown."""
    return db.get(CompletionPage, page_id)


def save_completion_document(
    db: DbSession, quiz_id: str, document: CompletionDocument
) -> CompletionPage:
    """Insert or replace the whole document of a quiz.

    Raises:
        ValidationError: If the document has no redirect URL.
    """
    if not is_submittable(document):
        raise ValidationError(REDIRECT_URL_REQUIRED)

    page = find_completion_page(db, quiz_id)
    if page is None:
        page = CompletionPage(id=generate_id(), quiz_id=quiz_id)
        db.add(page)
    page.document = document
    db.commit()
    db.refresh(page)
    logger.info(f"Saved completion page {page.id} for quiz {quiz_id}")
    return page


def completion_url(page: CompletionPage, origin: str) -> str:
    return build_public_url(origin, page.id, COMPLETION_PATH_PREFIX)
