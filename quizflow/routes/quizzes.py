"""Quiz management endpoints (admin only)."""
from contextlib import nullcontext
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session as DbSession

from quizflow.completion.document import CompletionDocument, document_to_payload
from quizflow.database import get_db
from quizflow.dependencies import get_current_user, get_draft_store, get_origin
from quizflow.models import CompletionPageResponse, QuizCreate, QuizDetail, QuizSummary, QuizUpdate
from quizflow.models.db.completion_page import CompletionPage
from quizflow.models.db.user import User
from quizflow.services import quiz_service
from quizflow.services.completion_service import (
    completion_url,
    get_completion_page,
    save_completion_document,
)
from quizflow.services.editor_service import DraftStore

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


def _page_response(page: CompletionPage, origin: str) -> CompletionPageResponse:
    return CompletionPageResponse(
        id=page.id,
        quizId=page.quiz_id,
        url=completion_url(page, origin),
        document=document_to_payload(page.document),
        updatedAt=page.updated_at,
    )


@router.get("", response_model=list[QuizSummary])
def list_quizzes(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> list[dict[str, Any]]:
    """List quizzes of the current user, newest first."""
    return [quiz_service.serialize_quiz(quiz, origin) for quiz in quiz_service.list_quizzes(db, current_user.id)]


@router.post("", response_model=QuizDetail, status_code=status.HTTP_201_CREATED)
def create_quiz(
    payload: QuizCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    drafts: Annotated[DraftStore, Depends(get_draft_store)],
    origin: Annotated[str, Depends(get_origin)],
) -> dict[str, Any]:
    """Create a quiz with its questions and completion page."""
    editing = nullcontext()
    if payload.draftId is not None:
        editing = drafts.editing(payload.draftId, current_user.id)

    with editing as draft:
        document = draft.editor.document if draft is not None else payload.completionPage
        quiz = quiz_service.create_quiz(
            db,
            owner_id=current_user.id,
            title=payload.title,
            questions=[question.model_dump() for question in payload.questions],
            completion_document=document,
            description=payload.description,
        )
        if draft is not None:
            # Later saves of the draft go to the new quiz
            draft.quiz_id = quiz.id
    return quiz_service.serialize_quiz(quiz, origin, with_questions=True)


@router.get("/{quiz_id}", response_model=QuizDetail)
def get_quiz(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> dict[str, Any]:
    quiz = quiz_service.get_owned_quiz(db, quiz_id, current_user.id)
    return quiz_service.serialize_quiz(quiz, origin, with_questions=True)


@router.patch("/{quiz_id}", response_model=QuizDetail)
def update_quiz(
    quiz_id: str,
    payload: QuizUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> dict[str, Any]:
    """Update title, description or active flag."""
    quiz = quiz_service.get_owned_quiz(db, quiz_id, current_user.id)
    quiz = quiz_service.update_quiz(
        db,
        quiz,
        title=payload.title,
        description=payload.description,
        is_active=payload.isActive,
    )
    return quiz_service.serialize_quiz(quiz, origin, with_questions=True)


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> None:
    """Delete a quiz with its completion page and runs."""
    quiz = quiz_service.get_owned_quiz(db, quiz_id, current_user.id)
    quiz_service.delete_quiz(db, quiz)


@router.get("/{quiz_id}/completion-page", response_model=CompletionPageResponse)
def get_quiz_completion_page(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> CompletionPageResponse:
    quiz_service.get_owned_quiz(db, quiz_id, current_user.id)
    return _page_response(get_completion_page(db, quiz_id), origin)


@router.put("/{quiz_id}/completion-page", response_model=CompletionPageResponse)
def replace_quiz_completion_page(
    quiz_id: str,
    document: CompletionDocument,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> CompletionPageResponse:
    """Replace the whole completion document; nothing is stored on failure."""
    quiz_service.get_owned_quiz(db, quiz_id, current_user.id)
    page = save_completion_document(db, quiz_id, document)
    return _page_response(page, origin)
