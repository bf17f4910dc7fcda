"""Completion page editor endpoints (admin only).

Every mutation answers with the whole draft: the document and its preview.
"""
from typing import Annotated, Any, Iterator

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session as DbSession

from quizflow.completion.document import document_to_payload
from quizflow.completion.html import render_html
from quizflow.database import get_db
from quizflow.dependencies import get_current_user, get_draft_store, get_origin
from quizflow.errors import NotFoundError
from quizflow.models import (
    CompletionPageResponse,
    DraftCreate,
    DraftResponse,
    FieldUpdate,
    ShareUrlResponse,
    TextBlockCreate,
)
from quizflow.models.db.user import User
from quizflow.services import quiz_service
from quizflow.services.completion_service import completion_url
from quizflow.services.editor_service import Draft, DraftStore, open_draft, save_draft

router = APIRouter(prefix="/api/editor/drafts", tags=["editor"])


def _current_draft(
    draft_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    drafts: Annotated[DraftStore, Depends(get_draft_store)],
) -> Iterator[Draft]:
    with drafts.editing(draft_id, current_user.id) as draft:
        yield draft


CurrentDraft = Annotated[Draft, Depends(_current_draft)]


def _require(found: bool, label: str) -> None:
    if not found:
        raise NotFoundError(f"{label} not found")


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def create_draft(
    payload: DraftCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    drafts: Annotated[DraftStore, Depends(get_draft_store)],
) -> dict[str, Any]:
    """Open a draft of a quiz's completion page, or a blank one."""
    if payload.quizId is not None:
        quiz_service.get_owned_quiz(db, payload.quizId, current_user.id)
    draft = open_draft(db, drafts, current_user.id, quiz_id=payload.quizId)
    return draft.to_dict()


@router.get("/{draft_id}", response_model=DraftResponse)
def get_draft(draft: CurrentDraft) -> dict[str, Any]:
    return draft.to_dict()


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_draft(
    draft: CurrentDraft,
    drafts: Annotated[DraftStore, Depends(get_draft_store)],
) -> None:
    drafts.discard(draft.id, draft.owner_id)


@router.patch("/{draft_id}/fields", response_model=DraftResponse)
def set_field(payload: FieldUpdate, draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.set_field(payload.field, payload.value)
    return draft.to_dict()


@router.patch("/{draft_id}/sections/{section}", response_model=DraftResponse)
def update_section(section: str, payload: FieldUpdate, draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.update_section(section, payload.field, payload.value)
    return draft.to_dict()


# Text blocks


@router.post("/{draft_id}/text-blocks", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def add_text_block(payload: TextBlockCreate, draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.add_text_block(payload.kind)
    return draft.to_dict()


@router.patch("/{draft_id}/text-blocks/{block_id}", response_model=DraftResponse)
def update_text_block(block_id: str, payload: FieldUpdate, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.update_text_block(block_id, payload.field, payload.value), "Text block")
    return draft.to_dict()


@router.delete("/{draft_id}/text-blocks/{block_id}", response_model=DraftResponse)
def remove_text_block(block_id: str, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.remove_text_block(block_id), "Text block")
    return draft.to_dict()


# Secondary buttons


@router.post("/{draft_id}/buttons", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def add_button(draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.add_button()
    return draft.to_dict()


@router.patch("/{draft_id}/buttons/{button_id}", response_model=DraftResponse)
def update_button(button_id: str, payload: FieldUpdate, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.update_button(button_id, payload.field, payload.value), "Button")
    return draft.to_dict()


@router.delete("/{draft_id}/buttons/{button_id}", response_model=DraftResponse)
def remove_button(button_id: str, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.remove_button(button_id), "Button")
    return draft.to_dict()


# Footer links


@router.post("/{draft_id}/footer-links", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def add_footer_link(draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.add_footer_link()
    return draft.to_dict()


@router.patch("/{draft_id}/footer-links/{link_id}", response_model=DraftResponse)
def update_footer_link(link_id: str, payload: FieldUpdate, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.update_footer_link(link_id, payload.field, payload.value), "Footer link")
    return draft.to_dict()


@router.delete("/{draft_id}/footer-links/{link_id}", response_model=DraftResponse)
def remove_footer_link(link_id: str, draft: CurrentDraft) -> dict[str, Any]:
    _require(draft.editor.remove_footer_link(link_id), "Footer link")
    return draft.to_dict()


# Images


@router.post("/{draft_id}/background-image", response_model=DraftResponse)
async def upload_background_image(draft: CurrentDraft, file: UploadFile = File(...)) -> dict[str, Any]:
    """Embed an uploaded image as the page background."""
    draft.editor.set_background_image(await file.read())
    return draft.to_dict()


@router.delete("/{draft_id}/background-image", response_model=DraftResponse)
def clear_background_image(draft: CurrentDraft) -> dict[str, Any]:
    draft.editor.clear_background_image()
    return draft.to_dict()


@router.post("/{draft_id}/main-image", response_model=DraftResponse)
async def upload_main_image(draft: CurrentDraft, file: UploadFile = File(...)) -> dict[str, Any]:
    """Embed an uploaded image as the main image."""
    draft.editor.set_main_image(await file.read())
    return draft.to_dict()


# Sharing, preview and save


@router.post("/{draft_id}/share-url", response_model=ShareUrlResponse)
def generate_share_url(
    draft: CurrentDraft,
    origin: Annotated[str, Depends(get_origin)],
) -> dict[str, Any]:
    """Point the primary button at a fresh quiz share URL."""
    url = draft.editor.generate_share_url(origin)
    return {"url": url, "draft": draft.to_dict()}


@router.get("/{draft_id}/preview", response_model=None)
def preview(
    draft: CurrentDraft,
    output: Annotated[str, Query(alias="format", pattern="^(json|html)$")] = "json",
) -> dict[str, Any] | HTMLResponse:
    """Render the draft exactly as respondents would see it."""
    page = draft.editor.preview()
    if output == "html":
        return HTMLResponse(render_html(page))
    return page.to_dict()


@router.post("/{draft_id}/save", response_model=CompletionPageResponse)
def save(
    draft: CurrentDraft,
    db: Annotated[DbSession, Depends(get_db)],
    origin: Annotated[str, Depends(get_origin)],
) -> CompletionPageResponse:
    """Store the draft as the completion page of its quiz."""
    if draft.quiz_id is not None:
        quiz_service.get_owned_quiz(db, draft.quiz_id, draft.owner_id)
    page = save_draft(db, draft)
    return CompletionPageResponse(
        id=page.id,
        quizId=page.quiz_id,
        url=completion_url(page, origin),
        document=document_to_payload(page.document),
        updatedAt=page.updated_at,
    )
