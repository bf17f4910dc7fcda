"""Dependencies exposing application-wide state."""
from fastapi import Request

from quizflow.config import PUBLIC_BASE_URL
from quizflow.services.editor_service import DraftStore


def get_origin(request: Request) -> str:
    """Origin used to build public URLs."""
    if PUBLIC_BASE_URL:
        return PUBLIC_BASE_URL
    return str(request.base_url).rstrip("/")


def get_draft_store(request: Request) -> DraftStore:
    """The draft store created at application startup."""
    return request.app.state.drafts
