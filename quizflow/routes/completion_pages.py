"""Public completion page endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session as DbSession

from quizflow.completion.document import document_to_payload
from quizflow.completion.html import render_html, render_not_found_html
from quizflow.completion.renderer import CompletionPageView, ViewState
from quizflow.database import get_db
from quizflow.errors import NotFoundError
from quizflow.models import PublicCompletionPage
from quizflow.services.completion_service import get_completion_page_by_id

router = APIRouter(tags=["completion"])


def _load_view(db: DbSession, page_id: str) -> CompletionPageView:
    view = CompletionPageView()
    tag = view.begin(page_id)
    page = get_completion_page_by_id(db, page_id)
    view.resolve(tag, page.document if page is not None else None)
    return view


@router.get("/completion/{page_id}", response_class=HTMLResponse)
def completion_page_html(
    page_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> HTMLResponse:
    """Render a completion page for respondents."""
    view = _load_view(db, page_id)
    rendered = view.render()
    if view.state == ViewState.NOT_FOUND or rendered is None:
        return HTMLResponse(render_not_found_html(), status_code=404)
    return HTMLResponse(render_html(rendered, page_title=view.document.title))


@router.get("/api/completion-pages/{page_id}", response_model=PublicCompletionPage)
def completion_page_json(
    page_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> PublicCompletionPage:
    """Document and render tree of a completion page."""
    view = _load_view(db, page_id)
    rendered = view.render()
    if rendered is None:
        raise NotFoundError("Completion page not found")
    return PublicCompletionPage(
        id=page_id,
        document=document_to_payload(view.document),
        page=rendered.to_dict(),
    )
