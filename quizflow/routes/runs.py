"""Quiz-taking endpoints (public)."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session as DbSession

from quizflow.database import get_db
from quizflow.models import OptionSelect, PublicQuiz, RunStart, RunState
from quizflow.services import run_service

router = APIRouter(prefix="/api", tags=["runs"])
# Share links point here, outside the /api prefix
public_router = APIRouter(tags=["runs"])


@public_router.get("/quiz/{quiz_key}", response_model=PublicQuiz)
def shared_quiz(
    quiz_key: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, Any]:
    """Landing data for a share link: the quiz and where to start a run."""
    quiz = run_service.get_public_quiz(db, quiz_key)
    return run_service.serialize_public_quiz(quiz)


@router.post("/quiz/{quiz_key}/runs", response_model=RunState, status_code=status.HTTP_201_CREATED)
def start_run(
    quiz_key: str,
    db: Annotated[DbSession, Depends(get_db)],
    payload: RunStart | None = None,
) -> dict[str, Any]:
    """Start taking a quiz by its id or share slug."""
    respondent = payload.respondentIdentifier if payload else None
    response = run_service.start_run(db, quiz_key, respondent)
    response = run_service.get_run(db, response.id)
    return run_service.serialize_run(response, run_service.build_flow(response))


@router.get("/runs/{run_id}", response_model=RunState)
def get_run(
    run_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, Any]:
    response = run_service.get_run(db, run_id)
    return run_service.serialize_run(response, run_service.build_flow(response))


@router.post("/runs/{run_id}/select", response_model=RunState)
def select_option(
    run_id: str,
    payload: OptionSelect,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, Any]:
    response, flow = run_service.select_option(db, run_id, payload.option)
    return run_service.serialize_run(response, flow)


@router.post("/runs/{run_id}/advance", response_model=RunState)
def advance(
    run_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, Any]:
    """Submit the selected answer; the last one completes the run."""
    response, flow = run_service.advance_run(db, run_id)
    continue_to = None
    if response.is_completed:
        continue_to = f"/api/runs/{response.id}/continue"
    return run_service.serialize_run(response, flow, continue_to)


@router.get("/runs/{run_id}/continue")
def continue_after_completion(
    run_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> RedirectResponse:
    """Leave a completed quiz through the completion page's primary button."""
    response = run_service.get_run(db, run_id)
    return RedirectResponse(run_service.continue_url(db, response), status_code=status.HTTP_303_SEE_OTHER)
