"""FastAPI dependencies."""
from quizflow.dependencies.app_state import get_draft_store, get_origin
from quizflow.dependencies.auth import (
    get_current_session,
    get_current_user,
    get_optional_session,
)

__all__ = [
    "get_current_session",
    "get_current_user",
    "get_draft_store",
    "get_optional_session",
    "get_origin",
]
