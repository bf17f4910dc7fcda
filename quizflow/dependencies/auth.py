"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from quizflow.database import get_db
from quizflow.models.db.user import Session, User
from quizflow.services.auth_service import (
    extend_session,
    get_active_session,
    get_user_by_id,
    verify_token,
)

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_session(
    credentials: HTTPAuthorizationCredentials | None, db: DbSession
) -> tuple[User, Session] | str:
    """Return (user, session) or the reason the credentials were rejected."""
    if credentials is None:
        return "Not authenticated"

    payload = verify_token(credentials.credentials)
    if payload is None:
        return "Invalid or expired token"

    # Access tokens always carry a session id; reset tokens never do
    jti = payload.get("jti")
    if not jti or payload.get("purpose"):
        return "Invalid token payload"

    session = get_active_session(db, jti)
    if session is None:
        return "Session expired or invalidated"

    user_id = payload.get("sub")
    if user_id is None:
        return "Invalid token payload"

    user = get_user_by_id(db, int(user_id))
    if user is None:
        return "User not found"
    if not user.is_active:
        return "User is inactive"

    # Extend session on activity
    extend_session(db, session)
    return user, session


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> Session:
    """Get the current session.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    resolved = _resolve_session(credentials, db)
    if isinstance(resolved, str):
        raise _unauthorized(resolved)
    return resolved[1]


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    resolved = _resolve_session(credentials, db)
    if isinstance(resolved, str):
        raise _unauthorized(resolved)
    return resolved[0]


async def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> Session | None:
    """Get the current session if authenticated, otherwise None.

    This dependency does not raise an exception if not authenticated.
    """
    resolved = _resolve_session(credentials, db)
    if isinstance(resolved, str):
        return None
    return resolved[1]
