"""Authentication routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session as DbSession

from quizflow.config import ACCESS_TOKEN_EXPIRE_MINUTES
from quizflow.database import get_db
from quizflow.dependencies.auth import (
    get_current_session,
    get_current_user,
    get_optional_session,
    security,
)
from quizflow.models.auth import (
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    SessionResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from quizflow.models.db.user import Session, User
from quizflow.services.auth_service import (
    invalidate_session,
    request_password_reset,
    reset_password,
    sign_in,
    sign_up,
    start_session,
    verify_token,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(token: str) -> TokenResponse:
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Register a new admin and sign them in."""
    _, token = sign_up(db, data.email, data.password, data.name)
    return _token_response(token)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Login and get JWT token."""
    return _token_response(sign_in(db, data.email, data.password))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Logout and invalidate current session."""
    if credentials is None:
        return MessageResponse(message="Already logged out")

    payload = verify_token(credentials.credentials)
    if payload and payload.get("jti"):
        invalidate_session(db, payload["jti"])

    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user info."""
    return current_user


@router.get("/session", response_model=SessionResponse | None)
async def get_session(
    session: Annotated[Session | None, Depends(get_optional_session)],
) -> SessionResponse | None:
    """Current session, or null when signed out."""
    if session is None:
        return None
    return SessionResponse(
        user=UserResponse.model_validate(session.user),
        created_at=session.created_at,
        expires_at=session.expires_at,
        last_activity=session.last_activity,
    )


@router.post("/reset-password", response_model=MessageResponse)
async def request_reset(
    data: PasswordResetRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Issue a reset token; the reply never tells whether the email exists."""
    request_password_reset(db, data.email)
    return MessageResponse(message="ok")


@router.post("/reset-password/confirm", response_model=MessageResponse)
async def confirm_reset(
    data: PasswordResetConfirm,
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Set a new password and sign out everywhere."""
    reset_password(db, data.token, data.password)
    return MessageResponse(message="Password updated")


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    session: Annotated[Session, Depends(get_current_session)],
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Refresh access token; the old session ends."""
    user = session.user
    invalidate_session(db, session.token_jti)
    return _token_response(start_session(db, user))
