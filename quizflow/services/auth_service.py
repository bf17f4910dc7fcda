"""Authentication service for user management and JWT handling."""
import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session as DbSession

from quizflow.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    LOG_RESET_TOKENS,
    RESET_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
    SESSION_EXTEND_MINUTES,
)
from quizflow.errors import AuthError
from quizflow.models.db.user import Session, User

logger = logging.getLogger(__name__)

RESET_PURPOSE = "password_reset"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def create_access_token(user_id: int, jti: str | None = None) -> tuple[str, str]:
    """Create a JWT access token.

    Returns:
        Tuple of (token, jti)
    """
    if jti is None:
        jti = str(uuid.uuid4())

    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "jti": jti,
    }
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, jti


def verify_token(token: str) -> dict | None:
    """Verify and decode a JWT token.

    Returns:
        Decoded token payload or None if invalid.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: DbSession, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user_by_id(db: DbSession, user_id: int) -> User | None:
    """Get user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: DbSession, email: str, password: str, name: str) -> User:
    """Create a new user."""
    hashed = hash_password(password)
    user = User(
        email=email.strip().lower(),
        name=name.strip(),
        hashed_password=hashed,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def create_session(
    db: DbSession, user_id: int, token_jti: str, expires_at: datetime
) -> Session:
    """Create a new session for user."""
    session = Session(
        user_id=user_id,
        token_jti=token_jti,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def start_session(db: DbSession, user: User) -> str:
    """Issue an access token backed by a new session row."""
    token, jti = create_access_token(user.id)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    create_session(db, user.id, jti, expires_at)
    return token


def sign_up(db: DbSession, email: str, password: str, name: str) -> tuple[User, str]:
    """Register a user and sign them in.

    Raises:
        AuthError: If the email is already registered.
    """
    if get_user_by_email(db, email):
        raise AuthError("Email already registered")
    user = create_user(db, email, password, name)
    return user, start_session(db, user)


def sign_in(db: DbSession, email: str, password: str) -> str:
    """Check credentials and start a session.

    Raises:
        AuthError: If the credentials are wrong or the user is inactive.
    """
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Rejected sign-in attempt")
        raise AuthError("Invalid credentials")
    if not user.is_active:
        raise AuthError("User is inactive")
    return start_session(db, user)


def get_active_session(db: DbSession, token_jti: str) -> Session | None:
    """Get an active session by token JTI."""
    now = datetime.now(timezone.utc)
    return (
        db.query(Session)
        .filter(
            Session.token_jti == token_jti,
            Session.is_active == True,  # noqa: E712
            Session.expires_at > now,
        )
        .first()
    )


def extend_session(db: DbSession, session: Session) -> Session:
    """Extend session expiration and update last activity."""
    now = datetime.now(timezone.utc)
    session.last_activity = now
    session.expires_at = now + timedelta(minutes=SESSION_EXTEND_MINUTES)
    db.commit()
    db.refresh(session)
    return session


def invalidate_session(db: DbSession, token_jti: str) -> None:
    """Invalidate a session by token JTI."""
    session = db.query(Session).filter(Session.token_jti == token_jti).first()
    if session:
        session.is_active = False
        db.commit()


def invalidate_all_user_sessions(db: DbSession, user_id: int) -> int:
    """Invalidate all sessions for a user."""
    result = (
        db.query(Session)
        .filter(Session.user_id == user_id, Session.is_active == True)  # noqa: E712
        .update({Session.is_active: False})
    )
    db.commit()
    return result


def cleanup_expired_sessions(db: DbSession) -> int:
    """Remove expired sessions from database."""
    now = datetime.now(timezone.utc)
    result = db.query(Session).filter(Session.expires_at < now).delete()
    db.commit()
    return result


def _password_fingerprint(user: User) -> str:
    # Changes whenever the password does, so a reset token works only once
    return user.hashed_password[-12:]


def create_reset_token(user: User) -> str:
    """Create a short-lived password reset token."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "exp": expire,
        "purpose": RESET_PURPOSE,
        "pwd": _password_fingerprint(user),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def request_password_reset(db: DbSession, email: str) -> str | None:
    """Issue a reset token for a known email.

    Returns None for unknown emails; callers must not reveal the difference.
    """
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    token = create_reset_token(user)
    logger.info(f"Password reset requested for user {user.id}")
    if LOG_RESET_TOKENS:
        logger.debug(f"Reset token for user {user.id}: {token}")
    return token


def reset_password(db: DbSession, token: str, new_password: str) -> User:
    """Set a new password from a reset token and end all sessions.

    Raises:
        AuthError: If the token is invalid, expired or already used.
    """
    payload = verify_token(token)
    if payload is None or payload.get("purpose") != RESET_PURPOSE:
        raise AuthError("Invalid or expired reset token")

    user = get_user_by_id(db, int(payload.get("sub", 0)))
    if user is None or payload.get("pwd") != _password_fingerprint(user):
        raise AuthError("Invalid or expired reset token")

    user.hashed_password = hash_password(new_password)
    db.commit()
    invalidate_all_user_sessions(db, user.id)
    logger.info(f"Password reset for user {user.id}")
    return user
