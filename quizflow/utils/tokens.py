"""Opaque tokens and public URLs."""
import uuid
from urllib.parse import urlparse

from quizflow.config import QUIZ_PATH_PREFIX, SHARE_TOKEN_LENGTH


def generate_share_token(length: int = SHARE_TOKEN_LENGTH) -> str:
    """Generate a non-sequential public token for a quiz."""
    return f"quiz_{uuid.uuid4().hex[:length]}"


def generate_id() -> str:
    """Generate a primary key for quizzes, pages and runs."""
    return uuid.uuid4().hex


def build_public_url(origin: str, token: str, path_prefix: str = QUIZ_PATH_PREFIX) -> str:
    """Compose ``<origin><prefix><token>``."""
    return f"{origin.rstrip('/')}{path_prefix}{token}"


def extract_token_from_url(url: str, path_prefix: str = QUIZ_PATH_PREFIX) -> str | None:
    """Return the token part of a public URL, or None if the URL does not match."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    if not parsed.path.startswith(path_prefix):
        return None
    token = parsed.path[len(path_prefix):]
    return token or None
