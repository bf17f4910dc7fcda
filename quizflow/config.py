"""Application configuration and constants."""
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS)
    else:
        base_dir = Path(__file__).resolve().parent.parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


STATIC_DIR = _resource_path("static")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'quizflow.db'}"
)

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
SESSION_EXTEND_MINUTES = _parse_int_env("SESSION_EXTEND_MINUTES", 60)
RESET_TOKEN_EXPIRE_MINUTES = _parse_int_env("RESET_TOKEN_EXPIRE_MINUTES", 30)
# Development only: write reset tokens to the debug log when no mail transport exists
LOG_RESET_TOKENS = os.environ.get("LOG_RESET_TOKENS", "0") == "1"

# Public URLs
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "").rstrip("/")
QUIZ_PATH_PREFIX = "/quiz/"
COMPLETION_PATH_PREFIX = "/completion/"
SHARE_TOKEN_LENGTH = 12

# Embedded images
IMAGE_MAX_UPLOAD_BYTES = _parse_int_env("IMAGE_MAX_UPLOAD_BYTES", 8 * 1024 * 1024)  # 8 MB
IMAGE_MAX_EMBED_BYTES = _parse_int_env("IMAGE_MAX_EMBED_BYTES", 2 * 1024 * 1024)  # 2 MB
IMAGE_MAX_DIMENSION = _parse_int_env("IMAGE_MAX_DIMENSION", 1600)  # pixels
IMAGE_MAX_PIXELS = _parse_int_env("IMAGE_MAX_PIXELS", 40_000_000)  # width * height before decoding
IMAGE_ALLOWED_FORMATS = {"PNG", "JPEG", "GIF", "WEBP"}

# Drafts and cleanup
DRAFT_TTL_MINUTES = _parse_int_env("DRAFT_TTL_MINUTES", 120)
ABANDONED_RUN_RETENTION_DAYS = _parse_int_env("ABANDONED_RUN_RETENTION_DAYS", 30)
CLEANUP_INTERVAL_SECONDS = _parse_int_env("CLEANUP_INTERVAL_SECONDS", 60 * 60)
