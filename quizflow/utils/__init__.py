"""Utility modules."""
from quizflow.utils.tokens import (
    build_public_url,
    extract_token_from_url,
    generate_id,
    generate_share_token,
)

__all__ = [
    "build_public_url",
    "extract_token_from_url",
    "generate_id",
    "generate_share_token",
]
