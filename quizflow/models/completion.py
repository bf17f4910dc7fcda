"""Completion page and editor Pydantic models."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from quizflow.completion.document import TextBlockKind


class CompletionPageResponse(BaseModel):
    """Stored document with its public address."""

    id: str
    quizId: str
    url: str
    document: dict[str, Any]
    updatedAt: datetime


class PublicCompletionPage(BaseModel):
    """Read-only document and its render tree."""

    id: str
    document: dict[str, Any]
    page: dict[str, Any]


class DraftCreate(BaseModel):
    quizId: str | None = None


class DraftResponse(BaseModel):
    """Editor draft: the in-memory document and its live preview."""

    draftId: str
    quizId: str | None
    document: dict[str, Any]
    preview: dict[str, Any]


class FieldUpdate(BaseModel):
    """Set one field; ``field`` accepts camelCase or snake_case names."""

    field: str = Field(..., min_length=1)
    value: Any = None


class TextBlockCreate(BaseModel):
    kind: TextBlockKind = TextBlockKind.PARAGRAPH


class ShareUrlResponse(BaseModel):
    url: str
    draft: DraftResponse
