"""Quiz-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from quizflow.completion.document import CompletionDocument


class QuestionIn(BaseModel):
    """Question as submitted by the admin."""

    questionText: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)


class QuizCreate(BaseModel):
    """Model for creating a quiz with its questions and completion page.

    The completion page comes either inline or from an open editor draft.
    """

    title: str
    description: str | None = None
    questions: list[QuestionIn]
    completionPage: CompletionDocument | None = None
    draftId: str | None = None

    @model_validator(mode="after")
    def _require_completion_page(self) -> "QuizCreate":
        if self.completionPage is None and self.draftId is None:
            raise ValueError("completionPage or draftId is required")
        return self


class QuizUpdate(BaseModel):
    """Model for updating quiz metadata."""

    title: str | None = None
    description: str | None = None
    isActive: bool | None = None


class QuestionOut(BaseModel):
    id: int
    questionText: str
    options: list[str]


class QuizSummary(BaseModel):
    id: str
    title: str
    description: str | None
    isActive: bool
    shareSlug: str
    shareUrl: str
    completionPageId: str | None
    questionCount: int
    createdAt: datetime
    updatedAt: datetime


class QuizDetail(QuizSummary):
    questions: list[QuestionOut]
