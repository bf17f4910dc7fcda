"""Pydantic models."""
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
from quizflow.models.completion import (
    CompletionPageResponse,
    DraftCreate,
    DraftResponse,
    FieldUpdate,
    PublicCompletionPage,
    ShareUrlResponse,
    TextBlockCreate,
)
from quizflow.models.quizzes import QuestionIn, QuizCreate, QuizDetail, QuizSummary, QuizUpdate
from quizflow.models.runs import OptionSelect, PublicQuiz, RunStart, RunState

__all__ = [
    "CompletionPageResponse",
    "DraftCreate",
    "DraftResponse",
    "FieldUpdate",
    "MessageResponse",
    "OptionSelect",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "PublicCompletionPage",
    "PublicQuiz",
    "QuestionIn",
    "QuizCreate",
    "QuizDetail",
    "QuizSummary",
    "QuizUpdate",
    "RunStart",
    "RunState",
    "SessionResponse",
    "ShareUrlResponse",
    "TextBlockCreate",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
