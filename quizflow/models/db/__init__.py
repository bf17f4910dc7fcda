"""Database models."""
from quizflow.models.db.user import User, Session
from quizflow.models.db.quiz import Question, Quiz
from quizflow.models.db.completion_page import CompletionPage
from quizflow.models.db.response import Response, ResponseAnswer, RunStatus

__all__ = [
    "User",
    "Session",
    "Quiz",
    "Question",
    "CompletionPage",
    "Response",
    "ResponseAnswer",
    "RunStatus",
]
