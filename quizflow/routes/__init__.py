"""API routers."""
from quizflow.routes import auth, completion_pages, editor, quizzes, runs

__all__ = ["auth", "completion_pages", "editor", "quizzes", "runs"]
