"""Application error taxonomy.

Domain and service code raise these; ``quizflow.app`` maps each class to an
HTTP status code. None of them is retried automatically.
"""


class QuizFlowError(Exception):
    """Base class for application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuizFlowError):
    """Input rejected; the caller can fix it and try again."""

    status_code = 422


class NotFoundError(QuizFlowError):
    """Quiz, completion page, draft or run does not exist."""

    status_code = 404


class AuthError(QuizFlowError):
    """Sign-in or sign-up rejected."""

    status_code = 401


class BackendError(QuizFlowError):
    """Persistence layer failed; the operation was abandoned."""

    status_code = 503
