"""Quiz run Pydantic models."""
from pydantic import BaseModel, Field


class RunStart(BaseModel):
    respondentIdentifier: str | None = Field(None, max_length=255)


class OptionSelect(BaseModel):
    option: str


class RunQuestion(BaseModel):
    questionText: str
    options: list[str]


class RunState(BaseModel):
    """Position of a respondent in a quiz."""

    runId: str
    quizId: str
    quizTitle: str
    state: str
    currentIndex: int
    questionCount: int
    percentComplete: int
    selectedOption: str | None
    question: RunQuestion | None
    answers: list[str]
    continueUrl: str | None = None


class PublicQuiz(BaseModel):
    """Quiz behind a share link."""

    quizId: str
    title: str
    description: str | None
    questionCount: int
    questions: list[RunQuestion]
    startUrl: str
