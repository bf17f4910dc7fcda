"""Linear quiz-taking state machine.

One question at a time, in a fixed order, no going back. Answers are
collected but never scored.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Sequence

from quizflow.errors import ValidationError


class FlowState(str, enum.Enum):
    LOADING = "loading"
    NOT_FOUND = "not_found"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class FlowError(ValidationError):
    """Action not allowed in the current state."""


@dataclass
class FlowQuestion:
    question_text: str
    options: list[str]


@dataclass
class QuizFlow:
    questions: list[FlowQuestion] = field(default_factory=list)
    state: FlowState = FlowState.LOADING
    current_index: int = 0
    selected_option: str | None = None
    answers: list[str] = field(default_factory=list)

    def load(self, questions: Sequence[FlowQuestion] | None) -> FlowState:
        """Leave LOADING once the quiz lookup has finished."""
        if self.state != FlowState.LOADING:
            raise FlowError("Quiz already loaded")
        if not questions:
            self.state = FlowState.NOT_FOUND
            return self.state
        self.questions = list(questions)
        self.current_index = 0
        self.selected_option = None
        self.answers = []
        self.state = FlowState.IN_PROGRESS
        return self.state

    @property
    def current_question(self) -> FlowQuestion | None:
        if self.state != FlowState.IN_PROGRESS:
            return None
        return self.questions[self.current_index]

    def select(self, option: str) -> None:
        """Record the chosen option for the current question, replacing any earlier choice."""
        question = self.current_question
        if question is None:
            raise FlowError("No question in progress")
        if option not in question.options:
            raise FlowError(f"Unknown option: {option}")
        self.selected_option = option

    def advance(self) -> FlowState:
        """Commit the selection and move on; the last answer completes the quiz."""
        if self.state != FlowState.IN_PROGRESS:
            raise FlowError("No question in progress")
        if self.selected_option is None:
            raise FlowError("Select an option first")

        self.answers.append(self.selected_option)
        self.selected_option = None
        if self.current_index + 1 < len(self.questions):
            self.current_index += 1
        else:
            self.state = FlowState.COMPLETED
        return self.state

    def progress(self) -> tuple[int, int, int]:
        """(position, total, percent) of the question being shown."""
        total = len(self.questions)
        if total == 0:
            return 0, 0, 0
        if self.state == FlowState.COMPLETED:
            return total, total, 100
        position = self.current_index + 1
        return position, total, round(position * 100 / total)
