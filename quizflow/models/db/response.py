"""
Response and ResponseAnswer database models for quiz runs.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizflow.database import Base

if TYPE_CHECKING:
    from quizflow.models.db.quiz import Quiz


class RunStatus(str, enum.Enum):
    """Status of a quiz run."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Response(Base):
    """
    One respondent's pass through a quiz.
    Holds the position of the quiz-taking state machine between requests.
    """

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    respondent_identifier: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=RunStatus.IN_PROGRESS.value, nullable=False
    )
    current_index: Mapped[int] = mapped_column(default=0, nullable=False)
    selected_option: Mapped[str | None] = mapped_column(Text, nullable=True)

    started_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    # Relationships
    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="responses")
    answers: Mapped[list["ResponseAnswer"]] = relationship(
        "ResponseAnswer",
        back_populates="response",
        cascade="all, delete-orphan",
        order_by="ResponseAnswer.question_index",
    )

    @property
    def is_completed(self) -> bool:
        return self.status == RunStatus.COMPLETED.value


class ResponseAnswer(Base):
    """Option chosen for one question of a run."""

    __tablename__ = "response_answers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    response_id: Mapped[str] = mapped_column(
        ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[int | None] = mapped_column(
        ForeignKey("questions.id", ondelete="SET NULL"), nullable=True
    )
    question_index: Mapped[int] = mapped_column(nullable=False)
    selected_option: Mapped[str] = mapped_column(Text, nullable=False)
    answered_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("response_id", "question_index", name="uq_response_question"),
    )

    # Relationships
    response: Mapped["Response"] = relationship("Response", back_populates="answers")
