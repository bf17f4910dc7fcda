"""
Quiz and Question database models.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizflow.database import Base

if TYPE_CHECKING:
    from quizflow.models.db.completion_page import CompletionPage
    from quizflow.models.db.response import Response
    from quizflow.models.db.user import User


class Quiz(Base):
    """
    A quiz authored by an admin.
    Public URLs use ``share_slug``; ``id`` works as well.
    """

    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    share_slug: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="quizzes")
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
    )
    completion_page: Mapped["CompletionPage | None"] = relationship(
        "CompletionPage",
        back_populates="quiz",
        cascade="all, delete-orphan",
        uselist=False,
    )
    responses: Mapped[list["Response"]] = relationship(
        "Response",
        back_populates="quiz",
        cascade="all, delete-orphan",
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)


class Question(Base):
    """Single-choice question; options are stored in display order."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    order_index: Mapped[int] = mapped_column(nullable=False)
    options_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    # Relationships
    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="questions")

    @property
    def options(self) -> list[str]:
        """Parse options from JSON."""
        try:
            return json.loads(self.options_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @options.setter
    def options(self, value: list[str]) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(list(value), ensure_ascii=False)
