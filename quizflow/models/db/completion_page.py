"""
Completion page database model.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizflow.completion.document import (
    CompletionDocument,
    document_from_payload,
    document_to_payload,
)
from quizflow.database import Base

if TYPE_CHECKING:
    from quizflow.models.db.quiz import Quiz


class CompletionPage(Base):
    """
    One completion document per quiz, stored whole as JSON.
    Saving replaces the stored document; there is no field-level merge.
    """

    __tablename__ = "completion_pages"

    # Opaque id used in the public /completion/<id> URL
    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    document_json: Mapped[str] = mapped_column(Text, nullable=False)
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
    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="completion_page")

    @property
    def document(self) -> CompletionDocument:
        """Parse the stored document."""
        return document_from_payload(json.loads(self.document_json))

    @document.setter
    def document(self, value: CompletionDocument) -> None:
        """Serialize the document to JSON."""
        self.document_json = json.dumps(document_to_payload(value), ensure_ascii=False)
