"""Editor drafts held in memory between requests.

A draft is one admin's in-progress ``CompletionPageEditor``. The application
creates a single ``DraftStore`` at startup and hands it to the routes through
a dependency; drafts are never shared between admins and expire after a
period of inactivity.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

from sqlalchemy.orm import Session as DbSession

from quizflow.completion.document import document_to_payload
from quizflow.completion.editor import CompletionPageEditor
from quizflow.config import DRAFT_TTL_MINUTES
from quizflow.errors import NotFoundError
from quizflow.models.db.completion_page import CompletionPage
from quizflow.services.completion_service import find_completion_page, save_completion_document
from quizflow.utils.tokens import generate_id

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Draft:
    id: str
    owner_id: int
    quiz_id: str | None
    editor: CompletionPageEditor
    updated_at: datetime = field(default_factory=_now)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "draftId": self.id,
            "quizId": self.quiz_id,
            "document": document_to_payload(self.editor.document),
            "preview": self.editor.preview().to_dict(),
        }


class DraftStore:
    """Thread-safe registry of open drafts.

    ``get`` only finds a draft; callers that touch ``draft.editor`` go through
    ``editing`` so concurrent requests on one draft take turns.
    """

    def __init__(self, ttl_minutes: int = DRAFT_TTL_MINUTES) -> None:
        self.ttl = timedelta(minutes=ttl_minutes)
        self._drafts: dict[str, Draft] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._drafts)

    def open(self, owner_id: int, editor: CompletionPageEditor, quiz_id: str | None = None) -> Draft:
        draft = Draft(id=generate_id(), owner_id=owner_id, quiz_id=quiz_id, editor=editor)
        with self._lock:
            self._drafts[draft.id] = draft
        return draft

    def get(self, draft_id: str, owner_id: int) -> Draft:
        """Get a live draft of ``owner_id`` and mark it as used.

        Raises:
            NotFoundError: If the draft is unknown, expired or owned by someone else.
        """
        with self._lock:
            draft = self._drafts.get(draft_id)
            if draft is None or draft.owner_id != owner_id:
                raise NotFoundError("Draft not found")
            if _now() - draft.updated_at > self.ttl:
                del self._drafts[draft_id]
                raise NotFoundError("Draft not found")
            draft.updated_at = _now()
            return draft

    @contextmanager
    def editing(self, draft_id: str, owner_id: int) -> Iterator[Draft]:
        """Hold a draft exclusively while its editor is read or changed.

        Requests on the same draft take turns here; the store lock only
        guards the registry.
        """
        draft = self.get(draft_id, owner_id)
        with draft.lock:
            yield draft

    def discard(self, draft_id: str, owner_id: int) -> bool:
        with self._lock:
            draft = self._drafts.get(draft_id)
            if draft is None or draft.owner_id != owner_id:
                return False
            del self._drafts[draft_id]
            return True

    def purge_expired(self) -> int:
        """Drop drafts idle for longer than the TTL."""
        cutoff = _now() - self.ttl
        with self._lock:
            expired = [key for key, draft in self._drafts.items() if draft.updated_at < cutoff]
            for key in expired:
                del self._drafts[key]
        return len(expired)


def open_draft(
    db: DbSession, store: DraftStore, owner_id: int, quiz_id: str | None = None
) -> Draft:
    """Open a draft seeded from the quiz's stored document, or from the defaults."""
    document = None
    if quiz_id is not None:
        page = find_completion_page(db, quiz_id)
        if page is not None:
            document = page.document
    return store.open(owner_id, CompletionPageEditor(document), quiz_id=quiz_id)


def save_draft(db: DbSession, draft: Draft) -> CompletionPage:
    """Persist a draft attached to a quiz.

    Raises:
        NotFoundError: If the draft has no quiz to save into.
        ValidationError: If the document has no redirect URL.
    """
    if draft.quiz_id is None:
        raise NotFoundError("Draft is not attached to a quiz")
    quiz_id = draft.quiz_id
    return draft.editor.save(lambda document: save_completion_document(db, quiz_id, document))
