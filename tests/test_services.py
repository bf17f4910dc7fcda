from datetime import datetime, timedelta, timezone

import pytest

from quizflow.completion.document import default_document, document_from_payload
from quizflow.completion.editor import CompletionPageEditor
from quizflow.errors import NotFoundError, ValidationError
from quizflow.models.db.completion_page import CompletionPage
from quizflow.models.db.response import Response
from quizflow.models.db.user import User
from quizflow.quiz_flow import FlowError, FlowState
from quizflow.services import completion_service, quiz_service, run_service
from quizflow.services.cleanup_service import cleanup_abandoned_runs
from quizflow.services.editor_service import DraftStore, open_draft, save_draft

QUESTIONS = [
    {"questionText": "Pick a colour", "options": ["Red", "Blue", "  "]},
    {"questionText": "Pick a pet", "options": ["Cat", "Dog"]},
]


@pytest.fixture()
def owner(db) -> User:
    user = User(email="owner@example.com", name="Owner", hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def submittable_document(url: str = "https://example.com/next"):
    return document_from_payload({"primaryButtonUrl": url, "title": "All done"})


@pytest.fixture()
def quiz(db, owner):
    return quiz_service.create_quiz(db, owner.id, "Colours", QUESTIONS, submittable_document())


def test_create_quiz(db, quiz) -> None:
    assert quiz.share_slug.startswith("quiz_")
    assert [q.question_text for q in quiz.questions] == ["Pick a colour", "Pick a pet"]
    assert quiz.questions[0].options == ["Red", "Blue"]
    assert quiz.completion_page is not None
    assert completion_service.get_completion_document(db, quiz.id).title == "All done"


@pytest.mark.parametrize(
    "title, questions, message",
    [
        ("  ", QUESTIONS, "Title is required"),
        ("Quiz", [], "At least one question is required"),
        ("Quiz", [{"questionText": "", "options": ["A", "B"]}], "Question 1: text is required"),
        ("Quiz", [{"questionText": "Q", "options": ["A", " "]}], "Question 1: at least 2 options are required"),
        ("Quiz", [{"questionText": "Q", "options": ["A", "A"]}], "Question 1: options must be distinct"),
    ],
)
def test_create_quiz_validation(db, owner, title, questions, message) -> None:
    with pytest.raises(ValidationError) as excinfo:
        quiz_service.create_quiz(db, owner.id, title, questions, submittable_document())
    assert excinfo.value.message == message


def test_create_quiz_requires_submittable_document(db, owner) -> None:
    with pytest.raises(ValidationError) as excinfo:
        quiz_service.create_quiz(db, owner.id, "Quiz", QUESTIONS, default_document())
    assert excinfo.value.message == "Redirect URL required"
    assert quiz_service.list_quizzes(db, owner.id) == []


def test_quiz_lookup_and_ownership(db, quiz, owner) -> None:
    assert quiz_service.get_quiz_by_key(db, quiz.share_slug).id == quiz.id
    assert quiz_service.get_quiz_by_key(db, quiz.id).id == quiz.id
    with pytest.raises(NotFoundError):
        quiz_service.get_quiz_by_key(db, "quiz_missing")
    with pytest.raises(NotFoundError):
        quiz_service.get_owned_quiz(db, quiz.id, owner.id + 1)


def test_update_and_delete_quiz(db, quiz, owner) -> None:
    quiz_service.update_quiz(db, quiz, title=" Renamed ", description="")
    assert quiz.title == "Renamed"
    assert quiz.description is None
    with pytest.raises(ValidationError):
        quiz_service.update_quiz(db, quiz, title=" ")

    quiz_service.set_quiz_active(db, quiz, False)
    assert not quiz.is_active

    quiz_service.delete_quiz(db, quiz)
    assert quiz_service.list_quizzes(db, owner.id) == []
    assert db.query(CompletionPage).count() == 0


def test_serialize_quiz(quiz) -> None:
    payload = quiz_service.serialize_quiz(quiz, "https://example.com", with_questions=True)
    assert payload["shareUrl"] == f"https://example.com/quiz/{quiz.share_slug}"
    assert payload["questionCount"] == 2
    assert payload["completionPageId"] == quiz.completion_page.id
    assert payload["questions"][1]["options"] == ["Cat", "Dog"]


def test_save_completion_document_replaces_whole_document(db, quiz) -> None:
    page_id = quiz.completion_page.id
    doc = submittable_document("https://example.com/other")
    doc.footer.enabled = True
    page = completion_service.save_completion_document(db, quiz.id, doc)

    assert page.id == page_id
    stored = completion_service.get_completion_document(db, quiz.id)
    assert stored.primary_button_url == "https://example.com/other"
    assert stored.title == "All done"
    assert stored.footer.enabled


def test_save_completion_document_rejects_missing_url(db, quiz) -> None:
    with pytest.raises(ValidationError):
        completion_service.save_completion_document(db, quiz.id, default_document())
    stored = completion_service.get_completion_document(db, quiz.id)
    assert stored.primary_button_url == "https://example.com/next"


def test_completion_page_lookup(db, quiz) -> None:
    page = completion_service.get_completion_page_by_id(db, quiz.completion_page.id)
    assert page.quiz_id == quiz.id
    assert completion_service.get_completion_page_by_id(db, "missing") is None
    with pytest.raises(NotFoundError):
        completion_service.get_completion_document(db, "missing")
    assert completion_service.completion_url(page, "https://example.com/") == (
        f"https://example.com/completion/{page.id}"
    )


def test_run_through_quiz(db, quiz) -> None:
    response = run_service.start_run(db, quiz.share_slug, "respondent-1")
    run_id = response.id

    with pytest.raises(FlowError):
        run_service.advance_run(db, run_id)

    run_service.select_option(db, run_id, "Blue")
    response, flow = run_service.advance_run(db, run_id)
    assert flow.state == FlowState.IN_PROGRESS
    assert response.current_index == 1

    with pytest.raises(ValidationError):
        run_service.continue_url(db, response)

    run_service.select_option(db, run_id, "Dog")
    response, flow = run_service.advance_run(db, run_id)
    assert flow.state == FlowState.COMPLETED
    assert response.is_completed
    assert response.completed_at is not None
    assert [a.selected_option for a in response.answers] == ["Blue", "Dog"]
    assert run_service.continue_url(db, response) == "https://example.com/next"

    rebuilt = run_service.build_flow(run_service.get_run(db, run_id))
    assert rebuilt.state == FlowState.COMPLETED
    assert rebuilt.answers == ["Blue", "Dog"]


def test_inactive_quiz_cannot_be_started(db, quiz) -> None:
    quiz_service.set_quiz_active(db, quiz, False)
    with pytest.raises(NotFoundError):
        run_service.start_run(db, quiz.id)
    with pytest.raises(NotFoundError):
        run_service.get_run(db, "missing")


def test_cleanup_abandoned_runs(db, quiz) -> None:
    old = run_service.start_run(db, quiz.id)
    old.started_at = datetime.now(timezone.utc) - timedelta(days=40)
    db.commit()
    recent = run_service.start_run(db, quiz.id)

    assert cleanup_abandoned_runs(db, retention_days=30) == 1
    assert [r.id for r in db.query(Response).all()] == [recent.id]
    assert cleanup_abandoned_runs(db, retention_days=0) == 0


def test_draft_store_scopes_and_expires() -> None:
    store = DraftStore(ttl_minutes=5)
    draft = store.open(owner_id=1, editor=CompletionPageEditor())

    assert store.get(draft.id, 1) is draft
    with pytest.raises(NotFoundError):
        store.get(draft.id, 2)
    assert not store.discard(draft.id, 2)

    draft.updated_at -= timedelta(minutes=10)
    assert store.purge_expired() == 1
    assert len(store) == 0
    with pytest.raises(NotFoundError):
        store.get(draft.id, 1)


def test_open_and_save_draft(db, quiz, owner) -> None:
    store = DraftStore()
    draft = open_draft(db, store, owner.id, quiz_id=quiz.id)
    assert draft.editor.document.title == "All done"

    draft.editor.set_field("title", "Edited")
    save_draft(db, draft)
    assert completion_service.get_completion_document(db, quiz.id).title == "Edited"

    blank = open_draft(db, store, owner.id)
    assert blank.editor.document == default_document()
    with pytest.raises(NotFoundError):
        save_draft(db, blank)


def test_draft_is_held_while_editing() -> None:
    store = DraftStore()
    draft = store.open(owner_id=1, editor=CompletionPageEditor())

    with store.editing(draft.id, 1) as held:
        assert held is draft
        assert draft.lock.locked()
        # A second request on the same draft waits its turn
        assert not draft.lock.acquire(blocking=False)
    assert not draft.lock.locked()

    with pytest.raises(NotFoundError):
        with store.editing(draft.id, 2):
            pass
    assert not draft.lock.locked()
