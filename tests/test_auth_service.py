import logging

import pytest

from quizflow.errors import AuthError
from quizflow.services import auth_service


def test_password_hashing() -> None:
    hashed = auth_service.hash_password("secret1")
    assert hashed != "secret1"
    assert auth_service.verify_password("secret1", hashed)
    assert not auth_service.verify_password("wrong", hashed)


def test_access_token_round_trip() -> None:
    token, jti = auth_service.create_access_token(7)
    payload = auth_service.verify_token(token)
    assert payload["sub"] == "7"
    assert payload["jti"] == jti
    assert auth_service.verify_token("garbage") is None


def test_sign_up_and_sign_in(db) -> None:
    user, token = auth_service.sign_up(db, "Admin@Example.com", "secret1", "Admin")
    assert user.email == "admin@example.com"
    payload = auth_service.verify_token(token)
    assert auth_service.get_active_session(db, payload["jti"]) is not None

    assert auth_service.sign_in(db, "admin@example.com", "secret1")
    with pytest.raises(AuthError):
        auth_service.sign_in(db, "admin@example.com", "wrong")
    with pytest.raises(AuthError):
        auth_service.sign_in(db, "nobody@example.com", "secret1")


def test_sign_up_rejects_duplicate_email(db) -> None:
    auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    with pytest.raises(AuthError):
        auth_service.sign_up(db, "ADMIN@example.com", "secret2", "Other")


def test_inactive_user_cannot_sign_in(db) -> None:
    user, _ = auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    user.is_active = False
    db.commit()
    with pytest.raises(AuthError):
        auth_service.sign_in(db, "admin@example.com", "secret1")


def test_invalidate_session(db) -> None:
    _, token = auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    jti = auth_service.verify_token(token)["jti"]
    auth_service.invalidate_session(db, jti)
    assert auth_service.get_active_session(db, jti) is None


def test_password_reset(db) -> None:
    _, old_token = auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    old_jti = auth_service.verify_token(old_token)["jti"]

    assert auth_service.request_password_reset(db, "unknown@example.com") is None
    reset_token = auth_service.request_password_reset(db, "admin@example.com")
    assert reset_token

    auth_service.reset_password(db, reset_token, "newsecret")
    assert auth_service.sign_in(db, "admin@example.com", "newsecret")
    assert auth_service.get_active_session(db, old_jti) is None

    # The fingerprint changed with the password
    with pytest.raises(AuthError):
        auth_service.reset_password(db, reset_token, "another1")


def test_access_token_is_not_a_reset_token(db) -> None:
    _, token = auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    with pytest.raises(AuthError):
        auth_service.reset_password(db, token, "newsecret")


def test_reset_token_stays_out_of_the_log(db, caplog: pytest.LogCaptureFixture) -> None:
    auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")

    with caplog.at_level(logging.DEBUG, logger="quizflow.services.auth_service"):
        token = auth_service.request_password_reset(db, "admin@example.com")
    assert "Password reset requested" in caplog.text
    assert token not in caplog.text


def test_reset_token_is_logged_when_enabled(
    db, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    auth_service.sign_up(db, "admin@example.com", "secret1", "Admin")
    monkeypatch.setattr(auth_service, "LOG_RESET_TOKENS", True)

    with caplog.at_level(logging.DEBUG, logger="quizflow.services.auth_service"):
        token = auth_service.request_password_reset(db, "admin@example.com")
    assert [r.levelno for r in caplog.records if token in r.getMessage()] == [logging.DEBUG]
