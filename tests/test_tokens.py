from quizflow.utils.tokens import (
    build_public_url,
    extract_token_from_url,
    generate_id,
    generate_share_token,
)


def test_share_token_format() -> None:
    token = generate_share_token()
    assert token.startswith("quiz_")
    suffix = token[len("quiz_"):]
    assert len(suffix) == 12
    int(suffix, 16)


def test_share_tokens_are_unique() -> None:
    assert len({generate_share_token() for _ in range(100)}) == 100


def test_generate_id() -> None:
    assert len(generate_id()) == 32
    assert generate_id() != generate_id()


def test_build_and_extract_public_url() -> None:
    url = build_public_url("https://example.com/", "quiz_abc123")
    assert url == "https://example.com/quiz/quiz_abc123"
    assert extract_token_from_url(url) == "quiz_abc123"
    assert build_public_url("https://example.com", "p1", "/completion/") == "https://example.com/completion/p1"


def test_extract_token_rejects_other_urls() -> None:
    assert extract_token_from_url("https://example.com/other/quiz_1") is None
    assert extract_token_from_url("/quiz/quiz_1") is None
    assert extract_token_from_url("https://example.com/quiz/") is None
