import pydantic
import pytest

from quizflow.completion.document import (
    CompletionDocument,
    FontSize,
    default_document,
    document_from_payload,
    document_to_payload,
    is_submittable,
    new_item_id,
)


def test_default_document_has_placeholders_and_disabled_sections() -> None:
    doc = default_document()
    assert doc.title == "Thank you for completing our quiz!"
    assert doc.primary_button_text == "Continue"
    assert doc.primary_button_url == ""
    assert doc.background_color == "#ffffff"
    assert doc.text_color == "#000000"
    assert doc.background_image is None
    assert not doc.header.enabled
    assert doc.header.font_size == "xl"
    assert doc.sub_header.font_size == "lg"
    assert not doc.main_image.enabled
    assert not doc.footer.enabled
    assert doc.text_blocks == []
    assert doc.secondary_buttons == []


def test_is_submittable_requires_non_blank_redirect_url() -> None:
    doc = default_document()
    assert not is_submittable(doc)
    doc.primary_button_url = "   "
    assert not is_submittable(doc)
    doc.primary_button_url = "https://example.com/next"
    assert is_submittable(doc)


def test_payload_uses_camel_case_names() -> None:
    doc = default_document()
    doc.primary_button_url = "https://example.com"
    payload = document_to_payload(doc)
    assert payload["primaryButtonUrl"] == "https://example.com"
    assert payload["subHeader"]["fontSize"] == "lg"
    assert payload["footer"]["links"] == []
    assert "primary_button_url" not in payload


def test_payload_accepts_snake_case_and_missing_sections() -> None:
    doc = document_from_payload(
        {
            "primary_button_url": "https://example.com",
            "header": None,
            "textBlocks": None,
            "backgroundImage": "  ",
        }
    )
    assert doc.primary_button_url == "https://example.com"
    assert not doc.header.enabled
    assert doc.header.font_size == FontSize.XL.value
    assert doc.text_blocks == []
    assert doc.background_image is None


def test_disabled_section_keeps_its_fields() -> None:
    doc = document_from_payload({"header": {"enabled": True, "text": "Hello", "fontSize": "md"}})
    doc.header.enabled = False
    assert doc.header.text == "Hello"
    assert doc.header.font_size == "md"


def test_colors_are_validated_and_lowercased() -> None:
    doc = document_from_payload({"backgroundColor": "#ABCDEF"})
    assert doc.background_color == "#abcdef"
    with pytest.raises(pydantic.ValidationError):
        document_from_payload({"textColor": "blue"})


def test_duplicate_item_ids_are_rejected() -> None:
    blocks = [
        {"id": "a1", "kind": "paragraph", "content": "one"},
        {"id": "a1", "kind": "quote", "content": "two"},
    ]
    with pytest.raises(pydantic.ValidationError):
        CompletionDocument.model_validate({"textBlocks": blocks})

    links = [{"id": "x", "text": "A"}, {"id": "x", "text": "B"}]
    with pytest.raises(pydantic.ValidationError):
        CompletionDocument.model_validate({"footer": {"links": links}})


def test_unknown_enum_value_is_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        document_from_payload({"textBlocks": [{"id": "a", "kind": "banner"}]})


def test_new_item_id_avoids_existing() -> None:
    existing = {new_item_id() for _ in range(20)}
    fresh = new_item_id(existing)
    assert fresh not in existing
    assert len(fresh) == 8
