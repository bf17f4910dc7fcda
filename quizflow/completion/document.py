"""Completion page document model.

A ``CompletionDocument`` describes the page a respondent sees after the last
answer of a quiz. It is stored and transferred as one JSON object using the
camelCase field names (``primaryButtonUrl``, ``textBlocks``, ...); Python code
works with the snake_case attributes.

Optional sections are always present. ``enabled`` is the only visibility gate
and disabling a section never clears its fields.
"""
from __future__ import annotations

import enum
import re
import uuid
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_TITLE = "Thank you for completing our quiz!"
DEFAULT_DESCRIPTION = (
    "Your responses have been recorded. Click the button below to continue."
)
DEFAULT_BUTTON_TEXT = "Continue"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#000000"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class FontSize(str, enum.Enum):
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


class TextBlockKind(str, enum.Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    QUOTE = "quote"


class Alignment(str, enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ButtonStyle(str, enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    OUTLINE = "outline"


class DocumentModel(BaseModel):
    """Shared config: camelCase aliases, validated assignment."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
        extra="ignore",
    )


def new_item_id(existing: Iterable[str] = ()) -> str:
    """Return a short token not present in ``existing``."""
    taken = set(existing)
    while True:
        candidate = uuid.uuid4().hex[:8]
        if candidate not in taken:
            return candidate


def _check_unique_ids(items: Iterable[Any], label: str) -> None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate {label} id: {item.id}")
        seen.add(item.id)


class TextSection(DocumentModel):
    """Header or sub-header."""

    enabled: bool = False
    text: str = ""
    font_size: FontSize = FontSize.LG


class ImageSection(DocumentModel):
    enabled: bool = False
    url: str = ""
    alt_text: str = ""


class TextBlock(DocumentModel):
    id: str = Field(..., min_length=1)
    kind: TextBlockKind = TextBlockKind.PARAGRAPH
    content: str = ""
    font_size: FontSize = FontSize.MD
    alignment: Alignment = Alignment.CENTER


class SecondaryButton(DocumentModel):
    id: str = Field(..., min_length=1)
    text: str = ""
    url: str = ""
    style: ButtonStyle = ButtonStyle.SECONDARY


class FooterLink(DocumentModel):
    id: str = Field(..., min_length=1)
    text: str = ""
    url: str = ""


class FooterSection(DocumentModel):
    enabled: bool = False
    text: str = ""
    links: list[FooterLink] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_link_ids(self) -> "FooterSection":
        _check_unique_ids(self.links, "footer link")
        return self


class CompletionDocument(DocumentModel):
    """Configuration of one quiz's completion page."""

    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    primary_button_text: str = DEFAULT_BUTTON_TEXT
    primary_button_url: str = ""

    background_color: str = DEFAULT_BACKGROUND_COLOR
    text_color: str = DEFAULT_TEXT_COLOR
    background_image: str | None = None

    header: TextSection = Field(default_factory=lambda: TextSection(font_size=FontSize.XL))
    sub_header: TextSection = Field(default_factory=lambda: TextSection(font_size=FontSize.LG))
    main_image: ImageSection = Field(default_factory=ImageSection)

    text_blocks: list[TextBlock] = Field(default_factory=list)
    secondary_buttons: list[SecondaryButton] = Field(default_factory=list)
    footer: FooterSection = Field(default_factory=FooterSection)

    @field_validator("background_color", "text_color")
    @classmethod
    def _hex_color(cls, value: str) -> str:
        if not _HEX_COLOR.match(value):
            raise ValueError(f"Invalid hex color: {value!r}")
        return value.lower()

    @field_validator("background_image", mode="before")
    @classmethod
    def _blank_image_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("header", "sub_header", "main_image", "footer", mode="before")
    @classmethod
    def _missing_section_is_disabled(cls, value: Any, info) -> Any:
        if value is not None:
            return value
        if info.field_name == "header":
            return TextSection(font_size=FontSize.XL)
        if info.field_name == "sub_header":
            return TextSection(font_size=FontSize.LG)
        if info.field_name == "main_image":
            return ImageSection()
        return FooterSection()

    @field_validator("text_blocks", "secondary_buttons", mode="before")
    @classmethod
    def _missing_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_item_ids(self) -> "CompletionDocument":
        _check_unique_ids(self.text_blocks, "text block")
        _check_unique_ids(self.secondary_buttons, "button")
        return self


def default_document() -> CompletionDocument:
    """Return a fresh document with placeholder text and every section disabled."""
    return CompletionDocument()


def is_submittable(doc: CompletionDocument) -> bool:
    """A document may be saved once its primary button has a destination."""
    return doc.primary_button_url.strip() != ""


def document_to_payload(doc: CompletionDocument) -> dict[str, Any]:
    """Serialize document to its camelCase JSON form."""
    return doc.model_dump(mode="json", by_alias=True)


def document_from_payload(payload: dict[str, Any]) -> CompletionDocument:
    """Parse a stored or submitted document.

    Raises:
        pydantic.ValidationError: If the payload does not describe a valid document.
    """
    return CompletionDocument.model_validate(payload)
