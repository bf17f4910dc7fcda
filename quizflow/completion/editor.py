"""In-memory editing of a completion document.

The editor owns one document and changes it only through the operations
below. Text blocks, secondary buttons and footer links are ordered child
collections addressed by item id; lookups scan the list, which is fine for
the handful of items a page holds.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

import pydantic

from quizflow.completion.document import (
    Alignment,
    ButtonStyle,
    CompletionDocument,
    DocumentModel,
    FontSize,
    FooterLink,
    SecondaryButton,
    TextBlock,
    TextBlockKind,
    default_document,
    is_submittable,
    new_item_id,
)
from quizflow.completion.renderer import RenderedPage, render_document
from quizflow.config import PUBLIC_BASE_URL, QUIZ_PATH_PREFIX
from quizflow.errors import ValidationError
from quizflow.services.image_service import encode_image
from quizflow.utils.tokens import build_public_url, generate_share_token

logger = logging.getLogger(__name__)

T = TypeVar("T")

REDIRECT_URL_REQUIRED = "Redirect URL required"

# kind -> (placeholder content, default font size)
TEXT_BLOCK_DEFAULTS = {
    TextBlockKind.HEADING.value: ("New Heading", FontSize.LG.value),
    TextBlockKind.QUOTE.value: ("New Quote", FontSize.MD.value),
    TextBlockKind.PARAGRAPH.value: ("New paragraph content", FontSize.MD.value),
}

DOCUMENT_FIELDS = {
    "title",
    "description",
    "primary_button_text",
    "primary_button_url",
    "background_color",
    "text_color",
    "background_image",
}

SECTIONS = {"header", "sub_header", "main_image", "footer"}


def _attribute_name(model: type[DocumentModel], name: str) -> str | None:
    """Resolve a snake_case or camelCase field name to the attribute name."""
    if name in model.model_fields:
        return name
    for attr, info in model.model_fields.items():
        if info.alias == name:
            return attr
    return None


def _error_message(exc: pydantic.ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def _assign(item: DocumentModel, field: str, value: object, allowed: set[str] | None = None) -> None:
    attr = _attribute_name(type(item), field)
    if attr is None or (allowed is not None and attr not in allowed):
        raise ValidationError(f"Unknown field: {field}")
    if attr == "id":
        raise ValidationError("Item id cannot be changed")
    try:
        setattr(item, attr, value)
    except pydantic.ValidationError as e:
        raise ValidationError(_error_message(e)) from e


def _find(items: list, item_id: str):
    for item in items:
        if item.id == item_id:
            return item
    return None


def _remove(items: list, item_id: str) -> bool:
    for index, item in enumerate(items):
        if item.id == item_id:
            del items[index]
            return True
    return False


class CompletionPageEditor:
    """Scoped mutations of one in-memory completion document."""

    def __init__(
        self,
        document: CompletionDocument | None = None,
        image_encoder: Callable[[bytes], str] = encode_image,
    ) -> None:
        self.document = document.model_copy(deep=True) if document else default_document()
        self._encode_image = image_encoder

    # Top-level fields and sections

    def set_field(self, field: str, value: object) -> None:
        """Set a scalar field of the document (title, colors, primary button...)."""
        _assign(self.document, field, value, allowed=DOCUMENT_FIELDS)

    def update_section(self, section: str, field: str, value: object) -> None:
        """Set a scalar field of the header, sub-header, main image or footer."""
        attr = _attribute_name(CompletionDocument, section)
        if attr not in SECTIONS:
            raise ValidationError(f"Unknown section: {section}")
        target = getattr(self.document, attr)
        allowed = set(type(target).model_fields) - {"links"}
        _assign(target, field, value, allowed=allowed)

    # Text blocks

    def add_text_block(self, kind: str = TextBlockKind.PARAGRAPH.value) -> TextBlock:
        try:
            kind = TextBlockKind(kind).value
        except ValueError as e:
            raise ValidationError(f"Unknown text block kind: {kind}") from e
        content, font_size = TEXT_BLOCK_DEFAULTS[kind]
        block = TextBlock(
            id=new_item_id(b.id for b in self.document.text_blocks),
            kind=kind,
            content=content,
            font_size=font_size,
            alignment=Alignment.CENTER,
        )
        self.document.text_blocks.append(block)
        return block

    def update_text_block(self, block_id: str, field: str, value: object) -> bool:
        block = _find(self.document.text_blocks, block_id)
        if block is None:
            return False
        _assign(block, field, value)
        return True

    def remove_text_block(self, block_id: str) -> bool:
        return _remove(self.document.text_blocks, block_id)

    # Secondary buttons

    def add_button(self) -> SecondaryButton:
        button = SecondaryButton(
            id=new_item_id(b.id for b in self.document.secondary_buttons),
            text="New Button",
            url="",
            style=ButtonStyle.SECONDARY,
        )
        self.document.secondary_buttons.append(button)
        return button

    def update_button(self, button_id: str, field: str, value: object) -> bool:
        button = _find(self.document.secondary_buttons, button_id)
        if button is None:
            return False
        _assign(button, field, value)
        return True

    def remove_button(self, button_id: str) -> bool:
        return _remove(self.document.secondary_buttons, button_id)

    # Footer links

    def add_footer_link(self) -> FooterLink:
        link = FooterLink(
            id=new_item_id(link.id for link in self.document.footer.links),
            text="New Link",
            url="",
        )
        self.document.footer.links.append(link)
        return link

    def update_footer_link(self, link_id: str, field: str, value: object) -> bool:
        link = _find(self.document.footer.links, link_id)
        if link is None:
            return False
        _assign(link, field, value)
        return True

    def remove_footer_link(self, link_id: str) -> bool:
        return _remove(self.document.footer.links, link_id)

    # Images

    def set_background_image(self, data: bytes) -> None:
        self.document.background_image = self._encode_image(data)

    def clear_background_image(self) -> None:
        self.document.background_image = None

    def set_main_image(self, data: bytes) -> None:
        self.document.main_image.url = self._encode_image(data)

    # Sharing, preview and save

    def generate_share_url(self, origin: str | None = None) -> str:
        """Store a fresh quiz URL as the primary button destination and return it."""
        base = origin or PUBLIC_BASE_URL
        if not base:
            raise ValidationError("Origin is required to build a share URL")
        url = build_public_url(base, generate_share_token(), QUIZ_PATH_PREFIX)
        self.document.primary_button_url = url
        return url

    def preview(self) -> RenderedPage:
        return render_document(self.document)

    def save(self, persist: Callable[[CompletionDocument], T]) -> T:
        """Hand a copy of the document to ``persist`` once it is submittable.

        Raises:
            ValidationError: If the primary button has no destination; ``persist``
                is not called.
        """
        if not is_submittable(self.document):
            logger.info("Rejected save of completion document without redirect URL")
            raise ValidationError(REDIRECT_URL_REQUIRED)
        return persist(self.document.model_copy(deep=True))
