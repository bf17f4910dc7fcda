"""Rendering of completion documents.

``render_document`` turns a document into an ordered tree of render nodes.
The editor preview and the public completion page both go through it, so the
two can never disagree about what a document looks like.
"""
from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field
from typing import Any

from quizflow.completion.document import (
    CompletionDocument,
    FontSize,
    TextBlockKind,
)

NAVIGATE = "navigate"


@dataclass
class RenderNode:
    """One visual element of the page."""

    kind: str
    text: str = ""
    props: dict[str, Any] = field(default_factory=dict)
    children: list["RenderNode"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "text": self.text, "props": self.props}
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass
class RenderedPage:
    background_color: str
    text_color: str
    background_image: str | None
    nodes: list[RenderNode]

    def find(self, kind: str) -> list[RenderNode]:
        """Top-level nodes of the given kind, in render order."""
        return [node for node in self.nodes if node.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "background": {
                "color": self.background_color,
                "textColor": self.text_color,
                "image": self.background_image,
                "size": "cover",
                "position": "center",
            },
            "nodes": [node.to_dict() for node in self.nodes],
        }


def _button(text: str, url: str, style: str, primary: bool) -> RenderNode:
    return RenderNode(
        kind="button",
        text=text,
        props={"url": url, "style": style, "primary": primary, "action": NAVIGATE},
    )


def _text_block(block) -> RenderNode:
    return RenderNode(
        kind="text_block",
        text=block.content,
        props={
            "id": block.id,
            "blockKind": block.kind,
            "fontSize": block.font_size,
            "alignment": block.alignment,
            "bold": block.kind == TextBlockKind.HEADING,
            "italic": block.kind == TextBlockKind.QUOTE,
            "accent": block.kind == TextBlockKind.QUOTE,
        },
    )


def render_document(doc: CompletionDocument) -> RenderedPage:
    """Render a document read-only.

    Title, description and the primary button always render. Header,
    sub-header and footer render iff enabled; the main image renders iff
    enabled and a URL is set.
    """
    nodes: list[RenderNode] = []

    if doc.header.enabled:
        nodes.append(
            RenderNode(kind="header", text=doc.header.text, props={"fontSize": doc.header.font_size})
        )
    if doc.sub_header.enabled:
        nodes.append(
            RenderNode(
                kind="sub_header",
                text=doc.sub_header.text,
                props={"fontSize": doc.sub_header.font_size},
            )
        )
    if doc.main_image.enabled and doc.main_image.url:
        nodes.append(
            RenderNode(
                kind="main_image",
                props={"url": doc.main_image.url, "alt": doc.main_image.alt_text},
            )
        )

    nodes.append(RenderNode(kind="title", text=doc.title, props={"fontSize": FontSize.XL.value}))
    nodes.append(RenderNode(kind="description", text=doc.description))

    for block in doc.text_blocks:
        nodes.append(_text_block(block))

    nodes.append(
        _button(doc.primary_button_text, doc.primary_button_url, "primary", primary=True)
    )
    for button in doc.secondary_buttons:
        nodes.append(_button(button.text, button.url, button.style, primary=False))

    if doc.footer.enabled:
        links = [
            RenderNode(
                kind="footer_link",
                text=link.text,
                props={"id": link.id, "url": link.url, "action": NAVIGATE},
            )
            for link in doc.footer.links
        ]
        nodes.append(RenderNode(kind="footer", text=doc.footer.text, children=links))

    return RenderedPage(
        background_color=doc.background_color,
        text_color=doc.text_color,
        background_image=doc.background_image,
        nodes=nodes,
    )


class ViewState(str, enum.Enum):
    LOADING = "loading"
    NOT_FOUND = "not_found"
    READY = "ready"
    CLOSED = "closed"


class CompletionPageView:
    """Public page state: loading, then not found or ready.

    Each fetch is tagged; a result arriving for a tag that is no longer
    current (the page id changed, or the view was closed) is discarded.
    """

    _tags = itertools.count(1)

    def __init__(self) -> None:
        self.state = ViewState.LOADING
        self.page_id: str | None = None
        self.document: CompletionDocument | None = None
        self._current_tag: int | None = None

    def begin(self, page_id: str) -> int:
        """Start loading ``page_id`` and return the request tag."""
        tag = next(self._tags)
        self._current_tag = tag
        self.page_id = page_id
        self.document = None
        self.state = ViewState.LOADING
        return tag

    def resolve(self, tag: int, document: CompletionDocument | None) -> bool:
        """Apply a fetch result. Returns False if the result was stale."""
        if self.state == ViewState.CLOSED or tag != self._current_tag:
            return False
        self._current_tag = None
        if document is None:
            self.state = ViewState.NOT_FOUND
        else:
            self.document = document
            self.state = ViewState.READY
        return True

    def close(self) -> None:
        """Drop any in-flight result."""
        self._current_tag = None
        self.state = ViewState.CLOSED

    def render(self) -> RenderedPage | None:
        if self.state != ViewState.READY or self.document is None:
            return None
        return render_document(self.document)
