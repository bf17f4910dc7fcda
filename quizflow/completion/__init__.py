"""Completion page document, editor and renderer."""
from quizflow.completion.document import (
    CompletionDocument,
    default_document,
    document_from_payload,
    document_to_payload,
    is_submittable,
)
from quizflow.completion.editor import CompletionPageEditor
from quizflow.completion.renderer import CompletionPageView, RenderedPage, render_document

__all__ = [
    "CompletionDocument",
    "CompletionPageEditor",
    "CompletionPageView",
    "RenderedPage",
    "default_document",
    "document_from_payload",
    "document_to_payload",
    "is_submittable",
    "render_document",
]
