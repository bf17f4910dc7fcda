"""HTML output for rendered completion pages."""
from __future__ import annotations

from html import escape

from quizflow.completion.renderer import RenderedPage, RenderNode

FONT_SIZES = {
    "sm": "0.875rem",
    "md": "1rem",
    "lg": "1.25rem",
    "xl": "1.875rem",
}

ALIGNMENTS = {"left", "center", "right"}

BUTTON_STYLES = {
    "primary": "background:linear-gradient(90deg,#2563eb,#16a34a);color:#ffffff;border:none;",
    "secondary": "background:#e5e7eb;color:#111827;border:none;",
    "outline": "background:transparent;color:inherit;border:2px solid currentColor;",
}

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
</head>
<body style="margin:0;">
{body}
</body>
</html>
"""


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def _font_size(node: RenderNode, default: str = "md") -> str:
    return FONT_SIZES.get(node.props.get("fontSize", default), FONT_SIZES[default])


def _render_button(node: RenderNode) -> str:
    style = BUTTON_STYLES.get(node.props.get("style"), BUTTON_STYLES["secondary"])
    size = "padding:0.75rem 2rem;font-size:1.125rem;" if node.props.get("primary") else "padding:0.5rem 1.5rem;"
    # Anchors so that activation is a full page navigation
    return (
        f'<a class="qf-button qf-button-{_attr(node.props.get("style"))}" '
        f'href="{_attr(node.props.get("url", ""))}" '
        f'style="display:inline-block;margin:0.25rem;border-radius:0.5rem;'
        f'text-decoration:none;{style}{size}">{escape(node.text)}</a>'
    )


def _render_text_block(node: RenderNode) -> str:
    alignment = node.props.get("alignment")
    if alignment not in ALIGNMENTS:
        alignment = "center"
    style = f"font-size:{_font_size(node)};text-align:{alignment};margin:0 0 1rem 0;"
    if node.props.get("bold"):
        style += "font-weight:700;"
    if node.props.get("italic"):
        style += "font-style:italic;"
    if node.props.get("accent"):
        style += "border-left:4px solid currentColor;padding-left:1rem;"
        return f'<blockquote class="qf-quote" style="{style}">{escape(node.text)}</blockquote>'
    tag = "h3" if node.props.get("bold") else "p"
    return f'<{tag} class="qf-text-block" style="{style}">{escape(node.text)}</{tag}>'


def _render_node(node: RenderNode) -> str:
    if node.kind == "header":
        return (
            f'<h1 class="qf-header" style="font-size:{_font_size(node, "xl")};margin:0 0 0.5rem 0;">'
            f"{escape(node.text)}</h1>"
        )
    if node.kind == "sub_header":
        return (
            f'<h2 class="qf-sub-header" style="font-size:{_font_size(node, "lg")};margin:0 0 1rem 0;">'
            f"{escape(node.text)}</h2>"
        )
    if node.kind == "main_image":
        return (
            f'<img class="qf-main-image" src="{_attr(node.props.get("url", ""))}" '
            f'alt="{_attr(node.props.get("alt", ""))}" '
            f'style="max-width:100%;border-radius:0.5rem;margin:0 0 1.5rem 0;">'
        )
    if node.kind == "title":
        return (
            f'<h1 class="qf-title" style="font-size:{_font_size(node, "xl")};font-weight:700;margin:0 0 1.5rem 0;">'
            f"{escape(node.text)}</h1>"
        )
    if node.kind == "description":
        return f'<p class="qf-description" style="font-size:1.125rem;opacity:0.9;margin:0 0 2rem 0;">{escape(node.text)}</p>'
    if node.kind == "text_block":
        return _render_text_block(node)
    if node.kind == "button":
        return _render_button(node)
    if node.kind == "footer":
        links = " ".join(
            f'<a class="qf-footer-link" href="{_attr(link.props.get("url", ""))}" '
            f'style="color:inherit;margin:0 0.5rem;">{escape(link.text)}</a>'
            for link in node.children
        )
        return (
            '<footer class="qf-footer" style="margin-top:2rem;font-size:0.875rem;opacity:0.8;">'
            f"<p>{escape(node.text)}</p><nav>{links}</nav></footer>"
        )
    raise ValueError(f"Unknown render node kind: {node.kind}")


def render_html(page: RenderedPage, page_title: str | None = None) -> str:
    """Render a page as a standalone HTML document."""
    background = f"background-color:{page.background_color};color:{page.text_color};"
    if page.background_image:
        image_url = page.background_image.replace("'", "%27")
        background += (
            f"background-image:url('{image_url}');"
            "background-size:cover;background-position:center;"
        )

    inner = "\n".join(_render_node(node) for node in page.nodes)
    body = (
        f'<div class="qf-page" style="min-height:100vh;display:flex;align-items:center;'
        f'justify-content:center;padding:1rem;{_attr(background)}">'
        '<div class="qf-card" style="max-width:42rem;margin:0 auto;text-align:center;'
        'padding:3rem 2rem;border-radius:0.75rem;background:rgba(255,255,255,0.95);">'
        f"{inner}</div></div>"
    )
    if page_title is None:
        titles = page.find("title")
        page_title = titles[0].text if titles else "QuizFlow"
    return _PAGE_TEMPLATE.format(title=escape(page_title), body=body)


def render_not_found_html() -> str:
    """Terminal page for an unknown completion page id."""
    body = (
        '<div class="qf-not-found" style="min-height:100vh;display:flex;align-items:center;'
        'justify-content:center;background:#f9fafb;">'
        '<div style="max-width:28rem;text-align:center;padding:2rem;">'
        '<h1 style="font-size:1.25rem;">Page Not Found</h1>'
        "<p>The completion page you're looking for doesn't exist.</p>"
        '<a class="qf-home" href="/">Go Home</a>'
        "</div></div>"
    )
    return _PAGE_TEMPLATE.format(title="Page Not Found", body=body)
