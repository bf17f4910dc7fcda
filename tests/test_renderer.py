from quizflow.completion.document import default_document, document_from_payload
from quizflow.completion.html import render_html, render_not_found_html
from quizflow.completion.renderer import CompletionPageView, ViewState, render_document


def kinds(page) -> list[str]:
    return [node.kind for node in page.nodes]


def test_default_document_renders_only_the_fixed_parts() -> None:
    page = render_document(default_document())
    assert kinds(page) == ["title", "description", "button"]
    button = page.nodes[-1]
    assert button.text == "Continue"
    assert button.props["primary"] is True
    assert button.props["action"] == "navigate"


def test_enabled_sections_render_even_when_blank() -> None:
    doc = default_document()
    doc.header.enabled = True
    doc.sub_header.enabled = True
    doc.footer.enabled = True
    page = render_document(doc)
    assert kinds(page) == ["header", "sub_header", "title", "description", "button", "footer"]
    assert page.nodes[0].text == ""


def test_disabled_sections_do_not_render_their_content() -> None:
    doc = document_from_payload(
        {
            "header": {"enabled": False, "text": "Hidden header"},
            "footer": {"enabled": False, "text": "Hidden", "links": [{"id": "l1", "text": "Terms"}]},
        }
    )
    page = render_document(doc)
    assert "header" not in kinds(page)
    assert "footer" not in kinds(page)
    assert "Hidden" not in render_html(page)


def test_main_image_needs_a_url() -> None:
    doc = default_document()
    doc.main_image.enabled = True
    assert "main_image" not in kinds(render_document(doc))

    doc.main_image.url = "https://example.com/trophy.png"
    doc.main_image.alt_text = "Trophy"
    node = render_document(doc).find("main_image")[0]
    assert node.props == {"url": "https://example.com/trophy.png", "alt": "Trophy"}


def test_full_document_render_order() -> None:
    doc = document_from_payload(
        {
            "title": "Done",
            "description": "Thanks",
            "primaryButtonText": "Next",
            "primaryButtonUrl": "https://example.com/next",
            "header": {"enabled": True, "text": "Header"},
            "subHeader": {"enabled": True, "text": "Sub"},
            "mainImage": {"enabled": True, "url": "https://example.com/i.png"},
            "textBlocks": [
                {"id": "b1", "kind": "heading", "content": "First", "fontSize": "lg"},
                {"id": "b2", "kind": "quote", "content": "Second", "alignment": "right"},
            ],
            "secondaryButtons": [{"id": "s1", "text": "More", "url": "https://example.com/more", "style": "outline"}],
            "footer": {
                "enabled": True,
                "text": "Footer",
                "links": [{"id": "f1", "text": "Terms", "url": "https://example.com/terms"}],
            },
        }
    )
    page = render_document(doc)
    assert kinds(page) == [
        "header",
        "sub_header",
        "main_image",
        "title",
        "description",
        "text_block",
        "text_block",
        "button",
        "button",
        "footer",
    ]

    heading, quote = page.find("text_block")
    assert heading.text == "First"
    assert heading.props["bold"] is True
    assert heading.props["fontSize"] == "lg"
    assert quote.props["italic"] is True
    assert quote.props["accent"] is True
    assert quote.props["alignment"] == "right"

    primary, secondary = page.find("button")
    assert primary.props["url"] == "https://example.com/next"
    assert secondary.props == {
        "url": "https://example.com/more",
        "style": "outline",
        "primary": False,
        "action": "navigate",
    }

    footer = page.find("footer")[0]
    assert footer.text == "Footer"
    assert [(link.text, link.props["url"]) for link in footer.children] == [
        ("Terms", "https://example.com/terms")
    ]


def test_to_dict_carries_background() -> None:
    doc = document_from_payload({"backgroundColor": "#112233", "backgroundImage": "data:image/png;base64,AA"})
    payload = render_document(doc).to_dict()
    assert payload["background"]["color"] == "#112233"
    assert payload["background"]["image"] == "data:image/png;base64,AA"
    assert payload["background"]["size"] == "cover"
    assert payload["nodes"][0]["kind"] == "title"


def test_html_escapes_text_and_uses_anchors() -> None:
    doc = document_from_payload(
        {
            "title": "<script>alert(1)</script>",
            "primaryButtonUrl": "https://example.com/?a=1&b=2",
            "textBlocks": [{"id": "q", "kind": "quote", "content": "Well done"}],
        }
    )
    html = render_html(render_document(doc))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert 'href="https://example.com/?a=1&amp;b=2"' in html
    assert "<blockquote" in html


def test_not_found_page_links_home() -> None:
    html = render_not_found_html()
    assert "Page Not Found" in html
    assert 'href="/"' in html
    assert "Go Home" in html


def test_view_loads_and_renders() -> None:
    view = CompletionPageView()
    assert view.state == ViewState.LOADING
    tag = view.begin("page-1")
    assert view.render() is None

    assert view.resolve(tag, default_document())
    assert view.state == ViewState.READY
    assert view.render() is not None


def test_view_not_found() -> None:
    view = CompletionPageView()
    tag = view.begin("missing")
    assert view.resolve(tag, None)
    assert view.state == ViewState.NOT_FOUND
    assert view.render() is None


def test_view_discards_stale_results() -> None:
    view = CompletionPageView()
    old_tag = view.begin("page-1")
    new_tag = view.begin("page-2")

    assert not view.resolve(old_tag, default_document())
    assert view.state == ViewState.LOADING

    doc = default_document()
    doc.title = "Second"
    assert view.resolve(new_tag, doc)
    assert view.document.title == "Second"


def test_view_ignores_results_after_close() -> None:
    view = CompletionPageView()
    tag = view.begin("page-1")
    view.close()
    assert not view.resolve(tag, default_document())
    assert view.state == ViewState.CLOSED


def test_two_blocks_and_no_footer() -> None:
    for background, text in (("#000000", "#ffffff"), ("#123456", "#abc")):
        doc = document_from_payload(
            {
                "backgroundColor": background,
                "textColor": text,
                "textBlocks": [
                    {"id": "h", "kind": "heading", "content": "Hi"},
                    {"id": "q", "kind": "quote", "content": "Nice"},
                ],
                "secondaryButtons": [],
                "footer": {"enabled": False, "text": "Footer text"},
            }
        )
        page = render_document(doc)
        assert [node.text for node in page.find("text_block")] == ["Hi", "Nice"]
        assert page.find("footer") == []
        assert len(page.find("button")) == 1
