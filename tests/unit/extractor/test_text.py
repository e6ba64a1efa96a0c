"""
Unit tests for the shared text serializers.
"""

import pytest

from mainstay.extractor.dom import parse_document
from mainstay.extractor.models import ExtractionConfig
from mainstay.extractor.text import extract_strict_text, extract_text, normalize_text, render_text


def body(html: str):
    return parse_document(html).body


@pytest.mark.unit
class TestExtractText:
    """Test cases for extract_text."""

    def test_block_tags_end_with_newline(self):
        node = body("<p>First</p><p>Second</p><div>Third</div>")
        assert extract_text(node, ExtractionConfig()) == "First\nSecond\nThird"

    def test_br_is_newline(self):
        node = body("<p>Line one<br>Line two</p>")
        assert extract_text(node, ExtractionConfig()) == "Line one\nLine two"

    def test_links_with_and_without_href(self):
        node = body('<p>See <a href="https://x.com">a link</a> here.</p>')

        with_links = extract_text(node, ExtractionConfig(include_links=True))
        without_links = extract_text(node, ExtractionConfig(include_links=False))

        assert with_links == "See a link (https://x.com) here."
        assert without_links == "See a link here."

    def test_anchor_without_text_adds_no_href(self):
        node = body('<p>Icon <a href="https://x.com"></a> only</p>')
        assert "(https://x.com)" not in extract_text(node, ExtractionConfig(include_links=True))

    def test_images_only_when_enabled(self):
        node = body('<p>Photo <img src="/a.png" alt="A bridge"> <img src="/b.png"></p>')

        assert "[Image:" not in extract_text(node, ExtractionConfig())
        text = extract_text(node, ExtractionConfig(include_images=True))
        assert "[Image: A bridge]" in text
        assert "[Image: /b.png]" in text

    def test_comments_only_when_enabled(self):
        node = body("<p>Before<!-- hidden -->After</p>")

        assert extract_text(node, ExtractionConfig()) == "Before After"
        assert extract_text(node, ExtractionConfig(include_comments=True)) == "Before [Comment] After"

    def test_script_and_style_text_ignored(self):
        node = body("<p>Visible</p><script>var x = 1;</script><style>p {}</style>")
        assert extract_text(node, ExtractionConfig()) == "Visible"

    def test_deep_nesting_does_not_recurse(self):
        """Nesting far beyond the recursion limit serializes fine."""
        document = parse_document("<div></div>")
        node = document.find("div")
        current = node
        for _ in range(5_000):
            child = document.new_tag("span")
            current.append(child)
            current = child
        current.append("deep")

        assert extract_text(node, ExtractionConfig()) == "deep"

    def test_normalize_text_collapses_runs(self):
        assert normalize_text("  a \t b \n\n\n c  ") == "a b\nc"


@pytest.mark.unit
class TestExtractStrictText:
    """Test cases for the precision variant."""

    def test_only_paragraphs(self):
        node = body("<h1>Heading</h1><p>Paragraph one is here.</p><div>Loose div text</div>")
        assert extract_strict_text(node, ExtractionConfig()) == "Paragraph one is here."

    def test_boilerplate_stops_everything_after(self):
        node = body(
            "<p>First real paragraph.</p>"
            "<p>Read more on our site</p>"
            "<p>A later paragraph that would otherwise count.</p>"
        )
        assert extract_strict_text(node, ExtractionConfig()) == "First real paragraph."

    def test_bare_urls_and_empty_parens_stripped(self):
        node = body('<p>Visit <a href="https://x.com/page">https://x.com/page</a> today.</p>')
        text = extract_strict_text(node, ExtractionConfig(include_links=True))

        assert "https://" not in text
        assert "()" not in text
        assert text.startswith("Visit")
        assert text.endswith("today.")

    def test_unwanted_root_yields_nothing(self):
        document = parse_document('<div class="sidebar-box"><p>Sidebar text here.</p></div>')
        node = document.find("div")
        assert extract_strict_text(node, ExtractionConfig()) == ""

    def test_render_text_switches_on_favor_precision(self):
        node = body("<h1>Heading</h1><p>Paragraph text.</p>")

        assert render_text(node, ExtractionConfig()) == "Heading\nParagraph text."
        assert render_text(node, ExtractionConfig(favor_precision=True)) == "Paragraph text."
