"""
Unit tests for ReadabilityExtractor.
"""

import pytest

from mainstay.extractor.dom import parse_document
from mainstay.extractor.models import ExtractionConfig, StrategyName
from mainstay.extractor.readability_extractor import ReadabilityExtractor

PARAGRAPH = "Volunteers planted four hundred trees along the river bank this spring."


@pytest.mark.unit
class TestReadabilityExtractor:
    """Test cases for ReadabilityExtractor."""

    @pytest.fixture
    def extractor(self):
        return ReadabilityExtractor()

    def test_init(self, extractor):
        """Test extractor initialization."""
        assert extractor.name is StrategyName.READABILITY

    def test_picks_parent_with_most_text(self, extractor):
        document = parse_document(
            f"""
            <div id="one"><p>{PARAGRAPH}</p></div>
            <div id="two"><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div>
            """
        )
        root = extractor.find_root(document, ExtractionConfig())
        assert root.get("id") == "two"

    def test_positive_hint_wins(self, extractor):
        document = parse_document(
            f"""
            <div><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div>
            <div class="entry"><p>{PARAGRAPH}</p></div>
            """
        )
        root = extractor.find_root(document, ExtractionConfig())
        assert root.get("class") == ["entry"]

    def test_short_paragraphs_fall_back_to_body(self, extractor):
        document = parse_document("<div><p>Too short</p></div>")
        root = extractor.find_root(document, ExtractionConfig())
        assert root.name == "body"

    def test_min_words_mode(self, extractor):
        document = parse_document(f'<div id="words"><p>{PARAGRAPH}</p></div>')

        strict = extractor.find_root(document, ExtractionConfig(readability_min_words=20))
        lenient = extractor.find_root(document, ExtractionConfig(readability_min_words=5))

        assert strict.name == "body"
        assert lenient.get("id") == "words"

    def test_prepare_drops_unlikely_but_keeps_likely(self, extractor):
        document = parse_document(
            """
            <div class="disqus-thread"><p>Unlikely block</p></div>
            <div class="comment-content"><p>Likely wins</p></div>
            <section class="sidebar"><p>Exempt tag</p></section>
            """
        )
        prepared = extractor.prepare(document)
        text = prepared.get_text()

        assert "Unlikely block" not in text
        assert "Likely wins" in text
        assert "Exempt tag" in text
        # the input is untouched
        assert "Unlikely block" in document.get_text()

    def test_prepare_can_be_disabled(self, extractor):
        document = parse_document(f'<div class="disqus-thread"><p>{PARAGRAPH}</p></div>')

        prepared_root = extractor.find_root(document, ExtractionConfig())
        raw_root = extractor.find_root(document, ExtractionConfig(readability_prepare=False))

        assert prepared_root.name == "body"
        assert raw_root.get("class") == ["disqus-thread"]

    def test_score_parent_formula(self, extractor):
        document = parse_document('<div id="x">' + "y" * 200 + "</div>")
        div = document.find("div")
        # 1 + 5 (div) + 200 / 100, no hints, no links
        assert extractor.score_parent(div) == pytest.approx(8.0)

    def test_link_density_scales_score(self, extractor):
        document = parse_document('<div>' + "y" * 100 + '<a href="#">' + "z" * 100 + "</a></div>")
        div = document.find("div")
        assert extractor.score_parent(div) == pytest.approx((1 + 5 + 2) * 0.5)

    def test_extract_returns_text(self, make_context):
        context = make_context(f"<div><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div>")
        text = ReadabilityExtractor().extract(context)
        assert text.count(PARAGRAPH) == 2
