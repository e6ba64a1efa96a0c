"""
Integration tests for the extraction pipeline, from raw HTML to content.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from mainstay import extract_file, extract_html
from mainstay.exceptions import ExtractionError
from mainstay.extractor.cascade_extractor import CascadeExtractor
from mainstay.extractor.dom import link_density, parse_document
from mainstay.extractor.models import ExtractionConfig, StrategyName
from mainstay.extractor.sanitizer import DocumentSanitizer

VALID_PARAGRAPH = "Flood defences along the river were raised again this spring after heavy rain. " * 4

UNWANTED_HTML = f"""
<html><body>
<p class="advertisement">Buy our premium umbrellas today for a limited time only.</p>
<p class="social-links">Follow us on every network you can possibly think of.</p>
<p class="related-posts">You might also enjoy these other stories from the archive.</p>
<p>{VALID_PARAGRAPH}</p>
</body></html>
"""

LINK_HTML = """
<article>
  <p>Background reading is available at <a href="https://x.com">a link</a> for anyone who wants more.</p>
</article>
"""

HTML_FIXTURES = ["article_html", "news_html", "wikipedia_html", "unwanted_html"]


@pytest.fixture
def unwanted_html() -> str:
    return UNWANTED_HTML


@pytest.mark.integration
class TestExtractionPipeline:
    """Integration tests for end-to-end extraction."""

    def test_article_without_footer(self, article_html):
        result = extract_html(article_html, ExtractionConfig(min_extracted_size=10))

        assert "T" in result.content
        assert "Main content paragraph" in result.content
        assert "Copyright" not in result.content

    @pytest.mark.parametrize("include_links", [True, False])
    def test_link_targets(self, include_links):
        config = ExtractionConfig(min_extracted_size=10, include_links=include_links)
        result = extract_html(LINK_HTML, config)

        assert "a link" in result.content
        assert ("(https://x.com)" in result.content) is include_links

    def test_unwanted_paragraphs_excluded(self, unwanted_html):
        result = extract_html(unwanted_html)

        assert result.content == VALID_PARAGRAPH.strip()
        assert "umbrellas" not in result.content
        assert "Follow us" not in result.content
        assert "archive" not in result.content

    def test_wikipedia_reference_sections_skipped(self, wikipedia_html):
        result = extract_html(wikipedia_html, ExtractionConfig(min_extracted_size=10))

        assert result.strategy is StrategyName.STRUCTURAL
        assert result.content.startswith("A bridge is a structure")
        assert "Smith, J." not in result.content
        assert "Bridges can be categorized" in result.content

    def test_oversized_floor_fails(self, news_html):
        with pytest.raises(ExtractionError):
            extract_html(news_html, ExtractionConfig(min_extracted_size=100_000))

    @pytest.mark.parametrize("fixture_name", HTML_FIXTURES)
    @pytest.mark.parametrize("min_size", [0, 10, 60, 250, 400])
    def test_success_meets_floor(self, request, fixture_name, min_size):
        html = request.getfixturevalue(fixture_name)
        config = ExtractionConfig(min_extracted_size=min_size)
        try:
            result = extract_html(html, config)
        except ExtractionError:
            return
        assert len(result.content) >= min_size

    def test_metadata_attached_on_request(self, news_html):
        result = extract_html(
            news_html,
            ExtractionConfig(min_extracted_size=50, extract_metadata=True),
            url="https://planet.example/bridge",
        )

        assert result.metadata is not None
        assert result.metadata.sitename == "Daily Planet"
        assert result.url == "https://planet.example/bridge"

    def test_metadata_skipped_by_default(self, news_html):
        result = extract_html(news_html, ExtractionConfig(min_extracted_size=50))
        assert result.metadata is None

    def test_extract_file(self, tmp_path, news_html):
        path = tmp_path / "page.html"
        path.write_bytes(news_html.encode("utf-8"))

        result = extract_file(path, ExtractionConfig(min_extracted_size=50))
        assert "The committee reviewed the proposal" in result.content

    def test_concurrent_calls_share_one_extractor(self, news_html, wikipedia_html):
        extractor = CascadeExtractor()
        config = ExtractionConfig(min_extracted_size=50)
        documents = [parse_document(html) for html in (news_html, wikipedia_html) * 4]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda document: extractor.extract(document, config), documents))

        assert all(result == results[index % 2] for index, result in enumerate(results))


@pytest.mark.integration
class TestSanitizerProperties:
    """Properties of the sanitizer over full documents."""

    @pytest.mark.parametrize("fixture_name", HTML_FIXTURES)
    def test_idempotent(self, request, fixture_name):
        html = request.getfixturevalue(fixture_name)
        sanitizer = DocumentSanitizer()
        config = ExtractionConfig()

        once = sanitizer.clean(parse_document(html), config)
        twice = sanitizer.clean(once, config)

        assert str(twice) == str(once)

    def test_descendants_of_removed_nodes_are_gone(self):
        document = parse_document(
            '<div class="sidebar"><div class="entry"><p>Nested inside removed</p></div></div><p>Kept</p>'
        )
        cleaned = DocumentSanitizer().clean(document, ExtractionConfig())

        assert "Nested inside removed" not in cleaned.get_text()
        assert cleaned.select_one(".entry") is None
        assert "Kept" in cleaned.get_text()

    @pytest.mark.parametrize("fixture_name", HTML_FIXTURES)
    def test_link_density_bounds(self, request, fixture_name):
        for element in parse_document(request.getfixturevalue(fixture_name)).find_all(True):
            density = link_density(element)
            assert 0.0 <= density <= 1.0
            if not element.get_text():
                assert density == 0.0
