"""
Unit tests for output formatting.
"""

import json

import pytest

from mainstay.extractor.models import ExtractionResult, StrategyName
from mainstay.metadata import DocumentMetadata
from mainstay.output import OUTPUT_FORMATS, format_result


@pytest.fixture
def result():
    metadata = DocumentMetadata(
        title="Bridges & Tunnels",
        author="Dana Reporter",
        date="2024-03-05",
        categories=("Local", "Infrastructure"),
    )
    return ExtractionResult(
        content="First paragraph <b>bold</b>.\n\nSecond paragraph.",
        strategy=StrategyName.ARTICLE,
        url="https://planet.example/bridge",
        metadata=metadata,
    )


@pytest.mark.unit
class TestFormatter:
    """Test cases for format_result."""

    def test_txt_is_content(self, result):
        assert format_result(result) == result.content

    def test_json(self, result):
        data = json.loads(format_result(result, "json"))

        assert data["content"] == result.content
        assert data["title"] == "Bridges & Tunnels"
        assert data["categories"] == ["Local", "Infrastructure"]
        assert data["url"] == "https://planet.example/bridge"
        assert data["strategy"] == "article"
        assert "description" not in data

    def test_json_without_metadata(self):
        data = json.loads(format_result(ExtractionResult(content="Body"), "json"))
        assert data == {"content": "Body"}

    def test_xml_escapes(self, result):
        rendered = format_result(result, "xml")

        assert rendered.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<title>Bridges &amp; Tunnels</title>" in rendered
        assert "<category>Infrastructure</category>" in rendered
        assert "&lt;b&gt;bold&lt;/b&gt;" in rendered

    def test_html_paragraphs(self, result):
        rendered = format_result(result, "html")

        assert "<title>Bridges &amp; Tunnels</title>" in rendered
        assert '<p class="author">By: Dana Reporter</p>' in rendered
        assert "<p>First paragraph &lt;b&gt;bold&lt;/b&gt;.</p>" in rendered
        assert "<p>Second paragraph.</p>" in rendered

    def test_format_is_case_insensitive(self, result):
        assert format_result(result, "JSON") == format_result(result, "json")

    def test_unknown_format(self, result):
        with pytest.raises(ValueError, match="Unsupported output format"):
            format_result(result, "pdf")

    def test_supported_formats(self):
        assert OUTPUT_FORMATS == ("txt", "json", "xml", "html")
