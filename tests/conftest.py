"""
Shared test configuration for Mainstay.

Provides parsed HTML fixtures and extraction configs used across the unit
and integration suites.
"""

import logging

import pytest
import structlog
from bs4 import BeautifulSoup

from mainstay.extractor.dom import parse_document
from mainstay.extractor.models import ExtractionConfig, SiteVariant, StrategyContext
from mainstay.extractor.sanitizer import DocumentSanitizer

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")
    config.addinivalue_line("markers", "network: Tests requiring network access")


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog output quiet and unconfigured between tests."""
    structlog.reset_defaults()
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(40))
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


# ============================================================================
# HTML Fixtures
# ============================================================================

LONG_SENTENCE = (
    "The committee reviewed the proposal in detail and agreed that the new "
    "bridge should be built before the end of the next fiscal year. "
)

ARTICLE_HTML = """
<html><body>
<article><h1>T</h1><p>Main content paragraph with enough text to pass threshold.</p></article>
<footer>Copyright</footer>
</body></html>
"""

NEWS_HTML = f"""
<html>
<head>
  <title>Bridge Approved</title>
  <meta property="og:title" content="City Approves New Bridge">
  <meta name="author" content="Dana Reporter">
  <meta property="article:published_time" content="2024-03-05T10:00:00Z">
  <meta name="description" content="The city council approved the bridge.">
  <meta property="og:site_name" content="Daily Planet">
  <meta property="article:section" content="Local">
  <meta property="article:tag" content="Infrastructure">
</head>
<body>
  <header><h2>Daily Planet</h2><nav><a href="/">Home</a><a href="/news">News</a></nav></header>
  <div class="sidebar"><p>Trending stories you should not miss at all today.</p></div>
  <article class="story">
    <h1>City Approves New Bridge</h1>
    <p>{LONG_SENTENCE}</p>
    <p>{LONG_SENTENCE}</p>
    <p>Residents can read the full plan on <a href="https://city.example/plan">the city website</a> now.</p>
  </article>
  <footer><p>Copyright 2024 Daily Planet. All rights reserved.</p></footer>
</body>
</html>
"""

WIKIPEDIA_HTML = f"""
<html>
<head>
  <title>Bridge - Wikipedia</title>
  <meta property="og:site_name" content="Wikipedia">
  <link rel="canonical" href="https://en.wikipedia.org/wiki/Bridge">
</head>
<body>
<div id="content">
  <div id="mw-content-text">
    <div class="mw-parser-output">
      <p>A bridge is a structure built to span a physical obstacle. {LONG_SENTENCE}</p>
      <h2>History</h2>
      <p>The first bridges were made by nature itself, as simple as a log fallen across a stream.</p>
      <ul><li>Log bridges</li><li>Stone arches</li></ul>
      <h2>References</h2>
      <p>Smith, J. (2001). Bridges of the World. Reference Press, London.</p>
      <ul><li>Cited reference entry number one</li></ul>
      <h2>Types</h2>
      <p>Bridges can be categorized in several different ways by their structure.</p>
    </div>
  </div>
</div>
</body>
</html>
"""


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def news_html() -> str:
    return NEWS_HTML


@pytest.fixture
def wikipedia_html() -> str:
    return WIKIPEDIA_HTML


@pytest.fixture
def news_document() -> BeautifulSoup:
    return parse_document(NEWS_HTML)


@pytest.fixture
def wikipedia_document() -> BeautifulSoup:
    return parse_document(WIKIPEDIA_HTML)


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def config() -> ExtractionConfig:
    """Permissive config with a small size floor."""
    return ExtractionConfig(min_extracted_size=10)


@pytest.fixture
def make_context():
    """Build a StrategyContext from raw HTML."""

    def _make(html: str, config: ExtractionConfig = None, variant: SiteVariant = SiteVariant.DEFAULT):
        config = config or ExtractionConfig(min_extracted_size=10)
        document = parse_document(html)
        cleaned = DocumentSanitizer().clean(document, config)
        return StrategyContext(document=document, cleaned=cleaned, config=config, variant=variant)

    return _make
