"""
Top-level convenience functions: parse, extract, attach metadata.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import structlog
from bs4 import BeautifulSoup

from .config.config import HttpConfig
from .crawler.http_client import HttpClient
from .extractor.cascade_extractor import CascadeExtractor
from .extractor.dom import parse_document
from .extractor.models import ExtractionConfig, ExtractionResult
from .metadata.metadata_extractor import extract_metadata

logger = structlog.get_logger(__name__)


def extract_document(
    document: BeautifulSoup,
    config: Optional[ExtractionConfig] = None,
    *,
    url: Optional[str] = None,
) -> ExtractionResult:
    """Extract main content from an already parsed document.

    Raises:
        ExtractionError: If the content is shorter than ``min_extracted_size``
    """
    config = config or ExtractionConfig()
    context = {"document_url": url} if url else {}
    with structlog.contextvars.bound_contextvars(**context):
        result = CascadeExtractor().extract(document, config)
    metadata = extract_metadata(document, url=url) if config.extract_metadata else None
    return result.with_metadata(metadata, url=url)


def extract_html(
    html: Union[str, bytes],
    config: Optional[ExtractionConfig] = None,
    *,
    url: Optional[str] = None,
) -> ExtractionResult:
    """Extract main content from an HTML string."""
    return extract_document(parse_document(html), config, url=url)


def extract_file(path: Union[str, Path], config: Optional[ExtractionConfig] = None) -> ExtractionResult:
    """Extract main content from an HTML file on disk."""
    path = Path(path)
    logger.debug("Reading HTML file", path=str(path))
    return extract_html(path.read_bytes(), config)


async def extract_url(
    url: str,
    config: Optional[ExtractionConfig] = None,
    *,
    http_config: Optional[HttpConfig] = None,
) -> ExtractionResult:
    """Fetch ``url`` and extract its main content.

    Raises:
        FetchError: If the document could not be retrieved
        ExtractionError: If the content is shorter than ``min_extracted_size``
    """
    async with HttpClient(http_config) as client:
        html = await client.fetch_html(url)
    return extract_html(html, config, url=url)
