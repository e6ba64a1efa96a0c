"""
Document Metadata Extractor

Reads title, author, date, description, site name and categories from the
unsanitized document. Each field tries its sources in a fixed order and the
first non-empty value wins:

- title: og:title, twitter:title, <title>, first <h1>
- author: meta author, article:author, .author/.byline/.dc-creator
- date: article:published_time, meta date, <time>, .date/.published/.timestamp/.post-date
- description: og:description, meta description, twitter:description
- sitename: og:site_name, .copyright
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from ..extractor.dom import flatten, meta_content

logger = structlog.get_logger(__name__)

DATE_PATTERN = re.compile(
    r"\d{4}[-/]\d{1,2}[-/]\d{1,2}"
    r"|\d{1,2}[-/]\d{1,2}[-/]\d{4}"
    r"|(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]* \d{1,2},? \d{4}",
    re.IGNORECASE,
)

AUTHOR_CLASSES = ("author", "byline", "dc-creator")
DATE_CLASSES = ("date", "published", "timestamp", "post-date")
CATEGORY_CLASSES = ("tags", "categories", "category", "topics")


@dataclass(slots=True, frozen=True)
class DocumentMetadata:
    """Descriptive fields of one document. Missing fields are None."""

    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    sitename: Optional[str] = None
    categories: Tuple[str, ...] = field(default_factory=tuple)
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only; ``categories`` only when non-empty."""
        data = asdict(self)
        data["categories"] = list(self.categories)
        return {key: value for key, value in data.items() if value}


def _meta(document: BeautifulSoup, key: str, value: str) -> Optional[str]:
    content = meta_content(document, **{key: value})
    return flatten(content) if content else None


def _element_text(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    return flatten(element.get_text(" ")) or None


def _first_class_text(document: BeautifulSoup, classes: Tuple[str, ...]) -> Optional[str]:
    for class_name in classes:
        text = _element_text(document.select_one(f".{class_name}"))
        if text:
            return text
    return None


class MetadataExtractor:
    """Fills a ``DocumentMetadata`` from meta tags and common markup."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="MetadataExtractor")

    def extract(self, document: BeautifulSoup, url: Optional[str] = None) -> DocumentMetadata:
        metadata = DocumentMetadata(
            title=self.extract_title(document),
            author=self.extract_author(document),
            date=self.extract_date(document),
            description=self.extract_description(document),
            sitename=self.extract_sitename(document),
            categories=tuple(self.extract_categories(document)),
            url=url,
        )
        self.logger.debug("Metadata extracted", fields=sorted(metadata.to_dict()))
        return metadata

    def extract_title(self, document: BeautifulSoup) -> Optional[str]:
        return (
            _meta(document, "property", "og:title")
            or _meta(document, "name", "twitter:title")
            or _element_text(document.find("title"))
            or _element_text(document.find("h1"))
        )

    def extract_author(self, document: BeautifulSoup) -> Optional[str]:
        return (
            _meta(document, "name", "author")
            or _meta(document, "property", "article:author")
            or _first_class_text(document, AUTHOR_CLASSES)
        )

    def extract_date(self, document: BeautifulSoup) -> Optional[str]:
        date = _meta(document, "property", "article:published_time") or _meta(document, "name", "date")
        if date:
            return date

        time_element = document.find("time")
        if isinstance(time_element, Tag):
            datetime_value = time_element.get("datetime")
            if isinstance(datetime_value, str) and datetime_value.strip():
                return datetime_value.strip()
            match = DATE_PATTERN.search(time_element.get_text(" "))
            if match:
                return match.group(0)

        for class_name in DATE_CLASSES:
            text = _element_text(document.select_one(f".{class_name}"))
            if text:
                match = DATE_PATTERN.search(text)
                return match.group(0) if match else text

        return None

    def extract_description(self, document: BeautifulSoup) -> Optional[str]:
        return (
            _meta(document, "property", "og:description")
            or _meta(document, "name", "description")
            or _meta(document, "name", "twitter:description")
        )

    def extract_sitename(self, document: BeautifulSoup) -> Optional[str]:
        return _meta(document, "property", "og:site_name") or _first_class_text(document, ("copyright",))

    def extract_categories(self, document: BeautifulSoup) -> List[str]:
        categories: List[str] = []

        section = _meta(document, "property", "article:section")
        if section:
            categories.append(section)

        for meta in document.find_all("meta", attrs={"property": "article:tag"}):
            content = meta.get("content")
            if isinstance(content, str) and content.strip():
                categories.append(flatten(content))

        for class_name in CATEGORY_CLASSES:
            for link in document.select(f".{class_name} a"):
                text = _element_text(link)
                if text:
                    categories.append(text)

        return categories


def extract_metadata(document: BeautifulSoup, url: Optional[str] = None) -> DocumentMetadata:
    """Extract metadata from an unsanitized document."""
    return MetadataExtractor().extract(document, url=url)
