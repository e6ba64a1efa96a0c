"""
DOM helpers shared by the extraction strategies.

Documents are parsed once with BeautifulSoup (lxml backend). Helpers here
never mutate the tree they are handed.
"""

from __future__ import annotations

from typing import Dict, Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

PARSER = "lxml"


def normalize_html(html: str) -> str:
    """Wrap bare fragments so every document has ``<html>`` and ``<body>``."""
    cleaned = html.strip()
    if "<html" not in cleaned:
        if "<body" in cleaned:
            cleaned = f"<html>{cleaned}</html>"
        elif "<head" not in cleaned:
            cleaned = f"<html><body>{cleaned}</body></html>"
    return cleaned


def parse_document(html: Union[str, bytes]) -> BeautifulSoup:
    """Parse HTML into a document tree."""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    return BeautifulSoup(normalize_html(html), PARSER)


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_html_content(value: str) -> bool:
    return "<html" in value or "<body" in value or "<div" in value or ("<" in value and ">" in value)


def attribute_text(element: Tag, name: str) -> str:
    """Raw attribute value; multi-valued attributes are joined with spaces."""
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def text_length(node: Tag) -> int:
    return len(node.get_text())


def flatten(text: str) -> str:
    """Collapse every whitespace run, newlines included, to one space."""
    return " ".join(text.split())


def link_density(node: Tag) -> float:
    """Share of ``node``'s text that sits inside descendant anchors.

    Zero-text nodes have density 0. Nested anchors are clamped so the result
    stays within [0, 1].
    """
    total = text_length(node)
    if total == 0:
        return 0.0
    linked = sum(text_length(anchor) for anchor in node.find_all("a"))
    return min(1.0, linked / total)


def document_positions(document: Tag) -> Dict[int, int]:
    """Map ``id(element)`` to its document-order index."""
    return {id(element): index for index, element in enumerate(document.find_all(True))}


def parent_element(node: Tag) -> Optional[Tag]:
    parent = node.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def first_body(document: BeautifulSoup) -> Optional[Tag]:
    body = document.find("body")
    return body if isinstance(body, Tag) else None


def meta_content(document: BeautifulSoup, **attrs: str) -> Optional[str]:
    """``content`` of the first matching ``<meta>``, if non-empty."""
    for meta in document.find_all("meta", attrs=attrs):
        content = meta.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
    return None
