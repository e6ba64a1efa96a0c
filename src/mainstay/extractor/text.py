"""
Text serialization shared by the extraction strategies.

``extract_text`` walks a subtree depth-first with an explicit stack, so deeply
nested input cannot exhaust the interpreter's recursion limit.
``extract_strict_text`` is the precision variant: paragraphs only, boilerplate
phrases act as a one-way stop signal, bare URLs are stripped.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Union

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from bs4.element import PageElement, Script, Stylesheet

from .models import ExtractionConfig
from .tables import SCORING_TABLES, ScoringTables

BLOCK_TAGS = frozenset({"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li"})

_INVISIBLE_STRINGS = (Declaration, Doctype, ProcessingInstruction, Script, Stylesheet)

_SPACE_RUN_RE = re.compile(r"[^\S\n]+")
_NEWLINE_RUN_RE = re.compile(r"\s*\n\s*")
_BARE_URL_RE = re.compile(r"(?:https?://|www\.)[^\s()<>]+", re.IGNORECASE)
_EMPTY_PARENS_RE = re.compile(r"\(\s*\)")


class _Emit(NamedTuple):
    text: str


def normalize_text(text: str) -> str:
    """Collapse space runs to one space and newline runs to one newline."""
    text = _SPACE_RUN_RE.sub(" ", text)
    text = _NEWLINE_RUN_RE.sub("\n", text)
    return text.strip()


def image_label(image: Tag) -> str:
    alt = image.get("alt")
    if isinstance(alt, str) and alt.strip():
        return alt.strip()
    src = image.get("src")
    if isinstance(src, str) and src.strip():
        return src.strip()
    return ""


def extract_text(node: Union[Tag, BeautifulSoup], config: ExtractionConfig) -> str:
    """Serialize ``node`` to plain text.

    Block tags end with a newline, ``<br>`` is a newline, anchors append their
    href when ``include_links`` is set, images and comments render as markers
    when enabled. Everything else contributes its text only.
    """
    parts: List[str] = []
    stack: List[Union[PageElement, _Emit]] = [node]

    while stack:
        item = stack.pop()

        if isinstance(item, _Emit):
            parts.append(item.text)
            continue

        if isinstance(item, Comment):
            if config.include_comments:
                parts.append("[Comment] ")
            continue

        if isinstance(item, _INVISIBLE_STRINGS):
            continue

        if isinstance(item, NavigableString):
            if item.strip():
                parts.append(str(item))
                parts.append(" ")
            continue

        if not isinstance(item, Tag):
            continue

        name = item.name
        if name == "br":
            parts.append("\n")
            continue

        if name == "img":
            if config.include_images:
                label = image_label(item)
                if label:
                    parts.append(f"[Image: {label}] ")
            continue

        if name in BLOCK_TAGS:
            stack.append(_Emit("\n"))
        elif name == "a" and config.include_links:
            href = item.get("href")
            if isinstance(href, str) and href and item.get_text().strip():
                stack.append(_Emit(f" ({href}) "))

        stack.extend(reversed(item.contents))

    return normalize_text("".join(parts))


def contains_boilerplate(text: str, tables: ScoringTables = SCORING_TABLES) -> bool:
    return any(phrase in text for phrase in tables.boilerplate_phrases)


def extract_strict_text(
    node: Union[Tag, BeautifulSoup],
    config: ExtractionConfig,
    tables: ScoringTables = SCORING_TABLES,
) -> str:
    """Precision-oriented serialization of the ``<p>`` elements under ``node``.

    The first paragraph containing a boilerplate phrase is dropped together
    with every paragraph after it.
    """
    if isinstance(node, Tag) and not isinstance(node, BeautifulSoup) and tables.is_scorer_unwanted(node):
        return ""

    kept: List[str] = []
    for paragraph in node.find_all("p"):
        text = extract_text(paragraph, config)
        if not text:
            continue
        if contains_boilerplate(text, tables):
            break
        kept.append(text)

    content = "\n".join(kept)
    content = _BARE_URL_RE.sub("", content)
    content = _EMPTY_PARENS_RE.sub("", content)
    return normalize_text(content)


def render_text(node: Union[Tag, BeautifulSoup], config: ExtractionConfig) -> str:
    """Serialize with the variant selected by ``favor_precision``."""
    if config.favor_precision:
        return extract_strict_text(node, config)
    return extract_text(node, config)
