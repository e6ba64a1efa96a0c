"""
Structural selector engine.

Selector-driven extraction with two mutually exclusive selector sets: the
default set and a Wikipedia set that also drops trailing sections such as
"References" or "External links". The variant is chosen once per call from the
unsanitized document.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple
from urllib.parse import urlparse

import soupsieve as sv
import structlog
from bs4 import BeautifulSoup, Tag

from ..exceptions import ExtractionError
from .dom import attribute_text, document_positions, first_body, flatten, parent_element
from .models import ExtractionConfig, SiteVariant, StrategyContext, StrategyName
from .tables import compile_selector
from .text import extract_text, image_label

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SelectorSet:
    """Compiled selectors for one site variant."""

    main_content: sv.SoupSieve
    paragraphs: sv.SoupSieve
    headings: sv.SoupSieve
    lists: sv.SoupSieve
    list_items: sv.SoupSieve
    tables: sv.SoupSieve
    images: sv.SoupSieve


DEFAULT_MAIN_CONTENT = ", ".join(
    [
        "article",
        "main",
        "div.post",
        "div.entry",
        "div[class*='post-text']",
        "div[class*='post_text']",
        "div[class*='post-body']",
        "div[class*='post-entry']",
        "div[class*='postentry']",
        "div[class*='post-content']",
        "div[class*='post_content']",
        "div[class*='postcontent']",
        "div[class*='postContent']",
        "div[class*='post_inner_wrapper']",
        "div[class*='article-text']",
        "div[class*='articletext']",
        "div[class*='articleText']",
        "div[id*='entry-content']",
        "div[class*='entry-content']",
        "div[id*='article-content']",
        "div[class*='article-content']",
        "div[id*='article__content']",
        "div[class*='article__content']",
        "div[id*='article-body']",
        "div[class*='article-body']",
        "div[id*='article__body']",
        "div[class*='article__body']",
        "div[itemprop='articleBody']",
        "div[id*='articlebody' i]",
        "div[class*='articlebody' i]",
        "div#articleContent",
        "div[class*='ArticleContent']",
        "div[class*='page-content']",
        "div[class*='text-content']",
        "div[id*='body-text']",
        "div[class*='body-text']",
        "div[class*='article__container']",
        "div[id*='art-content']",
        "div[class*='art-content']",
        "div[class*='post-bodycopy']",
        "div[class*='storycontent']",
        "div[class*='story-content']",
        "div.postarea",
        "div.art-postcontent",
        "div[class*='theme-content']",
        "div[class*='blog-content']",
        "div[class*='section-content']",
        "div[class*='single-content']",
        "div[class*='single-post']",
        "div[class*='main-column']",
        "div[class*='wpb_text_column']",
        "div[id^='primary']",
        "div[class^='article ']",
        "div.text",
        "div#article",
        "div.cell",
        "div#story",
        "div.story",
        "div[class*='story-body']",
        "div[id*='story-body']",
        "div[class*='field-body']",
        "div[class*='fulltext' i]",
        "div[role='article']",
        "div[id*='content-main']",
        "div[class*='content-main']",
        "div[class*='content_main']",
        "div[id*='content-body']",
        "div[class*='content-body']",
        "div[id*='contentBody']",
        "div[class*='content__body']",
        "div[id*='main-content' i]",
        "div[class*='main-content' i]",
        "div[class*='page-content' i]",
        "div#content",
        "div.content",
        "section[class^='main']",
        "section[id^='main']",
        "section[role^='main']",
        "div[class^='main']",
        "div[id^='main']",
        "div[role^='main']",
    ]
)

_WIKI_ROOTS = ("div#mw-content-text", "div.mw-parser-output")


def _within_wiki_roots(selector: str) -> str:
    return ", ".join(f"{root} {part.strip()}" for root in _WIKI_ROOTS for part in selector.split(","))


DEFAULT_SELECTORS = SelectorSet(
    main_content=compile_selector(DEFAULT_MAIN_CONTENT),
    paragraphs=compile_selector(
        "p, div[class*='paragraph'], div[class*='text-block'], div[class*='post-block'], "
        "div[class*='entry-block'], div.post-text, div.text, div[class*='article-text'], "
        "section[class*='paragraph']"
    ),
    headings=compile_selector("h1, h2, h3, h4, h5, h6"),
    lists=compile_selector("ul, ol, dl"),
    list_items=compile_selector("li, dt, dd"),
    tables=compile_selector("table"),
    images=compile_selector("img"),
)

WIKIPEDIA_SELECTORS = SelectorSet(
    main_content=compile_selector("div#content, div#bodyContent, div#mw-content-text, div.mw-parser-output"),
    paragraphs=compile_selector(_within_wiki_roots("p") + ", .mw-parser-output .mw-empty-elt"),
    headings=compile_selector(_within_wiki_roots("h1, h2, h3, h4, h5, h6")),
    lists=compile_selector(_within_wiki_roots("ul, ol")),
    list_items=compile_selector(_within_wiki_roots("li")),
    tables=compile_selector(_within_wiki_roots("table")),
    images=compile_selector(_within_wiki_roots("img")),
)

SELECTOR_SETS: Dict[SiteVariant, SelectorSet] = {
    SiteVariant.DEFAULT: DEFAULT_SELECTORS,
    SiteVariant.WIKIPEDIA: WIKIPEDIA_SELECTORS,
}

SKIP_SECTION_TITLES = (
    "References",
    "External links",
    "See also",
    "Further reading",
    "Notes",
    "Bibliography",
    "Sources",
    "Citations",
    "Footnotes",
    "Literature",
    "Literatur",
    "Weblinks",
    "Einzelnachweise",
    "Siehe auch",
    "Referencias",
    "Enlaces externos",
    "Véase también",
    "Bibliografía",
)

EXCLUDE_ELEMENTS = frozenset(
    {"nav", "aside", "footer", "menu", "header", "form", "script", "style", "noscript", "figcaption", "iframe", "toc"}
)

EXCLUDE_CLASSES = frozenset(
    {
        "nav", "navbar", "menu", "footer", "sidebar", "comment", "widget",
        "advertisement", "ad", "advert", "popup", "banner", "social",
        "sharing", "share", "related", "recommend", "promotion", "shopping",
        "subscribe", "subscription", "newsletter", "promo", "masthead", "aux",
        "breadcrumb", "byline", "metadata", "date", "tags", "cloud", "topics",
        "author", "copyright", "disclaimer",
    }
)  # fmt: skip

EXCLUDE_IDS = frozenset(
    {
        "nav", "navbar", "menu", "footer", "sidebar", "comment", "comments",
        "advertisement", "social", "sharing", "share", "related", "recommend",
        "newsletter", "promo", "masthead", "breadcrumb", "byline", "metadata",
        "pagination", "pager", "tags", "tag-cloud", "topics", "topic-list",
        "category", "categories", "search", "toc",
    }
)  # fmt: skip

LIST_TAGS = frozenset({"ul", "ol", "dl"})

_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


class SectionState(Enum):
    INCLUDING = "including"
    SKIPPING = "skipping"


class SectionTracker:
    """Two-state machine driven by headings in document order.

    A heading whose text contains a skip title switches to SKIPPING; any other
    heading switches back to INCLUDING. Content before the first heading is
    always INCLUDING.
    """

    def __init__(self, enabled: bool, skip_titles: Tuple[str, ...] = SKIP_SECTION_TITLES) -> None:
        self.enabled = enabled
        self._skip_titles = tuple(title.lower() for title in skip_titles)
        self.state = SectionState.INCLUDING

    def is_skip_title(self, heading_text: str) -> bool:
        lowered = heading_text.strip().lower()
        return any(title in lowered for title in self._skip_titles)

    def feed(self, heading_text: str) -> SectionState:
        if self.enabled and self.is_skip_title(heading_text):
            self.state = SectionState.SKIPPING
        else:
            self.state = SectionState.INCLUDING
        return self.state


class SectionMap:
    """Skip state of the nearest preceding heading for any element."""

    def __init__(self, positions: Dict[int, int]) -> None:
        self._positions = positions
        self._heading_positions: List[int] = []
        self._states: List[SectionState] = []

    def add(self, heading: Tag, state: SectionState) -> None:
        self._heading_positions.append(self._positions[id(heading)])
        self._states.append(state)

    def state_for(self, element: Tag) -> SectionState:
        index = bisect.bisect_left(self._heading_positions, self._positions[id(element)]) - 1
        if index < 0:
            return SectionState.INCLUDING
        return self._states[index]


def is_wikipedia_page(document: BeautifulSoup) -> bool:
    """Detect Wikipedia via ``og:site_name`` or the canonical link's host."""
    for meta in document.find_all("meta", attrs={"property": "og:site_name"}):
        content = meta.get("content")
        if isinstance(content, str) and "Wikipedia" in content:
            return True

    for link in document.find_all("link", href=True):
        if "canonical" not in attribute_text(link, "rel").lower().split():
            continue
        host = (urlparse(str(link["href"])).hostname or "").lower()
        if host == "wikipedia.org" or host.endswith(".wikipedia.org"):
            return True

    return False


def detect_variant(document: BeautifulSoup) -> SiteVariant:
    return SiteVariant.WIKIPEDIA if is_wikipedia_page(document) else SiteVariant.DEFAULT


def _matches_exclusion(element: Tag) -> bool:
    if element.name in EXCLUDE_ELEMENTS:
        return True
    if any(token.lower() in EXCLUDE_CLASSES for token in attribute_text(element, "class").split()):
        return True
    return attribute_text(element, "id").lower() in EXCLUDE_IDS


def should_exclude(element: Tag) -> bool:
    """Exclusion check on the element and its immediate parent."""
    if _matches_exclusion(element):
        return True
    parent = parent_element(element)
    return parent is not None and _matches_exclusion(parent)


# Block kinds ranked for "block" emission order.
_HEADING, _PARAGRAPH, _LIST, _TABLE, _IMAGE = range(5)


class StructuralExtractor:
    """Selector-driven extraction with section skipping."""

    name = StrategyName.STRUCTURAL

    def extract(self, context: StrategyContext) -> Optional[str]:
        return self.extract_content(context.cleaned, context.config, context.variant)

    def find_scope(self, document: BeautifulSoup, selectors: SelectorSet) -> Tag:
        scope = selectors.main_content.select_one(document) or first_body(document)
        if scope is None:
            raise ExtractionError("No content elements found")
        return scope

    def extract_content(self, document: BeautifulSoup, config: ExtractionConfig, variant: SiteVariant) -> str:
        """Extract content from ``document`` with the selectors of ``variant``.

        Raises:
            ExtractionError: If neither a main-content element nor ``<body>`` exists
        """
        selectors = SELECTOR_SETS[variant]
        scope = self.find_scope(document, selectors)
        logger.debug("Structural scope selected", variant=variant.value, scope=scope.name)

        positions = document_positions(document)
        tracker = SectionTracker(enabled=variant is SiteVariant.WIKIPEDIA)
        sections = SectionMap(positions)
        headings: List[Tuple[Tag, str]] = []
        blocks: List[Tuple[int, int, str]] = []
        emitted: Set[int] = set()

        for heading in selectors.headings.select(scope):
            text = flatten(extract_text(heading, config))
            state = tracker.feed(text)
            sections.add(heading, state)
            if state is SectionState.INCLUDING and text:
                headings.append((heading, text))

        def qualifies(element: Tag) -> bool:
            return sections.state_for(element) is SectionState.INCLUDING and not should_exclude(element)

        def inside_emitted(element: Tag) -> bool:
            return any(id(parent) in emitted for parent in element.parents)

        # Outer blocks come first in document order, so nested matches are skipped.
        for kind, element in self.block_candidates(scope, selectors, config, positions):
            if inside_emitted(element) or not qualifies(element):
                continue
            if kind == _PARAGRAPH:
                text = flatten(extract_text(element, config))
                rendered = f"{text}\n\n" if len(text) > 10 else ""
            elif kind == _LIST:
                items = []
                for item in own_list_items(element, selectors):
                    if should_exclude(item):
                        continue
                    text = flatten(extract_text(item, config))
                    if text:
                        items.append(f"• {text}")
                rendered = "\n".join(items) + "\n\n" if items else ""
            else:
                text = flatten(extract_text(element, config))
                rendered = f"[Table: {text}]\n\n" if text else ""
            if rendered:
                blocks.append((kind, positions[id(element)], rendered))
                emitted.add(id(element))

        for heading, text in headings:
            if not inside_emitted(heading):
                blocks.append((_HEADING, positions[id(heading)], f"{text}\n\n"))

        if config.include_images:
            for image in selectors.images.select(scope):
                if should_exclude(image) or inside_emitted(image):
                    continue
                label = image_label(image)
                if label:
                    blocks.append((_IMAGE, positions[id(image)], f"[Image: {label}]\n\n"))

        if config.emission_order == "document":
            blocks.sort(key=lambda block: block[1])
        else:
            blocks.sort(key=lambda block: (block[0], block[1]))

        content = "".join(text for _, _, text in blocks).strip()
        return _EXCESS_NEWLINES_RE.sub("\n\n", content)

    def block_candidates(
        self, scope: Tag, selectors: SelectorSet, config: ExtractionConfig, positions: Dict[int, int]
    ) -> List[Tuple[int, Tag]]:
        """Paragraph, list and table matches in ``scope``, in document order."""
        candidates = [(_PARAGRAPH, element) for element in selectors.paragraphs.select(scope)]
        candidates.extend((_LIST, element) for element in selectors.lists.select(scope))
        if config.include_tables:
            candidates.extend((_TABLE, element) for element in selectors.tables.select(scope))
        candidates.sort(key=lambda candidate: positions[id(candidate[1])])
        return candidates


def own_list_items(list_element: Tag, selectors: SelectorSet) -> List[Tag]:
    """Items whose nearest enclosing list is ``list_element``."""
    return [
        item
        for item in selectors.list_items.select(list_element)
        if item.find_parent(list(LIST_TAGS)) is list_element
    ]
