"""
Scoring tables and precompiled hint matchers.

Every table here is built once at import time and never mutated, so a single
``SCORING_TABLES`` instance is shared by all extraction calls. Hint matching is
substring containment on the raw attribute value (``[class*=hint]``), which
deliberately over-matches: the class ``advanced`` matches the hint ``ad``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

import soupsieve as sv
from bs4 import Tag

from ..exceptions import SelectorError

LINK_DENSITY_THRESHOLD = 0.33


def compile_selector(expression: str) -> sv.SoupSieve:
    """Compile a CSS selector, raising ``SelectorError`` on bad syntax."""
    try:
        return sv.compile(expression)
    except sv.SelectorSyntaxError as e:
        raise SelectorError(expression, str(e)) from e


@dataclass(frozen=True)
class HintSet:
    """Substring hints against one attribute, compiled into matchers."""

    attribute: str
    hints: Tuple[str, ...]
    matcher: sv.SoupSieve
    per_hint: Tuple[Tuple[str, sv.SoupSieve], ...]

    def matches(self, element: object) -> bool:
        return isinstance(element, Tag) and self.matcher.match(element)


def hint_set(attribute: str, hints: Iterable[str]) -> HintSet:
    unique = tuple(dict.fromkeys(hints))
    per_hint = tuple((hint, compile_selector(f'[{attribute}*="{hint}"]')) for hint in unique)
    combined = compile_selector(", ".join(f'[{attribute}*="{hint}"]' for hint in unique))
    return HintSet(attribute=attribute, hints=unique, matcher=combined, per_hint=per_hint)


# --- Sanitizer ---

UNWANTED_TAGS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "iframe",
        "nav",
        "header",
        "footer",
        "aside",
        "form",
        "button",
        "svg",
        "meta",
        "link",
        "comment",
    }
)

SANITIZE_CLASSES = (
    "nav", "navbar", "navigation", "menu", "footer", "comment", "widget",
    "sidebar", "advertisement", "ad", "advert", "popup", "banner", "social",
    "sharing", "share", "related", "recommend", "promotion", "promo", "shopping",
)  # fmt: skip

SANITIZE_IDS = (
    "nav", "navbar", "navigation", "menu", "footer", "comments", "sidebar",
    "advertisement", "related", "recommend", "social", "sharing",
)  # fmt: skip

# --- Content hints ---

CONTENT_CLASSES = (
    "article", "post", "content", "entry", "main", "text", "blog", "story", "body",
    "column", "section", "post-content", "main-content", "article-content",
    "story-content", "story-body", "news-content", "news-article", "news-story",
    "entry-content", "article-body", "article-text", "articleBody", "content-article",
    "post-text", "post-body", "content-text", "content-body", "rich-text", "page-content",
)  # fmt: skip

CONTENT_IDS = (
    "article", "post", "content", "entry", "main", "text", "blog", "story", "body",
    "column", "section", "post-content", "main-content", "article-content",
    "story-content", "story-body", "news-content", "news-article", "news-story",
    "entry-content", "article-body", "article-text", "articleBody", "content-article",
    "post-text", "post-body", "content-text", "content-body", "story-text", "page-content",
)  # fmt: skip

# Penalised by the scorer and used to skip whole subtrees in precision mode.
SCORER_UNWANTED = (
    "nav", "navbar", "navigation", "menu", "footer", "sidebar",
    "advertisement", "social", "sharing", "comment", "related", "recommendation",
)  # fmt: skip

# Rejects density-search candidates outright.
CANDIDATE_UNWANTED = (
    "nav", "navbar", "navigation", "menu", "footer", "header", "sidebar",
    "advertisement", "ad", "social", "share", "sharing", "comment", "comments",
    "related", "recommended", "promotion", "promo", "subscribe", "subscription",
    "download", "copyright", "tags", "tag-cloud", "breadcrumb", "pagination",
    "pager", "widget", "banner",
)  # fmt: skip

# Containers whose paragraphs are ignored by paragraph clustering.
PARAGRAPH_CONTAINER_UNWANTED = ("nav", "menu", "footer", "sidebar", "comment")

TAG_WEIGHTS: Mapping[str, int] = MappingProxyType(
    {
        "div": 5,
        "p": 15,
        "h1": 10,
        "h2": 8,
        "h3": 6,
        "h4": 4,
        "h5": 3,
        "article": 25,
        "section": 15,
        "main": 25,
        "content": 20,
        "li": 1,
        "td": 1,
        "a": -5,
        "script": -50,
        "style": -50,
        "header": -25,
        "footer": -50,
        "nav": -50,
        "aside": -30,
        "iframe": -40,
        "form": -20,
        "button": -15,
        "banner": -30,
        "social": -25,
        "share": -25,
        "comment": -25,
        "advertisement": -50,
        "meta": -25,
        "widget": -25,
    }
)

BOILERPLATE_PHRASES = (
    "Read more",
    "Read More",
    "Follow us",
    "Follow Us",
    "Copyright",
    "All rights reserved",
    "Tags:",
    "Share this",
    "Subscribe to our newsletter",
    "Sign up for our newsletter",
    "Related articles",
    "Related posts",
    "Click here to",
)

# --- Readability ---

POSITIVE_INDICATORS = (
    "article", "body", "content", "entry", "main", "page", "post",
    "text", "blog", "story", "container", "readable",
)  # fmt: skip

NEGATIVE_INDICATORS = (
    "advert", "ad-", "banner", "combx", "comment", "community", "disqus",
    "extra", "foot", "header", "menu", "meta", "nav", "popup", "related",
    "remark", "rss", "share", "shoutbox", "sidebar", "sponsor", "shopping",
    "widget", "hidden", "js", "modal", "login",
)  # fmt: skip

UNLIKELY_CANDIDATES = re.compile(
    r"banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|foot|header|legends|menu|related|"
    r"remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|supplemental|ad-break|agegate|"
    r"pagination|pager|popup|yom-remote",
    re.IGNORECASE,
)

LIKELY_CANDIDATES = re.compile(r"article|body|content|entry|main|news|pag(?:e|ination)|post|text|blog|story", re.IGNORECASE)

PREPARE_EXEMPT_TAGS = frozenset({"html", "body", "article", "section", "main"})


@dataclass(frozen=True)
class ScoringTables:
    """Process-wide, read-only lookup tables used by every strategy."""

    unwanted_tags: frozenset
    sanitize_classes: HintSet
    sanitize_ids: HintSet
    content_classes: HintSet
    content_ids: HintSet
    scorer_unwanted_classes: HintSet
    scorer_unwanted_ids: HintSet
    candidate_unwanted_classes: HintSet
    candidate_unwanted_ids: HintSet
    paragraph_container_classes: HintSet
    paragraph_container_ids: HintSet
    positive_classes: HintSet
    positive_ids: HintSet
    negative_classes: HintSet
    negative_ids: HintSet
    tag_weights: Mapping[str, int]
    boilerplate_phrases: Tuple[str, ...]
    link_density_threshold: float = LINK_DENSITY_THRESHOLD

    def has_content_hint(self, element: Tag) -> bool:
        return self.content_classes.matches(element) or self.content_ids.matches(element)

    def is_candidate_unwanted(self, element: Tag) -> bool:
        return self.candidate_unwanted_classes.matches(element) or self.candidate_unwanted_ids.matches(element)

    def is_scorer_unwanted(self, element: Tag) -> bool:
        return self.scorer_unwanted_classes.matches(element) or self.scorer_unwanted_ids.matches(element)


def build_scoring_tables() -> ScoringTables:
    return ScoringTables(
        unwanted_tags=UNWANTED_TAGS,
        sanitize_classes=hint_set("class", SANITIZE_CLASSES),
        sanitize_ids=hint_set("id", SANITIZE_IDS),
        content_classes=hint_set("class", CONTENT_CLASSES),
        content_ids=hint_set("id", CONTENT_IDS),
        scorer_unwanted_classes=hint_set("class", SCORER_UNWANTED),
        scorer_unwanted_ids=hint_set("id", SCORER_UNWANTED),
        candidate_unwanted_classes=hint_set("class", CANDIDATE_UNWANTED),
        candidate_unwanted_ids=hint_set("id", CANDIDATE_UNWANTED),
        paragraph_container_classes=hint_set("class", PARAGRAPH_CONTAINER_UNWANTED),
        paragraph_container_ids=hint_set("id", PARAGRAPH_CONTAINER_UNWANTED),
        positive_classes=hint_set("class", POSITIVE_INDICATORS),
        positive_ids=hint_set("id", POSITIVE_INDICATORS),
        negative_classes=hint_set("class", NEGATIVE_INDICATORS),
        negative_ids=hint_set("id", NEGATIVE_INDICATORS),
        tag_weights=TAG_WEIGHTS,
        boilerplate_phrases=BOILERPLATE_PHRASES,
    )


SCORING_TABLES = build_scoring_tables()
