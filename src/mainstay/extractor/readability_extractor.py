"""
Readability-style fallback extractor.

Independent of the structural engine: paragraphs vote for their parent element
and the best-scoring parent becomes the content root.
"""

from __future__ import annotations

import copy
from typing import Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from .dom import attribute_text, first_body, link_density, parent_element, text_length
from .models import ExtractionConfig, StrategyContext, StrategyName
from .tables import (
    LIKELY_CANDIDATES,
    PREPARE_EXEMPT_TAGS,
    SCORING_TABLES,
    UNLIKELY_CANDIDATES,
    ScoringTables,
)
from .text import render_text

logger = structlog.get_logger(__name__)

MIN_PARAGRAPH_LENGTH = 25

TAG_BONUSES = {
    "div": 5.0,
    "article": 10.0,
    "section": 10.0,
    "main": 10.0,
    "p": 3.0,
    "pre": 3.0,
    "td": 3.0,
    "blockquote": 3.0,
}

HINT_WEIGHT = 25.0


class ReadabilityExtractor:
    """Paragraph-parent scoring over a prepared copy of the sanitized document."""

    name = StrategyName.READABILITY

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def extract(self, context: StrategyContext) -> Optional[str]:
        root = self.find_root(context.cleaned, context.config)
        if root is None:
            return None
        return render_text(root, context.config) or None

    def find_root(self, document: BeautifulSoup, config: ExtractionConfig) -> Optional[Tag]:
        """Best-scoring paragraph parent, or ``<body>`` when no paragraph qualifies."""
        if config.readability_prepare:
            document = self.prepare(document)

        parents: List[Tag] = []
        seen: Dict[int, Tag] = {}
        for paragraph in document.find_all("p"):
            if not self._qualifies(paragraph, config):
                continue
            parent = parent_element(paragraph)
            if parent is None or id(parent) in seen:
                continue
            seen[id(parent)] = parent
            parents.append(parent)

        if not parents:
            logger.debug("No qualifying paragraphs, using body")
            return first_body(document)

        best = max(parents, key=self.score_parent)
        logger.debug("Readability root selected", tag=best.name, parents=len(parents))
        return best

    def prepare(self, document: BeautifulSoup) -> BeautifulSoup:
        """Copy of ``document`` without unlikely-but-not-likely elements."""
        prepared = copy.copy(document)

        marked: List[Tag] = []
        marked_ids = set()
        for element in prepared.find_all(True):
            if element.name in PREPARE_EXEMPT_TAGS or not self._is_unlikely(element):
                continue
            if any(id(parent) in marked_ids for parent in element.parents):
                continue
            marked.append(element)
            marked_ids.add(id(element))

        for element in marked:
            element.decompose()
        return prepared

    @staticmethod
    def _is_unlikely(element: Tag) -> bool:
        for attribute in ("class", "id"):
            value = attribute_text(element, attribute)
            if value and UNLIKELY_CANDIDATES.search(value) and not LIKELY_CANDIDATES.search(value):
                return True
        return False

    @staticmethod
    def _qualifies(paragraph: Tag, config: ExtractionConfig) -> bool:
        text = paragraph.get_text().strip()
        if config.readability_min_words is not None:
            return len(text.split()) >= config.readability_min_words
        return len(text) >= MIN_PARAGRAPH_LENGTH

    def score_parent(self, parent: Tag) -> float:
        score = 1.0 + TAG_BONUSES.get(parent.name, 0.0)

        if self.tables.positive_classes.matches(parent):
            score += HINT_WEIGHT
        if self.tables.positive_ids.matches(parent):
            score += HINT_WEIGHT
        if self.tables.negative_classes.matches(parent):
            score -= HINT_WEIGHT
        if self.tables.negative_ids.matches(parent):
            score -= HINT_WEIGHT

        score += text_length(parent) / 100
        return score * (1 - link_density(parent))
