"""
Lightweight cascade strategies: best article, content-hint match, paragraph
clustering and the last-resort paragraph dump.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from .dom import link_density, parent_element
from .models import StrategyContext, StrategyName
from .scorer import score_node
from .tables import SCORING_TABLES, ScoringTables
from .text import extract_text, render_text

logger = structlog.get_logger(__name__)

MIN_CLUSTER_PARAGRAPH_LENGTH = 20
MIN_CLUSTER_PARAGRAPHS = 3


class ArticleStrategy:
    """Best-scoring ``<article>`` whose text passes the size gate."""

    name = StrategyName.ARTICLE

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def extract(self, context: StrategyContext) -> Optional[str]:
        best_text: Optional[str] = None
        best_score: Optional[int] = None

        for article in context.cleaned.find_all("article"):
            text = render_text(article, context.config)
            if not context.config.accepts(text):
                continue
            score = score_node(article, self.tables)
            if best_score is None or score > best_score:
                best_text, best_score = text, score

        if best_text is not None:
            logger.debug("Article selected", score=best_score)
        return best_text


class ContentHintStrategy:
    """First element matching a content hint, class hints before id hints."""

    name = StrategyName.CONTENT_HINTS

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def _hint_matches(self, document: BeautifulSoup) -> Iterator[Tuple[str, str, Tag]]:
        for hints in (self.tables.content_classes, self.tables.content_ids):
            for hint, matcher in hints.per_hint:
                element = matcher.select_one(document)
                if element is not None:
                    yield hints.attribute, hint, element

    def extract(self, context: StrategyContext) -> Optional[str]:
        for attribute, hint, element in self._hint_matches(context.cleaned):
            text = render_text(element, context.config)
            if context.config.accepts(text):
                logger.debug("Content hint matched", attribute=attribute, hint=hint)
                return text
        return None


class ParagraphClusterStrategy:
    """Concatenation of paragraphs that look like body text.

    A paragraph is dropped when it is short, link-heavy or sits inside a
    navigation-like parent element. At least three paragraphs must survive.
    """

    name = StrategyName.PARAGRAPH_CLUSTER

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def _in_unwanted_container(self, paragraph: Tag) -> bool:
        # Only the immediate parent is checked, and never <body> or <html>.
        parent = parent_element(paragraph)
        if parent is None or parent.name in ("body", "html"):
            return False
        return self.tables.paragraph_container_classes.matches(parent) or self.tables.paragraph_container_ids.matches(
            parent
        )

    def qualifying_paragraphs(self, document: BeautifulSoup) -> List[Tag]:
        paragraphs = []
        for paragraph in document.find_all("p"):
            if len(paragraph.get_text().strip()) < MIN_CLUSTER_PARAGRAPH_LENGTH:
                continue
            if link_density(paragraph) > self.tables.link_density_threshold:
                continue
            if self._in_unwanted_container(paragraph):
                continue
            paragraphs.append(paragraph)
        return paragraphs

    def extract(self, context: StrategyContext) -> Optional[str]:
        paragraphs = self.qualifying_paragraphs(context.cleaned)
        if len(paragraphs) < MIN_CLUSTER_PARAGRAPHS:
            return None
        return join_paragraphs(paragraphs, context) or None


class LastResortStrategy:
    """Every paragraph's text, unconditionally. Never gated."""

    name = StrategyName.LAST_RESORT

    def extract(self, context: StrategyContext) -> str:
        return join_paragraphs(context.cleaned.find_all("p"), context)


def join_paragraphs(paragraphs: List[Tag], context: StrategyContext) -> str:
    texts = (extract_text(paragraph, context.config) for paragraph in paragraphs)
    return "\n".join(text for text in texts if text).strip()
