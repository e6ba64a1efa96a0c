"""
Density-based candidate search.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from .dom import link_density, text_length
from .models import Candidate, CandidatePriority, StrategyContext, StrategyName
from .scorer import count_paragraphs, score_node
from .tables import SCORING_TABLES, ScoringTables, compile_selector
from .text import render_text

logger = structlog.get_logger(__name__)

CANDIDATE_SELECTOR = compile_selector("article, main, section, div, body")
SEMANTIC_TAGS = frozenset({"article", "main"})


class CandidateSearch:
    """Ranks container elements with the heuristic scorer and extracts the best one."""

    name = StrategyName.DENSITY

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def find_candidates(self, document: BeautifulSoup) -> List[Candidate]:
        """Collect and score candidate containers.

        Semantic containers (``article``/``main``) come first, then high-priority
        and low-priority candidates, each group in document order.
        """
        groups: Dict[CandidatePriority, List[Tag]] = {priority: [] for priority in CandidatePriority}

        for element in CANDIDATE_SELECTOR.select(document):
            if self.tables.is_candidate_unwanted(element):
                continue
            if link_density(element) > self.tables.link_density_threshold:
                continue

            length = text_length(element)
            paragraphs = count_paragraphs(element)

            if (
                (length > 250 and paragraphs >= 2)
                or length > 500
                or paragraphs >= 4
                or self.tables.has_content_hint(element)
            ):
                priority = CandidatePriority.HIGH
            elif length > 100:
                priority = CandidatePriority.LOW
            else:
                continue

            if element.name in SEMANTIC_TAGS:
                priority = CandidatePriority.SEMANTIC
            groups[priority].append(element)

        return [
            Candidate(
                node=element,
                score=score_node(element, self.tables),
                strategy=self.name,
                priority=priority,
            )
            for priority in CandidatePriority
            for element in groups[priority]
        ]

    @staticmethod
    def best(candidates: List[Candidate]) -> Optional[Candidate]:
        """Highest score wins; ties go to the earlier entry."""
        if not candidates:
            return None
        return max(candidates, key=lambda candidate: candidate.score)

    def extract(self, context: StrategyContext) -> Optional[str]:
        candidates = self.find_candidates(context.cleaned)
        best = self.best(candidates)
        if best is None:
            return None

        logger.debug(
            "Density candidate selected",
            tag=best.node.name,
            score=best.score,
            candidates=len(candidates),
        )
        return render_text(best.node, context.config) or None
