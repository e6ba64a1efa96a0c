"""
Cascade Content Extractor

Runs the extraction strategies in a fixed priority order against one size gate:
1. Structural selector engine (default or Wikipedia selector set)
2. Best <article> by heuristic score
3. Direct content-hint match on class/id
4. Density-based candidate search
5. Filtered paragraph clustering
6. Readability-style paragraph-parent scoring
7. Last resort: every paragraph, ungated

The first gated strategy whose output passes the gate wins; outputs are never
merged. The extractor holds no per-call state, so one instance may serve many
documents concurrently.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog
from bs4 import BeautifulSoup

from ..exceptions import ExtractionError
from .candidates import CandidateSearch
from .models import ExtractionConfig, ExtractionResult, StrategyContext, StrategyName
from .protocols import ContentStrategy
from .readability_extractor import ReadabilityExtractor
from .sanitizer import DocumentSanitizer
from .strategies import ArticleStrategy, ContentHintStrategy, LastResortStrategy, ParagraphClusterStrategy
from .structural import StructuralExtractor, detect_variant
from .tables import SCORING_TABLES, ScoringTables

logger = structlog.get_logger(__name__)


def default_strategies(tables: ScoringTables = SCORING_TABLES) -> List[ContentStrategy]:
    """Gated strategies in cascade order."""
    return [
        StructuralExtractor(),
        ArticleStrategy(tables),
        ContentHintStrategy(tables),
        CandidateSearch(tables),
        ParagraphClusterStrategy(tables),
        ReadabilityExtractor(tables),
    ]


class CascadeExtractor:
    """
    Multi-strategy cascade content extractor.

    ``run`` always produces a result, falling back to the last-resort strategy.
    ``extract`` additionally enforces ``min_extracted_size`` on that result.
    """

    def __init__(
        self,
        strategies: Optional[Sequence[ContentStrategy]] = None,
        *,
        tables: ScoringTables = SCORING_TABLES,
    ) -> None:
        self.strategies: List[ContentStrategy] = list(strategies) if strategies is not None else default_strategies(tables)
        self.sanitizer = DocumentSanitizer(tables)
        self.last_resort = LastResortStrategy()
        self.logger = logger.bind(component="CascadeExtractor")

    @property
    def strategy_order(self) -> List[StrategyName]:
        return [strategy.name for strategy in self.strategies] + [self.last_resort.name]

    def build_context(self, document: BeautifulSoup, config: ExtractionConfig) -> StrategyContext:
        # The sanitizer strips <meta> and <link>, so the variant is read first.
        variant = detect_variant(document)
        cleaned = self.sanitizer.clean(document, config)
        return StrategyContext(document=document, cleaned=cleaned, config=config, variant=variant)

    def run(self, document: BeautifulSoup, config: Optional[ExtractionConfig] = None) -> ExtractionResult:
        """
        Run the cascade and return the first accepted result.

        Args:
            document: Parsed document; never modified
            config: Per-call options (defaults apply when omitted)

        Returns:
            ExtractionResult tagged with the producing strategy. When only the
            last-resort strategy produced output, the content may be empty or
            shorter than ``min_extracted_size``.
        """
        config = config or ExtractionConfig()
        context = self.build_context(document, config)

        self.logger.debug(
            "Starting extraction cascade",
            variant=context.variant.value,
            min_extracted_size=config.min_extracted_size,
        )

        for strategy in self.strategies:
            try:
                content = strategy.extract(context)
            except Exception as e:
                # One failing strategy never aborts the call
                self.logger.warning(
                    "Strategy failed",
                    strategy=strategy.name.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            accepted = config.accepts(content)
            self.logger.debug(
                "Strategy attempted",
                strategy=strategy.name.value,
                length=len(content) if content else 0,
                accepted=accepted,
            )
            if accepted:
                self.logger.info("Extraction completed", strategy=strategy.name.value, length=len(content))
                return ExtractionResult(content=content, strategy=strategy.name)  # type: ignore[arg-type]

        content = self.last_resort.extract(context)
        self.logger.info("Extraction fell back to last resort", length=len(content))
        return ExtractionResult(content=content, strategy=self.last_resort.name)

    def extract(self, document: BeautifulSoup, config: Optional[ExtractionConfig] = None) -> ExtractionResult:
        """
        Run the cascade and enforce the size floor on the final result.

        Raises:
            ExtractionError: If no strategy produced at least
                ``min_extracted_size`` characters
        """
        config = config or ExtractionConfig()
        result = self.run(document, config)
        if not result.content or len(result.content) < config.min_extracted_size:
            self.logger.warning(
                "Extracted content below minimum size",
                length=len(result.content),
                min_extracted_size=config.min_extracted_size,
            )
            raise ExtractionError(
                "Extracted content is empty or shorter than the minimum size",
                content_length=len(result.content),
                min_extracted_size=config.min_extracted_size,
            )
        return result
