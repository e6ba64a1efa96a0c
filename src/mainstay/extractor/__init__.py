"""
Mainstay Content Extraction - Multi-Strategy Cascade Extractor

Finds the main readable content of an HTML document with a fixed-order cascade:
1. Structural selector engine with Wikipedia-aware section skipping
2. Best <article>, direct content-hint match and density candidate search
3. Filtered paragraph clustering and a readability-style fallback
4. Last resort: every paragraph's text

Every strategy reads a sanitized copy of the document and shares one text
serializer; all lookup tables are built once and shared read-only.
"""

from .candidates import CandidateSearch
from .cascade_extractor import CascadeExtractor, default_strategies
from .dom import is_html_content, is_url, link_density, parse_document
from .models import (
    Candidate,
    CandidatePriority,
    ExtractionConfig,
    ExtractionResult,
    SiteVariant,
    StrategyContext,
    StrategyName,
)
from .protocols import ContentStrategy
from .readability_extractor import ReadabilityExtractor
from .sanitizer import DocumentSanitizer
from .scorer import score_node
from .strategies import ArticleStrategy, ContentHintStrategy, LastResortStrategy, ParagraphClusterStrategy
from .structural import SectionState, StructuralExtractor, detect_variant
from .tables import SCORING_TABLES, ScoringTables
from .text import extract_strict_text, extract_text

__all__ = [
    "ArticleStrategy",
    "Candidate",
    "CandidatePriority",
    "CandidateSearch",
    "CascadeExtractor",
    "ContentHintStrategy",
    "ContentStrategy",
    "DocumentSanitizer",
    "ExtractionConfig",
    "ExtractionResult",
    "LastResortStrategy",
    "ParagraphClusterStrategy",
    "ReadabilityExtractor",
    "SCORING_TABLES",
    "ScoringTables",
    "SectionState",
    "SiteVariant",
    "StrategyContext",
    "StrategyName",
    "StructuralExtractor",
    "default_strategies",
    "detect_variant",
    "extract_strict_text",
    "extract_text",
    "is_html_content",
    "is_url",
    "link_density",
    "parse_document",
    "score_node",
]
