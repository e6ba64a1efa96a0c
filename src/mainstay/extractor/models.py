"""
Data models for extraction calls and their results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Literal, Optional

if TYPE_CHECKING:
    from bs4 import BeautifulSoup, Tag

    from ..metadata.metadata_extractor import DocumentMetadata


EmissionOrder = Literal["document", "block"]


class StrategyName(str, Enum):
    """Cascade strategies, in the order the orchestrator runs them."""

    STRUCTURAL = "structural"
    ARTICLE = "article"
    CONTENT_HINTS = "content_hints"
    DENSITY = "density"
    PARAGRAPH_CLUSTER = "paragraph_cluster"
    READABILITY = "readability"
    LAST_RESORT = "last_resort"


class SiteVariant(str, Enum):
    """Selector set used by the structural engine for one call."""

    DEFAULT = "default"
    WIKIPEDIA = "wikipedia"


class CandidatePriority(int, Enum):
    SEMANTIC = 0
    HIGH = 1
    LOW = 2


@dataclass(slots=True, frozen=True)
class ExtractionConfig:
    """Per-call extraction options."""

    include_comments: bool = False
    include_tables: bool = True
    include_links: bool = True
    include_images: bool = False
    min_extracted_size: int = 250
    extract_metadata: bool = False
    favor_precision: bool = False
    emission_order: EmissionOrder = "document"
    readability_prepare: bool = True
    readability_min_words: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate the config."""
        if self.min_extracted_size < 0:
            raise ValueError("min_extracted_size must be non-negative")
        if self.emission_order not in ("document", "block"):
            raise ValueError(f"Unknown emission order: {self.emission_order!r}")
        if self.readability_min_words is not None and self.readability_min_words < 1:
            raise ValueError("readability_min_words must be positive when set")

    def accepts(self, content: Optional[str]) -> bool:
        """Acceptance gate shared by every gated strategy."""
        return bool(content) and len(content) >= self.min_extracted_size  # type: ignore[arg-type]


@dataclass(slots=True, frozen=True)
class Candidate:
    """A subtree considered as the main-content root by the density search."""

    node: Tag
    score: int
    strategy: StrategyName
    priority: CandidatePriority


@dataclass(slots=True, frozen=True)
class StrategyContext:
    """Inputs shared by every strategy for one extraction call."""

    document: BeautifulSoup
    cleaned: BeautifulSoup
    config: ExtractionConfig
    variant: SiteVariant


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Result of one extraction call."""

    content: str
    strategy: Optional[StrategyName] = None
    url: Optional[str] = None
    metadata: Optional[DocumentMetadata] = field(default=None, compare=False)

    def with_metadata(self, metadata: Optional[DocumentMetadata], url: Optional[str] = None) -> ExtractionResult:
        return replace(self, metadata=metadata, url=url if url is not None else self.url)
