"""
Document sanitizer.

Cleaning is a single bottom-up mark-and-filter pass over a private copy of the
document: every element is tested against the removal rules on the untouched
copy, then only marked elements with no marked ancestor are detached (their
subtrees go with them). The input document is never modified.
"""

from __future__ import annotations

import copy
from typing import List, Set

import structlog
from bs4 import BeautifulSoup, Comment, Tag

from .models import ExtractionConfig
from .tables import SCORING_TABLES, ScoringTables

logger = structlog.get_logger(__name__)


class DocumentSanitizer:
    """Removes boilerplate elements, comments and tables per configuration."""

    def __init__(self, tables: ScoringTables = SCORING_TABLES) -> None:
        self.tables = tables

    def clean(self, document: BeautifulSoup, config: ExtractionConfig) -> BeautifulSoup:
        """Return a sanitized copy of ``document``.

        Args:
            document: Parsed document; left untouched
            config: Controls whether comments and tables survive

        Returns:
            A new document with unwanted elements removed
        """
        cleaned = copy.copy(document)

        marked: List[Tag] = []
        marked_ids: Set[int] = set()
        for element in cleaned.find_all(True):
            if not self._should_remove(element, config):
                continue
            # Ancestors come first in document order, so a marked ancestor is
            # always seen before its descendants.
            if any(id(parent) in marked_ids for parent in element.parents):
                continue
            marked.append(element)
            marked_ids.add(id(element))

        comments: List[Comment] = []
        if not config.include_comments:
            comments = list(cleaned.find_all(string=lambda s: isinstance(s, Comment)))

        for comment in comments:
            comment.extract()
        for element in marked:
            element.decompose()

        logger.debug(
            "Document sanitized",
            removed_elements=len(marked),
            removed_comments=len(comments),
        )
        return cleaned

    def _should_remove(self, element: Tag, config: ExtractionConfig) -> bool:
        if element.name in self.tables.unwanted_tags:
            return True
        if element.name == "table" and not config.include_tables:
            return True
        return self.tables.sanitize_classes.matches(element) or self.tables.sanitize_ids.matches(element)
