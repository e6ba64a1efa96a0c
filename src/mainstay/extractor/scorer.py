"""
Heuristic content scorer.

``score_node`` is a pure function of the subtree: the same node always gets
the same integer score.
"""

from __future__ import annotations

import math

from bs4 import Tag

from .dom import link_density, text_length
from .tables import SCORING_TABLES, ScoringTables

CONTENT_ELEMENT_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6", "li"})
HEADLINE_TAGS = frozenset({"h1", "h2", "h3"})

CONTENT_HINT_BONUS = 75
UNWANTED_HINT_PENALTY = 50
PARAGRAPH_WEIGHT = 10
CONTENT_ELEMENT_WEIGHT = 5
LINK_DENSITY_PENALTY = 150
ARTICLE_STRUCTURE_BONUS = 30


def score_node(node: Tag, tables: ScoringTables = SCORING_TABLES) -> int:
    """Score how likely ``node`` is to be the main content container.

    Args:
        node: Root of the subtree to score
        tables: Scoring tables (defaults to the shared instance)

    Returns:
        Integer score; higher is more content-like
    """
    score = text_length(node) // 20

    if tables.content_classes.matches(node):
        score += CONTENT_HINT_BONUS
    if tables.content_ids.matches(node):
        score += CONTENT_HINT_BONUS

    paragraphs = 0
    content_elements = 0
    has_headline = False
    for element in node.find_all(True):
        name = element.name
        if name == "p":
            paragraphs += 1
        if name in CONTENT_ELEMENT_TAGS:
            content_elements += 1
        if name in HEADLINE_TAGS:
            has_headline = True
        score += tables.tag_weights.get(name, 0)

    score += paragraphs * PARAGRAPH_WEIGHT
    score += content_elements * CONTENT_ELEMENT_WEIGHT

    if tables.scorer_unwanted_classes.matches(node):
        score -= UNWANTED_HINT_PENALTY
    if tables.scorer_unwanted_ids.matches(node):
        score -= UNWANTED_HINT_PENALTY

    density = link_density(node)
    if density > tables.link_density_threshold:
        score -= math.floor(density * LINK_DENSITY_PENALTY)

    if has_headline and paragraphs >= 2:
        score += ARTICLE_STRUCTURE_BONUS

    return score


def count_paragraphs(node: Tag) -> int:
    return len(node.find_all("p"))
