"""
Protocols for pluggable content strategies.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import StrategyContext, StrategyName


@runtime_checkable
class ContentStrategy(Protocol):
    """One step of the extraction cascade."""

    name: StrategyName

    def extract(self, context: StrategyContext) -> Optional[str]:
        """Extract content for one call.

        Args:
            context: Original and sanitized documents plus the call's config

        Returns:
            Extracted text, or None when the strategy found nothing
        """
        ...
