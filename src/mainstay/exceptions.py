"""
Exception hierarchy for Mainstay.

Strategy-level failures are recoverable inside the cascade; only an
undersized final result escapes ``CascadeExtractor.extract`` as an
``ExtractionError``.
"""

from __future__ import annotations

from typing import Optional


class MainstayError(Exception):
    """Base class for all Mainstay errors."""


class SelectorError(MainstayError, ValueError):
    """A static selector expression failed to compile."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid selector {expression!r}: {reason}")


class ExtractionError(MainstayError):
    """No acceptable content could be extracted from a document."""

    def __init__(
        self,
        message: str,
        *,
        content_length: Optional[int] = None,
        min_extracted_size: Optional[int] = None,
    ) -> None:
        self.content_length = content_length
        self.min_extracted_size = min_extracted_size
        super().__init__(message)


class FetchError(MainstayError):
    """A document could not be retrieved."""

    def __init__(self, url: str, message: str, *, status: Optional[int] = None) -> None:
        self.url = url
        self.status = status
        super().__init__(f"{message} ({url})")
