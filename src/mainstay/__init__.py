"""
Mainstay - Main-content extraction for HTML documents.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .api import extract_document, extract_file, extract_html, extract_url
from .exceptions import ExtractionError, FetchError, MainstayError, SelectorError
from .extractor import CascadeExtractor, ExtractionConfig, ExtractionResult

__all__ = [
    "__version__",
    "CascadeExtractor",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionResult",
    "FetchError",
    "MainstayError",
    "SelectorError",
    "extract_document",
    "extract_file",
    "extract_html",
    "extract_url",
]
