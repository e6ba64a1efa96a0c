"""Output serialization for extraction results."""

from .formatter import OUTPUT_FORMATS, Formatter, format_result

__all__ = ["OUTPUT_FORMATS", "Formatter", "format_result"]
