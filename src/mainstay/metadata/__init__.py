"""
Mainstay Metadata Extraction Module

Reads descriptive fields (title, author, date, description, site name,
categories) from a parsed document. Consumes the unsanitized tree and contains
no content-extraction logic.
"""

from .metadata_extractor import DocumentMetadata, MetadataExtractor, extract_metadata

__all__ = ["DocumentMetadata", "MetadataExtractor", "extract_metadata"]
