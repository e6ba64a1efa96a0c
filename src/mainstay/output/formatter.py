"""
Serializes extraction results into the supported output formats.
"""

from __future__ import annotations

import html
import json
from typing import Any, Callable, Dict, List
from xml.sax.saxutils import escape

from ..extractor.models import ExtractionResult

OUTPUT_FORMATS = ("txt", "json", "xml", "html")

XML_FIELDS = ("title", "author", "date", "url", "description", "sitename")


def _fields(result: ExtractionResult) -> Dict[str, Any]:
    data: Dict[str, Any] = result.metadata.to_dict() if result.metadata is not None else {}
    if result.url:
        data["url"] = result.url
    return data


class Formatter:
    """Renders an ``ExtractionResult`` as txt, json, xml or html."""

    def __init__(self) -> None:
        self._renderers: Dict[str, Callable[[ExtractionResult], str]] = {
            "txt": self.to_text,
            "json": self.to_json,
            "xml": self.to_xml,
            "html": self.to_html,
        }

    def format(self, result: ExtractionResult, fmt: str) -> str:
        renderer = self._renderers.get(fmt.lower())
        if renderer is None:
            raise ValueError(f"Unsupported output format: '{fmt}'. Supported formats: {', '.join(OUTPUT_FORMATS)}")
        return renderer(result)

    def to_text(self, result: ExtractionResult) -> str:
        return result.content

    def to_json(self, result: ExtractionResult) -> str:
        data: Dict[str, Any] = {"content": result.content}
        data.update(_fields(result))
        if result.strategy is not None:
            data["strategy"] = result.strategy.value
        return json.dumps(data, indent=2, ensure_ascii=False)

    def to_xml(self, result: ExtractionResult) -> str:
        data = _fields(result)
        lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<document>"]

        for name in XML_FIELDS:
            if data.get(name):
                lines.append(f"  <{name}>{escape(str(data[name]))}</{name}>")

        if data.get("categories"):
            lines.append("  <categories>")
            for category in data["categories"]:
                lines.append(f"    <category>{escape(category)}</category>")
            lines.append("  </categories>")

        lines.append(f"  <content>{escape(result.content)}</content>")
        lines.append("</document>")
        return "\n".join(lines)

    def to_html(self, result: ExtractionResult) -> str:
        data = _fields(result)
        title = data.get("title") or "Extracted Content"
        parts: List[str] = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '  <meta charset="UTF-8">',
            f"  <title>{html.escape(title)}</title>",
            "</head>",
            "<body>",
        ]

        if data.get("title"):
            parts.append(f"  <h1>{html.escape(data['title'])}</h1>")
        if data.get("author"):
            parts.append(f'  <p class="author">By: {html.escape(data["author"])}</p>')
        if data.get("date"):
            parts.append(f'  <p class="date">Date: {html.escape(data["date"])}</p>')

        parts.append('  <div class="content">')
        for paragraph in result.content.split("\n\n"):
            if paragraph.strip():
                parts.append(f"    <p>{html.escape(paragraph.strip())}</p>")
        parts.append("  </div>")

        parts.extend(["</body>", "</html>"])
        return "\n".join(parts)


def format_result(result: ExtractionResult, fmt: str = "txt") -> str:
    """Serialize ``result`` as ``fmt``.

    Raises:
        ValueError: If ``fmt`` is not one of txt, json, xml or html
    """
    return Formatter().format(result, fmt)
