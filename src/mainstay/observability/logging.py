"""
Configures structured logging for the application using structlog.

Values bound with ``structlog.contextvars`` (``document_url`` during an
extraction) are merged into every entry.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List

import structlog

if TYPE_CHECKING:
    from mainstay.config.config import MonitoringConfig


def _build_handler(config: MonitoringConfig) -> logging.Handler:
    """JSON lines to ``config.log_file``, or console rendering on stderr.

    stdout is reserved for extracted content.
    """
    renderer: Any
    handler: logging.Handler
    if config.log_file:
        renderer = structlog.processors.JSONRenderer()
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(config: MonitoringConfig) -> None:
    """Route structlog and stdlib logging through one handler at ``config.log_level``.

    Safe to call repeatedly; the root handlers are replaced each time.
    """
    logging.basicConfig(
        format="%(message)s",
        level=config.log_level.upper(),
        handlers=[_build_handler(config)],
        force=True,
    )

    structlog.configure(
        processors=_shared_processors()
        + [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger("mainstay.logging").debug(
        "Logging configured", level=config.log_level, output=config.log_file or "console"
    )
