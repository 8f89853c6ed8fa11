"""
structlog setup for the crawler.

Logs go to stderr so stdout stays free for the JSON event dump.
"""

import logging
import sys

import structlog

from morgengrau.pipeline.config import LOG_FORMAT


def configure_logging(verbose: bool = False, fmt: str = LOG_FORMAT) -> None:
    """Configure structlog processors, level and renderer for a run."""
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
