"""Structured logging with structlog.

Two presets share one processor chain:

- ``setup_cli_logging``: human-readable console lines on stderr, so the
  ``--json`` output on stdout stays machine readable.
- ``setup_service_logging``: JSON lines on stdout in production (console
  lines elsewhere) for the API process.

Usage:
    import structlog
    logger = structlog.get_logger()
    logger.info("import_complete", succeeded=10, skipped=2)
"""

import logging
import sys
from typing import Optional, TextIO

import structlog


def _level(log_level: str) -> int:
    return getattr(logging, str(log_level).upper(), logging.INFO)


def setup_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog over stdlib logging.

    Args:
        log_level: Python log level string (DEBUG, INFO, WARNING, ERROR).
            Unknown names fall back to INFO.
        json_output: JSON lines with ISO timestamps and exception text when
            True; console lines otherwise.
        stream: Destination (defaults to stderr). Calling again replaces the
            previous destination.
    """
    stream = stream or sys.stderr

    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if json_output:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        colors = bool(getattr(stream, "isatty", lambda: False)())
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must follow a later reconfiguration.
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=_level(log_level),
        force=True,
    )


def setup_cli_logging(log_level: str = "WARNING") -> None:
    """Console lines on stderr; quiet unless something went wrong."""
    setup_logging(log_level=log_level, json_output=False, stream=sys.stderr)


def setup_service_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Logging for the API process, written to stdout for the log collector."""
    setup_logging(log_level=log_level, json_output=json_output, stream=sys.stdout)
