"""
Structured logging for the record scraper.

Provides JSON-formatted logging with context propagation.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
) -> None:
    """
    Configure structured logging for the scraper.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Output format ('json' or 'console').
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Logs go to stderr so that records printed on stdout stay parseable
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s",
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structured logger.
    """
    return structlog.get_logger(name)


class ScraperLogger:
    """
    Specialized logger for extraction operations with pre-defined event types.
    """

    def __init__(self, name: str = "recordscraper"):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = {}

    def bind(self, **kwargs: Any) -> "ScraperLogger":
        """Bind context to all subsequent log calls."""
        new_logger = ScraperLogger.__new__(ScraperLogger)
        new_logger._logger = self._logger.bind(**kwargs)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def heuristic_candidate(
        self,
        selector: str,
        metric: float,
        matches: int,
        **kwargs: Any,
    ) -> None:
        """Log a new best candidate found while grid sampling."""
        self._logger.debug(
            "heuristic_candidate",
            event_type="heuristic",
            selector=selector,
            metric=metric,
            matches=matches,
            **kwargs,
        )

    def heuristic_result(
        self,
        selector: str,
        metric: float,
        elements: int,
        degenerate: bool,
        **kwargs: Any,
    ) -> None:
        """Log the outcome of heuristic list discovery."""
        level = "warning" if degenerate else "info"
        getattr(self._logger, level)(
            "heuristic_result",
            event_type="heuristic",
            selector=selector,
            metric=metric,
            elements=elements,
            degenerate=degenerate,
            **kwargs,
        )

    def grouping_fallback(
        self,
        seed_field: str,
        incomplete_items: int,
        **kwargs: Any,
    ) -> None:
        """Log that schema grouping fell back to positional zipping."""
        self._logger.info(
            "grouping_fallback",
            event_type="schema",
            seed_field=seed_field,
            incomplete_items=incomplete_items,
            **kwargs,
        )

    def similarity_fallback(
        self,
        list_selector: str,
        template_classes: list[str],
        accepted: int,
        **kwargs: Any,
    ) -> None:
        """Log that list container resolution used class similarity."""
        self._logger.info(
            "similarity_fallback",
            event_type="list",
            list_selector=list_selector,
            template_classes=template_classes,
            accepted=accepted,
            **kwargs,
        )

    def extraction_result(
        self,
        mode: str,
        records: int,
        duration_ms: float,
        **kwargs: Any,
    ) -> None:
        """Log extraction result."""
        level = "info" if records else "warning"
        getattr(self._logger, level)(
            "extraction_result",
            event_type="extraction",
            mode=mode,
            records=records,
            duration_ms=duration_ms,
            **kwargs,
        )

    def snapshot_taken(
        self,
        url: str,
        elements: int,
        duration_ms: float,
        **kwargs: Any,
    ) -> None:
        """Log a completed page snapshot."""
        self._logger.debug(
            "snapshot_taken",
            event_type="snapshot",
            url=url,
            elements=elements,
            duration_ms=duration_ms,
            **kwargs,
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(message, **kwargs)
