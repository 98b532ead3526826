"""
Structured logging for pagescout.

Provides JSON-formatted logging with context propagation.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_file: str | None = None,
) -> None:
    """
    Configure structured logging for the scraper.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Output format ('json' or 'console').
        log_file: Optional file path to write logs to.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=handlers,
        force=True,
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
    Specialized logger for scraping operations with pre-defined event types.
    """

    def __init__(self, name: str = "pagescout"):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = {}

    def bind(self, **kwargs: Any) -> "ScraperLogger":
        """Bind context to all subsequent log calls."""
        new_logger = ScraperLogger.__new__(ScraperLogger)
        new_logger._logger = self._logger.bind(**kwargs)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def analysis_complete(
        self,
        url: str,
        content_type: str,
        pagination_type: str,
        simple_site: bool,
        **kwargs: Any,
    ) -> None:
        """Log the outcome of a structure analysis."""
        self._logger.info(
            "analysis_complete",
            event_type="analysis",
            url=url,
            content_type=content_type,
            pagination_type=pagination_type,
            simple_site=simple_site,
            **kwargs,
        )

    def extraction_pass(
        self,
        url: str,
        new_fragments: int,
        total_fragments: int,
        images: int,
        **kwargs: Any,
    ) -> None:
        """Log one extraction pass over the live DOM."""
        self._logger.debug(
            "extraction_pass",
            event_type="extraction",
            url=url,
            new_fragments=new_fragments,
            total_fragments=total_fragments,
            images=images,
            **kwargs,
        )

    def extractor_failed(
        self,
        extractor: str,
        error: str,
        **kwargs: Any,
    ) -> None:
        """Log a heuristic that raised and was degraded to an empty result."""
        self._logger.debug(
            "extractor_failed",
            event_type="extraction",
            extractor=extractor,
            error=error,
            **kwargs,
        )

    def strategy_selected(
        self,
        url: str,
        strategy: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log the pagination strategy chosen by the orchestrator."""
        self._logger.info(
            "strategy_selected",
            event_type="pagination",
            url=url,
            strategy=strategy,
            reason=reason,
            **kwargs,
        )

    def pagination_step(
        self,
        strategy: str,
        step: int,
        **kwargs: Any,
    ) -> None:
        """Log a single pagination advance."""
        self._logger.debug(
            "pagination_step",
            event_type="pagination",
            strategy=strategy,
            step=step,
            **kwargs,
        )

    def navigation_failed(
        self,
        url: str,
        error: str,
        error_type: str,
        **kwargs: Any,
    ) -> None:
        """Log a navigation failure that ended a pagination strategy."""
        self._logger.warning(
            "navigation_failed",
            event_type="navigation",
            url=url,
            error=error,
            error_type=error_type,
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

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""
        self._logger.critical(message, **kwargs)
