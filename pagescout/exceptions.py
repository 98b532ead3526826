"""
Exception hierarchy for pagescout.

All exceptions inherit from ScraperError to allow catching all scraper-related errors.
"""

from datetime import datetime, timezone
from typing import Any


class ScraperError(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


# =============================================================================
# Page Handle Errors
# =============================================================================


class PageHandleError(ScraperError):
    """Raised when the live page handle cannot service a request."""

    pass


class DOMEvaluationError(PageHandleError):
    """Evaluating a script or snapshot against the live DOM failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"DOM evaluation failed during {operation}: {message}",
            {"operation": operation},
        )
        self.operation = operation


class NavigationError(PageHandleError):
    """Navigating the page handle to a new URL failed."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(
            f"Navigation failed for {url}: {message}",
            {"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class NavigationTimeoutError(NavigationError):
    """Navigation did not settle within the configured timeout."""

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(url, f"Timeout after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


# =============================================================================
# Analysis Errors
# =============================================================================


class AnalysisError(ScraperError):
    """Structure analysis of the live page failed."""

    def __init__(self, url: str, message: str):
        super().__init__(
            f"Analysis failed for {url}: {message}",
            {"url": url},
        )
        self.url = url


# =============================================================================
# Pagination Errors
# =============================================================================


class PaginationConfigError(ScraperError):
    """A pagination strategy was constructed with invalid options."""

    def __init__(self, strategy: str, reason: str):
        super().__init__(
            f"Invalid configuration for {strategy} pagination: {reason}",
            {"strategy": strategy},
        )
        self.strategy = strategy
        self.reason = reason


# =============================================================================
# Image Download Errors
# =============================================================================


class ImageDownloadError(ScraperError):
    """Downloading a single image failed."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(
            f"Image download failed for {url}: {message}",
            {"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


# =============================================================================
# Queue Errors
# =============================================================================


class JobNotFoundError(ScraperError):
    """A job id is not known to the queue."""

    def __init__(self, job_id: str):
        super().__init__(f"Unknown scrape job: {job_id}", {"job_id": job_id})
        self.job_id = job_id
