"""
Prometheus metrics for pagescout.

Provides instrumentation for analysis, extraction, pagination, image
downloads and the job queue.
"""

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Analysis Metrics
# =============================================================================

ANALYSIS_TOTAL = Counter(
    "pagescout_analysis_total",
    "Structure analyses by outcome and detected content type",
    ["domain", "status", "content_type"],
)

INFINITE_SCROLL_CONFIDENCE = Histogram(
    "pagescout_infinite_scroll_confidence",
    "Infinite-scroll probe confidence scores",
    ["domain"],
    buckets=[0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
)

# =============================================================================
# Extraction Metrics
# =============================================================================

EXTRACTION_PASSES = Counter(
    "pagescout_extraction_pass_total",
    "Extraction passes over the live DOM",
    ["domain"],
)

FRAGMENTS_ADDED = Histogram(
    "pagescout_extraction_new_fragments",
    "New content fragments added per extraction pass",
    ["domain"],
    buckets=[0, 1, 5, 10, 25, 50, 100, 250, 500],
)

EXTRACTOR_FAILURES = Counter(
    "pagescout_extractor_failure_total",
    "Heuristics that raised and were degraded to no result",
    ["extractor"],
)

# =============================================================================
# Pagination Metrics
# =============================================================================

PAGINATION_STEPS = Counter(
    "pagescout_pagination_step_total",
    "Pagination steps by strategy",
    ["domain", "strategy"],
)

NAVIGATION_FAILURES = Counter(
    "pagescout_navigation_failure_total",
    "Navigations that ended a pagination strategy",
    ["domain", "error_type"],
)

# =============================================================================
# Image Metrics
# =============================================================================

IMAGE_DOWNLOADS = Counter(
    "pagescout_image_download_total",
    "Image downloads by outcome",
    ["status"],
)

# =============================================================================
# Queue Metrics
# =============================================================================

JOBS_TOTAL = Counter(
    "pagescout_job_total",
    "Scrape jobs by final status",
    ["status"],
)

QUEUE_SIZE = Gauge(
    "pagescout_queue_size",
    "Jobs waiting in the scrape queue",
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_analysis(
    domain: str,
    success: bool,
    content_type: str = "unknown",
    infinite_scroll_confidence: int | None = None,
) -> None:
    """Record a structure analysis."""
    status = "success" if success else "failure"
    ANALYSIS_TOTAL.labels(domain=domain, status=status, content_type=content_type).inc()
    if infinite_scroll_confidence is not None:
        INFINITE_SCROLL_CONFIDENCE.labels(domain=domain).observe(infinite_scroll_confidence)


def record_extraction_pass(domain: str, new_fragments: int) -> None:
    """Record one extraction pass."""
    EXTRACTION_PASSES.labels(domain=domain).inc()
    FRAGMENTS_ADDED.labels(domain=domain).observe(new_fragments)


def record_extractor_failure(extractor: str) -> None:
    """Record a heuristic that raised."""
    EXTRACTOR_FAILURES.labels(extractor=extractor).inc()


def record_pagination_step(domain: str, strategy: str) -> None:
    """Record a pagination advance."""
    PAGINATION_STEPS.labels(domain=domain, strategy=strategy).inc()


def record_navigation_failure(domain: str, error_type: str) -> None:
    """Record a failed pagination navigation."""
    NAVIGATION_FAILURES.labels(domain=domain, error_type=error_type).inc()


def record_image_downloads(downloaded: int, failed: int) -> None:
    """Record the outcome of an image download batch."""
    if downloaded:
        IMAGE_DOWNLOADS.labels(status="success").inc(downloaded)
    if failed:
        IMAGE_DOWNLOADS.labels(status="failure").inc(failed)


def record_job(status: str) -> None:
    """Record a job reaching a final status."""
    JOBS_TOTAL.labels(status=status).inc()


def update_queue_size(size: int) -> None:
    """Update the queue size gauge."""
    QUEUE_SIZE.set(size)
