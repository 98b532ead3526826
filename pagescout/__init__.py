"""
pagescout

Structure-aware page scraper: analyzes a live page, extracts its content with
an ensemble of heuristics, and paginates to surface more.
"""

__version__ = "0.1.0"

from pagescout.config import ScrapeConfig, ScraperSettings, load_config
from pagescout.exceptions import ScraperError
from pagescout.models import (
    ImageInfo,
    PageDocument,
    PaginationStrategyName,
    SiteAnalysis,
    StrategyRecommendation,
)
from pagescout.core.orchestrator import Orchestrator, run_scrape
from pagescout.core.queue import ScrapeJob, ScrapeQueue

__all__ = [
    "ImageInfo",
    "Orchestrator",
    "PageDocument",
    "PaginationStrategyName",
    "ScrapeConfig",
    "ScrapeJob",
    "ScrapeQueue",
    "ScraperError",
    "ScraperSettings",
    "SiteAnalysis",
    "StrategyRecommendation",
    "load_config",
    "run_scrape",
]
