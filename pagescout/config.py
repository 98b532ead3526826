"""
Configuration for pagescout.

Process-wide defaults can be set via environment variables with the PAGESCOUT_ prefix.
Per-session options live in ScrapeConfig.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from pagescout.exceptions import PaginationConfigError
from pagescout.models import PaginationStrategyName


class WaitUntil(str, Enum):
    """Playwright navigation wait strategies."""

    LOAD = "load"
    DOMCONTENTLOADED = "domcontentloaded"
    NETWORKIDLE = "networkidle"
    COMMIT = "commit"


class ScraperSettings(BaseSettings):
    """Main settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGESCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scrolling
    max_scrolls: int = 200
    scroll_delay: int = 1000  # ms

    # Pagination
    max_pages: int = 1
    handle_pagination: bool = True
    brute_force: bool = True

    # Timeouts
    navigation_timeout_seconds: float = 90.0
    selector_timeout_seconds: float = 30.0
    content_wait_timeout_seconds: float = 60.0

    # Images
    scrape_images: bool = True
    download_images: bool = False
    image_concurrency: int = 5
    image_timeout_seconds: float = 30.0

    # Queue
    queue_concurrency: int = 1

    # Browser
    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    wait_until: WaitUntil = WaitUntil.NETWORKIDLE

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"


# Named scraping profiles. Extractor names refer to the ensemble registry.
PROFILES: dict[str, dict[str, Any]] = {
    "speed": {
        "max_scrolls": 30,
        "scroll_delay": 500,
        "priority_extractors": ["main_content", "largest"],
        "skip_extractors": [
            "text_density",
            "single_column",
            "multi_column",
            "content_sections",
            "documentation",
        ],
        "scrape_images": False,
        "download_images": False,
        "wait_until": WaitUntil.DOMCONTENTLOADED,
    },
    "balanced": {
        "max_scrolls": 100,
        "scroll_delay": 1000,
        "priority_extractors": [],
        "skip_extractors": [],
        "scrape_images": True,
        "download_images": False,
        "wait_until": WaitUntil.LOAD,
    },
    "thorough": {
        "max_scrolls": 200,
        "scroll_delay": 1500,
        "priority_extractors": [],
        "skip_extractors": [],
        "scrape_images": True,
        "download_images": True,
        "wait_until": WaitUntil.NETWORKIDLE,
    },
    "article": {
        "max_scrolls": 50,
        "scroll_delay": 800,
        "priority_extractors": ["article", "semantic", "main_content"],
        "skip_extractors": ["product", "multi_column", "single_column", "documentation"],
        "scrape_images": True,
        "download_images": False,
        "wait_until": WaitUntil.LOAD,
    },
    "product": {
        "max_scrolls": 30,
        "scroll_delay": 1000,
        "priority_extractors": ["product", "largest"],
        "skip_extractors": ["article", "semantic", "documentation"],
        "scrape_images": True,
        "download_images": True,
        "wait_until": WaitUntil.NETWORKIDLE,
    },
    "listing": {
        "max_scrolls": 150,
        "scroll_delay": 1000,
        "priority_extractors": ["multi_column", "content_sections"],
        "skip_extractors": ["article", "semantic", "documentation"],
        "scrape_images": True,
        "download_images": False,
        "max_pages": 5,
        "wait_until": WaitUntil.LOAD,
    },
}

DEFAULT_PROFILE = "balanced"


def get_profile(name: str) -> dict[str, Any]:
    """Get a profile by name, falling back to the balanced profile."""
    return dict(PROFILES.get(name, PROFILES[DEFAULT_PROFILE]))


def list_profiles() -> list[str]:
    """List available profile names."""
    return list(PROFILES)


def apply_profile(options: dict[str, Any], name: str = DEFAULT_PROFILE) -> dict[str, Any]:
    """
    Layer explicitly set options over a named profile.

    Args:
        options: Caller options. Keys whose value is None are treated as unset.
        name: Profile name; unknown names fall back to "balanced".

    Returns:
        Merged option mapping where explicit values always win.
    """
    result = get_profile(name)
    for key, value in options.items():
        if value is not None:
            result[key] = value
    return result


@dataclass
class ScrapeConfig:
    """Complete configuration for one scrape session."""

    # Scrolling
    max_scrolls: int = 200
    scroll_delay: int = 1000  # ms
    scroll_container_selector: str | None = None

    # Pagination
    handle_pagination: bool = True
    pagination_strategy: PaginationStrategyName | None = None
    click_selector: str | None = None
    max_pages: int = 1
    page_parameter: str = "page"
    content_verification_selector: str | None = None
    url_pattern: str | None = None
    brute_force: bool = True

    # Page readiness
    wait_for_selector: str | None = None
    wait_until: WaitUntil = WaitUntil.NETWORKIDLE
    navigation_timeout_seconds: float = 90.0
    selector_timeout_seconds: float = 30.0
    content_wait_timeout_seconds: float = 60.0

    # Extraction
    analyze: bool = True
    priority_extractors: list[str] = field(default_factory=list)
    skip_extractors: list[str] = field(default_factory=list)
    priority_min_fragments: int = 20

    # Images
    scrape_images: bool = True
    download_images: bool = False
    image_output_dir: str | None = None
    image_concurrency: int = 5

    def __post_init__(self) -> None:
        if self.pagination_strategy is not None and not isinstance(
            self.pagination_strategy, PaginationStrategyName
        ):
            try:
                self.pagination_strategy = PaginationStrategyName(self.pagination_strategy)
            except ValueError:
                raise PaginationConfigError(
                    str(self.pagination_strategy),
                    "unknown strategy; expected one of "
                    + ", ".join(s.value for s in PaginationStrategyName),
                ) from None
        if self.pagination_strategy is PaginationStrategyName.CLICK and not self.click_selector:
            raise PaginationConfigError("click", "click_selector is required")
        if self.max_pages < 1:
            raise PaginationConfigError("parameter", "max_pages must be at least 1")
        if not isinstance(self.wait_until, WaitUntil):
            self.wait_until = WaitUntil(self.wait_until)

    @classmethod
    def from_settings(
        cls,
        settings: ScraperSettings | None = None,
        profile: str | None = None,
        **overrides: Any,
    ) -> "ScrapeConfig":
        """
        Build a session config from process settings, an optional profile,
        and explicit overrides (None values are ignored).
        """
        settings = settings or ScraperSettings()
        known = {f.name for f in fields(cls)}

        options: dict[str, Any] = {
            "max_scrolls": settings.max_scrolls,
            "scroll_delay": settings.scroll_delay,
            "max_pages": settings.max_pages,
            "handle_pagination": settings.handle_pagination,
            "brute_force": settings.brute_force,
            "wait_until": settings.wait_until,
            "navigation_timeout_seconds": settings.navigation_timeout_seconds,
            "selector_timeout_seconds": settings.selector_timeout_seconds,
            "content_wait_timeout_seconds": settings.content_wait_timeout_seconds,
            "scrape_images": settings.scrape_images,
            "download_images": settings.download_images,
            "image_concurrency": settings.image_concurrency,
        }
        if profile:
            options.update(apply_profile(overrides, profile))
        else:
            options.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**{k: v for k, v in options.items() if k in known})


def load_config() -> ScraperSettings:
    """Load configuration from environment variables."""
    return ScraperSettings()
