"""
Core data models for pagescout.

These models are used throughout the codebase for type safety and serialization.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pagescout.utils.text import normalize_fragment


# =============================================================================
# Enums
# =============================================================================


class ContentType(str, Enum):
    """Content categories scored by the structure analyzer.

    Declaration order is the tie-break order.
    """

    ARTICLE = "article"
    PRODUCT = "product"
    LISTING = "listing"
    DOCUMENTATION = "documentation"
    RECIPE = "recipe"
    UNKNOWN = "unknown"


class PaginationType(str, Enum):
    """Primary pagination mechanism detected on a page.

    Declaration order (minus NONE) is the detection priority.
    """

    URL = "url"
    LOAD_MORE = "load-more"
    NEXT_LINK = "next-link"
    NUMBERED = "numbered"
    INFINITE = "infinite"
    TEXT_LINK = "text-link"
    NONE = "none"


class PaginationStrategyName(str, Enum):
    """Pagination strategies the orchestrator can run."""

    INFINITE = "infinite"
    CLICK = "click"
    URL = "url"
    PARAMETER = "parameter"


# =============================================================================
# Document Models
# =============================================================================


@dataclass
class ImageInfo:
    """An image discovered on the page."""

    url: str
    alt: str = ""
    title: str = ""
    width: int = 0
    height: int = 0
    local_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "url": self.url,
            "alt": self.alt,
            "title": self.title,
            "width": self.width,
            "height": self.height,
        }
        if self.local_path:
            data["local_path"] = self.local_path
        return data


@dataclass
class PageDocument:
    """
    Accumulated scrape result for one page session.

    Content only ever grows: fragments are appended in discovery order and
    deduplicated by their normalized form.
    """

    url: str = ""
    title: str = ""
    content: list[str] = field(default_factory=list)
    images: list[ImageInfo] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    structure_type: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    _seen: set[str] = field(default_factory=set, init=False, repr=False, compare=False)
    _image_urls: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        normalized = []
        for item in self.content:
            key = normalize_fragment(item)
            if key and key not in self._seen:
                self._seen.add(key)
                normalized.append(key)
        self.content = normalized
        unique_images = []
        for image in self.images:
            if image.url and image.url not in self._image_urls:
                self._image_urls.add(image.url)
                unique_images.append(image)
        self.images = unique_images

    def has_fragment(self, text: str) -> bool:
        """Check whether a fragment (in any whitespace form) is already present."""
        return normalize_fragment(text) in self._seen

    def add_fragments(self, fragments: list[str]) -> int:
        """
        Append previously-unseen fragments in order.

        Args:
            fragments: Candidate text fragments.

        Returns:
            Number of fragments actually appended.
        """
        added = 0
        for fragment in fragments:
            key = normalize_fragment(fragment)
            if not key or key in self._seen:
                continue
            self._seen.add(key)
            self.content.append(key)
            added += 1
        return added

    def add_images(self, images: list[ImageInfo]) -> int:
        """Append images whose URL has not been seen yet."""
        added = 0
        for image in images:
            if not image.url or image.url in self._image_urls:
                continue
            self._image_urls.add(image.url)
            self.images.append(image)
            added += 1
        return added

    def merge_metadata(self, metadata: dict[str, Any]) -> None:
        """Merge metadata; existing keys are updated, none are removed."""
        self.metadata.update(metadata)

    def stats(self) -> dict[str, int]:
        """Summary counts for reporting."""
        return {
            "content_items": len(self.content),
            "image_count": len(self.images),
            "metadata_keys": len(self.metadata),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "url": self.url,
            "title": self.title,
            "content": list(self.content),
            "images": [image.to_dict() for image in self.images],
            "metadata": self.metadata,
            "structure_type": self.structure_type,
            "started_at": self.started_at.isoformat(),
            "stats": self.stats(),
        }


# =============================================================================
# Analysis Models
# =============================================================================


@dataclass
class StructuralSignals:
    """Flags, counts and metrics computed from one pass over the live DOM."""

    # Element presence
    has_article: bool = False
    has_main: bool = False
    has_sidebar: bool = False
    has_multiple_columns: bool = False
    has_forms: bool = False
    has_header: bool = False
    has_footer: bool = False
    has_nav: bool = False

    # Counts
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    button_count: int = 0
    link_count: int = 0
    list_count: int = 0

    # Metrics
    text_length: int = 0
    element_count: int = 0
    text_density: float = 0.0
    image_percentage: float = 0.0

    @property
    def heading_count(self) -> int:
        return self.h1_count + self.h2_count + self.h3_count

    def to_dict(self) -> dict[str, Any]:
        """Convert to the nested elements/counts/metrics shape."""
        return {
            "elements": {
                "has_article": self.has_article,
                "has_main": self.has_main,
                "has_sidebar": self.has_sidebar,
                "has_multiple_columns": self.has_multiple_columns,
                "has_forms": self.has_forms,
                "has_header": self.has_header,
                "has_footer": self.has_footer,
                "has_nav": self.has_nav,
            },
            "counts": {
                "h1": self.h1_count,
                "h2": self.h2_count,
                "h3": self.h3_count,
                "buttons": self.button_count,
                "links": self.link_count,
                "lists": self.list_count,
            },
            "metrics": {
                "text_length": self.text_length,
                "element_count": self.element_count,
                "text_density": self.text_density,
                "image_percentage": self.image_percentage,
            },
        }


@dataclass
class ContentTypeResult:
    """Scored content-type classification."""

    primary_type: ContentType = ContentType.UNKNOWN
    secondary_type: ContentType = ContentType.UNKNOWN
    scores: dict[str, float] = field(default_factory=dict)
    indicators: dict[str, dict[str, bool]] = field(default_factory=dict)


@dataclass
class PaginationDetection:
    """Pagination mechanisms detected from the URL and the DOM."""

    detected: bool = False
    primary_type: PaginationType = PaginationType.NONE
    url_patterns: dict[str, bool] = field(default_factory=dict)
    pagination_elements: dict[str, bool] = field(default_factory=dict)
    infinite_scroll_indicators: dict[str, bool] = field(default_factory=dict)
    has_textual_pagination_links: bool = False
    selectors: dict[str, str] = field(default_factory=dict)

    @property
    def has_query_pagination(self) -> bool:
        """True if the URL carries a page/offset/start/limit parameter."""
        return any(
            self.url_patterns.get(key, False)
            for key in ("page_param", "offset_param", "start_param", "limit_param")
        )


@dataclass
class InfiniteScrollDetection:
    """Result of the probing-scroll infinite scroll detector."""

    detected: bool = False
    confidence: int = 0
    height_changed: bool = False
    height_delta: int = 0
    loading_indicator_count: int = 0
    lazy_image_count: int = 0
    total_images: int = 0
    sentinel_count: int = 0
    has_intersection_observer: bool = False


@dataclass
class StrategyRecommendation:
    """Advisory output of the analyzer consumed by the orchestrator."""

    extractor_priority: list[str] = field(default_factory=list)
    skip_extractors: list[str] = field(default_factory=list)
    pagination_strategy: PaginationStrategyName | None = None
    click_selector: str | None = None
    max_scrolls: int = 100
    scroll_delay: int = 1000
    simple_site: bool = False


@dataclass
class SiteAnalysis:
    """Aggregate output of one structure analysis."""

    url: str
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, str] = field(default_factory=dict)
    structure: StructuralSignals | None = None
    content_type: ContentTypeResult | None = None
    pagination: PaginationDetection | None = None
    infinite_scroll: InfiniteScrollDetection = field(default_factory=InfiniteScrollDetection)
    page_size: dict[str, Any] = field(default_factory=dict)
    recommendation: StrategyRecommendation | None = None

    error: str | None = None
    partial_results: bool = False

    @classmethod
    def failed(cls, url: str, error: str) -> "SiteAnalysis":
        """Create a partial result for an analysis that raised."""
        return cls(url=url, error=error, partial_results=True)
