"""
Structure analyzer for adaptive scraping.

Inspects a live page once and produces structural signals, a content-type
classification, pagination detection and a strategy recommendation that the
orchestrator uses to tune extraction and pagination.
"""

from dataclasses import dataclass

from bs4 import Tag

from pagescout.core.page import PageHandle
from pagescout.exceptions import AnalysisError
from pagescout.extraction.base import DomSnapshot
from pagescout.extraction.dom import class_string, select, select_one, text_of
from pagescout.models import (
    ContentType,
    ContentTypeResult,
    InfiniteScrollDetection,
    PaginationDetection,
    PaginationStrategyName,
    PaginationType,
    SiteAnalysis,
    StrategyRecommendation,
    StructuralSignals,
)
from pagescout.utils import metrics
from pagescout.utils.logging import ScraperLogger
from pagescout.utils.url_utils import detect_url_pagination, get_domain


@dataclass
class AnalysisConfig:
    """Configuration for structure analysis."""

    restore_scroll_position: bool = True
    probe_settle_ms: int = 1000
    probe_fractions: tuple[float, ...] = (0.2, 0.4)
    skip_infinite_scroll_probe: bool = False


class StructureAnalyzer:
    """
    Analyzes live page structure to pick extraction and pagination strategies.

    Every DOM read goes through one snapshot per call; layout-dependent values
    (viewport, rendered image area, scroll height) come from the page handle.
    """

    # Content-type indicators: category -> indicator -> (selector, minimum count)
    CONTENT_INDICATORS: dict[str, dict[str, tuple[str, int]]] = {
        "article": {
            "article": ("article", 1),
            "blog_post": ('[class*="post"], [class*="blog"]', 1),
            "longform": ("p", 11),
            "date_published": (
                '[itemprop="datePublished"], [class*="publish-date"], [class*="post-date"]',
                1,
            ),
            "author": ('[itemprop="author"], [class*="author"], .byline', 1),
            "comments": ('[class*="comment"], [id*="comment"]', 1),
            "share_buttons": ('[class*="share"], [id*="share"]', 1),
        },
        "product": {
            "price": ('[class*="price"], [itemprop="price"], .price, #price', 1),
            "product_gallery": (
                '[class*="product-gallery"], [class*="product-images"], [class*="carousel"]',
                1,
            ),
            "add_to_cart": (
                'button[class*="cart"], button[class*="buy"], button[class*="add"], [id*="add-to-cart"]',
                1,
            ),
            "product_title": (
                '[itemprop="name"], [class*="product-title"], [class*="product-name"]',
                1,
            ),
            "sku": ('[itemprop="sku"], [class*="sku"], [class*="product-id"]', 1),
            "variations": ('select[class*="variation"], [class*="variant"], [class*="option"]', 1),
            "reviews": ('[class*="review"], [class*="rating"], [class*="stars"]', 1),
        },
        "listing": {
            "grid": ('[class*="grid"], [class*="row"], [class*="items"]', 1),
            "repeated_elements": (
                '[class*="item"], [class*="card"], [class*="product"], [class*="post"]',
                6,
            ),
            "pagination": ('[class*="pagination"], [class*="pager"], [class*="pages"]', 1),
            "sorting": ('[class*="sort"], [class*="filter"], [class*="order"]', 1),
            "result_count": ('[class*="count"], [class*="found"], [class*="results"]', 1),
        },
        "documentation": {
            "toc": ('[class*="toc"], [id*="toc"], [class*="table-of-contents"]', 1),
            "code_blocks": ('pre, code, [class*="code"]', 3),
            "api_references": ('[class*="api"], [class*="reference"], [class*="endpoint"]', 1),
            "section_links": ('a[href^="#"]', 6),
            "technical_terms": (
                '[class*="parameters"], [class*="functions"], [class*="methods"]',
                1,
            ),
        },
        "recipe": {
            "ingredients": ('[class*="ingredient"], [itemprop="recipeIngredient"]', 1),
            "instructions": (
                '[class*="instruction"], [class*="direction"], [itemprop="recipeInstructions"]',
                1,
            ),
            "cook_time": ('[itemprop="cookTime"], [class*="cook-time"]', 1),
            "prep_time": ('[itemprop="prepTime"], [class*="prep-time"]', 1),
            "recipe_yield": ('[itemprop="recipeYield"], [class*="yield"], [class*="serving"]', 1),
            "nutrition_info": ('[class*="nutrition"], [itemprop="nutrition"]', 1),
        },
    }

    # Recipe has fewer indicators than the other categories
    RECIPE_WEIGHT = 1.5

    PAGINATION_CONTAINER = (
        '.pagination, .pager, .pages, nav[aria-label*="pagination"], '
        '[class*="paging"], [class*="paginate"]'
    )
    NUMBERED_LINKS = 'a[href*="page="], a[href*="/page/"], [class*="page-item"], [class*="page-number"]'
    NEXT_LINK = (
        'a[rel="next"], a[aria-label*="Next"], .next, .nextpostslink, '
        'a[class*="next"], button[class*="next"]'
    )
    PREV_LINK = (
        'a[rel="prev"], a[aria-label*="Previous"], .prev, .previouspostslink, '
        'a[class*="prev"], button[class*="prev"]'
    )
    LOAD_MORE = (
        'button[class*="load-more"], a[class*="load-more"], [class*="show-more"], [class*="view-more"]'
    )
    LAZY_MARKERS = "[data-src], [data-lazy], [data-lazy-src]"
    LOADING_INDICATORS = '[class*="loading"], [class*="spinner"], [class*="loader"], [aria-busy="true"]'
    SENTINELS = '[class*="sentinel"], [class*="infinite"], [class*="scroll-trigger"], [class*="observe"]'

    PAGINATION_TEXTS = (
        "next",
        "previous",
        "older",
        "newer",
        "load more",
        "show more",
        "view more",
        "more posts",
        "more results",
        "see more",
    )

    # Heavyweight heuristics skipped on simple pages
    SIMPLE_SITE_SKIP = ("semantic", "largest", "product", "documentation", "text_density")

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            config: Analysis configuration.
            logger: Logger instance.
        """
        self.config = config or AnalysisConfig()
        self.logger = logger or ScraperLogger("structure_analyzer")

    async def _snapshot(self, page: PageHandle, dom: DomSnapshot | None) -> DomSnapshot:
        if dom is not None:
            return dom
        return DomSnapshot.parse(await page.content(), page.url)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    async def detect_page_structure(
        self,
        page: PageHandle,
        dom: DomSnapshot | None = None,
    ) -> StructuralSignals:
        """
        Compute element flags, counts and metrics.

        Args:
            page: Live page handle.
            dom: Snapshot to reuse; a fresh one is taken if None.

        Returns:
            StructuralSignals for the current DOM.
        """
        dom = await self._snapshot(page, dom)
        soup = dom.soup
        layout = await page.layout_metrics()

        body = soup.body or soup
        text_length = len(body.get_text().strip())
        element_count = len(soup.find_all(True))

        viewport_area = int(layout.get("viewport_width", 0)) * int(layout.get("viewport_height", 0))
        image_area = float(layout.get("image_area", 0) or 0)

        return StructuralSignals(
            has_article=select_one(soup, "article") is not None,
            has_main=select_one(soup, "main") is not None,
            has_sidebar=select_one(soup, 'aside, [class*="sidebar"]') is not None,
            has_multiple_columns=len(select(soup, '.col, [class*="column"]')) > 1,
            has_forms=select_one(soup, "form") is not None,
            has_header=select_one(soup, "header") is not None,
            has_footer=select_one(soup, "footer") is not None,
            has_nav=select_one(soup, "nav") is not None,
            h1_count=len(select(soup, "h1")),
            h2_count=len(select(soup, "h2")),
            h3_count=len(select(soup, "h3")),
            button_count=len(select(soup, "button")),
            link_count=len(select(soup, "a")),
            list_count=len(select(soup, "ul, ol")),
            text_length=text_length,
            element_count=element_count,
            text_density=text_length / element_count if element_count else 0.0,
            image_percentage=(image_area / viewport_area) * 100 if viewport_area else 0.0,
        )

    @staticmethod
    def is_simple_site(structure: StructuralSignals) -> bool:
        """Small DOM, few headings, few links and little text."""
        return (
            structure.element_count < 100
            and structure.heading_count < 5
            and structure.link_count < 20
            and structure.text_length < 2000
        )

    # -------------------------------------------------------------------------
    # Content type
    # -------------------------------------------------------------------------

    async def detect_content_type(
        self,
        page: PageHandle,
        dom: DomSnapshot | None = None,
    ) -> ContentTypeResult:
        """Evaluate every content-type indicator and classify the page."""
        dom = await self._snapshot(page, dom)

        indicators: dict[str, dict[str, bool]] = {}
        for category, checks in self.CONTENT_INDICATORS.items():
            indicators[category] = {
                name: len(select(dom.soup, selector)) >= minimum
                for name, (selector, minimum) in checks.items()
            }

        return self.classify_content_type(indicators)

    @classmethod
    def classify_content_type(cls, indicators: dict[str, dict[str, bool]]) -> ContentTypeResult:
        """
        Score categories by their true indicators and pick the top two.

        Ties resolve in the order article, product, listing, documentation, recipe.

        Args:
            indicators: Category name -> indicator name -> flag.

        Returns:
            ContentTypeResult with primary and secondary types.
        """
        order = [
            ContentType.ARTICLE,
            ContentType.PRODUCT,
            ContentType.LISTING,
            ContentType.DOCUMENTATION,
            ContentType.RECIPE,
        ]

        scores: dict[str, float] = {}
        for content_type in order:
            score = float(sum(1 for flag in indicators.get(content_type.value, {}).values() if flag))
            if content_type is ContentType.RECIPE:
                score *= cls.RECIPE_WEIGHT
            scores[content_type.value] = score

        # sorted() is stable, so equal scores keep evaluation order
        ranked = sorted(order, key=lambda t: -scores[t.value])

        return ContentTypeResult(
            primary_type=ranked[0],
            secondary_type=ranked[1],
            scores=scores,
            indicators={k: dict(v) for k, v in indicators.items()},
        )

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    @staticmethod
    def _element_selector(element: Tag | None) -> str | None:
        """A short CSS selector for an element: id, first stable class, or tag."""
        if element is None:
            return None
        element_id = element.get("id")
        if element_id:
            return f"#{element_id}"
        classes = [
            c for c in class_string(element).split() if "active" not in c and "current" not in c
        ]
        if classes:
            return f".{classes[0]}"
        return element.name

    async def detect_pagination_methods(
        self,
        page: PageHandle,
        url: str | None = None,
        dom: DomSnapshot | None = None,
    ) -> PaginationDetection:
        """
        Detect URL and in-page pagination mechanisms.

        Args:
            page: Live page handle.
            url: URL to match patterns against (defaults to the page URL).
            dom: Snapshot to reuse.

        Returns:
            PaginationDetection with the primary type and discovered selectors.
        """
        dom = await self._snapshot(page, dom)
        soup = dom.soup
        url = url or page.url

        url_patterns = detect_url_pagination(url)

        elements = {
            "pagination_container": select_one(soup, self.PAGINATION_CONTAINER) is not None,
            "numbered_links": len(select(soup, self.NUMBERED_LINKS)) > 1,
            "next_link": select_one(soup, self.NEXT_LINK) is not None,
            "prev_link": select_one(soup, self.PREV_LINK) is not None,
            "load_more_button": select_one(soup, self.LOAD_MORE) is not None,
        }

        lazy_images = any(
            img.get("loading") == "lazy" or img.get("data-src") or img.get("data-lazy-src")
            for img in select(soup, "img")
        )
        has_observer = bool(select(soup, self.LAZY_MARKERS)) and await page.has_intersection_observer()
        infinite = {
            "lazy_images": bool(lazy_images),
            "has_observer": has_observer,
            "loading_element": select_one(soup, self.LOADING_INDICATORS) is not None,
        }

        textual = any(
            any(marker in text_of(el).lower() for marker in self.PAGINATION_TEXTS)
            for el in select(soup, "a, button")
        )

        selectors: dict[str, str] = {}
        if elements["next_link"]:
            selectors["next_link"] = self._element_selector(select_one(soup, self.NEXT_LINK))
        if elements["load_more_button"]:
            selectors["load_more"] = self._element_selector(select_one(soup, self.LOAD_MORE))

        has_url = any(url_patterns.values())
        has_elements = any(elements.values())
        has_infinite = any(infinite.values())

        if has_url:
            primary = PaginationType.URL
        elif elements["load_more_button"]:
            primary = PaginationType.LOAD_MORE
        elif elements["next_link"]:
            primary = PaginationType.NEXT_LINK
        elif elements["pagination_container"]:
            primary = PaginationType.NUMBERED
        elif has_infinite:
            primary = PaginationType.INFINITE
        elif textual:
            primary = PaginationType.TEXT_LINK
        else:
            primary = PaginationType.NONE

        return PaginationDetection(
            detected=has_url or has_elements or has_infinite or textual,
            primary_type=primary,
            url_patterns=url_patterns,
            pagination_elements=elements,
            infinite_scroll_indicators=infinite,
            has_textual_pagination_links=textual,
            selectors=selectors,
        )

    async def detect_infinite_scroll(self, page: PageHandle) -> InfiniteScrollDetection:
        """
        Probe for infinite scroll with two partial scrolls.

        Scrolls to each configured fraction of the page height, waits for the
        page to settle, then scores growth and lazy-loading markers. The
        original scroll offset is restored unless configured otherwise.
        """
        original_position = await page.scroll_position()
        initial_height = await page.scroll_height()

        for fraction in self.config.probe_fractions:
            height = await page.scroll_height()
            await page.scroll_to(0, int(height * fraction))
            await page.wait(self.config.probe_settle_ms)

        new_height = await page.scroll_height()
        dom = DomSnapshot.parse(await page.content(), page.url)
        has_observer = await page.has_intersection_observer()

        if self.config.restore_scroll_position:
            await page.scroll_to(*original_position)

        images = select(dom.soup, "img")
        lazy = [
            img
            for img in images
            if img.get("loading") == "lazy"
            or img.get("data-src")
            or img.get("data-lazy")
            or img.get("data-lazy-src")
        ]
        loading = len(select(dom.soup, self.LOADING_INDICATORS))
        sentinels = len(select(dom.soup, self.SENTINELS))
        delta = new_height - initial_height

        confidence = 0
        if delta > 100:
            confidence += 3
        if loading > 0:
            confidence += 2
        if len(lazy) > 5:
            confidence += 2
        if sentinels > 0:
            confidence += 3
        if has_observer:
            confidence += 1
        confidence = min(10, confidence)

        return InfiniteScrollDetection(
            detected=confidence > 3,
            confidence=confidence,
            height_changed=delta > 0,
            height_delta=delta,
            loading_indicator_count=loading,
            lazy_image_count=len(lazy),
            total_images=len(images),
            sentinel_count=sentinels,
            has_intersection_observer=has_observer,
        )

    # -------------------------------------------------------------------------
    # Recommendation
    # -------------------------------------------------------------------------

    def determine_optimal_strategy(self, analysis: SiteAnalysis) -> StrategyRecommendation | None:
        """
        Turn an analysis into scroll budgets, extractor preferences and a
        pagination strategy.

        Returns:
            The recommendation, or None when structure signals are missing.
        """
        if analysis.structure is None:
            return None

        if self.is_simple_site(analysis.structure):
            return StrategyRecommendation(
                extractor_priority=["basic"],
                skip_extractors=list(self.SIMPLE_SITE_SKIP),
                pagination_strategy=None,
                max_scrolls=5,
                scroll_delay=500,
                simple_site=True,
            )

        recommendation = StrategyRecommendation()
        content_type = (
            analysis.content_type.primary_type if analysis.content_type else ContentType.UNKNOWN
        )

        if content_type is ContentType.ARTICLE:
            recommendation.extractor_priority = ["article", "basic"]
            recommendation.skip_extractors = ["product"]
            recommendation.max_scrolls = 50
        elif content_type is ContentType.PRODUCT:
            recommendation.extractor_priority = ["product", "basic"]
            recommendation.skip_extractors = ["article"]
            recommendation.max_scrolls = 30
        elif content_type is ContentType.LISTING:
            recommendation.extractor_priority = ["content_sections", "multi_column", "basic"]
            recommendation.max_scrolls = 150
            recommendation.scroll_delay = 800
        elif content_type is ContentType.DOCUMENTATION:
            recommendation.extractor_priority = ["documentation", "main_content"]
        elif content_type is ContentType.RECIPE:
            recommendation.extractor_priority = ["recipe"]

        pagination = analysis.pagination
        if pagination is not None:
            primary = pagination.primary_type
            if primary is PaginationType.URL:
                recommendation.pagination_strategy = (
                    PaginationStrategyName.PARAMETER
                    if pagination.has_query_pagination
                    else PaginationStrategyName.URL
                )
            elif primary is PaginationType.LOAD_MORE and pagination.selectors.get("load_more"):
                recommendation.pagination_strategy = PaginationStrategyName.CLICK
                recommendation.click_selector = pagination.selectors["load_more"]
            elif primary is PaginationType.NEXT_LINK and pagination.selectors.get("next_link"):
                recommendation.pagination_strategy = PaginationStrategyName.CLICK
                recommendation.click_selector = pagination.selectors["next_link"]
            elif primary is PaginationType.NUMBERED:
                recommendation.pagination_strategy = PaginationStrategyName.URL
            elif primary is PaginationType.INFINITE:
                recommendation.pagination_strategy = PaginationStrategyName.INFINITE

        if recommendation.pagination_strategy is None and analysis.infinite_scroll.detected:
            recommendation.pagination_strategy = PaginationStrategyName.INFINITE

        return recommendation

    # -------------------------------------------------------------------------
    # Top level
    # -------------------------------------------------------------------------

    async def analyze_site(self, page: PageHandle) -> SiteAnalysis:
        """
        Run every detector once and build a recommendation.

        Never raises: failures produce a partial result carrying the error.
        """
        url = page.url
        try:
            dom = DomSnapshot.parse(await page.content(), url)

            analysis = SiteAnalysis(url=url)
            analysis.structure = await self.detect_page_structure(page, dom)
            analysis.content_type = await self.detect_content_type(page, dom)
            analysis.pagination = await self.detect_pagination_methods(page, url, dom)

            if not self.config.skip_infinite_scroll_probe:
                analysis.infinite_scroll = await self.detect_infinite_scroll(page)

            analysis.metadata = self._page_metadata(dom)
            analysis.page_size = await self._page_size(page, dom)
            analysis.recommendation = self.determine_optimal_strategy(analysis)

        except Exception as e:
            error = AnalysisError(url, str(e))
            self.logger.error(
                "Structure analysis failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            metrics.record_analysis(get_domain(url), success=False)
            return SiteAnalysis.failed(url, error.message)

        metrics.record_analysis(
            get_domain(url),
            success=True,
            content_type=analysis.content_type.primary_type.value,
            infinite_scroll_confidence=analysis.infinite_scroll.confidence,
        )
        self.logger.analysis_complete(
            url=url,
            content_type=analysis.content_type.primary_type.value,
            pagination_type=analysis.pagination.primary_type.value,
            simple_site=bool(analysis.recommendation and analysis.recommendation.simple_site),
            infinite_scroll_confidence=analysis.infinite_scroll.confidence,
        )
        return analysis

    def _page_metadata(self, dom: DomSnapshot) -> dict[str, str]:
        soup = dom.soup
        description = select_one(soup, 'meta[name="description"]')
        h1 = select_one(soup, "h1")
        return {
            "title": soup.title.get_text().strip() if soup.title else "",
            "meta_description": str(description.get("content", "")) if description else "",
            "h1_text": text_of(h1) if h1 is not None else "",
            "language": str(soup.html.get("lang", "")) if soup.html and soup.html.get("lang") else "unknown",
        }

    async def _page_size(self, page: PageHandle, dom: DomSnapshot) -> dict[str, object]:
        layout = await page.layout_metrics()
        body = dom.soup.body or dom.soup
        return {
            "total_elements": len(dom.soup.find_all(True)),
            "content_length": len(body.get_text().strip()),
            "image_count": len(select(dom.soup, "img")),
            "link_count": len(select(dom.soup, "a")),
            "viewport": {
                "width": layout.get("viewport_width", 0),
                "height": layout.get("viewport_height", 0),
            },
            "document_height": layout.get("document_height", 0),
        }
