"""
Scrape orchestrator.

Coordinates one page session: analyze the page once, extract, then drive the
pagination strategies with an extraction pass after every step.
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pagescout.adaptive.structure_analyzer import AnalysisConfig, StructureAnalyzer
from pagescout.config import ScrapeConfig, ScraperSettings
from pagescout.core.browser import BrowserPool
from pagescout.core.images import DownloadReport, ImageDownloader
from pagescout.core.page import PageHandle
from pagescout.exceptions import PaginationConfigError, ScraperError
from pagescout.extraction.base import Extractor
from pagescout.extraction.catalogs import CLICK_PAGINATION_SELECTORS
from pagescout.extraction.ensemble import ExtractionEnsemble
from pagescout.models import PageDocument, PaginationStrategyName, SiteAnalysis
from pagescout.pagination import (
    ClickStrategy,
    PaginationContext,
    PaginationStrategy,
    ScrollStrategy,
    URLPathStrategy,
    URLQueryParameterStrategy,
)
from pagescout.utils.logging import ScraperLogger
from pagescout.utils.url_utils import get_hostname

# Path pattern tried by the fallback pipeline when none is configured
DEFAULT_URL_PATTERN = "/page/{num}"


class Orchestrator:
    """
    Drives one scrape session over a live page.

    The analyzer runs once. Its recommendation narrows the extraction
    ensemble and orders the pagination pipeline; a forced strategy in the
    config always wins over what was detected.
    """

    def __init__(
        self,
        config: ScrapeConfig | None = None,
        analyzer: StructureAnalyzer | None = None,
        extractors: Sequence[Extractor] | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Session configuration.
            analyzer: Structure analyzer (a default one if None).
            extractors: Heuristic registry for the ensemble.
            logger: Logger instance.
        """
        self.config = config or ScrapeConfig()
        self.logger = logger or ScraperLogger("orchestrator")
        self.analyzer = analyzer or StructureAnalyzer(AnalysisConfig(), logger=self.logger)
        self.extractors = extractors

        self.analysis: SiteAnalysis | None = None
        self.ensemble: ExtractionEnsemble | None = None
        self.strategies_run: list[str] = []

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def scrape(self, page: PageHandle) -> PageDocument:
        """
        Scrape a live, already-navigated page.

        Returns:
            The accumulated document.
        """
        base_url = page.url
        log = self.logger.bind(url=base_url)

        if self.config.wait_for_selector:
            found = await page.wait_for_selector(
                self.config.wait_for_selector,
                timeout_seconds=self.config.content_wait_timeout_seconds,
            )
            if not found:
                log.debug("Wait selector not found", selector=self.config.wait_for_selector)

        if self.config.analyze:
            self.analysis = await self.analyzer.analyze_site(page)

        self.ensemble = ExtractionEnsemble(
            page,
            PageDocument(url=base_url),
            extractors=self.extractors,
            scrape_images=self.config.scrape_images,
            priority_min_fragments=self.config.priority_min_fragments,
            logger=self.logger,
        )
        self._apply_preferences(self.ensemble)

        await self.ensemble.extract()

        if self.config.handle_pagination:
            await self.paginate(page, base_url)

        await self.ensemble.extract()
        await self.ensemble.detect_structure_type()

        document = self.ensemble.document
        log.info(
            "Scrape finished",
            content_items=len(document.content),
            images=len(document.images),
            strategies=self.strategies_run,
            structure_type=document.structure_type,
        )
        return document

    def _apply_preferences(self, ensemble: ExtractionEnsemble) -> None:
        """Explicit priority/skip lists win over the analyzer's recommendation."""
        if self.config.priority_extractors or self.config.skip_extractors:
            ensemble.set_preferences(self.config.priority_extractors, self.config.skip_extractors)
        elif self.analysis is not None:
            ensemble.apply_recommendation(self.analysis.recommendation)

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    @property
    def scroll_budget(self) -> int:
        """Scroll attempts per strategy, capped by the recommendation."""
        recommendation = self.analysis.recommendation if self.analysis else None
        if recommendation is None:
            return self.config.max_scrolls
        return min(self.config.max_scrolls, recommendation.max_scrolls)

    @property
    def step_delay(self) -> int:
        """Delay between pagination steps in ms, capped by the recommendation."""
        recommendation = self.analysis.recommendation if self.analysis else None
        if recommendation is None:
            return self.config.scroll_delay
        return min(self.config.scroll_delay, recommendation.scroll_delay)

    def build_strategy(self, name: PaginationStrategyName | str) -> PaginationStrategy:
        """
        Construct a strategy by name.

        Raises:
            PaginationConfigError: For an unknown name, or click without a selector.
        """
        try:
            name = PaginationStrategyName(name)
        except ValueError:
            raise PaginationConfigError(str(name), "unknown strategy") from None

        budget = self.scroll_budget
        delay = self.step_delay
        if name is PaginationStrategyName.INFINITE:
            return ScrollStrategy(max_attempts=budget, delay_ms=delay, logger=self.logger)
        if name is PaginationStrategyName.CLICK:
            return ClickStrategy(
                self.config.click_selector, max_attempts=budget, delay_ms=delay, logger=self.logger
            )
        if name is PaginationStrategyName.URL:
            return URLPathStrategy(
                self.config.url_pattern or DEFAULT_URL_PATTERN,
                max_attempts=budget,
                delay_ms=delay,
                logger=self.logger,
            )
        return URLQueryParameterStrategy(max_attempts=budget, delay_ms=delay, logger=self.logger)

    def fallback_pipeline(self) -> list[PaginationStrategy]:
        """URL-path, then scroll, then one click strategy per catalog selector."""
        recommendation = self.analysis.recommendation if self.analysis else None
        budget = self.scroll_budget
        delay = self.step_delay

        stages: list[PaginationStrategy] = [
            URLPathStrategy(
                self.config.url_pattern or DEFAULT_URL_PATTERN,
                max_attempts=budget,
                delay_ms=delay,
                logger=self.logger,
            ),
            ScrollStrategy(max_attempts=budget, delay_ms=delay, logger=self.logger),
        ]

        selectors = list(CLICK_PAGINATION_SELECTORS)
        if recommendation is not None and recommendation.click_selector:
            if recommendation.click_selector in selectors:
                selectors.remove(recommendation.click_selector)
            selectors.insert(0, recommendation.click_selector)
        stages.extend(
            ClickStrategy(s, max_attempts=budget, delay_ms=delay, logger=self.logger)
            for s in selectors
        )

        if not self.config.brute_force and recommendation is not None:
            preferred = recommendation.pagination_strategy
            if preferred is not None:
                stages.sort(key=lambda stage: stage.name != preferred.value)

        return stages

    async def plan_pagination(self, page: PageHandle, base_url: str) -> list[PaginationStrategy]:
        """Choose the strategies to run, in order."""
        recommendation = self.analysis.recommendation if self.analysis else None

        if self.config.pagination_strategy is not None:
            self.logger.strategy_selected(base_url, self.config.pagination_strategy.value, "forced")
            return [self.build_strategy(self.config.pagination_strategy)]

        recommended_parameter = (
            recommendation is not None
            and recommendation.pagination_strategy is PaginationStrategyName.PARAMETER
        )
        if recommended_parameter or await URLQueryParameterStrategy.is_applicable(base_url, page):
            reason = "recommended" if recommended_parameter else "applicable"
            self.logger.strategy_selected(base_url, PaginationStrategyName.PARAMETER.value, reason)
            return [self.build_strategy(PaginationStrategyName.PARAMETER)]

        if recommendation is not None and recommendation.simple_site:
            self.logger.strategy_selected(base_url, "none", "simple_site")
            return []

        self.logger.strategy_selected(
            base_url,
            "pipeline",
            "brute_force" if self.config.brute_force else "first_productive",
        )
        return self.fallback_pipeline()

    async def paginate(self, page: PageHandle, base_url: str) -> int:
        """
        Run the planned strategies, extracting after every step.

        Returns:
            New content items surfaced by pagination.
        """
        assert self.ensemble is not None

        strategies = await self.plan_pagination(page, base_url)
        stop_when_productive = len(strategies) > 1 and not self.config.brute_force

        total = 0
        for strategy in strategies:
            added = await self.run_strategy(strategy, page, base_url)
            total += added
            if stop_when_productive and added > 0:
                self.logger.debug("Pipeline stage productive", strategy=strategy.name, added=added)
                break
        return total

    async def run_strategy(self, strategy: PaginationStrategy, page: PageHandle, base_url: str) -> int:
        """
        Initialize and advance one strategy to exhaustion.

        Page errors end the strategy, never the session.

        Returns:
            New content items added while it ran.
        """
        assert self.ensemble is not None
        document = self.ensemble.document
        before = len(document.content)

        context = PaginationContext(page=page, base_url=base_url, config=self.config)
        self.strategies_run.append(strategy.name)

        try:
            if not await strategy.initialize(context):
                return 0
            while await strategy.advance():
                await self.ensemble.extract()
        except ScraperError as e:
            self.logger.warning(
                "Pagination strategy aborted",
                strategy=strategy.name,
                error=e.message,
                error_type=type(e).__name__,
            )

        await self.ensemble.extract()
        return len(document.content) - before


def default_output_path(url: str, output_dir: str | Path) -> Path:
    """JSON output path derived from the URL's host."""
    host = get_hostname(url) or "page"
    safe_host = "".join(c if c.isalnum() else "_" for c in host)
    return Path(output_dir) / f"{safe_host}.json"


def save_document(document: PageDocument, path: str | Path, extra: dict[str, Any] | None = None) -> Path:
    """Write a document as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = document.to_dict()
    if extra:
        data.update(extra)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


async def run_scrape(
    url: str,
    config: ScrapeConfig | None = None,
    settings: ScraperSettings | None = None,
    logger: ScraperLogger | None = None,
) -> PageDocument:
    """
    Convenience function to scrape one URL with a fresh browser.

    Opens the page, runs an Orchestrator session and downloads images when
    the config asks for it.

    Args:
        url: Page to scrape.
        config: Session configuration.
        settings: Process settings (browser, timeouts).
        logger: Logger instance.

    Returns:
        The scraped document.
    """
    settings = settings or ScraperSettings()
    config = config or ScrapeConfig.from_settings(settings)
    logger = logger or ScraperLogger("pagescout")

    async with BrowserPool(max_contexts=1, settings=settings, logger=logger) as pool:
        async with pool.open_page(
            url,
            wait_until=config.wait_until,
            timeout_seconds=config.navigation_timeout_seconds,
        ) as page:
            document = await Orchestrator(config, logger=logger).scrape(page)

    if config.download_images and document.images:
        output_dir = config.image_output_dir or str(
            Path("images") / (get_hostname(url).replace(".", "_") or "page")
        )
        report: DownloadReport = await ImageDownloader(
            concurrency=config.image_concurrency,
            timeout_seconds=settings.image_timeout_seconds,
            user_agent=settings.user_agent,
            logger=logger,
        ).download_all(document.images, output_dir)
        document.merge_metadata({"imageDownload": report.to_dict()})

    return document

