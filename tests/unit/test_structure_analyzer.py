"""
Tests for the structure analyzer.
"""

import pytest

from pagescout.adaptive.structure_analyzer import AnalysisConfig, StructureAnalyzer
from pagescout.models import (
    ContentType,
    ContentTypeResult,
    InfiniteScrollDetection,
    PaginationDetection,
    PaginationStrategyName,
    PaginationType,
    SiteAnalysis,
    StructuralSignals,
)

NON_SIMPLE = StructuralSignals(element_count=500, link_count=50, text_length=5000)


def indicators(**true_counts: int) -> dict[str, dict[str, bool]]:
    """Indicator maps with the first N indicators of each category set."""
    result = {}
    for category, checks in StructureAnalyzer.CONTENT_INDICATORS.items():
        names = list(checks)
        count = true_counts.get(category, 0)
        result[category] = {name: i < count for i, name in enumerate(names)}
    return result


@pytest.fixture
def analyzer() -> StructureAnalyzer:
    return StructureAnalyzer(AnalysisConfig(probe_settle_ms=0))


class TestClassifyContentType:
    """Tests for content-type scoring."""

    def test_all_zero_defaults_to_article(self) -> None:
        result = StructureAnalyzer.classify_content_type(indicators())

        assert result.primary_type is ContentType.ARTICLE
        assert result.secondary_type is ContentType.PRODUCT

    def test_ties_follow_declared_order(self) -> None:
        result = StructureAnalyzer.classify_content_type(indicators(listing=2, documentation=2))

        assert result.primary_type is ContentType.LISTING
        assert result.secondary_type is ContentType.DOCUMENTATION

    def test_recipe_weighting(self) -> None:
        result = StructureAnalyzer.classify_content_type(indicators(article=2, recipe=2))

        assert result.scores["recipe"] == 3.0
        assert result.primary_type is ContentType.RECIPE
        assert result.secondary_type is ContentType.ARTICLE

    @pytest.mark.asyncio
    async def test_article_scenario(self, analyzer, make_page, make_html) -> None:
        page = make_page(make_html("<article><p>A</p><p>B</p></article>"))

        result = await analyzer.detect_content_type(page)

        assert result.primary_type is ContentType.ARTICLE
        assert result.indicators["article"]["article"] is True


class TestPageStructure:
    @pytest.mark.asyncio
    async def test_signals(self, analyzer, make_page, sample_html_article) -> None:
        page = make_page(sample_html_article, image_area=256_000)

        signals = await analyzer.detect_page_structure(page)

        assert signals.has_article
        assert signals.has_main
        assert signals.has_header and signals.has_footer and signals.has_nav
        assert signals.h1_count == 1
        assert signals.link_count == 2
        assert signals.image_percentage == pytest.approx(25.0)
        assert signals.text_density > 0

    def test_simple_site_rule(self) -> None:
        assert StructureAnalyzer.is_simple_site(StructuralSignals(element_count=20, text_length=100))
        assert not StructureAnalyzer.is_simple_site(
            StructuralSignals(element_count=20, text_length=100, link_count=20)
        )


class TestPaginationDetection:
    @pytest.mark.asyncio
    async def test_query_parameter_url(self, analyzer, make_page, make_html) -> None:
        page = make_page(make_html("<p>x</p>"), "https://example.com/list?page=2")

        detection = await analyzer.detect_pagination_methods(page)

        assert detection.detected
        assert detection.primary_type is PaginationType.URL
        assert detection.has_query_pagination

    @pytest.mark.asyncio
    async def test_load_more_wins_over_next(self, analyzer, make_page, make_html) -> None:
        page = make_page(
            make_html(
                '<a rel="next" class="next-page" href="/2">Next</a>'
                '<button class="btn load-more">Load more</button>'
            )
        )

        detection = await analyzer.detect_pagination_methods(page)

        assert detection.primary_type is PaginationType.LOAD_MORE
        assert detection.selectors == {"next_link": ".next-page", "load_more": ".btn"}

    @pytest.mark.asyncio
    async def test_textual_links_only(self, analyzer, make_page, make_html) -> None:
        page = make_page(make_html('<a href="/archive">Older entries</a>'))

        detection = await analyzer.detect_pagination_methods(page)

        assert detection.primary_type is PaginationType.TEXT_LINK
        assert detection.has_textual_pagination_links

    @pytest.mark.asyncio
    async def test_nothing_detected(self, analyzer, make_page, make_html) -> None:
        detection = await analyzer.detect_pagination_methods(make_page(make_html("<p>x</p>")))

        assert not detection.detected
        assert detection.primary_type is PaginationType.NONE


class TestInfiniteScroll:
    @pytest.mark.asyncio
    async def test_growth_and_sentinel(self, analyzer, make_page, make_html) -> None:
        page = make_page(
            make_html('<div class="infinite-sentinel"></div>'),
            height=1000,
            batches=["<p>more</p>"],
        )

        result = await analyzer.detect_infinite_scroll(page)

        assert result.height_changed
        assert result.height_delta == 1000
        assert result.sentinel_count == 1
        assert result.confidence == 6
        assert result.detected

    @pytest.mark.asyncio
    async def test_confidence_is_capped(self, analyzer, make_page, make_html) -> None:
        lazy = "".join(f'<img data-src="/{i}.jpg">' for i in range(6))
        page = make_page(
            make_html(f'<div class="loading"></div><div class="sentinel"></div>{lazy}'),
            height=1000,
            batches=["<p>more</p>"],
            intersection_observer=True,
        )

        result = await analyzer.detect_infinite_scroll(page)

        assert result.confidence == 10
        assert 0 <= result.confidence <= 10

    @pytest.mark.asyncio
    async def test_static_page(self, analyzer, make_page, make_html) -> None:
        result = await analyzer.detect_infinite_scroll(make_page(make_html("<p>x</p>")))

        assert result.confidence == 0
        assert not result.detected

    @pytest.mark.asyncio
    async def test_scroll_position_restored(self, analyzer, make_page, make_html) -> None:
        page = make_page(make_html("<p>x</p>"))
        page.position = (0, 150)

        await analyzer.detect_infinite_scroll(page)

        assert page.position == (0, 150)

    @pytest.mark.asyncio
    async def test_restore_can_be_disabled(self, make_page, make_html) -> None:
        analyzer = StructureAnalyzer(
            AnalysisConfig(probe_settle_ms=0, restore_scroll_position=False)
        )
        page = make_page(make_html("<p>x</p>"), height=2000)

        await analyzer.detect_infinite_scroll(page)

        assert page.position == (0, 800)


class TestRecommendation:
    def analysis(self, **kwargs) -> SiteAnalysis:
        return SiteAnalysis(url="https://example.com/", **kwargs)

    def test_missing_structure(self, analyzer) -> None:
        assert analyzer.determine_optimal_strategy(self.analysis()) is None

    def test_simple_site(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(structure=StructuralSignals(element_count=10))
        )

        assert recommendation.simple_site
        assert recommendation.extractor_priority == ["basic"]
        assert "text_density" in recommendation.skip_extractors
        assert "recipe" not in recommendation.skip_extractors
        assert recommendation.pagination_strategy is None
        assert recommendation.max_scrolls == 5

    def test_product_with_load_more(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(
                structure=NON_SIMPLE,
                content_type=ContentTypeResult(primary_type=ContentType.PRODUCT),
                pagination=PaginationDetection(
                    detected=True,
                    primary_type=PaginationType.LOAD_MORE,
                    selectors={"load_more": ".load-more"},
                ),
            )
        )

        assert recommendation.extractor_priority == ["product", "basic"]
        assert recommendation.skip_extractors == ["article"]
        assert recommendation.max_scrolls == 30
        assert recommendation.pagination_strategy is PaginationStrategyName.CLICK
        assert recommendation.click_selector == ".load-more"

    def test_query_url_recommends_parameter(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(
                structure=NON_SIMPLE,
                pagination=PaginationDetection(
                    detected=True,
                    primary_type=PaginationType.URL,
                    url_patterns={"page_param": True},
                ),
            )
        )

        assert recommendation.pagination_strategy is PaginationStrategyName.PARAMETER

    def test_path_url_recommends_url(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(
                structure=NON_SIMPLE,
                pagination=PaginationDetection(
                    detected=True,
                    primary_type=PaginationType.URL,
                    url_patterns={"page_path_segment": True},
                ),
            )
        )

        assert recommendation.pagination_strategy is PaginationStrategyName.URL

    def test_infinite_scroll_fallback(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(
                structure=NON_SIMPLE,
                pagination=PaginationDetection(),
                infinite_scroll=InfiniteScrollDetection(detected=True, confidence=5),
            )
        )

        assert recommendation.pagination_strategy is PaginationStrategyName.INFINITE

    def test_listing_budgets(self, analyzer) -> None:
        recommendation = analyzer.determine_optimal_strategy(
            self.analysis(
                structure=NON_SIMPLE,
                content_type=ContentTypeResult(primary_type=ContentType.LISTING),
            )
        )

        assert recommendation.max_scrolls == 150
        assert recommendation.scroll_delay == 800
        assert recommendation.extractor_priority[0] == "content_sections"


class TestAnalyzeSite:
    @pytest.mark.asyncio
    async def test_full_analysis(self, analyzer, make_page, sample_html_article) -> None:
        analysis = await analyzer.analyze_site(make_page(sample_html_article))

        assert not analysis.partial_results
        assert analysis.structure is not None
        assert analysis.content_type.primary_type is ContentType.ARTICLE
        assert analysis.metadata["h1_text"] == "Understanding Lazy Loading"
        assert analysis.metadata["meta_description"] == "How lazy loading works"
        assert analysis.page_size["link_count"] == 2
        assert analysis.recommendation is not None

    @pytest.mark.asyncio
    async def test_simple_page_recommendation(self, analyzer, make_page, make_html) -> None:
        analysis = await analyzer.analyze_site(make_page(make_html("<p>Hello</p>")))

        assert analysis.recommendation.simple_site

    @pytest.mark.asyncio
    async def test_failure_yields_partial_result(self, analyzer, make_page) -> None:
        analysis = await analyzer.analyze_site(make_page("", content_error=True))

        assert analysis.partial_results
        assert "page detached" in analysis.error
        assert analysis.recommendation is None

    @pytest.mark.asyncio
    async def test_probe_can_be_skipped(self, make_page, make_html) -> None:
        analyzer = StructureAnalyzer(AnalysisConfig(skip_infinite_scroll_probe=True))
        page = make_page(make_html("<p>x</p>"))

        analysis = await analyzer.analyze_site(page)

        assert page.scrolls == []
        assert analysis.infinite_scroll.confidence == 0
