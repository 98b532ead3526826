"""
Tests for the scrape orchestrator.
"""

import json

import pytest

from pagescout.adaptive.structure_analyzer import AnalysisConfig, StructureAnalyzer
from pagescout.config import ScrapeConfig
from pagescout.core.orchestrator import Orchestrator, default_output_path, save_document
from pagescout.exceptions import DOMEvaluationError, PaginationConfigError
from pagescout.extraction.catalogs import CLICK_PAGINATION_SELECTORS
from pagescout.models import (
    PageDocument,
    PaginationStrategyName,
    SiteAnalysis,
    StrategyRecommendation,
)


def orchestrator(**options) -> Orchestrator:
    options.setdefault("scroll_delay", 0)
    options.setdefault("max_scrolls", 3)
    analyzer = StructureAnalyzer(AnalysisConfig(probe_settle_ms=0))
    return Orchestrator(ScrapeConfig(**options), analyzer=analyzer)


class TestStrategySelection:
    """Tests for choosing pagination strategies."""

    @pytest.mark.asyncio
    async def test_forced_strategy_wins_on_simple_site(self, make_page, make_html) -> None:
        page = make_page(
            make_html("<p>First item</p>"),
            clickable={".load-more": ["<p>Second item</p>", "<p>Third item</p>"]},
        )
        runner = orchestrator(pagination_strategy="click", click_selector=".load-more")

        document = await runner.scrape(page)

        assert runner.analysis.recommendation.simple_site
        assert runner.strategies_run == ["click"]
        assert document.content[:3] == ["First item", "Second item", "Third item"]

    @pytest.mark.asyncio
    async def test_simple_site_skips_pagination(self, make_page, make_html) -> None:
        page = make_page(make_html("<p>Hello</p>"), clickable={".pagination a": ["<p>More</p>"]})
        runner = orchestrator()

        document = await runner.scrape(page)

        assert runner.strategies_run == []
        assert "More" not in document.content

    @pytest.mark.asyncio
    async def test_applicable_parameter_strategy(self, make_page, make_html) -> None:
        page = make_page(
            make_html("<p>Post one</p>"),
            "https://example.com/feed",
            pages={"https://example.com/feed?page=2": make_html("<p>Post two</p>")},
        )
        runner = orchestrator(analyze=False, max_pages=2)

        document = await runner.scrape(page)

        assert runner.strategies_run == ["parameter"]
        assert document.content == ["Post one", "Post two"]

    @pytest.mark.asyncio
    async def test_parameter_strategy_runs_on_simple_site(self, make_page, make_html) -> None:
        page = make_page(
            make_html("<p>Post one</p>"),
            "https://example.com/feed?page=1",
            pages={"https://example.com/feed?page=2": make_html("<p>Post two</p>")},
        )
        runner = orchestrator(max_pages=2)

        document = await runner.scrape(page)

        assert runner.analysis.recommendation.simple_site
        assert runner.strategies_run == ["parameter"]
        assert page.visited == ["https://example.com/feed?page=2"]
        assert document.content.index("Post one") < document.content.index("Post two")

    @pytest.mark.asyncio
    async def test_pipeline_stops_at_first_productive_stage(self, make_page, make_html) -> None:
        page = make_page(
            make_html("<p>Item A</p>"),
            "https://example.com/shop",
            batches=["<p>Item B</p>"],
            clickable={".pagination a": ["<p>Item C</p>"]},
        )
        runner = orchestrator(analyze=False, brute_force=False)

        document = await runner.scrape(page)

        assert runner.strategies_run == ["url", "infinite"]
        assert "Item B" in document.content
        assert "Item C" not in document.content

    @pytest.mark.asyncio
    async def test_brute_force_runs_every_stage(self, make_page, make_html) -> None:
        page = make_page(
            make_html("<p>Item A</p>"),
            "https://example.com/shop",
            batches=["<p>Item B</p>"],
            clickable={".pagination a": ["<p>Item C</p>"]},
        )
        runner = orchestrator(analyze=False)

        document = await runner.scrape(page)

        assert runner.strategies_run[:2] == ["url", "infinite"]
        assert len(runner.strategies_run) == 2 + len(CLICK_PAGINATION_SELECTORS)
        assert document.content[:3] == ["Item A", "Item B", "Item C"]

    @pytest.mark.asyncio
    async def test_pagination_disabled(self, make_page, make_html) -> None:
        page = make_page(make_html("<p>x</p>"), "https://example.com/feed")
        runner = orchestrator(analyze=False, handle_pagination=False)

        await runner.scrape(page)

        assert runner.strategies_run == []

    @pytest.mark.asyncio
    async def test_page_error_ends_strategy_not_session(self, make_page, make_html) -> None:
        page = make_page(make_html("<p>Still here</p>"))

        async def broken_scroll_height(selector=None):
            raise DOMEvaluationError("scroll_height", "context destroyed")

        page.scroll_height = broken_scroll_height
        runner = orchestrator(analyze=False, pagination_strategy="infinite")

        document = await runner.scrape(page)

        assert runner.strategies_run == ["infinite"]
        assert document.content == ["Still here"]


class TestPipeline:
    """Tests for fallback pipeline construction."""

    def with_recommendation(self, runner: Orchestrator, **kwargs) -> Orchestrator:
        runner.analysis = SiteAnalysis(
            url="https://example.com/", recommendation=StrategyRecommendation(**kwargs)
        )
        return runner

    def test_default_order(self) -> None:
        stages = orchestrator().fallback_pipeline()

        assert [s.name for s in stages[:2]] == ["url", "infinite"]
        assert [s.selector for s in stages[2:]] == list(CLICK_PAGINATION_SELECTORS)

    def test_recommended_click_selector_first(self) -> None:
        runner = self.with_recommendation(orchestrator(), click_selector=".show-more-posts")

        stages = runner.fallback_pipeline()

        assert stages[2].selector == ".show-more-posts"
        assert len(stages) == 3 + len(CLICK_PAGINATION_SELECTORS)

    def test_recommended_strategy_first_without_brute_force(self) -> None:
        runner = self.with_recommendation(
            orchestrator(brute_force=False),
            pagination_strategy=PaginationStrategyName.INFINITE,
        )

        stages = runner.fallback_pipeline()

        assert stages[0].name == "infinite"
        assert stages[1].name == "url"

    def test_brute_force_keeps_order(self) -> None:
        runner = self.with_recommendation(
            orchestrator(), pagination_strategy=PaginationStrategyName.INFINITE
        )

        assert runner.fallback_pipeline()[0].name == "url"

    def test_scroll_budget_capped_by_recommendation(self) -> None:
        runner = self.with_recommendation(orchestrator(max_scrolls=200), max_scrolls=50)

        assert runner.scroll_budget == 50
        assert runner.build_strategy("infinite").max_attempts == 50

    def test_step_delay_capped_by_recommendation(self) -> None:
        runner = self.with_recommendation(orchestrator(scroll_delay=1000), scroll_delay=800)

        assert runner.step_delay == 800
        assert runner.build_strategy("parameter").delay_ms == 800
        assert {stage.delay_ms for stage in runner.fallback_pipeline()} == {800}

    def test_step_delay_without_analysis(self) -> None:
        assert orchestrator(scroll_delay=250).step_delay == 250

    def test_unknown_strategy(self) -> None:
        with pytest.raises(PaginationConfigError):
            orchestrator().build_strategy("teleport")

    def test_click_without_selector(self) -> None:
        with pytest.raises(PaginationConfigError):
            orchestrator().build_strategy(PaginationStrategyName.CLICK)


class TestPreferences:
    @pytest.mark.asyncio
    async def test_explicit_lists_override_recommendation(self, make_page, make_html) -> None:
        runner = orchestrator(
            priority_extractors=["article"],
            skip_extractors=["text_density"],
            handle_pagination=False,
        )

        await runner.scrape(make_page(make_html("<p>x</p>")))

        assert runner.ensemble.priority == ["article"]
        assert runner.ensemble.skip == {"text_density"}

    @pytest.mark.asyncio
    async def test_recommendation_applied(self, make_page, make_html) -> None:
        runner = orchestrator(handle_pagination=False)

        await runner.scrape(make_page(make_html("<p>x</p>")))

        assert runner.ensemble.priority == ["basic"]
        assert "text_density" in runner.ensemble.skip
        assert "recipe" not in runner.ensemble.skip

    @pytest.mark.asyncio
    async def test_json_ld_recipe_on_simple_page(self, make_page, sample_html_recipe) -> None:
        runner = orchestrator(handle_pagination=False)

        document = await runner.scrape(make_page(sample_html_recipe))

        assert runner.analysis.recommendation.simple_site
        assert document.content[:4] == ["Ingredients", "1 cup flour", "Instructions", "1. Mix well"]
        assert "Mix well" not in document.content

    @pytest.mark.asyncio
    async def test_json_ld_recipe_on_article_page(self, make_page, make_html) -> None:
        paragraphs = "".join(f"<p>Paragraph {i} of the family story.</p>" for i in range(12))
        topics = "".join(
            f'<a href="/topics/{chr(97 + i)}">Topic {chr(65 + i)}</a>' for i in range(25)
        )
        body = f"""
            <article>
              <span class="author">Ada</span>
              {paragraphs}
              <ol><li>Mix the dough well</li><li>Bake until golden</li></ol>
              <div class="share-links">Share</div>
            </article>
            <section class="comments"><p>Lovely.</p></section>
            <footer>{topics}</footer>
        """
        head = (
            '<script type="application/ld+json">'
            '{"@type": "Recipe", "recipeIngredient": ["3 cups flour"],'
            ' "recipeInstructions": ["Mix the dough well", "Bake until golden"]}'
            "</script>"
        )
        runner = orchestrator(handle_pagination=False)

        document = await runner.scrape(make_page(make_html(body, head=head)))

        assert runner.ensemble.priority == ["article", "basic"]
        assert "1. Mix the dough well" in document.content
        assert "2. Bake until golden" in document.content
        assert "Mix the dough well" not in document.content
        assert "Bake until golden" not in document.content

    @pytest.mark.asyncio
    async def test_missing_wait_selector_not_fatal(self, make_page, make_html) -> None:
        runner = orchestrator(wait_for_selector=".feed", handle_pagination=False)

        document = await runner.scrape(make_page(make_html("<p>Content</p>")))

        assert "Content" in document.content


class TestOutput:
    def test_default_output_path(self, tmp_path) -> None:
        path = default_output_path("https://www.example.com:8080/a", tmp_path)

        assert path == tmp_path / "www_example_com.json"

    def test_save_document(self, tmp_path) -> None:
        document = PageDocument(url="https://example.com/", title="Example", content=["A"])

        path = save_document(document, tmp_path / "out" / "doc.json", extra={"profile": "speed"})

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["content"] == ["A"]
        assert data["profile"] == "speed"
