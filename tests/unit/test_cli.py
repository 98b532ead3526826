"""
Tests for the command-line entry point.
"""

import json

import pytest
from click.testing import CliRunner

import pagescout.__main__ as cli
from pagescout.models import PageDocument, PaginationStrategyName


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict:
    calls: dict = {}

    async def fake_run_scrape(url, config=None, settings=None, logger=None):
        calls["url"] = url
        calls["config"] = config
        return PageDocument(url=url, title="Example", content=["A", "B"])

    monkeypatch.setattr(cli, "run_scrape", fake_run_scrape)
    return calls


class TestCli:
    def test_scrape_and_save(self, captured, tmp_path) -> None:
        output = tmp_path / "doc.json"

        result = CliRunner().invoke(
            cli.main,
            [
                "https://example.com/feed",
                "--strategy",
                "parameter",
                "--pages",
                "3",
                "--max-scrolls",
                "10",
                "--output",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        config = captured["config"]
        assert captured["url"] == "https://example.com/feed"
        assert config.pagination_strategy is PaginationStrategyName.PARAMETER
        assert config.max_pages == 3
        assert config.max_scrolls == 10
        assert json.loads(output.read_text(encoding="utf-8"))["content"] == ["A", "B"]

    def test_profile_applied(self, captured) -> None:
        result = CliRunner().invoke(cli.main, ["https://example.com", "--profile", "speed"])

        assert result.exit_code == 0, result.output
        assert captured["config"].max_scrolls == 30
        assert "main_content" in captured["config"].priority_extractors

    def test_click_strategy_requires_selector(self, captured) -> None:
        result = CliRunner().invoke(cli.main, ["https://example.com", "--strategy", "click"])

        assert result.exit_code != 0
        assert "click_selector is required" in result.output
        assert "url" not in captured

    def test_flags(self, captured) -> None:
        result = CliRunner().invoke(
            cli.main,
            ["https://example.com", "--no-pagination", "--no-brute-force", "--download-images"],
        )

        assert result.exit_code == 0, result.output
        config = captured["config"]
        assert config.handle_pagination is False
        assert config.brute_force is False
        assert config.download_images is True
