"""
Tests for the Playwright-backed page handle.
"""

import pytest
from playwright.async_api import Error as PlaywrightError

from pagescout.core.page import BrowserPage
from pagescout.exceptions import DOMEvaluationError


class ClosedKeyboard:
    async def press(self, key: str) -> None:
        raise PlaywrightError("Target page, context or browser has been closed")


class ClosedPlaywrightPage:
    """Stands in for a Playwright page whose target has gone away."""

    url = "https://example.com/"
    keyboard = ClosedKeyboard()

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        raise PlaywrightError("Target page, context or browser has been closed")

    async def evaluate(self, expression: str, arg=None):
        raise PlaywrightError("Execution context was destroyed")


class TestBrowserPageErrors:
    @pytest.mark.asyncio
    async def test_set_viewport_failure(self) -> None:
        page = BrowserPage(ClosedPlaywrightPage())

        with pytest.raises(DOMEvaluationError) as exc_info:
            await page.set_viewport(768, 1024)

        assert exc_info.value.operation == "set_viewport"

    @pytest.mark.asyncio
    async def test_press_key_failure(self) -> None:
        page = BrowserPage(ClosedPlaywrightPage())

        with pytest.raises(DOMEvaluationError) as exc_info:
            await page.press_key("PageDown")

        assert exc_info.value.operation == "press_key"

    @pytest.mark.asyncio
    async def test_evaluate_failure(self) -> None:
        page = BrowserPage(ClosedPlaywrightPage())

        with pytest.raises(DOMEvaluationError):
            await page.scroll_height()
