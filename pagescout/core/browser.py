"""
Browser management for pagescout.

Launches Chromium through Playwright and hands out pages wrapped as
BrowserPage handles. Navigation uses the configured wait strategy
(networkidle by default) with the 90 second navigation timeout.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from pagescout.config import ScraperSettings, WaitUntil
from pagescout.core.page import BrowserPage
from pagescout.utils.logging import ScraperLogger


class BrowserPool:
    """
    Manages a pool of browser contexts for concurrent scraping.

    One Chromium instance is shared; each page session gets its own context.
    A semaphore caps the number of live contexts.
    """

    def __init__(
        self,
        max_contexts: int = 5,
        settings: ScraperSettings | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the browser pool.

        Args:
            max_contexts: Maximum number of concurrent browser contexts.
            settings: Browser settings (headless flag, viewport, user agent).
            logger: Logger instance.
        """
        self.max_contexts = max_contexts
        self.settings = settings or ScraperSettings()
        self.logger = logger or ScraperLogger("browser_pool")

        self._browser = None
        self._playwright = None
        self._semaphore = asyncio.Semaphore(max_contexts)
        self._initialized = False

    async def initialize(self) -> None:
        """Launch the browser."""
        if self._initialized:
            return

        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.settings.headless,
        )
        self._initialized = True
        self.logger.info(
            "Browser pool initialized",
            headless=self.settings.headless,
            max_contexts=self.max_contexts,
        )

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        self._initialized = False
        self.logger.info("Browser pool closed")

    async def acquire_context(self) -> Any:
        """
        Acquire a browser context from the pool.

        Returns:
            Browser context (must be closed and released when done).
        """
        await self._semaphore.acquire()

        try:
            if not self._initialized:
                await self.initialize()

            return await self._browser.new_context(
                viewport={
                    "width": self.settings.viewport_width,
                    "height": self.settings.viewport_height,
                },
                user_agent=self.settings.user_agent,
            )
        except BaseException:
            self._semaphore.release()
            raise

    def release_context(self) -> None:
        """Release a context slot back to the pool."""
        self._semaphore.release()

    @asynccontextmanager
    async def open_page(
        self,
        url: str,
        wait_until: WaitUntil | str | None = None,
        timeout_seconds: float | None = None,
    ) -> AsyncIterator[BrowserPage]:
        """
        Open a new page, navigate to ``url`` and yield it as a BrowserPage.

        Raises:
            NavigationError: If the initial navigation fails.
        """
        wait = WaitUntil(wait_until or self.settings.wait_until)
        timeout = timeout_seconds or self.settings.navigation_timeout_seconds

        context = await self.acquire_context()
        try:
            page = await context.new_page()
            handle = BrowserPage(page, logger=self.logger.bind(url=url))
            await handle.goto(url, wait_until=wait.value, timeout_seconds=timeout)
            yield handle
        finally:
            await context.close()
            self.release_context()

    async def __aenter__(self) -> "BrowserPool":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
