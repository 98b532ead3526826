"""
Query-parameter pagination (``?page=N``).

Each page is scrolled until its height settles before moving on, so lazily
loaded content on page N is in the DOM before page N+1 replaces it.
"""

import re

from pagescout.core.page import PageHandle
from pagescout.exceptions import NavigationError, PageHandleError
from pagescout.extraction.base import DomSnapshot
from pagescout.extraction.dom import select, text_of
from pagescout.pagination.base import PaginationStrategy
from pagescout.utils.url_utils import with_query_param

APPLICABLE_URL_KEYWORDS = ("social", "profile", "users", "gallery", "feed", "blog", "community")

PAGE_EVENTS = ("scroll", "resize", "mousemove", "DOMContentLoaded", "lazyload", "load-more")

UNCHANGED_LIMIT = 5

_SHORT_PAGE_PARAM = re.compile(r"[?&]p=\d+")
_DIGIT = re.compile(r"\d")


class URLQueryParameterStrategy(PaginationStrategy):
    """Increment a page query parameter on the base URL, up to ``max_pages``."""

    name = "parameter"

    @property
    def page_parameter(self) -> str:
        return self.config.page_parameter or "page"

    @property
    def current_page(self) -> int:
        return self.state.current_page

    def page_url(self, page_number: int) -> str:
        base_url = self.context.base_url if self.context is not None else self.page.url
        return with_query_param(base_url, self.page_parameter, page_number)

    async def scroll_current_page(self) -> int:
        """
        Scroll to the bottom until five consecutive heights are unchanged.

        Returns:
            Number of scrolls made.
        """
        await self._wait(self.delay_ms)

        scrolls = 0
        unchanged = 0
        last_height = await self.page.scroll_height()

        while scrolls < self.max_attempts:
            height = await self.page.scroll_height()
            await self.page.scroll_to(0, height)
            await self._wait(self.delay_ms)
            await self.page.dispatch_window_events(PAGE_EVENTS)
            scrolls += 1

            new_height = await self.page.scroll_height()
            if new_height == last_height:
                unchanged += 1
                if unchanged >= UNCHANGED_LIMIT:
                    break
            else:
                unchanged = 0
                last_height = new_height

        await self._wait(self.delay_ms)
        return scrolls

    async def verify_content(self) -> bool:
        """The verification selector matches; no selector or a failed count passes."""
        selector = self.config.content_verification_selector
        if not selector:
            return True
        try:
            return await self.page.count(selector) > 0
        except PageHandleError as e:
            self.logger.debug("Content verification failed", selector=selector, error=str(e))
            return True

    async def advance(self) -> bool:
        try:
            await self.scroll_current_page()
        except PageHandleError as e:
            self.logger.debug("In-page scroll failed", page_number=self.current_page, error=str(e))

        self.state.current_page += 1
        if self.state.current_page > self.config.max_pages:
            return False

        url = self.page_url(self.state.current_page)
        try:
            await self.page.goto(
                url,
                wait_until="networkidle",
                timeout_seconds=self.config.content_wait_timeout_seconds,
            )
        except NavigationError as e:
            self._log_navigation_failure(url, e)
            return False

        if self.config.wait_for_selector:
            found = await self.page.wait_for_selector(
                self.config.wait_for_selector,
                timeout_seconds=self.config.selector_timeout_seconds,
            )
            if not found:
                self.logger.debug("Wait selector not found", selector=self.config.wait_for_selector)

        self.state.attempts += 1
        verified = await self.verify_content()
        self._log_step(url=url, page_number=self.current_page, verified=verified)
        return verified

    @staticmethod
    async def is_applicable(url: str, page: PageHandle | None = None) -> bool:
        """
        Whether the site is likely to paginate by query parameter.

        True for URLs containing a pagination-prone keyword, or pages with
        anchors whose href, text or aria-label look like numbered pages.
        """
        lowered = url.lower()
        if any(keyword in lowered for keyword in APPLICABLE_URL_KEYWORDS):
            return True
        if page is None:
            return False

        try:
            dom = DomSnapshot.parse(await page.content(), url)
        except PageHandleError:
            return False

        for anchor in select(dom.soup, "a"):
            href = str(anchor.get("href", ""))
            if "page=" in href or _SHORT_PAGE_PARAM.search(href):
                return True
            if _DIGIT.search(text_of(anchor)):
                return True
            if "page" in str(anchor.get("aria-label", "")).lower():
                return True

        return False
