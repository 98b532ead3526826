"""
Link-following pagination for sites that paginate by path.
"""

from pagescout.exceptions import NavigationError, PageHandleError
from pagescout.extraction.base import DomSnapshot
from pagescout.extraction.dom import select_one
from pagescout.pagination.base import PaginationStrategy
from pagescout.utils.logging import ScraperLogger
from pagescout.utils.url_utils import build_path_page_url, resolve_url

NEXT_LINK_SELECTOR = 'a[rel="next"], .next a, .pagination .next a'


class URLPathStrategy(PaginationStrategy):
    """
    Follow the page's "next" link, or a ``/page/{num}`` pattern when none exists.

    Stops on a navigation failure, a missing next URL, a URL already visited,
    or once ``max_pages`` pages have been seen.
    """

    name = "url"

    def __init__(
        self,
        url_pattern: str | None = None,
        max_attempts: int | None = None,
        delay_ms: int | None = None,
        logger: ScraperLogger | None = None,
    ):
        super().__init__(max_attempts, delay_ms, logger)
        self._url_pattern = url_pattern

    @property
    def url_pattern(self) -> str | None:
        return self._url_pattern or self.config.url_pattern

    async def find_next_url(self) -> str | None:
        """The next page URL, from a rel=next link or the configured pattern."""
        try:
            dom = DomSnapshot.parse(await self.page.content(), self.page.url)
        except PageHandleError as e:
            self.logger.debug("Next link lookup failed", error=str(e))
            dom = None

        if dom is not None:
            link = select_one(dom.soup, NEXT_LINK_SELECTOR)
            href = str(link.get("href", "")).strip() if link is not None else ""
            if href and not href.startswith(("#", "javascript:")):
                return resolve_url(dom.url, href)

        if self.url_pattern and self.context is not None:
            return build_path_page_url(
                self.context.base_url, self.url_pattern, self.state.current_page + 1
            )

        return None

    async def advance(self) -> bool:
        if self.state.current_page >= self.config.max_pages:
            return False
        if self.state.attempts >= self.max_attempts:
            return False

        next_url = await self.find_next_url()
        if not next_url:
            self.logger.debug("No next page link", url=self.page.url)
            return False
        if next_url in self.state.visited:
            self.logger.debug("Next page already visited", url=next_url)
            return False

        try:
            await self.page.goto(
                next_url,
                wait_until="networkidle",
                timeout_seconds=self.config.navigation_timeout_seconds,
            )
        except NavigationError as e:
            self._log_navigation_failure(next_url, e)
            return False

        self.state.visited.add(next_url)
        self.state.current_page += 1
        self.state.attempts += 1
        await self._wait(self.delay_ms)

        self._log_step(url=next_url, page_number=self.state.current_page)
        return True
