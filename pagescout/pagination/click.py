"""
Click pagination for "load more" and "next" buttons.
"""

from pagescout.exceptions import PageHandleError, PaginationConfigError
from pagescout.pagination.base import PaginationStrategy
from pagescout.utils.logging import ScraperLogger


class ClickStrategy(PaginationStrategy):
    """Click a button while it stays visible, waiting after each click."""

    name = "click"

    def __init__(
        self,
        selector: str | None,
        max_attempts: int | None = None,
        delay_ms: int | None = None,
        logger: ScraperLogger | None = None,
    ):
        if not selector:
            raise PaginationConfigError(self.name, "a button selector is required")
        super().__init__(max_attempts, delay_ms, logger)
        self.selector = selector

    async def advance(self) -> bool:
        if self.state.attempts >= self.max_attempts:
            return False

        try:
            if not await self.page.is_clickable(self.selector):
                self.logger.debug("Click target not visible", selector=self.selector)
                return False
            clicked = await self.page.click(self.selector)
        except PageHandleError as e:
            self.logger.debug("Click failed", selector=self.selector, error=str(e))
            return False

        if not clicked:
            return False

        self.state.attempts += 1
        await self._wait(self.delay_ms)
        self._log_step(selector=self.selector)
        return True
