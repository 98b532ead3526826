"""
Pagination strategy contract.

A strategy is initialized once against a live page and then advanced one step
at a time. The orchestrator extracts content between steps, so a strategy
never touches the session document.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from pagescout.config import ScrapeConfig
from pagescout.core.page import PageHandle
from pagescout.exceptions import NavigationError
from pagescout.utils import metrics
from pagescout.utils.logging import ScraperLogger
from pagescout.utils.url_utils import get_domain


@dataclass
class PaginationContext:
    """What a strategy needs to drive a page."""

    page: PageHandle
    base_url: str
    config: ScrapeConfig = field(default_factory=ScrapeConfig)


@dataclass
class PaginationState:
    """Strategy-local cursor, reset on every initialize()."""

    attempts: int = 0
    current_page: int = 1
    last_height: int = 0
    unchanged: int = 0
    visited: set[str] = field(default_factory=set)


class PaginationStrategy(ABC):
    """
    Base class for pagination strategies.

    Subclasses implement ``advance()``; ``False`` means the strategy is done
    and should not be advanced again.
    """

    name: ClassVar[str] = "base"

    def __init__(
        self,
        max_attempts: int | None = None,
        delay_ms: int | None = None,
        logger: ScraperLogger | None = None,
    ):
        self._max_attempts = max_attempts
        self._delay_ms = delay_ms
        self.logger = logger or ScraperLogger(f"pagination.{self.name}")
        self.context: PaginationContext | None = None
        self.state = PaginationState()

    @property
    def max_attempts(self) -> int:
        if self._max_attempts is not None:
            return self._max_attempts
        return self.config.max_scrolls

    @property
    def delay_ms(self) -> int:
        if self._delay_ms is not None:
            return self._delay_ms
        return self.config.scroll_delay

    @property
    def page(self) -> PageHandle:
        if self.context is None:
            raise RuntimeError(f"{self.name} strategy used before initialize()")
        return self.context.page

    @property
    def config(self) -> ScrapeConfig:
        if self.context is None:
            return ScrapeConfig()
        return self.context.config

    async def initialize(self, context: PaginationContext) -> bool:
        """
        Bind the strategy to a page and reset its cursor.

        Returns:
            Whether the strategy can run at all.
        """
        self.context = context
        self.state = PaginationState(visited={context.base_url})
        return True

    @abstractmethod
    async def advance(self) -> bool:
        """Perform one pagination step. Returns False when exhausted."""
        ...

    async def _wait(self, ms: float) -> None:
        await self.page.wait(int(ms))

    def _log_step(self, **kwargs) -> None:
        self.logger.pagination_step(self.name, self.state.attempts, **kwargs)
        metrics.record_pagination_step(get_domain(self.page.url), self.name)

    def _log_navigation_failure(self, url: str, error: NavigationError) -> None:
        self.logger.navigation_failed(url, error.message, type(error).__name__)
        metrics.record_navigation_failure(get_domain(url), type(error).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
