"""
Infinite-scroll pagination.

Lazy loaders react to different triggers: reaching the bottom, scroll events
at particular offsets, hover, keyboard paging, or viewport changes. Rather
than guess which one a site uses, ScrollStrategy runs a fixed sequence of
movement patterns, one per advance(), ending with a final standard pass.
"""

import math
import random

from pagescout.pagination.base import PaginationContext, PaginationStrategy
from pagescout.utils.logging import ScraperLogger

RESIZE_VIEWPORTS: tuple[tuple[int, int], ...] = (
    (1280, 800),
    (768, 1024),
    (414, 896),
    (1920, 1080),
)

SWEEP_STEPS = 20
SPIRAL_RINGS = 10
SPIRAL_ANGLES = 36
UNCHANGED_LIMIT = 3


class ScrollStrategy(PaginationStrategy):
    """Scroll the page (or a scroll container) through every movement pattern."""

    name = "infinite"

    PATTERNS: tuple[str, ...] = (
        "standard",
        "chunk",
        "reverse",
        "pulse",
        "zigzag",
        "step",
        "bounce",
        "hover",
        "random",
        "corner",
        "diagonal",
        "spiral",
        "keyboard",
        "resize",
        "standard",
    )

    def __init__(
        self,
        max_attempts: int | None = None,
        delay_ms: int | None = None,
        logger: ScraperLogger | None = None,
        rng: random.Random | None = None,
    ):
        super().__init__(max_attempts, delay_ms, logger)
        self.rng = rng or random.Random()
        self._pattern_index = 0

    async def initialize(self, context: PaginationContext) -> bool:
        await super().initialize(context)
        self._pattern_index = 0
        return True

    @property
    def container(self) -> str | None:
        return self.config.scroll_container_selector

    @property
    def remaining_patterns(self) -> tuple[str, ...]:
        return self.PATTERNS[self._pattern_index :]

    async def advance(self) -> bool:
        if self._pattern_index >= len(self.PATTERNS):
            return False

        pattern = self.PATTERNS[self._pattern_index]
        self._pattern_index += 1
        self.state.attempts += 1

        handler = getattr(self, f"_{pattern}_scroll")
        before = await self._height()
        await handler()
        after = await self._height()

        self._log_step(pattern=pattern, height_before=before, height_after=after)
        return True

    # -------------------------------------------------------------------------
    # Page helpers
    # -------------------------------------------------------------------------

    async def _height(self) -> int:
        return await self.page.scroll_height(self.container)

    async def _scroll_to(self, x: float, y: float) -> None:
        await self.page.scroll_to(int(x), int(y), self.container)

    async def _scroll_bottom(self) -> None:
        await self._scroll_to(0, await self._height())

    # -------------------------------------------------------------------------
    # Patterns
    # -------------------------------------------------------------------------

    async def standard_scroll(self) -> int:
        """
        Scroll to the bottom until the height stops changing.

        Stops after three consecutive unchanged heights or when the attempt
        budget runs out.

        Returns:
            Number of scroll attempts made.
        """
        attempts = 0
        unchanged = 0
        last_height = await self._height()

        while attempts < self.max_attempts and unchanged < UNCHANGED_LIMIT:
            await self._scroll_bottom()
            await self._wait(self.delay_ms)

            new_height = await self._height()
            if new_height == last_height:
                unchanged += 1
            else:
                unchanged = 0
                last_height = new_height

            await self.page.dispatch_window_events(["scroll"])
            attempts += 1

        self.state.last_height = last_height
        self.state.unchanged = unchanged
        return attempts

    async def _standard_scroll(self) -> None:
        await self.standard_scroll()

    async def _chunk_scroll(self) -> None:
        height = await self._height()
        chunk = height / 10
        if chunk <= 0:
            return
        position = 0.0
        while position < height:
            await self._scroll_to(0, position)
            await self._wait(self.delay_ms / 2)
            position += chunk
        await self._scroll_bottom()

    async def _reverse_scroll(self) -> None:
        await self._scroll_bottom()
        await self._wait(self.delay_ms)

        height = await self._height()
        chunk = height / 10
        if chunk <= 0:
            return
        position = float(height)
        while position > 0:
            await self._scroll_to(0, position)
            await self._wait(self.delay_ms / 2)
            position -= chunk

    async def _pulse_scroll(self) -> None:
        last_height = await self._height()
        for _ in range(self.max_attempts):
            await self._scroll_bottom()
            await self._wait(self.delay_ms / 2)
            await self._scroll_to(0, (await self._height()) * 0.9)
            await self._wait(self.delay_ms / 2)

            new_height = await self._height()
            if new_height <= last_height:
                break
            last_height = new_height

    async def _zigzag_scroll(self) -> None:
        height = await self._height()
        for i in range(SWEEP_STEPS):
            await self._scroll_to(0, height / SWEEP_STEPS * i)
            await self._wait(self.delay_ms / 4)
            await self.page.scroll_by(-50, 0, self.container)
            await self.page.scroll_by(50, 0, self.container)
        await self._scroll_bottom()

    async def _step_scroll(self) -> None:
        _, viewport_height = await self.page.viewport()
        step = max(viewport_height / 2, 1)
        height = await self._height()
        position = 0.0
        while position < height:
            await self._scroll_to(0, position)
            await self._wait(self.delay_ms / 3)
            position += step

    async def _bounce_scroll(self) -> None:
        for _ in range(self.max_attempts):
            await self._scroll_bottom()
            await self._wait(self.delay_ms / 2)
            await self._scroll_to(0, 0)
            await self._wait(self.delay_ms / 2)

    async def _hover_scroll(self) -> None:
        await self.page.dispatch_hover_all()
        await self._wait(self.delay_ms)
        await self._scroll_bottom()

    async def _random_scroll(self) -> None:
        for _ in range(self.max_attempts):
            height = await self._height()
            await self._scroll_to(0, self.rng.random() * height)
            await self._wait(self.delay_ms / 2)

    async def _corner_scroll(self) -> None:
        viewport_width, _ = await self.page.viewport()
        height = await self._height()
        for x, y in ((0, 0), (viewport_width, 0), (0, height), (viewport_width, height)):
            await self._scroll_to(x, y)
            await self._wait(self.delay_ms / 2)

    async def _diagonal_scroll(self) -> None:
        viewport_width, _ = await self.page.viewport()
        height = await self._height()
        for i in range(SWEEP_STEPS + 1):
            await self._scroll_to(viewport_width / SWEEP_STEPS * i, height / SWEEP_STEPS * i)
            await self._wait(self.delay_ms / 4)

    async def _spiral_scroll(self) -> None:
        viewport_width, _ = await self.page.viewport()
        height = await self._height()
        center_x, center_y = viewport_width / 2, height / 2
        max_radius = min(center_x, center_y)
        if max_radius <= 0:
            return

        for ring in range(1, SPIRAL_RINGS + 1):
            radius = max_radius / SPIRAL_RINGS * ring
            for step in range(SPIRAL_ANGLES):
                angle = 2 * math.pi * step / SPIRAL_ANGLES
                await self._scroll_to(
                    max(center_x + radius * math.cos(angle), 0),
                    max(center_y + radius * math.sin(angle), 0),
                )
                await self._wait(self.delay_ms / 10)

    async def _keyboard_scroll(self) -> None:
        _, viewport_height = await self.page.viewport()
        height = await self._height()
        presses = math.ceil(height / viewport_height) if viewport_height > 0 else 0
        for _ in range(presses):
            await self.page.press_key("PageDown")
            await self._wait(self.delay_ms / 3)

    async def _resize_scroll(self) -> None:
        original = await self.page.viewport()
        try:
            for width, height in RESIZE_VIEWPORTS:
                await self.page.set_viewport(width, height)
                await self._wait(self.delay_ms / 2)
                await self._scroll_bottom()
                await self._wait(self.delay_ms / 2)
        finally:
            await self.page.set_viewport(*original)
        await self._scroll_bottom()
