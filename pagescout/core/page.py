"""
Live page handle abstraction.

Everything the analyzer, the extraction ensemble and the pagination strategies
need from a browser goes through PageHandle. BrowserPage implements it on top
of a Playwright page; tests use an in-memory implementation.
"""

import asyncio
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from pagescout.exceptions import DOMEvaluationError, NavigationError, NavigationTimeoutError
from pagescout.utils.logging import ScraperLogger


@runtime_checkable
class PageHandle(Protocol):
    """A live, already-navigated page."""

    @property
    def url(self) -> str: ...

    async def content(self) -> str:
        """Serialized live DOM."""
        ...

    async def title(self) -> str: ...

    async def scroll_height(self, selector: str | None = None) -> int: ...

    async def scroll_position(self, selector: str | None = None) -> tuple[int, int]: ...

    async def scroll_to(self, x: int, y: int, selector: str | None = None) -> None: ...

    async def scroll_by(self, dx: int, dy: int, selector: str | None = None) -> None: ...

    async def viewport(self) -> tuple[int, int]: ...

    async def set_viewport(self, width: int, height: int) -> None: ...

    async def layout_metrics(self) -> dict[str, Any]:
        """Viewport size, rendered image area and document dimensions."""
        ...

    async def dispatch_window_events(self, names: Sequence[str]) -> None: ...

    async def dispatch_hover_all(self) -> None: ...

    async def press_key(self, key: str) -> None: ...

    async def has_intersection_observer(self) -> bool: ...

    async def count(self, selector: str) -> int: ...

    async def is_clickable(self, selector: str) -> bool:
        """Scroll the first match into view and report whether it can be clicked."""
        ...

    async def click(self, selector: str) -> bool: ...

    async def goto(
        self,
        url: str,
        wait_until: str = "networkidle",
        timeout_seconds: float = 90.0,
    ) -> None: ...

    async def wait_for_selector(self, selector: str, timeout_seconds: float = 30.0) -> bool: ...

    async def wait(self, ms: int) -> None: ...


# =============================================================================
# Playwright implementation
# =============================================================================

_SCROLL_ROOT_JS = """
(sel) => {
    if (sel) {
        const el = document.querySelector(sel);
        if (el) return el;
    }
    return document.scrollingElement || document.documentElement || document.body;
}
"""

_SCROLL_HEIGHT_JS = f"(sel) => {{ const el = ({_SCROLL_ROOT_JS})(sel); return el ? el.scrollHeight : 0; }}"

_SCROLL_POSITION_JS = f"""
(sel) => {{
    if (sel && document.querySelector(sel)) {{
        const el = ({_SCROLL_ROOT_JS})(sel);
        return [el.scrollLeft, el.scrollTop];
    }}
    return [window.scrollX, window.scrollY];
}}
"""

_SCROLL_TO_JS = """
([sel, x, y]) => {
    const el = sel ? document.querySelector(sel) : null;
    if (el) { el.scrollTo(x, y); } else { window.scrollTo(x, y); }
}
"""

_SCROLL_BY_JS = """
([sel, dx, dy]) => {
    const el = sel ? document.querySelector(sel) : null;
    if (el) { el.scrollBy(dx, dy); } else { window.scrollBy(dx, dy); }
}
"""

_LAYOUT_METRICS_JS = """
() => {
    const root = document.scrollingElement || document.documentElement;
    let imageArea = 0;
    for (const img of document.images) {
        imageArea += (img.width || 0) * (img.height || 0);
    }
    return {
        viewport_width: window.innerWidth,
        viewport_height: window.innerHeight,
        image_area: imageArea,
        document_height: root ? root.scrollHeight : 0,
        document_width: root ? root.scrollWidth : 0,
    };
}
"""

_DISPATCH_EVENTS_JS = """
(names) => {
    for (const name of names) {
        window.dispatchEvent(new Event(name));
        document.dispatchEvent(new Event(name));
    }
}
"""

_HOVER_ALL_JS = """
() => {
    for (const el of document.querySelectorAll('*')) {
        el.dispatchEvent(new MouseEvent('mouseover', {bubbles: true}));
        el.dispatchEvent(new MouseEvent('mouseenter', {bubbles: false}));
    }
}
"""

_CLICKABLE_JS = """
(el) => {
    el.scrollIntoView({block: 'center', inline: 'center'});
    const style = window.getComputedStyle(el);
    if (style.display === 'none' || style.visibility === 'hidden' || el.hidden) return false;
    const rect = el.getBoundingClientRect();
    if (rect.width === 0 || rect.height === 0) return false;
    return rect.bottom > 0 && rect.right > 0 &&
        rect.top < window.innerHeight && rect.left < window.innerWidth;
}
"""


class BrowserPage:
    """
    PageHandle backed by a Playwright async page.

    Playwright errors are translated into the pagescout exception hierarchy:
    DOM script failures raise DOMEvaluationError, navigation failures raise
    NavigationError.
    """

    def __init__(self, page: Any, logger: ScraperLogger | None = None):
        self._page = page
        self.logger = logger or ScraperLogger("browser_page")

    @property
    def raw(self) -> Any:
        """The underlying Playwright page."""
        return self._page

    @property
    def url(self) -> str:
        return self._page.url

    async def _evaluate(self, operation: str, expression: str, arg: Any = None) -> Any:
        from playwright.async_api import Error as PlaywrightError

        try:
            return await self._page.evaluate(expression, arg)
        except PlaywrightError as e:
            raise DOMEvaluationError(operation, str(e)) from e

    async def content(self) -> str:
        from playwright.async_api import Error as PlaywrightError

        try:
            return await self._page.content()
        except PlaywrightError as e:
            raise DOMEvaluationError("content", str(e)) from e

    async def title(self) -> str:
        from playwright.async_api import Error as PlaywrightError

        try:
            return await self._page.title()
        except PlaywrightError as e:
            raise DOMEvaluationError("title", str(e)) from e

    async def scroll_height(self, selector: str | None = None) -> int:
        return int(await self._evaluate("scroll_height", _SCROLL_HEIGHT_JS, selector) or 0)

    async def scroll_position(self, selector: str | None = None) -> tuple[int, int]:
        x, y = await self._evaluate("scroll_position", _SCROLL_POSITION_JS, selector)
        return int(x), int(y)

    async def scroll_to(self, x: int, y: int, selector: str | None = None) -> None:
        await self._evaluate("scroll_to", _SCROLL_TO_JS, [selector, x, y])

    async def scroll_by(self, dx: int, dy: int, selector: str | None = None) -> None:
        await self._evaluate("scroll_by", _SCROLL_BY_JS, [selector, dx, dy])

    async def viewport(self) -> tuple[int, int]:
        size = self._page.viewport_size
        if size:
            return size["width"], size["height"]
        width, height = await self._evaluate(
            "viewport", "() => [window.innerWidth, window.innerHeight]"
        )
        return int(width), int(height)

    async def set_viewport(self, width: int, height: int) -> None:
        from playwright.async_api import Error as PlaywrightError

        try:
            await self._page.set_viewport_size({"width": width, "height": height})
        except PlaywrightError as e:
            raise DOMEvaluationError("set_viewport", str(e)) from e

    async def layout_metrics(self) -> dict[str, Any]:
        return await self._evaluate("layout_metrics", _LAYOUT_METRICS_JS)

    async def dispatch_window_events(self, names: Sequence[str]) -> None:
        await self._evaluate("dispatch_window_events", _DISPATCH_EVENTS_JS, list(names))

    async def dispatch_hover_all(self) -> None:
        await self._evaluate("dispatch_hover_all", _HOVER_ALL_JS)

    async def press_key(self, key: str) -> None:
        from playwright.async_api import Error as PlaywrightError

        try:
            await self._page.keyboard.press(key)
        except PlaywrightError as e:
            raise DOMEvaluationError("press_key", str(e)) from e

    async def has_intersection_observer(self) -> bool:
        return bool(
            await self._evaluate(
                "has_intersection_observer",
                "() => typeof IntersectionObserver !== 'undefined'",
            )
        )

    async def count(self, selector: str) -> int:
        from playwright.async_api import Error as PlaywrightError

        try:
            return await self._page.locator(selector).count()
        except PlaywrightError as e:
            raise DOMEvaluationError("count", str(e)) from e

    async def is_clickable(self, selector: str) -> bool:
        from playwright.async_api import Error as PlaywrightError

        locator = self._page.locator(selector).first
        try:
            if await locator.count() == 0:
                return False
            return bool(await locator.evaluate(_CLICKABLE_JS))
        except PlaywrightError as e:
            self.logger.debug("Clickability check failed", selector=selector, error=str(e))
            return False

    async def click(self, selector: str) -> bool:
        from playwright.async_api import Error as PlaywrightError

        try:
            await self._page.locator(selector).first.click(timeout=5000)
            return True
        except PlaywrightError as e:
            self.logger.debug("Click failed", selector=selector, error=str(e))
            return False

    async def goto(
        self,
        url: str,
        wait_until: str = "networkidle",
        timeout_seconds: float = 90.0,
    ) -> None:
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            response = await self._page.goto(
                url,
                wait_until=wait_until,
                timeout=timeout_seconds * 1000,  # Convert to ms
            )
        except PlaywrightTimeoutError as e:
            raise NavigationTimeoutError(url, timeout_seconds) from e
        except PlaywrightError as e:
            raise NavigationError(url, str(e)) from e

        if response is not None and response.status >= 400:
            raise NavigationError(url, f"HTTP {response.status}", status_code=response.status)

    async def wait_for_selector(self, selector: str, timeout_seconds: float = 30.0) -> bool:
        from playwright.async_api import Error as PlaywrightError

        try:
            await self._page.wait_for_selector(selector, timeout=timeout_seconds * 1000)
            return True
        except PlaywrightError as e:
            # TimeoutError is a subclass of Error
            self.logger.debug("Selector wait abandoned", selector=selector, error=str(e))
            return False

    async def wait(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)
