"""
Pytest configuration and shared fixtures.
"""

from collections.abc import Callable, Sequence
from typing import Any

import pytest
from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from pagescout.exceptions import DOMEvaluationError, NavigationError


# =============================================================================
# In-memory page handle
# =============================================================================


class FakePage:
    """
    PageHandle over a static HTML string.

    ``batches`` are HTML fragments appended to the body, one per scroll that
    reaches the bottom, each growing the page by ``batch_height``. ``clickable``
    maps a selector to the fragments successive clicks append; the selector
    stops being clickable once its fragments run out. ``pages`` maps URLs to
    the HTML served by goto(); any other URL fails with a 404.
    """

    def __init__(
        self,
        html: str,
        url: str = "https://example.com/",
        *,
        height: int = 2000,
        batches: Sequence[str] = (),
        batch_height: int = 1000,
        pages: dict[str, str] | None = None,
        clickable: dict[str, Sequence[str]] | None = None,
        viewport: tuple[int, int] = (1280, 800),
        intersection_observer: bool = False,
        image_area: int = 0,
        count_error: bool = False,
        content_error: bool = False,
    ):
        self._html = html
        self._url = url
        self.height = height
        self.batches = list(batches)
        self.batch_height = batch_height
        self.pages = dict(pages or {})
        self.clickable = {selector: list(f) for selector, f in (clickable or {}).items()}
        self._viewport = viewport
        self.intersection_observer = intersection_observer
        self.image_area = image_area
        self.count_error = count_error
        self.content_error = content_error

        self.position = (0, 0)
        self.scrolls: list[tuple[int, int]] = []
        self.waits: list[int] = []
        self.events: list[str] = []
        self.keys: list[str] = []
        self.viewports: list[tuple[int, int]] = []
        self.clicks: list[str] = []
        self.visited: list[str] = []
        self.hovers = 0

    # Helpers ----------------------------------------------------------------

    def append_html(self, fragment: str) -> None:
        index = self._html.rfind("</body>")
        if index == -1:
            self._html += fragment
        else:
            self._html = self._html[:index] + fragment + self._html[index:]

    def _check_bottom(self) -> None:
        if self.position[1] >= self.height - self._viewport[1] and self.batches:
            self.append_html(self.batches.pop(0))
            self.height += self.batch_height

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self._html, "lxml")

    # PageHandle -------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    async def content(self) -> str:
        if self.content_error:
            raise DOMEvaluationError("content", "page detached")
        return self._html

    async def title(self) -> str:
        soup = self._soup()
        return soup.title.get_text().strip() if soup.title else ""

    async def scroll_height(self, selector: str | None = None) -> int:
        return self.height

    async def scroll_position(self, selector: str | None = None) -> tuple[int, int]:
        return self.position

    async def scroll_to(self, x: int, y: int, selector: str | None = None) -> None:
        self.position = (x, y)
        self.scrolls.append(self.position)
        self._check_bottom()

    async def scroll_by(self, dx: int, dy: int, selector: str | None = None) -> None:
        await self.scroll_to(self.position[0] + dx, self.position[1] + dy, selector)

    async def viewport(self) -> tuple[int, int]:
        return self._viewport

    async def set_viewport(self, width: int, height: int) -> None:
        self._viewport = (width, height)
        self.viewports.append(self._viewport)

    async def layout_metrics(self) -> dict[str, Any]:
        return {
            "viewport_width": self._viewport[0],
            "viewport_height": self._viewport[1],
            "image_area": self.image_area,
            "document_height": self.height,
            "document_width": self._viewport[0],
        }

    async def dispatch_window_events(self, names: Sequence[str]) -> None:
        self.events.extend(names)

    async def dispatch_hover_all(self) -> None:
        self.hovers += 1

    async def press_key(self, key: str) -> None:
        self.keys.append(key)
        if key == "PageDown":
            await self.scroll_by(0, self._viewport[1])

    async def has_intersection_observer(self) -> bool:
        return self.intersection_observer

    async def count(self, selector: str) -> int:
        if self.count_error:
            raise DOMEvaluationError("count", "execution context destroyed")
        try:
            return len(self._soup().select(selector))
        except (SelectorSyntaxError, NotImplementedError):
            return 0

    async def is_clickable(self, selector: str) -> bool:
        return bool(self.clickable.get(selector))

    async def click(self, selector: str) -> bool:
        fragments = self.clickable.get(selector)
        if not fragments:
            return False
        self.clicks.append(selector)
        self.append_html(fragments.pop(0))
        return True

    async def goto(
        self,
        url: str,
        wait_until: str = "networkidle",
        timeout_seconds: float = 90.0,
    ) -> None:
        self.visited.append(url)
        if url not in self.pages:
            raise NavigationError(url, "HTTP 404", status_code=404)
        self._url = url
        self._html = self.pages[url]
        self.position = (0, 0)

    async def wait_for_selector(self, selector: str, timeout_seconds: float = 30.0) -> bool:
        return await self.count(selector) > 0

    async def wait(self, ms: int) -> None:
        self.waits.append(ms)


def html_page(body: str, title: str = "", head: str = "") -> str:
    """Wrap body markup in a full document."""
    return (
        f"<html><head><title>{title}</title>{head}</head>"
        f"<body>{body}</body></html>"
    )


@pytest.fixture
def make_page() -> Callable[..., FakePage]:
    """Factory for in-memory pages."""
    return FakePage


@pytest.fixture
def make_html() -> Callable[..., str]:
    """Factory for full HTML documents."""
    return html_page


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_html_article() -> str:
    """Sample article HTML for extraction testing."""
    return html_page(
        """
        <header><nav><a href="/">Home</a><a href="/about">About</a></nav></header>
        <main>
            <article>
                <h1>Understanding Lazy Loading</h1>
                <p class="byline">By Jane Doe</p>
                <p>Lazy loading defers the fetching of content until it is needed.</p>
                <p>Infinite feeds append items as the reader nears the bottom.</p>
                <blockquote>Scroll events are only one of several triggers.</blockquote>
            </article>
        </main>
        <footer><p>Copyright 2024 Example Corp</p></footer>
        """,
        title="Understanding Lazy Loading - Example Blog",
        head='<meta name="description" content="How lazy loading works">',
    )


@pytest.fixture
def sample_html_recipe() -> str:
    """Recipe page with a JSON-LD block and matching visible lists."""
    return html_page(
        """
        <div class="recipe">
            <ul class="ingredients"><li>1 cup flour</li></ul>
            <ol class="instructions"><li>Mix well</li></ol>
        </div>
        """,
        title="Simple Dough",
        head=(
            '<script type="application/ld+json">'
            '{"@type": "Recipe", "recipeIngredient": ["1 cup flour"], '
            '"recipeInstructions": ["Mix well"]}'
            "</script>"
        ),
    )


@pytest.fixture
def sample_html_product() -> str:
    """Product detail page."""
    return html_page(
        """
        <div class="product-details">
            <h1 class="product-title">Trail Runner 2</h1>
            <span class="price">$89.99</span>
            <div class="description">Light shoe built for rough trails.</div>
            <ul class="features"><li>Vibram outsole grip</li></ul>
            <button class="add-to-cart">Add to cart</button>
        </div>
        """,
        title="Trail Runner 2",
    )
