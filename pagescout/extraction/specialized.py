"""
Product and documentation heuristics.

Both try hostname-specific overrides first, then a generic selector cascade,
then a last-resort rule.
"""

from typing import Any

from bs4 import Tag

from pagescout.extraction import catalogs
from pagescout.extraction.base import DomSnapshot, Extractor
from pagescout.extraction.dom import (
    block_texts,
    is_hidden,
    next_siblings,
    select,
    select_one,
    text_of,
)
from pagescout.utils.url_utils import get_hostname


def _host_override(url: str, table: dict[str, Any]) -> Any:
    """Entry of an override table whose key appears in the URL's host (or URL)."""
    host = get_hostname(url)
    lowered = url.lower()
    for key, value in table.items():
        if key in host or key in lowered:
            return value
    return None


def _first_text(root: Tag, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        element = select_one(root, selector)
        if element is not None and text_of(element):
            return text_of(element)
    return ""


class ProductExtractor(Extractor):
    """Labelled product facts: title, brand, price, description, features."""

    name = "product"

    min_feature_length = 10
    max_feature_length = 500
    container_min_length = 50
    container_excerpt_length = 500
    last_resort_limit = 10

    def extract(self, dom: DomSnapshot) -> list[str]:
        override = _host_override(dom.url, catalogs.PRODUCT_HOST_OVERRIDES)
        if override:
            results = self._from_override(dom, override)
            if results:
                return results

        results = self._from_cascade(dom)

        if len(results) < 3:
            self._from_containers(dom, results)

        if len(results) < 2:
            self._last_resort(dom, results)

        return results

    def _from_override(self, dom: DomSnapshot, override: dict) -> list[str]:
        results: list[str] = []
        soup = dom.soup

        title = _first_text(soup, override.get("title", ()))
        if title:
            results.append(f"Product Title: {title}")
        brand = _first_text(soup, override.get("brand", ()))
        if brand:
            results.append(f"Brand: {brand}")
        price = _first_text(soup, override.get("price", ()))
        if price:
            results.append(f"Price: {price}")
        description = _first_text(soup, override.get("description", ()))
        if description:
            results.append(f"Description: {description}")

        spec_selector = override.get("spec_sections")
        if spec_selector:
            for section in select(soup, spec_selector):
                heading = section.find_previous_sibling()
                if heading is not None and text_of(heading):
                    results.append(f"Section: {text_of(heading)}")
                for item in block_texts(section, "li, p"):
                    results.append(f"- {item}")

        return results

    def _from_cascade(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        soup = dom.soup

        title = _first_text(soup, catalogs.PRODUCT_TITLE_SELECTORS)
        if title:
            results.append(f"Product Title: {title}")

        price = _first_text(soup, catalogs.PRODUCT_PRICE_SELECTORS)
        if price:
            results.append(f"Price: {price}")

        for selector in catalogs.PRODUCT_DESCRIPTION_SELECTORS:
            for text in block_texts(soup, selector):
                results.append(f"Description: {text}")

        for selector in catalogs.PRODUCT_FEATURE_SELECTORS:
            for text in block_texts(soup, f"{selector} li, {selector} p, {selector} div"):
                if self.min_feature_length < len(text) < self.max_feature_length:
                    results.append(f"Feature: {text}")

        return results

    def _from_containers(self, dom: DomSnapshot, results: list[str]) -> None:
        for container in select(dom.soup, catalogs.PRODUCT_CONTAINER_SELECTOR):
            container_text = text_of(container)
            if is_hidden(container) or len(container_text) < self.container_min_length:
                continue

            blocks = select(container, "p, li, h3, h4, h5, h6")
            for block in blocks:
                text = text_of(block)
                if len(text) > self.min_feature_length and text not in results:
                    results.append(text)

            if not blocks:
                excerpt = container_text[: self.container_excerpt_length]
                if len(container_text) > self.container_excerpt_length:
                    excerpt += "..."
                results.append(excerpt)

    def _last_resort(self, dom: DomSnapshot, results: list[str]) -> None:
        h1 = select_one(dom.soup, "h1")
        if h1 is None:
            return

        title = text_of(h1)
        if title and not any(title in r for r in results):
            results.append(f"Product Title: {title}")

        for sibling in next_siblings(h1):
            if len(results) >= self.last_resort_limit:
                break
            if sibling.name not in ("p", "div"):
                continue
            text = text_of(sibling)
            if len(text) > 20 and text not in results:
                results.append(text)


class DocumentationExtractor(Extractor):
    """Titles, section headings and the blocks under each heading."""

    name = "documentation"

    fallback_min_length = 300
    enough_results = 5

    def extract(self, dom: DomSnapshot) -> list[str]:
        override = _host_override(dom.url, catalogs.DOCUMENTATION_HOST_OVERRIDES)
        if override:
            results = self._from_override(dom, override)
            if results:
                return results

        results: list[str] = []
        for selector in catalogs.DOCUMENTATION_SELECTORS:
            for element in select(dom.soup, selector):
                if is_hidden(element):
                    continue

                title = select_one(element, "h1, h2")
                if title is not None and text_of(title):
                    entry = f"Title: {text_of(title)}"
                    if entry not in results:
                        results.append(entry)

                if select(element, ", ".join(catalogs.SECTION_HEADING_TAGS)):
                    results.extend(self._sections(element))
                else:
                    results.extend(
                        block_texts(element, ", ".join(catalogs.DOCUMENTATION_BLOCK_TAGS))
                    )

                if len(results) > self.enough_results:
                    return results

        if len(results) < 3:
            self._fallback(dom, results)

        return results

    def _from_override(self, dom: DomSnapshot, container_selector: str) -> list[str]:
        main = select_one(dom.soup, container_selector)
        if main is None:
            return []

        results: list[str] = []
        h1 = select_one(dom.soup, "h1")
        if h1 is not None and text_of(h1):
            results.append(f"Title: {text_of(h1)}")
        results.extend(self._sections(main))
        return results

    def _sections(self, root: Tag) -> list[str]:
        """Each section heading followed by the blocks up to the next heading."""
        results: list[str] = []
        for heading in select(root, ", ".join(catalogs.SECTION_HEADING_TAGS)):
            heading_text = text_of(heading)
            if not heading_text:
                continue
            results.append(heading_text)
            for sibling in next_siblings(heading):
                if sibling.name in catalogs.SECTION_HEADING_TAGS:
                    break
                if sibling.name in catalogs.DOCUMENTATION_BLOCK_TAGS:
                    text = text_of(sibling)
                    if text:
                        results.append(text)
        return results

    def _fallback(self, dom: DomSnapshot, results: list[str]) -> None:
        for container in select(dom.soup, catalogs.DOCUMENTATION_FALLBACK_CONTAINER_SELECTOR):
            if is_hidden(container) or len(text_of(container)) < self.fallback_min_length:
                continue

            title = select_one(container, "h1, h2")
            if title is not None and text_of(title):
                entry = f"Title: {text_of(title)}"
                if entry not in results:
                    results.append(entry)

            selector = ", ".join(catalogs.DOCUMENTATION_BLOCK_TAGS + catalogs.SECTION_HEADING_TAGS)
            for text in block_texts(container, selector):
                if text not in results:
                    results.append(text)

            if len(results) > self.enough_results:
                break
