"""
Layout-driven content heuristics.

Each class assumes one page layout (article element, main region, header and
footer frame, column grid and so on) and pulls text blocks from the region
that layout implies. They never consult each other; the ensemble unions
their output.
"""

from pagescout.extraction import catalogs
from pagescout.extraction.base import DomSnapshot, Extractor
from pagescout.extraction.dom import (
    block_texts,
    blocks_or_raw_text,
    has_ancestor,
    is_hidden,
    looks_like_chrome,
    matches,
    next_siblings,
    select,
    select_one,
    text_of,
)


class ArticleExtractor(Extractor):
    """Text blocks inside every ``<article>``."""

    name = "article"

    def extract(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        for article in select(dom.soup, "article"):
            results.extend(blocks_or_raw_text(article, catalogs.TEXT_BLOCK_SELECTOR))
        return results


class MainContentExtractor(Extractor):
    """Text blocks inside main regions (``<main>``, role=main, #content, ...)."""

    name = "main_content"

    def extract(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        for region in select(dom.soup, catalogs.MAIN_CONTENT_SELECTOR):
            results.extend(blocks_or_raw_text(region, catalogs.TEXT_BLOCK_SELECTOR))
        return results


class SemanticExtractor(Extractor):
    """
    Text from ARIA roles, schema.org item types and common content classes.

    Skips regions shorter than 100 characters, hidden regions and anything
    that looks like navigation chrome.
    """

    name = "semantic"

    min_region_length = 100
    min_raw_length = 150

    def extract(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        for selector in catalogs.SEMANTIC_SELECTORS:
            for element in select(dom.soup, selector):
                if len(text_of(element)) < self.min_region_length:
                    continue
                if is_hidden(element):
                    continue
                if matches(element, "nav, aside, header, footer") or looks_like_chrome(element):
                    continue

                texts = block_texts(element, catalogs.RICH_TEXT_SELECTOR)
                if texts:
                    results.extend(texts)
                elif len(text_of(element)) > self.min_raw_length:
                    results.append(text_of(element))
        return results


class HeaderFooterExtractor(Extractor):
    """Everything between the first ``<header>`` and the first ``<footer>``."""

    name = "header_footer"

    def extract(self, dom: DomSnapshot) -> list[str]:
        header = select_one(dom.soup, "header")
        footer = select_one(dom.soup, "footer")
        if header is None or footer is None:
            return []

        results: list[str] = []
        for sibling in next_siblings(header):
            if sibling is footer:
                break
            if not text_of(sibling) or matches(sibling, catalogs.HEADER_FOOTER_SKIP_SELECTOR):
                continue
            results.extend(blocks_or_raw_text(sibling, catalogs.TEXT_BLOCK_SELECTOR))
        return results


class MultiColumnExtractor(Extractor):
    """Text blocks from the column holding the most text."""

    name = "multi_column"

    def extract(self, dom: DomSnapshot) -> list[str]:
        best = None
        best_length = 0
        for column in select(dom.soup, catalogs.COLUMN_SELECTOR):
            length = len(text_of(column))
            if length > best_length:
                best, best_length = column, length

        if best is None:
            return []
        return blocks_or_raw_text(best, catalogs.TEXT_BLOCK_SELECTOR)


class ContentSectionsExtractor(Extractor):
    """Text blocks from every visible section or region."""

    name = "content_sections"

    def extract(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        for section in select(dom.soup, catalogs.SECTION_SELECTOR):
            if is_hidden(section):
                continue
            results.extend(blocks_or_raw_text(section, catalogs.TEXT_BLOCK_SELECTOR))
        return results


class SingleColumnExtractor(Extractor):
    """
    Text from the first single-column content container that has any.

    Without such a container, falls back to every text block in the body
    that is not inside header, footer, aside or navigation.
    """

    name = "single_column"

    def extract(self, dom: DomSnapshot) -> list[str]:
        for container in select(dom.soup, catalogs.SINGLE_COLUMN_SELECTOR):
            if is_hidden(container):
                continue
            texts = block_texts(container, catalogs.TEXT_BLOCK_SELECTOR)
            if texts:
                return texts

        body = dom.soup.body or dom.soup
        results: list[str] = []
        for element in select(body, catalogs.TEXT_BLOCK_SELECTOR):
            if has_ancestor(element, catalogs.SINGLE_COLUMN_EXCLUDED_ANCESTORS):
                continue
            text = text_of(element)
            if text:
                results.append(text)
        return results


class LargestContentExtractor(Extractor):
    """Text blocks from the block with the most paragraphs (then most text)."""

    name = "largest"

    def extract(self, dom: DomSnapshot) -> list[str]:
        best = None
        max_paragraphs = 0
        max_length = 0

        for element in select(dom.soup, catalogs.LARGEST_CANDIDATE_SELECTOR):
            if is_hidden(element):
                continue
            if matches(element, catalogs.LARGEST_EXCLUDED_SELECTOR) or looks_like_chrome(element):
                continue

            paragraphs = len(select(element, "p"))
            length = len(text_of(element))
            if paragraphs > max_paragraphs or (
                paragraphs == max_paragraphs and length > max_length
            ):
                best = element
                max_paragraphs = paragraphs
                max_length = length

        if best is None:
            return []
        return blocks_or_raw_text(best, catalogs.TEXT_BLOCK_SELECTOR)


class BasicExtractor(Extractor):
    """Unfiltered text of every content-bearing element."""

    name = "basic"

    def extract(self, dom: DomSnapshot) -> list[str]:
        return block_texts(dom.soup, catalogs.BASIC_SELECTOR)


class TextDensityExtractor(Extractor):
    """Rich text blocks of every container, or its raw text when it has none."""

    name = "text_density"

    def extract(self, dom: DomSnapshot) -> list[str]:
        results: list[str] = []
        for container in select(dom.soup, catalogs.DENSITY_CONTAINER_SELECTOR):
            results.extend(blocks_or_raw_text(container, catalogs.RICH_TEXT_SELECTOR))
        return results
