"""
DOM helpers shared by the extraction heuristics and the structure analyzer.

Visibility is approximated from markup alone: an element counts as hidden when
it or an ancestor carries the ``hidden`` attribute, ``aria-hidden="true"``, or
an inline ``display:none`` / ``visibility:hidden`` style.
"""

import re
from collections.abc import Iterator

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from pagescout.extraction.catalogs import NON_CONTENT_PATTERN

_HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)


def text_of(element: Tag) -> str:
    """Trimmed text content of an element."""
    return element.get_text().strip()


def is_hidden(element: Tag) -> bool:
    """Check whether an element or any ancestor is hidden."""
    node: Tag | None = element
    while isinstance(node, Tag):
        if node.has_attr("hidden"):
            return True
        if str(node.get("aria-hidden", "")).lower() == "true":
            return True
        style = node.get("style")
        if style and _HIDDEN_STYLE.search(str(style)):
            return True
        node = node.parent
    return False


def select(root: Tag, selector: str) -> list[Tag]:
    """CSS select that treats an unsupported selector as matching nothing."""
    try:
        return root.select(selector)
    except (SelectorSyntaxError, NotImplementedError):
        return []


def select_one(root: Tag, selector: str) -> Tag | None:
    """First match for a selector, or None."""
    try:
        return root.select_one(selector)
    except (SelectorSyntaxError, NotImplementedError):
        return None


def matches(element: Tag, selector: str) -> bool:
    """Check whether an element matches a selector."""
    try:
        return element.css.match(selector)
    except (SelectorSyntaxError, NotImplementedError):
        return False


def has_ancestor(element: Tag, selector: str) -> bool:
    """Check whether an element or an ancestor matches a selector."""
    try:
        return element.css.closest(selector) is not None
    except (SelectorSyntaxError, NotImplementedError):
        return False


def class_string(element: Tag) -> str:
    """The element's class attribute as a single string."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def looks_like_chrome(element: Tag) -> bool:
    """Check whether the element's id or class names it as navigation chrome."""
    element_id = element.get("id")
    if element_id and NON_CONTENT_PATTERN.search(str(element_id)):
        return True
    classes = class_string(element)
    return bool(classes and NON_CONTENT_PATTERN.search(classes))


def next_siblings(element: Tag) -> Iterator[Tag]:
    """Following element siblings, skipping text nodes."""
    sibling = element.find_next_sibling()
    while sibling is not None:
        yield sibling
        sibling = sibling.find_next_sibling()


def block_texts(container: Tag, selector: str) -> list[str]:
    """Non-empty text of every element under ``container`` matching ``selector``."""
    texts = []
    for element in select(container, selector):
        text = text_of(element)
        if text:
            texts.append(text)
    return texts


def blocks_or_raw_text(container: Tag, selector: str) -> list[str]:
    """
    Text of the structured blocks inside a container.

    Falls back to the container's raw text when it has no structured blocks.
    """
    texts = block_texts(container, selector)
    if texts:
        return texts
    raw = text_of(container)
    return [raw] if raw else []
