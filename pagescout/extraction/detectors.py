"""
Page structure detectors used to tag a document with its structure type.

Unlike the analyzer's content-type scoring, each detector answers a yes/no
question with its own thresholds.
"""

import re
from dataclasses import dataclass

from pagescout.extraction import catalogs
from pagescout.extraction.base import DomSnapshot
from pagescout.extraction.dom import is_hidden, select, select_one, text_of
from pagescout.extraction.recipe import find_recipe_object

_COOKING_TIME = re.compile(r"prep time|cook time|total time|minute|hour", re.IGNORECASE)
_MEASUREMENTS = re.compile(r"cup|tablespoon|teaspoon|pound|ounce|gram|ml|tbsp|tsp", re.IGNORECASE)
_NUMBERED_STEPS = re.compile(r"step \d|direction \d|\d\.\s+[A-Z]", re.IGNORECASE)
_INGREDIENT_WORDS = re.compile(
    r"flour|sugar|butter|salt|oil|eggs|milk|water|vanilla|baking powder|baking soda",
    re.IGNORECASE,
)
_RECIPE_HEADINGS = ("ingredient", "instruction", "direction", "method", "preparation")

# Extra REI markers, each worth two indicators
_REI_MARKERS = (
    "#buy-box",
    '[data-id="buy-box"]',
    ".product-color-chips",
    "#size-variation",
    ".product-specifications",
    '[data-ui="recently-viewed"]',
)


def detect_product_structure(dom: DomSnapshot) -> bool:
    """Two indicators, or one strong indicator, mark a product page."""
    indicators = 0

    for selector in catalogs.PRODUCT_STRUCTURE_INDICATORS:
        if not select(dom.soup, selector):
            continue
        indicators += 1
        strong = selector == '[itemtype*="Product"]' or any(
            marker in selector for marker in catalogs.PRODUCT_STRONG_INDICATOR_MARKERS
        )
        if strong or indicators >= 2:
            return True

    url = dom.url.lower()
    for pattern in catalogs.PRODUCT_URL_PATTERNS:
        if pattern in url:
            indicators += 1
            if indicators >= 2:
                return True

    if catalogs.PRICE_TEXT_PATTERN.search(dom.soup.get_text()):
        indicators += 1
        if indicators >= 2:
            return True

    if select(dom.soup, ".social-sharing, .share-buttons, [data-share]"):
        indicators += 1

    if "rei.com" in url:
        for selector in _REI_MARKERS:
            if select_one(dom.soup, selector) is not None:
                indicators += 2
                break

    return indicators >= 2


def detect_documentation_structure(dom: DomSnapshot) -> bool:
    """Documentation markers inside substantial content, a TOC, or a docs URL."""
    for selector in catalogs.DOCUMENTATION_STRUCTURE_INDICATORS:
        for element in select(dom.soup, selector):
            if is_hidden(element) or len(text_of(element)) <= 200:
                continue
            if any(select(element, marker) for marker in catalogs.DOCUMENTATION_MARKER_SELECTORS):
                return True

    if select(dom.soup, catalogs.DOCUMENTATION_TOC_SELECTOR):
        return True

    url = dom.url.lower()
    if any(pattern in url for pattern in catalogs.DOCUMENTATION_URL_PATTERNS):
        for section in select(dom.soup, 'article, .content, #content, main, [role="main"]'):
            if len(text_of(section)) > 300:
                return True

    if "mozilla.org" in url or "mdn." in url:
        if select(dom.soup, "#content, #wikiArticle, .article, .wiki-content"):
            return True

    return False


@dataclass
class RecipeStructure:
    """Breakdown of the recipe structure score."""

    score: int = 0
    has_schema: bool = False
    has_elements: bool = False
    has_recipe_url: bool = False
    has_recipe_content: bool = False
    has_recipe_headings: bool = False

    @property
    def is_recipe(self) -> bool:
        return self.score >= 8 or self.has_recipe_url


def detect_recipe_structure(dom: DomSnapshot) -> RecipeStructure:
    """Score recipe signals from schema, markup, URL and body text."""
    result = RecipeStructure()
    body_text = dom.soup.get_text()

    result.has_schema = find_recipe_object(dom.json_ld) is not None
    result.has_elements = any(
        select_one(dom.soup, selector) is not None for selector in catalogs.RECIPE_STRUCTURE_SELECTORS
    )
    result.has_recipe_url = bool(catalogs.RECIPE_URL_PATTERN.search(dom.url))

    has_ingredients_word = re.search(r"ingredients", body_text, re.IGNORECASE) is not None
    has_cooking_time = _COOKING_TIME.search(body_text) is not None
    has_measurements = _MEASUREMENTS.search(body_text) is not None
    has_numbered_steps = (
        len(select(dom.soup, "ol li")) > 3 or _NUMBERED_STEPS.search(body_text) is not None
    )
    has_ingredient_words = _INGREDIENT_WORDS.search(body_text) is not None

    result.has_recipe_content = (
        has_ingredients_word
        or (has_measurements and has_numbered_steps)
        or (has_ingredient_words and has_numbered_steps)
    )

    headings = [text_of(h).lower() for h in select(dom.soup, ", ".join(catalogs.HEADING_TAGS))]
    result.has_recipe_headings = any(
        keyword in heading for heading in headings for keyword in _RECIPE_HEADINGS
    )

    for flag, weight in (
        (result.has_schema, 10),
        (result.has_elements, 5),
        (result.has_recipe_url, 3),
        (result.has_recipe_content, 5),
        (result.has_recipe_headings, 5),
        (has_ingredients_word, 3),
        (has_measurements, 2),
        (has_numbered_steps, 3),
        (has_cooking_time, 2),
        (has_ingredient_words, 2),
    ):
        if flag:
            result.score += weight

    return result


def detect_structure_type(dom: DomSnapshot) -> str | None:
    """Recipe, product or documentation, checked in that order."""
    if detect_recipe_structure(dom).is_recipe:
        return "recipe"
    if detect_product_structure(dom):
        return "product"
    if detect_documentation_structure(dom):
        return "documentation"
    return None
