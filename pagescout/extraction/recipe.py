"""
Recipe heuristic.

Structured data wins: a JSON-LD Recipe object is rendered as headed
ingredient and instruction lists. Without one, the heuristic walks selector
cascades and finally heading-relative siblings in the DOM.

The raw ingredient and instruction texts are claimed on the snapshot so that
heuristics running later in the same pass do not repeat them.
"""

from typing import Any

from bs4 import Tag

from pagescout.extraction import catalogs
from pagescout.extraction.base import DomSnapshot, Extractor
from pagescout.extraction.dom import next_siblings, select, select_one, text_of


def _has_recipe_type(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if item_type == "Recipe":
        return True
    return isinstance(item_type, list) and "Recipe" in item_type


def find_recipe_object(json_ld: list[Any]) -> dict[str, Any] | None:
    """
    Locate a Recipe object among parsed JSON-LD blocks.

    Accepts a direct ``@type``, an array-valued ``@type``, or an entry of an
    ``@graph`` array. Top-level arrays of objects are searched too.
    """
    for block in json_ld:
        candidates = block if isinstance(block, list) else [block]
        for candidate in candidates:
            if _has_recipe_type(candidate):
                return candidate
            if isinstance(candidate, dict) and isinstance(candidate.get("@graph"), list):
                for item in candidate["@graph"]:
                    if _has_recipe_type(item):
                        return item
    return None


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _instruction_texts(instructions: Any) -> list[str]:
    """Flatten recipeInstructions (strings, HowToStep, HowToSection) to texts."""
    texts: list[str] = []
    for instruction in _as_list(instructions):
        if isinstance(instruction, str):
            text = instruction.strip()
        elif isinstance(instruction, dict):
            if instruction.get("@type") == "HowToSection":
                texts.extend(_instruction_texts(instruction.get("itemListElement")))
                continue
            text = str(instruction.get("text") or "").strip()
        else:
            continue
        if text:
            texts.append(text)
    return texts


def _format_field(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class RecipeExtractor(Extractor):
    """Ingredients and instructions, preferring JSON-LD over DOM heuristics."""

    name = "recipe"

    min_ingredient_length = 3
    min_instruction_length = 10
    min_paragraph_length = 20

    def extract(self, dom: DomSnapshot) -> list[str]:
        content: list[str] = []

        h1 = select_one(dom.soup, "h1")
        if h1 is not None and text_of(h1):
            content.append(text_of(h1))

        recipe = find_recipe_object(dom.json_ld)
        if recipe is not None:
            return content + self._from_structured_data(recipe, dom)

        return content + self._from_dom(dom)

    def _from_structured_data(self, recipe: dict[str, Any], dom: DomSnapshot) -> list[str]:
        content: list[str] = []

        description = recipe.get("description")
        if isinstance(description, str) and description.strip():
            content.append(description.strip())

        ingredients = [
            str(item).strip() for item in _as_list(recipe.get("recipeIngredient")) if str(item).strip()
        ]
        content.append("Ingredients")
        content.extend(ingredients)

        instructions = _instruction_texts(recipe.get("recipeInstructions"))
        content.append("Instructions")
        content.extend(f"{index}. {text}" for index, text in enumerate(instructions, start=1))

        info = []
        for key, label in (
            ("prepTime", "Prep Time"),
            ("cookTime", "Cook Time"),
            ("totalTime", "Total Time"),
            ("recipeYield", "Servings"),
        ):
            if recipe.get(key):
                info.append(f"{label}: {_format_field(recipe[key])}")
        if info:
            content.append("Recipe Information")
            content.extend(info)

        dom.claim(ingredients + instructions)
        return content

    def _from_dom(self, dom: DomSnapshot) -> list[str]:
        container = self._find_container(dom)

        ingredients = self._find_ingredients(container)
        instructions = self._find_instructions(container)
        dom.claim(ingredients + instructions)

        content: list[str] = []
        if ingredients:
            content.append("Ingredients")
            content.extend(ingredients)

        if instructions:
            content.append("Instructions")
            for index, text in enumerate(instructions, start=1):
                if catalogs.NUMBERED_STEP_PATTERN.match(text):
                    content.append(text)
                else:
                    content.append(f"{index}. {text}")

        if not content:
            for paragraph in select(container, "p"):
                text = text_of(paragraph)
                if len(text) > self.min_paragraph_length:
                    content.append(text)

        return content

    def _find_container(self, dom: DomSnapshot) -> Tag:
        for selector in catalogs.RECIPE_CONTAINER_SELECTORS:
            container = select_one(dom.soup, selector)
            if container is not None:
                return container
        return dom.soup.body or dom.soup

    def _find_ingredients(self, container: Tag) -> list[str]:
        for selector in catalogs.INGREDIENT_SELECTORS:
            items = [
                text
                for text in (text_of(el) for el in select(container, selector))
                if catalogs.MEASUREMENT_PATTERN.search(text) or len(text) > self.min_ingredient_length
            ]
            if items:
                return items

        return self._walk_after_heading(
            container, catalogs.INGREDIENT_HEADING_PATTERN, self.min_ingredient_length
        )

    def _find_instructions(self, container: Tag) -> list[str]:
        for selector in catalogs.INSTRUCTION_SELECTORS:
            items = [
                text
                for text in (text_of(el) for el in select(container, selector))
                if len(text) > self.min_instruction_length
            ]
            if items:
                return items

        for selector in catalogs.INSTRUCTION_CONTAINER_SELECTORS:
            block = select_one(container, selector)
            if block is None:
                continue
            items = [
                text
                for text in (text_of(p) for p in select(block, "p"))
                if len(text) > self.min_instruction_length
            ]
            if items:
                return items

        return self._walk_after_heading(
            container, catalogs.INSTRUCTION_HEADING_PATTERN, self.min_instruction_length
        )

    def _walk_after_heading(self, container: Tag, pattern, min_length: int) -> list[str]:
        """Collect list items or paragraphs following the first matching heading."""
        for heading in select(container, ", ".join(catalogs.HEADING_TAGS)):
            if not pattern.search(text_of(heading)):
                continue

            items: list[str] = []
            for sibling in next_siblings(heading):
                if sibling.name in catalogs.HEADING_TAGS:
                    break
                if sibling.name in ("ul", "ol"):
                    listed = [
                        text_of(li) for li in select(sibling, "li") if len(text_of(li)) > min_length
                    ]
                    if listed:
                        items = listed
                        break
                elif sibling.name == "p":
                    text = text_of(sibling)
                    if len(text) > min_length:
                        items.append(text)
            if items:
                return items
        return []
