"""
Base types for the extraction heuristics.

Every heuristic is an Extractor that reads one DomSnapshot and returns text
fragments. Snapshots are parsed once per extraction pass from the serialized
live DOM.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from bs4 import BeautifulSoup

from pagescout.utils.text import normalize_fragment

# Elements whose text is never rendered as page content
NON_RENDERED_TAGS = ("script", "style", "noscript", "template")


@dataclass
class DomSnapshot:
    """
    One parsed view of the live DOM.

    ``json_ld`` holds every JSON-LD block that parsed successfully; malformed
    blocks are dropped. ``claimed`` holds normalized fragments that a heuristic
    has already emitted from structured data, so later heuristics in the same
    pass do not re-add them.
    """

    soup: BeautifulSoup
    url: str
    json_ld: list[Any] = field(default_factory=list)
    claimed: set[str] = field(default_factory=set)

    @classmethod
    def parse(cls, html: str, url: str) -> "DomSnapshot":
        """Parse serialized HTML into a snapshot."""
        soup = BeautifulSoup(html, "lxml")

        json_ld: list[Any] = []
        for script in soup.select('script[type="application/ld+json"]'):
            raw = script.string or script.get_text()
            try:
                json_ld.append(json.loads(raw))
            except (TypeError, ValueError):
                continue

        for tag in soup.find_all(list(NON_RENDERED_TAGS)):
            tag.decompose()

        return cls(soup=soup, url=url, json_ld=json_ld)

    def claim(self, texts: list[str]) -> None:
        """Mark fragments as owned by the current pass."""
        for text in texts:
            key = normalize_fragment(text)
            if key:
                self.claimed.add(key)

    def is_claimed(self, text: str) -> bool:
        return normalize_fragment(text) in self.claimed


class Extractor(ABC):
    """A single content heuristic scoped to one structural assumption."""

    name: ClassVar[str]

    @abstractmethod
    def extract(self, dom: DomSnapshot) -> list[str]:
        """
        Collect text fragments from the snapshot.

        Args:
            dom: Parsed DOM for this pass.

        Returns:
            Fragments in document order. May be empty.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
