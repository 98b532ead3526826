"""
Extraction ensemble.

Runs the registry of content heuristics against a fresh snapshot of the live
DOM on every call and merges new fragments into the session document.
"""

from collections.abc import Iterable, Sequence

from pagescout.core.page import PageHandle
from pagescout.extraction.base import DomSnapshot, Extractor
from pagescout.extraction.detectors import detect_structure_type
from pagescout.extraction.generic import (
    ArticleExtractor,
    BasicExtractor,
    ContentSectionsExtractor,
    HeaderFooterExtractor,
    LargestContentExtractor,
    MainContentExtractor,
    MultiColumnExtractor,
    SemanticExtractor,
    SingleColumnExtractor,
    TextDensityExtractor,
)
from pagescout.extraction.metadata import extract_images, extract_metadata, extract_title
from pagescout.extraction.recipe import RecipeExtractor
from pagescout.extraction.specialized import DocumentationExtractor, ProductExtractor
from pagescout.models import PageDocument, StrategyRecommendation
from pagescout.utils import metrics
from pagescout.utils.logging import ScraperLogger
from pagescout.utils.text import normalize_fragment
from pagescout.utils.url_utils import get_domain


def default_extractors() -> tuple[Extractor, ...]:
    """The built-in heuristics in their declared run order."""
    return (
        RecipeExtractor(),
        ArticleExtractor(),
        MainContentExtractor(),
        SemanticExtractor(),
        HeaderFooterExtractor(),
        MultiColumnExtractor(),
        ContentSectionsExtractor(),
        SingleColumnExtractor(),
        LargestContentExtractor(),
        ProductExtractor(),
        DocumentationExtractor(),
        BasicExtractor(),
        TextDensityExtractor(),
    )


EXTRACTOR_NAMES: tuple[str, ...] = tuple(e.name for e in default_extractors())


class ExtractionEnsemble:
    """
    Repeatable, additive content extraction for one page session.

    Each ``extract()`` call snapshots the live DOM, runs every enabled
    heuristic in order, and appends fragments not already in the document.
    Content is never removed.

    Priority and skip lists narrow a pass: skipped heuristics never run,
    priority heuristics run first, and once they have produced
    ``priority_min_fragments`` new fragments the rest are skipped.

    Heuristics named in ``PINNED_FIRST`` read structured data and claim what
    they emit, so they run ahead of everything else on every pass and are
    never skipped.
    """

    PINNED_FIRST: tuple[str, ...] = ("recipe",)

    def __init__(
        self,
        page: PageHandle,
        document: PageDocument | None = None,
        extractors: Sequence[Extractor] | None = None,
        scrape_images: bool = True,
        priority_min_fragments: int = 20,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the ensemble.

        Args:
            page: Live page handle.
            document: Session document to grow (a new one if None).
            extractors: Heuristic registry; defaults to the built-in order.
            scrape_images: Whether to collect images on each pass.
            priority_min_fragments: New fragments from priority heuristics
                that end a pass early.
            logger: Logger instance.
        """
        self.page = page
        self.document = document or PageDocument(url=page.url)
        self.extractors: tuple[Extractor, ...] = tuple(extractors or default_extractors())
        self.scrape_images = scrape_images
        self.priority_min_fragments = priority_min_fragments
        self.logger = logger or ScraperLogger("extraction_ensemble")

        self.priority: list[str] = []
        self.skip: set[str] = set()
        self.passes = 0

        names = [e.name for e in self.extractors]
        if len(set(names)) != len(names):
            raise ValueError(f"Extractor names must be unique: {names}")

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_preferences(
        self,
        priority: Iterable[str] = (),
        skip: Iterable[str] = (),
    ) -> None:
        """Set the priority and skip lists. Unknown names are ignored."""
        known = {e.name for e in self.extractors} - set(self.PINNED_FIRST)
        self.skip = {name for name in skip if name in known}
        self.priority = [name for name in priority if name in known and name not in self.skip]

    def apply_recommendation(self, recommendation: StrategyRecommendation | None) -> None:
        """Adopt an analyzer recommendation's priority and skip lists."""
        if recommendation is None:
            self.set_preferences()
            return
        self.set_preferences(recommendation.extractor_priority, recommendation.skip_extractors)

    def _ordered(self) -> tuple[list[Extractor], list[Extractor], list[Extractor]]:
        """Split enabled heuristics into (pinned, priority, rest), each in run order."""
        by_name = {e.name: e for e in self.extractors}
        pinned = [e for e in self.extractors if e.name in self.PINNED_FIRST]
        priority = [by_name[name] for name in self.priority]
        rest = [
            e
            for e in self.extractors
            if e.name not in self.PINNED_FIRST
            and e.name not in self.skip
            and e.name not in self.priority
        ]
        return pinned, priority, rest

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    async def snapshot(self) -> DomSnapshot:
        """Parse the live DOM."""
        html = await self.page.content()
        return DomSnapshot.parse(html, self.page.url)

    def _run(self, extractor: Extractor, dom: DomSnapshot) -> list[str]:
        """Run one heuristic in isolation. Claimed fragments are filtered out."""
        claimed_before = frozenset(dom.claimed)
        try:
            fragments = extractor.extract(dom)
        except Exception as e:
            self.logger.extractor_failed(extractor.name, str(e), url=dom.url)
            metrics.record_extractor_failure(extractor.name)
            return []

        if not claimed_before:
            return list(fragments)
        return [f for f in fragments if normalize_fragment(f) not in claimed_before]

    def _count_new(self, fragments: list[str]) -> int:
        seen: set[str] = set()
        for fragment in fragments:
            key = normalize_fragment(fragment)
            if key and not self.document.has_fragment(key):
                seen.add(key)
        return len(seen)

    async def extract(self) -> PageDocument:
        """
        Run one extraction pass.

        Never raises: a snapshot failure leaves the document unchanged.

        Returns:
            The session document.
        """
        try:
            dom = await self.snapshot()
        except Exception as e:
            self.logger.warning("DOM snapshot failed", url=self.page.url, error=str(e))
            return self.document

        if not self.document.url:
            self.document.url = self.page.url

        if not self.document.title:
            self.document.title = extract_title(dom)

        pinned, priority, rest = self._ordered()
        fragments: list[str] = []

        for extractor in pinned + priority:
            fragments.extend(self._run(extractor, dom))

        if priority and self._count_new(fragments) >= self.priority_min_fragments:
            self.logger.debug(
                "Priority extractors satisfied pass",
                url=dom.url,
                skipped=[e.name for e in rest],
            )
        else:
            for extractor in rest:
                fragments.extend(self._run(extractor, dom))

        if self.scrape_images:
            self.document.add_images(extract_images(dom))

        added = self.document.add_fragments(fragments)
        self.document.merge_metadata(extract_metadata(dom))
        self.passes += 1
        metrics.record_extraction_pass(get_domain(dom.url), added)

        self.logger.extraction_pass(
            url=dom.url,
            new_fragments=added,
            total_fragments=len(self.document.content),
            images=len(self.document.images),
            pass_number=self.passes,
        )

        return self.document

    async def detect_structure_type(self) -> str | None:
        """
        Tag the document as recipe, product or documentation when detected.

        Returns:
            The detected structure type, or None.
        """
        try:
            dom = await self.snapshot()
        except Exception as e:
            self.logger.debug("Structure detection skipped", url=self.page.url, error=str(e))
            return None

        structure_type = detect_structure_type(dom)
        if structure_type:
            self.document.structure_type = structure_type
        return structure_type
