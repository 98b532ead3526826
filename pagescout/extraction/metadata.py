"""
Title, image and metadata extraction.

These run on every pass regardless of which content heuristics are enabled.
"""

from typing import Any

from pagescout.extraction.base import DomSnapshot
from pagescout.extraction.dom import select, select_one, text_of
from pagescout.models import ImageInfo
from pagescout.utils.url_utils import resolve_url


def extract_title(dom: DomSnapshot) -> str:
    """
    Derive the page title.

    First non-empty of: H1 text, document title, og:title, twitter:title.
    """
    h1 = select_one(dom.soup, "h1")
    if h1 is not None and text_of(h1):
        return text_of(h1)

    if dom.soup.title is not None and dom.soup.title.get_text().strip():
        return dom.soup.title.get_text().strip()

    for selector in ('meta[property="og:title"]', 'meta[name="twitter:title"]'):
        meta = select_one(dom.soup, selector)
        if meta is not None and str(meta.get("content", "")).strip():
            return str(meta["content"]).strip()

    return ""


def _dimension(value: Any) -> int:
    try:
        return int(float(str(value).rstrip("px")))
    except (TypeError, ValueError):
        return 0


def extract_images(dom: DomSnapshot) -> list[ImageInfo]:
    """
    Every image on the page, deduplicated by absolute URL.

    ``src`` is preferred over ``data-src``. Relative URLs resolve against the
    page URL.
    """
    images: list[ImageInfo] = []
    seen: set[str] = set()

    for img in select(dom.soup, "img"):
        src = str(img.get("src") or img.get("data-src") or "").strip()
        if not src:
            continue
        url = resolve_url(dom.url, src)
        if url in seen:
            continue
        seen.add(url)

        images.append(
            ImageInfo(
                url=url,
                alt=str(img.get("alt", "")),
                title=str(img.get("title", "")),
                width=_dimension(img.get("width")),
                height=_dimension(img.get("height")),
            )
        )

    return images


def extract_metadata(dom: DomSnapshot) -> dict[str, Any]:
    """
    Meta tags keyed by ``name`` or ``property``, plus parsed JSON-LD under ``jsonLd``.
    """
    metadata: dict[str, Any] = {}

    for meta in select(dom.soup, "meta"):
        key = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if key and content:
            metadata[str(key)] = str(content)

    if dom.json_ld:
        metadata["jsonLd"] = list(dom.json_ld)

    return metadata
