"""Text normalization shared by every deduplication site."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_fragment(text: str | None) -> str:
    """
    Canonical form of a content fragment.

    Strips the ends and collapses internal whitespace runs to a single space.
    Case is preserved. This is both the stored form and the dedup key.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()
