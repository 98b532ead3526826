"""
URL manipulation utilities for pagescout.

Provides domain extraction, resolution and the page-number URL builders used
by the URL-based pagination strategies.
"""

import re
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

# Query/path shapes that indicate server-side pagination
URL_PAGINATION_PATTERNS: dict[str, re.Pattern[str]] = {
    "page_param": re.compile(r"[?&](p|page|pg)=\d+"),
    "page_path_segment": re.compile(r"/page/\d+"),
    "numeric_path_end": re.compile(r"/\d+$"),
    "offset_param": re.compile(r"[?&]offset=\d+"),
    "start_param": re.compile(r"[?&]start=\d+"),
    "limit_param": re.compile(r"[?&]limit=\d+"),
}

# Flags that mean "increment a query parameter" rather than "walk a path"
QUERY_PAGINATION_KEYS = ("page_param", "offset_param", "start_param", "limit_param")


def get_domain(url: str) -> str:
    """
    Extract the domain (host) from a URL.

    Args:
        url: The URL to extract domain from.

    Returns:
        The domain/host portion of the URL.
    """
    parsed = urlparse(url)
    return parsed.netloc.lower()


def get_hostname(url: str) -> str:
    """Extract the hostname (no port, no credentials) from a URL."""
    return (urlparse(url).hostname or "").lower()


def resolve_url(base_url: str, relative_url: str) -> str:
    """
    Resolve a relative URL against a base URL.

    Args:
        base_url: The base URL to resolve against.
        relative_url: The relative URL to resolve.

    Returns:
        The resolved absolute URL, or the input unchanged if it cannot be resolved.
    """
    try:
        return urljoin(base_url, relative_url)
    except ValueError:
        return relative_url


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid and has an HTTP(S) scheme.

    Args:
        url: The URL to validate.

    Returns:
        True if URL can be navigated to.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def strip_query_and_fragment(url: str) -> str:
    """Return the URL without its query string and fragment."""
    parsed = urlparse(url)
    return urlunparse((parsed.scheme, parsed.netloc, parsed.path, "", "", ""))


def with_query_param(url: str, name: str, value: int | str) -> str:
    """
    Set a query parameter on a URL, replacing any existing value.

    Args:
        url: Base URL.
        name: Parameter name (e.g. "page").
        value: Parameter value.

    Returns:
        URL with the parameter set.
    """
    parsed = urlparse(url)
    params = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != name]
    params.append((name, str(value)))
    return urlunparse(
        (parsed.scheme, parsed.netloc, parsed.path, parsed.params, urlencode(params), parsed.fragment)
    )


def build_path_page_url(base_url: str, pattern: str, page_number: int) -> str:
    """
    Build a path-style page URL from a pattern such as ``/page/{num}``.

    The pattern is appended to the base URL stripped of query and fragment,
    without doubling the joining slash.
    """
    base = strip_query_and_fragment(base_url).rstrip("/")
    suffix = pattern.replace("{num}", str(page_number))
    if not suffix.startswith(("/", "?", "&", "-", "_")):
        suffix = "/" + suffix
    return base + suffix


def detect_url_pagination(url: str) -> dict[str, bool]:
    """
    Match a URL against the known pagination shapes.

    Returns:
        Mapping of pattern name to whether it matched.
    """
    return {name: bool(pattern.search(url)) for name, pattern in URL_PAGINATION_PATTERNS.items()}
