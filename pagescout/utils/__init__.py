"""Utility modules for pagescout."""

from pagescout.utils.logging import ScraperLogger, get_logger, setup_logging
from pagescout.utils.text import normalize_fragment
from pagescout.utils.url_utils import (
    build_path_page_url,
    detect_url_pagination,
    get_domain,
    get_hostname,
    is_valid_url,
    resolve_url,
    strip_query_and_fragment,
    with_query_param,
)

__all__ = [
    "ScraperLogger",
    "build_path_page_url",
    "detect_url_pagination",
    "get_domain",
    "get_hostname",
    "get_logger",
    "is_valid_url",
    "normalize_fragment",
    "resolve_url",
    "setup_logging",
    "strip_query_and_fragment",
    "with_query_param",
]
