"""Pagination strategies."""

from pagescout.pagination.base import PaginationContext, PaginationState, PaginationStrategy
from pagescout.pagination.click import ClickStrategy
from pagescout.pagination.scroll import ScrollStrategy
from pagescout.pagination.url_parameter import URLQueryParameterStrategy
from pagescout.pagination.url_path import URLPathStrategy

__all__ = [
    "ClickStrategy",
    "PaginationContext",
    "PaginationState",
    "PaginationStrategy",
    "ScrollStrategy",
    "URLPathStrategy",
    "URLQueryParameterStrategy",
]
