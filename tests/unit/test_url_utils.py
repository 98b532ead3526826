"""
Tests for URL helpers.
"""

import pytest

from pagescout.utils.url_utils import (
    build_path_page_url,
    detect_url_pagination,
    get_domain,
    get_hostname,
    is_valid_url,
    resolve_url,
    with_query_param,
)


class TestDomains:
    def test_get_domain_keeps_port(self) -> None:
        assert get_domain("https://Example.com:8080/path") == "example.com:8080"

    def test_get_hostname_drops_port(self) -> None:
        assert get_hostname("https://Example.com:8080/path") == "example.com"

    def test_resolve_relative(self) -> None:
        assert resolve_url("https://example.com/blog/post", "img/a.png") == (
            "https://example.com/blog/img/a.png"
        )

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com", True),
            ("http://example.com/page", True),
            ("ftp://example.com", False),
            ("not a url", False),
        ],
    )
    def test_is_valid_url(self, url: str, expected: bool) -> None:
        assert is_valid_url(url) is expected


class TestPageUrls:
    def test_with_query_param_appends(self) -> None:
        assert with_query_param("https://example.com/feed", "page", 2) == (
            "https://example.com/feed?page=2"
        )

    def test_with_query_param_replaces_existing(self) -> None:
        url = with_query_param("https://example.com/feed?sort=new&page=1", "page", 3)

        assert url == "https://example.com/feed?sort=new&page=3"

    def test_build_path_page_url(self) -> None:
        assert build_path_page_url("https://example.com/blog/", "/page/{num}", 2) == (
            "https://example.com/blog/page/2"
        )

    def test_build_path_page_url_strips_query(self) -> None:
        assert build_path_page_url("https://example.com/blog?x=1#top", "page/{num}", 4) == (
            "https://example.com/blog/page/4"
        )


class TestDetectUrlPagination:
    def test_page_param(self) -> None:
        patterns = detect_url_pagination("https://example.com/list?page=2")

        assert patterns["page_param"] is True
        assert patterns["page_path_segment"] is False

    def test_path_segment(self) -> None:
        patterns = detect_url_pagination("https://example.com/blog/page/3")

        assert patterns["page_path_segment"] is True
        assert patterns["numeric_path_end"] is True

    def test_plain_url(self) -> None:
        assert not any(detect_url_pagination("https://example.com/about").values())
