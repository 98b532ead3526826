"""Core browser, session and job modules."""

from pagescout.core.browser import BrowserPool
from pagescout.core.images import DownloadReport, ImageDownloader
from pagescout.core.page import BrowserPage, PageHandle

__all__ = [
    "BrowserPage",
    "BrowserPool",
    "DownloadReport",
    "ImageDownloader",
    "PageHandle",
]
