"""
Image downloader.

Downloads the images collected on a PageDocument into a local directory.
Unique URLs are processed in fixed-size chunks; each chunk runs concurrently
and completes before the next one starts.
"""

import asyncio
import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import httpx

from pagescout.exceptions import ImageDownloadError
from pagescout.models import ImageInfo
from pagescout.utils import metrics
from pagescout.utils.logging import ScraperLogger

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass
class DownloadReport:
    """Outcome of one download_all() call."""

    downloaded: int = 0
    failed: int = 0
    paths: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "downloaded": self.downloaded,
            "failed": self.failed,
            "paths": list(self.paths),
            "errors": dict(self.errors),
        }


def image_filename(url: str) -> str:
    """
    Local filename for an image URL.

    The URL's last path segment with unsafe characters replaced; names without
    an extension get a short URL hash and ``.jpg``.
    """
    name = Path(unquote(urlparse(url).path)).name
    name = _UNSAFE_FILENAME_CHARS.sub("_", name) or "image"
    if not Path(name).suffix:
        url_hash = hashlib.md5(url.encode()).hexdigest()[:12]
        name = f"{name}_{url_hash}.jpg"
    return name


class ImageDownloader:
    """
    Chunked, semaphore-bounded image downloader using httpx.

    Failures are counted in the report, never raised.
    """

    def __init__(
        self,
        concurrency: int = 5,
        timeout_seconds: float = 30.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the downloader.

        Args:
            concurrency: Images downloaded at once (chunk size).
            timeout_seconds: Per-request timeout.
            user_agent: User-Agent header.
            transport: Custom httpx transport (used by tests).
            logger: Logger instance.
        """
        self.concurrency = max(1, concurrency)
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.transport = transport
        self.logger = logger or ScraperLogger("image_downloader")

        self._semaphore = asyncio.Semaphore(self.concurrency)

    def _client(self) -> httpx.AsyncClient:
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
            headers=headers,
            transport=self.transport,
        )

    async def download(
        self,
        client: httpx.AsyncClient,
        url: str,
        output_dir: Path,
        filename: str | None = None,
    ) -> Path:
        """
        Download one image.

        Raises:
            ImageDownloadError: On a transport error or non-2xx status.
        """
        async with self._semaphore:
            try:
                response = await client.get(url)
            except httpx.TimeoutException:
                raise ImageDownloadError(url, f"timed out after {self.timeout_seconds}s")
            except httpx.HTTPError as e:
                raise ImageDownloadError(url, str(e))

        if not 200 <= response.status_code < 300:
            raise ImageDownloadError(
                url, f"unexpected status {response.status_code}", response.status_code
            )

        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / (filename or image_filename(url))
        await asyncio.to_thread(path.write_bytes, response.content)
        return path

    async def download_all(
        self,
        images: list[ImageInfo],
        output_dir: str | Path,
    ) -> DownloadReport:
        """
        Download every unique image, setting ``local_path`` on success.

        Args:
            images: Images to download (duplicates by URL are skipped).
            output_dir: Target directory, created if missing.

        Returns:
            Download report.
        """
        output_dir = Path(output_dir)
        report = DownloadReport()

        unique: list[ImageInfo] = []
        seen: set[str] = set()
        for image in images:
            if image.url and image.url not in seen:
                seen.add(image.url)
                unique.append(image)

        filenames: dict[str, str] = {}
        used: set[str] = set()
        for image in unique:
            name = image_filename(image.url)
            if name in used:
                name = f"{hashlib.md5(image.url.encode()).hexdigest()[:8]}_{name}"
            used.add(name)
            filenames[image.url] = name

        async with self._client() as client:
            for start in range(0, len(unique), self.concurrency):
                chunk = unique[start : start + self.concurrency]
                results = await asyncio.gather(
                    *(
                        self.download(client, image.url, output_dir, filenames[image.url])
                        for image in chunk
                    ),
                    return_exceptions=True,
                )

                for image, result in zip(chunk, results):
                    if isinstance(result, ImageDownloadError):
                        report.failed += 1
                        report.errors[image.url] = result.message
                        self.logger.debug("Image download failed", url=image.url, error=result.message)
                    elif isinstance(result, Exception):
                        report.failed += 1
                        report.errors[image.url] = str(result)
                        self.logger.warning("Image download failed", url=image.url, error=str(result))
                    elif isinstance(result, BaseException):
                        raise result
                    else:
                        image.local_path = str(result)
                        report.downloaded += 1
                        report.paths.append(str(result))

        metrics.record_image_downloads(report.downloaded, report.failed)
        self.logger.info(
            "Image download finished",
            downloaded=report.downloaded,
            failed=report.failed,
            output_dir=str(output_dir),
        )
        return report
