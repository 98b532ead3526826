"""
Tests for the image downloader.
"""

import asyncio

import httpx
import pytest

from pagescout.core.images import ImageDownloader, image_filename
from pagescout.models import ImageInfo


def transport(failures: set[str] | None = None, requests: list[str] | None = None) -> httpx.MockTransport:
    failures = failures or set()

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if requests is not None:
            requests.append(url)
        if url in failures:
            return httpx.Response(404)
        if url.endswith("/timeout.jpg"):
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, content=b"image-bytes:" + url.encode())

    return httpx.MockTransport(handler)


class TestImageFilename:
    def test_keeps_basename(self) -> None:
        assert image_filename("https://cdn.example.com/img/photo.jpg?w=200") == "photo.jpg"

    def test_sanitizes(self) -> None:
        assert image_filename("https://cdn.example.com/my%20photo(1).png") == "my_photo_1_.png"

    def test_missing_extension(self) -> None:
        name = image_filename("https://cdn.example.com/render/abc")

        assert name.startswith("abc_")
        assert name.endswith(".jpg")
        assert name == image_filename("https://cdn.example.com/render/abc")


class TestDownloadAll:
    @pytest.mark.asyncio
    async def test_downloads_and_sets_local_path(self, tmp_path) -> None:
        images = [
            ImageInfo(url="https://example.com/a.jpg"),
            ImageInfo(url="https://example.com/b.png"),
        ]
        downloader = ImageDownloader(transport=transport())

        report = await downloader.download_all(images, tmp_path)

        assert report.downloaded == 2
        assert report.failed == 0
        assert (tmp_path / "a.jpg").read_bytes() == b"image-bytes:https://example.com/a.jpg"
        assert images[0].local_path == str(tmp_path / "a.jpg")

    @pytest.mark.asyncio
    async def test_failures_are_counted(self, tmp_path) -> None:
        images = [
            ImageInfo(url="https://example.com/ok.jpg"),
            ImageInfo(url="https://example.com/missing.jpg"),
            ImageInfo(url="https://example.com/timeout.jpg"),
        ]
        downloader = ImageDownloader(
            transport=transport(failures={"https://example.com/missing.jpg"})
        )

        report = await downloader.download_all(images, tmp_path)

        assert report.downloaded == 1
        assert report.failed == 2
        assert set(report.errors) == {
            "https://example.com/missing.jpg",
            "https://example.com/timeout.jpg",
        }
        assert images[1].local_path is None

    @pytest.mark.asyncio
    async def test_duplicate_urls_fetched_once(self, tmp_path) -> None:
        requests: list[str] = []
        images = [ImageInfo(url="https://example.com/a.jpg") for _ in range(3)]

        report = await ImageDownloader(transport=transport(requests=requests)).download_all(
            images, tmp_path
        )

        assert requests == ["https://example.com/a.jpg"]
        assert report.downloaded == 1

    @pytest.mark.asyncio
    async def test_colliding_names_kept_apart(self, tmp_path) -> None:
        images = [
            ImageInfo(url="https://one.example.com/logo.png"),
            ImageInfo(url="https://two.example.com/logo.png"),
        ]

        report = await ImageDownloader(transport=transport()).download_all(images, tmp_path)

        assert report.downloaded == 2
        assert len(set(report.paths)) == 2
        assert len(list(tmp_path.iterdir())) == 2

    @pytest.mark.asyncio
    async def test_chunks_cover_every_image(self, tmp_path) -> None:
        requests: list[str] = []
        images = [ImageInfo(url=f"https://example.com/{i}.jpg") for i in range(7)]

        report = await ImageDownloader(concurrency=3, transport=transport(requests=requests)).download_all(
            images, tmp_path
        )

        assert report.downloaded == 7
        assert sorted(requests) == sorted(i.url for i in images)

    @pytest.mark.asyncio
    async def test_files_written_off_the_event_loop(self, tmp_path, monkeypatch) -> None:
        offloaded: list[str] = []
        to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(getattr(func, "__name__", ""))
            return await to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
        images = [ImageInfo(url=f"https://example.com/{i}.jpg") for i in range(2)]

        report = await ImageDownloader(transport=transport()).download_all(images, tmp_path)

        assert report.downloaded == 2
        assert offloaded.count("write_bytes") == 2

    def test_concurrency_floor(self) -> None:
        downloader = ImageDownloader(concurrency=0)

        assert downloader.concurrency == 1
