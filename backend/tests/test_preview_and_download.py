"""
Preview store lifetime and result download helpers.
"""

import httpx
import pytest

from banana_studio.client.download import DEFAULT_FILENAME, download_image, filename_from_url
from banana_studio.client.preview import PreviewStore
from banana_studio.core.errors import DownloadError


class TestPreviewStore:
    def test_create_and_revoke_once(self):
        store = PreviewStore()
        ref = store.create(b"bytes", "image/png")
        assert ref.startswith("blob:")
        assert store.get(ref).content_type == "image/png"
        assert store.live_count == 1
        assert store.revoke(ref) is True
        assert store.revoke(ref) is False
        assert store.live_count == 0
        assert store.get(ref) is None

    def test_references_are_unique(self):
        store = PreviewStore()
        assert store.create(b"a") != store.create(b"a")

    @pytest.mark.parametrize(
        "ref,expected",
        [
            ("blob:1234", True),
            ("/static/examples/bw-portrait.png", False),
            ("https://x/a.png", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_local(self, ref, expected):
        assert PreviewStore.is_local(ref) is expected


class TestFilenameFromUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://replicate.delivery/xezq/abc/output.jpg", "output.jpg"),
            ("https://x/a/b.png?sig=1#frag", "b.png"),
            ("https://x/dir/", "dir"),
            ("https://x/", DEFAULT_FILENAME),
            ("", DEFAULT_FILENAME),
        ],
    )
    def test_cases(self, url, expected):
        assert filename_from_url(url) == expected


class TestDownloadImage:
    @pytest.mark.asyncio
    async def test_writes_into_directory(self, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"jpegdata"))
        async with httpx.AsyncClient(transport=transport) as client:
            saved = await download_image(client, "https://x/out/result.jpg", tmp_path)
        assert saved == tmp_path / "result.jpg"
        assert saved.read_bytes() == b"jpegdata"

    @pytest.mark.asyncio
    async def test_writes_to_explicit_file(self, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"jpegdata"))
        target = tmp_path / "nested" / "mine.jpg"
        async with httpx.AsyncClient(transport=transport) as client:
            saved = await download_image(client, "https://x/out/result.jpg", target)
        assert saved == target
        assert target.read_bytes() == b"jpegdata"

    @pytest.mark.asyncio
    async def test_error_status_raises(self, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(DownloadError, match="Download failed. Please try again."):
                await download_image(client, "https://x/gone.jpg", tmp_path)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, tmp_path):
        def refuse(request):
            raise httpx.ConnectError("refused")

        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
            with pytest.raises(DownloadError):
                await download_image(client, "https://x/a.jpg", tmp_path)
