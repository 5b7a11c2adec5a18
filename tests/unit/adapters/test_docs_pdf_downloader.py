"""
Tests for the PDF downloader.
"""
import os

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

from src.infrastructure.adapters.docs_errors import EmptyContentError, HttpStatusError
from src.infrastructure.adapters.docs_pdf_downloader import DocsPdfDownloader


PDF_URL = "https://docs.example.com/en/documentation/prod/1.0/pdf/guide.pdf"


def mock_session(status=200, body=b"%PDF-1.7 fake pdf content"):
    """aiohttp.ClientSession double whose get() yields one response."""
    response = MagicMock()
    response.status = status
    response.read = AsyncMock(return_value=body)
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=response)
    cm.__aexit__ = AsyncMock(return_value=None)
    session = MagicMock()
    session.get = Mock(return_value=cm)
    session.close = AsyncMock()
    return session


class TestDocsPdfDownloaderLifecycle:
    """Tests for session lifecycle."""

    @pytest.mark.asyncio
    async def test_start_creates_session(self, tmp_path):
        downloader = DocsPdfDownloader(download_dir=str(tmp_path))

        await downloader.start()
        try:
            assert isinstance(downloader._session, aiohttp.ClientSession)
        finally:
            await downloader.stop()

    @pytest.mark.asyncio
    async def test_timeout_limits_reads_not_whole_transfer(self, tmp_path):
        """Large PDFs on slow links are not cut off by a total time cap."""
        downloader = DocsPdfDownloader(download_dir=str(tmp_path), read_timeout_seconds=30.0)

        await downloader.start()
        try:
            timeout = downloader._session.timeout
            assert timeout.total is None
            assert timeout.sock_read == 30.0
        finally:
            await downloader.stop()

    @pytest.mark.asyncio
    async def test_stop_closes_session(self, tmp_path):
        downloader = DocsPdfDownloader(download_dir=str(tmp_path))

        await downloader.start()
        session = downloader._session
        await downloader.stop()

        assert session.closed
        assert downloader._session is None

    @pytest.mark.asyncio
    async def test_stop_when_not_started(self, tmp_path):
        downloader = DocsPdfDownloader(download_dir=str(tmp_path))

        await downloader.stop()


class TestDocsPdfDownloaderDownload:
    """Tests for DocsPdfDownloader.download."""

    @pytest.mark.asyncio
    async def test_writes_file_and_returns_path(self, tmp_path):
        downloader = DocsPdfDownloader(download_dir=str(tmp_path / "downloads"))
        downloader._session = mock_session(body=b"%PDF-1.7 content")

        path = await downloader.download(PDF_URL, "prod-1.0-Installing")

        assert path == os.path.join(str(tmp_path / "downloads"), "prod-1.0-Installing.pdf")
        with open(path, "rb") as f:
            assert f.read() == b"%PDF-1.7 content"
        downloader._session.get.assert_called_once_with(PDF_URL)

    @pytest.mark.asyncio
    async def test_sanitizes_file_name(self, tmp_path):
        """Title 'A/B:C*D' for product p, version v becomes p-v-A_B_C_D.pdf."""
        downloader = DocsPdfDownloader(download_dir=str(tmp_path))
        downloader._session = mock_session()

        path = await downloader.download(PDF_URL, "p-v-A/B:C*D")

        assert os.path.basename(path) == "p-v-A_B_C_D.pdf"
        assert os.path.exists(path)

    @pytest.mark.asyncio
    async def test_http_404_raises_and_writes_nothing(self, tmp_path):
        download_dir = tmp_path / "downloads"
        downloader = DocsPdfDownloader(download_dir=str(download_dir))
        downloader._session = mock_session(status=404)

        with pytest.raises(HttpStatusError) as exc_info:
            await downloader.download(PDF_URL, "prod-1.0-Missing")

        assert exc_info.value.status_code == 404
        assert not download_dir.exists() or list(download_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_empty_body_raises_and_writes_nothing(self, tmp_path):
        download_dir = tmp_path / "downloads"
        downloader = DocsPdfDownloader(download_dir=str(download_dir))
        downloader._session = mock_session(body=b"")

        with pytest.raises(EmptyContentError):
            await downloader.download(PDF_URL, "prod-1.0-Empty")

        assert not download_dir.exists() or list(download_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_creates_directory_idempotently(self, tmp_path):
        download_dir = tmp_path / "downloads"
        download_dir.mkdir()
        downloader = DocsPdfDownloader(download_dir=str(download_dir))
        downloader._session = mock_session()

        await downloader.download(PDF_URL, "first")
        await downloader.download(PDF_URL, "second")

        assert sorted(p.name for p in download_dir.iterdir()) == ["first.pdf", "second.pdf"]

    @pytest.mark.asyncio
    async def test_no_partial_file_left_behind(self, tmp_path):
        downloader = DocsPdfDownloader(download_dir=str(tmp_path))
        downloader._session = mock_session()

        await downloader.download(PDF_URL, "guide")

        assert [p.name for p in tmp_path.iterdir()] == ["guide.pdf"]

    def test_server_errors_are_recoverable(self):
        assert HttpStatusError("x", status_code=503).recoverable
        assert not HttpStatusError("x", status_code=404).recoverable
