"""
Docs PDF Downloader.

Downloads a resolved PDF URL and saves it under the downloads directory.
"""
import logging
import os
from typing import Optional

import aiohttp

from src.domain.docs_value_objects import sanitize_filename
from src.infrastructure.adapters.docs_errors import EmptyContentError, HttpStatusError

logger = logging.getLogger(__name__)


class DocsPdfDownloader:
    """
    Fetches PDF files over HTTP and writes them to disk.

    Responsibilities:
    - GET the PDF and require a 200 response
    - Reject empty bodies
    - Write via a temporary file so readers never see a partial PDF
    """

    def __init__(
        self,
        download_dir: str = "downloads",
        read_timeout_seconds: float = 120.0,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the downloader.

        Args:
            download_dir: Directory to save PDFs
            read_timeout_seconds: Longest wait for the next chunk of the body;
                the transfer as a whole is not capped
            user_agent: Optional User-Agent header
        """
        self._download_dir = download_dir
        self._read_timeout_seconds = read_timeout_seconds
        self._user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def download_dir(self) -> str:
        return self._download_dir

    async def start(self) -> None:
        """Create the HTTP session."""
        if self._session is None:
            headers = {"User-Agent": self._user_agent} if self._user_agent else None
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None, sock_read=self._read_timeout_seconds),
                headers=headers,
            )

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def download(self, pdf_url: str, destination_name: str) -> str:
        """
        Download pdf_url to <download_dir>/<sanitized destination_name>.pdf.

        Args:
            pdf_url: Absolute PDF URL
            destination_name: Unsanitized base name, without extension

        Returns:
            Path of the written file

        Raises:
            HttpStatusError: If the response status is not 200
            EmptyContentError: If the response body is empty
        """
        logger.info(f"Downloading PDF: {destination_name}... (URL: {pdf_url})")
        await self.start()

        pdf_bytes = await self._fetch(pdf_url)
        if len(pdf_bytes) == 0:
            raise EmptyContentError(
                f"Downloaded PDF for {destination_name} is empty.", url=pdf_url
            )

        filepath = self._save_pdf(destination_name, pdf_bytes)
        logger.info(f"Successfully downloaded: {filepath}")
        return filepath

    async def _fetch(self, url: str) -> bytes:
        async with self._session.get(url) as response:
            if response.status != 200:
                raise HttpStatusError(
                    f"Failed to download PDF. Status code: {response.status} for {url}",
                    status_code=response.status,
                    url=url,
                )
            return await response.read()

    def _save_pdf(self, destination_name: str, pdf_bytes: bytes) -> str:
        os.makedirs(self._download_dir, exist_ok=True)
        filepath = os.path.join(
            self._download_dir, f"{sanitize_filename(destination_name)}.pdf"
        )
        tmp_path = f"{filepath}.part"

        try:
            with open(tmp_path, "wb") as f:
                f.write(pdf_bytes)
            os.replace(tmp_path, filepath)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        return filepath
