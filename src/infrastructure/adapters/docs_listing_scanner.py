"""
Listing scanner for product documentation pages.

Loads the product listing in the browser session and returns the books
it links to.
"""
import logging
from typing import Optional, Tuple

from src.domain.docs_entities import BookEntry
from src.infrastructure.adapters.docs_errors import (
    ContentNotFoundError,
    NavigationFailedError,
)
from src.infrastructure.adapters.docs_listing_parser import (
    TILE_SELECTOR,
    parse_book_tiles,
)
from src.infrastructure.docs_session_manager import DocsSessionManager
from src.infrastructure.resilience.retry_policy import RetryPolicy, RetryExhaustedError

logger = logging.getLogger(__name__)


class DocsListingScanner:
    """Discovers BookEntry items on a product listing page."""

    def __init__(
        self,
        session: DocsSessionManager,
        retry_policy: Optional[RetryPolicy] = None,
        navigation_timeout_ms: int = 45000,
        tiles_timeout_ms: int = 30000,
    ):
        self._session = session
        self._retry = retry_policy or RetryPolicy()
        self._navigation_timeout_ms = navigation_timeout_ms
        self._tiles_timeout_ms = tiles_timeout_ms

    async def scan(self, url: str) -> Tuple[BookEntry, ...]:
        """
        Load the listing page and extract its book entries.

        Raises:
            NavigationFailedError: If the page cannot be loaded
            ContentNotFoundError: If the tiles never become visible
        """
        page = await self._session.new_page()
        try:
            logger.info("Navigating to main product listing page...")
            try:
                await self._retry.execute(
                    lambda: page.goto(
                        url,
                        timeout=self._navigation_timeout_ms,
                        wait_until="domcontentloaded",
                    ),
                    label=f"navigation to listing page {url}",
                )
            except RetryExhaustedError as e:
                raise NavigationFailedError(str(e), url=url) from e

            logger.info("Waiting for book tiles to load...")
            try:
                await self._retry.execute(
                    lambda: page.wait_for_selector(
                        TILE_SELECTOR,
                        timeout=self._tiles_timeout_ms,
                        state="visible",
                    ),
                    label="waiting for documentation tiles to load",
                )
            except RetryExhaustedError as e:
                raise ContentNotFoundError(str(e), selector=TILE_SELECTOR) from e

            html = await page.content()
            books = parse_book_tiles(html, base_url=page.url or url)
            logger.info(f"Found {len(books)} book(s) on {url}")
            return books
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.warning(f"Could not close listing page: {e}")
