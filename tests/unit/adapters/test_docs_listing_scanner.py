"""
Tests for the listing scanner.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.infrastructure.adapters.docs_errors import ContentNotFoundError, NavigationFailedError
from src.infrastructure.adapters.docs_listing_scanner import DocsListingScanner
from src.infrastructure.resilience.retry_policy import ExponentialBackoff, RetryPolicy


URL = "https://docs.example.com/en/documentation/prod/1.0"

LISTING_HTML = """
<rh-tile><h3><a href="/en/documentation/prod/1.0/html/installing">Installing</a></h3></rh-tile>
<rh-tile><h3><a href="/en/documentation/prod/1.0/html/upgrading">Upgrading</a></h3></rh-tile>
"""


def make_page(html=LISTING_HTML):
    page = AsyncMock()
    page.url = URL
    page.content = AsyncMock(return_value=html)
    return page


def make_scanner(page):
    session = MagicMock()
    session.new_page = AsyncMock(return_value=page)
    policy = RetryPolicy(max_retries=1, backoff=ExponentialBackoff(base_delay=0.0))
    return DocsListingScanner(session, retry_policy=policy)


class TestDocsListingScanner:
    """Tests for DocsListingScanner.scan."""

    @pytest.mark.asyncio
    async def test_scan_returns_entries(self):
        page = make_page()
        scanner = make_scanner(page)

        books = await scanner.scan(URL)

        assert [b.title for b in books] == ["Installing", "Upgrading"]
        assert books[0].detail_url == (
            "https://docs.example.com/en/documentation/prod/1.0/html/installing"
        )

    @pytest.mark.asyncio
    async def test_scan_uses_listing_timeouts(self):
        page = make_page()
        scanner = make_scanner(page)

        await scanner.scan(URL)

        page.goto.assert_awaited_with(URL, timeout=45000, wait_until="domcontentloaded")
        page.wait_for_selector.assert_awaited_with("rh-tile", timeout=30000, state="visible")

    @pytest.mark.asyncio
    async def test_navigation_failure(self):
        page = make_page()
        page.goto = AsyncMock(side_effect=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        scanner = make_scanner(page)

        with pytest.raises(NavigationFailedError):
            await scanner.scan(URL)

        assert page.goto.await_count == 2
        page.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_tiles_never_visible(self):
        page = make_page()
        page.wait_for_selector = AsyncMock(side_effect=TimeoutError("Timeout 30000ms exceeded"))
        scanner = make_scanner(page)

        with pytest.raises(ContentNotFoundError):
            await scanner.scan(URL)

        page.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_page_closed_after_success(self):
        page = make_page()
        scanner = make_scanner(page)

        await scanner.scan(URL)

        page.close.assert_awaited_once()
