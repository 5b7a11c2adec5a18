"""
PDF locator for documentation book pages.

Resolves the PDF URL of a book either by matching the link in the
server-rendered markup or by driving the page's format selector and
observing the tab it opens.
"""
import logging
import re
from typing import Any, List, Optional

from src.domain.docs_entities import BookEntry
from src.domain.docs_value_objects import ExtractionMode, ProductTarget, PdfUrl
from src.infrastructure.adapters.docs_errors import (
    LocatorInputError,
    PatternNotFoundError,
    UIInteractionError,
)
from src.infrastructure.docs_session_manager import DocsSessionManager
from src.infrastructure.resilience.retry_policy import RetryPolicy, RetryExhaustedError

logger = logging.getLogger(__name__)


FORMAT_SELECTOR = "#page-format"
PDF_OPTION = "pdf"
PDF_URL_PATTERN = re.compile(r".*\.pdf(\?.*)?$", re.IGNORECASE)


def build_pdf_link_pattern(product: ProductTarget, doc_host: str = "docs.redhat.com") -> re.Pattern:
    """Regex for the product's PDF links as embedded in book pages."""
    return re.compile(
        rf"(https://{re.escape(doc_host)}/en/documentation/"
        rf"{re.escape(product.name)}/{re.escape(product.version)}/pdf/[^\"]+\.pdf)",
        re.IGNORECASE,
    )


def find_pdf_url(html: str, product: ProductTarget, doc_host: str = "docs.redhat.com") -> str:
    """
    Return the first PDF link for the product found in html.

    Raises:
        PatternNotFoundError: If the markup holds no matching link
    """
    pattern = build_pdf_link_pattern(product, doc_host)
    match = pattern.search(html or "")
    if not match:
        raise PatternNotFoundError(
            f"No PDF link for {product.name} {product.version} found in page markup",
            pattern=pattern.pattern,
        )
    return match.group(1)


class DocsPdfLocator:
    """
    Resolves a single absolute PDF URL for a book detail page.

    Waits that are safe to repeat are retried individually; the format
    selection is retried as one unit together with its new-page listener,
    so a retry never awaits a listener armed by an earlier attempt.
    """

    def __init__(
        self,
        session: DocsSessionManager,
        retry_policy: Optional[RetryPolicy] = None,
        doc_host: str = "docs.redhat.com",
        control_timeout_ms: int = 15000,
        new_page_timeout_ms: int = 60000,
        url_timeout_ms: int = 60000,
        load_timeout_ms: int = 90000,
    ):
        self._session = session
        self._retry = retry_policy or RetryPolicy()
        self._doc_host = doc_host
        self._control_timeout_ms = control_timeout_ms
        self._new_page_timeout_ms = new_page_timeout_ms
        self._url_timeout_ms = url_timeout_ms
        self._load_timeout_ms = load_timeout_ms

    @staticmethod
    def check_entry(entry: BookEntry) -> None:
        """Reject entries whose listing tile had no usable title or link."""
        if not entry.title.strip():
            raise LocatorInputError(f"Book entry has no title (link: {entry.detail_url!r})")
        if not entry.detail_url.strip():
            raise LocatorInputError(f"Book entry {entry.title!r} has no detail link")

    async def locate(
        self,
        page: Any,
        mode: ExtractionMode,
        product: ProductTarget,
        opened_pages: Optional[List[Any]] = None,
    ) -> str:
        """
        Resolve the PDF URL for the book loaded in page.

        Args:
            page: Detail page, already navigated
            mode: Extraction strategy
            product: Product the book belongs to
            opened_pages: Receives any secondary page opened, for cleanup

        Returns:
            Absolute PDF URL
        """
        if mode is ExtractionMode.DIRECT_PATTERN:
            url = await self._locate_in_markup(page, product)
        else:
            url = await self._locate_via_ui(
                page, opened_pages if opened_pages is not None else []
            )
        return PdfUrl(url).value

    async def _locate_in_markup(self, page: Any, product: ProductTarget) -> str:
        logger.info("Extracting PDF link directly from page markup...")
        html = await page.content()
        url = find_pdf_url(html, product, self._doc_host)
        logger.info(f"Found PDF URL via pattern: {url}")
        return url

    async def _locate_via_ui(self, page: Any, opened_pages: List[Any]) -> str:
        logger.info("Waiting for format selector...")
        await self._step(
            UIInteractionError.CONTROL_WAIT,
            lambda: page.wait_for_selector(
                FORMAT_SELECTOR, timeout=self._control_timeout_ms, state="visible"
            ),
            "waiting for format selector",
        )

        async def select_pdf() -> Any:
            async with self._session.expect_page(self._new_page_timeout_ms) as page_info:
                logger.info("Selecting PDF option...")
                try:
                    await page.select_option(FORMAT_SELECTOR, PDF_OPTION)
                except Exception as e:
                    raise UIInteractionError(str(e), UIInteractionError.SELECTION) from e
            new_page = await page_info.value
            opened_pages.append(new_page)
            return new_page

        pdf_page = await self._step(
            UIInteractionError.NEW_PAGE_WAIT, select_pdf, "selecting PDF format"
        )
        logger.info(f"PDF tab opened, initial URL: {pdf_page.url}")

        await self._step(
            UIInteractionError.URL_WAIT,
            lambda: pdf_page.wait_for_url(PDF_URL_PATTERN, timeout=self._url_timeout_ms),
            "waiting for PDF tab to reach a PDF URL",
        )
        pdf_url = pdf_page.url

        logger.info(f"Confirmed PDF URL: {pdf_url}. Waiting for content to load...")
        await self._step(
            UIInteractionError.LOAD_WAIT,
            lambda: pdf_page.wait_for_load_state("load", timeout=self._load_timeout_ms),
            "waiting for PDF content 'load' state",
        )
        return pdf_url

    async def _step(self, stage: str, action, label: str) -> Any:
        try:
            return await self._retry.execute(action, label=label)
        except RetryExhaustedError as e:
            last = e.last_exception
            if isinstance(last, UIInteractionError):
                raise UIInteractionError(str(e), last.stage) from e
            raise UIInteractionError(str(e), stage) from e
