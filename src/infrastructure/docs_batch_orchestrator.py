"""
Batch orchestrator for documentation downloads.

Walks every discovered book through navigation, PDF location and
download, one at a time, recording exactly one result per book.
"""
import asyncio
import logging
import uuid
from typing import Any, Iterable, List, Optional

from src.domain.docs_entities import BookEntry, BookResult, ResultLedger
from src.domain.docs_value_objects import ExtractionMode, ProductTarget
from src.infrastructure.adapters.docs_errors import SetupFailureError
from src.infrastructure.adapters.docs_listing_scanner import DocsListingScanner
from src.infrastructure.adapters.docs_pdf_downloader import DocsPdfDownloader
from src.infrastructure.adapters.docs_pdf_locator import DocsPdfLocator
from src.infrastructure.docs_session_manager import DocsSessionManager
from src.infrastructure.logging.docs_logger import LogContext, TimedOperation
from src.infrastructure.resilience.error_classifier import CriticalErrorClassifier
from src.infrastructure.resilience.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class DocsBatchOrchestrator:
    """
    Sequential per-book pipeline with session recovery.

    Per book: Start -> Navigated -> LocatorDone -> Downloaded -> Recorded.
    Any failure jumps to Recorded with a failed result. Failures whose
    message matches a critical pattern tear the browser session down so
    the next book starts on a fresh one.
    """

    def __init__(
        self,
        session: DocsSessionManager,
        scanner: DocsListingScanner,
        locator: DocsPdfLocator,
        downloader: DocsPdfDownloader,
        product: ProductTarget,
        mode: ExtractionMode,
        headed: Optional[bool] = None,
        retry_policy: Optional[RetryPolicy] = None,
        classifier: Optional[CriticalErrorClassifier] = None,
        navigation_timeout_ms: int = 45000,
        headed_book_delay: float = 1.0,
        run_id: Optional[str] = None,
    ):
        self._session = session
        self._scanner = scanner
        self._locator = locator
        self._downloader = downloader
        self._product = product
        self._mode = mode
        self._headed = mode.requires_headed if headed is None else headed
        self._retry = retry_policy or RetryPolicy()
        self._classifier = classifier or CriticalErrorClassifier()
        self._navigation_timeout_ms = navigation_timeout_ms
        self._headed_book_delay = headed_book_delay
        self._run_id = run_id or uuid.uuid4().hex[:8]

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def downloader(self) -> DocsPdfDownloader:
        return self._downloader

    async def run(self, target_url: str) -> ResultLedger:
        """
        Launch the session, discover books and process all of them.

        The session is closed whatever the outcome.

        Raises:
            SetupFailureError: If the session cannot be launched or the
                listing cannot be scanned
        """
        logger.info(f"Starting scraper for: {target_url}")
        logger.info(
            f"Running in {'headed (visible browser)' if self._headed else 'headless'} mode."
        )
        logger.info(
            "PDF extraction method: "
            + ("Direct pattern from HTML" if self._mode is ExtractionMode.DIRECT_PATTERN
               else "UI format selector interaction")
        )

        try:
            try:
                await self._session.launch(headed=self._headed)
                books = await self._scanner.scan(target_url)
            except Exception as e:
                raise SetupFailureError(f"Setup failed for {target_url}: {e}") from e

            return await self.process_books(books)
        finally:
            logger.info("Scraping process is finishing. Ensuring browser is closed.")
            await self._session.close()

    async def process_books(self, books: Iterable[BookEntry]) -> ResultLedger:
        """Process books in order; one result is appended per book."""
        books = list(books)
        ledger = ResultLedger()

        for index, entry in enumerate(books, start=1):
            logger.info("=" * 40)
            logger.info(f"Processing book {index}/{len(books)}: {entry.title}")
            logger.info(f"Book HTML Page URL: {entry.detail_url}")

            ledger.append(await self.process_book(entry))

            if self._headed and self._headed_book_delay > 0:
                await asyncio.sleep(self._headed_book_delay)

        return ledger

    async def process_book(self, entry: BookEntry) -> BookResult:
        """Run one book through the pipeline and return its result."""
        context = LogContext(run_id=self._run_id, book=entry.title)
        page: Any = None
        opened_pages: List[Any] = []
        critical = False

        try:
            with TimedOperation(logger, "process_book", context):
                self._locator.check_entry(entry)

                if not self._session.is_usable:
                    logger.info("Launching a fresh browser session")
                    await self._session.launch(headed=self._headed)

                page = await self._session.new_page()
                await self._retry.execute(
                    lambda: page.goto(
                        entry.detail_url,
                        timeout=self._navigation_timeout_ms,
                        wait_until="domcontentloaded",
                    ),
                    label=f"navigation to {entry.title} HTML page",
                )

                pdf_url = await self._locator.locate(
                    page, self._mode, self._product, opened_pages
                )

                download_path = await self._retry.execute(
                    lambda: self._downloader.download(
                        pdf_url, self._product.download_name(entry.title)
                    ),
                    label=f"downloading PDF for {entry.title}",
                )

            result = BookResult.succeeded(entry, pdf_url, download_path)

        except Exception as e:
            critical = self._classifier.is_critical(e)
            logger.error(f"Error processing {entry.title}: {e}")
            result = BookResult.failed(entry, str(e), critical_error=critical)

        finally:
            await self._close_pages(entry, [page, *opened_pages, *self._session.open_pages()])

        if critical:
            logger.error("CRITICAL ERROR DETECTED. Restarting browser before the next book...")
            await self._session.restart()

        return result

    async def _close_pages(self, entry: BookEntry, pages: List[Any]) -> None:
        """
        Close the book's pages and any tab still open in the context,
        such as a viewer tab that opened after its listener timed out.
        """
        for page in pages:
            if page is None:
                continue
            try:
                if not page.is_closed():
                    await page.close()
            except Exception as e:
                logger.warning(f"Could not close page for {entry.title}: {e}")
