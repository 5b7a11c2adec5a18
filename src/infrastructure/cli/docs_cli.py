"""
Documentation Downloader Command-Line Interface.

Downloads every PDF book of a product's documentation set and writes a
JSON summary of the outcome.
"""
import argparse
import asyncio
import dataclasses
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, List

from src.domain.docs_value_objects import ExtractionMode, ProductTarget
from src.infrastructure.adapters.docs_errors import SetupFailureError
from src.infrastructure.adapters.docs_listing_scanner import DocsListingScanner
from src.infrastructure.adapters.docs_pdf_downloader import DocsPdfDownloader
from src.infrastructure.adapters.docs_pdf_locator import DocsPdfLocator
from src.infrastructure.cli.docs_config import DocsCliConfig, DEFAULT_BASE_URL
from src.infrastructure.docs_batch_orchestrator import DocsBatchOrchestrator
from src.infrastructure.docs_result_reporter import DocsResultReporter
from src.infrastructure.docs_session_manager import DocsSessionManager, SessionConfig
from src.infrastructure.logging.docs_logger import configure_logging
from src.infrastructure.resilience.error_classifier import CriticalErrorClassifier
from src.infrastructure.resilience.retry_policy import ExponentialBackoff, RetryPolicy


EXIT_OK = 0
EXIT_SETUP_FAILURE = 1
EXIT_BOOKS_FAILED = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the downloader CLI."""
    parser = argparse.ArgumentParser(
        prog="docs-downloader",
        description="Download the PDF books of a product documentation set",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -p openshift_container_platform --product-version 4.18
  %(prog)s -p "Red Hat Enterprise Linux" -v 9 --no-headless
  %(prog)s -p openshift_container_platform --product-version 4.14 --dry-run
        """,
    )

    parser.add_argument(
        "-p", "--product-name",
        type=str,
        required=True,
        help="The product name (e.g., openshift_container_platform)",
    )

    parser.add_argument(
        "-v", "--product-version",
        type=str,
        required=True,
        help="The product version (e.g., 4.18)",
    )

    parser.add_argument(
        "-b", "--base-url",
        type=str,
        default=None,
        help=f"The base documentation URL (default: {DEFAULT_BASE_URL})",
    )

    parser.add_argument(
        "-H", "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run the browser without UI (default). Use --no-headless to watch it",
    )

    parser.add_argument(
        "--extraction-mode",
        choices=[mode.value for mode in ExtractionMode],
        default=None,
        help="PDF link strategy: 'direct' reads page markup, 'ui' drives the "
             "format selector (default: direct when headless, ui otherwise)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for downloaded PDFs (default: downloads)",
    )

    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retries per browser or download step (default: 1)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without executing",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log records as JSON lines",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write DEBUG-level JSON logs to this file",
    )

    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return create_parser().parse_args(args)


def build_config(args: argparse.Namespace, base: Optional[DocsCliConfig] = None) -> DocsCliConfig:
    """Overlay command-line options on the environment configuration."""
    config = base or DocsCliConfig.from_env()
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.headless is not None:
        overrides["headless"] = args.headless
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries
    if args.json_logs:
        overrides["json_logs"] = True
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    elif args.quiet:
        overrides["log_level"] = "WARNING"
    return dataclasses.replace(config, **overrides)


def resolve_mode(args: argparse.Namespace, config: DocsCliConfig) -> ExtractionMode:
    if args.extraction_mode:
        return ExtractionMode(args.extraction_mode)
    return ExtractionMode.for_headless(config.headless)


def build_orchestrator(
    config: DocsCliConfig,
    product: ProductTarget,
    mode: ExtractionMode,
) -> DocsBatchOrchestrator:
    """Wire the pipeline components from configuration."""
    session_config = SessionConfig(
        cookie_domain=config.cookie_domain,
        headed_slow_mo=config.headed_slow_mo_ms,
    )
    session = DocsSessionManager(session_config)
    retry = RetryPolicy(
        max_retries=config.max_retries,
        backoff=ExponentialBackoff(
            base_delay=config.backoff_base,
            max_delay=config.backoff_max,
        ),
    )
    scanner = DocsListingScanner(
        session,
        retry_policy=retry,
        navigation_timeout_ms=config.navigation_timeout_ms,
        tiles_timeout_ms=config.listing_timeout_ms,
    )
    locator = DocsPdfLocator(
        session,
        retry_policy=retry,
        doc_host=config.doc_host,
        control_timeout_ms=config.control_timeout_ms,
        new_page_timeout_ms=config.new_page_timeout_ms,
        url_timeout_ms=config.url_timeout_ms,
        load_timeout_ms=config.load_timeout_ms,
    )
    downloader = DocsPdfDownloader(
        download_dir=config.output_dir,
        read_timeout_seconds=config.download_read_timeout_s,
        user_agent=session_config.user_agent,
    )
    return DocsBatchOrchestrator(
        session=session,
        scanner=scanner,
        locator=locator,
        downloader=downloader,
        product=product,
        mode=mode,
        headed=not config.headless or mode.requires_headed,
        retry_policy=retry,
        classifier=CriticalErrorClassifier(config.critical_patterns),
        navigation_timeout_ms=config.navigation_timeout_ms,
        headed_book_delay=config.headed_book_delay,
    )


async def run_download(
    product: ProductTarget,
    mode: ExtractionMode,
    config: DocsCliConfig,
    logger: logging.Logger,
    dry_run: bool = False,
) -> int:
    """Execute a download run and report it."""
    target_url = product.target_url(config.base_url)

    if dry_run:
        logger.info("Dry-run mode: showing configuration without executing")
        logger.info(f"  Target URL: {target_url}")
        logger.info(f"  Extraction mode: {mode.value}")
        logger.info(f"  Results file: {Path(config.results_dir) / product.results_filename}")
        for key, value in config.to_dict().items():
            logger.info(f"  {key}: {value}")
        return EXIT_OK

    config.ensure_directories()
    orchestrator = build_orchestrator(config, product, mode)

    try:
        ledger = await orchestrator.run(target_url)
    except SetupFailureError:
        logger.exception("A critical error occurred during setup (e.g., browser launch failed)")
        return EXIT_SETUP_FAILURE
    finally:
        await orchestrator.downloader.stop()

    reporter = DocsResultReporter(config.results_dir)
    reporter.save(ledger, product)
    reporter.summarize(ledger)

    return EXIT_OK if ledger.failed == 0 else EXIT_BOOKS_FAILED


async def main_async(args: Optional[List[str]] = None) -> int:
    """Async main entry point."""
    parsed_args = parse_args(args)
    config = build_config(parsed_args)

    log_file = parsed_args.log_file
    if log_file is None and config.log_to_file:
        log_file = str(
            Path(config.log_dir) / f"docs_downloader_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )
    logger = configure_logging(
        level=config.log_level,
        json_output=config.json_logs,
        log_file=log_file,
    ).getChild("cli")

    try:
        product = ProductTarget(parsed_args.product_name, parsed_args.product_version)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_SETUP_FAILURE

    mode = resolve_mode(parsed_args, config)
    return await run_download(product, mode, config, logger, dry_run=parsed_args.dry_run)


def main(args: Optional[List[str]] = None) -> int:
    """Synchronous main entry point."""
    return asyncio.run(main_async(args))


if __name__ == "__main__":
    sys.exit(main())
