"""
Result reporter for documentation downloads.

Writes the result ledger as a JSON summary and logs a per-book tally.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from src.domain.docs_entities import ResultLedger
from src.domain.docs_value_objects import ProductTarget

logger = logging.getLogger(__name__)


class DocsResultReporter:
    """Persists and summarizes the outcome of a run."""

    def __init__(self, results_dir: str = "."):
        self._results_dir = Path(results_dir)

    def save(self, ledger: ResultLedger, product: ProductTarget) -> Optional[Path]:
        """
        Write the ledger to <results_dir>/<product>-<version>-download-results.json.

        Returns:
            Path of the written file, or None if it could not be written
        """
        filepath = self._results_dir / product.results_filename
        try:
            self._results_dir.mkdir(parents=True, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(ledger.to_list(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving results file: {e}")
            return None

        logger.info(f"Download summary saved to {filepath}")
        return filepath

    def summarize(self, ledger: ResultLedger) -> str:
        """Log one line per book and return the final tally line."""
        logger.info("Download summary:")
        for result in ledger:
            if result.success:
                logger.info(f"OK {result.title}: Downloaded successfully from {result.pdf_url}")
            else:
                label = "CRITICAL" if result.critical_error else "ERROR"
                logger.info(f"{label} {result.title}: {result.error or 'Unknown error'}")

        tally = (
            f"Total: {len(ledger)} | Successful: {ledger.successful} | "
            f"Failed: {ledger.failed} | Critical Errors: {ledger.critical}"
        )
        logger.info(tally)
        return tally
