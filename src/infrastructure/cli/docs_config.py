"""
Docs CLI configuration and settings.

Centralizes configuration for the documentation downloader CLI,
including default values, paths, timeouts and environment variables.
"""
from dataclasses import dataclass
from typing import Dict, Any, Tuple
from pathlib import Path
import os

from src.infrastructure.resilience.error_classifier import DEFAULT_CRITICAL_PATTERNS


DEFAULT_BASE_URL = "https://docs.redhat.com/en/documentation/"


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class DocsCliConfig:
    """Configuration for documentation download runs."""

    # Output paths
    output_dir: str = "downloads"
    results_dir: str = "."
    log_dir: str = "docs_logs"

    # Target site
    base_url: str = DEFAULT_BASE_URL
    doc_host: str = "docs.redhat.com"
    cookie_domain: str = ".redhat.com"

    # Browser settings
    headless: bool = True
    headed_slow_mo_ms: int = 1000
    headed_book_delay: float = 1.0  # Seconds between books in headed mode

    # Timeouts (milliseconds)
    navigation_timeout_ms: int = 45000
    listing_timeout_ms: int = 30000
    control_timeout_ms: int = 15000
    new_page_timeout_ms: int = 60000
    url_timeout_ms: int = 60000
    load_timeout_ms: int = 90000
    download_read_timeout_s: float = 120.0  # Seconds without body data before a download aborts

    # Retry settings
    max_retries: int = 1
    backoff_base: float = 1.0
    backoff_max: float = 10.0

    # Session-breaking error signatures
    critical_patterns: Tuple[str, ...] = DEFAULT_CRITICAL_PATTERNS

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> 'DocsCliConfig':
        """Create config from environment variables."""
        patterns = os.getenv("DOCS_CRITICAL_PATTERNS")
        return cls(
            output_dir=os.getenv("DOCS_OUTPUT_DIR", "downloads"),
            results_dir=os.getenv("DOCS_RESULTS_DIR", "."),
            log_dir=os.getenv("DOCS_LOG_DIR", "docs_logs"),
            base_url=os.getenv("DOCS_BASE_URL", DEFAULT_BASE_URL),
            doc_host=os.getenv("DOCS_HOST", "docs.redhat.com"),
            cookie_domain=os.getenv("DOCS_COOKIE_DOMAIN", ".redhat.com"),
            headless=_env_bool("DOCS_HEADLESS", True),
            navigation_timeout_ms=int(os.getenv("DOCS_NAVIGATION_TIMEOUT", "45000")),
            max_retries=int(os.getenv("DOCS_MAX_RETRIES", "1")),
            critical_patterns=(
                tuple(p.strip() for p in patterns.split("|") if p.strip())
                if patterns else DEFAULT_CRITICAL_PATTERNS
            ),
            log_level=os.getenv("DOCS_LOG_LEVEL", "INFO"),
            log_to_file=_env_bool("DOCS_LOG_TO_FILE", False),
            json_logs=_env_bool("DOCS_JSON_LOGS", False),
        )

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        dirs = [self.output_dir, self.results_dir]
        if self.log_to_file:
            dirs.append(self.log_dir)
        for dir_path in dirs:
            Path(dir_path).mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        return {
            "output_dir": self.output_dir,
            "results_dir": self.results_dir,
            "base_url": self.base_url,
            "doc_host": self.doc_host,
            "headless": self.headless,
            "navigation_timeout_ms": self.navigation_timeout_ms,
            "max_retries": self.max_retries,
            "critical_patterns": list(self.critical_patterns),
            "log_level": self.log_level,
        }
