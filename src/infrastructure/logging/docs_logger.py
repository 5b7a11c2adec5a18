"""
Structured logging for the documentation downloader.

Provides consistent logging with:
- JSON output for CI runs
- Human-readable output for the console
- Context tracking (run_id, book)
- Operation timing
"""
import json
import logging
import sys
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any


ROOT_LOGGER = "src"


@dataclass
class LogContext:
    """Context for structured logging."""
    run_id: Optional[str] = None
    book: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> 'LogContext':
        """Return new context with operation set."""
        return LogContext(
            run_id=self.run_id,
            book=self.book,
            operation=operation,
            extra=self.extra.copy(),
        )

    def as_extra(self) -> Dict[str, Any]:
        """Keyword mapping for the `extra` argument of logging calls."""
        return {
            "run_id": self.run_id,
            "book": self.book,
            "operation": self.operation,
            "context": self.extra.copy(),
        }


@dataclass
class LogEntry:
    """Structured log entry."""
    timestamp: str
    level: str
    message: str
    logger: Optional[str] = None
    run_id: Optional[str] = None
    book: Optional[str] = None
    operation: Optional[str] = None
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if not data.get("context"):
            data.pop("context", None)
        return json.dumps(data, ensure_ascii=False)

    def to_human(self) -> str:
        """Convert to human-readable string."""
        parts = [f"[{self.timestamp}]", f"[{self.level}]", self.message]

        if self.duration_ms is not None:
            parts.append(f"({self.duration_ms:.2f}ms)")

        if self.error:
            parts.append(f"ERROR: {self.error}")

        return " ".join(parts)


def _entry(record: logging.LogRecord, timestamp: str) -> LogEntry:
    return LogEntry(
        timestamp=timestamp,
        level=record.levelname,
        message=record.getMessage(),
        logger=record.name,
        run_id=getattr(record, "run_id", None),
        book=getattr(record, "book", None),
        operation=getattr(record, "operation", None),
        duration_ms=getattr(record, "duration_ms", None),
        error=str(record.exc_info[1]) if record.exc_info else None,
        error_type=record.exc_info[0].__name__ if record.exc_info and record.exc_info[0] else None,
        context=getattr(record, "context", None) or {},
    )


class JSONFormatter(logging.Formatter):
    """JSON log formatter for machine consumption."""

    def format(self, record: logging.LogRecord) -> str:
        return _entry(record, datetime.utcnow().isoformat()).to_json()


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for the console."""

    def format(self, record: logging.LogRecord) -> str:
        text = _entry(record, datetime.now().strftime("%H:%M:%S")).to_human()
        if record.exc_info and record.levelno >= logging.ERROR:
            text += "\n" + self.formatException(record.exc_info)
        return text


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Console log level name
        json_output: Emit JSON lines on the console instead of text
        log_file: Optional file receiving DEBUG-level JSON lines

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(JSONFormatter() if json_output else HumanFormatter())
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    return logger


class TimedOperation:
    """Context manager for timing operations."""

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        context: Optional[LogContext] = None,
    ):
        self._logger = logger
        self._operation = operation
        self._context = context.with_operation(operation) if context else LogContext(operation=operation)
        self._start_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self._start_time = datetime.utcnow()
        self._logger.debug(f"Starting {self._operation}", extra=self._context.as_extra())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (datetime.utcnow() - self._start_time).total_seconds() * 1000
        extra = dict(self._context.as_extra(), duration_ms=self.duration_ms)

        if exc_type:
            self._logger.error(f"Failed {self._operation}", extra=extra)
        else:
            self._logger.info(f"Completed {self._operation}", extra=extra)

        return False  # Don't suppress exceptions
