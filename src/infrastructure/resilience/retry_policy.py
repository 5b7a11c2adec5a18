"""
Retry Policy Implementation

Provides bounded retry logic with exponential backoff for browser
and network actions.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Callable, Awaitable, Any, Set, Type

logger = logging.getLogger(__name__)


class RetryExhaustedError(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        label: str = "",
        last_exception: Optional[Exception] = None,
    ):
        self.message = message
        self.attempts = attempts
        self.label = label
        self.last_exception = last_exception
        super().__init__(message)


@dataclass(frozen=True)
class ExponentialBackoff:
    """
    Exponential backoff configuration.

    Calculates delay as: base_delay * (multiplier ^ attempt) + jitter,
    capped at max_delay.
    """
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 10.0
    jitter: float = 0.0  # Random factor (0-1)

    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay for given attempt number.

        Args:
            attempt: Attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay = self.base_delay * (self.multiplier ** attempt)
        delay = min(delay, self.max_delay)

        if self.jitter > 0:
            jitter_range = delay * self.jitter
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0, delay)


@dataclass
class RetryPolicy:
    """
    Retry policy with backoff support.

    max_retries counts retries, so an action runs at most
    max_retries + 1 times.

    Usage:
        policy = RetryPolicy(max_retries=1)

        result = await policy.execute(
            lambda: page.goto(url, timeout=45000),
            label=f"navigation to {url}",
        )
    """
    max_retries: int = 1
    backoff: ExponentialBackoff = field(default_factory=ExponentialBackoff)
    retryable_exceptions: Set[Type[Exception]] = field(
        default_factory=lambda: {Exception}
    )
    non_retryable_exceptions: Set[Type[Exception]] = field(default_factory=set)

    def should_retry(self, exception: Exception) -> bool:
        """
        Determine if the exception should trigger a retry.

        Args:
            exception: The exception that occurred

        Returns:
            True if should retry, False otherwise
        """
        # Non-retryable has higher priority
        for non_retryable in self.non_retryable_exceptions:
            if isinstance(exception, non_retryable):
                return False

        for retryable in self.retryable_exceptions:
            if isinstance(exception, retryable):
                return True

        return False

    async def execute(
        self,
        action: Callable[[], Awaitable[Any]],
        label: str = "operation",
        max_retries: Optional[int] = None,
    ) -> Any:
        """
        Execute an async action with retry logic.

        Args:
            action: Zero-argument callable returning an awaitable
            label: Human-readable name used in logs and errors
            max_retries: Overrides the policy's retry count for this call

        Returns:
            Result from the first successful attempt

        Raises:
            RetryExhaustedError: If all attempts fail
        """
        retries = self.max_retries if max_retries is None else max_retries
        total = retries + 1
        last_exception: Optional[Exception] = None

        for attempt in range(total):
            if attempt > 0:
                logger.info(f"Retry attempt {attempt}/{retries} for {label}...")
            try:
                return await action()
            except Exception as e:
                last_exception = e
                logger.error(f"Attempt {attempt + 1}/{total} failed for {label}: {e}")

                if not self.should_retry(e):
                    raise

                if attempt < total - 1:
                    delay = self.backoff.get_delay(attempt)
                    logger.info(f"Waiting {int(delay * 1000)}ms before retry...")
                    await asyncio.sleep(delay)

        raise RetryExhaustedError(
            f"All {total} attempts failed for {label}: {last_exception}",
            attempts=total,
            label=label,
            last_exception=last_exception,
        )
