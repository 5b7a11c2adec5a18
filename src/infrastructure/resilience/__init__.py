"""
Resilience patterns for the documentation downloader.

Provides:
- Retry policies with exponential backoff
- Critical (session-breaking) error classification
"""
from .retry_policy import RetryPolicy, ExponentialBackoff, RetryExhaustedError
from .error_classifier import CriticalErrorClassifier, DEFAULT_CRITICAL_PATTERNS

__all__ = [
    "RetryPolicy",
    "ExponentialBackoff",
    "RetryExhaustedError",
    "CriticalErrorClassifier",
    "DEFAULT_CRITICAL_PATTERNS",
]
