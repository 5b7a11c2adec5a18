"""
Critical error classification.

Decides whether a failure means the browser session itself is broken
and must be restarted before the next book.
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


# Playwright error vocabulary for a dead browser, context or connection.
DEFAULT_CRITICAL_PATTERNS: Tuple[str, ...] = (
    "Object with guid",
    "not bound in the connection",
    "has been closed",
    "Target closed",
    "Navigation failed",
    "context has been destroyed",
)


@dataclass(frozen=True)
class CriticalErrorClassifier:
    """
    Matches error messages against a list of session-corruption substrings.

    The error and everything it wraps (__cause__, __context__ and the
    last_exception of retry errors) are inspected.
    """
    patterns: Tuple[str, ...] = DEFAULT_CRITICAL_PATTERNS

    def matching_pattern(self, error: BaseException) -> Optional[str]:
        for message in _messages(error):
            for pattern in self.patterns:
                if pattern in message:
                    return pattern
        return None

    def is_critical(self, error: BaseException) -> bool:
        return self.matching_pattern(error) is not None


def _messages(error: BaseException) -> Iterator[str]:
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield str(current)
        current = (
            getattr(current, "last_exception", None)
            or current.__cause__
            or current.__context__
        )
