"""
Docs adapter error hierarchy.

Distinguishes recoverable from permanent errors.
Per-book errors are recorded in the result ledger; only
SetupFailureError ends a run.
"""


class DocsAdapterError(Exception):
    """Base class for documentation downloader errors."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.recoverable = recoverable


class BrowserNotAvailableError(DocsAdapterError):
    """Playwright/browser not available."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class SessionUnavailableError(DocsAdapterError):
    """The browser session was torn down and not launched again."""

    def __init__(self, message: str = "Browser session is not available"):
        super().__init__(message, recoverable=False)


class NavigationFailedError(DocsAdapterError):
    """Listing page could not be loaded."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message, recoverable=True)
        self.url = url


class ContentNotFoundError(DocsAdapterError):
    """Listing tiles never became visible."""

    def __init__(self, message: str, selector: str = ""):
        super().__init__(message, recoverable=True)
        self.selector = selector


class LocatorInputError(DocsAdapterError):
    """Book entry lacks the title or link needed to locate its PDF."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class PatternNotFoundError(DocsAdapterError):
    """No PDF link matching the product was found in the page markup."""

    def __init__(self, message: str, pattern: str = ""):
        super().__init__(message, recoverable=False)
        self.pattern = pattern


class UIInteractionError(DocsAdapterError):
    """A step of the format-selector interaction failed."""

    CONTROL_WAIT = "control-wait"
    SELECTION = "selection"
    NEW_PAGE_WAIT = "new-page-wait"
    URL_WAIT = "url-wait"
    LOAD_WAIT = "load-wait"

    def __init__(self, message: str, stage: str):
        super().__init__(f"[{stage}] {message}", recoverable=True)
        self.stage = stage


class HttpStatusError(DocsAdapterError):
    """PDF request answered with a status other than 200."""

    def __init__(self, message: str, status_code: int, url: str = ""):
        super().__init__(message, recoverable=status_code >= 500)
        self.status_code = status_code
        self.url = url


class EmptyContentError(DocsAdapterError):
    """PDF request returned an empty body."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message, recoverable=True)
        self.url = url


class SetupFailureError(DocsAdapterError):
    """Session launch or listing scan failed; no books can be processed."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)
