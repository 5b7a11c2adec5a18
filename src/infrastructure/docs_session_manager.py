"""
Docs Session Manager for browser lifecycle.

Owns the single Playwright browser and cookie-bearing context shared by
every book of a run, and tears it down when it becomes unusable.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Callable, Any, List, Tuple

from src.infrastructure.adapters.docs_errors import (
    BrowserNotAvailableError,
    SessionUnavailableError,
)

logger = logging.getLogger(__name__)


# Consent/preference cookies that make the listing render without the
# cookie-consent gate.
CONSENT_COOKIES: Tuple[Tuple[str, str], ...] = (
    ("notice_behavior", "expressed,eu"),
    ("notice_preferences", "2:"),
    ("notice_gdpr_prefs", "0,1,2:"),
)


@dataclass(frozen=True)
class SessionConfig:
    """Browser identity and launch settings."""
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/110.0.0.0 Safari/537.36"
    )
    cookie_domain: str = ".redhat.com"
    cookies: Tuple[Tuple[str, str], ...] = CONSENT_COOKIES
    headed_slow_mo: int = 1000  # Milliseconds, only applied to headed sessions

    def cookie_list(self) -> list:
        return [
            {"name": name, "value": value, "domain": self.cookie_domain, "path": "/"}
            for name, value in self.cookies
        ]


def _default_playwright_factory() -> Callable[[], Any]:
    try:
        from playwright.async_api import async_playwright
    except ImportError:
        raise BrowserNotAvailableError(
            "Playwright not installed. Run: pip install playwright && playwright install chromium"
        )
    return async_playwright


class DocsSessionManager:
    """
    Manages the browser session used for a download run.

    Usage:
        session = DocsSessionManager()
        await session.launch(headed=False)
        page = await session.new_page()
        ...
        await session.restart()   # after a session-breaking error
        await session.launch(headed=False)
        ...
        await session.close()
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        playwright_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Initialize session manager.

        Args:
            config: Identity and launch settings
            playwright_factory: Callable returning a Playwright context
                manager (defaults to playwright.async_api.async_playwright)
        """
        self._config = config or SessionConfig()
        self._playwright_factory = playwright_factory
        self._playwright = None
        self._browser = None
        self._context = None
        self._valid = False
        self._headed = False
        self._launch_count = 0

    @property
    def launch_count(self) -> int:
        """Number of successful launches, restarts included."""
        return self._launch_count

    @property
    def headed(self) -> bool:
        return self._headed

    @property
    def is_usable(self) -> bool:
        """True when pages can be opened against the current context."""
        if not self._valid or self._context is None or self._browser is None:
            return False
        try:
            return bool(self._browser.is_connected())
        except Exception:
            return False

    async def launch(self, headed: bool = False) -> None:
        """
        Start Playwright, launch Chromium and create the identity context.

        Does nothing when the current session is still usable. Remains of
        a session that died without restart() are torn down first.
        """
        if self.is_usable:
            return
        if self._playwright is not None or self._browser is not None:
            logger.warning("Previous browser session is no longer usable, tearing it down")
            await self._teardown()

        factory = self._playwright_factory or _default_playwright_factory()
        slow_mo = self._config.headed_slow_mo if headed else 0

        self._playwright = await factory().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=not headed,
                slow_mo=slow_mo,
            )
            self._context = await self._browser.new_context(
                user_agent=self._config.user_agent,
            )
            await self._context.add_cookies(self._config.cookie_list())
        except Exception:
            await self._teardown()
            raise

        self._headed = headed
        self._valid = True
        self._launch_count += 1
        logger.info(
            f"Browser session launched ({'headed' if headed else 'headless'}"
            f"{f', slowMo {slow_mo}ms' if slow_mo else ''})"
        )

    async def new_page(self) -> Any:
        """Open a page in the current context."""
        if not self.is_usable:
            raise SessionUnavailableError()
        return await self._context.new_page()

    def expect_page(self, timeout_ms: int) -> Any:
        """
        Arm a listener for the next page opened in the context.

        Returns Playwright's async context manager; the new page is
        available as `await info.value` after the block.
        """
        if not self.is_usable:
            raise SessionUnavailableError()
        return self._context.expect_page(timeout=timeout_ms)

    def open_pages(self) -> List[Any]:
        """Pages currently open in the context, including tabs opened late."""
        if self._context is None:
            return []
        return list(getattr(self._context, "pages", None) or [])

    async def restart(self) -> None:
        """
        Force-close pages, context and browser and mark the session invalid.

        Close failures are logged and never raised. The next launch()
        creates a fresh session.
        """
        logger.warning("Restarting browser session")
        await self._teardown()

    async def close(self) -> None:
        """Final teardown at the end of a run."""
        if self._playwright is None and self._browser is None:
            return
        await self._teardown()
        logger.info("Browser session closed")

    async def _teardown(self) -> None:
        self._valid = False

        if self._context is not None:
            for page in self.open_pages():
                await _close_quietly(page, "page")
            await _close_quietly(self._context, "context")
            self._context = None

        if self._browser is not None:
            await _close_quietly(self._browser, "browser")
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop Playwright: {e}")
            self._playwright = None


async def _close_quietly(resource: Any, name: str) -> None:
    try:
        await resource.close()
    except Exception as e:
        logger.warning(f"Failed to close {name}: {e}")
