"""
Browser session launcher built on Playwright.

Opens one isolated Chromium session (browser + context + page) per search
invocation and guarantees it is released exactly once.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from mcp_1688.config.server_config import BrowserConfig
from mcp_1688.error_handling.errors import SessionResourceError


# Configure logging
logger = logging.getLogger(__name__)


def parse_cookies(cookies_raw: Optional[str]) -> List[Dict[str, Any]]:
    """
    Parse a JSON-encoded cookie array.

    Lenient by contract: empty input, malformed JSON, or anything other than
    a list yields an empty list instead of an error. Non-object entries are
    dropped.

    Args:
        cookies_raw: JSON text such as the COOKIES_1688 variable

    Returns:
        List of cookie dicts suitable for ``BrowserContext.add_cookies``
    """
    if not cookies_raw or not cookies_raw.strip():
        return []

    try:
        cookies = json.loads(cookies_raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Ignoring malformed cookie JSON: {e}")
        return []

    if not isinstance(cookies, list):
        logger.warning("Ignoring cookie JSON that is not an array")
        return []

    return [cookie for cookie in cookies if isinstance(cookie, dict)]


class BrowserSession:
    """
    An exclusively-owned browser session for one search invocation.

    Use as an async context manager; the session is closed on every exit
    path and ``close()`` is safe to call more than once.

    Attributes:
        page: The page used for the search
        context: Browser context carrying user agent, viewport and cookies
        browser: The launched Chromium browser
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ):
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self, raise_errors: bool = True) -> None:
        """
        Release the browser and the Playwright driver.

        Args:
            raise_errors: Raise SessionResourceError on teardown failure;
                when False the failure is only logged

        Raises:
            SessionResourceError: If teardown fails and raise_errors is True
        """
        if self._closed:
            return
        self._closed = True

        failure: Optional[BaseException] = None
        try:
            await self.browser.close()
        except Exception as e:
            failure = e
            logger.error(f"Failed to close browser: {e}")
        try:
            await self.playwright.stop()
        except Exception as e:
            failure = failure or e
            logger.error(f"Failed to stop Playwright: {e}")

        if failure is None:
            logger.info("Browser session closed")
        elif raise_errors:
            raise SessionResourceError(f"Browser teardown failed: {failure}") from failure

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # Never mask an in-flight error with a teardown error
        await self.close(raise_errors=exc is None)


class BrowserSessionLauncher:
    """
    Launches Playwright Chromium sessions from a BrowserConfig.

    Attributes:
        config: Browser configuration (headless, proxy, cookies, user agent)
    """

    def __init__(
        self,
        config: BrowserConfig,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        """
        Initialize the launcher.

        Args:
            config: Browser configuration
            playwright_factory: Callable returning an object with ``start()``;
                defaults to ``async_playwright``
        """
        self.config = config
        self._playwright_factory = playwright_factory

    def launch_options(self) -> Dict[str, Any]:
        """Build keyword arguments for ``chromium.launch``."""
        options: Dict[str, Any] = {"headless": self.config.headless}
        if self.config.proxy_url:
            options["proxy"] = {"server": self.config.proxy_url}
        return options

    def context_options(self) -> Dict[str, Any]:
        """Build keyword arguments for ``browser.new_context``."""
        return {
            "user_agent": self.config.user_agent,
            "viewport": {
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
        }

    async def launch(self) -> BrowserSession:
        """
        Launch a new browser session.

        Returns:
            BrowserSession owning a fresh browser, context and page

        Raises:
            SessionResourceError: If the browser cannot be started
        """
        logger.info(
            f"Launching Chromium (headless={self.config.headless}, "
            f"proxy={'yes' if self.config.proxy_url else 'no'})"
        )

        playwright = None
        browser = None
        try:
            playwright = await self._playwright_factory().start()
            browser = await playwright.chromium.launch(**self.launch_options())
            context = await browser.new_context(**self.context_options())
            await self._apply_cookies(context)
            page = await context.new_page()
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            await self._release_partial(playwright, browser)
            raise SessionResourceError(f"Failed to launch browser session: {e}") from e

        return BrowserSession(playwright, browser, context, page)

    async def _apply_cookies(self, context: BrowserContext) -> int:
        """Inject configured cookies; failures are logged and ignored."""
        cookies = parse_cookies(self.config.cookies_raw)
        if not cookies:
            return 0

        try:
            await context.add_cookies(cookies)
        except (PlaywrightError, TypeError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring cookies rejected by the browser: {e}")
            return 0

        logger.info(f"Applied {len(cookies)} cookies")
        return len(cookies)

    async def _release_partial(self, playwright, browser) -> None:
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Error closing partially launched browser: {e}")
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
