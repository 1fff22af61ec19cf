"""
Page navigator for 1688 search pages.

Loads search result pages with Playwright, waiting only for the DOM to be
parsed, and maps load timeouts onto NavigationTimeout.
"""

import logging
from typing import Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from mcp_1688.config.server_config import NavigationConfig
from mcp_1688.error_handling.errors import NavigationTimeout
from mcp_1688.url_builder import OfferSearchURLBuilder


# Configure logging
logger = logging.getLogger(__name__)


class PageNavigator:
    """
    Drives a page to the 1688 offer search results.

    Navigation is attempted once; a timeout is a hard failure.

    Attributes:
        config: Navigation timeout and wait state
        url_builder: Search URL construction component
    """

    def __init__(
        self,
        config: Optional[NavigationConfig] = None,
        url_builder: Optional[OfferSearchURLBuilder] = None
    ):
        self.config = config or NavigationConfig()
        self.url_builder = url_builder or OfferSearchURLBuilder()

    async def navigate_to_url(self, page: Page, url: str) -> None:
        """
        Navigate to a URL and wait until the DOM is parsed.

        Args:
            page: Playwright page
            url: The URL to navigate to

        Raises:
            NavigationTimeout: If the page does not load within the timeout
        """
        logger.info(f"Navigating to URL: {url} with timeout {self.config.timeout_ms}ms")

        try:
            await page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.timeout_ms
            )
        except PlaywrightTimeoutError as e:
            logger.error(f"Navigation to {url} timed out: {e}")
            raise NavigationTimeout(url, self.config.timeout_ms) from e

        logger.info(f"Successfully navigated to {url}")

    async def navigate_to_search(self, page: Page, query: str) -> str:
        """
        Navigate to the search results page for a query.

        Args:
            page: Playwright page
            query: Search keywords

        Returns:
            The URL that was loaded
        """
        url = self.url_builder.build_search_url(query)
        await self.navigate_to_url(page, url)
        return url

    async def reload(self, page: Page) -> None:
        """
        Reload the current page, e.g. after a captcha was solved.

        Raises:
            NavigationTimeout: If the reload does not finish within the timeout
        """
        logger.info("Reloading page")
        try:
            await page.reload(
                wait_until=self.config.wait_until,
                timeout=self.config.timeout_ms
            )
        except PlaywrightTimeoutError as e:
            logger.error(f"Reload of {page.url} timed out: {e}")
            raise NavigationTimeout(page.url, self.config.timeout_ms) from e
