"""
Search orchestrator for the 1688 MCP server.

Runs one search invocation end to end: launch a browser session, load the
search page, deal with a captcha if one shows up, scrape and filter offer
cards, and release the session.
"""

import logging
from typing import List, Optional

from mcp_1688.browser_automation.navigator import PageNavigator
from mcp_1688.browser_automation.session_launcher import BrowserSessionLauncher
from mcp_1688.captcha.detector import CaptchaDetector
from mcp_1688.captcha.solver import CaptchaResolver
from mcp_1688.config.server_config import ServerConfig, get_server_config
from mcp_1688.error_handling.errors import CaptchaUnresolved
from mcp_1688.extraction_engine import ListingExtractor
from mcp_1688.filtering.listing_filter import ListingFilter
from mcp_1688.models import Listing, SearchRequest


# Configure logging
logger = logging.getLogger(__name__)


UNRESOLVED_MESSAGE = (
    "Captcha detected (punish page). "
    "Use a residential proxy (PROXY_URL) or correct CapSolver config."
)


class OfferSearchAgent:
    """
    Orchestrates one 1688 offer search.

    Every call to ``search`` gets its own browser session; nothing is shared
    between invocations.

    Attributes:
        config: Server configuration for this invocation
        launcher: Browser session launcher
        navigator: Page navigation component
        detector: Captcha detection component
        resolver: Captcha solving component
        extractor: Offer card extraction component
        filter: Result filtering component
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        launcher: Optional[BrowserSessionLauncher] = None,
        navigator: Optional[PageNavigator] = None,
        detector: Optional[CaptchaDetector] = None,
        resolver: Optional[CaptchaResolver] = None,
        extractor: Optional[ListingExtractor] = None,
        listing_filter: Optional[ListingFilter] = None
    ):
        """
        Initialize the search agent.

        Args:
            config: Server configuration (read from the environment if omitted)
            launcher: Session launcher override
            navigator: Navigator override
            detector: Captcha detector override
            resolver: Captcha resolver override
            extractor: Extractor override
            listing_filter: Filter override
        """
        self.config = config or get_server_config()

        self.launcher = launcher or BrowserSessionLauncher(self.config.browser)
        self.navigator = navigator or PageNavigator(self.config.navigation)
        self.detector = detector or CaptchaDetector()
        self.resolver = resolver or CaptchaResolver(self.config.captcha)
        self.extractor = extractor or ListingExtractor()
        self.filter = listing_filter or ListingFilter()

    async def search(self, request: SearchRequest) -> List[Listing]:
        """
        Execute the complete search workflow.

        Args:
            request: Validated search parameters

        Returns:
            Listings in page order, at most ``request.max_results``

        Raises:
            SessionResourceError: If the browser cannot be launched
            NavigationTimeout: If the search page does not load in time
            ConfigurationError: If a captcha needs solving and no API key is set
            CaptchaUnresolved: If a captcha could not be solved in headless mode
        """
        logger.info(
            f"Starting search: query='{request.query}', max_results={request.max_results}, "
            f"min_price={request.min_price}, max_price={request.max_price}"
        )

        session = await self.launcher.launch()
        async with session:
            page = session.page

            await self.navigator.navigate_to_search(page, request.query)

            if await self.detector.detect(page):
                await self._resolve_captcha(page)

            raw_listings = await self.extractor.extract_listings(page, request.max_results)

        kept = self.filter.apply(raw_listings, request.min_price, request.max_price)
        logger.info(f"Search complete: {len(kept)} of {len(raw_listings)} scraped listings kept")

        return [raw.to_listing() for raw in kept]

    async def _resolve_captcha(self, page) -> None:
        outcome = await self.resolver.solve(page)

        if outcome.solved:
            await self.navigator.reload(page)
            return

        logger.error("Captcha detected and not solved. Update PROXY_URL or CAPSOLVER config.")

        headless = self.config.browser.headless
        if headless or not self.config.captcha.proceed_when_headed:
            raise CaptchaUnresolved(UNRESOLVED_MESSAGE)

        logger.warning("Continuing with visible browser; the captcha may be solved by hand")
