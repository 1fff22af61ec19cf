"""
Extraction engine for parsing 1688 offer cards from the DOM.

This module provides the ListingExtractor class that walks the rendered
search page with Playwright element handles and scrapes each offer card
field by field.
"""

import logging
import re
from typing import List, Optional

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from mcp_1688.models import FieldResult, RawListing


logger = logging.getLogger(__name__)


PRICE_NUMBER_RE = re.compile(r'[0-9]+(?:\.[0-9]+)?')


class ListingExtractor:
    """Extracts listing data from 1688 search result pages.

    Offer cards are located by their ``data-offer-id`` attribute; fields
    inside a card are matched with class-name patterns, which are fragile
    against markup changes by nature.
    """

    ITEM_SELECTOR = '[data-offer-id]'
    TITLE_SELECTOR = '[class*=title], a'
    PRICE_SELECTOR = '[class*=price], [class*=moq], .price'
    LINK_SELECTOR = 'a'
    SELLER_SELECTOR = '[class*=company], [class*=seller]'

    TEXT_SCRIPT = "el => el.textContent"
    HREF_SCRIPT = "el => el.href"

    async def extract_listings(self, page: Page, max_results: int) -> List[RawListing]:
        """Scrape up to ``max_results`` offer cards in document order.

        Args:
            page: Loaded search results page
            max_results: Maximum number of cards to scrape

        Returns:
            One RawListing per scraped card
        """
        items = await page.query_selector_all(self.ITEM_SELECTOR)
        logger.info(f"Found {len(items)} offer cards, scraping up to {max_results}")

        listings = []
        for item in items[:max_results]:
            listings.append(await self.extract_item(item))

        return listings

    async def extract_item(self, item: ElementHandle) -> RawListing:
        """Scrape the four fields of one card independently."""
        return RawListing(
            title=await self._scrape_field(item, self.TITLE_SELECTOR, self.TEXT_SCRIPT),
            price=await self._scrape_field(item, self.PRICE_SELECTOR, self.TEXT_SCRIPT),
            link=await self._scrape_field(item, self.LINK_SELECTOR, self.HREF_SCRIPT),
            seller=await self._scrape_field(item, self.SELLER_SELECTOR, self.TEXT_SCRIPT),
        )

    async def _scrape_field(
        self,
        item: ElementHandle,
        selector: str,
        script: str
    ) -> FieldResult:
        try:
            element = await item.query_selector(selector)
            if element is None:
                return FieldResult.absent()
            value = await element.evaluate(script)
        except PlaywrightError as e:
            logger.debug(f"Field scrape failed for '{selector}': {e}")
            return FieldResult.absent()

        return FieldResult.found(value if isinstance(value, str) else None)

    @staticmethod
    def parse_price_value(price_str: Optional[str]) -> Optional[float]:
        """Parse the first number out of a raw price string.

        Handles integers and decimals surrounded by currency or unit noise,
        e.g. "¥12.50起" -> 12.5.

        Args:
            price_str: Raw price text

        Returns:
            Numeric price, or None if no number is present
        """
        if not price_str:
            return None

        match = PRICE_NUMBER_RE.search(price_str)
        return float(match.group(0)) if match else None
