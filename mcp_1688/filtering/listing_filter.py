"""
Listing filter implementation for 1688 search results.

This module provides price-range and title filtering for scraped offer
cards.
"""

from typing import List, Optional

from mcp_1688.extraction_engine import ListingExtractor
from mcp_1688.models import RawListing


class ListingFilter:
    """Filters scraped offer cards by price range and title presence."""

    def filter_by_price(
        self,
        listings: List[RawListing],
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> List[RawListing]:
        """Filter listings by price range.

        Listings whose price text contains no number are kept: the bound
        only excludes prices it can read.

        Args:
            listings: Listings to filter
            min_price: Minimum price (inclusive), None for no minimum
            max_price: Maximum price (inclusive), None for no maximum

        Returns:
            Listings within the range or with an unreadable price
        """
        filtered = []

        for listing in listings:
            price_value = ListingExtractor.parse_price_value(listing.price.value)

            if price_value is not None:
                if min_price is not None and price_value < min_price:
                    continue
                if max_price is not None and price_value > max_price:
                    continue

            filtered.append(listing)

        return filtered

    def filter_untitled(self, listings: List[RawListing]) -> List[RawListing]:
        """Drop listings whose title is missing or empty."""
        return [listing for listing in listings if listing.title.value]

    def apply(
        self,
        listings: List[RawListing],
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> List[RawListing]:
        """Apply the price filter and the title requirement, preserving order."""
        return self.filter_untitled(self.filter_by_price(listings, min_price, max_price))
