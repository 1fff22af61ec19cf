"""
URL construction module for 1688 offer searches.

This module builds the s.1688.com search URL for a keyword query.
"""

from urllib.parse import quote


class OfferSearchURLBuilder:
    """Constructs 1688 offer search URLs with an encoded keyword parameter."""

    BASE_URL = "https://s.1688.com/selloffer/offer_search.htm"

    # Characters encodeURIComponent leaves untouched besides [A-Za-z0-9_.~-]
    SAFE_CHARS = "!*'()"

    def build_search_url(self, query: str) -> str:
        """Construct the offer search URL for a keyword query.

        Spaces are encoded as %20 and non-ASCII text as percent-encoded UTF-8.
        Price bounds are not sent to the site; they are applied after
        scraping.

        Args:
            query: Search keywords

        Returns:
            Complete search URL

        Examples:
            >>> OfferSearchURLBuilder().build_search_url("stainless steel cup")
            'https://s.1688.com/selloffer/offer_search.htm?keywords=stainless%20steel%20cup'
        """
        encoded = quote(query, safe=self.SAFE_CHARS)
        return f"{self.BASE_URL}?keywords={encoded}"
