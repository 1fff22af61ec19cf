"""Filtering module for 1688 search results."""

from .listing_filter import ListingFilter

__all__ = ['ListingFilter']
