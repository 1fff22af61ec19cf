"""Search orchestration for the 1688 MCP server."""

from .search_agent import OfferSearchAgent

__all__ = ['OfferSearchAgent']
