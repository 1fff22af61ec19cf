"""
MCP tool server for 1688 offer search.

Registers a single ``search_1688`` tool on a FastMCP server. Each call reads
the configuration, runs one search invocation and returns the structured
results; FastMCP also renders them as pretty-printed JSON text.
"""

import logging
from typing import Annotated, Callable, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field, ValidationError

from mcp_1688.agent.search_agent import OfferSearchAgent
from mcp_1688.config.server_config import ServerConfig, get_server_config
from mcp_1688.error_handling.error_handler import ErrorHandler
from mcp_1688.error_handling.errors import SearchError
from mcp_1688.models import SearchRequest, SearchResults


logger = logging.getLogger(__name__)

TOOL_NAME = "search_1688"
TOOL_DESCRIPTION = "Search products on 1688.com"


async def search_offers(
    query: str,
    max_results: int = 5,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    config: Optional[ServerConfig] = None,
    agent_factory: Callable[[ServerConfig], OfferSearchAgent] = OfferSearchAgent,
    error_handler: Optional[ErrorHandler] = None
) -> SearchResults:
    """
    Run one search invocation for the MCP tool.

    Args:
        query: Search keywords
        max_results: Maximum number of offer cards to scrape
        min_price: Inclusive lower price bound (optional)
        max_price: Inclusive upper price bound (optional)
        config: Configuration override; read from the environment if omitted
        agent_factory: Builds the search agent for this invocation
        error_handler: Error handler used for logging failures

    Returns:
        SearchResults with the scraped listings

    Raises:
        ToolError: If the request is invalid or the search fails
    """
    error_handler = error_handler or ErrorHandler()

    try:
        request = SearchRequest(
            query=query,
            max_results=max_results,
            min_price=min_price,
            max_price=max_price,
        )
    except ValidationError as e:
        raise ToolError(f"Invalid search request: {e}") from e

    try:
        agent = agent_factory(config or get_server_config())
        listings = await agent.search(request)
    except SearchError as e:
        error_handler.log_error(TOOL_NAME, e, {"query": query, "max_results": max_results})
        raise ToolError(error_handler.tool_message(e)) from e

    return SearchResults(results=listings)


def create_server(
    name: Optional[str] = None,
    agent_factory: Callable[[ServerConfig], OfferSearchAgent] = OfferSearchAgent
) -> FastMCP:
    """
    Create the FastMCP server with the search tool registered.

    Args:
        name: Server name (defaults to the configured server name)
        agent_factory: Builds the search agent for each invocation

    Returns:
        Configured FastMCP server
    """
    server = FastMCP(name or get_server_config().server_name)
    error_handler = ErrorHandler()

    @server.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION, structured_output=True)
    async def search_1688(
        query: Annotated[str, Field(min_length=2, description="Search keywords")],
        maxResults: Annotated[int, Field(ge=1, le=20, description="Maximum number of listings")] = 5,
        minPrice: Annotated[Optional[float], Field(description="Minimum price (inclusive)")] = None,
        maxPrice: Annotated[Optional[float], Field(description="Maximum price (inclusive)")] = None,
    ) -> SearchResults:
        return await search_offers(
            query=query,
            max_results=maxResults,
            min_price=minPrice,
            max_price=maxPrice,
            agent_factory=agent_factory,
            error_handler=error_handler,
        )

    logger.info(f"Registered tool '{TOOL_NAME}'")
    return server
