"""
Main entry point and CLI for the 1688 search MCP server.

Runs the MCP server over stdio, or performs a single search from the
command line and prints the JSON results.
"""

import asyncio
import argparse
import json
import logging
import sys
from typing import List, Optional
from datetime import datetime

from dotenv import load_dotenv
from pydantic import ValidationError

from mcp_1688.agent.search_agent import OfferSearchAgent
from mcp_1688.config.server_config import ServerConfig, get_server_config
from mcp_1688.error_handling.error_handler import ErrorHandler
from mcp_1688.error_handling.errors import ConfigurationError, SearchError
from mcp_1688.models import SearchRequest, SearchResults
from mcp_1688.server import create_server


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", verbose: bool = False) -> None:
    """
    Configure root logging. Logs go to stderr; stdout carries the MCP
    stdio transport.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


async def run_search(
    query: str,
    max_results: int = 5,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    config: Optional[ServerConfig] = None
) -> int:
    """
    Execute one search and print the results as JSON.

    Args:
        query: Search keywords
        max_results: Maximum number of listings
        min_price: Minimum price filter (optional)
        max_price: Maximum price filter (optional)
        config: Server configuration (read from the environment if omitted)

    Returns:
        Exit code (0 for success, 1 for search failure, 2 for invalid input)
    """
    try:
        request = SearchRequest(
            query=query,
            max_results=max_results,
            min_price=min_price,
            max_price=max_price
        )
    except ValidationError as e:
        logger.error(f"Invalid search parameters: {e}")
        print(f"Error: invalid search parameters\n{e}", file=sys.stderr)
        return 2

    agent = OfferSearchAgent(config=config or get_server_config())
    start_time = datetime.now()

    try:
        listings = await agent.search(request)
    except SearchError as e:
        handler = ErrorHandler()
        handler.log_error("search", e, {"query": query})
        print(f"\n❌ Error: {e}", file=sys.stderr)
        for suggestion in handler.recovery_suggestions(e):
            print(f"   - {suggestion}", file=sys.stderr)
        return 1

    elapsed_time = (datetime.now() - start_time).total_seconds()
    logger.info(f"Search completed in {elapsed_time:.2f} seconds")

    payload = SearchResults(results=listings).model_dump()
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="mcp-1688",
        description="1688.com offer search exposed as an MCP tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the MCP server on stdio (default)
  mcp-1688 serve

  # One-off search from the command line
  mcp-1688 search "stainless steel cup" --max-results 3

  # Search with a price range
  mcp-1688 search "保温杯" --min-price 5 --max-price 20 --verbose
        """
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the MCP server on stdio")

    search = subparsers.add_parser("search", help="Run a single search and print JSON")
    search.add_argument("query", help="Search keywords")
    search.add_argument(
        "--max-results",
        type=int,
        default=5,
        help="Maximum number of listings (1-20, default 5)"
    )
    search.add_argument(
        "--min-price",
        type=float,
        default=None,
        help="Minimum price filter"
    )
    search.add_argument(
        "--max-price",
        type=float,
        default=None,
        help="Maximum price filter"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code
    """
    load_dotenv()

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = get_server_config()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level, args.verbose)

    if args.command == "search":
        try:
            return asyncio.run(
                run_search(
                    query=args.query,
                    max_results=args.max_results,
                    min_price=args.min_price,
                    max_price=args.max_price,
                    config=config
                )
            )
        except KeyboardInterrupt:
            logger.info("Search interrupted by user")
            print("\n\n⚠️  Search interrupted by user", file=sys.stderr)
            return 130

    logger.info("Starting 1688 MCP server on stdio")
    create_server(config.server_name).run(transport="stdio")
    return 0


if __name__ == "__main__":
    sys.exit(main())
