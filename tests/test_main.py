"""Tests for the command-line entry point."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mcp_1688 import main as cli
from mcp_1688.error_handling.errors import NavigationTimeout
from mcp_1688.models import Listing


def test_parser_search_arguments():
    args = cli.create_argument_parser().parse_args(
        ["-v", "search", "保温杯", "--max-results", "3", "--min-price", "5"]
    )

    assert args.command == "search"
    assert args.query == "保温杯"
    assert args.max_results == 3
    assert args.min_price == 5.0
    assert args.max_price is None
    assert args.verbose is True


def test_parser_defaults_to_serve():
    assert cli.create_argument_parser().parse_args([]).command is None


@pytest.mark.asyncio
async def test_run_search_rejects_invalid_input(capsys):
    assert await cli.run_search("cup", max_results=50) == 2
    assert "invalid search parameters" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_run_search_prints_json(capsys):
    """Results are printed as indented JSON with CJK kept readable."""
    agent = MagicMock()
    agent.search = AsyncMock(return_value=[Listing(title="保温杯", price="¥3", link="", seller="")])

    with patch.object(cli, "OfferSearchAgent", return_value=agent):
        code = await cli.run_search("保温杯")

    out = capsys.readouterr().out
    assert code == 0
    assert "保温杯" in out
    assert json.loads(out) == {"results": [{"title": "保温杯", "price": "¥3", "link": "", "seller": ""}]}


@pytest.mark.asyncio
async def test_run_search_failure_prints_suggestions(capsys):
    agent = MagicMock()
    agent.search = AsyncMock(side_effect=NavigationTimeout("https://s.1688.com/", 60000))

    with patch.object(cli, "OfferSearchAgent", return_value=agent):
        code = await cli.run_search("cup")

    assert code == 1
    assert "NAVIGATION_TIMEOUT_MS" in capsys.readouterr().err


def test_main_rejects_malformed_environment(monkeypatch, capsys):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("CAPSOLVER_MAX_POLLS", "many")

    assert cli.main(["search", "cup"]) == 2
    assert "CAPSOLVER_MAX_POLLS" in capsys.readouterr().err
