"""
Tests for page navigation.

These tests verify load options and the mapping of Playwright timeouts onto
NavigationTimeout.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from hypothesis import given, settings, strategies as st

from mcp_1688.browser_automation.navigator import PageNavigator
from mcp_1688.config.server_config import NavigationConfig
from mcp_1688.error_handling.errors import NavigationTimeout
from page_fakes import FakePage, PlaywrightTimeoutError


@given(timeout_ms=st.integers(min_value=1000, max_value=120000))
@settings(max_examples=50, deadline=None)
def test_timeout_is_passed_to_goto(timeout_ms):
    """
    **Property: navigation timeout configuration**

    The configured timeout reaches page.goto unchanged.
    """
    page = FakePage()
    navigator = PageNavigator(NavigationConfig(timeout_ms=timeout_ms))

    asyncio.run(navigator.navigate_to_url(page, "https://s.1688.com/"))

    assert page.goto_calls[0]["timeout"] == timeout_ms


@pytest.mark.asyncio
async def test_navigate_to_search_defaults():
    """Search navigation waits for domcontentloaded with a 60s budget."""
    page = FakePage()

    url = await PageNavigator().navigate_to_search(page, "保温杯")

    assert url == "https://s.1688.com/selloffer/offer_search.htm?keywords=%E4%BF%9D%E6%B8%A9%E6%9D%AF"
    assert page.goto_calls == [{"url": url, "wait_until": "domcontentloaded", "timeout": 60000}]
    assert page.url == url


@pytest.mark.asyncio
async def test_goto_timeout_becomes_navigation_timeout():
    """A Playwright timeout is reported as NavigationTimeout with the URL."""
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout 60000ms exceeded."))

    with pytest.raises(NavigationTimeout) as exc_info:
        await PageNavigator().navigate_to_url(page, "https://s.1688.com/x")

    assert exc_info.value.url == "https://s.1688.com/x"
    assert exc_info.value.timeout_ms == 60000
    assert len(page.goto_calls) == 1


@pytest.mark.asyncio
async def test_reload_uses_same_wait_state():
    page = FakePage()
    page.reload = AsyncMock()

    await PageNavigator().reload(page)

    page.reload.assert_awaited_once_with(wait_until="domcontentloaded", timeout=60000)


@pytest.mark.asyncio
async def test_reload_timeout_becomes_navigation_timeout():
    page = FakePage(url="https://s.1688.com/punish")
    page.reload = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))

    with pytest.raises(NavigationTimeout):
        await PageNavigator().reload(page)
