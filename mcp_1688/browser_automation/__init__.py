"""Browser automation module for Playwright-driven 1688 searches."""

from mcp_1688.browser_automation.session_launcher import (
    BrowserSession,
    BrowserSessionLauncher,
    parse_cookies,
)
from mcp_1688.browser_automation.navigator import PageNavigator

__all__ = ["BrowserSession", "BrowserSessionLauncher", "PageNavigator", "parse_cookies"]
