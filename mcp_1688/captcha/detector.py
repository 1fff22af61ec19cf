"""
Captcha detection for 1688 pages.

Heuristic substring checks against the page content, title and URL. False
negatives are possible; no false-positive mitigation is attempted.
"""

import logging
from typing import List

from playwright.async_api import Page


logger = logging.getLogger(__name__)


# Markers looked for in the page HTML
CONTENT_MARKERS = (
    "验证码",     # "verification code"
    "滑动验证",   # "slide to verify"
    "nc_1_n1z",   # slider widget element id
)
TITLE_MARKER = "Captcha"
URL_MARKER = "punish"


def find_captcha_markers(content: str, title: str, url: str) -> List[str]:
    """Return every captcha marker present in the page text, title and URL."""
    found = [marker for marker in CONTENT_MARKERS if marker in (content or "")]
    if TITLE_MARKER in (title or ""):
        found.append(f"title:{TITLE_MARKER}")
    if URL_MARKER in (url or ""):
        found.append(f"url:{URL_MARKER}")
    return found


def has_captcha_markers(content: str, title: str, url: str) -> bool:
    """True if any captcha marker is present."""
    return bool(find_captcha_markers(content, title, url))


class CaptchaDetector:
    """Read-only captcha detection on a loaded page."""

    async def detect(self, page: Page) -> bool:
        """
        Inspect the page for captcha markers.

        Args:
            page: Playwright page that finished loading

        Returns:
            True if any marker was found
        """
        content = await page.content()
        title = await page.title()
        url = page.url

        markers = find_captcha_markers(content, title, url)
        if markers:
            logger.warning(f"Captcha detected on {url}: {markers}")
            return True

        logger.debug(f"No captcha markers on {url}")
        return False
