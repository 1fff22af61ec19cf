"""
Exception taxonomy for the 1688 search pipeline.

Field-level scrape misses are not exceptions; they are represented by
``FieldResult.absent()`` in the extraction engine.
"""


class SearchError(Exception):
    """Base class for failures that abort a search invocation."""


class ConfigurationError(SearchError):
    """Required configuration is missing (e.g. CAPSOLVER_API_KEY)."""


class NavigationTimeout(SearchError):
    """The search page did not reach the expected load state in time."""

    def __init__(self, url: str, timeout_ms: int):
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Navigation to {url} timed out after {timeout_ms}ms")


class CaptchaUnresolved(SearchError):
    """A captcha was detected and could not be solved."""


class SessionResourceError(SearchError):
    """The browser session could not be launched or torn down."""
