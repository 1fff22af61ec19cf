"""Server configuration settings for the 1688 search MCP server."""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional
import os

from mcp_1688.error_handling.errors import ConfigurationError


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


@dataclass
class BrowserConfig:
    """Browser session configuration."""
    headless: bool = True
    proxy_url: Optional[str] = None
    cookies_raw: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1280
    viewport_height: int = 720


@dataclass
class NavigationConfig:
    """Page navigation configuration."""
    timeout_ms: int = 60000
    wait_until: str = "domcontentloaded"


@dataclass
class CaptchaConfig:
    """Captcha solving configuration."""
    api_key: Optional[str] = None
    task_type: str = "AliyunCaptchaTask"
    scene: str = "nc_message"
    poll_interval_seconds: float = 1.5
    max_polls: int = 20
    request_timeout_seconds: float = 30.0
    proceed_when_headed: bool = True


@dataclass
class ServerConfig:
    """Main server configuration settings."""
    server_name: str = "1688-mcp"
    log_level: str = "INFO"
    browser: BrowserConfig = None
    navigation: NavigationConfig = None
    captcha: CaptchaConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.browser is None:
            self.browser = BrowserConfig()
        if self.navigation is None:
            self.navigation = NavigationConfig()
        if self.captcha is None:
            self.captcha = CaptchaConfig()


def _flag(value: Optional[str], default: str) -> bool:
    return (value if value is not None else default) == "true"


def _number(env: Mapping[str, str], name: str, default: str, cast: Callable, minimum: float):
    """Read a numeric variable, raising ConfigurationError if malformed or below minimum."""
    raw = env.get(name) or default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {raw!r}")
    return value


def build_config_dict(env: Mapping[str, str]) -> dict:
    """Build the raw configuration dictionary from an environment mapping."""
    return {
        "server_name": env.get("MCP_SERVER_NAME", "1688-mcp"),
        "log_level": env.get("LOG_LEVEL", "INFO"),
        "browser": {
            "headless": _flag(env.get("HEADLESS"), "true"),
            "proxy_url": env.get("PROXY_URL") or None,
            "cookies_raw": env.get("COOKIES_1688", ""),
        },
        "navigation": {
            "timeout_ms": _number(env, "NAVIGATION_TIMEOUT_MS", "60000", int, 1),
        },
        "captcha": {
            "api_key": env.get("CAPSOLVER_API_KEY") or None,
            "task_type": env.get("CAPSOLVER_TASK_TYPE") or "AliyunCaptchaTask",
            "scene": env.get("CAPSOLVER_SCENE") or "nc_message",
            "poll_interval_seconds": _number(env, "CAPSOLVER_POLL_INTERVAL_SECONDS", "1.5", float, 0),
            "max_polls": _number(env, "CAPSOLVER_MAX_POLLS", "20", int, 1),
            "proceed_when_headed": _flag(env.get("CAPTCHA_PROCEED_WHEN_HEADED"), "true"),
        },
    }


def get_server_config(env: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Get server settings from the environment.

    The environment is read on every call so each tool invocation sees the
    current values. Pass ``env`` to override the process environment.

    Args:
        env: Optional mapping used instead of ``os.environ``

    Returns:
        ServerConfig populated from the environment
    """
    raw = build_config_dict(os.environ if env is None else env)
    return ServerConfig(
        server_name=raw["server_name"],
        log_level=raw["log_level"],
        browser=BrowserConfig(**raw["browser"]),
        navigation=NavigationConfig(**raw["navigation"]),
        captcha=CaptchaConfig(**raw["captcha"]),
    )
