"""Configuration module for the 1688 search MCP server."""

from .server_config import (
    DEFAULT_USER_AGENT,
    ServerConfig,
    BrowserConfig,
    NavigationConfig,
    CaptchaConfig,
    build_config_dict,
    get_server_config,
)

__all__ = [
    'DEFAULT_USER_AGENT',
    'ServerConfig',
    'BrowserConfig',
    'NavigationConfig',
    'CaptchaConfig',
    'build_config_dict',
    'get_server_config',
]
