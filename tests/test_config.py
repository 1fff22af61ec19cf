"""Tests for configuration module."""

import pytest

from mcp_1688.config import (
    DEFAULT_USER_AGENT,
    ServerConfig,
    BrowserConfig,
    NavigationConfig,
    CaptchaConfig,
    build_config_dict,
    get_server_config,
)
from mcp_1688.error_handling.errors import ConfigurationError


def test_config_defaults_from_empty_environment():
    """Test that an empty environment yields the documented defaults."""
    settings = get_server_config({})

    assert isinstance(settings, ServerConfig)
    assert settings.server_name == "1688-mcp"

    assert isinstance(settings.browser, BrowserConfig)
    assert settings.browser.headless is True
    assert settings.browser.proxy_url is None
    assert settings.browser.cookies_raw == ""
    assert settings.browser.user_agent == DEFAULT_USER_AGENT
    assert (settings.browser.viewport_width, settings.browser.viewport_height) == (1280, 720)

    assert isinstance(settings.navigation, NavigationConfig)
    assert settings.navigation.timeout_ms == 60000
    assert settings.navigation.wait_until == "domcontentloaded"

    assert isinstance(settings.captcha, CaptchaConfig)
    assert settings.captcha.api_key is None
    assert settings.captcha.task_type == "AliyunCaptchaTask"
    assert settings.captcha.scene == "nc_message"
    assert settings.captcha.poll_interval_seconds == 1.5
    assert settings.captcha.max_polls == 20
    assert settings.captcha.proceed_when_headed is True


def test_environment_values_are_applied():
    """Test that recognised variables override defaults."""
    settings = get_server_config({
        "HEADLESS": "false",
        "PROXY_URL": "http://proxy.local:8080",
        "COOKIES_1688": '[{"name": "cna", "value": "x", "domain": ".1688.com", "path": "/"}]',
        "CAPSOLVER_API_KEY": "CAP-123",
        "CAPSOLVER_TASK_TYPE": "AntiGeeTestTaskProxyless",
        "CAPSOLVER_MAX_POLLS": "5",
        "NAVIGATION_TIMEOUT_MS": "15000",
    })

    assert settings.browser.headless is False
    assert settings.browser.proxy_url == "http://proxy.local:8080"
    assert settings.browser.cookies_raw.startswith("[")
    assert settings.captcha.api_key == "CAP-123"
    assert settings.captcha.task_type == "AntiGeeTestTaskProxyless"
    assert settings.captcha.max_polls == 5
    assert settings.navigation.timeout_ms == 15000


def test_headless_requires_exact_true():
    """Only the exact string "true" enables headless mode."""
    assert get_server_config({"HEADLESS": "true"}).browser.headless is True
    assert get_server_config({"HEADLESS": "TRUE"}).browser.headless is False
    assert get_server_config({"HEADLESS": "1"}).browser.headless is False


def test_empty_optional_values_become_none():
    """Empty PROXY_URL and CAPSOLVER_API_KEY are treated as unset."""
    settings = get_server_config({"PROXY_URL": "", "CAPSOLVER_API_KEY": "", "CAPSOLVER_TASK_TYPE": ""})

    assert settings.browser.proxy_url is None
    assert settings.captcha.api_key is None
    assert settings.captcha.task_type == "AliyunCaptchaTask"


def test_environment_read_at_call_time(monkeypatch):
    """get_server_config reads os.environ on each call."""
    monkeypatch.setenv("CAPSOLVER_API_KEY", "first")
    assert get_server_config().captcha.api_key == "first"

    monkeypatch.setenv("CAPSOLVER_API_KEY", "second")
    assert get_server_config().captcha.api_key == "second"


def test_build_config_dict_shape():
    """Nested sections map one-to-one onto the dataclasses."""
    raw = build_config_dict({})

    BrowserConfig(**raw["browser"])
    NavigationConfig(**raw["navigation"])
    CaptchaConfig(**raw["captcha"])


def test_dataclass_initialization():
    """Test that all config dataclasses can be initialized."""
    settings = ServerConfig()
    assert isinstance(settings.browser, BrowserConfig)
    assert isinstance(settings.navigation, NavigationConfig)
    assert isinstance(settings.captcha, CaptchaConfig)

    custom = ServerConfig(browser=BrowserConfig(headless=False))
    assert custom.browser.headless is False
    assert custom.captcha.max_polls == 20


@pytest.mark.parametrize("name,value", [
    ("NAVIGATION_TIMEOUT_MS", "sixty"),
    ("NAVIGATION_TIMEOUT_MS", "0"),
    ("CAPSOLVER_MAX_POLLS", "2.5"),
    ("CAPSOLVER_MAX_POLLS", "0"),
    ("CAPSOLVER_POLL_INTERVAL_SECONDS", "fast"),
    ("CAPSOLVER_POLL_INTERVAL_SECONDS", "-1"),
])
def test_bad_numeric_values_raise_configuration_error(name, value):
    """Malformed or out-of-range numbers are reported as ConfigurationError."""
    with pytest.raises(ConfigurationError) as exc_info:
        get_server_config({name: value})

    assert name in str(exc_info.value)
