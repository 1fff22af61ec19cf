"""
Error handling module for the 1688 search server.

Provides the exception taxonomy and diagnostic logging helpers.
"""

from .errors import (
    SearchError,
    ConfigurationError,
    NavigationTimeout,
    CaptchaUnresolved,
    SessionResourceError,
)
from .error_handler import ErrorHandler

__all__ = [
    'ErrorHandler',
    'SearchError',
    'ConfigurationError',
    'NavigationTimeout',
    'CaptchaUnresolved',
    'SessionResourceError',
]
