"""
Error handler for the 1688 search pipeline.

Logs failures with diagnostic context and turns them into recovery
suggestions and user-visible tool error messages. There is no retry logic
here: a failed invocation fails once.
"""

import logging
from typing import Any, Dict, List, Optional
from datetime import datetime

from mcp_1688.error_handling.errors import (
    CaptchaUnresolved,
    ConfigurationError,
    NavigationTimeout,
    SearchError,
    SessionResourceError,
)


# Configure logging
logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Error handler with diagnostic capabilities.

    Provides consistent error logging and recovery suggestions for
    browser automation and captcha solving failures.
    """

    def log_error(
        self,
        operation_name: str,
        error: Exception,
        context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            context: Extra key/value pairs describing the operation

        Returns:
            The diagnostic context that was logged
        """
        details = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': {k: str(v) for k, v in (context or {}).items()},
        }

        logger.error(
            f"Operation failed: {operation_name} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {details}")

        return details

    def recovery_suggestions(self, error: Exception) -> List[str]:
        """
        Provide recovery suggestions for a pipeline failure.

        Args:
            error: The exception raised by the pipeline

        Returns:
            List of actionable suggestions, most relevant first
        """
        if isinstance(error, ConfigurationError) and 'CAPSOLVER_API_KEY' not in str(error):
            return ['Correct the environment variable named in the error']
        if isinstance(error, ConfigurationError):
            return [
                'Set CAPSOLVER_API_KEY to enable automatic captcha solving',
                'Or run with HEADLESS=false and solve the captcha by hand',
            ]
        if isinstance(error, CaptchaUnresolved):
            return [
                'Use a residential proxy (PROXY_URL)',
                'Check CAPSOLVER_API_KEY and CAPSOLVER_TASK_TYPE',
                'Provide logged-in cookies via COOKIES_1688',
            ]
        if isinstance(error, NavigationTimeout):
            return [
                'Increase NAVIGATION_TIMEOUT_MS',
                'Check your internet connection and proxy settings',
                'Verify s.1688.com is reachable from this host',
            ]
        if isinstance(error, SessionResourceError):
            return [
                'Install the browser with "playwright install chromium"',
                'Verify PROXY_URL is a valid proxy server address',
                'Check system resources (CPU, memory)',
            ]
        return ['Check the server logs for details']

    def tool_message(self, error: Exception) -> str:
        """
        Build the user-visible error string returned to the MCP client.

        Args:
            error: The exception raised by the pipeline

        Returns:
            One-line error message with the first recovery hint appended
        """
        if not isinstance(error, SearchError):
            return f"Search failed: {error}"

        hints = self.recovery_suggestions(error)
        return f"{error} Hint: {hints[0]}." if hints else str(error)
