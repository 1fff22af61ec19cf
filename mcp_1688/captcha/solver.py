"""
Captcha resolution through the CapSolver task API.

Submits one task for the captcha on the current page and polls for the
result at a fixed interval. Polling is modelled as an explicit state
machine (see ``next_poll_state``) with an injectable sleep function.

The solution token is not applied to the page; callers reload the page
after a successful solve.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp
from playwright.async_api import Page

from mcp_1688.config.server_config import CaptchaConfig
from mcp_1688.error_handling.errors import ConfigurationError
from mcp_1688.models import CaptchaTask, PollState, SolveOutcome


logger = logging.getLogger(__name__)

CAPSOLVER_BASE_URL = "https://api.capsolver.com"

# Page-side config object carrying the slider captcha keys
PAGE_CONFIG_SCRIPT = "() => window._config_ || null"


def next_poll_state(
    state: PollState,
    status: Optional[str],
    attempt: int,
    max_polls: int
) -> PollState:
    """
    Compute the poll state after one getTaskResult response.

    Args:
        state: Current state
        status: ``status`` field of the response (may be None)
        attempt: Number of polls made so far, including this one
        max_polls: Poll budget

    Returns:
        The next state; terminal states are sticky
    """
    if state.terminal:
        return state
    if status == "ready":
        return PollState.READY
    if status == "failed":
        return PollState.FAILED
    if attempt >= max_polls:
        return PollState.TIMED_OUT
    return PollState.PENDING


_OUTCOMES = {
    PollState.READY: SolveOutcome.SOLVED,
    PollState.FAILED: SolveOutcome.FAILED,
    PollState.TIMED_OUT: SolveOutcome.TIMED_OUT,
}


class CapSolverClient:
    """
    Minimal async client for the CapSolver createTask/getTaskResult API.

    Use as an async context manager so the underlying aiohttp session is
    closed after the solve attempt.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = CAPSOLVER_BASE_URL,
        timeout_seconds: float = 30.0
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "CapSolverClient":
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying aiohttp session."""
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.session is None:
            raise RuntimeError("CapSolverClient used outside of 'async with'")

        async with self.session.post(f"{self.base_url}{path}", json=payload) as resp:
            data = await resp.json(content_type=None)
        return data if isinstance(data, dict) else {}

    async def create_task(self, task: CaptchaTask) -> Optional[str]:
        """
        Submit a solve task.

        Returns:
            The task id, or None if CapSolver did not return one
        """
        data = await self._post("/createTask", task.to_payload(self.api_key))
        task_id = data.get("taskId")
        if not task_id:
            logger.error(
                f"CapSolver createTask returned no taskId: "
                f"{data.get('errorCode')} {data.get('errorDescription')}"
            )
            return None
        return str(task_id)

    async def get_task_result(self, task_id: str) -> Dict[str, Any]:
        """Fetch the current result document for a task."""
        return await self._post(
            "/getTaskResult",
            {"clientKey": self.api_key, "taskId": task_id}
        )


class CaptchaResolver:
    """
    Solves a detected captcha with CapSolver.

    Attributes:
        config: API key, task type, scene and polling settings
    """

    def __init__(
        self,
        config: CaptchaConfig,
        client_factory: Optional[Callable[[str], CapSolverClient]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize the resolver.

        Args:
            config: Captcha configuration
            client_factory: Builds a client from the API key; defaults to
                CapSolverClient
            sleep: Coroutine used to wait between polls
        """
        self.config = config
        self._client_factory = client_factory or self._default_client
        self._sleep = sleep

    def _default_client(self, api_key: str) -> CapSolverClient:
        return CapSolverClient(api_key, timeout_seconds=self.config.request_timeout_seconds)

    def ensure_configured(self) -> str:
        """
        Return the API key or fail fast.

        Raises:
            ConfigurationError: If CAPSOLVER_API_KEY is not set
        """
        if not self.config.api_key:
            raise ConfigurationError(
                "Captcha detected but CAPSOLVER_API_KEY is not configured."
            )
        return self.config.api_key

    async def read_page_config(self, page: Page) -> Dict[str, Any]:
        """Read ``window._config_`` from the page; empty dict if unavailable."""
        try:
            cfg = await page.evaluate(PAGE_CONFIG_SCRIPT)
        except Exception as e:
            logger.debug(f"Page captcha config unavailable: {e}")
            return {}
        return cfg if isinstance(cfg, dict) else {}

    def build_task(self, website_url: str, page_config: Dict[str, Any]) -> CaptchaTask:
        """Build the CapSolver task from the page URL and page config."""
        return CaptchaTask(
            website_url=website_url,
            task_type=self.config.task_type,
            website_key=page_config.get("NCAPPKEY") or page_config.get("NCTOKENSTR") or None,
            challenge=page_config.get("NCTOKENSTR") or None,
            scene=page_config.get("scene") or self.config.scene,
        )

    async def solve(self, page: Page) -> SolveOutcome:
        """
        Attempt to solve the captcha on the page.

        Args:
            page: Page showing the captcha

        Returns:
            SolveOutcome; network and parse errors yield FAILED

        Raises:
            ConfigurationError: If no API key is configured
        """
        api_key = self.ensure_configured()

        page_config = await self.read_page_config(page)
        task = self.build_task(page.url, page_config)
        logger.info(f"Submitting {task.task_type} task for {task.website_url}")

        try:
            async with self._client_factory(api_key) as client:
                task_id = await client.create_task(task)
                if not task_id:
                    return SolveOutcome.FAILED
                outcome = await self.poll(client, task_id)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"CapSolver error: {e}")
            return SolveOutcome.FAILED

        if outcome.solved:
            logger.info(
                f"CapSolver task {task_id} ready; solution is not injected, page will be reloaded"
            )
        else:
            logger.warning(f"CapSolver task {task_id} ended as {outcome.value}")
        return outcome

    async def poll(self, client: CapSolverClient, task_id: str) -> SolveOutcome:
        """
        Poll getTaskResult until a terminal state.

        Waits ``poll_interval_seconds`` before every poll and gives up after
        ``max_polls`` polls.
        """
        if self.config.max_polls < 1:
            logger.warning(f"No polls allowed for task {task_id} (max_polls={self.config.max_polls})")
            return SolveOutcome.TIMED_OUT

        state = PollState.CREATED
        attempt = 0

        while not state.terminal:
            await self._sleep(self.config.poll_interval_seconds)
            attempt += 1

            result = await client.get_task_result(task_id)
            status = result.get("status")
            state = next_poll_state(state, status, attempt, self.config.max_polls)

            logger.debug(f"Poll {attempt}/{self.config.max_polls} for {task_id}: status={status} -> {state.value}")

        return _OUTCOMES[state]
