"""API infrastructure for the SwitchBot client.

This module consolidates the outbound request path:
- RetryingDispatcher: rate-gated, bounded retry loop with exponential backoff
- SwitchBotClient: signed aiohttp transport with generic GET/POST/PUT/DELETE

A call flows as: rate gate -> sign -> HTTP request -> classify failure ->
backoff and retry, or raise exactly one typed error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

from ..constants import API_DEFAULTS
from ..models import RetryPolicy
from .classifier import ErrorClassifier
from .errors import SwitchBotError
from .rate_limiter import RateGate
from .signing import RequestSigner

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_REQUEST_TIMEOUT = API_DEFAULTS.REQUEST_TIMEOUT


class RetryingDispatcher:
    """Runs request thunks through the rate gate with bounded retries.

    Every attempt, retries included, acquires the shared rate gate first.
    Attempts are strictly sequential. A call either returns the payload of a
    successful attempt or raises the classified error of the last attempt.

    Attributes:
        rate_gate: Shared gate spacing all outbound requests.
        retry_policy: Attempt budget and backoff schedule.
        classifier: Maps attempt failures onto typed errors.
    """

    def __init__(
        self,
        rate_gate: RateGate,
        retry_policy: RetryPolicy | None = None,
        *,
        classifier: ErrorClassifier | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.rate_gate = rate_gate
        self.retry_policy = retry_policy or RetryPolicy()
        self.classifier = classifier or ErrorClassifier()
        self._sleep = sleep

    async def execute(
        self, request_fn: Callable[[], Awaitable[T]], *, label: str = "request"
    ) -> T:
        """Execute a request thunk with rate limiting and retries.

        Args:
            request_fn: Zero-argument coroutine factory performing one attempt.
                It is called once per attempt, so it must sign its own headers.
            label: Call site name used for logging and request tracking.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            SwitchBotError: The classified error of the final failed attempt.
        """
        max_retries = self.retry_policy.max_retries
        last_error: SwitchBotError | None = None

        for attempt in range(max_retries + 1):
            await self.rate_gate.acquire(label)
            try:
                _LOGGER.debug("%s attempt %d/%d", label, attempt + 1, max_retries + 1)
                return await request_fn()
            except asyncio.CancelledError:
                # Cancellation aborts the whole sequence, it is never retried
                raise
            except Exception as err:
                last_error = self.classifier.classify(err)
                if not last_error.retryable or attempt == max_retries:
                    if last_error.retryable:
                        _LOGGER.error(
                            "%s failed after %d attempts: %s",
                            label,
                            max_retries + 1,
                            last_error.message,
                        )
                    else:
                        _LOGGER.debug(
                            "%s failed with non-retryable error: %s",
                            label,
                            last_error.message,
                        )
                    if last_error is err:
                        raise
                    raise last_error from err

            delay = self.retry_policy.delay_for(attempt)
            _LOGGER.warning(
                "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                label,
                attempt + 1,
                max_retries + 1,
                delay,
                last_error.message,
            )
            await self._sleep(delay)

        if last_error:
            raise last_error
        raise RuntimeError(f"{label} failed with unknown error")


class SwitchBotClient:
    """Signed HTTP transport for the SwitchBot cloud API.

    Owns the aiohttp session. Every request goes through the dispatcher, so
    it is rate limited, signed per attempt and retried on transient failures.
    """

    def __init__(
        self,
        signer: RequestSigner,
        dispatcher: RetryingDispatcher,
        base_url: str = API_DEFAULTS.BASE_URL,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.signer = signer
        self.dispatcher = dispatcher
        self.request_timeout = request_timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> SwitchBotClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Note: Timeouts are set per-request, not on the session level.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        try:
            return await response.json(content_type=None)
        except ValueError:
            # Gateway error pages are not always UTF-8
            return {"text": await response.text(errors="replace")}

    async def _request(self, method: str, endpoint: str, body: Any = None) -> Any:
        url = self._build_url(endpoint)
        label = f"{method} {endpoint}"

        async def _attempt() -> Any:
            headers = self.signer.build_headers().as_headers()
            timeout = aiohttp.ClientTimeout(total=self.request_timeout)
            session = await self._get_session()
            async with session.request(
                method, url, json=body, headers=headers, timeout=timeout
            ) as response:
                data = await self._read_body(response)
                if response.status >= 400:
                    raise self.dispatcher.classifier.classify_response(
                        response.status, data
                    )

            _LOGGER.debug(
                "API %s returned status=%d data=%s", label, response.status, data
            )
            return data

        return await self.dispatcher.execute(_attempt, label=label)

    async def async_get(self, endpoint: str) -> Any:
        """GET request with rate limiting and retries."""
        return await self._request("GET", endpoint)

    async def async_post(self, endpoint: str, body: Any = None) -> Any:
        """POST request with rate limiting and retries."""
        return await self._request("POST", endpoint, body)

    async def async_put(self, endpoint: str, body: Any = None) -> Any:
        """PUT request with rate limiting and retries."""
        return await self._request("PUT", endpoint, body)

    async def async_delete(self, endpoint: str) -> Any:
        """DELETE request with rate limiting and retries."""
        return await self._request("DELETE", endpoint)

    async def async_health_check(self) -> bool:
        """Check API connectivity with a lightweight read. Never raises."""
        try:
            await self.async_get("/devices")
        except SwitchBotError as err:
            _LOGGER.warning("SwitchBot API health check failed: %s", err.message)
            return False
        return True

    @property
    def request_stats(self) -> dict:
        """Outbound request statistics, empty when no tracker is attached."""
        tracker = self.dispatcher.rate_gate.tracker
        return tracker.get_summary() if tracker is not None else {}
