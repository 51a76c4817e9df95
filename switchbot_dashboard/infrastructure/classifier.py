"""Classification of failed SwitchBot API attempts.

Turns whatever an attempt raised into exactly one typed ``SwitchBotError``
with a retryability verdict. Three families are distinguished:

- no response received (transport failure): retryable
- response received with a failing status: retryable for 5xx and 429 only
- the request could not be built at all: never retryable
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from ..constants import NETWORK_ERROR_CODE, REQUEST_ERROR_CODE
from .errors import (
    SwitchBotError,
    SwitchBotHTTPError,
    SwitchBotNetworkError,
    SwitchBotRequestError,
)

UNKNOWN_API_ERROR = "Unknown API error"
NETWORK_ERROR_MESSAGE = "Network error: No response from SwitchBot API"


def is_retryable_status(status: int) -> bool:
    """Decide whether a failing HTTP status is worth another attempt.

    Example:
        >>> is_retryable_status(503), is_retryable_status(429), is_retryable_status(404)
        (True, True, False)
    """
    if status >= 500 or status == 429:
        return True
    return not 400 <= status < 500


def extract_error_message(body: Any) -> str:
    """Pick a human message out of an error body (``message``, then ``error``)."""
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or UNKNOWN_API_ERROR
    return UNKNOWN_API_ERROR


def extract_error_code(body: Any) -> str | int | None:
    """Pick the provider error code out of an error body.

    ``statusCode`` is preferred over ``code``.
    """
    if isinstance(body, dict):
        return body.get("statusCode") or body.get("code")
    return None


class ErrorClassifier:
    """Maps low-level failures onto the typed error hierarchy."""

    def classify_response(
        self,
        status: int,
        body: Any = None,
        cause: BaseException | None = None,
    ) -> SwitchBotHTTPError:
        """Classify a response that arrived with a failing HTTP status.

        Args:
            status: HTTP status code.
            body: Parsed JSON body (or raw text) of the response, if any.
            cause: Underlying exception, if any.
        """
        return SwitchBotHTTPError(
            f"SwitchBot API error: {extract_error_message(body)}",
            status_code=status,
            provider_error_code=extract_error_code(body),
            cause=cause,
            retryable=is_retryable_status(status),
        )

    def classify(self, failure: BaseException) -> SwitchBotError:
        """Classify whatever a single attempt raised.

        Args:
            failure: The exception raised by the attempt.

        Returns:
            A typed error carrying the retry verdict.
        """
        if isinstance(failure, SwitchBotError):
            return failure

        # InvalidURL is a ClientError and a ValueError; it never left the process
        if isinstance(failure, aiohttp.InvalidURL):
            return self._request_error(failure)

        if isinstance(failure, aiohttp.ClientResponseError):
            return self.classify_response(
                failure.status, {"message": failure.message}, failure
            )

        if isinstance(
            failure, (asyncio.TimeoutError, TimeoutError, aiohttp.ClientError)
        ):
            return SwitchBotNetworkError(
                NETWORK_ERROR_MESSAGE,
                provider_error_code=NETWORK_ERROR_CODE,
                cause=failure,
            )

        return self._request_error(failure)

    @staticmethod
    def _request_error(failure: BaseException) -> SwitchBotRequestError:
        return SwitchBotRequestError(
            f"Request setup error: {failure}",
            provider_error_code=REQUEST_ERROR_CODE,
            cause=failure,
        )
