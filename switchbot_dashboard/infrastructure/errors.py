"""Custom exceptions for the SwitchBot API client.

Every error that leaves the client is one of the classes below. Each class
carries an ``ErrorKind`` tag so callers (the route layer) can branch on
``err.kind`` and ``err.retryable`` without inspecting transport internals.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Tag identifying which family an error belongs to."""

    VALIDATION = "validation"
    NETWORK = "network"
    HTTP = "http"
    REQUEST_SETUP = "request_setup"
    PROVIDER_BUSINESS = "provider_business"
    CONFIGURATION = "configuration"


class SwitchBotError(Exception):
    """Base exception for SwitchBot.

    Attributes:
        message: Human readable description.
        status_code: HTTP status code, when a response was received.
        provider_error_code: Error code reported by the provider (or a local
            marker such as ``NETWORK_ERROR``).
        cause: The low-level exception this error was derived from.
        retryable: Whether the dispatcher may retry the failed attempt.
    """

    kind: ErrorKind = ErrorKind.REQUEST_SETUP
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider_error_code: str | int | None = None,
        cause: BaseException | None = None,
        retryable: bool | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.provider_error_code = provider_error_code
        self.cause = cause
        self.retryable = self.default_retryable if retryable is None else retryable

    def as_dict(self) -> dict[str, Any]:
        """Serialize the error for the route layer."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "statusCode": self.status_code,
            "errorCode": self.provider_error_code,
            "retryable": self.retryable,
        }


class SwitchBotValidationError(SwitchBotError):
    """Raised when input validation fails, before any network activity."""

    kind = ErrorKind.VALIDATION


class SwitchBotNetworkError(SwitchBotError):
    """Raised when no response was received from the SwitchBot API."""

    kind = ErrorKind.NETWORK
    default_retryable = True


class SwitchBotHTTPError(SwitchBotError):
    """Raised when the API answered with a failing HTTP status."""

    kind = ErrorKind.HTTP


class SwitchBotRequestError(SwitchBotError):
    """Raised when the outbound request could not be built or sent."""

    kind = ErrorKind.REQUEST_SETUP


class SwitchBotBusinessError(SwitchBotError):
    """Raised when HTTP succeeded but the body status reports a failure."""

    kind = ErrorKind.PROVIDER_BUSINESS


class SwitchBotConfigError(SwitchBotError):
    """Raised at startup when the client is misconfigured."""

    kind = ErrorKind.CONFIGURATION
