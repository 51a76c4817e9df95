"""Infrastructure layer for the SwitchBot client.

This package contains the outbound request machinery:
- Request signing
- Rate gating
- Failure classification
- Retrying dispatch and the signed HTTP transport
- Error definitions
"""

from .api import (
    DEFAULT_REQUEST_TIMEOUT,
    RetryingDispatcher,
    SwitchBotClient,
)
from .classifier import ErrorClassifier, is_retryable_status
from .errors import (
    ErrorKind,
    SwitchBotBusinessError,
    SwitchBotConfigError,
    SwitchBotError,
    SwitchBotHTTPError,
    SwitchBotNetworkError,
    SwitchBotRequestError,
    SwitchBotValidationError,
)
from .rate_limiter import DEFAULT_MIN_REQUEST_INTERVAL, RateGate
from .signing import RequestSigner, credentials_configured, sign

__all__ = [
    # Dispatch and transport
    "RetryingDispatcher",
    "SwitchBotClient",
    "DEFAULT_REQUEST_TIMEOUT",
    # Classification
    "ErrorClassifier",
    "is_retryable_status",
    # Errors
    "ErrorKind",
    "SwitchBotError",
    "SwitchBotValidationError",
    "SwitchBotNetworkError",
    "SwitchBotHTTPError",
    "SwitchBotRequestError",
    "SwitchBotBusinessError",
    "SwitchBotConfigError",
    # Rate limiting
    "RateGate",
    "DEFAULT_MIN_REQUEST_INTERVAL",
    # Signing
    "RequestSigner",
    "credentials_configured",
    "sign",
]
