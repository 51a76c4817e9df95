"""SwitchBot dashboard API client.

Builds the outbound client stack once per process: one credential pair, one
rate gate shared by every call site, one dispatcher and one transport.
"""

import logging

import aiohttp

from .access_tracker import RequestTracker
from .config import SwitchBotSettings
from .infrastructure import (
    ErrorKind,
    RateGate,
    RequestSigner,
    RetryingDispatcher,
    SwitchBotBusinessError,
    SwitchBotClient,
    SwitchBotConfigError,
    SwitchBotError,
    SwitchBotHTTPError,
    SwitchBotNetworkError,
    SwitchBotRequestError,
    SwitchBotValidationError,
)
from .models import Credentials, Device, EnvironmentData, RetryPolicy
from .switchbot_api import SwitchBotAPI

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "build_api",
    "async_setup",
    "SwitchBotAPI",
    "SwitchBotClient",
    "SwitchBotSettings",
    "RateGate",
    "RequestSigner",
    "RequestTracker",
    "RetryingDispatcher",
    "Credentials",
    "Device",
    "EnvironmentData",
    "RetryPolicy",
    "ErrorKind",
    "SwitchBotError",
    "SwitchBotValidationError",
    "SwitchBotNetworkError",
    "SwitchBotHTTPError",
    "SwitchBotRequestError",
    "SwitchBotBusinessError",
    "SwitchBotConfigError",
]


def build_api(
    settings: SwitchBotSettings | None = None,
    *,
    session: aiohttp.ClientSession | None = None,
) -> SwitchBotAPI:
    """Wire the client stack from settings.

    Raises:
        SwitchBotConfigError: If the credentials are missing.
    """
    settings = settings or SwitchBotSettings()
    signer = RequestSigner(settings.credentials())
    tracker = RequestTracker(daily_quota=settings.daily_request_quota)
    rate_gate = RateGate(settings.min_request_interval, tracker=tracker)
    dispatcher = RetryingDispatcher(rate_gate, settings.retry_policy())
    client = SwitchBotClient(
        signer,
        dispatcher,
        settings.base_url,
        request_timeout=settings.request_timeout,
        session=session,
    )
    return SwitchBotAPI(client)


async def async_setup(settings: SwitchBotSettings | None = None) -> SwitchBotAPI:
    """Build the API and check connectivity once.

    An unreachable API is logged, not raised, so the dashboard can still start.
    """
    api = build_api(settings)
    if await api.async_test_connection():
        _LOGGER.info("Connected to SwitchBot API at %s", api.client.base_url)
    else:
        _LOGGER.warning(
            "SwitchBot API not reachable at %s; continuing", api.client.base_url
        )
    return api
