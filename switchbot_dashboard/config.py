"""Process-wide configuration for the SwitchBot client.

Settings are read once at startup from ``SWITCHBOT_*`` environment variables
(or a ``.env`` file) with pydantic-settings. Missing credentials are reported
here, as a configuration error, rather than on the first request.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import API_DEFAULTS
from .infrastructure.errors import SwitchBotConfigError
from .infrastructure.signing import credentials_configured
from .models import Credentials, RetryPolicy


class SwitchBotSettings(BaseSettings):
    """Central configuration of the client.

    Environment variables: ``SWITCHBOT_TOKEN``, ``SWITCHBOT_SECRET``,
    ``SWITCHBOT_BASE_URL``, ``SWITCHBOT_REQUEST_TIMEOUT``,
    ``SWITCHBOT_MIN_REQUEST_INTERVAL``, ``SWITCHBOT_MAX_RETRIES``,
    ``SWITCHBOT_BASE_DELAY``, ``SWITCHBOT_MAX_DELAY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOT_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    token: str = Field(default="", description="Open token from the SwitchBot app.")
    secret: str = Field(
        default="",
        repr=False,
        description="Secret key from the SwitchBot app.",
    )
    base_url: str = Field(
        default=API_DEFAULTS.BASE_URL,
        min_length=8,
        description="Cloud API base URL.",
    )

    request_timeout: float = Field(
        default=API_DEFAULTS.REQUEST_TIMEOUT,
        gt=0,
        description="Timeout per provider call (seconds).",
    )
    min_request_interval: float = Field(
        default=API_DEFAULTS.MIN_REQUEST_INTERVAL,
        ge=0,
        description="Minimum spacing between outbound requests (seconds).",
    )
    max_retries: int = Field(
        default=API_DEFAULTS.MAX_RETRIES,
        ge=0,
        le=10,
        description="Retries after the first attempt for transient failures.",
    )
    base_delay: float = Field(
        default=API_DEFAULTS.BASE_DELAY,
        ge=0,
        description="First backoff delay (seconds).",
    )
    max_delay: float = Field(
        default=API_DEFAULTS.MAX_DELAY,
        ge=0,
        description="Backoff delay cap (seconds).",
    )
    daily_request_quota: int = Field(
        default=API_DEFAULTS.DAILY_REQUEST_QUOTA,
        gt=0,
        description="Provider requests allowed per day.",
    )

    def credentials(self) -> Credentials:
        """Build the credential pair.

        Raises:
            SwitchBotConfigError: If token or secret is missing.
        """
        credentials = Credentials(token=self.token, secret=self.secret)
        if not credentials_configured(credentials):
            raise SwitchBotConfigError(
                "SwitchBot API credentials not configured. "
                "Set SWITCHBOT_TOKEN and SWITCHBOT_SECRET environment variables."
            )
        return credentials

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )
