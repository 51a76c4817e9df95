"""Constants and Enums for the SwitchBot dashboard client."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# Body-level status code the provider uses to signal success
SUCCESS_STATUS_CODE = 100

# Local markers used as provider_error_code when no provider code exists
NETWORK_ERROR_CODE = "NETWORK_ERROR"
REQUEST_ERROR_CODE = "REQUEST_ERROR"

# Light control ranges
BRIGHTNESS_MIN = 0
BRIGHTNESS_MAX = 100

# Air conditioner control ranges and composite command defaults
AC_TEMPERATURE_MIN = 16
AC_TEMPERATURE_MAX = 30
AC_DEFAULT_TEMPERATURE = 25

# Composite command that bundles temperature, mode, fan speed and power
AC_SET_ALL_COMMAND = "setAll"


class LightAction(str, Enum):
    """Semantic actions accepted for light devices."""

    TURN_ON = "turnOn"
    TURN_OFF = "turnOff"
    SET_BRIGHTNESS = "setBrightness"
    SET_COLOR_TEMPERATURE = "setColorTemperature"


class AirConditionerAction(str, Enum):
    """Semantic actions accepted for air conditioners."""

    TURN_ON = "turnOn"
    TURN_OFF = "turnOff"
    SET_MODE = "setMode"
    SET_TEMPERATURE = "setTemperature"


class AirConditionerMode(str, Enum):
    """Operating modes of an air conditioner."""

    COOL = "cool"
    HEAT = "heat"
    DRY = "dry"
    AUTO = "auto"
    FAN = "fan"


class FanSpeed(str, Enum):
    """Fan speed levels for the air conditioner composite command."""

    AUTO = "auto"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PowerState(str, Enum):
    """Power state values."""

    ON = "on"
    OFF = "off"


class DeviceType(str, Enum):
    """Device categories the dashboard knows how to present."""

    LIGHT = "Light"
    AIR_CONDITIONER = "Air Conditioner"
    HUB = "Hub"
    BOT = "Bot"
    CURTAIN = "Curtain"
    PLUG = "Plug"
    UNKNOWN = "Unknown"

    @property
    def is_controllable(self) -> bool:
        """Whether the dashboard can send commands to this device type."""
        return self in CONTROLLABLE_DEVICE_TYPES

    @property
    def is_environment_source(self) -> bool:
        """Whether this device type reports environment data."""
        return self is DeviceType.HUB


CONTROLLABLE_DEVICE_TYPES = frozenset(
    {
        DeviceType.LIGHT,
        DeviceType.AIR_CONDITIONER,
        DeviceType.BOT,
        DeviceType.CURTAIN,
        DeviceType.PLUG,
    }
)

# Physical device types reported in body.deviceList
PHYSICAL_DEVICE_TYPE_MAPPING: dict[str, DeviceType] = {
    "Hub 2": DeviceType.HUB,
    "Hub Mini": DeviceType.HUB,
    "Hub Plus": DeviceType.HUB,
    "Bot": DeviceType.BOT,
    "Curtain": DeviceType.CURTAIN,
    "Plug": DeviceType.PLUG,
    "Light": DeviceType.LIGHT,
    "Color Bulb": DeviceType.LIGHT,
    "Strip Light": DeviceType.LIGHT,
}

# Remote types reported in body.infraredRemoteList; anything else is Unknown
INFRARED_REMOTE_TYPE_MAPPING: dict[str, DeviceType] = {
    "Air Conditioner": DeviceType.AIR_CONDITIONER,
    "Light": DeviceType.LIGHT,
}


class APIDefaults(BaseModel):
    """Default values for API configuration.

    Immutable configuration values for timeouts, rate limiting and retries.
    These values can be overridden through ``SwitchBotSettings`` or when
    instantiating the client components directly.
    """

    model_config = {"frozen": True}

    BASE_URL: str = Field(
        default="https://api.switch-bot.com/v1.1",
        description="SwitchBot cloud API base URL",
    )
    REQUEST_TIMEOUT: float = Field(
        default=30.0,
        description="Timeout for a single provider call in seconds",
    )
    MIN_REQUEST_INTERVAL: float = Field(
        default=10.0,
        description="Minimum interval between outbound requests (seconds)",
    )
    MAX_RETRIES: int = Field(
        default=3,
        description="Number of retries for transient failures",
    )
    BASE_DELAY: float = Field(
        default=1.0,
        description="Backoff delay for the first retry in seconds",
    )
    MAX_DELAY: float = Field(
        default=10.0,
        description="Upper bound for the backoff delay in seconds",
    )
    DAILY_REQUEST_QUOTA: int = Field(
        default=10_000,
        description="Requests per day allowed by the provider",
    )


# Create a default instance for easy access
API_DEFAULTS = APIDefaults()
