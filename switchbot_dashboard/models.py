"""Data models for the SwitchBot dashboard client.

This module provides Pydantic models for structured data representation
with validation and type safety: credentials and retry configuration,
per-request signed headers, device commands and the typed views of the
provider's device list and status responses.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from .constants import (
    AC_DEFAULT_TEMPERATURE,
    API_DEFAULTS,
    INFRARED_REMOTE_TYPE_MAPPING,
    PHYSICAL_DEVICE_TYPE_MAPPING,
    AirConditionerMode,
    DeviceType,
    FanSpeed,
    PowerState,
)

_LOGGER = logging.getLogger(__name__)


# Base model for all SwitchBot data models
class SwitchBotModel(BaseModel):
    """Base model for all SwitchBot data structures.

    Provides common configuration and utilities for all Pydantic models
    used in the client.
    """

    model_config = {"validate_assignment": True, "populate_by_name": True}


class Credentials(SwitchBotModel):
    """Long-lived token/secret pair issued by the SwitchBot app.

    Immutable after load. The secret never appears in ``repr``.
    """

    model_config = {"frozen": True}

    token: str = Field(
        default="",
        description="Open token (sent as Authorization header)",
    )
    secret: str = Field(
        default="",
        repr=False,
        description="Secret key used for HMAC signing",
    )


class SignedHeaders(SwitchBotModel):
    """Authentication headers for one request.

    Valid only for the instant of signing. Serialize with ``as_headers()`` to
    get the provider's wire header names.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    authorization: str = Field(..., alias="Authorization")
    signature: str = Field(..., alias="sign")
    timestamp: str = Field(
        ...,
        alias="t",
        description="Epoch milliseconds as a decimal string",
    )
    nonce: str = Field(..., alias="nonce")
    content_type: str = Field(default="application/json", alias="Content-Type")

    def as_headers(self) -> dict[str, str]:
        """Return the headers keyed by their wire names."""
        return self.model_dump(by_alias=True)


class RetryPolicy(SwitchBotModel):
    """Static retry configuration for the dispatcher.

    Attempt indices run from 0 to ``max_retries`` inclusive, so a call is tried
    at most ``max_retries + 1`` times.

    Example:
        >>> policy = RetryPolicy(max_retries=3, base_delay=1.0, max_delay=10.0)
        >>> [policy.delay_for(n) for n in range(5)]
        [1.0, 2.0, 4.0, 8.0, 10.0]
    """

    model_config = {"frozen": True}

    max_retries: int = Field(
        default=API_DEFAULTS.MAX_RETRIES,
        ge=0,
        description="Retries after the first attempt",
    )
    base_delay: float = Field(
        default=API_DEFAULTS.BASE_DELAY,
        ge=0,
        description="Delay before the first retry (s)",
    )
    max_delay: float = Field(
        default=API_DEFAULTS.MAX_DELAY,
        ge=0,
        description="Cap for the backoff delay (s)",
    )

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the failed attempt with index ``attempt``."""
        return min(self.base_delay * (2**attempt), self.max_delay)


class DeviceCommand(SwitchBotModel):
    """A provider command addressed to one device.

    Example:
        >>> DeviceCommand(device_id="ABC", command="turnOn").payload()
        {'command': 'turnOn'}
    """

    model_config = {"frozen": True}

    device_id: str = Field(..., min_length=1)
    command: str = Field(..., min_length=1)
    parameter: str | int | float | dict[str, Any] | None = None

    def payload(self) -> dict[str, Any]:
        """Request body; ``parameter`` is omitted entirely when absent."""
        body: dict[str, Any] = {"command": self.command}
        if self.parameter is not None:
            body["parameter"] = self.parameter
        return body


class AirConditionerState(SwitchBotModel):
    """Composite state carried by the air conditioner ``setAll`` command.

    The provider has no separate "set mode" or "set temperature" command, so
    every change sends all four settings.
    """

    model_config = {"frozen": True}

    temperature: int | float = Field(default=AC_DEFAULT_TEMPERATURE)
    mode: AirConditionerMode = Field(default=AirConditionerMode.AUTO)
    fan_speed: FanSpeed = Field(default=FanSpeed.AUTO)
    power: PowerState = Field(default=PowerState.ON)

    def to_parameter(self) -> dict[str, Any]:
        """Build the provider parameter object."""
        return {
            "temperature": self.temperature,
            "mode": self.mode.value,
            "fanSpeed": self.fan_speed.value,
            "power": self.power.value,
        }


class EnvironmentData(SwitchBotModel):
    """Environment readings from a hub. Missing readings are reported as 0."""

    model_config = {"frozen": True}

    temperature: float = Field(default=0)
    humidity: float = Field(default=0)
    light_level: float = Field(default=0, alias="lightLevel")

    @classmethod
    def from_status_body(cls, body: dict | None) -> EnvironmentData:
        """Read the environment fields out of a device status body."""
        body = body if isinstance(body, dict) else {}
        return cls(
            temperature=body.get("temperature") or 0,
            humidity=body.get("humidity") or 0,
            light_level=body.get("lightLevel") or 0,
        )


class Device(SwitchBotModel):
    """A device (physical or infrared remote) registered with the account."""

    model_config = {"frozen": True}

    device_id: str = Field(..., min_length=1)
    device_name: str = Field(..., min_length=1)
    device_type: DeviceType = Field(default=DeviceType.UNKNOWN)
    hub_device_id: str | None = None
    enable_cloud_service: bool | None = None
    is_infrared_remote: bool = False
    remote_type: str | None = None

    @property
    def is_controllable(self) -> bool:
        return self.device_type.is_controllable

    @property
    def is_environment_source(self) -> bool:
        return self.device_type.is_environment_source

    @property
    def display_name(self) -> str:
        """Device name with its type, e.g. ``Bedroom AC (Air Conditioner (IR))``."""
        if self.is_infrared_remote:
            type_label = f"{self.remote_type} (IR)"
        else:
            type_label = self.device_type.value
        return f"{self.device_name} ({type_label})"

    @staticmethod
    def _required_fields_present(raw: Any, type_key: str) -> bool:
        if not isinstance(raw, dict):
            return False
        return all(
            isinstance(raw.get(key), str) and raw.get(key)
            for key in ("deviceId", "deviceName", type_key)
        )

    @classmethod
    def from_api_dict(cls, raw: dict) -> Device | None:
        """Parse an entry of ``body.deviceList``; None when it is malformed."""
        if not cls._required_fields_present(raw, "deviceType"):
            return None
        return cls(
            device_id=raw["deviceId"],
            device_name=raw["deviceName"],
            device_type=PHYSICAL_DEVICE_TYPE_MAPPING.get(
                raw["deviceType"], DeviceType.UNKNOWN
            ),
            hub_device_id=raw.get("hubDeviceId") or None,
            enable_cloud_service=raw.get("enableCloudService"),
        )

    @classmethod
    def from_infrared_dict(cls, raw: dict) -> Device | None:
        """Parse an entry of ``body.infraredRemoteList``; None when it is malformed."""
        if not cls._required_fields_present(raw, "remoteType"):
            return None
        return cls(
            device_id=raw["deviceId"],
            device_name=raw["deviceName"],
            device_type=INFRARED_REMOTE_TYPE_MAPPING.get(
                raw["remoteType"], DeviceType.UNKNOWN
            ),
            hub_device_id=raw.get("hubDeviceId") or None,
            is_infrared_remote=True,
            remote_type=raw["remoteType"],
        )


class DeviceListResponse(SwitchBotModel):
    """Typed view of the ``GET /devices`` response."""

    model_config = {"frozen": True}

    devices: list[Device] = Field(default_factory=list)

    @classmethod
    def from_api(cls, response_data: dict | None) -> DeviceListResponse:
        """Build the device list from the raw API payload, skipping bad entries."""
        body = response_data.get("body") if isinstance(response_data, dict) else None
        if not isinstance(body, dict):
            return cls()

        devices: list[Device] = []
        for raw in body.get("deviceList") or []:
            device = Device.from_api_dict(raw)
            if device is None:
                _LOGGER.warning("Skipping invalid device entry: %s", raw)
                continue
            devices.append(device)

        for raw in body.get("infraredRemoteList") or []:
            device = Device.from_infrared_dict(raw)
            if device is None:
                _LOGGER.warning("Skipping invalid infrared remote entry: %s", raw)
                continue
            devices.append(device)

        return cls(devices=devices)


def filter_devices(
    devices: Iterable[Device],
    *,
    device_type: DeviceType | None = None,
    controllable_only: bool = False,
    environment_only: bool = False,
) -> list[Device]:
    """Filter devices by type and capability."""
    result = []
    for device in devices:
        if device_type is not None and device.device_type != device_type:
            continue
        if controllable_only and not device.is_controllable:
            continue
        if environment_only and not device.is_environment_source:
            continue
        result.append(device)
    return result


def group_devices_by_type(devices: Iterable[Device]) -> dict[DeviceType, list[Device]]:
    """Group devices by type; every DeviceType is present as a key."""
    grouped: dict[DeviceType, list[Device]] = {
        device_type: [] for device_type in DeviceType
    }
    for device in devices:
        grouped[device.device_type].append(device)
    return grouped
