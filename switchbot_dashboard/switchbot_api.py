"""Device-level API for the SwitchBot dashboard.

``SwitchBotAPI`` turns semantic device intents ("turn on this light", "set
this air conditioner to 22 degrees") into validated provider commands and
sends them through a shared ``SwitchBotClient``. Arguments are validated
locally, so an invalid call never touches the network.

The provider reports business failures (device offline, unsupported
command, ...) in the body with a ``statusCode`` other than 100, even when the
HTTP status is 200. Those are raised as ``SwitchBotBusinessError`` and are not
retried.
"""

from __future__ import annotations

import logging
from typing import Any

from .constants import (
    AC_SET_ALL_COMMAND,
    SUCCESS_STATUS_CODE,
    AirConditionerAction,
    AirConditionerMode,
    FanSpeed,
    LightAction,
)
from .infrastructure.api import SwitchBotClient
from .infrastructure.errors import SwitchBotBusinessError, SwitchBotValidationError
from .models import (
    AirConditionerState,
    Device,
    DeviceCommand,
    DeviceListResponse,
    EnvironmentData,
)
from .validators import (
    validate_ac_mode,
    validate_ac_temperature,
    validate_brightness,
    validate_device_id,
    validate_fan_speed,
)

_LOGGER = logging.getLogger(__name__)


def _check(result: tuple[bool, str | None]) -> None:
    is_valid, error = result
    if not is_valid:
        raise SwitchBotValidationError(error or "Invalid argument")


def _format_percentage(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class SwitchBotAPI:
    """Semantic device operations on top of the signed, rate-limited client.

    Attributes:
        client: Transport shared by every call site of this API.
    """

    def __init__(self, client: SwitchBotClient):
        self.client = client
        # Composite settings last sent successfully, per air conditioner
        self._ac_states: dict[str, AirConditionerState] = {}

    @staticmethod
    def _ensure_success(response: Any, context: str) -> dict:
        """Raise a business error unless the body status is the success sentinel."""
        status_ok = isinstance(response, dict) and (
            response.get("statusCode") == SUCCESS_STATUS_CODE
        )
        if status_ok:
            return response

        if isinstance(response, dict):
            status_code = response.get("statusCode")
            message = response.get("message")
        else:
            status_code, message = None, "Unexpected response format"

        raise SwitchBotBusinessError(
            f"{context}: {message}" if message else context,
            provider_error_code=status_code,
        )

    # -------------------------------------------------------------------------
    # Device queries
    # -------------------------------------------------------------------------

    async def async_get_devices(self) -> dict:
        """Get the raw device list (physical devices and infrared remotes)."""
        response = await self.client.async_get("/devices")
        return self._ensure_success(response, "Failed to get devices")

    async def async_list_devices(self) -> list[Device]:
        """Get the device list as typed ``Device`` models."""
        response = await self.async_get_devices()
        devices = DeviceListResponse.from_api(response).devices
        _LOGGER.debug("Fetched %d devices", len(devices))
        return devices

    async def async_get_device_status(self, device_id: str) -> dict:
        """Get the raw status of one device."""
        _check(validate_device_id(device_id))
        response = await self.client.async_get(f"/devices/{device_id}/status")
        return self._ensure_success(response, "Failed to get device status")

    async def async_get_environment_data(self, hub_id: str) -> EnvironmentData:
        """Read temperature, humidity and light level from a hub.

        Missing readings default to 0.
        """
        response = await self.async_get_device_status(hub_id)
        return EnvironmentData.from_status_body(response.get("body"))

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def async_send_device_command(
        self,
        device_id: str,
        command: str,
        parameter: str | int | float | dict | None = None,
    ) -> dict:
        """Send a provider command to a device.

        Args:
            device_id: Target device.
            command: Provider command name (e.g. ``turnOn``).
            parameter: Optional parameter; omitted from the body when None.
        """
        _check(validate_device_id(device_id))
        if not command:
            raise SwitchBotValidationError("Command is required")

        device_command = DeviceCommand(
            device_id=device_id, command=command, parameter=parameter
        )
        _LOGGER.debug("Sending command %s to device %s", command, device_id)
        response = await self.client.async_post(
            f"/devices/{device_command.device_id}/commands",
            device_command.payload(),
        )
        return self._ensure_success(response, "Failed to send command")

    async def async_control_light(
        self,
        device_id: str,
        action: LightAction | str,
        value: int | float | None = None,
    ) -> dict:
        """Control a light.

        Args:
            device_id: Target light.
            action: ``turnOn``, ``turnOff``, ``setBrightness`` or
                ``setColorTemperature``.
            value: Brightness percentage or color temperature.

        Raises:
            SwitchBotValidationError: For an unknown action or a brightness
                outside 0-100.
        """
        _check(validate_device_id(device_id))
        try:
            light_action = LightAction(action)
        except ValueError:
            raise SwitchBotValidationError(f"Unknown light action: {action}") from None

        parameter: str | int | float | None = None
        if light_action is LightAction.SET_BRIGHTNESS:
            _check(validate_brightness(value))
            parameter = _format_percentage(value)
        elif light_action is LightAction.SET_COLOR_TEMPERATURE:
            parameter = value

        return await self.async_send_device_command(
            device_id, light_action.value, parameter
        )

    def get_last_air_conditioner_state(
        self, device_id: str
    ) -> AirConditionerState | None:
        """Composite settings last sent successfully to an air conditioner."""
        return self._ac_states.get(device_id)

    async def async_control_air_conditioner(
        self,
        device_id: str,
        action: AirConditionerAction | str,
        params: dict[str, Any] | None = None,
    ) -> dict:
        """Control an air conditioner.

        ``setMode`` and ``setTemperature`` both send the composite ``setAll``
        command, because the provider has no finer-grained alternative. The
        setting that was not given comes from the last state sent to this
        device, else from the defaults (``auto`` mode, 25 degrees). Fan speed
        defaults to ``auto`` and power to ``on``.

        Args:
            device_id: Target air conditioner.
            action: ``turnOn``, ``turnOff``, ``setMode`` or ``setTemperature``.
            params: Optional ``mode``, ``temperature`` and ``fan_speed``.

        Raises:
            SwitchBotValidationError: For an unknown action, a missing or
                invalid mode, or a temperature outside 16-30.
        """
        _check(validate_device_id(device_id))
        try:
            ac_action = AirConditionerAction(action)
        except ValueError:
            raise SwitchBotValidationError(
                f"Unknown air conditioner action: {action}"
            ) from None

        if ac_action in (AirConditionerAction.TURN_ON, AirConditionerAction.TURN_OFF):
            return await self.async_send_device_command(device_id, ac_action.value)

        params = params or {}
        mode = params.get("mode")
        temperature = params.get("temperature")
        fan_speed = params.get("fan_speed", params.get("fanSpeed"))

        if ac_action is AirConditionerAction.SET_MODE:
            if not mode:
                raise SwitchBotValidationError("Mode is required for setMode action")
            _check(validate_ac_mode(mode))
            if temperature is not None:
                _check(validate_ac_temperature(temperature))
        else:
            _check(validate_ac_temperature(temperature))
            if mode is not None:
                _check(validate_ac_mode(mode))
        if fan_speed is not None:
            _check(validate_fan_speed(fan_speed))

        state = self._compose_state(
            device_id, mode=mode, temperature=temperature, fan_speed=fan_speed
        )
        response = await self.async_send_device_command(
            device_id, AC_SET_ALL_COMMAND, state.to_parameter()
        )
        self._ac_states[device_id] = state
        return response

    def _compose_state(
        self,
        device_id: str,
        *,
        mode: str | None,
        temperature: float | None,
        fan_speed: str | None,
    ) -> AirConditionerState:
        last = self._ac_states.get(device_id) or AirConditionerState()
        return AirConditionerState(
            temperature=temperature if temperature is not None else last.temperature,
            mode=AirConditionerMode(mode) if mode is not None else last.mode,
            fan_speed=FanSpeed(fan_speed) if fan_speed is not None else FanSpeed.AUTO,
        )

    # -------------------------------------------------------------------------
    # Connectivity and passthroughs
    # -------------------------------------------------------------------------

    async def async_test_connection(self) -> bool:
        """Test API connectivity. Never raises."""
        return await self.client.async_health_check()

    async def async_get(self, endpoint: str) -> Any:
        return await self.client.async_get(endpoint)

    async def async_post(self, endpoint: str, body: Any = None) -> Any:
        return await self.client.async_post(endpoint, body)

    async def async_put(self, endpoint: str, body: Any = None) -> Any:
        return await self.client.async_put(endpoint, body)

    async def async_delete(self, endpoint: str) -> Any:
        return await self.client.async_delete(endpoint)
