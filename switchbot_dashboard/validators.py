"""Input validation for SwitchBot device commands.

This module provides validation functions that run before any request is
dispatched, so an out-of-contract argument never costs a rate-limited slot.
It includes validation for:
- Device identifiers
- Light brightness (percentage)
- Air conditioner temperature, mode and fan speed

The validators return a ``(is_valid, error_message)`` tuple. ``SwitchBotAPI``
turns a failed validation into a ``SwitchBotValidationError``.
"""

from __future__ import annotations

from typing import Any

from .constants import (
    AC_TEMPERATURE_MAX,
    AC_TEMPERATURE_MIN,
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    AirConditionerMode,
    FanSpeed,
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_device_id(device_id: str | None) -> tuple[bool, str | None]:
    """Validate a device identifier.

    Args:
        device_id: SwitchBot device ID.

    Returns:
        Tuple of (is_valid, error_message).

    Example:
        >>> validate_device_id("C271111EC0AB")
        (True, None)
        >>> validate_device_id("  ")
        (False, "Device ID is required")
    """
    if not isinstance(device_id, str) or not device_id.strip():
        return False, "Device ID is required"
    if "/" in device_id:
        return False, "Device ID must not contain '/'"
    return True, None


def validate_brightness(value: Any) -> tuple[bool, str | None]:
    """Validate a light brightness percentage (0-100 inclusive).

    A missing value is rejected with the same message as an out-of-range one.

    Example:
        >>> validate_brightness(50)
        (True, None)
        >>> validate_brightness(150)
        (False, "Brightness must be between 0 and 100")
    """
    if not _is_number(value) or not BRIGHTNESS_MIN <= value <= BRIGHTNESS_MAX:
        return (
            False,
            f"Brightness must be between {BRIGHTNESS_MIN} and {BRIGHTNESS_MAX}",
        )
    return True, None


def validate_ac_temperature(value: Any) -> tuple[bool, str | None]:
    """Validate an air conditioner target temperature (16-30 °C inclusive).

    Example:
        >>> validate_ac_temperature(22)
        (True, None)
        >>> validate_ac_temperature(35)
        (False, "Temperature must be between 16 and 30 degrees")
    """
    if not _is_number(value) or not AC_TEMPERATURE_MIN <= value <= AC_TEMPERATURE_MAX:
        return (
            False,
            f"Temperature must be between {AC_TEMPERATURE_MIN} "
            f"and {AC_TEMPERATURE_MAX} degrees",
        )
    return True, None


def validate_ac_mode(mode: Any) -> tuple[bool, str | None]:
    """Validate an air conditioner mode.

    Example:
        >>> validate_ac_mode("cool")
        (True, None)
        >>> validate_ac_mode("")
        (False, "Air conditioner mode must not be empty")
    """
    if not mode:
        return False, "Air conditioner mode must not be empty"
    try:
        AirConditionerMode(mode)
    except ValueError:
        return False, f"Invalid air conditioner mode: {mode}"
    return True, None


def validate_fan_speed(fan_speed: Any) -> tuple[bool, str | None]:
    """Validate a fan speed value for the composite command."""
    try:
        FanSpeed(fan_speed)
    except ValueError:
        return False, f"Invalid fan speed: {fan_speed}"
    return True, None
