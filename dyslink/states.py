"""Typed records exchanged with the device.

Numbers and booleans stay strings: the device sends zero padded codes
such as ``"0007"`` and accepts the ``STET`` keep-value marker in any
control field, so the device text has to survive a round trip.
"""
from __future__ import annotations

from dataclasses import dataclass

from .const import FAN_STATE_FIELDS


@dataclass(frozen=True)
class FanState:
    """Sparse set of controls to send; an empty field leaves the device value alone."""

    fan_mode: str = ""
    fan_speed: str = ""
    oscillate: str = ""
    sleep_timer: str = ""
    standby_monitoring: str = ""
    reset_filter: str = ""
    quality_target: str = ""
    night_mode: str = ""
    heat_mode: str = ""
    heat_target: str = ""
    focus_mode: str = ""

    def to_wire(self) -> dict[str, str]:
        """Return the ``data`` mapping with unset fields left out."""
        wire: dict[str, str] = {}
        for attr, code in FAN_STATE_FIELDS.items():
            value = getattr(self, attr)
            if value:
                wire[code] = value
        return wire


@dataclass(frozen=True)
class ProductState:
    """Fan state as reported by the device."""

    fan_mode: str = ""
    fan_speed: str = ""
    oscillate: str = ""
    sleep_timer: str = ""
    standby_monitoring: str = ""
    reset_filter: str = ""
    quality_target: str = ""
    night_mode: str = ""
    heat_mode: str = ""
    heat_target: str = ""
    focus_mode: str = ""
    fan_state: str = ""
    heat_state: str = ""
    filter_life: str = ""
    unknown_ercd: str = ""
    unknown_wacd: str = ""
    tilt: str = ""


@dataclass(frozen=True)
class EnvironmentState:
    """Sensor readings from an ENVIRONMENTAL-CURRENT-SENSOR-DATA message."""

    temperature: str = ""
    humidity: str = ""
    particulate: str = ""
    unknown_vact: str = ""
    sleep_timer: str = ""


@dataclass(frozen=True)
class DeviceCredentials:
    """Reply to the bootstrap credentials request."""

    serial_number: str = ""
    password_hash: str = ""
