"""Outbound commands understood by the device."""
from __future__ import annotations

from .const import (
    BOOTSTRAP_AUTHORISE_REQUEST_ID,
    BOOTSTRAP_JOIN_REQUEST_ID,
    BOOTSTRAP_NIL_ID,
    MSG_REQUEST_CURRENT_STATE,
    MSG_STATE_SET,
    VALUE_STET,
    MessageKind,
)
from .envelope import CommandEnvelope
from .states import FanState

# Marks a change as requested by an app rather than the remote
MODE_REASON_APP = "LAPP"


def build_set_state(state: FanState) -> CommandEnvelope:
    """Return a STATE-SET command applying ``state``."""
    return CommandEnvelope(command=MSG_STATE_SET, mode_reason=MODE_REASON_APP, data=state)


def build_request_current_state() -> CommandEnvelope:
    """Ask the device for CURRENT-STATE and sensor data messages."""
    return CommandEnvelope(command=MSG_REQUEST_CURRENT_STATE)


def build_join_network(ssid: str, password: str) -> CommandEnvelope:
    return CommandEnvelope(
        command=MessageKind.JOIN_NETWORK.value,
        request_id=BOOTSTRAP_JOIN_REQUEST_ID,
        wifi_ssid=ssid,
        wifi_password=password,
    )


def build_authorise_user() -> CommandEnvelope:
    return CommandEnvelope(
        command=MessageKind.AUTHORISE_USER_REQUEST.value,
        request_id=BOOTSTRAP_AUTHORISE_REQUEST_ID,
        id=BOOTSTRAP_NIL_ID,
    )


def build_close_access_point() -> CommandEnvelope:
    return CommandEnvelope(command=MessageKind.CLOSE_ACCESS_POINT.value)


def build_bootstrap_sequence(ssid: str, password: str) -> list[CommandEnvelope]:
    """Return the three commands that move a factory reset fan onto ``ssid``.

    They are independent; callers publish them in order.
    """
    return [
        build_join_network(ssid, password),
        build_authorise_user(),
        build_close_access_point(),
    ]


def _four_digit_code(value: int | str, what: str) -> str:
    if isinstance(value, str):
        text = value.strip()
        if not text or text.upper() == VALUE_STET:
            return text.upper()
        if not text.isdigit():
            return text.upper()
        value = int(text)
    if value < 0 or value > 9999:
        raise ValueError(f"{what} out of range: {value}")
    return f"{value:04d}"


def fan_speed_code(value: int | str) -> str:
    """Format a fan speed as the device wants it: ``7`` -> ``"0007"``.

    ``"AUTO"`` and ``"STET"`` pass through unchanged.
    """
    return _four_digit_code(value, "fan speed")


def sleep_timer_code(minutes: int | str) -> str:
    """Format a sleep timer in minutes; ``0`` cancels via ``"OFF"``."""
    code = _four_digit_code(minutes, "sleep timer")
    if code == "0000":
        return "OFF"
    return code
