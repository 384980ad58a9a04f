"""Talk to pure link fans over their local MQTT broker."""
from __future__ import annotations

from .auth import hash_password
from .client import LinkClient, device_topic
from .commands import (
    build_bootstrap_sequence,
    build_request_current_state,
    build_set_state,
)
from .config import ClientOpts
from .const import MessageKind
from .dispatcher import MessageDispatcher, MessageResult
from .envelope import CommandEnvelope, encode, encode_envelope, parse_envelope
from .errors import (
    ConnectError,
    DecodeError,
    DyslinkError,
    EnvelopeParseError,
    PayloadShapeError,
    PublishError,
)
from .states import DeviceCredentials, EnvironmentState, FanState, ProductState
from .units import from_fahrenheit, to_fahrenheit

__all__ = [
    "ClientOpts",
    "CommandEnvelope",
    "ConnectError",
    "DecodeError",
    "DeviceCredentials",
    "DyslinkError",
    "EnvelopeParseError",
    "EnvironmentState",
    "FanState",
    "LinkClient",
    "MessageDispatcher",
    "MessageKind",
    "MessageResult",
    "PayloadShapeError",
    "ProductState",
    "PublishError",
    "build_bootstrap_sequence",
    "build_request_current_state",
    "build_set_state",
    "device_topic",
    "encode",
    "encode_envelope",
    "from_fahrenheit",
    "hash_password",
    "parse_envelope",
    "to_fahrenheit",
]
