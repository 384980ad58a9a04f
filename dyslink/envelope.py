"""Wire envelope shared by commands and device messages.

Every message in both directions is a JSON object::

    {"msg": "STATE-SET", "time": "2019-05-04T10:11:12.123456789Z",
     "mode-reason": "LAPP", "data": {"fmod": "FAN"}}

Optional keys are left out entirely when unset; the device treats an
empty string as a value.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
import json
import time
from typing import Any

from .const import MessageKind
from .errors import EnvelopeParseError

# attribute -> wire key, for the optional string fields
_STRING_FIELDS: dict[str, str] = {
    "mode_reason": "mode-reason",
    "request_id": "requestId",
    "id": "id",
    "wifi_ssid": "ssid",
    "wifi_password": "password",
}

# attribute -> wire key, for the free-form payload fields
_PAYLOAD_FIELDS: dict[str, str] = {
    "data": "data",
    "product_state": "product-state",
}

KEY_COMMAND = "msg"
KEY_TIME = "time"


@dataclass(frozen=True)
class CommandEnvelope:
    """A single message as it travels over MQTT."""

    command: str
    timestamp: str = ""
    mode_reason: str = ""
    data: Any = None
    product_state: Any = None
    request_id: str = ""
    id: str = ""
    wifi_ssid: str = ""
    wifi_password: str = ""

    @property
    def kind(self) -> MessageKind:
        return MessageKind.classify(self.command)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, omitting unset optional fields."""
        wire: dict[str, Any] = {KEY_COMMAND: self.command, KEY_TIME: self.timestamp}
        for attr, key in _STRING_FIELDS.items():
            value = getattr(self, attr)
            if value:
                wire[key] = value
        for attr, key in _PAYLOAD_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                wire[key] = _payload_to_wire(value)
        return wire

    @classmethod
    def from_wire(cls, document: dict[str, Any]) -> CommandEnvelope:
        """Build an envelope from a decoded JSON object."""
        kwargs: dict[str, Any] = {
            "command": _string_field(document, KEY_COMMAND),
            "timestamp": _string_field(document, KEY_TIME),
        }
        for attr, key in _STRING_FIELDS.items():
            kwargs[attr] = _string_field(document, key)
        for attr, key in _PAYLOAD_FIELDS.items():
            kwargs[attr] = document.get(key)
        return cls(**kwargs)


def _payload_to_wire(value: Any) -> Any:
    to_wire = getattr(value, "to_wire", None)
    if callable(to_wire):
        return to_wire()
    return value


def _string_field(document: dict[str, Any], key: str) -> str:
    value = document.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise EnvelopeParseError(
            f"envelope field {key!r} must be a string, got {type(value).__name__}"
        )
    return value


def format_timestamp(ns: int) -> str:
    """Format nanoseconds since the epoch as an RFC 3339 UTC timestamp."""
    seconds, fraction = divmod(ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return f"{stamp:%Y-%m-%dT%H:%M:%S}.{fraction:09d}Z"


def encode_envelope(envelope: CommandEnvelope, *, now_ns: int | None = None) -> bytes:
    """Stamp ``envelope`` with the current time and serialize it."""
    if now_ns is None:
        now_ns = time.time_ns()
    stamped = replace(envelope, timestamp=format_timestamp(now_ns))
    return json.dumps(stamped.to_wire(), separators=(",", ":")).encode("utf-8")


def encode(
    kind: MessageKind | str,
    payload: Any = None,
    *,
    now_ns: int | None = None,
    **extras: Any,
) -> bytes:
    """Serialize a command of ``kind`` carrying ``payload`` as its data."""
    command = kind.value if isinstance(kind, MessageKind) else kind
    return encode_envelope(
        CommandEnvelope(command=command, data=payload, **extras), now_ns=now_ns
    )


def parse_document(raw: bytes | bytearray | str) -> dict[str, Any]:
    """Decode raw message bytes into the top-level JSON object."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as err:
            raise EnvelopeParseError(f"payload is not UTF-8: {err}") from err
    if not isinstance(raw, str):
        raise EnvelopeParseError(f"unsupported payload type {type(raw).__name__}")
    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as err:
        raise EnvelopeParseError(f"payload is not JSON: {err}") from err
    if not isinstance(document, dict):
        raise EnvelopeParseError(
            f"envelope must be a JSON object, got {type(document).__name__}"
        )
    return document


def parse_envelope(raw: bytes | bytearray | str) -> CommandEnvelope:
    """Parse raw message bytes into a :class:`CommandEnvelope`."""
    return CommandEnvelope.from_wire(parse_document(raw))
