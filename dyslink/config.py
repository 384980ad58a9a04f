"""Connection options and input schemas for dyslink."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    DEFAULT_KEEPALIVE,
    DEFAULT_PORT,
    DEFAULT_PUBLISH_TIMEOUT,
    FAN_MODES,
    FAN_SPEED_MAX,
    FAN_SPEED_MIN,
    MODEL_N475,
    MODELS,
    ON_OFF,
)

CONF_USERNAME = "username"
CONF_PASSWORD = "password"
CONF_HOST = "host"
CONF_PORT = "port"
CONF_MODEL = "model"
CONF_DEBUG = "debug"
CONF_KEEPALIVE = "keepalive"
CONF_PUBLISH_TIMEOUT = "publish_timeout"
CONF_CLIENT_ID = "client_id"

CLIENT_OPTS_SCHEMA = vol.Schema(
    {
        # Printed on the sticker and part of the setup SSID, e.g. NN4-CH-HEA0322B
        vol.Required(CONF_USERNAME): str,
        vol.Optional(CONF_PASSWORD, default=""): str,
        vol.Required(CONF_HOST): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional(CONF_MODEL, default=MODEL_N475): vol.In(MODELS),
        vol.Optional(CONF_DEBUG, default=False): bool,
        vol.Optional(CONF_KEEPALIVE, default=DEFAULT_KEEPALIVE): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(CONF_PUBLISH_TIMEOUT, default=DEFAULT_PUBLISH_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional(CONF_CLIENT_ID, default=""): str,
    }
)

# Form fields posted by the web panel
SET_STATE_SCHEMA = vol.Schema(
    {
        vol.Optional("mode"): vol.In(FAN_MODES),
        vol.Optional("speed"): vol.All(
            vol.Coerce(int), vol.Range(min=FAN_SPEED_MIN, max=FAN_SPEED_MAX)
        ),
        vol.Optional("rotate"): vol.In(ON_OFF),
    }
)


@dataclass(frozen=True)
class ClientOpts:
    """Everything needed to talk to one device."""

    username: str
    host: str
    password: str = ""
    port: int = DEFAULT_PORT
    model: str = MODEL_N475
    debug: bool = False
    keepalive: int = DEFAULT_KEEPALIVE
    publish_timeout: float = DEFAULT_PUBLISH_TIMEOUT
    client_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientOpts:
        """Validate ``data`` and build options, raising ``vol.Invalid`` on bad input."""
        return cls(**CLIENT_OPTS_SCHEMA(dict(data)))


def parse_device_address(address: str, default_port: int = DEFAULT_PORT) -> tuple[str, int]:
    """Split ``host[:port]`` (optionally prefixed with ``tcp://``)."""
    if address.startswith("tcp://"):
        address = address[len("tcp://"):]
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, default_port
    if not port.isdigit():
        raise vol.Invalid(f"invalid port in device address: {address}")
    return host, int(port)
