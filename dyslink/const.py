"""Constants for the dyslink protocol adapter."""
from __future__ import annotations

from enum import Enum

# Hardware families, used as the first topic segment
MODEL_N475 = "475"  # pure cool link (tower)
MODEL_N469 = "469"  # pure cool link (desk)
MODEL_N455 = "455"  # pure hot+cool link

MODELS: tuple[str, ...] = (MODEL_N475, MODEL_N469, MODEL_N455)

DEFAULT_PORT = 1883
DEFAULT_KEEPALIVE = 60
DEFAULT_PUBLISH_TIMEOUT = 10.0

# Topic suffixes: <model>/<username>/<suffix>
TOPIC_COMMAND = "command"
TOPIC_STATUS = "status/current"
TOPIC_CREDENTIALS = "credentials"

COMMAND_QOS = 1
STATUS_QOS = 0

# Username the device expects while its setup access point is open
BOOTSTRAP_USERNAME = "initialconnection"
BOOTSTRAP_JOIN_REQUEST_ID = "0123456789ABCDEF"
BOOTSTRAP_AUTHORISE_REQUEST_ID = "01234567890ABCDEF"
BOOTSTRAP_NIL_ID = "00000000-0000-0000-0000-000000000000"


class MessageKind(str, Enum):
    """Wire command tags understood by the adapter."""

    CURRENT_STATE = "CURRENT-STATE"
    ENVIRONMENTAL_SENSOR_DATA = "ENVIRONMENTAL-CURRENT-SENSOR-DATA"
    STATE_CHANGE = "STATE-CHANGE"
    JOIN_NETWORK = "JOIN-NETWORK"
    AUTHORISE_USER_REQUEST = "AUTHORISE-USER-REQUEST"
    CLOSE_ACCESS_POINT = "CLOSE-ACCESS-POINT"
    DEVICE_CREDENTIALS = "DEVICE-CREDENTIALS"
    UNRECOGNIZED = ""

    @classmethod
    def classify(cls, tag: object) -> MessageKind:
        """Return the kind for an exact tag match, UNRECOGNIZED otherwise."""
        if not isinstance(tag, str) or not tag:
            return cls.UNRECOGNIZED
        try:
            return cls(tag)
        except ValueError:
            return cls.UNRECOGNIZED


# Outbound-only command tags
MSG_STATE_SET = "STATE-SET"
MSG_REQUEST_CURRENT_STATE = "REQUEST-CURRENT-STATE"

# Enumerated control values. The device wants strings for everything.
FAN_MODE_OFF = "OFF"
FAN_MODE_ON = "FAN"
FAN_MODE_AUTO = "AUTO"
FAN_MODES = (FAN_MODE_OFF, FAN_MODE_ON, FAN_MODE_AUTO)

VALUE_ON = "ON"
VALUE_OFF = "OFF"
ON_OFF = (VALUE_ON, VALUE_OFF)

OSCILLATE_ON = VALUE_ON
OSCILLATE_OFF = VALUE_OFF
NIGHT_MODE_ON = VALUE_ON
NIGHT_MODE_OFF = VALUE_OFF
STANDBY_MONITOR_ON = VALUE_ON
STANDBY_MONITOR_OFF = VALUE_OFF
FOCUS_MODE_ON = VALUE_ON
FOCUS_MODE_OFF = VALUE_OFF
HEAT_MODE_ON = "HEAT"
HEAT_MODE_OFF = VALUE_OFF
HEAT_MODES = (HEAT_MODE_ON, VALUE_ON, HEAT_MODE_OFF)

QUALITY_LOW = "0001"
QUALITY_NORMAL = "0003"
QUALITY_HIGH = "0004"
QUALITY_TARGETS = (QUALITY_LOW, QUALITY_NORMAL, QUALITY_HIGH)

# Keeps the current device value, accepted for any control field
VALUE_STET = "STET"

FAN_SPEED_MIN = 1
FAN_SPEED_MAX = 10

# Wire field codes of the writable controls, attribute -> code
FAN_STATE_FIELDS: dict[str, str] = {
    "fan_mode": "fmod",
    "fan_speed": "fnsp",
    "oscillate": "oson",
    "sleep_timer": "sltm",
    # rhtm maps to standby monitoring only, see DESIGN.md
    "standby_monitoring": "rhtm",
    "reset_filter": "rstf",
    "quality_target": "qtar",
    "night_mode": "nmod",
    "heat_mode": "hmod",
    "heat_target": "hmax",
    "focus_mode": "ffoc",
}

# Read-only fields reported in product-state payloads
PRODUCT_STATE_EXTRA_FIELDS: dict[str, str] = {
    "fan_state": "fnst",
    "heat_state": "hsta",
    "filter_life": "filf",
    "unknown_ercd": "ercd",
    "unknown_wacd": "wacd",
    "tilt": "tilt",
}

PRODUCT_STATE_FIELDS: dict[str, str] = {
    **FAN_STATE_FIELDS,
    **PRODUCT_STATE_EXTRA_FIELDS,
}

ENVIRONMENT_STATE_FIELDS: dict[str, str] = {
    "temperature": "tact",
    "humidity": "hact",
    "particulate": "pact",
    "unknown_vact": "vact",
    "sleep_timer": "sltm",
}

# Top-level keys of a DEVICE-CREDENTIALS reply
DEVICE_CREDENTIALS_FIELDS: dict[str, str] = {
    "serial_number": "serialNumber",
    "password_hash": "apPasswordHash",
}
