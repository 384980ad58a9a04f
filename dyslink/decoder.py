"""Decoders for device payloads.

Product and environment payloads are flat mappings of short field codes
to strings and decode through fixed tables. Unsolicited STATE-CHANGE
messages use a different shape: every changed field arrives as an
``[old, new]`` pair, e.g. ``{"fmod": ["OFF", "FAN"]}``.
"""
from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, TypeVar

from .const import (
    DEVICE_CREDENTIALS_FIELDS,
    ENVIRONMENT_STATE_FIELDS,
    PRODUCT_STATE_FIELDS,
)
from .errors import PayloadShapeError
from .states import DeviceCredentials, EnvironmentState, ProductState

_LOGGER = logging.getLogger(__name__)

_RecordT = TypeVar("_RecordT")


def _decode_fields(
    payload: Any, fields: Mapping[str, str], record: type[_RecordT], what: str
) -> _RecordT:
    """Map wire keys onto ``record`` attributes using ``fields``.

    Missing keys keep the record default and unknown keys are ignored.
    """
    if payload is None:
        return record()
    if not isinstance(payload, Mapping):
        raise PayloadShapeError(
            f"{what} payload must be a mapping, got {type(payload).__name__}"
        )
    values: dict[str, str] = {}
    for attr, key in fields.items():
        if key not in payload:
            continue
        value = payload[key]
        if value is None:
            continue
        if not isinstance(value, str):
            raise PayloadShapeError(
                f"{what} field {key!r} must be a string, got {type(value).__name__}"
            )
        values[attr] = value
    return record(**values)


def decode_product_state(payload: Any) -> ProductState:
    """Decode a ``product-state`` mapping."""
    return _decode_fields(payload, PRODUCT_STATE_FIELDS, ProductState, "product-state")


def decode_environment_state(payload: Any) -> EnvironmentState:
    """Decode the ``data`` mapping of an environmental sensor message."""
    return _decode_fields(payload, ENVIRONMENT_STATE_FIELDS, EnvironmentState, "sensor")


def decode_device_credentials(document: Any) -> DeviceCredentials:
    """Decode a DEVICE-CREDENTIALS reply.

    The credentials sit at the top level of the envelope, next to ``msg``,
    so this takes the whole decoded document.
    """
    return _decode_fields(
        document, DEVICE_CREDENTIALS_FIELDS, DeviceCredentials, "credentials"
    )


def extract_changes(payload: Any) -> dict[str, str]:
    """Return ``{code: new_value}`` from an ``[old, new]`` diff mapping.

    Entries that are not a two element sequence ending in a string are
    skipped; firmware updates add fields we know nothing about.
    """
    if not isinstance(payload, Mapping):
        raise PayloadShapeError(
            f"state-change payload must be a mapping, got {type(payload).__name__}"
        )
    changes: dict[str, str] = {}
    for key, value in payload.items():
        if isinstance(value, (list, tuple)) and len(value) == 2 and isinstance(value[1], str):
            changes[key] = value[1]
        else:
            _LOGGER.debug("dyslink: skipping state-change entry %s=%r", key, value)
    return changes


def decode_state_change(payload: Any) -> ProductState:
    """Decode an unsolicited STATE-CHANGE ``product-state`` payload."""
    return decode_product_state(extract_changes(payload))
