"""Tests for the device payload decoders."""

from __future__ import annotations

import pytest

from dyslink.decoder import (
    decode_device_credentials,
    decode_environment_state,
    decode_product_state,
    decode_state_change,
    extract_changes,
)
from dyslink.errors import PayloadShapeError
from dyslink.states import DeviceCredentials, EnvironmentState, ProductState

CURRENT_STATE = {
    "fmod": "AUTO",
    "fnst": "FAN",
    "fnsp": "0004",
    "qtar": "0003",
    "oson": "ON",
    "rhtm": "ON",
    "filf": "2087",
    "ercd": "02C0",
    "nmod": "OFF",
    "wacd": "NONE",
    "hmod": "HEAT",
    "hmax": "2960",
    "hsta": "OFF",
    "ffoc": "ON",
    "tilt": "OK",
    "sltm": "OFF",
    "rstf": "STET",
}


def test_decode_product_state_maps_every_field_code() -> None:
    """Each short code ends up on its named attribute, as a string."""

    state = decode_product_state(CURRENT_STATE)

    assert state == ProductState(
        fan_mode="AUTO",
        fan_speed="0004",
        oscillate="ON",
        sleep_timer="OFF",
        standby_monitoring="ON",
        reset_filter="STET",
        quality_target="0003",
        night_mode="OFF",
        heat_mode="HEAT",
        heat_target="2960",
        focus_mode="ON",
        fan_state="FAN",
        heat_state="OFF",
        filter_life="2087",
        unknown_ercd="02C0",
        unknown_wacd="NONE",
        tilt="OK",
    )


def test_decode_product_state_ignores_unknown_and_missing_fields() -> None:
    """Unknown codes are dropped and missing ones stay empty."""

    state = decode_product_state({"fmod": "FAN", "newf": "1", "FNSP": "0002"})

    assert state.fan_mode == "FAN"
    assert state.fan_speed == ""


def test_decode_product_state_accepts_missing_payload() -> None:
    """A message without product-state decodes to an empty record."""

    assert decode_product_state(None) == ProductState()


def test_decode_product_state_rejects_non_string_value() -> None:
    """Known fields must carry strings."""

    with pytest.raises(PayloadShapeError):
        decode_product_state({"fnsp": 4})


def test_decode_environment_state() -> None:
    """Sensor data keeps the raw device strings."""

    state = decode_environment_state(
        {"tact": "2977", "hact": "0045", "pact": "0003", "vact": "INIT", "sltm": "OFF"}
    )

    assert state == EnvironmentState(
        temperature="2977",
        humidity="0045",
        particulate="0003",
        unknown_vact="INIT",
        sleep_timer="OFF",
    )


def test_decode_environment_state_rejects_list() -> None:
    """A list is not a sensor mapping."""

    with pytest.raises(PayloadShapeError):
        decode_environment_state(["tact", "2977"])


def test_decode_state_change_keeps_new_values() -> None:
    """The second element of each pair is the new value."""

    state = decode_state_change(
        {"fmod": ["OFF", "FAN"], "fnsp": ["0004", "0007"], "bogus": "x"}
    )

    assert state.fan_mode == "FAN"
    assert state.fan_speed == "0007"
    assert state.oscillate == ""


def test_decode_state_change_skips_irregular_entries() -> None:
    """Entries that are not [old, new] string pairs are dropped silently."""

    changes = extract_changes(
        {
            "fmod": ["OFF", "FAN"],
            "fnsp": ["0004"],
            "oson": ["OFF", "ON", "OFF"],
            "nmod": ["OFF", 1],
            "sltm": "OFF",
            "qtar": None,
        }
    )

    assert changes == {"fmod": "FAN"}


def test_decode_state_change_ignores_unknown_codes() -> None:
    """Firmware additions do not break decoding."""

    state = decode_state_change({"zzzz": ["A", "B"], "nmod": ["OFF", "ON"]})

    assert state == ProductState(night_mode="ON")


@pytest.mark.parametrize("payload", [["fmod", "FAN"], None, "fmod", 3])
def test_decode_state_change_rejects_non_mapping(payload: object) -> None:
    """The top level must be a mapping."""

    with pytest.raises(PayloadShapeError):
        decode_state_change(payload)


def test_decode_device_credentials_reads_top_level() -> None:
    """Credentials sit next to msg rather than inside a payload."""

    credentials = decode_device_credentials(
        {
            "msg": "DEVICE-CREDENTIALS",
            "time": "2019-05-04T10:11:12Z",
            "serialNumber": "NN4-CH-HEA0322B",
            "apPasswordHash": "abc==",
        }
    )

    assert credentials == DeviceCredentials(
        serial_number="NN4-CH-HEA0322B", password_hash="abc=="
    )
