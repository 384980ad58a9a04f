"""Tests for connection options."""

from __future__ import annotations

import pytest
import voluptuous as vol

from dyslink.config import ClientOpts, parse_device_address


def test_client_opts_defaults() -> None:
    """Only username and host are required."""

    opts = ClientOpts.from_dict({"username": "NN4", "host": "10.0.42.137"})

    assert opts.port == 1883
    assert opts.model == "475"
    assert opts.password == ""
    assert opts.keepalive == 60
    assert not opts.debug


def test_client_opts_coerces_port() -> None:
    """Ports given as text are accepted."""

    opts = ClientOpts.from_dict({"username": "NN4", "host": "h", "port": "1884"})

    assert opts.port == 1884


@pytest.mark.parametrize(
    "data",
    [
        {"host": "h"},
        {"username": "NN4", "host": ""},
        {"username": "NN4", "host": "h", "model": "999"},
        {"username": "NN4", "host": "h", "port": 70000},
        {"username": "NN4", "host": "h", "colour": "blue"},
    ],
)
def test_client_opts_rejects_invalid(data) -> None:
    """Unknown models, ports out of range and extra keys are refused."""

    with pytest.raises(vol.Invalid):
        ClientOpts.from_dict(data)


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("10.0.42.137:1883", ("10.0.42.137", 1883)),
        ("tcp://192.168.1.196:1884", ("192.168.1.196", 1884)),
        ("fan.local", ("fan.local", 1883)),
    ],
)
def test_parse_device_address(address, expected) -> None:
    """host[:port] with an optional tcp:// prefix."""

    assert parse_device_address(address) == expected
