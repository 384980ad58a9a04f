"""Tests for the dyslink command line tool."""

from __future__ import annotations

import pytest
import voluptuous as vol

from dyslink import cli
from dyslink.states import FanState

from conftest import FakeMQTT


def test_build_fan_state_from_flags() -> None:
    """Speed, oscillation and quality flags become device codes."""

    args = cli.parse_args(["--user", "u", "--fan-speed", "4", "--oscillate", "--high-quality"])

    assert cli.build_fan_state(args) == FanState(
        fan_mode="FAN", fan_speed="0004", oscillate="ON", quality_target="0004"
    )


def test_build_fan_state_leaves_unpassed_flags_unset() -> None:
    """Flags that were not given do not touch the device value."""

    args = cli.parse_args(["--user", "u", "--no-night-mode"])

    state = cli.build_fan_state(args)

    assert state.night_mode == "OFF"
    assert state.oscillate == ""
    assert state.quality_target == ""
    assert state.fan_speed == ""


@pytest.mark.parametrize(("speed", "mode"), [("0", "OFF"), ("-1", "AUTO")])
def test_build_fan_state_special_speeds(speed: str, mode: str) -> None:
    """0 turns the fan off and -1 selects auto, without sending a speed."""

    args = cli.parse_args(["--user", "u", f"--fan-speed={speed}"])

    state = cli.build_fan_state(args)

    assert state.fan_mode == mode
    assert state.fan_speed == ""


def test_build_fan_state_sleep_timer() -> None:
    """Sleep timer minutes are padded, 0 cancels."""

    assert cli.build_fan_state(cli.parse_args(["--sleep-timer", "15"])).sleep_timer == "0015"
    assert cli.build_fan_state(cli.parse_args(["--sleep-timer", "0"])).sleep_timer == "OFF"


def test_build_client_opts_splits_address() -> None:
    """host:port is split and validated."""

    opts = cli.build_client_opts(
        cli.parse_args(["--host", "192.168.1.196:1884", "--user", "u", "--model", "455"])
    )

    assert opts.host == "192.168.1.196"
    assert opts.port == 1884
    assert opts.model == "455"


def test_build_client_opts_rejects_bad_port() -> None:
    """A non-numeric port fails validation."""

    with pytest.raises(vol.Invalid):
        cli.build_client_opts(cli.parse_args(["--host", "10.0.0.1:abc", "--user", "u"]))


def test_main_requires_user(capsys) -> None:
    """Without --user only bootstrap is allowed."""

    assert cli.main(["--fan-speed", "3"]) == 1
    assert "--user" in capsys.readouterr().err


def test_main_sets_state(monkeypatch, capsys) -> None:
    """main connects, publishes one STATE-SET and disconnects."""

    fake = FakeMQTT()
    monkeypatch.setattr(cli.LinkClient, "__init__", _patched_init(fake))

    assert cli.main(["--user", "NN4", "--password", "pw", "--fan-speed", "5"]) == 0

    [document] = fake.published_documents()
    assert document["msg"] == "STATE-SET"
    assert document["data"] == {"fmod": "FAN", "fnsp": "0005"}
    assert fake.disconnected
    assert "Set:" in capsys.readouterr().out


def test_main_reports_connect_failure(monkeypatch, capsys) -> None:
    """A refused connection exits with code 2."""

    fake = FakeMQTT(refuse=True)
    monkeypatch.setattr(cli.LinkClient, "__init__", _patched_init(fake))

    assert cli.main(["--user", "NN4"]) == 2
    assert "Failed to connect" in capsys.readouterr().err


def _patched_init(fake: FakeMQTT):
    real_init = cli.LinkClient.__init__

    def _init(self, opts, sink=None, *, mqtt_client=None):
        real_init(self, opts, sink, mqtt_client=fake)

    return _init
