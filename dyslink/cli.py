#!/usr/bin/env python3
"""
dyslink command line tool

Sets the state of a fan, or bootstraps a factory reset fan into a wifi
network, then optionally keeps running to print status messages.

Usage:
  dyslink --host 10.0.42.137 --user NN4-CH-HEA0322B --password XXXX --fan-speed 4 --oscillate
  dyslink --host 192.168.0.1 --bootstrap --boot-essid home --boot-password secret
"""

from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
import queue
import sys

import voluptuous as vol

from .client import LinkClient
from .commands import fan_speed_code, sleep_timer_code
from .config import ClientOpts, parse_device_address
from .const import (
    FAN_MODE_AUTO,
    FAN_MODE_OFF,
    FAN_MODE_ON,
    MODELS,
    MODEL_N475,
    NIGHT_MODE_OFF,
    NIGHT_MODE_ON,
    OSCILLATE_OFF,
    OSCILLATE_ON,
    QUALITY_HIGH,
    QUALITY_LOW,
)
from .errors import DyslinkError
from .states import FanState

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="dyslink", description="Control a pure link fan over MQTT")
    p.add_argument("--host", default="10.0.42.137:1883", help="The ip:port combination to connect to")
    p.add_argument("--user", default="", help="Part of the setup SSID, example: NN4-CH-HEA0322B")
    p.add_argument("--password", default="", help="See the sticker on the manual or under the filter")
    p.add_argument("--model", choices=MODELS, default=MODEL_N475)
    p.add_argument("--debug", action="store_true", help="Log raw MQTT traffic")

    p.add_argument("--bootstrap", action="store_true", help="Bootstrap a factory reset fan, see --boot-essid")
    p.add_argument("--boot-essid", default="i-did-not-read-the-manual", help="Network the fan should join")
    p.add_argument("--boot-password", default="", help="Password of the --boot-essid network")
    p.add_argument("--hang", action="store_true", help="Keep running and print status updates")

    p.add_argument("--sleep-timer", default="", help="Sleep timer in minutes, '0' cancels the timer")
    p.add_argument("--fan-speed", default="", help="Speed 1-10; 0 turns the fan off, -1 selects auto mode")
    p.add_argument("--oscillate", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--night-mode", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--high-quality", action=argparse.BooleanOptionalAction, default=None,
                   help="Target high air quality")
    return p.parse_args(argv)


def _tri_state(value: bool | None, on: str, off: str) -> str:
    if value is None:
        return ""
    return on if value else off


def build_fan_state(args: argparse.Namespace) -> FanState:
    """Translate command line flags into a FanState; unset flags stay unset."""
    mode = FAN_MODE_ON
    speed = args.fan_speed
    if speed == "0":
        mode = FAN_MODE_OFF
        speed = ""
    elif speed == "-1":
        mode = FAN_MODE_AUTO
        speed = ""

    return FanState(
        fan_mode=mode,
        fan_speed=fan_speed_code(speed) if speed else "",
        oscillate=_tri_state(args.oscillate, OSCILLATE_ON, OSCILLATE_OFF),
        night_mode=_tri_state(args.night_mode, NIGHT_MODE_ON, NIGHT_MODE_OFF),
        sleep_timer=sleep_timer_code(args.sleep_timer) if args.sleep_timer else "",
        quality_target=_tri_state(args.high_quality, QUALITY_HIGH, QUALITY_LOW),
    )


def build_client_opts(args: argparse.Namespace) -> ClientOpts:
    host, port = parse_device_address(args.host)
    return ClientOpts.from_dict(
        {
            "username": args.user,
            "password": args.password,
            "host": host,
            "port": port,
            "model": args.model,
            "debug": args.debug,
        }
    )


def print_results(results: queue.Queue) -> None:
    print("# waiting for status messages, hit CTRL+C to exit")
    while True:
        result = results.get()
        if result.error is not None:
            print(f"Error: {result.error}")
            continue
        print(json.dumps({"msg": result.kind.value, "state": asdict(result.message)}))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.user and not args.bootstrap:
        print("--user is required unless --bootstrap is given", file=sys.stderr)
        return 1
    try:
        opts = build_client_opts(args)
    except vol.Invalid as err:
        print(f"Invalid options: {err}", file=sys.stderr)
        return 1

    client = LinkClient(opts)
    try:
        client.connect()
    except DyslinkError as err:
        print(f"Failed to connect to '{args.host}' as '{args.user}', error: {err}", file=sys.stderr)
        return 2

    hang = args.hang
    try:
        if args.bootstrap:
            hang = True
            print(f"Bootstrapping {args.host} into wifi network {args.boot_essid}")
            client.wifi_bootstrap(args.boot_essid, args.boot_password)
        else:
            state = build_fan_state(args)
            client.set_state(state)
            print(f"Set: {json.dumps(state.to_wire())}")

        if hang:
            print_results(client.results)
    except DyslinkError as err:
        print(f"Command failed: {err}", file=sys.stderr)
        return 3
    except KeyboardInterrupt:
        pass
    finally:
        client.disconnect()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
