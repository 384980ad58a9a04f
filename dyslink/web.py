#!/usr/bin/env python3
"""
dysweb: tiny web panel for one fan.

Serves a status/control page, keeps the last known state of the fan
and environment sensors, and forwards form posts as STATE-SET commands.

Usage:
  dysweb --host 10.0.42.137 --user NN4-CH-HEA0322B --password XXXX --listen 127.0.0.1:9033
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, fields, replace
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import json
import logging
import queue
import sys
import threading
from typing import Any, Protocol
from urllib.parse import parse_qs, urlparse

import voluptuous as vol

from .client import LinkClient
from .commands import fan_speed_code, sleep_timer_code
from .config import SET_STATE_SCHEMA, ClientOpts, parse_device_address
from .const import FAN_MODE_OFF, FAN_MODE_ON, MODEL_N475, MODELS, OSCILLATE_ON, MessageKind
from .dispatcher import MessageResult
from .errors import DyslinkError
from .states import EnvironmentState, FanState, ProductState

_LOGGER = logging.getLogger(__name__)

# Settings sent by the toggle endpoint when switching the fan on
TOGGLE_SPEED = 7
TOGGLE_SLEEP_MINUTES = 30


class StateSender(Protocol):
    def set_state(self, state: FanState) -> None: ...


class FanStatus:
    """Last known fan and sensor state, shared between threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.fan = ProductState()
        self.env = EnvironmentState()

    def apply(self, result: MessageResult) -> None:
        """Fold one dispatcher result into the current state."""
        if result.error is not None:
            _LOGGER.debug("dysweb: ignoring failed message: %s", result.error)
            return
        with self._lock:
            if result.kind is MessageKind.CURRENT_STATE:
                self.fan = result.message
            elif result.kind is MessageKind.STATE_CHANGE:
                # Only the changed fields are set
                changed = {
                    f.name: getattr(result.message, f.name)
                    for f in fields(result.message)
                    if getattr(result.message, f.name)
                }
                self.fan = replace(self.fan, **changed)
            elif result.kind is MessageKind.ENVIRONMENTAL_SENSOR_DATA:
                self.env = result.message

    def fan_mode(self) -> str:
        with self._lock:
            return self.fan.fan_mode

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {"fan": asdict(self.fan), "env": asdict(self.env)}


class FanPanel:
    """Request handling for the web panel, independent of the HTTP plumbing."""

    def __init__(self, sender: StateSender, status: FanStatus | None = None) -> None:
        self.sender = sender
        self.status = status or FanStatus()

    def toggle(self) -> FanState:
        """Switch the fan on if it is off, off otherwise."""
        mode = FAN_MODE_ON if self.status.fan_mode() == FAN_MODE_OFF else FAN_MODE_OFF
        state = FanState(
            fan_mode=mode,
            fan_speed=fan_speed_code(TOGGLE_SPEED),
            oscillate=OSCILLATE_ON,
            sleep_timer=sleep_timer_code(TOGGLE_SLEEP_MINUTES),
        )
        self.sender.set_state(state)
        return state

    def set_state_from_form(self, form: dict[str, list[str]]) -> FanState:
        """Validate posted form fields and send them; raises ``vol.Invalid``."""
        data = SET_STATE_SCHEMA({key: values[-1] for key, values in form.items() if values})
        state = FanState(
            fan_mode=data.get("mode", ""),
            fan_speed=fan_speed_code(data["speed"]) if "speed" in data else "",
            oscillate=data.get("rotate", ""),
        )
        self.sender.set_state(state)
        return state


class PanelServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], panel: FanPanel) -> None:
        super().__init__(address, PanelHandler)
        self.panel = panel


class PanelHandler(BaseHTTPRequestHandler):
    server_version = "dysweb/1.0"
    server: PanelServer

    def do_GET(self) -> None:  # noqa: N802
        path = urlparse(self.path).path
        panel = self.server.panel
        if path == "/":
            self._send(HTTPStatus.OK, "text/html; charset=utf-8", INDEX_HTML.encode("utf-8"))
        elif path == "/getstate.json":
            self._json(HTTPStatus.OK, panel.status.snapshot())
        elif path == "/toggle.json":
            try:
                state = panel.toggle()
            except DyslinkError as err:
                self._json(HTTPStatus.BAD_GATEWAY, {"ok": False, "error": str(err)})
                return
            self._json(HTTPStatus.OK, state.to_wire())
        else:
            self._json(HTTPStatus.NOT_FOUND, {"ok": False, "error": "Not found"})

    def do_POST(self) -> None:  # noqa: N802
        path = urlparse(self.path).path
        if path != "/setstate.json":
            self._json(HTTPStatus.NOT_FOUND, {"ok": False, "error": "Not found"})
            return
        try:
            length = int(self.headers.get("Content-Length", "0") or 0)
        except ValueError:
            self._json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Bad Content-Length"})
            return
        body = self.rfile.read(length).decode("utf-8") if length > 0 else ""
        try:
            state = self.server.panel.set_state_from_form(parse_qs(body))
        except vol.Invalid as err:
            self._json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": str(err)})
            return
        except DyslinkError as err:
            self._json(HTTPStatus.BAD_GATEWAY, {"ok": False, "error": str(err)})
            return
        self._json(HTTPStatus.OK, state.to_wire())

    def log_message(self, fmt: str, *args: Any) -> None:
        _LOGGER.debug("dysweb: %s %s", self.address_string(), fmt % args)

    def _json(self, status: HTTPStatus, payload: Any) -> None:
        self._send(status, "application/json", json.dumps(payload).encode("utf-8"))

    def _send(self, status: HTTPStatus, content_type: str, data: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Cache-Control", "no-store")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)


def monitor_status(
    results: queue.Queue, status: FanStatus, stop: threading.Event, poll: float = 0.5
) -> None:
    """Feed dispatcher results into ``status`` until ``stop`` is set."""
    while not stop.is_set():
        try:
            result = results.get(timeout=poll)
        except queue.Empty:
            continue
        _LOGGER.debug("dysweb: %s", result)
        status.apply(result)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="dysweb", description="Web panel for a pure link fan")
    p.add_argument("--host", default="10.0.42.137:1883", help="The ip:port combination to connect to")
    p.add_argument("--user", required=True, help="Part of the setup SSID, example: NN4-CH-HEA0322B")
    p.add_argument("--password", default="", help="See the sticker on the manual or under the filter")
    p.add_argument("--model", choices=MODELS, default=MODEL_N475)
    p.add_argument("--listen", default="127.0.0.1:9033", help="ip:port to listen on")
    p.add_argument("--debug", action="store_true")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        host, port = parse_device_address(args.host)
        listen_host, listen_port = parse_device_address(args.listen, default_port=9033)
        opts = ClientOpts.from_dict(
            {
                "username": args.user,
                "password": args.password,
                "host": host,
                "port": port,
                "model": args.model,
                "debug": args.debug,
            }
        )
    except vol.Invalid as err:
        print(f"Invalid options: {err}", file=sys.stderr)
        return 1

    client = LinkClient(opts)
    try:
        client.connect()
    except DyslinkError as err:
        _LOGGER.error("dysweb: failed to connect to '%s': %s", args.host, err)
        return 2

    panel = FanPanel(client)
    stop = threading.Event()
    monitor = threading.Thread(
        target=monitor_status, args=(client.results, panel.status, stop), daemon=True
    )
    monitor.start()

    server = PanelServer((listen_host, listen_port), panel)
    _LOGGER.info("dysweb: listening on http://%s:%s", listen_host, listen_port)
    try:
        client.request_current_state()
        server.serve_forever()
    except DyslinkError as err:
        _LOGGER.error("dysweb: %s", err)
        return 3
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()
        server.server_close()
        client.disconnect()
    return 0


INDEX_HTML = """<html>
<head>
<title>Dyslink</title>
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<style>
.toptitle { text-align: center; font-size: 2.5em; color: #606060; text-shadow: 2px 2px 12px #202020; }
.title { text-align: center; font-size: 2em; color: #505050; text-shadow: 2px 2px 8px #101010; }
.select { font-size: 1.2em; display: block; margin: 0 auto; }
</style>
</head>
<body bgcolor="#222222">
<div class="toptitle">Fan Web UI</div>
<br><br>
<div id="ui" style="visibility: hidden;">

<div class="title">Mode</div>
<select class="select" id="mode">
  <option value="OFF">Off</option>
  <option value="FAN">On</option>
  <option value="AUTO">Auto</option>
</select>
<br>

<div class="title">Fan Speed</div>
<select class="select" id="speed">
  <option value="1">1</option>
  <option value="2">2</option>
  <option value="3">3</option>
  <option value="4">4</option>
  <option value="5">5</option>
  <option value="6">6</option>
  <option value="7">7</option>
  <option value="8">8</option>
  <option value="9">9</option>
  <option value="10">10</option>
</select>
<br>

<div class="title">Rotation</div>
<select class="select" id="rotate">
  <option value="OFF">Off</option>
  <option value="ON">Rotate</option>
</select>
</div>

<script>
var busy = 0;

function setFan() {
  busy = 1;
  var body = new URLSearchParams({
    mode: document.getElementById("mode").value,
    speed: document.getElementById("speed").value,
    rotate: document.getElementById("rotate").value,
  });
  fetch("setstate.json", {method: "POST", body: body})
    .finally(function() { busy = 0; });
}

["mode", "speed", "rotate"].forEach(function(id) {
  document.getElementById(id).addEventListener("change", setFan);
});

function restoreUI(data) {
  var fs = parseInt(data.fan.fan_speed, 10);
  if (!isNaN(fs)) {
    document.getElementById("speed").value = fs;
  }
  document.getElementById("rotate").value = data.fan.oscillate;
  document.getElementById("mode").value = data.fan.fan_mode;
  document.getElementById("ui").style.visibility = "visible";
}

function poll() {
  fetch("getstate.json")
    .then(function(r) { return r.json(); })
    .then(function(data) { if (busy == 0) { restoreUI(data); } })
    .catch(function() {})
    .finally(function() { setTimeout(poll, 500); });
}
poll();
</script>

</body>
</html>
"""


if __name__ == "__main__":
    raise SystemExit(main())
