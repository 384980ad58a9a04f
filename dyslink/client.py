"""MQTT client for a single fan."""
from __future__ import annotations

import logging
import queue
import threading
from typing import Any

import paho.mqtt.client as mqtt

from .auth import hash_password
from .commands import build_bootstrap_sequence, build_request_current_state, build_set_state
from .config import ClientOpts
from .const import (
    BOOTSTRAP_USERNAME,
    COMMAND_QOS,
    STATUS_QOS,
    TOPIC_COMMAND,
    TOPIC_CREDENTIALS,
    TOPIC_STATUS,
)
from .dispatcher import MessageDispatcher, ResultSink
from .envelope import CommandEnvelope, encode_envelope
from .errors import ConnectError, PublishError
from .states import FanState

_LOGGER = logging.getLogger(__name__)


def device_topic(model: str, username: str, suffix: str) -> str:
    """Return ``<model>/<username>/<suffix>``."""
    return f"{model}/{username}/{suffix}"


class LinkClient:
    """Connects to the fan's broker, publishes commands and feeds the dispatcher.

    Decoded messages land on ``results`` (an unbounded queue unless a sink
    is passed in).
    """

    def __init__(
        self,
        opts: ClientOpts,
        sink: ResultSink | None = None,
        *,
        mqtt_client: Any | None = None,
    ) -> None:
        self.opts = opts
        self.dispatcher = MessageDispatcher(
            sink if sink is not None else queue.Queue(), debug=opts.debug
        )
        # Part of every topic; the bootstrap swaps it for the setup username
        self._topic_user = opts.username
        self._connected = threading.Event()
        self._connect_error: str | None = None
        self._is_connected = False

        if mqtt_client is None:
            mqtt_client = mqtt.Client(
                mqtt.CallbackAPIVersion.VERSION2, client_id=opts.client_id
            )
        self.mqtt = mqtt_client
        self.mqtt.username_pw_set(opts.username, hash_password(opts.password))
        self.mqtt.on_connect = self.on_connect
        self.mqtt.on_message = self.on_message
        self.mqtt.on_disconnect = self.on_disconnect

    @property
    def results(self) -> ResultSink:
        return self.dispatcher.sink

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    def topic(self, suffix: str) -> str:
        return device_topic(self.opts.model, self._topic_user, suffix)

    def connect(self) -> None:
        """Connect and wait for the broker to accept us."""
        self._connected.clear()
        self._connect_error = None
        try:
            self.mqtt.connect(self.opts.host, self.opts.port, self.opts.keepalive)
        except OSError as err:
            raise ConnectError(
                f"failed to connect to {self.opts.host}:{self.opts.port}: {err}"
            ) from err
        self.mqtt.loop_start()
        if not self._connected.wait(self.opts.publish_timeout or None):
            self.mqtt.disconnect()
            self.mqtt.loop_stop()
            raise ConnectError(
                f"no answer from {self.opts.host}:{self.opts.port} "
                f"within {self.opts.publish_timeout}s"
            )
        if self._connect_error is not None:
            self.mqtt.disconnect()
            self.mqtt.loop_stop()
            raise ConnectError(
                f"{self.opts.host}:{self.opts.port} refused {self.opts.username}: "
                f"{self._connect_error}"
            )

    def disconnect(self) -> None:
        """Tear down the connection; no more results are delivered afterwards."""
        self.mqtt.disconnect()
        self.mqtt.loop_stop()
        self._is_connected = False

    def on_connect(self, client, _userdata, _flags, reason_code, _properties=None) -> None:
        if getattr(reason_code, "is_failure", False):
            _LOGGER.error("dyslink: connect refused rc=%s", reason_code)
            self._connect_error = str(reason_code)
            self._connected.set()
            return
        self._is_connected = True
        topic = self.topic(TOPIC_STATUS)
        client.subscribe(topic, qos=STATUS_QOS)
        _LOGGER.info("dyslink: connected to %s; subscribed to %s", self.opts.host, topic)
        self._connected.set()

    def on_disconnect(self, _client, _userdata, _flags, reason_code, _properties=None) -> None:
        self._is_connected = False
        if getattr(reason_code, "is_failure", False):
            _LOGGER.warning("dyslink: unexpected disconnection rc=%s", reason_code)

    def on_message(self, _client, _userdata, msg) -> None:
        self.dispatcher.on_message(msg.payload, topic=msg.topic)

    def set_state(self, state: FanState) -> None:
        """Send ``state`` to the fan; unset fields keep their device value."""
        self.send_command(build_set_state(state))

    def request_current_state(self) -> None:
        """Ask the fan to publish CURRENT-STATE and sensor data."""
        self.send_command(build_request_current_state())

    def wifi_bootstrap(self, ssid: str, password: str) -> None:
        """Join a factory reset fan (reached via its access point) to ``ssid``.

        The device answers on the credentials topic with a DEVICE-CREDENTIALS
        message, which shows up on ``results``.
        """
        self._topic_user = BOOTSTRAP_USERNAME
        topic = self.topic(TOPIC_CREDENTIALS)
        result, _mid = self.mqtt.subscribe(topic, qos=STATUS_QOS)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(f"failed to subscribe to {topic}: rc={result}")
        _LOGGER.info("dyslink: bootstrapping into network %s", ssid)
        for envelope in build_bootstrap_sequence(ssid, password):
            self.send_command(envelope)

    def send_command(self, envelope: CommandEnvelope) -> None:
        """Publish ``envelope`` on the command topic and wait for the ack."""
        payload = encode_envelope(envelope)
        topic = self.topic(TOPIC_COMMAND)
        if self.opts.debug:
            _LOGGER.debug("dyslink: sending to %s: %s", topic, payload)
        info = self.mqtt.publish(topic, payload, qos=COMMAND_QOS, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(f"publish of {envelope.command} failed with code {info.rc}")
        try:
            info.wait_for_publish(self.opts.publish_timeout or None)
        except (RuntimeError, ValueError) as err:
            raise PublishError(f"publish of {envelope.command} failed: {err}") from err
        if not info.is_published():
            raise PublishError(
                f"publish of {envelope.command} not acknowledged "
                f"within {self.opts.publish_timeout}s"
            )
