"""Shared fixtures for the dyslink tests."""

from __future__ import annotations

from dataclasses import dataclass
import json
from types import SimpleNamespace
from typing import Any

import paho.mqtt.client as mqtt
import pytest

from dyslink.config import ClientOpts

# 2019-05-04T10:11:12.123456789Z
FIXED_NS = 1556964672123456789


@dataclass
class FakePublishInfo:
    rc: int = mqtt.MQTT_ERR_SUCCESS
    published: bool = True

    def wait_for_publish(self, timeout: float | None = None) -> None:
        return None

    def is_published(self) -> bool:
        return self.published


class FakeMQTT:
    """Records what the client asks of paho and calls back like a broker."""

    def __init__(
        self,
        *,
        refuse: bool = False,
        silent: bool = False,
        publish_rc: int = mqtt.MQTT_ERR_SUCCESS,
    ) -> None:
        self.refuse = refuse
        self.silent = silent
        self.publish_rc = publish_rc
        self.credentials: tuple[str, str] | None = None
        self.connected_to: tuple[str, int, int] | None = None
        self.subscriptions: list[tuple[str, int]] = []
        self.published: list[tuple[str, bytes, int]] = []
        self.loop_running = False
        self.disconnected = False
        self.on_connect = None
        self.on_message = None
        self.on_disconnect = None

    def username_pw_set(self, username: str, password: str) -> None:
        self.credentials = (username, password)

    def connect(self, host: str, port: int, keepalive: int) -> None:
        self.connected_to = (host, port, keepalive)

    def loop_start(self) -> None:
        self.loop_running = True
        if self.silent:
            return
        reason = SimpleNamespace(is_failure=self.refuse)
        self.on_connect(self, None, {}, reason, None)

    def loop_stop(self) -> None:
        self.loop_running = False

    def disconnect(self) -> None:
        self.disconnected = True

    def subscribe(self, topic: str, qos: int = 0) -> tuple[int, int]:
        self.subscriptions.append((topic, qos))
        return mqtt.MQTT_ERR_SUCCESS, len(self.subscriptions)

    def publish(self, topic: str, payload: bytes, qos: int = 0, retain: bool = False) -> FakePublishInfo:
        self.published.append((topic, payload, qos))
        return FakePublishInfo(rc=self.publish_rc)

    def deliver(self, topic: str, document: dict[str, Any] | bytes) -> None:
        payload = document if isinstance(document, bytes) else json.dumps(document).encode()
        self.on_message(self, None, SimpleNamespace(topic=topic, payload=payload))

    def published_documents(self) -> list[dict[str, Any]]:
        return [json.loads(payload) for _topic, payload, _qos in self.published]


@pytest.fixture
def fake_mqtt() -> FakeMQTT:
    return FakeMQTT()


@pytest.fixture
def opts() -> ClientOpts:
    return ClientOpts(
        username="NN4-CH-HEA0322B",
        password="secret",
        host="10.0.42.137",
        model="475",
        publish_timeout=1.0,
    )
