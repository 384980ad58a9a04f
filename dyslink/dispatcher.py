"""Inbound message dispatcher for dyslink."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import queue
from typing import Any, Protocol

from .const import MessageKind
from .decoder import (
    decode_device_credentials,
    decode_environment_state,
    decode_product_state,
    decode_state_change,
)
from .envelope import CommandEnvelope, parse_document
from .errors import DecodeError

_LOGGER = logging.getLogger(__name__)


class ResultSink(Protocol):
    def put_nowait(self, item: MessageResult) -> None: ...


@dataclass(frozen=True)
class MessageResult:
    """One decoded message, or the error that stopped it from decoding."""

    kind: MessageKind
    message: Any = None
    error: Exception | None = None
    topic: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _decode_sensor_data(envelope: CommandEnvelope, document: dict[str, Any]) -> Any:
    return decode_environment_state(envelope.data)


def _decode_current_state(envelope: CommandEnvelope, document: dict[str, Any]) -> Any:
    return decode_product_state(envelope.product_state)


def _decode_credentials(envelope: CommandEnvelope, document: dict[str, Any]) -> Any:
    return decode_device_credentials(document)


def _decode_state_change(envelope: CommandEnvelope, document: dict[str, Any]) -> Any:
    return decode_state_change(envelope.product_state)


_DECODERS: dict[MessageKind, Callable[[CommandEnvelope, dict[str, Any]], Any]] = {
    MessageKind.ENVIRONMENTAL_SENSOR_DATA: _decode_sensor_data,
    MessageKind.CURRENT_STATE: _decode_current_state,
    MessageKind.DEVICE_CREDENTIALS: _decode_credentials,
    MessageKind.STATE_CHANGE: _decode_state_change,
}


class MessageDispatcher:
    """Classify device messages by tag and hand decoded results to a sink.

    Runs on the transport's delivery thread: it never blocks and never
    raises for bad input. Decode failures travel to the sink as results
    carrying an error; unknown tags are only logged and counted.
    """

    def __init__(self, sink: ResultSink | None = None, *, debug: bool = False) -> None:
        self.sink: ResultSink = sink if sink is not None else queue.Queue()
        self.debug = debug
        self._received = 0
        self._delivered = 0
        self._errors = 0
        self._unrecognized = 0
        self._dropped = 0
        self._last_unrecognized: str | None = None

    def on_message(self, raw: bytes | str, topic: str | None = None) -> None:
        """Handle one raw message from the transport."""
        self._received += 1
        if self.debug:
            _LOGGER.debug("dyslink: message on %s => %s", topic, raw)

        try:
            document = parse_document(raw)
            envelope = CommandEnvelope.from_wire(document)
        except DecodeError as err:
            _LOGGER.warning("dyslink: invalid envelope on %s: %s", topic, err)
            self._emit(MessageResult(MessageKind.UNRECOGNIZED, error=err, topic=topic))
            return

        kind = envelope.kind
        decoder = _DECODERS.get(kind)
        if decoder is None:
            self._unrecognized += 1
            self._last_unrecognized = envelope.command
            _LOGGER.warning(
                "dyslink: unknown state update on %s: %s, json=%s",
                topic,
                envelope.command,
                raw,
            )
            return

        try:
            message = decoder(envelope, document)
        except DecodeError as err:
            _LOGGER.debug("dyslink: failed to decode %s on %s: %s", kind.value, topic, err)
            self._emit(MessageResult(kind, error=err, topic=topic))
            return

        self._emit(MessageResult(kind, message=message, topic=topic))

    def _emit(self, result: MessageResult) -> None:
        if result.error is not None:
            self._errors += 1
        try:
            self.sink.put_nowait(result)
        except queue.Full:
            self._dropped += 1
            _LOGGER.warning(
                "dyslink: result sink full, dropping %s message", result.kind.value or "invalid"
            )
            return
        self._delivered += 1

    def diagnostics_snapshot(self) -> dict[str, Any]:
        """Return counters describing the traffic seen so far."""
        return {
            "received": self._received,
            "delivered": self._delivered,
            "errors": self._errors,
            "unrecognized": self._unrecognized,
            "dropped": self._dropped,
            "last_unrecognized": self._last_unrecognized,
        }
