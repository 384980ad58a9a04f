"""Exceptions raised by dyslink."""
from __future__ import annotations


class DyslinkError(Exception):
    """Base class for all dyslink errors."""


class DecodeError(DyslinkError):
    """An inbound message could not be decoded."""


class EnvelopeParseError(DecodeError):
    """The raw bytes are not a well-formed envelope."""


class PayloadShapeError(DecodeError):
    """A recognized command carried a payload of the wrong shape."""


class ConnectError(DyslinkError):
    """The broker could not be reached or refused the connection."""


class PublishError(DyslinkError):
    """The transport did not accept a command for delivery."""
