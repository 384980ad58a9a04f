"""Password transform expected by the device's MQTT broker."""
from __future__ import annotations

import base64
import hashlib


def hash_password(plaintext: str) -> str:
    """Return the base64 encoded SHA-512 digest of ``plaintext``.

    The broker compares against this exact value: no salt, no rounds.
    """
    digest = hashlib.sha512(plaintext.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")
