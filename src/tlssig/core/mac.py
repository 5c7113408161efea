"""
Keyed MAC over the canonical message.
"""

from __future__ import annotations

import hashlib
import hmac

ALGORITHM = "HMAC-SHA256"
DIGEST_SIZE = 32


def _message_bytes(message: str | bytes) -> bytes:
    return message.encode("utf-8") if isinstance(message, str) else message


def hmac_sha256(key: bytes, message: str | bytes) -> bytes:
    """Return the 32-byte HMAC-SHA256 digest. Zero-length keys are valid."""
    return hmac.new(key, _message_bytes(message), hashlib.sha256).digest()


def verify_digest(key: bytes, message: str | bytes, digest: bytes) -> bool:
    expected = hmac_sha256(key, message)
    return hmac.compare_digest(expected, digest)
