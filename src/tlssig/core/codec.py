"""
Compression and transport-safe text encoding for tokens.

The text alphabet is standard base64 with three substitutions
(``+`` -> ``*``, ``/`` -> ``-``, ``=`` -> ``_``). It is not RFC 4648
base64url: ``/`` maps to ``-`` and padding is kept as ``_``.
"""

from __future__ import annotations

import base64
import binascii
import zlib
from typing import Any

from .errors import TokenDecodeError
from .record import parse_record

COMPRESSION_LEVEL = 9

_ENCODE_TABLE = str.maketrans({"+": "*", "/": "-", "=": "_"})
_DECODE_TABLE = str.maketrans({"*": "+", "-": "/", "_": "="})


def compress(data: bytes) -> bytes:
    """zlib-wrapped DEFLATE at maximum compression."""
    return zlib.compress(data, COMPRESSION_LEVEL)


def decompress(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise TokenDecodeError("Token payload is not zlib data", cause=e) from e


def encode_text(data: bytes) -> str:
    """Padded standard base64, then substitute the reserved characters."""
    return base64.b64encode(data).decode("ascii").translate(_ENCODE_TABLE)


def decode_text(text: str) -> bytes:
    """Reverse the substitutions and strictly base64-decode."""
    try:
        return base64.b64decode(text.translate(_DECODE_TABLE), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TokenDecodeError("Token is not valid encoded text", cause=e) from e


def encode_token(record_bytes: bytes) -> str:
    return encode_text(compress(record_bytes))


def decode_token(token: str) -> dict[str, Any]:
    """Turn a token back into its structured record."""
    return parse_record(decompress(decode_text(token)))
