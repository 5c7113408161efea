"""
Canonical message construction for user signatures.

The verifier rebuilds this exact text and recomputes the MAC over it, so
field order, separators and the trailing newline are part of the wire
contract.
"""

from __future__ import annotations

import base64

from .types import (
    FIELD_EXPIRE,
    FIELD_IDENTIFIER,
    FIELD_SDKAPPID,
    FIELD_TIME,
    FIELD_USERBUF,
)


def b64encode_text(data: bytes) -> str:
    """Encode bytes using standard base64 with padding."""
    return base64.b64encode(data).decode("ascii")


def build_canonical_message(
    identifier: str,
    sdkappid: int,
    issued_at: int,
    expire: int,
    user_payload_b64: str | None = None,
) -> str:
    """
    Produce the newline-delimited text that the MAC is computed over.

    - Fixed order: identifier, sdkappid, time, expire, then userbuf
    - Every line is ``key:value`` terminated by ``\\n``
    - The userbuf line is present only when a payload was supplied
    """
    lines = [
        (FIELD_IDENTIFIER, identifier),
        (FIELD_SDKAPPID, str(int(sdkappid))),
        (FIELD_TIME, str(int(issued_at))),
        (FIELD_EXPIRE, str(int(expire))),
    ]
    if user_payload_b64 is not None:
        lines.append((FIELD_USERBUF, user_payload_b64))
    return "".join(f"{key}:{value}\n" for key, value in lines)
