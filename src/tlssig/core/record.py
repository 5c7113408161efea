"""
Structured record encoding for user signatures.

The record is the JSON object carried inside the token. Keys keep their
insertion order on the wire; ``TLS.sig`` is always last.
"""

from __future__ import annotations

from typing import Any

import orjson

from .errors import TokenDecodeError, TokenEncodingError
from .types import (
    FIELD_EXPIRE,
    FIELD_IDENTIFIER,
    FIELD_SDKAPPID,
    FIELD_SIG,
    FIELD_TIME,
    FIELD_USERBUF,
    FIELD_VERSION,
)


def build_record(
    version: str,
    identifier: str,
    sdkappid: int,
    expire: int,
    issued_at: int,
    signature_b64: str,
    user_payload_b64: str | None = None,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        FIELD_VERSION: version,
        FIELD_IDENTIFIER: identifier,
        FIELD_SDKAPPID: sdkappid,
        FIELD_EXPIRE: expire,
        FIELD_TIME: issued_at,
    }
    if user_payload_b64 is not None:
        record[FIELD_USERBUF] = user_payload_b64
    record[FIELD_SIG] = signature_b64
    return record


def serialize_record(record: dict[str, Any]) -> bytes:
    """Serialize the record to compact UTF-8 JSON without reordering keys.

    Raises TokenEncodingError for values JSON cannot carry, such as
    integers outside the 64-bit range.
    """
    try:
        return orjson.dumps(record)
    except orjson.JSONEncodeError as e:
        raise TokenEncodingError("Record serialization failed", cause=e) from e


def parse_record(data: bytes) -> dict[str, Any]:
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise TokenDecodeError("Record is not valid JSON", cause=e) from e
    if not isinstance(parsed, dict):
        raise TokenDecodeError(
            f"Record must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed
