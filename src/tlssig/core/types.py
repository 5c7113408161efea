"""
Shared types and protocol constants for user signatures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

PROTOCOL_VERSION = "2.0"

FIELD_VERSION = "TLS.ver"
FIELD_IDENTIFIER = "TLS.identifier"
FIELD_SDKAPPID = "TLS.sdkappid"
FIELD_EXPIRE = "TLS.expire"
FIELD_TIME = "TLS.time"
FIELD_USERBUF = "TLS.userbuf"
FIELD_SIG = "TLS.sig"

DEFAULT_EXPIRE = timedelta(days=180)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROS_PER_SECOND = 1_000_000


class TimeUnit(str, Enum):
    """Unit used for ``TLS.time`` and ``TLS.expire`` on the wire."""

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    @property
    def micros(self) -> int:
        return _MICROS_PER_SECOND if self is TimeUnit.SECONDS else 1_000


def _truncate_div(value: int, divisor: int) -> int:
    # Python floors toward -inf; the wire contract truncates toward zero.
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def to_unit(delta: timedelta, unit: TimeUnit) -> int:
    """Whole number of ``unit`` in ``delta``, truncated toward zero."""
    micros = (delta.days * 86_400 + delta.seconds) * _MICROS_PER_SECOND
    micros += delta.microseconds
    return _truncate_div(micros, unit.micros)


def timestamp_in(dt: datetime, unit: TimeUnit) -> int:
    """Epoch offset of ``dt`` in ``unit``. Naive datetimes are read as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return to_unit(dt - _EPOCH, unit)


def expire_in(expire: timedelta | int, unit: TimeUnit) -> int:
    """Expiry as a count of ``unit``. Plain integers are seconds."""
    if isinstance(expire, timedelta):
        return to_unit(expire, unit)
    return int(expire) * (_MICROS_PER_SECOND // unit.micros)


def as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass(frozen=True)
class SignRequest:
    """Inputs for a single signing call."""

    identifier: str
    issued_at: datetime
    expire: timedelta | int
    user_payload: bytes | None = None
