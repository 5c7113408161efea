"""
Local verification of user signatures.

The SDK backend is the authority that accepts or rejects tokens. This
module reverses the same pipeline so tokens can be inspected and checked
offline, in tests or while debugging an integration.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from .core import diagnostics
from .core.canonical import build_canonical_message
from .core.codec import decode_token
from .core.errors import TokenDecodeError
from .core.mac import verify_digest
from .core.settings import SignerSettings, load_settings
from .core.types import (
    FIELD_EXPIRE,
    FIELD_IDENTIFIER,
    FIELD_SDKAPPID,
    FIELD_SIG,
    FIELD_TIME,
    FIELD_USERBUF,
    FIELD_VERSION,
    PROTOCOL_VERSION,
    TimeUnit,
    as_bytes,
    timestamp_in,
)
from .signer import resolve_time_unit

REQUIRED_FIELDS = (
    FIELD_VERSION,
    FIELD_IDENTIFIER,
    FIELD_SDKAPPID,
    FIELD_EXPIRE,
    FIELD_TIME,
    FIELD_SIG,
)
_INT_FIELDS = (FIELD_SDKAPPID, FIELD_EXPIRE, FIELD_TIME)
_STR_FIELDS = (FIELD_VERSION, FIELD_IDENTIFIER, FIELD_SIG, FIELD_USERBUF)


@dataclass
class VerifyError:
    error_type: str
    message: str = ""
    expected: str | None = None
    actual: str | None = None


@dataclass
class VerifyReport:
    valid: bool
    record: dict[str, Any] = field(default_factory=dict)
    identifier: str | None = None
    sdkappid: int | None = None
    issued_at: int | None = None
    expire: int | None = None
    user_payload: bytes | None = None
    errors: list[VerifyError] = field(default_factory=list)

    @property
    def expires_at(self) -> int | None:
        """Expiry instant in the token's time unit."""
        if self.issued_at is None or self.expire is None:
            return None
        return self.issued_at + self.expire

    @property
    def error_types(self) -> list[str]:
        return [e.error_type for e in self.errors]


def _b64decode(value: str) -> bytes | None:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


def _malformed(record: dict[str, Any]) -> list[VerifyError]:
    errors: list[VerifyError] = []
    for name in _INT_FIELDS:
        value = record.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            errors.append(
                VerifyError(
                    error_type="malformed_field",
                    expected="integer",
                    actual=type(value).__name__,
                    message=f"{name} must be an integer",
                )
            )
    for name in _STR_FIELDS:
        if name in record and not isinstance(record[name], str):
            errors.append(
                VerifyError(
                    error_type="malformed_field",
                    expected="string",
                    actual=type(record[name]).__name__,
                    message=f"{name} must be a string",
                )
            )
    return errors


class Verifier:
    """Verification engine for user signatures of one application."""

    def __init__(
        self,
        sdkappid: int,
        secret: str | bytes,
        *,
        time_unit: TimeUnit | str = TimeUnit.SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sdkappid = int(sdkappid)
        self._key = as_bytes(secret)
        self._time_unit = resolve_time_unit(time_unit)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: SignerSettings | None = None) -> Verifier:
        settings = settings or load_settings()
        return cls(settings.sdkappid, settings.secret_bytes(), time_unit=settings.unit)

    def check(self, token: str, identifier: str | None = None) -> bool:
        return self.verify(token, identifier).valid

    def verify(self, token: str, identifier: str | None = None) -> VerifyReport:
        """Verify ``token``, optionally pinning the expected identifier.

        Problems are collected into the report; this never raises for a
        bad token.
        """
        report = self._verify(token, identifier)
        report.valid = not report.errors
        if report.errors:
            diagnostics.warn(
                "verifier",
                "token rejected",
                sdkappid=self._sdkappid,
                errors=report.error_types,
            )
        return report

    def _verify(self, token: str, identifier: str | None) -> VerifyReport:
        report = VerifyReport(valid=False)
        try:
            record = decode_token(token)
        except TokenDecodeError as e:
            report.errors.append(
                VerifyError(error_type="decode_error", message=str(e))
            )
            return report
        report.record = record

        missing = [name for name in REQUIRED_FIELDS if name not in record]
        if missing:
            report.errors.extend(
                VerifyError(error_type="missing_field", message=f"{name} is missing")
                for name in missing
            )
            return report

        malformed = _malformed(record)
        if malformed:
            report.errors.extend(malformed)
            return report

        report.identifier = record[FIELD_IDENTIFIER]
        report.sdkappid = record[FIELD_SDKAPPID]
        report.issued_at = record[FIELD_TIME]
        report.expire = record[FIELD_EXPIRE]

        payload_b64: str | None = record.get(FIELD_USERBUF)
        if payload_b64 is not None:
            report.user_payload = _b64decode(payload_b64)
            if report.user_payload is None:
                report.errors.append(
                    VerifyError(
                        error_type="malformed_field",
                        message=f"{FIELD_USERBUF} is not valid base64",
                    )
                )
                return report

        if record[FIELD_VERSION] != PROTOCOL_VERSION:
            report.errors.append(
                VerifyError(
                    error_type="version_mismatch",
                    expected=PROTOCOL_VERSION,
                    actual=record[FIELD_VERSION],
                    message="Unsupported token version",
                )
            )
        if report.sdkappid != self._sdkappid:
            report.errors.append(
                VerifyError(
                    error_type="sdkappid_mismatch",
                    expected=str(self._sdkappid),
                    actual=str(report.sdkappid),
                    message="Token was issued for another application",
                )
            )
        if identifier is not None and report.identifier != identifier:
            report.errors.append(
                VerifyError(
                    error_type="identifier_mismatch",
                    expected=identifier,
                    actual=report.identifier,
                    message="Token was issued for another identifier",
                )
            )

        message = build_canonical_message(
            report.identifier,
            self._sdkappid,
            report.issued_at,
            report.expire,
            payload_b64,
        )
        signature = _b64decode(record[FIELD_SIG])
        if signature is None or not verify_digest(self._key, message, signature):
            report.errors.append(
                VerifyError(
                    error_type="signature_mismatch",
                    message="Signature does not match token contents",
                )
            )

        now = timestamp_in(self._clock(), self._time_unit)
        expires_at = report.expires_at
        if expires_at is not None and now > expires_at:
            report.errors.append(
                VerifyError(
                    error_type="expired",
                    expected=f"<= {expires_at}",
                    actual=str(now),
                    message="Token has expired",
                )
            )
        return report
