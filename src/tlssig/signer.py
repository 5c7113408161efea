"""
User signature issuance.

A ``Signer`` owns the application id and the signing key and runs the
pipeline: canonical message -> HMAC-SHA256 -> structured record -> zlib ->
transport text.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from .core import diagnostics
from .core.canonical import b64encode_text, build_canonical_message
from .core.codec import encode_token
from .core.errors import ConfigurationError
from .core.mac import hmac_sha256
from .core.record import build_record, serialize_record
from .core.settings import SignerSettings, load_settings
from .core.types import (
    DEFAULT_EXPIRE,
    PROTOCOL_VERSION,
    SignRequest,
    TimeUnit,
    as_bytes,
    expire_in,
    timestamp_in,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_time_unit(value: TimeUnit | str) -> TimeUnit:
    try:
        return TimeUnit(value)
    except ValueError as e:
        raise ConfigurationError(f"Unknown time unit: {value!r}", cause=e) from e


class Signer:
    """Issues user signatures for one application.

    Signing may run from many threads at once. ``update_key`` swaps the key
    under a lock and every signing call reads the key exactly once, so a
    token is always authenticated with a single key.

    Empty identifiers, empty keys and zero or negative expiry are passed
    through unchanged; the resulting tokens are structurally valid.
    """

    version = PROTOCOL_VERSION

    def __init__(
        self,
        sdkappid: int,
        secret: str | bytes,
        *,
        time_unit: TimeUnit | str = TimeUnit.SECONDS,
        default_expire: timedelta | int = DEFAULT_EXPIRE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sdkappid = int(sdkappid)
        self._time_unit = resolve_time_unit(time_unit)
        self._default_expire = default_expire
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._secret = as_bytes(secret)

    @classmethod
    def from_settings(cls, settings: SignerSettings | None = None) -> Signer:
        """Create a signer from settings, loaded from the environment if omitted."""
        settings = settings or load_settings()
        return cls(
            settings.sdkappid,
            settings.secret_bytes(),
            time_unit=settings.unit,
            default_expire=settings.default_expire_seconds,
        )

    @property
    def sdkappid(self) -> int:
        return self._sdkappid

    @property
    def time_unit(self) -> TimeUnit:
        return self._time_unit

    @property
    def default_expire(self) -> timedelta | int:
        return self._default_expire

    def update_key(self, secret: str | bytes) -> None:
        """Replace the signing key for all subsequent calls.

        Tokens issued earlier stay verifiable only against the old key.
        """
        key = as_bytes(secret)
        with self._lock:
            self._secret = key
        diagnostics.debug(
            "signer",
            "signing key updated",
            sdkappid=self._sdkappid,
            key_length=len(key),
        )

    def _current_key(self) -> bytes:
        with self._lock:
            return self._secret

    def sign(
        self,
        identifier: str,
        expire: timedelta | int | None = None,
        user_payload: str | bytes | None = None,
    ) -> str:
        """Issue a token valid for ``expire`` from now.

        ``expire`` is a ``timedelta`` or a count of seconds; the signer's
        default expiry applies when it is omitted.
        """
        issued_at = self._clock()
        diagnostics.debug(
            "signer",
            "issuing signature",
            identifier=identifier,
            issued_at=issued_at.isoformat(),
        )
        return self.sign_at(identifier, issued_at, expire, user_payload)

    def sign_at(
        self,
        identifier: str,
        issued_at: datetime,
        expire: timedelta | int | None = None,
        user_payload: str | bytes | None = None,
    ) -> str:
        """Issue a token with an explicit issuance time."""
        request = SignRequest(
            identifier=identifier,
            issued_at=issued_at,
            expire=self._default_expire if expire is None else expire,
            user_payload=None if user_payload is None else as_bytes(user_payload),
        )
        return self.sign_request(request)

    def sign_request(self, request: SignRequest) -> str:
        record_bytes = serialize_record(self.build_record(request))
        diagnostics.debug(
            "signer", "record serialized", record=record_bytes.decode("utf-8")
        )
        token = encode_token(record_bytes)
        diagnostics.debug("signer", "token encoded", length=len(token))
        return token

    def build_record(self, request: SignRequest) -> dict[str, Any]:
        """Build the signed structured record for ``request``."""
        key = self._current_key()
        issued_at = timestamp_in(request.issued_at, self._time_unit)
        expire = expire_in(request.expire, self._time_unit)
        payload_b64 = (
            None
            if request.user_payload is None
            else b64encode_text(request.user_payload)
        )

        message = build_canonical_message(
            request.identifier, self._sdkappid, issued_at, expire, payload_b64
        )
        diagnostics.debug("signer", "canonical message built", canonical=message)
        digest = hmac_sha256(key, message)

        return build_record(
            self.version,
            request.identifier,
            self._sdkappid,
            expire,
            issued_at,
            b64encode_text(digest),
            payload_b64,
        )
