"""
Configuration model for signers using Pydantic v2 Settings.

Nothing in the signing pipeline reads the environment by itself; callers
opt in by instantiating ``SignerSettings`` and handing it to
``Signer.from_settings``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)

from .errors import ConfigurationError
from .types import DEFAULT_EXPIRE, TimeUnit

_U64_MAX = 2**64 - 1


class SignerSettings(BaseSettings):
    """Application credentials and token defaults."""

    sdkappid: int = Field(
        default=0,
        ge=0,
        le=_U64_MAX,
        description="Application id issued by the realtime SDK console",
    )
    secret_key: SecretStr = Field(
        default=SecretStr(""),
        description=(
            "Shared signing key, used as its literal UTF-8 bytes "
            "(hex keys are not decoded)"
        ),
    )
    time_unit: Literal["seconds", "milliseconds"] = Field(
        default="seconds",
        description="Unit for TLS.time and TLS.expire expected by the verifier",
    )
    default_expire_seconds: int = Field(
        default=int(DEFAULT_EXPIRE.total_seconds()),
        description="Expiry applied when sign() is called without one",
    )

    model_config = SettingsConfigDict(
        env_prefix="TLSSIG_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("time_unit", mode="before")
    @classmethod
    def _normalize_time_unit(cls, value: object) -> object:
        if isinstance(value, TimeUnit):
            return value.value
        if isinstance(value, str):
            value = value.strip().lower()
            return {"s": "seconds", "ms": "milliseconds"}.get(value, value)
        return value

    @property
    def unit(self) -> TimeUnit:
        return TimeUnit(self.time_unit)

    def secret_bytes(self) -> bytes:
        return self.secret_key.get_secret_value().encode("utf-8")

    def to_dict(self) -> dict[str, object]:
        """Dump settings with the secret masked."""
        from typing import cast

        return cast(
            dict[str, object],
            self.model_dump(mode="json", exclude_none=True),
        )


def load_settings(**overrides: object) -> SignerSettings:
    """Build settings from the environment plus explicit overrides.

    Validation failures surface as ConfigurationError so callers handle a
    single error family.
    """
    try:
        return SignerSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        raise ConfigurationError("Invalid signer settings", cause=e) from e
