"""
Error types for tlssig.

Signing itself has no recoverable error paths; the errors here cover the
few places where input can still be rejected (record serialization of
out-of-range values) and the reverse direction used by the verifier.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Broad classification used for diagnostics and reporting."""

    CONFIGURATION = "configuration"
    SERIALIZATION = "serialization"
    DECODE = "decode"


class TlsSigError(Exception):
    """Base error for all tlssig failures."""

    category: ErrorCategory = ErrorCategory.SERIALIZATION

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        self.cause = cause

    def to_dict(self) -> dict[str, str]:
        data = {
            "error.type": type(self).__name__,
            "error.category": self.category.value,
            "error.message": self.message,
        }
        if self.cause is not None:
            data["error.cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return data


class ConfigurationError(TlsSigError):
    """Signer settings could not be turned into a working signer."""

    category = ErrorCategory.CONFIGURATION


class TokenEncodingError(TlsSigError):
    """The structured record could not be serialized."""

    category = ErrorCategory.SERIALIZATION


class TokenDecodeError(TlsSigError):
    """A token could not be reversed back into its structured record."""

    category = ErrorCategory.DECODE
