"""
tlssig: user signatures for a realtime-communication SDK.

Public entrypoints:

- ``Signer`` issues tokens (``sign`` / ``sign_at``) and rotates keys
- ``Verifier`` reverses and checks tokens locally
- ``SignerSettings`` / ``load_settings`` read credentials from ``TLSSIG_*``
"""

from __future__ import annotations

import logging as _logging

from ._version import __version__
from .core.codec import decode_token
from .core.errors import (
    ConfigurationError,
    ErrorCategory,
    TlsSigError,
    TokenDecodeError,
    TokenEncodingError,
)
from .core.settings import SignerSettings, load_settings
from .core.types import PROTOCOL_VERSION, SignRequest, TimeUnit
from .signer import Signer
from .verify import Verifier, VerifyError, VerifyReport

# Library logging stays silent unless the application configures it
_logging.getLogger("tlssig").addHandler(_logging.NullHandler())

__all__ = [
    "Signer",
    "SignRequest",
    "TimeUnit",
    "PROTOCOL_VERSION",
    "Verifier",
    "VerifyReport",
    "VerifyError",
    "SignerSettings",
    "load_settings",
    "decode_token",
    "TlsSigError",
    "ErrorCategory",
    "ConfigurationError",
    "TokenEncodingError",
    "TokenDecodeError",
    "__version__",
    "VERSION",
]

VERSION = __version__
