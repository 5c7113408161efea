"""
Structured internal diagnostics.

Thin helpers over stdlib ``logging`` so every component logs under
``tlssig.<component>`` with its fields attached as ``extra``. Secrets are
never passed here.
"""

from __future__ import annotations

import logging
from typing import Any

_ROOT = "tlssig"


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(f"{_ROOT}.{component}")


def _emit(level: int, component: str, message: str, fields: dict[str, Any]) -> None:
    logger = get_logger(component)
    if not logger.isEnabledFor(level):
        return
    logger.log(
        level,
        message,
        extra={"tlssig_component": component, "tlssig_fields": fields},
    )


def debug(component: str, message: str, **fields: Any) -> None:
    """Emit a DEBUG diagnostic for ``component``."""
    _emit(logging.DEBUG, component, message, fields)


def warn(component: str, message: str, **fields: Any) -> None:
    """Emit a WARNING diagnostic for ``component``."""
    _emit(logging.WARNING, component, message, fields)
