"""
Root pytest configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "security: Security-critical tests (keys, signatures, verification)",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture
def tlssig_debug_logs(
    caplog: pytest.LogCaptureFixture,
) -> Generator[pytest.LogCaptureFixture, None, None]:
    """Capture DEBUG diagnostics emitted under the ``tlssig`` logger."""
    with caplog.at_level(logging.DEBUG, logger="tlssig"):
        yield caplog
