"""Shared pytest fixtures for proxy-compat tests.

NOTE: Do NOT add __init__.py to test directories - pytest uses importlib mode
which can cause namespace collisions with __init__.py files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

from proxy_compat.metadata import VersionThresholds
from proxy_compat.validator import CompatibilityValidator

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after tests that reconfigure logging."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def thresholds() -> VersionThresholds:
    """Provide thresholds with a 3.3.0 API, build 500 and companion 1.7.

    Returns:
        Immutable VersionThresholds for validator tests.
    """
    return VersionThresholds(
        min_api_version="3.3.0",
        min_build_number=500,
        min_companion_version="1.7",
    )


@pytest.fixture
def validator(thresholds: VersionThresholds) -> CompatibilityValidator:
    """Provide a validator built from the standard thresholds."""
    return CompatibilityValidator(thresholds)
