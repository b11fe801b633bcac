"""proxy-compat: Startup compatibility gate for proxy server plugins.

This package provides:
- CompatibilityValidator: Host API, build number and companion version checks
- VersionThresholds: Immutable minimum-version configuration (Pydantic)
- load_thresholds: Load thresholds from YAML (bundled metadata by default)
- Version: Comparable version value with metadata
- extract_build_number, is_development_build: Build string heuristics
- Errors: CompatibilityError hierarchy

Example:
    >>> from proxy_compat import CompatibilityValidator, load_thresholds
    >>> validator = CompatibilityValidator(load_thresholds())
    >>> validator.validate_build("velocity-3.4.0-b513")
    513
"""

from __future__ import annotations

__version__ = "0.1.0"

from proxy_compat.build_number import extract_build_number, is_development_build
from proxy_compat.errors import (
    CompatibilityError,
    IncompatibleApiVersionError,
    IncompatibleBuildError,
    IncompatibleCompanionVersionError,
    InvalidVersionError,
    MetadataLoadError,
    UnparsableBuildNumberError,
)
from proxy_compat.metadata import VersionThresholds, load_thresholds
from proxy_compat.validator import CompatibilityValidator
from proxy_compat.version import Version

__all__ = [
    "__version__",
    # Validator
    "CompatibilityValidator",
    # Configuration
    "VersionThresholds",
    "load_thresholds",
    # Versions
    "Version",
    "extract_build_number",
    "is_development_build",
    # Errors
    "CompatibilityError",
    "IncompatibleApiVersionError",
    "IncompatibleBuildError",
    "IncompatibleCompanionVersionError",
    "InvalidVersionError",
    "MetadataLoadError",
    "UnparsableBuildNumberError",
]
