"""Compatibility exception hierarchy for proxy-compat.

This module defines all custom exceptions raised by the compatibility gate.
All startup failures inherit from CompatibilityError, so a plugin bootstrap
can abort initialization with a single except clause.

Exception Hierarchy:
    CompatibilityError (base)
    ├── IncompatibleApiVersionError       # Host API older than minimum
    ├── IncompatibleBuildError            # Host build below minimum
    ├── UnparsableBuildNumberError        # No build number, no dev marker
    ├── IncompatibleCompanionVersionError # Companion plugin too old
    └── MetadataLoadError                 # Thresholds could not be loaded

    InvalidVersionError (ValueError)      # String is not a version

Example:
    >>> from proxy_compat.errors import IncompatibleBuildError
    >>> raise IncompatibleBuildError(400, 500, "3.3.0")
    Traceback (most recent call last):
        ...
    IncompatibleBuildError: Your Velocity build version (#400) is not supported! ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class CompatibilityError(Exception):
    """Base exception for all compatibility gate failures.

    Example:
        >>> try:
        ...     validator.validate_environment(api, build, companion)
        ... except CompatibilityError as e:
        ...     print(f"Startup aborted: {e}")
    """

    pass


class InvalidVersionError(ValueError):
    """Raised when a string cannot be parsed as a version.

    Attributes:
        value: The string that failed to parse.
    """

    def __init__(self, value: str) -> None:
        """Initialize InvalidVersionError.

        Args:
            value: The string that failed to parse.
        """
        self.value = value
        super().__init__(
            f"Invalid version format: {value!r}. Expected dotted numbers (e.g., '3.3.0')."
        )


class IncompatibleApiVersionError(CompatibilityError):
    """Raised when the host API version is older than the required minimum.

    Attributes:
        detected: Host API version, rendered without metadata.
        required: Minimum supported API version.
        required_build: Minimum supported build number.

    Example:
        >>> raise IncompatibleApiVersionError("3.2.0", "3.3.0", 436)
        Traceback (most recent call last):
            ...
        IncompatibleApiVersionError: Your Velocity API version (3.2.0) is not supported! ...
    """

    def __init__(
        self,
        detected: str,
        required: str,
        required_build: int,
        *,
        host_name: str = "Velocity",
        plugin_name: str = "Velocitab",
    ) -> None:
        """Initialize IncompatibleApiVersionError.

        Args:
            detected: Host API version, rendered without metadata.
            required: Minimum supported API version.
            required_build: Minimum supported build number.
            host_name: Display name of the host proxy.
            plugin_name: Display name of the plugin being disabled.
        """
        self.detected = detected
        self.required = required
        self.required_build = required_build
        super().__init__(
            f"Your {host_name} API version ({detected}) is not supported! "
            f"Disabling {plugin_name}. Please update to at least {host_name} "
            f"v{required} build #{required_build} or newer."
        )


class IncompatibleBuildError(CompatibilityError):
    """Raised when the extracted host build number is below the minimum.

    Attributes:
        detected: Build number extracted from the host version string.
        required: Minimum supported build number.
        api_version: Minimum supported API version, for the upgrade hint.
    """

    def __init__(
        self,
        detected: int,
        required: int,
        api_version: str,
        *,
        host_name: str = "Velocity",
        plugin_name: str = "Velocitab",
    ) -> None:
        """Initialize IncompatibleBuildError.

        Args:
            detected: Build number extracted from the host version string.
            required: Minimum supported build number.
            api_version: Minimum supported API version.
            host_name: Display name of the host proxy.
            plugin_name: Display name of the plugin being disabled.
        """
        self.detected = detected
        self.required = required
        self.api_version = api_version
        super().__init__(
            f"Your {host_name} build version (#{detected}) is not supported! "
            f"Disabling {plugin_name}. Please update to at least {host_name} "
            f"v{api_version} build #{required} or newer."
        )


class UnparsableBuildNumberError(CompatibilityError):
    """Raised when no build number can be found and no dev marker is present.

    Attributes:
        version: The raw host version string that was inspected.
    """

    def __init__(self, version: str, *, host_name: str = "Velocity") -> None:
        """Initialize UnparsableBuildNumberError.

        Args:
            version: The raw host version string that was inspected.
            host_name: Display name of the host proxy.
        """
        self.version = version
        super().__init__(f"No build number found for {host_name} version: {version}")


class IncompatibleCompanionVersionError(CompatibilityError):
    """Raised when the companion plugin is older than the required minimum.

    Attributes:
        detected: Companion version, rendered without metadata.
        required: Minimum supported companion version.
    """

    def __init__(
        self,
        detected: str,
        required: str,
        *,
        companion_name: str = "PAPIProxyBridge",
        plugin_name: str = "Velocitab",
    ) -> None:
        """Initialize IncompatibleCompanionVersionError.

        Args:
            detected: Companion version, rendered without metadata.
            required: Minimum supported companion version.
            companion_name: Display name of the companion plugin.
            plugin_name: Display name of the plugin being disabled.
        """
        self.detected = detected
        self.required = required
        super().__init__(
            f"Your {companion_name} version ({detected}) is not supported! "
            f"Disabling {plugin_name}. Please update to at least "
            f"{companion_name} v{required}."
        )


class MetadataLoadError(CompatibilityError):
    """Raised when version thresholds cannot be loaded or validated.

    Attributes:
        source: Path of the metadata file, or None for bundled metadata.
        reason: Human-readable failure description.
    """

    def __init__(self, source: Path | None, reason: str) -> None:
        """Initialize MetadataLoadError.

        Args:
            source: Path of the metadata file, or None for bundled metadata.
            reason: Human-readable failure description.
        """
        self.source = source
        self.reason = reason
        where = str(source) if source is not None else "bundled metadata"
        super().__init__(f"Failed to load version thresholds from {where}: {reason}")
