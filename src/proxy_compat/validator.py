"""Startup compatibility gate for the host proxy environment.

This module provides the CompatibilityValidator class that checks the host
API version, the host build number and the companion plugin version against
configured minimums before the plugin activates.

Each check either returns or raises a CompatibilityError subclass. Callers
are expected to abort initialization on failure and surface the message to
the operator.

Example:
    >>> from proxy_compat.metadata import load_thresholds
    >>> from proxy_compat.validator import CompatibilityValidator
    >>> validator = CompatibilityValidator(load_thresholds())
    >>> validator.validate_environment(
    ...     api_version="3.4.0-SNAPSHOT",
    ...     build="3.4.0-SNAPSHOT (git-4f2a1c9e-b513)",
    ...     companion_version="1.8.1",
    ... )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from proxy_compat.build_number import is_development_build, match_build_number
from proxy_compat.errors import (
    IncompatibleApiVersionError,
    IncompatibleBuildError,
    IncompatibleCompanionVersionError,
    UnparsableBuildNumberError,
)
from proxy_compat.version import Version

if TYPE_CHECKING:
    from proxy_compat.metadata import VersionThresholds

logger = structlog.get_logger(__name__)


def _as_version(version: Version | str) -> Version:
    if isinstance(version, Version):
        return version
    return Version.parse(version)


class CompatibilityValidator:
    """Validator for host and companion plugin compatibility.

    Thresholds are parsed once at construction and never change, so a
    single instance can be shared between threads.

    Attributes:
        thresholds: The configured minimum versions.
        _log: Structured logger for this validator instance.

    Example:
        >>> validator = CompatibilityValidator(thresholds)
        >>> validator.validate_api_version(Version.parse("3.4.0"))
        >>> validator.validate_build("3.4.0-SNAPSHOT-b513")
        513
    """

    def __init__(self, thresholds: VersionThresholds) -> None:
        """Initialize CompatibilityValidator.

        Args:
            thresholds: Minimum versions the environment must satisfy.
        """
        self.thresholds = thresholds
        self._min_api_version = Version.parse(thresholds.min_api_version)
        self._min_companion_version = Version.parse(thresholds.min_companion_version)
        self._log = logger.bind(component="CompatibilityValidator")

    def validate_api_version(self, version: Version | str) -> None:
        """Check that the host API version meets the minimum.

        Args:
            version: Host API version.

        Raises:
            IncompatibleApiVersionError: If the version is below the minimum.
            InvalidVersionError: If a string version cannot be parsed.
        """
        version = _as_version(version)
        if version < self._min_api_version:
            self._log.error(
                "api_version_incompatible",
                detected=version.core,
                required=self.thresholds.min_api_version,
            )
            raise IncompatibleApiVersionError(
                version.core,
                self.thresholds.min_api_version,
                self.thresholds.min_build_number,
                host_name=self.thresholds.host_name,
                plugin_name=self.thresholds.plugin_name,
            )
        self._log.debug("api_version_compatible", detected=version.core)

    def validate_build(self, version: Version | str) -> int | None:
        """Check that the host build number meets the minimum.

        The build number is extracted from the string form of the version.
        Builds without an extractable number pass only when they carry a
        development marker (snapshot, fork, pre-release, git hash).

        Args:
            version: Host version or raw build descriptor.

        Returns:
            The extracted build number, or None if the build was exempted
            as a development build.

        Raises:
            IncompatibleBuildError: If the build number is below the minimum.
            UnparsableBuildNumberError: If no build number was found and the
                version has no development marker.
        """
        raw = str(version)
        found = match_build_number(raw)

        if found is None:
            if is_development_build(raw):
                self._log.warning("build_check_skipped", version=raw, reason="development_build")
                return None
            self._log.error("build_number_unparsable", version=raw)
            raise UnparsableBuildNumberError(raw, host_name=self.thresholds.host_name)

        rule, build = found
        if build < self.thresholds.min_build_number:
            self._log.error(
                "build_incompatible",
                detected=build,
                required=self.thresholds.min_build_number,
                rule=rule,
            )
            raise IncompatibleBuildError(
                build,
                self.thresholds.min_build_number,
                self.thresholds.min_api_version,
                host_name=self.thresholds.host_name,
                plugin_name=self.thresholds.plugin_name,
            )

        self._log.debug("build_compatible", detected=build, rule=rule)
        return build

    def validate_companion_version(self, version: Version | str) -> None:
        """Check that the companion plugin version meets the minimum.

        Args:
            version: Companion plugin version.

        Raises:
            IncompatibleCompanionVersionError: If the version is below the minimum.
            InvalidVersionError: If a string version cannot be parsed.
        """
        version = _as_version(version)
        if version < self._min_companion_version:
            self._log.error(
                "companion_version_incompatible",
                detected=version.core,
                required=self.thresholds.min_companion_version,
            )
            raise IncompatibleCompanionVersionError(
                version.core,
                self.thresholds.min_companion_version,
                companion_name=self.thresholds.companion_name,
                plugin_name=self.thresholds.plugin_name,
            )
        self._log.debug("companion_version_compatible", detected=version.core)

    def validate_environment(
        self,
        api_version: Version | str,
        build: Version | str,
        companion_version: Version | str | None = None,
    ) -> int | None:
        """Run all startup checks in order, stopping at the first failure.

        Args:
            api_version: Host API version.
            build: Host version string carrying the build number.
            companion_version: Companion plugin version, or None to skip.

        Returns:
            The extracted build number, or None for exempted development builds.

        Raises:
            CompatibilityError: The first failing check's error.
        """
        self.validate_api_version(api_version)
        build_number = self.validate_build(build)
        if companion_version is not None:
            self.validate_companion_version(companion_version)
        self._log.info("environment_compatible", build=build_number)
        return build_number
