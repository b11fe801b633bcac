"""Unit tests for CompatibilityValidator.

Tests cover:
- API version gate (ordering in both directions)
- Build number gate, including the development build exemption
- Companion plugin version gate
- The combined startup gate and its check order
- Structured log events for skipped and failed checks
"""

from __future__ import annotations

import pytest
import structlog

from proxy_compat.errors import (
    CompatibilityError,
    IncompatibleApiVersionError,
    IncompatibleBuildError,
    IncompatibleCompanionVersionError,
    InvalidVersionError,
    UnparsableBuildNumberError,
)
from proxy_compat.metadata import VersionThresholds
from proxy_compat.validator import CompatibilityValidator
from proxy_compat.version import Version

VERSION_PAIRS = [
    ("3.2.9", "3.3.0"),
    ("3.3.0", "3.3.1"),
    ("3.3", "3.10"),
    ("1.0.0", "2.0.0"),
]


def _validator(**overrides: object) -> CompatibilityValidator:
    values: dict[str, object] = {
        "min_api_version": "3.3.0",
        "min_build_number": 500,
        "min_companion_version": "1.7",
    }
    values.update(overrides)
    return CompatibilityValidator(VersionThresholds.model_validate(values))


class TestValidateApiVersion:
    """Tests for validate_api_version()."""

    @pytest.mark.parametrize(("lower", "higher"), VERSION_PAIRS)
    def test_newer_passes_older_fails(self, lower: str, higher: str) -> None:
        """Test both sides of every ordered version pair."""
        assert _validator(min_api_version=lower).validate_api_version(Version.parse(higher)) is None
        with pytest.raises(IncompatibleApiVersionError):
            _validator(min_api_version=higher).validate_api_version(Version.parse(lower))

    def test_equal_version_passes(self, validator: CompatibilityValidator) -> None:
        """Test that the minimum itself is accepted."""
        validator.validate_api_version(Version.parse("3.3.0"))
        validator.validate_api_version(Version.parse("3.3"))

    def test_metadata_does_not_matter(self, validator: CompatibilityValidator) -> None:
        """Test that a snapshot of the minimum version passes."""
        validator.validate_api_version(Version.parse("3.3.0-SNAPSHOT"))

    def test_accepts_string(self, validator: CompatibilityValidator) -> None:
        """Test that plain strings are parsed."""
        validator.validate_api_version("3.4.0")
        with pytest.raises(IncompatibleApiVersionError):
            validator.validate_api_version("3.2.0")

    def test_invalid_string_raises(self, validator: CompatibilityValidator) -> None:
        """Test that an unparsable API version is rejected."""
        with pytest.raises(InvalidVersionError):
            validator.validate_api_version("unknown")

    def test_error_message(self, validator: CompatibilityValidator) -> None:
        """Test that the message names the detected core version and minimums."""
        with pytest.raises(IncompatibleApiVersionError) as exc_info:
            validator.validate_api_version(Version.parse("3.2.0-SNAPSHOT"))

        error = exc_info.value
        assert error.detected == "3.2.0"
        assert error.required == "3.3.0"
        assert error.required_build == 500
        assert str(error) == (
            "Your Velocity API version (3.2.0) is not supported! Disabling Velocitab. "
            "Please update to at least Velocity v3.3.0 build #500 or newer."
        )

    def test_custom_names_in_message(self) -> None:
        """Test that configured display names appear in the message."""
        validator = _validator(host_name="Waterfall", plugin_name="TabList")
        with pytest.raises(IncompatibleApiVersionError, match="Your Waterfall API version"):
            validator.validate_api_version("1.0.0")


class TestValidateBuild:
    """Tests for validate_build()."""

    def test_build_above_minimum(self, validator: CompatibilityValidator) -> None:
        """Test that a newer build passes and reports its number."""
        assert validator.validate_build("velocity-1.8.0-b513") == 513

    def test_build_below_minimum(self, validator: CompatibilityValidator) -> None:
        """Test that an older build is rejected."""
        with pytest.raises(IncompatibleBuildError) as exc_info:
            validator.validate_build("velocity-1.8.0-b400")

        assert exc_info.value.detected == 400
        assert exc_info.value.required == 500
        assert "build version (#400) is not supported" in str(exc_info.value)
        assert "v3.3.0 build #500" in str(exc_info.value)

    def test_build_equal_to_minimum(self, validator: CompatibilityValidator) -> None:
        """Test that the minimum build itself is accepted."""
        assert validator.validate_build("3.4.0-b500") == 500

    @pytest.mark.parametrize("version", ["build-513", "build 513", "#513"])
    def test_alternative_formats(self, validator: CompatibilityValidator, version: str) -> None:
        """Test build keyword and hash formats."""
        assert validator.validate_build(version) == 513

    def test_accepts_parsed_version(self, validator: CompatibilityValidator) -> None:
        """Test that the string form of a Version is inspected."""
        version = Version.parse("3.4.0-SNAPSHOT (git-4f2a1c9e-b513)")
        assert validator.validate_build(version) == 513

    def test_rule_precedence(self) -> None:
        """Test that the '-b' suffix wins over a later digit run."""
        validator = _validator(min_build_number=40)
        assert validator.validate_build("1.2.0-b42 at position 999") == 42
        with pytest.raises(IncompatibleBuildError):
            _validator(min_build_number=100).validate_build("1.2.0-b42 at position 999")

    @pytest.mark.parametrize("min_build", [0, 500, 10_000_000])
    def test_development_build_exempt(self, min_build: int) -> None:
        """Test that marked builds pass regardless of the minimum."""
        assert _validator(min_build_number=min_build).validate_build("custom-fork-nightly") is None

    def test_git_hash_build_exempt(self, validator: CompatibilityValidator) -> None:
        """Test that fork builds with a git hash pass."""
        assert validator.validate_build("VelocityCTD (git-abcdef)") is None

    def test_unparsable_build(self, validator: CompatibilityValidator) -> None:
        """Test that an unmarked build without a number is rejected."""
        with pytest.raises(UnparsableBuildNumberError) as exc_info:
            validator.validate_build("totally-unversioned")

        assert exc_info.value.version == "totally-unversioned"
        assert str(exc_info.value) == (
            "No build number found for Velocity version: totally-unversioned"
        )

    def test_extracted_build_is_enforced_despite_markers(
        self, validator: CompatibilityValidator
    ) -> None:
        """Test that markers only exempt builds without a number."""
        with pytest.raises(IncompatibleBuildError):
            validator.validate_build("3.4.0-SNAPSHOT-b100")

    def test_huge_build_number_is_unparsable(self, validator: CompatibilityValidator) -> None:
        """Test that an oversized build number is rejected as unparsable."""
        with pytest.raises(UnparsableBuildNumberError):
            validator.validate_build("3.4.0-b" + "9" * 5000)

    def test_idempotent(self, validator: CompatibilityValidator) -> None:
        """Test that repeated calls produce the same outcome."""
        assert [validator.validate_build("velocity-1.8.0-b513") for _ in range(3)] == [513] * 3
        for _ in range(3):
            with pytest.raises(IncompatibleBuildError):
                validator.validate_build("velocity-1.8.0-b400")

    def test_skip_is_logged(self, thresholds: VersionThresholds) -> None:
        """Test that the development exemption emits a warning event."""
        with structlog.testing.capture_logs() as captured_logs:
            CompatibilityValidator(thresholds).validate_build("custom-fork-nightly")

        assert any(
            log.get("event") == "build_check_skipped" and log.get("log_level") == "warning"
            for log in captured_logs
        )

    def test_failure_is_logged(self, thresholds: VersionThresholds) -> None:
        """Test that a rejected build emits an error event."""
        with structlog.testing.capture_logs() as captured_logs:
            validator = CompatibilityValidator(thresholds)
            with pytest.raises(IncompatibleBuildError):
                validator.validate_build("velocity-1.8.0-b400")

        events = [log for log in captured_logs if log.get("event") == "build_incompatible"]
        assert len(events) == 1
        assert events[0]["detected"] == 400
        assert events[0]["rule"] == "suffix"


class TestValidateCompanionVersion:
    """Tests for validate_companion_version()."""

    @pytest.mark.parametrize(("lower", "higher"), VERSION_PAIRS)
    def test_newer_passes_older_fails(self, lower: str, higher: str) -> None:
        """Test both sides of every ordered version pair."""
        _validator(min_companion_version=lower).validate_companion_version(Version.parse(higher))
        with pytest.raises(IncompatibleCompanionVersionError):
            _validator(min_companion_version=higher).validate_companion_version(
                Version.parse(lower)
            )

    def test_error_message(self, validator: CompatibilityValidator) -> None:
        """Test that the message names the companion and its minimum."""
        with pytest.raises(IncompatibleCompanionVersionError) as exc_info:
            validator.validate_companion_version("1.6.2-SNAPSHOT")

        assert exc_info.value.detected == "1.6.2"
        assert str(exc_info.value) == (
            "Your PAPIProxyBridge version (1.6.2) is not supported! Disabling Velocitab. "
            "Please update to at least PAPIProxyBridge v1.7."
        )


class TestValidateEnvironment:
    """Tests for validate_environment()."""

    def test_all_checks_pass(self, validator: CompatibilityValidator) -> None:
        """Test a fully compatible environment."""
        assert validator.validate_environment("3.4.0", "3.4.0-SNAPSHOT-b513", "1.8.1") == 513

    def test_companion_optional(self, validator: CompatibilityValidator) -> None:
        """Test that the companion check is skipped when no version is given."""
        assert validator.validate_environment("3.4.0", "custom-fork-nightly") is None

    def test_api_version_checked_first(self, validator: CompatibilityValidator) -> None:
        """Test that the API check runs before the build check."""
        with pytest.raises(IncompatibleApiVersionError):
            validator.validate_environment("3.2.0", "totally-unversioned", "1.0")

    def test_build_checked_before_companion(self, validator: CompatibilityValidator) -> None:
        """Test that the build check runs before the companion check."""
        with pytest.raises(IncompatibleBuildError):
            validator.validate_environment("3.4.0", "3.4.0-b1", "1.0")

    def test_companion_failure(self, validator: CompatibilityValidator) -> None:
        """Test that an old companion plugin fails the gate."""
        with pytest.raises(IncompatibleCompanionVersionError):
            validator.validate_environment("3.4.0", "3.4.0-b513", "1.0")

    def test_all_failures_share_base_class(self, validator: CompatibilityValidator) -> None:
        """Test that callers can catch every failure with CompatibilityError."""
        for args in (
            ("3.2.0", "b513", "1.8"),
            ("3.4.0", "3.4.0-b1", "1.8"),
            ("3.4.0", "totally-unversioned", "1.8"),
            ("3.4.0", "3.4.0-b513", "1.0"),
        ):
            with pytest.raises(CompatibilityError):
                validator.validate_environment(*args)
