"""Version threshold configuration models (Pydantic v2).

Thresholds are shipped with the plugin as ``metadata.yml`` and loaded once
at startup. They are immutable for the lifetime of the process.

Example:
    >>> from proxy_compat.metadata import load_thresholds
    >>> thresholds = load_thresholds()
    >>> thresholds.min_build_number
    436

    >>> thresholds = VersionThresholds(
    ...     min_api_version="3.3.0",
    ...     min_build_number=436,
    ...     min_companion_version="1.7",
    ... )
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from proxy_compat.errors import MetadataLoadError
from proxy_compat.version import Version

logger = structlog.get_logger(__name__)

BUNDLED_METADATA: str = "metadata.yml"


class VersionThresholds(BaseModel):
    """Minimum versions the host environment must satisfy.

    Attributes:
        min_api_version: Minimum host API version (e.g., "3.3.0").
        min_build_number: Minimum host build number.
        min_companion_version: Minimum companion plugin version.
        plugin_name: Name of the plugin being gated, used in messages.
        host_name: Name of the host proxy, used in messages.
        companion_name: Name of the companion plugin, used in messages.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_api_version: str = Field(
        ...,
        min_length=1,
        description="Minimum host API version",
    )
    min_build_number: int = Field(
        ...,
        ge=0,
        description="Minimum host build number",
    )
    min_companion_version: str = Field(
        ...,
        min_length=1,
        description="Minimum companion plugin version",
    )
    plugin_name: str = Field(
        default="Velocitab",
        min_length=1,
        description="Plugin disabled when checks fail",
    )
    host_name: str = Field(
        default="Velocity",
        min_length=1,
        description="Host proxy display name",
    )
    companion_name: str = Field(
        default="PAPIProxyBridge",
        min_length=1,
        description="Companion plugin display name",
    )

    @field_validator("min_api_version", "min_companion_version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        """Reject threshold strings that cannot be compared."""
        # InvalidVersionError is a ValueError, which pydantic reports as a validation error
        Version.parse(value)
        return value


def _read_metadata(path: Path | None) -> str:
    if path is None:
        return resources.files("proxy_compat").joinpath(BUNDLED_METADATA).read_text(
            encoding="utf-8"
        )
    return path.read_text(encoding="utf-8")


def load_thresholds(path: Path | None = None) -> VersionThresholds:
    """Load version thresholds from a YAML file.

    Args:
        path: Path to a metadata YAML file. None loads the bundled metadata.

    Returns:
        Validated, immutable VersionThresholds.

    Raises:
        MetadataLoadError: If the file is missing, is not valid YAML, or does
            not match the VersionThresholds schema.
    """
    log = logger.bind(source=str(path) if path is not None else BUNDLED_METADATA)

    try:
        data: Any = yaml.safe_load(_read_metadata(path))
    except FileNotFoundError as e:
        raise MetadataLoadError(path, "file not found") from e
    except OSError as e:
        raise MetadataLoadError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise MetadataLoadError(path, f"failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise MetadataLoadError(path, "expected a mapping of threshold values")

    try:
        thresholds = VersionThresholds.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MetadataLoadError(path, errors) from e

    log.debug(
        "thresholds_loaded",
        min_api_version=thresholds.min_api_version,
        min_build_number=thresholds.min_build_number,
        min_companion_version=thresholds.min_companion_version,
    )
    return thresholds
