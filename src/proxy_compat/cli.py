"""Command-line compatibility gate.

Runs the same checks the plugin runs at startup, so operators can verify a
proxy before deploying the plugin to it.

Example:
    $ proxy-compat check --api-version 3.4.0 --build "3.4.0-SNAPSHOT-b513"
    $ proxy-compat check --api-version 3.4.0 --build "#513" --companion-version 1.8.1
    $ PROXY_COMPAT_METADATA=metadata.yml proxy-compat check --api-version 3.4.0 --build b513
"""

from __future__ import annotations

import logging
import sys
from enum import IntEnum
from importlib.metadata import version as get_version
from pathlib import Path
from typing import TYPE_CHECKING

import click
import structlog

from proxy_compat.errors import CompatibilityError, InvalidVersionError, MetadataLoadError
from proxy_compat.metadata import load_thresholds
from proxy_compat.validator import CompatibilityValidator

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes for the proxy-compat CLI."""

    SUCCESS = 0
    """Environment is compatible."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, missing required options)."""

    FILE_NOT_FOUND = 3
    """Metadata file not found."""

    VALIDATION_ERROR = 5
    """Metadata or input validation failed."""

    INCOMPATIBLE = 9
    """Environment does not meet the minimum versions."""


def error_exit(message: str, exit_code: ExitCode = ExitCode.GENERAL_ERROR) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Args:
        message: Error message to display.
        exit_code: Exit code to use (default: GENERAL_ERROR).

    Raises:
        SystemExit: Always exits with the specified code.
    """
    click.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def _get_version() -> str:
    try:
        return get_version("proxy-compat")
    except Exception:
        return "unknown"


@click.group(
    name="proxy-compat",
    help="proxy-compat - Check a proxy environment against plugin minimum versions.",
    context_settings={
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(
    version=_get_version(),
    prog_name="proxy-compat",
    message="%(prog)s %(version)s",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """proxy-compat command group."""
    # stdout carries only the check result
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


@cli.command(
    name="check",
    help="Check host and companion versions against the configured minimums.",
    epilog="""
Exit Codes:
    0 - Environment is compatible
    3 - Metadata file not found
    5 - Invalid metadata or version input
    9 - Environment is not compatible
""",
)
@click.option("--api-version", required=True, help="Host API version (e.g., 3.4.0).")
@click.option(
    "--build",
    required=True,
    help="Host version string carrying the build number (e.g., 3.4.0-SNAPSHOT-b513).",
)
@click.option("--companion-version", default=None, help="Companion plugin version.")
@click.option(
    "--metadata",
    "metadata_path",
    type=click.Path(path_type=Path, dir_okay=False),
    envvar="PROXY_COMPAT_METADATA",
    default=None,
    help="Threshold metadata YAML (default: bundled metadata).",
)
def check(
    api_version: str,
    build: str,
    companion_version: str | None,
    metadata_path: Path | None,
) -> None:
    """Run the startup compatibility checks."""
    try:
        thresholds = load_thresholds(metadata_path)
    except MetadataLoadError as e:
        if isinstance(e.__cause__, FileNotFoundError):
            error_exit(str(e), exit_code=ExitCode.FILE_NOT_FOUND)
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)

    validator = CompatibilityValidator(thresholds)
    try:
        build_number = validator.validate_environment(api_version, build, companion_version)
    except InvalidVersionError as e:
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)
    except CompatibilityError as e:
        error_exit(str(e), exit_code=ExitCode.INCOMPATIBLE)

    if build_number is None:
        click.echo("Environment is compatible (development build, build check skipped)")
    else:
        click.echo(f"Environment is compatible (build #{build_number})")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
