"""Best-effort build number extraction from host version strings.

Official proxy builds embed a build number in their version string, but
the format differs between distributions and forks. Extraction tries an
ordered list of rules and uses the first one that yields a number:

    1. "-b<digits>"            3.4.0-SNAPSHOT-b513  -> 513
    2. "build<sep><digits>"    build-513, build 513 -> 513
    3. "#<digits>"             #513                 -> 513
    4. first run of 3+ digits  2024.0513            -> 2024

When nothing matches, development markers ("snapshot", "fork", a
"(git-<hash>)" suffix, ...) identify non-official builds, which are
exempt from build number enforcement.

Example:
    >>> extract_build_number("velocity-1.8.0-b513")
    513
    >>> extract_build_number("custom-fork-nightly") is None
    True
    >>> is_development_build("custom-fork-nightly")
    True
"""

from __future__ import annotations

import re
from typing import NamedTuple

# Host build numbers are signed 32-bit integers
MAX_BUILD_NUMBER: int = 2**31 - 1


class BuildNumberRule(NamedTuple):
    """A named extraction pattern. Group 1 captures the build number."""

    name: str
    pattern: re.Pattern[str]


BUILD_NUMBER_RULES: tuple[BuildNumberRule, ...] = (
    BuildNumberRule("suffix", re.compile(r"-b(\d+)", re.ASCII)),
    BuildNumberRule("build_keyword", re.compile(r"build[\s-](\d+)", re.ASCII)),
    BuildNumberRule("hash", re.compile(r"#(\d+)", re.ASCII)),
    BuildNumberRule("digit_run", re.compile(r"(\d{3,})", re.ASCII)),
)

DEVELOPMENT_MARKERS: tuple[str, ...] = (
    "snapshot",
    "dev",
    "git-",
    "commit-",
    "fork",
    "custom",
    "beta",
    "alpha",
    "rc",
)

_GIT_HASH_PATTERN = re.compile(r"\(git-[a-f0-9]+\)")


def _parse_build(digits: str) -> int | None:
    # Reject by length first, int() refuses very long digit strings
    if len(digits.lstrip("0")) > len(str(MAX_BUILD_NUMBER)):
        return None
    value = int(digits)
    if value > MAX_BUILD_NUMBER:
        return None
    return value


def match_build_number(version: str) -> tuple[str, int] | None:
    """Find the first rule that yields a build number.

    Args:
        version: Raw host version string.

    Returns:
        Tuple of (rule name, build number), or None if no rule matched.
    """
    for rule in BUILD_NUMBER_RULES:
        match = rule.pattern.search(version)
        if match is None:
            continue
        build = _parse_build(match.group(1))
        if build is not None:
            return rule.name, build
    return None


def extract_build_number(version: str) -> int | None:
    """Extract the build number from a host version string.

    Args:
        version: Raw host version string.

    Returns:
        The build number, or None if no rule yields one.
    """
    found = match_build_number(version)
    return found[1] if found is not None else None


def is_development_build(version: str) -> bool:
    """Check whether a version string looks like a snapshot, fork or pre-release.

    Args:
        version: Raw host version string.

    Returns:
        True if any development marker is present (case-insensitive).
    """
    lowered = version.lower()
    if any(marker in lowered for marker in DEVELOPMENT_MARKERS):
        return True
    return _GIT_HASH_PATTERN.search(lowered) is not None
