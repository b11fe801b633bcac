"""Version values for host and companion compatibility checks.

Versions are dotted numbers optionally followed by free-form metadata,
which is how proxy servers report themselves (e.g. "3.4.0-SNAPSHOT (git-4f2a-b513)").

Ordering Rules:
    - Only the numeric components are compared
    - Missing trailing components count as zero ("1.7" == "1.7.0")
    - Metadata never affects ordering

Example:
    >>> from proxy_compat.version import Version
    >>> Version.parse("3.4.0-b513") > Version.parse("3.3")
    True
    >>> Version.parse("3.4.0-b513").core
    '3.4.0'
    >>> str(Version.parse("3.4.0-b513"))
    '3.4.0-b513'
"""

from __future__ import annotations

import functools
import re

from proxy_compat.errors import InvalidVersionError

_VERSION_PATTERN = re.compile(r"^[vV]?(\d+(?:\.\d+)*)(.*)$", re.DOTALL | re.ASCII)
_METADATA_SEPARATORS = ("-", "+")


@functools.total_ordering
class Version:
    """Comparable version parsed from a string.

    Attributes:
        numbers: Numeric components, in order (major, minor, patch, ...).
        metadata: Everything after the numeric part, separator removed.
    """

    __slots__ = ("_metadata", "_numbers", "_raw")

    def __init__(
        self,
        numbers: tuple[int, ...],
        metadata: str = "",
        raw: str | None = None,
    ) -> None:
        """Initialize Version.

        Args:
            numbers: Numeric components. Must not be empty.
            metadata: Build metadata, without its leading separator.
            raw: Original string, kept so embedded build numbers survive.

        Raises:
            ValueError: If numbers is empty or contains negative values.
        """
        if not numbers or any(n < 0 for n in numbers):
            raise ValueError(f"Version components must be non-negative integers: {numbers!r}")
        self._numbers = tuple(numbers)
        self._metadata = metadata
        if raw is None:
            raw = ".".join(str(n) for n in numbers) + (f"-{metadata}" if metadata else "")
        self._raw = raw

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string.

        Args:
            value: Version string (e.g., "3.3.0", "v1.7", "3.4.0-SNAPSHOT").

        Returns:
            Parsed Version.

        Raises:
            InvalidVersionError: If the string does not start with a number.
        """
        text = value.strip()
        match = _VERSION_PATTERN.match(text)
        if not match:
            raise InvalidVersionError(value)

        try:
            numbers = tuple(int(part) for part in match.group(1).split("."))
        except ValueError as e:
            raise InvalidVersionError(value) from e
        metadata = match.group(2).strip()
        if metadata[:1] in _METADATA_SEPARATORS:
            metadata = metadata[1:].strip()
        return cls(numbers, metadata, raw=text)

    @property
    def numbers(self) -> tuple[int, ...]:
        return self._numbers

    @property
    def metadata(self) -> str:
        return self._metadata

    @property
    def core(self) -> str:
        """Dotted numeric part only, without metadata."""
        return ".".join(str(n) for n in self._numbers)

    def to_string_without_metadata(self) -> str:
        return self.core

    def _padded(self, other: Version) -> tuple[tuple[int, ...], tuple[int, ...]]:
        width = max(len(self._numbers), len(other._numbers))
        return (
            self._numbers + (0,) * (width - len(self._numbers)),
            other._numbers + (0,) * (width - len(other._numbers)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine == theirs

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine < theirs

    def __hash__(self) -> int:
        numbers = list(self._numbers)
        # Trailing zeros are insignificant, keep hash consistent with __eq__
        while len(numbers) > 1 and numbers[-1] == 0:
            numbers.pop()
        return hash(tuple(numbers))

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"Version({self._raw!r})"
