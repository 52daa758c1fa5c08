"""Semantic version handling for module upgrades.

Versions recorded by tenants and versions embedded in template
descriptors are compared here following semantic versioning precedence:
pre-releases sort below their release and build metadata is ignored.
A leading ``v`` and missing minor or patch components are accepted.
"""

from __future__ import annotations

from semver import Version


class VersionParseError(ValueError):
    """Raised when a version string cannot be interpreted."""

    def __init__(self, raw: str, reason: str):
        super().__init__(f"invalid version {raw!r}: {reason}")
        self.raw = raw


def parse_version(raw: str) -> Version:
    """Parse a module version such as ``1.2.3``, ``v1.2`` or ``1.0.0-rc.1+build.5``.

    Raises:
        VersionParseError: If the string is empty or not a valid version
    """
    value = (raw or "").strip()
    if not value:
        raise VersionParseError(raw, "empty version")
    if value[0] in "vV":
        value = value[1:]
    try:
        return Version.parse(value, optional_minor_and_patch=True)
    except ValueError as e:
        raise VersionParseError(raw, str(e)) from e


def is_valid_version_change(new: Version, previous: Version) -> bool:
    """A version change is valid unless it moves to a strictly lower version."""
    return new.compare(previous) >= 0
