"""
Semantic version parsing and precedence.

Chart versions are parsed with the semver library, which orders them by the
semver 2.0.0 precedence rules (build metadata is ignored for ordering).
Helm also accepts a leading "v", so it is stripped before parsing.
"""

from __future__ import annotations

from semver import Version


class InvalidVersion(ValueError):
    """Raised when a string is not a valid semantic version."""
    pass


class SemVer(Version):
    """A chart version, tolerant of a leading 'v'."""

    __slots__ = ()

    @classmethod
    def parse(cls, version, optional_minor_and_patch: bool = False) -> SemVer:
        """
        Parse a version string.

        Args:
            version: Version string (e.g., "1.2.3", "v2.0.0-rc.1+build.5")
            optional_minor_and_patch: Accept "1" or "1.2" (off for chart versions)

        Returns:
            SemVer instance

        Raises:
            InvalidVersion: If version is not a semantic version
        """
        text = version.strip() if isinstance(version, str) else version
        if isinstance(text, str) and text[:1] in ("v", "V"):
            text = text[1:]
        try:
            return super().parse(text, optional_minor_and_patch)
        except (TypeError, ValueError) as e:
            raise InvalidVersion(f"Invalid semantic version: {version!r}") from e

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None


def parse_version(text: str) -> SemVer:
    """Parse `text` as a semantic version (see SemVer.parse)."""
    return SemVer.parse(text)


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two version strings by semver precedence.

    Args:
        v1: First version
        v2: Second version

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2

    Raises:
        InvalidVersion: If either string is not a semantic version
    """
    return SemVer.parse(v1).compare(SemVer.parse(v2))
