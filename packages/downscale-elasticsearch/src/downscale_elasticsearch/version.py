"""Version helpers for telling quorum protocol generations apart."""

import re

MODERN_QUORUM_MAJOR = 7
"""First major version using voting configurations instead of minimum_master_nodes."""

_VERSION_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(version: str) -> tuple[int, int, int] | None:
    """
    Parse "major.minor.patch" (suffixes ignored).

    Returns:
        (major, minor, patch), or None if the string is not a version.
    """
    match = _VERSION_RE.match(version.strip())
    if not match:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor or 0), int(patch or 0)


def is_legacy_quorum_version(version: str) -> bool:
    """True for versions using the minimum_master_nodes scheme (before 7.0.0)."""
    parsed = parse_version(version)
    if parsed is None:
        return False
    return parsed[0] < MODERN_QUORUM_MAJOR
