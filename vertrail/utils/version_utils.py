"""
Semantic version helpers for vertrail.

Thin wrappers around :mod:`semver` used by tag parsing, aggregation and
the branch/master comparison. Versions are ``major.minor.patch`` with an
optional pre-release label and build metadata.
"""

from __future__ import annotations

from typing import Optional

import semver

#: Prefix removed (once) from tag names before parsing.
TAG_PREFIX = "v"


def strip_tag_prefix(tag: str) -> str:
    """Remove exactly one leading, case-sensitive ``v`` from ``tag``.

    Examples:
        >>> strip_tag_prefix("v1.2.3")
        '1.2.3'
        >>> strip_tag_prefix("vv1.2.3")
        'v1.2.3'
        >>> strip_tag_prefix("V1.2.3")
        'V1.2.3'
    """
    if tag.startswith(TAG_PREFIX):
        return tag[len(TAG_PREFIX):]
    return tag


def parse_version(value: str) -> semver.Version:
    """Parse a ``major.minor.patch[-prerelease][+build]`` string.

    Raises:
        ValueError: ``value`` is not a valid semantic version.
    """
    try:
        return semver.Version.parse(value)
    except TypeError as exc:
        raise ValueError(f"{value!r} is not valid SemVer string") from exc


def zero_version() -> semver.Version:
    """Return ``0.0.0``, the base of a history without any tag."""
    return semver.Version(0, 0, 0)


def with_prerelease(version: semver.Version, label: Optional[str]) -> semver.Version:
    """Return a copy of ``version`` carrying ``label`` as its pre-release.

    An empty label removes the pre-release part.
    """
    return version.replace(prerelease=label or None)


def is_behind(version: semver.Version, reference: semver.Version) -> bool:
    """Return True if ``version`` has lower SemVer precedence than ``reference``.

    Build metadata is ignored, pre-release versions sort before the
    corresponding release (``1.2.0-x < 1.2.0``).
    """
    return version.compare(reference) < 0
