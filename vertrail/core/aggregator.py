"""Folding a version trail into a version.

The farthest entry is the starting point: a tag version if the walk ended
on a tag, otherwise the supplied base (master's version for a branch) or
``0.0.0``. The remaining entries are then applied from oldest to newest:

========  ===========================================================
MAJOR     ``bump_major`` (minor and patch reset)
MINOR     ``bump_minor`` (patch reset)
PATCH     ``bump_patch``
NONE      ``bump_patch`` on master (``count_unclassified``), else no-op
========  ===========================================================

Every ``semver`` bump drops the pre-release and build parts, so a branch
built on ``1.3.0-rc.1`` with one fix becomes ``1.3.1``.
"""

from __future__ import annotations

from typing import Optional

import semver

from vertrail.exceptions import NoVersionDeterminableError
from vertrail.models.trail import BumpKind, TrailEntry, VersionTrail
from vertrail.utils.logger import get_logger
from vertrail.utils.version_utils import zero_version

logger = get_logger("core.aggregator")


def apply_bump(
    version: semver.Version,
    bump: BumpKind,
    *,
    count_unclassified: bool,
) -> semver.Version:
    """Return ``version`` moved by one ``bump``."""
    if bump is BumpKind.MAJOR:
        return version.bump_major()
    if bump is BumpKind.MINOR:
        return version.bump_minor()
    if bump is BumpKind.PATCH or count_unclassified:
        return version.bump_patch()
    return version


def aggregate(
    trail: VersionTrail,
    *,
    base: Optional[semver.Version] = None,
    count_unclassified: bool = True,
) -> semver.Version:
    """Compute the version at the head of ``trail``.

    Args:
        trail: Walk result, nearest commit first.
        base: Version to start from when the trail has no tag anchor.
            ``0.0.0`` when omitted.
        count_unclassified: Treat unclassified commits as patch bumps.
            ``True`` for master, ``False`` for branches.

    Raises:
        NoVersionDeterminableError: ``trail`` is empty.
        ValueError: ``trail`` still holds unreconciled merge entries.
    """
    if not trail:
        raise NoVersionDeterminableError("Cannot determine version: no commits walked")

    index = len(trail) - 1
    anchor = trail.anchor
    if anchor is not None:
        version = anchor.version
        index -= 1
    else:
        version = base if base is not None else zero_version()
    logger.debug("[%s] %s", trail[len(trail) - 1].sha, version)

    for position in range(index, -1, -1):
        entry: TrailEntry = trail[position]
        if entry.bump is None:
            raise ValueError(f"Trail entry {entry.sha} has not been reconciled")
        version = apply_bump(version, entry.bump, count_unclassified=count_unclassified)
        logger.debug("[%s] %s", entry.sha, version)

    return version
