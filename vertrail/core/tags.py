"""Tag parsing and the commit → tag index.

Tags are the solid anchors of a version trail. A tag name is parsed as a
semantic version after removing one leading ``v``; anything else aborts
the resolution with :class:`~vertrail.exceptions.UnparseableTagError`
rather than being skipped.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import semver

from vertrail.exceptions import UnparseableTagError
from vertrail.models.commit import TagRef
from vertrail.utils.logger import get_logger
from vertrail.utils.version_utils import parse_version, strip_tag_prefix

logger = get_logger("core.tags")

#: Commit sha → tag name.
TagIndex = Dict[str, str]


def parse_tag(tag: str, *, sha: Optional[str] = None) -> semver.Version:
    """Parse a tag name into a version.

    Args:
        tag: Tag name such as ``v1.2.3`` or ``1.2.3-rc.1``.
        sha: Commit the tag points at, reported in the error.

    Raises:
        UnparseableTagError: The tag is not ``[v]major.minor.patch[-pre][+build]``.
    """
    try:
        return parse_version(strip_tag_prefix(tag))
    except ValueError as exc:
        raise UnparseableTagError(tag, sha=sha) from exc


def build_tag_index(tags: Iterable[TagRef]) -> TagIndex:
    """Merge lightweight and annotated tags into one index.

    Lightweight tags are applied first and annotated tags second, so an
    annotated tag wins when both kinds point at the same commit. Within a
    kind, the tag enumerated last wins.
    """
    lightweight: TagIndex = {}
    annotated: TagIndex = {}

    for tag in tags:
        target = annotated if tag.annotated else lightweight
        previous = target.get(tag.sha)
        if previous is not None and previous != tag.name:
            logger.debug(
                "Commit %s carries tags %s and %s; using %s",
                tag.sha, previous, tag.name, tag.name,
            )
        target[tag.sha] = tag.name

    index: TagIndex = dict(lightweight)
    index.update(annotated)
    logger.debug(
        "Indexed %d tag(s) (%d lightweight, %d annotated)",
        len(index), len(lightweight), len(annotated),
    )
    return index
