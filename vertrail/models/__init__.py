"""
Unified data model exports for vertrail.

Example:
    >>> from vertrail.models import CommitRef, TrailEntry, VersionTrail
"""

from __future__ import annotations

from vertrail.models.commit import CommitRef, HeadRef, TagRef
from vertrail.models.trail import BumpKind, TrailEntry, VersionTrail

__all__ = [
    "CommitRef",
    "HeadRef",
    "TagRef",
    "BumpKind",
    "TrailEntry",
    "VersionTrail",
]
