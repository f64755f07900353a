"""Mainline graph walk producing a version trail.

The walker starts at a commit and follows parent index 0 only, recording
one :class:`~vertrail.models.trail.TrailEntry` per commit, until one of:

- the commit carries a tag (a solid entry is recorded, the walk ends),
- the commit has no parents,
- the next mainline parent is the ``stop_at`` boundary (not recorded),
- ``suppress_revisit`` is set and the commit was already visited.

Side branches are never walked as part of the trail. On the master walk a
merge commit is recorded as *pending* and queued, and
:class:`~vertrail.core.reconciler.MergeReconciler` later derives its
strength from the side branches.

The walk is a loop rather than recursion, so histories of any length
are fine.
"""

from __future__ import annotations

from typing import Dict, Optional, Set

from vertrail.core.classifier import ClassificationPatterns, classify
from vertrail.core.tags import TagIndex, parse_tag
from vertrail.models.trail import TrailEntry, VersionTrail
from vertrail.repository.base import RepositoryReader
from vertrail.utils.logger import get_logger

logger = get_logger("core.walker")

#: Merge sha → its pending trail entry.
ReconcileQueue = Dict[str, TrailEntry]


class GraphWalker:
    """Walks mainline ancestry and classifies each commit.

    Args:
        reader: Source of commit objects.
        tag_index: Commit sha → tag name.
        patterns: Message classification patterns.
    """

    def __init__(
        self,
        reader: RepositoryReader,
        tag_index: TagIndex,
        patterns: ClassificationPatterns,
    ) -> None:
        self.reader = reader
        self.tag_index = tag_index
        self.patterns = patterns

    def walk(
        self,
        head: str,
        *,
        stop_at: Optional[str] = None,
        suppress_revisit: bool = False,
        visited: Optional[Set[str]] = None,
        reconcile_queue: Optional[ReconcileQueue] = None,
    ) -> VersionTrail:
        """Walk from ``head`` towards the root along first parents.

        Args:
            head: Commit to start from; it is always the first entry.
            stop_at: Boundary commit. The walk stops before recording it.
            suppress_revisit: Stop as soon as a commit in ``visited`` is
                reached. Used by merge reconciliation sub-walks.
            visited: Shared set of visited shas, updated in place. A fresh
                set is used when omitted.
            reconcile_queue: When given, merge commits are recorded as
                pending entries and registered here instead of being
                classified by their message.

        Returns:
            The trail, nearest commit first. It is empty only when
            ``suppress_revisit`` stops the walk at ``head`` itself.

        Raises:
            UnparseableTagError: A tag on the walked path is not semver.
            RepositoryAccessError: A commit cannot be read.
        """
        trail = VersionTrail()
        if visited is None:
            visited = set()

        sha: Optional[str] = head
        while sha is not None:
            if suppress_revisit and sha in visited:
                logger.debug("Stopping at already visited commit %s", sha)
                break
            visited.add(sha)

            tag = self.tag_index.get(sha)
            if tag is not None:
                version = parse_tag(tag, sha=sha)
                logger.debug("Commit %s is tagged %s (%s)", sha, tag, version)
                trail.append(TrailEntry.solid(sha, version))
                break

            commit = self.reader.commit(sha)
            if commit.is_merge and reconcile_queue is not None:
                entry = TrailEntry.pending(sha)
                reconcile_queue[sha] = entry
                logger.debug(
                    "Commit %s merges %d parent(s); reconciling later",
                    sha, commit.num_parents - 1,
                )
            else:
                entry = TrailEntry.classified(sha, classify(commit.message, self.patterns))
                logger.debug("Commit %s classified as %s", sha, entry.describe())
            trail.append(entry)

            parent = commit.mainline_parent
            if parent is not None and parent == stop_at:
                logger.debug("Reached boundary %s", stop_at)
                break
            sha = parent

        return trail
