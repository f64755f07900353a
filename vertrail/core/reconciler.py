"""Merge-commit reconciliation.

A merge commit on master is as significant as the most significant change
it brought in, and never less than a patch. Its strength is the maximum
bump found by walking every non-mainline parent:

    MAJOR > MINOR > PATCH, defaulting to PATCH

Sub-walks share the visited set of the master walk, so a side branch stops
where it rejoins already-walked history and a commit reachable from two
merges counts towards only one of them. Merges nested inside a side
branch are classified by their own message; they are not reconciled
again.
"""

from __future__ import annotations

from typing import Dict, Optional, Set

from vertrail.core.walker import GraphWalker, ReconcileQueue
from vertrail.models.commit import CommitRef
from vertrail.models.trail import BumpKind
from vertrail.utils.logger import get_logger

logger = get_logger("core.reconciler")


class MergeReconciler:
    """Computes merge-commit bumps from their side branches.

    Args:
        walker: Walker used for the side-branch sub-walks.
    """

    def __init__(self, walker: GraphWalker) -> None:
        self.walker = walker

    def reconcile(self, merge: CommitRef, visited: Set[str]) -> Optional[BumpKind]:
        """Return the bump of ``merge``, or ``None`` if it is not a merge.

        Args:
            merge: The merge commit.
            visited: Visited set shared with the walk that queued ``merge``.
        """
        if merge.num_parents <= 1:
            return None

        strongest = BumpKind.NONE
        for parent in merge.parents[1:]:
            side = self.walker.walk(parent, suppress_revisit=True, visited=visited)
            logger.debug(
                "Side branch %s of merge %s contributed %d commit(s)",
                parent, merge.sha, len(side),
            )
            for entry in side:
                if entry.bump is not None and entry.bump > strongest:
                    strongest = entry.bump

        return max(strongest, BumpKind.PATCH)

    def reconcile_all(
        self,
        queue: ReconcileQueue,
        visited: Set[str],
    ) -> Dict[str, BumpKind]:
        """Reconcile every queued merge.

        Merges are processed oldest first (the queue is filled nearest
        first), so commits shared by several side branches are credited
        to the merge that introduced them first.

        Returns:
            Merge sha → bump, for use with :meth:`VersionTrail.resolve`.
        """
        resolutions: Dict[str, BumpKind] = {}
        for sha in reversed(list(queue)):
            bump = self.reconcile(self.walker.reader.commit(sha), visited)
            if bump is None:
                continue
            logger.debug("Merge %s reconciled as %s", sha, bump.label)
            resolutions[sha] = bump
        return resolutions
