"""Version resolution for a repository checkout.

:class:`Resolver` composes the rest of :mod:`vertrail.core`:

1. A tag announced by CI (``TRAVIS_TAG`` and friends) short-circuits
   everything and is returned as-is.
2. The tag index is built from every lightweight and annotated tag.
3. Master (``refs/heads/master``, else ``refs/remotes/origin/master``) is
   walked with merge reconciliation; every commit on master counts for at
   least a patch.
4. If HEAD is master, master's version is the answer.
5. Otherwise HEAD is walked back to master. Unclassified branch commits do
   not move the version, the base is master's version unless the branch
   has its own tag, and a pre-release label
   ``{branch}-{commits since base}-{short sha}`` is attached.
6. With ``forbid_behind_master`` a branch version below master's is an
   error.

Typical usage::

    from vertrail.core import Resolver
    from vertrail.repository import GitRepository

    resolver = Resolver(GitRepository("."))
    print(resolver.resolve_version())     # e.g. "1.4.0-my-feature-2-9f3c"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Set

import semver

from vertrail.constants import MASTER_REF, MASTER_REMOTE_REF, SHORT_SHA_LENGTH
from vertrail.core.aggregator import aggregate
from vertrail.core.branch import (
    BRANCH_PROVIDERS,
    TAG_PROVIDERS,
    EnvironmentProvider,
    find_branch_name,
    first_provided,
)
from vertrail.core.classifier import ClassificationPatterns
from vertrail.core.reconciler import MergeReconciler
from vertrail.core.tags import build_tag_index, parse_tag
from vertrail.core.walker import GraphWalker, ReconcileQueue
from vertrail.exceptions import BranchBehindMasterError, MasterNotFoundError
from vertrail.models.commit import HeadRef
from vertrail.models.trail import VersionTrail
from vertrail.repository.base import RepositoryReader
from vertrail.utils.logger import get_logger
from vertrail.utils.version_utils import is_behind, with_prerelease

logger = get_logger("core.resolver")


@dataclass(frozen=True)
class BranchSettings:
    """Switches controlling how branches are versioned.

    Attributes:
        forbid_behind_master: Fail when a branch version is below master.
        trim_branch_prefix: Drop ``feature-`` / ``hotfix-`` from labels.
        ignore_env_vars: Do not consult CI environment variables.
    """

    forbid_behind_master: bool = False
    trim_branch_prefix: bool = False
    ignore_env_vars: bool = False


@dataclass
class Resolution:
    """Outcome of one resolution, with the trails that produced it.

    Attributes:
        version: The published version.
        source: ``"environment"``, ``"master"`` or ``"branch"``.
        master_version: Master's version (``None`` for an environment tag).
        master_trail: Trail of the master walk, reconciled.
        branch_trail: Trail of the branch walk, when HEAD is not master.
        branch: Cleansed branch name used in the label, if any.
    """

    version: semver.Version
    source: str
    master_version: Optional[semver.Version] = None
    master_trail: Optional[VersionTrail] = None
    branch_trail: Optional[VersionTrail] = None
    branch: Optional[str] = None

    def __str__(self) -> str:
        return str(self.version)


class Resolver:
    """Computes the version of a repository's HEAD.

    Args:
        reader: Repository access.
        patterns: Commit-message patterns; defaults when omitted.
        settings: Branch policy switches.
        environ: Environment mapping; ``os.environ`` when omitted.
        tag_providers: CI tag providers in priority order.
        branch_providers: CI branch providers in priority order.
    """

    def __init__(
        self,
        reader: RepositoryReader,
        patterns: Optional[ClassificationPatterns] = None,
        settings: Optional[BranchSettings] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        tag_providers: Sequence[EnvironmentProvider] = TAG_PROVIDERS,
        branch_providers: Sequence[EnvironmentProvider] = BRANCH_PROVIDERS,
    ) -> None:
        self.reader = reader
        self.patterns = patterns or ClassificationPatterns()
        self.settings = settings or BranchSettings()
        self.environ = os.environ if environ is None else environ
        self.tag_providers = tuple(tag_providers)
        self.branch_providers = tuple(branch_providers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self) -> Resolution:
        """Run the full resolution.

        Raises:
            UnparseableTagError: A walked or CI-provided tag is not semver.
            MasterNotFoundError: No master branch exists.
            BranchNotFoundError: HEAD is off master and has no branch name.
            BranchBehindMasterError: Forbidden branch-behind-master case.
            RepositoryAccessError: The repository cannot be read.
        """
        if not self.settings.ignore_env_vars:
            provided = first_provided(self.tag_providers, self.environ)
            if provided is not None:
                source, tag = provided
                version = parse_tag(tag)
                logger.info("Version determined using %s", source)
                return Resolution(version=version, source="environment")

        tag_index = build_tag_index(self.reader.all_tags())
        walker = GraphWalker(self.reader, tag_index, self.patterns)

        master_sha = self._master_sha()
        master_trail = self._walk_master(walker, master_sha)
        master_version = aggregate(master_trail)
        logger.info("Master %s is at %s", master_sha, master_version)

        head = self.reader.head()
        if head.sha == master_sha:
            return Resolution(
                version=master_version,
                source="master",
                master_version=master_version,
                master_trail=master_trail,
            )

        branch_trail = walker.walk(head.sha, stop_at=master_sha)
        version = aggregate(branch_trail, base=master_version, count_unclassified=False)

        if len(branch_trail) == 1 and branch_trail.anchor is not None:
            # HEAD sits on its own tag: the tag is the version.
            logger.info("HEAD %s is tagged %s", head.sha, version)
            return Resolution(
                version=version,
                source="branch",
                master_version=master_version,
                master_trail=master_trail,
                branch_trail=branch_trail,
            )

        branch = self._branch_name(head)
        label = "%s-%d-%s" % (branch, len(branch_trail) - 1, head.sha[:SHORT_SHA_LENGTH])
        version = with_prerelease(version, label)
        logger.info("Branch %s is at %s", branch, version)

        if self.settings.forbid_behind_master and is_behind(version, master_version):
            raise BranchBehindMasterError(str(version), str(master_version))

        return Resolution(
            version=version,
            source="branch",
            master_version=master_version,
            master_trail=master_trail,
            branch_trail=branch_trail,
            branch=branch,
        )

    def resolve_version(self) -> str:
        """Return the version string, ``major.minor.patch[-prerelease]``."""
        return str(self.resolve().version)

    def prerelease_label(self) -> str:
        """Return the cleansed branch name of HEAD.

        ``master`` is returned as-is; callers decide how to present it.
        """
        return self._branch_name(self.reader.head())

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _master_sha(self) -> str:
        for ref in (MASTER_REF, MASTER_REMOTE_REF):
            sha = self.reader.resolve_reference(ref)
            if sha:
                logger.debug("Using %s at %s as master", ref, sha)
                return sha
        raise MasterNotFoundError((MASTER_REF, MASTER_REMOTE_REF))

    def _walk_master(self, walker: GraphWalker, master_sha: str) -> VersionTrail:
        visited: Set[str] = set()
        queue: ReconcileQueue = {}
        trail = walker.walk(master_sha, visited=visited, reconcile_queue=queue)

        if queue:
            reconciler = MergeReconciler(walker)
            trail = trail.resolve(reconciler.reconcile_all(queue, visited))
        return trail

    def _branch_name(self, head: HeadRef) -> str:
        return find_branch_name(
            self.reader,
            head,
            environ=self.environ,
            providers=self.branch_providers,
            use_environment=not self.settings.ignore_env_vars,
            trim_prefix=self.settings.trim_branch_prefix,
        )
