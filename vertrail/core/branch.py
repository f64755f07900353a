"""Branch-name and CI-tag discovery.

CI systems usually build a detached HEAD, so the branch (or tag) being
built is read from the environment first. Each CI variable is a named
provider; providers are polled in priority order and the first non-empty
value wins. Only when no provider answers is the commit graph consulted.

Branch names end up in SemVer pre-release labels, so they are cleansed:
every run of characters outside ``[a-zA-Z0-9]`` becomes a single ``-``,
and with prefix trimming a leading ``feature-`` or ``hotfix-`` is removed::

    feature/should-be-trimmed  -> should-be-trimmed   (trim)
    author's-branch            -> author-s-branch
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from vertrail.constants import (
    CI_BRANCH_VARIABLES,
    CI_TAG_VARIABLES,
    GITHUB_REF_VARIABLE,
    TRIMMED_BRANCH_PREFIXES,
)
from vertrail.exceptions import BranchNotFoundError
from vertrail.models.commit import HeadRef
from vertrail.repository.base import RepositoryReader
from vertrail.utils.logger import get_logger

logger = get_logger("core.branch")

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]+")
_TRIMMED_PREFIX = re.compile(
    r"^(?:%s)-" % "|".join(re.escape(prefix) for prefix in TRIMMED_BRANCH_PREFIXES)
)


@dataclass(frozen=True)
class EnvironmentProvider:
    """Reads a value from one environment variable.

    Attributes:
        variable: Environment variable name.
        prefix: When set, only values starting with ``prefix`` count and
            the prefix is removed (``refs/tags/v1.0.0`` → ``v1.0.0``).
    """

    variable: str
    prefix: Optional[str] = None

    @property
    def name(self) -> str:
        return self.variable

    def lookup(self, environ: Mapping[str, str]) -> Optional[str]:
        value = environ.get(self.variable)
        if not value:
            return None
        if self.prefix is not None:
            if not value.startswith(self.prefix):
                return None
            value = value[len(self.prefix):]
        return value or None


TAG_PROVIDERS: Tuple[EnvironmentProvider, ...] = tuple(
    EnvironmentProvider(variable) for variable in CI_TAG_VARIABLES
) + (EnvironmentProvider(GITHUB_REF_VARIABLE, prefix="refs/tags/"),)

BRANCH_PROVIDERS: Tuple[EnvironmentProvider, ...] = tuple(
    EnvironmentProvider(variable) for variable in CI_BRANCH_VARIABLES
)


def first_provided(
    providers: Sequence[EnvironmentProvider],
    environ: Mapping[str, str],
) -> Optional[Tuple[str, str]]:
    """Return ``(provider name, value)`` of the first provider with a value."""
    for provider in providers:
        value = provider.lookup(environ)
        if value:
            return provider.name, value
    return None


def cleanse_branch_name(name: str, trim_prefix: bool = False) -> str:
    """Make ``name`` safe for a SemVer pre-release label.

    Args:
        name: Raw branch name.
        trim_prefix: Remove a leading ``feature-`` / ``hotfix-`` segment.
    """
    cleansed = _NON_ALPHANUMERIC.sub("-", name)
    if trim_prefix:
        cleansed = _TRIMMED_PREFIX.sub("", cleansed)
    return cleansed


def find_branch_name(
    reader: RepositoryReader,
    head: HeadRef,
    *,
    environ: Mapping[str, str],
    providers: Sequence[EnvironmentProvider] = BRANCH_PROVIDERS,
    use_environment: bool = True,
    trim_prefix: bool = False,
) -> str:
    """Determine the cleansed branch name of ``head``.

    Order: environment providers (unless disabled), the branch HEAD is
    attached to, then any branch reference pointing at the head commit
    (local branches before remote-tracking ones).

    Raises:
        BranchNotFoundError: Nothing names the head commit.
    """
    if use_environment:
        provided = first_provided(providers, environ)
        if provided is not None:
            source, raw = provided
            logger.debug("Branch %r provided by %s", raw, source)
            return cleanse_branch_name(raw, trim_prefix)

    if head.is_branch and head.branch_name:
        logger.debug("HEAD is attached to %s", head.branch_name)
        return cleanse_branch_name(head.branch_name, trim_prefix)

    for sha, branch in reader.all_branch_references():
        if sha == head.sha:
            logger.debug("Branch %s points at detached HEAD %s", branch, head.sha)
            return cleanse_branch_name(branch, trim_prefix)

    raise BranchNotFoundError(
        "Cannot determine branch",
        {"commit": head.sha},
    )
