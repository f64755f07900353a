"""
Repository reader interface for vertrail.

The version-resolution core never talks to git directly. It consumes a
:class:`RepositoryReader`, which hands out immutable commits, tags and
references. :class:`vertrail.repository.git.GitRepository` implements it
with the ``git`` executable; tests use an in-memory implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from vertrail.models.commit import CommitRef, HeadRef, TagRef


class RepositoryReader(ABC):
    """Read-only access to a repository's commit graph and references."""

    @abstractmethod
    def head(self) -> HeadRef:
        """Return the commit HEAD points at and its branch, if attached.

        Raises:
            RepositoryAccessError: HEAD cannot be resolved (empty repository).
        """
        ...

    @abstractmethod
    def resolve_reference(self, name: str) -> Optional[str]:
        """Return the commit sha ``name`` points at, or ``None`` if absent.

        Args:
            name: Full reference name such as ``refs/heads/master``.
        """
        ...

    @abstractmethod
    def commit(self, sha: str) -> CommitRef:
        """Return the commit object named ``sha``.

        Raises:
            RepositoryAccessError: No such commit.
        """
        ...

    @abstractmethod
    def all_tags(self) -> Iterable[TagRef]:
        """Yield every tag that resolves to a commit."""
        ...

    @abstractmethod
    def all_branch_references(self) -> Iterable[Tuple[str, str]]:
        """Yield ``(sha, branch_name)`` for local then remote-tracking branches.

        Remote-tracking names are given without the remote
        (``refs/remotes/origin/fix/x`` → ``fix/x``).
        """
        ...
