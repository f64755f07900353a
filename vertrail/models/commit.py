"""
Repository object models for vertrail.

These are the read-only values a :class:`~vertrail.repository.RepositoryReader`
hands to the version-resolution core. The core never builds or mutates
them itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CommitRef:
    """A commit as seen by the resolver.

    Attributes:
        sha: Full hexadecimal object name.
        message: Raw commit message (subject and body).
        parents: Parent shas in recorded order. Index 0 is the mainline.
    """

    sha: str
    message: str = ""
    parents: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept lists from callers while keeping the instance hashable.
        if not isinstance(self.parents, tuple):
            object.__setattr__(self, "parents", tuple(self.parents))

    @property
    def num_parents(self) -> int:
        """Number of parents (0 for a root commit, 2+ for a merge)."""
        return len(self.parents)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def mainline_parent(self) -> Optional[str]:
        """Parent index 0, or ``None`` for a root commit."""
        return self.parents[0] if self.parents else None

    @property
    def short_sha(self) -> str:
        return self.sha[:8]

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.splitlines()[0] if self.message else ""


@dataclass(frozen=True)
class TagRef:
    """A tag pointing (possibly through a tag object) at a commit.

    Attributes:
        sha: Commit the tag resolves to after peeling.
        name: Short tag name (``v1.2.3``, not ``refs/tags/v1.2.3``).
        annotated: Whether the tag is an annotated tag object.
    """

    sha: str
    name: str
    annotated: bool = False


@dataclass(frozen=True)
class HeadRef:
    """The checked-out position of the working copy.

    Attributes:
        sha: Commit HEAD points at.
        is_branch: ``False`` for a detached HEAD.
        branch_name: Short branch name when attached, else ``None``.
    """

    sha: str
    is_branch: bool = False
    branch_name: Optional[str] = None
