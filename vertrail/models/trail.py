"""
Version trail data models for vertrail.

A :class:`VersionTrail` is the ordered record a graph walk leaves behind:
one :class:`TrailEntry` per visited commit, nearest commit first. Each
entry is one of three variants:

- **solid**: the commit carries a tag; ``version`` holds the parsed tag.
- **resolved**: ``bump`` holds the classification of the commit.
- **pending**: a merge commit on the master walk whose strength is only
  known after its side branches are reconciled.

Entries are immutable. Pending entries are replaced, never mutated, by
:meth:`VersionTrail.resolve`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Iterator, List, Mapping, Optional

import semver


class BumpKind(enum.IntEnum):
    """Effect of a commit on the version, ordered by strength."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TrailEntry:
    """One visited commit.

    Attributes:
        sha: Commit identity.
        bump: Classification, or ``None`` while pending or when solid.
        version: Parsed tag version; set only for solid entries.
    """

    sha: str
    bump: Optional[BumpKind] = None
    version: Optional[semver.Version] = None

    @classmethod
    def solid(cls, sha: str, version: semver.Version) -> "TrailEntry":
        return cls(sha=sha, version=version)

    @classmethod
    def classified(cls, sha: str, bump: BumpKind) -> "TrailEntry":
        return cls(sha=sha, bump=bump)

    @classmethod
    def pending(cls, sha: str) -> "TrailEntry":
        return cls(sha=sha)

    @property
    def is_solid(self) -> bool:
        return self.version is not None

    @property
    def is_pending(self) -> bool:
        return self.version is None and self.bump is None

    def resolved(self, bump: BumpKind) -> "TrailEntry":
        """Return a copy of a pending entry with its bump filled in.

        Raises:
            ValueError: The entry is not pending.
        """
        if not self.is_pending:
            raise ValueError(f"Trail entry {self.sha} is not pending")
        return replace(self, bump=bump)

    def describe(self) -> str:
        """Short label: ``anchor``, ``pending`` or the bump name."""
        if self.is_solid:
            return "anchor"
        if self.bump is None:
            return "pending"
        return self.bump.label


class VersionTrail:
    """Ordered trail entries, index 0 being the commit the walk started at.

    Invariants kept by :meth:`append`: at most one solid entry, and no
    entry may follow it.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[List[TrailEntry]] = None) -> None:
        self._entries: List[TrailEntry] = []
        for entry in entries or ():
            self.append(entry)

    def append(self, entry: TrailEntry) -> None:
        """Add ``entry`` after the current last entry.

        Raises:
            ValueError: The trail already ends in a solid anchor.
        """
        if self._entries and self._entries[-1].is_solid:
            raise ValueError("Cannot extend a trail past its tag anchor")
        self._entries.append(entry)

    @property
    def anchor(self) -> Optional[TrailEntry]:
        """The terminating solid entry, if the walk reached a tag."""
        if self._entries and self._entries[-1].is_solid:
            return self._entries[-1]
        return None

    def resolve(self, resolutions: Mapping[str, BumpKind]) -> "VersionTrail":
        """Return a new trail with pending entries filled from ``resolutions``.

        Pending entries without a resolution are left pending.
        """
        resolved = VersionTrail()
        for entry in self._entries:
            if entry.is_pending and entry.sha in resolutions:
                entry = entry.resolved(resolutions[entry.sha])
            resolved.append(entry)
        return resolved

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TrailEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> TrailEntry:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        kinds = ", ".join(entry.describe() for entry in self._entries)
        return f"VersionTrail([{kinds}])"
