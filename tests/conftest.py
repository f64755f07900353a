"""Shared fixtures: an in-memory repository for exercising the resolver."""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import pytest

from vertrail.exceptions import RepositoryAccessError
from vertrail.models.commit import CommitRef, HeadRef, TagRef
from vertrail.repository.base import RepositoryReader
from vertrail.utils import console, logger


class InMemoryRepository(RepositoryReader):
    """A commit graph held in dictionaries.

    Commits get deterministic fake shas unless one is given explicitly.
    ``commit()`` calls are counted per sha in ``reads``.
    """

    def __init__(self) -> None:
        self.commits: Dict[str, CommitRef] = {}
        self.refs: Dict[str, str] = {}
        self.tags: List[TagRef] = []
        self.reads: Dict[str, int] = {}
        self._head: Optional[HeadRef] = None

    # -- building ----------------------------------------------------------

    def add_commit(
        self,
        message: str,
        parents: Sequence[str] = (),
        *,
        sha: Optional[str] = None,
    ) -> str:
        if sha is None:
            seed = f"{len(self.commits)}:{message}:{','.join(parents)}"
            sha = hashlib.sha1(seed.encode("utf-8")).hexdigest()
        self.commits[sha] = CommitRef(sha=sha, message=message, parents=tuple(parents))
        return sha

    def chain(self, parent: Optional[str], *messages: str) -> str:
        """Commit ``messages`` in order on top of ``parent``; return the last sha."""
        sha = parent
        for message in messages:
            sha = self.add_commit(message, [sha] if sha else [])
        assert sha is not None
        return sha

    def set_branch(self, name: str, sha: str) -> None:
        self.refs[f"refs/heads/{name}"] = sha

    def set_remote_branch(self, name: str, sha: str, remote: str = "origin") -> None:
        self.refs[f"refs/remotes/{remote}/{name}"] = sha

    def tag(self, sha: str, name: str, *, annotated: bool = False) -> None:
        self.tags.append(TagRef(sha=sha, name=name, annotated=annotated))

    def checkout(self, sha: str, branch: Optional[str] = None) -> None:
        self._head = HeadRef(sha=sha, is_branch=branch is not None, branch_name=branch)

    # -- RepositoryReader --------------------------------------------------

    def head(self) -> HeadRef:
        if self._head is None:
            raise RepositoryAccessError("HEAD is not set", ref="HEAD")
        return self._head

    def resolve_reference(self, name: str) -> Optional[str]:
        return self.refs.get(name)

    def commit(self, sha: str) -> CommitRef:
        self.reads[sha] = self.reads.get(sha, 0) + 1
        try:
            return self.commits[sha]
        except KeyError:
            raise RepositoryAccessError(f"No such commit {sha}", ref=sha) from None

    def all_tags(self) -> Iterator[TagRef]:
        return iter(self.tags)

    def all_branch_references(self) -> Iterator[Tuple[str, str]]:
        local = [
            (sha, ref[len("refs/heads/"):])
            for ref, sha in self.refs.items()
            if ref.startswith("refs/heads/")
        ]
        remote = [
            (sha, ref[len("refs/remotes/"):].partition("/")[2])
            for ref, sha in self.refs.items()
            if ref.startswith("refs/remotes/")
        ]
        return iter(local + remote)


@pytest.fixture
def repo() -> InMemoryRepository:
    """Empty in-memory repository."""
    return InMemoryRepository()


@pytest.fixture(autouse=True)
def reset_output_state() -> Iterator[None]:
    """Drop cached consoles and logging setup between tests."""
    console.reconfigure_console()
    yield
    console.reconfigure_console()

    logger.disable_logging()
    logging.getLogger(logger.ROOT_LOGGER_NAME).propagate = True
