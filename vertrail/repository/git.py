"""
``git`` command-line implementation of :class:`RepositoryReader`.

Every query is a short ``git`` subprocess run against the repository
directory. Commit objects are read with ``git cat-file commit`` and cached
per instance, so each commit is parsed at most once even when several
walks cross it.

Typical usage::

    from vertrail.repository import GitRepository

    repo = GitRepository(".")
    head = repo.head()
    print(head.sha, head.branch_name)
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from vertrail.constants import GIT_COMMAND_TIMEOUT
from vertrail.exceptions import RepositoryAccessError
from vertrail.models.commit import CommitRef, HeadRef, TagRef
from vertrail.repository.base import RepositoryReader
from vertrail.utils.logger import get_logger

logger = get_logger("repository.git")

_TAG_FORMAT = "%(objectname) %(objecttype) %(*objectname) %(*objecttype) %(refname)"
_BRANCH_FORMAT = "%(objectname) %(refname)"

_TAGS_PREFIX = "refs/tags/"
_HEADS_PREFIX = "refs/heads/"
_REMOTES_PREFIX = "refs/remotes/"


class GitRepository(RepositoryReader):
    """Repository reader backed by the ``git`` executable.

    Args:
        path: Any directory inside the working copy (or a bare repository).
        git: Name or path of the git executable.
        timeout: Seconds allowed for a single git invocation.

    Raises:
        RepositoryAccessError: ``git`` is missing or ``path`` is not a
            repository.
    """

    def __init__(
        self,
        path: Union[str, Path] = ".",
        *,
        git: str = "git",
        timeout: int = GIT_COMMAND_TIMEOUT,
    ) -> None:
        self.path = Path(path)
        self.git = git
        self.timeout = timeout
        self._commits: Dict[str, CommitRef] = {}

        if not self.path.is_dir():
            raise RepositoryAccessError(
                f"Repository path does not exist: {self.path}",
                ref=str(self.path),
            )

        git_dir = self._run("rev-parse", "--git-dir")
        logger.debug("Opened repository %s (git dir: %s)", self.path, git_dir)

    # ------------------------------------------------------------------
    # RepositoryReader API
    # ------------------------------------------------------------------

    def head(self) -> HeadRef:
        sha = self._run("rev-parse", "--verify", "HEAD^{commit}")
        branch = self._run("symbolic-ref", "--quiet", "--short", "HEAD", allow_failure=True)
        if branch:
            return HeadRef(sha=sha, is_branch=True, branch_name=branch)
        return HeadRef(sha=sha)

    def resolve_reference(self, name: str) -> Optional[str]:
        sha = self._run(
            "rev-parse", "--verify", "--quiet", f"{name}^{{commit}}",
            allow_failure=True,
        )
        return sha or None

    def commit(self, sha: str) -> CommitRef:
        cached = self._commits.get(sha)
        if cached is not None:
            return cached

        raw = self._run("cat-file", "commit", sha, strip=False)
        commit = _parse_commit(sha, raw)
        self._commits[sha] = commit
        return commit

    def all_tags(self) -> Iterator[TagRef]:
        output = self._run("for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags")
        for line in output.splitlines():
            tag = self._parse_tag_line(line)
            if tag is not None:
                yield tag

    def all_branch_references(self) -> Iterator[Tuple[str, str]]:
        output = self._run(
            "for-each-ref", f"--format={_BRANCH_FORMAT}", "refs/heads", "refs/remotes"
        )
        remotes: List[Tuple[str, str]] = []
        for line in output.splitlines():
            sha, _, refname = line.partition(" ")
            if refname.startswith(_HEADS_PREFIX):
                yield sha, refname[len(_HEADS_PREFIX):]
            elif refname.startswith(_REMOTES_PREFIX) and not refname.endswith("/HEAD"):
                # refs/remotes/origin/feature/x -> feature/x
                _, _, branch = refname[len(_REMOTES_PREFIX):].partition("/")
                if branch:
                    remotes.append((sha, branch))
        yield from remotes

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parse_tag_line(self, line: str) -> Optional[TagRef]:
        parts = line.split(" ", 4)
        if len(parts) != 5:
            logger.debug("Ignoring unexpected for-each-ref line: %r", line)
            return None

        objectname, objecttype, peeled, peeled_type, refname = parts
        name = refname[len(_TAGS_PREFIX):] if refname.startswith(_TAGS_PREFIX) else refname

        if objecttype == "commit":
            logger.debug("Found lightweight tag %s for %s", name, objectname)
            return TagRef(sha=objectname, name=name, annotated=False)

        if objecttype != "tag":
            logger.debug("Ignoring tag %s pointing at a %s", name, objecttype)
            return None

        target = peeled if peeled_type == "commit" else self.resolve_reference(refname)
        if not target:
            logger.debug("Ignoring annotated tag %s without a commit target", name)
            return None

        logger.debug("Found annotated tag %s for %s", name, target)
        return TagRef(sha=target, name=name, annotated=True)

    def _run(self, *args: str, allow_failure: bool = False, strip: bool = True) -> str:
        """Run ``git <args>`` in the repository and return its stdout.

        With ``allow_failure`` a non-zero exit yields an empty string
        instead of an exception.
        """
        command: Sequence[str] = [self.git, "-C", str(self.path), *args]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise RepositoryAccessError(
                f"git executable not found: {self.git}",
                command=command,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise RepositoryAccessError(
                f"git command timed out after {self.timeout}s",
                command=command,
            ) from exc

        if completed.returncode != 0:
            if allow_failure:
                return ""
            raise RepositoryAccessError(
                f"git {args[0]} failed with exit code {completed.returncode}",
                command=command,
                stderr=completed.stderr,
            )

        return completed.stdout.strip() if strip else completed.stdout


def _parse_commit(sha: str, raw: str) -> CommitRef:
    """Parse ``git cat-file commit`` output into a :class:`CommitRef`.

    Headers run until the first blank line; the message follows it.
    """
    header, _, message = raw.partition("\n\n")
    parents = tuple(
        line[len("parent "):].strip()
        for line in header.splitlines()
        if line.startswith("parent ")
    )
    return CommitRef(sha=sha, message=message, parents=parents)
