"""
Custom exception hierarchy for vertrail.

This module defines structured exception types used across vertrail.
All exceptions inherit from :class:`VertrailError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Every error is terminal for a single resolution: there is no partial
result and no automatic retry.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence


class VertrailError(Exception):
    """Base exception for all vertrail errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ConfigError(VertrailError):
    """Raised for invalid settings: bad patterns, unreadable or malformed files.

    Args:
        message: Error description.
        config_path: Settings file involved, if any.
        option: Offending option name, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class RepositoryAccessError(VertrailError):
    """Raised when the repository cannot be read.

    Covers a missing ``git`` executable, a path that is not a repository,
    and failed reference or commit lookups.

    Args:
        message: Error description.
        command: The git command line that failed, if any.
        stderr: Captured standard error, truncated for safety.
        ref: Reference or object name being looked up.
    """

    __slots__ = ("command", "stderr", "ref")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Sequence[str]] = None,
        stderr: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "ref", ref)
        if command is not None:
            details["command"] = " ".join(command)
        if stderr:
            details["stderr"] = _truncate(stderr.strip())

        super().__init__(message, details)

        self.command = list(command) if command is not None else None
        self.stderr = stderr
        self.ref = ref


class UnparseableTagError(VertrailError):
    """Raised when a tag cannot be parsed as a semantic version.

    Args:
        tag: The offending tag name.
        sha: Commit the tag points at, if known.
    """

    __slots__ = ("tag", "sha")

    def __init__(self, tag: str, *, sha: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {"tag": tag}
        _add_if(details, "commit", sha)

        super().__init__(f"Tag '{tag}' is not a semantic version", details)

        self.tag = tag
        self.sha = sha


class MasterNotFoundError(VertrailError):
    """Raised when neither the local nor the remote-tracking master exists."""

    __slots__ = ("searched",)

    def __init__(self, searched: Sequence[str]) -> None:
        super().__init__(
            "Failed to find the master branch",
            {"searched": ", ".join(searched)},
        )
        self.searched = list(searched)


class NoVersionDeterminableError(VertrailError):
    """Raised when a walk produced no trail entries."""


class BranchNotFoundError(VertrailError):
    """Raised when no branch name can be determined for the head commit."""


class BranchBehindMasterError(VertrailError):
    """Raised when a branch version is lower than master and that is forbidden.

    Args:
        branch_version: Version computed for the branch.
        master_version: Version computed for master.
    """

    __slots__ = ("branch_version", "master_version")

    def __init__(self, branch_version: str, master_version: str) -> None:
        super().__init__(
            f"Branch has calculated version '{branch_version}' whose version "
            f"is less than master '{master_version}'",
        )
        self.branch_version = branch_version
        self.master_version = master_version
