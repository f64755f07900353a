"""Commit-message classification for vertrail.

A commit message is tested against three regular expressions in fixed
priority order, major then minor then patch; the first one that matches
anywhere in the message decides the bump. With the default patterns::

    "(+semver: breaking) drop py2"   -> MAJOR
    "+semver:feature add --json"     -> MINOR
    "fix typo +semver: fix"          -> PATCH
    "update README"                  -> NONE
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict

from vertrail.constants import (
    DEFAULT_MAJOR_PATTERN,
    DEFAULT_MINOR_PATTERN,
    DEFAULT_PATCH_PATTERN,
)
from vertrail.exceptions import ConfigError
from vertrail.models.trail import BumpKind


def _compile(pattern: str, option: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(
            f"Invalid regular expression {pattern!r}: {exc}",
            option=option,
        ) from exc


@dataclass(frozen=True)
class ClassificationPatterns:
    """The three bump patterns, compiled on construction.

    Raises:
        ConfigError: One of the patterns is not a valid regular expression.
    """

    major: str = DEFAULT_MAJOR_PATTERN
    minor: str = DEFAULT_MINOR_PATTERN
    patch: str = DEFAULT_PATCH_PATTERN

    _compiled: Dict[BumpKind, "re.Pattern[str]"] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        compiled = {
            BumpKind.MAJOR: _compile(self.major, "major-version-bump-message"),
            BumpKind.MINOR: _compile(self.minor, "minor-version-bump-message"),
            BumpKind.PATCH: _compile(self.patch, "patch-version-bump-message"),
        }
        object.__setattr__(self, "_compiled", compiled)

    def compiled(self, kind: BumpKind) -> "re.Pattern[str]":
        return self._compiled[kind]


#: Order in which patterns are tried; first match wins.
PRIORITY = (BumpKind.MAJOR, BumpKind.MINOR, BumpKind.PATCH)


def classify(message: str, patterns: ClassificationPatterns) -> BumpKind:
    """Classify a commit message.

    Args:
        message: Full commit message.
        patterns: Compiled classification patterns.

    Returns:
        The strongest-priority matching :class:`BumpKind`, or
        ``BumpKind.NONE`` when nothing matches.
    """
    for kind in PRIORITY:
        if patterns.compiled(kind).search(message):
            return kind
    return BumpKind.NONE
