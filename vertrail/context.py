"""
Shared context object for vertrail CLI commands.

This module defines the Click context object used to share the loaded
settings and global options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import click

if TYPE_CHECKING:
    from vertrail.config import VertrailConfig


class VertrailContext:
    """Global context object for vertrail CLI commands.

    Attributes:
        repo_path: Directory of the repository being versioned.
        config_path: Settings file in use, if any.
        config: Loaded settings.
        ignore_env_vars: ``--ignore-env-vars`` was given.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
    """

    __slots__ = (
        "repo_path",
        "config_path",
        "config",
        "ignore_env_vars",
        "verbose",
        "color",
    )

    def __init__(self) -> None:
        self.repo_path: Path = Path(".")
        self.config_path: Optional[Path] = None
        self.config: Optional["VertrailConfig"] = None
        self.ignore_env_vars: bool = False
        self.verbose: int = 0
        self.color: bool = True


#: Click decorator for injecting :class:`VertrailContext` into commands.
pass_context = click.make_pass_decorator(VertrailContext, ensure=True)
