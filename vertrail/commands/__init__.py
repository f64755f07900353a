"""
CLI command implementations for vertrail.

Each command builds a :class:`~vertrail.core.Resolver` from the shared
:class:`~vertrail.context.VertrailContext` with :func:`build_resolver`.
"""

from __future__ import annotations

from vertrail.config import VertrailConfig
from vertrail.context import VertrailContext
from vertrail.core import Resolver
from vertrail.repository import GitRepository
from vertrail.utils.logger import get_logger

logger = get_logger("commands")


def build_resolver(
    ctx: VertrailContext,
    *,
    forbid_behind_master: bool = False,
    trim_branch_prefix: bool = False,
) -> Resolver:
    """Open the repository and combine settings file and CLI flags.

    Raises:
        RepositoryAccessError: The path is not a git repository.
        ConfigError: The configured patterns do not compile.
    """
    config = ctx.config or VertrailConfig()
    settings = config.branch_settings(
        forbid_behind_master=forbid_behind_master,
        trim_branch_prefix=trim_branch_prefix,
        ignore_env_vars=ctx.ignore_env_vars,
    )
    logger.debug("Branch settings: %s", settings)

    return Resolver(
        GitRepository(ctx.repo_path),
        config.patterns(),
        settings,
    )
