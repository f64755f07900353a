"""Version command implementation for vertrail.

Prints the semantic version of HEAD as a single line on standard output,
suitable for capture in build scripts::

    $ vertrail version
    1.4.2

    $ git checkout -b feature/login && git commit -m "+semver: minor login"
    $ vertrail version --trim-branch-prefix
    1.5.0-login-0-3f9a
"""

from __future__ import annotations

import sys

import click

from vertrail.commands import build_resolver
from vertrail.context import VertrailContext, pass_context
from vertrail.exceptions import VertrailError
from vertrail.utils.console import print_error, print_result
from vertrail.utils.logger import get_logger

logger = get_logger("commands.version")


@click.command()
@click.option(
    "--forbid-behind-master",
    is_flag=True,
    help="Fail if the branch version is lower than master's version.",
)
@click.option(
    "--trim-branch-prefix",
    is_flag=True,
    help="Trim feature/ and hotfix/ prefixes from the pre-release label.",
)
@pass_context
def version(
    ctx: VertrailContext,
    forbid_behind_master: bool,
    trim_branch_prefix: bool,
) -> None:
    """Print the version of the checked-out commit.

    On master the version is computed from the nearest tag plus the bumps
    of every commit since. On any other branch the branch's commits are
    applied on top of master's version and a pre-release label
    ``{branch}-{commits}-{short sha}`` is added.

    Exits:
        0 on success, 1 on any resolution error.
    """
    try:
        resolver = build_resolver(
            ctx,
            forbid_behind_master=forbid_behind_master,
            trim_branch_prefix=trim_branch_prefix,
        )
        resolved = resolver.resolve_version()
    except VertrailError as e:
        print_error(str(e))
        logger.debug("Resolution failed", exc_info=True)
        sys.exit(1)

    print_result(resolved)
