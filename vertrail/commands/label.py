"""Label command implementation for vertrail.

Prints the pre-release label of the current branch: the branch name with
every non-alphanumeric run replaced by ``-``. On master the label is
empty.
"""

from __future__ import annotations

import sys

import click

from vertrail.commands import build_resolver
from vertrail.constants import MASTER_BRANCH_NAME
from vertrail.context import VertrailContext, pass_context
from vertrail.exceptions import VertrailError
from vertrail.utils.console import print_error, print_result


@click.command()
@click.option(
    "--trim-branch-prefix",
    is_flag=True,
    help="Trim feature/ and hotfix/ prefixes from the label.",
)
@pass_context
def label(ctx: VertrailContext, trim_branch_prefix: bool) -> None:
    """Print the pre-release label of the checked-out branch."""
    try:
        resolver = build_resolver(ctx, trim_branch_prefix=trim_branch_prefix)
        value = resolver.prerelease_label()
    except VertrailError as e:
        print_error(str(e))
        sys.exit(1)

    print_result("" if value == MASTER_BRANCH_NAME else value)
