"""Trail command implementation for vertrail.

Explains a version by listing the commits it was computed from: the
master trail and, off master, the branch trail. Each row shows how the
commit was classified and the version reached after applying it.

Typical usage::

    $ vertrail trail
    $ vertrail trail --format json | jq '.branch_trail[].kind'
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional

import click
import semver
from rich.markup import escape

from vertrail.commands import build_resolver
from vertrail.context import VertrailContext, pass_context
from vertrail.core import Resolution
from vertrail.core.aggregator import apply_bump
from vertrail.exceptions import VertrailError
from vertrail.models import VersionTrail
from vertrail.repository import RepositoryReader
from vertrail.utils.console import (
    colorize_bump,
    print_error,
    print_result,
    print_success,
    print_table,
)
from vertrail.utils.version_utils import zero_version

_COLUMN_STYLES: Dict[str, Dict[str, Any]] = {
    "Commit": {"style": "dim", "no_wrap": True},
    "Kind": {"justify": "center"},
    "Version": {"style": "bold", "no_wrap": True},
    "Message": {"no_wrap": False},
}


@click.command()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--trim-branch-prefix",
    is_flag=True,
    help="Trim feature/ and hotfix/ prefixes from the pre-release label.",
)
@pass_context
def trail(ctx: VertrailContext, format: str, trim_branch_prefix: bool) -> None:
    """Show the commits and bumps behind the computed version."""
    try:
        resolver = build_resolver(ctx, trim_branch_prefix=trim_branch_prefix)
        resolution = resolver.resolve()
        master_rows = _rows(resolver.reader, resolution.master_trail, None, True)
        branch_rows = _rows(
            resolver.reader,
            resolution.branch_trail,
            resolution.master_version,
            False,
        )
    except VertrailError as e:
        print_error(str(e))
        sys.exit(1)

    if format == "json":
        _display_json(resolution, master_rows, branch_rows)
        return

    _display_table(resolution, master_rows, branch_rows)


def _rows(
    reader: RepositoryReader,
    trail: Optional[VersionTrail],
    base: Optional[semver.Version],
    count_unclassified: bool,
) -> List[Dict[str, str]]:
    """Replay ``trail`` oldest first and return rows nearest first."""
    if not trail:
        return []

    entries = list(trail)
    version = base if base is not None else zero_version()
    rows: List[Dict[str, str]] = []

    for entry in reversed(entries):
        commit = reader.commit(entry.sha)
        if entry.is_solid:
            version = entry.version
        elif entry.bump is not None:
            version = apply_bump(version, entry.bump, count_unclassified=count_unclassified)

        rows.append(
            {
                "Commit": commit.short_sha,
                "Kind": entry.describe(),
                "Version": str(version),
                "Message": commit.subject,
            }
        )

    rows.reverse()
    return rows


def _display_table(
    resolution: Resolution,
    master_rows: List[Dict[str, str]],
    branch_rows: List[Dict[str, str]],
) -> None:
    if resolution.source == "environment":
        print_success(f"Version {resolution.version} provided by the CI environment")
        print_result(str(resolution.version))
        return

    def _styled(rows: List[Dict[str, str]]) -> List[Dict[str, str]]:
        return [
            dict(row, Kind=colorize_bump(row["Kind"]), Message=escape(row["Message"]))
            for row in rows
        ]

    print_table(
        _styled(master_rows),
        title=f"master → {resolution.master_version}",
        caption=_caption(resolution.master_trail, None),
        column_styles=_COLUMN_STYLES,
    )
    if branch_rows:
        print_table(
            _styled(branch_rows),
            title=f"{resolution.branch or 'HEAD'} → {resolution.version}",
            caption=_caption(resolution.branch_trail, resolution.master_version),
            column_styles=_COLUMN_STYLES,
        )


def _display_json(
    resolution: Resolution,
    master_rows: List[Dict[str, str]],
    branch_rows: List[Dict[str, str]],
) -> None:
    def _lower(rows: List[Dict[str, str]]) -> List[Dict[str, str]]:
        return [{key.lower(): value for key, value in row.items()} for row in rows]

    payload = {
        "version": str(resolution.version),
        "source": resolution.source,
        "master_version": (
            str(resolution.master_version) if resolution.master_version else None
        ),
        "branch": resolution.branch,
        "master": _lower(master_rows),
        "branch_trail": _lower(branch_rows),
    }
    print_result(json.dumps(payload, indent=2))


def _caption(trail: Optional[VersionTrail], base: Optional[semver.Version]) -> str:
    anchor = trail.anchor if trail else None
    if anchor is None and base is not None:
        return f"applied on top of master {base}"
    if anchor is None:
        return "no tag reached, counted from 0.0.0"
    return f"counted from tag {anchor.version} at {anchor.sha[:8]}"
