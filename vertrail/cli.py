"""
Command-line interface for vertrail.

This module provides the main CLI entry point and handles global options,
settings loading, and command registration. Running ``vertrail`` without a
command prints the version of the repository in the current directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import click

from vertrail.config import load_config
from vertrail.constants import CONFIG_ENV_VAR
from vertrail.__version__ import __version__
from vertrail.context import VertrailContext
from vertrail.exceptions import ConfigError, VertrailError
from vertrail.utils.console import print_error, print_warning, reconfigure_console
from vertrail.utils.logger import get_logger, level_for_verbosity, setup_logging

logger = get_logger("cli")


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a settings file (TOML or YAML).",
    envvar=CONFIG_ENV_VAR,
)
@click.option(
    "--path",
    "-C",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Path to the git repository.",
)
@click.option(
    "--ignore-env-vars",
    is_flag=True,
    help="Ignore CI environment variables (TRAVIS_TAG, CI_COMMIT_REF_NAME, ...).",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="VERTRAIL_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="vertrail",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    repo_path: Path,
    ignore_env_vars: bool,
    verbose: int,
    color: bool,
) -> None:
    """vertrail: semantic versions computed from git history.

    \b
    Available commands:
      vertrail version             Print the version of HEAD (default)
      vertrail label               Print the pre-release label of HEAD
      vertrail trail               Show the commits behind the version

    \b
    Examples:
      vertrail
      vertrail -C path/to/repo version --forbid-behind-master
      vertrail label --trim-branch-prefix

    Commit messages containing ``+semver: major|breaking``,
    ``+semver: minor|feature`` or ``+semver: patch|fix`` bump the
    corresponding version component.
    """
    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)

    try:
        loaded_config = load_config(config, search_dir=repo_path)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    vertrail_ctx = VertrailContext()
    vertrail_ctx.repo_path = repo_path
    vertrail_ctx.config_path = loaded_config.source_path
    vertrail_ctx.config = loaded_config
    vertrail_ctx.ignore_env_vars = ignore_env_vars
    vertrail_ctx.verbose = verbose
    vertrail_ctx.color = color
    ctx.obj = vertrail_ctx

    logger.debug("vertrail v%s", __version__)
    logger.debug("Repository: %s", repo_path)
    logger.debug("Config path: %s", vertrail_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)

    if ctx.invoked_subcommand is None:
        ctx.invoke(version)


# Register CLI subcommands
from vertrail.commands.version import version  # noqa: E402
from vertrail.commands.label import label  # noqa: E402
from vertrail.commands.trail import trail  # noqa: E402

cli.add_command(version)
cli.add_command(label)
cli.add_command(trail)


def main() -> int:
    """Main entry point for the vertrail CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.exceptions.Abort:
        print_warning("Operation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except VertrailError as exc:
        print_error(str(exc))
        logger.debug("VertrailError details: %r", exc, exc_info=True)
        return 1

    except KeyboardInterrupt:
        print_warning("Operation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
