"""
Centralized constants for vertrail.

This module defines immutable values used across vertrail, including the
default commit-message patterns, git reference names, CI environment
variables, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Commit-message classification
# ---------------------------------------------------------------------------

#: Default pattern for commits that bump the major version.
DEFAULT_MAJOR_PATTERN: Final[str] = r"\+semver:\s?(breaking|major)"

#: Default pattern for commits that bump the minor version.
DEFAULT_MINOR_PATTERN: Final[str] = r"\+semver:\s?(feature|minor)"

#: Default pattern for commits that bump the patch version.
DEFAULT_PATCH_PATTERN: Final[str] = r"\+semver:\s?(fix|patch)"

# ---------------------------------------------------------------------------
# Branch policy defaults
# ---------------------------------------------------------------------------

DEFAULT_FORBID_BEHIND_MASTER: Final[bool] = False
DEFAULT_TRIM_BRANCH_PREFIX: Final[bool] = False
DEFAULT_IGNORE_ENV_VARS: Final[bool] = False

# ---------------------------------------------------------------------------
# Git references
# ---------------------------------------------------------------------------

#: Local master branch reference.
MASTER_REF: Final[str] = "refs/heads/master"

#: Remote-tracking fallback used when the local master is absent.
MASTER_REMOTE_REF: Final[str] = "refs/remotes/origin/master"

#: Label value that denotes the mainline (printed as an empty label).
MASTER_BRANCH_NAME: Final[str] = "master"

#: Number of hex characters of the head sha used in pre-release labels.
SHORT_SHA_LENGTH: Final[int] = 4

#: Branch-name segments removed when prefix trimming is enabled.
TRIMMED_BRANCH_PREFIXES: Final[Sequence[str]] = ("feature", "hotfix")

#: Default timeout in seconds for a single git invocation.
GIT_COMMAND_TIMEOUT: Final[int] = 60

# ---------------------------------------------------------------------------
# CI environment variables (polled in order, first non-empty wins)
# ---------------------------------------------------------------------------

#: Variables carrying the tag of a tagged CI build.
CI_TAG_VARIABLES: Final[Sequence[str]] = (
    "TRAVIS_TAG",
    "CI_COMMIT_TAG",
)

#: Variables carrying the branch name of a CI build.
CI_BRANCH_VARIABLES: Final[Sequence[str]] = (
    "TRAVIS_PULL_REQUEST_BRANCH",
    "TRAVIS_BRANCH",
    "CI_COMMIT_REF_NAME",
    "GITHUB_HEAD_REF",
    "GITHUB_REF_NAME",
)

#: GitHub Actions full ref; only tag refs are used.
GITHUB_REF_VARIABLE: Final[str] = "GITHUB_REF"

# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------

#: Dedicated TOML settings file, settings under ``[vertrail]``.
CONFIG_TOML_NAME: Final[str] = "vertrail.toml"

#: YAML settings files, settings as top-level keys.
CONFIG_YAML_NAMES: Final[Sequence[str]] = (".vertrail.yaml", ".vertrail.yml")

#: Environment variable naming an explicit settings file.
CONFIG_ENV_VAR: Final[str] = "VERTRAIL_CONFIG"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
