"""
vertrail: semantic versions derived from git history

vertrail computes the version of the current checkout of a git repository
from its commits, tags and commit-message annotations. No version file is
kept in the repository.

Features include:
    • Tag anchors (lightweight and annotated, optional leading ``v``)
    • ``+semver: major|minor|patch`` commit-message bumps
    • Merge commits weighted by the changes they bring in
    • Pre-release labels for feature branches
    • CI integration (Travis, GitLab, GitHub Actions)
"""

from __future__ import annotations

from vertrail.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "vertrail Contributors"
__license__ = "Apache-2.0"
__description__ = "Semantic versions computed from git commit history."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from vertrail.core import Resolver
from vertrail.repository import GitRepository

__all__ = [
    "__version__",
    "Resolver",
    "GitRepository",
]
