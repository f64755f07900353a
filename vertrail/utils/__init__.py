"""
Utility helpers for vertrail.

This package provides reusable utilities used across vertrail, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Semantic version helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from vertrail.utils.logger import (
    disable_logging,
    get_logger,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from vertrail.utils.console import (
    colorize_bump,
    print_error,
    print_result,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from vertrail.utils.version_utils import (
    is_behind,
    parse_version,
    strip_tag_prefix,
    with_prerelease,
    zero_version,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_result",
    "print_success",
    "print_warning",
    "colorize_bump",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    # Version utilities
    "is_behind",
    "parse_version",
    "strip_tag_prefix",
    "with_prerelease",
    "zero_version",
]
