"""
Console output utilities for vertrail using Rich.

Results go to standard output: the computed version or label as a single
line, so that ``VERSION=$(vertrail)`` works in build scripts, and the
``trail`` report. Status and error messages go to standard error.

For diagnostic or debug output, use :mod:`vertrail.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

VERTRAIL_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "major": "bold red",
        "minor": "yellow",
        "patch": "green",
        "anchor": "bold magenta",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_out_console: Optional[Console] = None
_err_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color(stream: Any) -> bool:
    """Return True if colored output should be enabled for ``stream``."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the singleton console bound to standard output."""
    global _out_console

    if _out_console is None:
        with _console_lock:
            if _out_console is None:
                _out_console = Console(
                    theme=VERTRAIL_THEME,
                    no_color=not _should_use_color(sys.stdout),
                    highlight=False,
                )
    return _out_console


def _get_error_console() -> Console:
    """Return the singleton console bound to standard error."""
    global _err_console

    if _err_console is None:
        with _console_lock:
            if _err_console is None:
                use_color = _should_use_color(sys.stderr)
                _err_console = Console(
                    theme=VERTRAIL_THEME,
                    stderr=True,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _err_console


def reconfigure_console() -> None:
    """Drop both console instances so the next call rebuilds them.

    Needed when ``NO_COLOR`` or the standard streams change at runtime.
    """
    global _out_console, _err_console
    with _console_lock:
        _out_console = None
        _err_console = None


# ---------------------------------------------------------------------------
# Result output
# ---------------------------------------------------------------------------


def print_result(text: str) -> None:
    """Print a computed value on its own line on standard output.

    Markup and wrapping are disabled: the line must be machine readable.
    """
    _get_console().print(
        text, markup=False, highlight=False, emoji=False, soft_wrap=True
    )


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_error_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_error_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_error_console().print(f"{prefix} {message}", style="warning", markup=False)


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render rows of dictionaries as a Rich table on standard output.

    Columns follow the key order of the first row.

    Args:
        data: List of row dictionaries. Values may contain Rich markup.
        title: Optional table title.
        caption: Optional note under the table.
        column_styles: Per-column ``style`` / ``justify`` / ``no_wrap``.
    """
    if not data:
        return

    headers = list(data[0].keys())

    table = Table(title=title, caption=caption, show_header=True, header_style="bold")

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
        )

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)


def colorize_bump(bump: str) -> str:
    """Return a Rich-markup label for a bump kind or ``anchor``.

    Unknown labels are returned unchanged.
    """
    style = bump.lower()
    if style in ("major", "minor", "patch", "anchor"):
        return f"[{style}]{bump}[/{style}]"
    return bump
