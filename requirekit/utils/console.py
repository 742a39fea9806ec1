"""
Console output utilities for requirekit using Rich.

This module provides user-facing output for the CLI commands. Diagnostic
output belongs in :mod:`requirekit.utils.logger`, never here.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, Iterable, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

from requirekit.models.advisory import Advisory
from requirekit.models.package import InstallStatus

REQUIREKIT_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "fixed": "bold magenta",
    }
)

_STATUS_COLORS = {
    InstallStatus.EXACT: "green",
    InstallStatus.BEHIND: "yellow",
    InstallStatus.AHEAD: "cyan",
    InstallStatus.UNKNOWN: "red",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared Rich console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=REQUIREKIT_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call re-reads ``NO_COLOR``."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning", markup=False)


def print_advisories(advisories: Iterable[Advisory]) -> int:
    """Print each advisory as a warning and return how many were printed."""
    count = 0
    for advisory in advisories:
        print_warning(str(advisory))
        count += 1
    return count


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def colorize_status(status: InstallStatus) -> str:
    """Return Rich markup for an installed-version status."""
    color = _STATUS_COLORS[status]
    return f"[{color}]{status.value}[/{color}]"


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render rows of data as a Rich table.

    Args:
        data: List of row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Per-column ``style``/``justify``/``no_wrap`` options.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "left"),
            no_wrap=config.get("no_wrap", False),
        )

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)
