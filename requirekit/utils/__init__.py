"""
Utility helpers for requirekit.

This package provides reusable utilities used across requirekit, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Host platform detection

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from requirekit.utils.filesystem import (
    create_backup,
    list_directories,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from requirekit.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from requirekit.utils.console import (
    colorize_status,
    get_raw_console,
    print_advisories,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Platform utilities
# ---------------------------------------------------------------------------

from requirekit.utils.platform import Platform, resolve_platform, runtime_version

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "print_advisories",
    "colorize_status",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "create_backup",
    "list_directories",
    # Platform
    "Platform",
    "resolve_platform",
    "runtime_version",
]
