"""
Core functionality exports for requirekit.

This module provides convenient access to the core subsystems of requirekit.
Importing from here keeps user-facing imports clean and stable:

    from requirekit.core import StateInspector, available, parse
"""

from __future__ import annotations

from requirekit.core.parser import (
    add,
    dependents,
    format_lines,
    format_requires,
    parse,
    parse_file,
    read_file,
    read_lines,
    remove,
    write_file,
)
from requirekit.core.metadata import AvailableCache, available, latest, read_available
from requirekit.core.state import StateInspector

__all__ = [
    "add",
    "dependents",
    "format_lines",
    "format_requires",
    "parse",
    "parse_file",
    "read_file",
    "read_lines",
    "remove",
    "write_file",
    "AvailableCache",
    "available",
    "latest",
    "read_available",
    "StateInspector",
]
