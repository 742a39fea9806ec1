"""
requirekit — REQUIRE files and installed package state

requirekit reads and edits ``REQUIRE`` files and works out, for a
directory of version-controlled package checkouts, which packages a
resolver must keep at their current version and which it may change.

Features include:
    • Version sets built from half-open version ranges
    • Platform-conditional requirement lines (``@windows``, ``@!osx``)
    • Order-independent aggregation and minimal file edits
    • Published metadata read from a git snapshot, cached per commit
    • Installed-version detection by commit ancestry
"""

from __future__ import annotations

from requirekit.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "requirekit Contributors"
__license__ = "MIT"
__description__ = "Requirement files and installed package state for git-based package roots."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from requirekit.models import Requirement, VersionNumber, VersionSet  # noqa: E402
from requirekit.core import StateInspector  # noqa: E402

__all__ = [
    "__version__",
    "Requirement",
    "StateInspector",
    "VersionNumber",
    "VersionSet",
]
