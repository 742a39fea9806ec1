"""Version-control access for requirekit."""

from __future__ import annotations

from requirekit.vcs.base import TreeEntry, VersionControl
from requirekit.vcs.git import GitCLI

__all__ = ["GitCLI", "TreeEntry", "VersionControl"]
