"""
Version-control collaborator interface for requirekit.

The state assembly in :mod:`requirekit.core.state` and the metadata reader
in :mod:`requirekit.core.metadata` only talk to repositories through the
:class:`VersionControl` protocol. Every call may block on the file system
and on repository locks, so callers keep the number of calls per pass low.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a committed tree listing."""

    name: str
    is_dir: bool


@runtime_checkable
class VersionControl(Protocol):
    """Operations requirekit needs from a version-control system."""

    def is_repository(self, path: Path) -> bool:
        """True when ``path`` is the root of a checkout."""
        ...

    def current_commit_id(self, repo: Path) -> str:
        """Commit checked out at ``HEAD``.

        Raises:
            DetachedOrUnborn: The repository has no commit yet.
        """
        ...

    def is_dirty(self, repo: Path, pathspec: Optional[str] = None) -> bool:
        """True when tracked files (optionally only ``pathspec``) differ from ``HEAD``."""
        ...

    def is_detached(self, repo: Path) -> bool:
        """True when ``HEAD`` points at a commit rather than a branch."""
        ...

    def current_branch(self, repo: Path) -> Optional[str]:
        """Short name of the checked-out branch, or None when detached."""
        ...

    def is_ancestor(self, ancestor: str, descendant: str, repo: Path) -> bool:
        ...

    def merge_base(self, first: str, second: str, repo: Path) -> Optional[str]:
        """Best common ancestor of two commits, or None when unrelated."""
        ...

    def is_known_commit(self, commit: str, repo: Path) -> bool:
        """True when ``commit`` exists in ``repo``; never raises for unknown ids."""
        ...

    def has_file_at_head(self, path: str, repo: Path) -> bool:
        """True when ``path`` is tracked in the ``HEAD`` commit."""
        ...

    def list_tree(self, repo: Path, path: str = "") -> List[TreeEntry]:
        """Entries of the ``HEAD`` tree under ``path``; empty when absent."""
        ...

    def read_file(self, repo: Path, path: str) -> str:
        """Text content of ``path`` in the ``HEAD`` commit."""
        ...
