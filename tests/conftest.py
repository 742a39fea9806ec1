from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from requirekit.exceptions import DetachedOrUnborn, VersionControlError
from requirekit.vcs.base import TreeEntry


@dataclass
class FakeRepo:
    """In-memory repository: a commit graph plus the files of ``HEAD``."""

    head: Optional[str] = None
    branch: Optional[str] = None
    dirty: bool = False
    dirty_paths: Set[str] = field(default_factory=set)
    parents: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    files: Dict[str, str] = field(default_factory=dict)

    def commit(self, sha: str, *parents: str) -> str:
        self.parents[sha] = tuple(parents)
        return sha

    def chain(self, *shas: str) -> None:
        """Record ``shas`` as a linear history, oldest first."""
        previous: Tuple[str, ...] = ()
        for sha in shas:
            self.parents[sha] = previous
            previous = (sha,)

    def ancestors(self, sha: str) -> Set[str]:
        seen: Set[str] = set()
        stack = [sha]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self.parents.get(current, ()))
        return seen


class FakeVCS:
    """VersionControl implementation over :class:`FakeRepo` objects.

    Every query is appended to ``calls`` as ``(method, repo)``.
    """

    def __init__(self) -> None:
        self.repos: Dict[Path, FakeRepo] = {}
        self.calls: List[Tuple[str, Path]] = []

    def add_repo(self, path: Path, **kwargs) -> FakeRepo:
        path.mkdir(parents=True, exist_ok=True)
        repo = FakeRepo(**kwargs)
        self.repos[path] = repo
        return repo

    def calls_to(self, *methods: str) -> List[Tuple[str, Path]]:
        return [call for call in self.calls if call[0] in methods]

    def _repo(self, method: str, path: Path) -> FakeRepo:
        self.calls.append((method, path))
        if path not in self.repos:
            raise VersionControlError(f"not a repository: {path}")
        return self.repos[path]

    def is_repository(self, path: Path) -> bool:
        self.calls.append(("is_repository", path))
        return path in self.repos

    def current_commit_id(self, repo: Path) -> str:
        head = self._repo("current_commit_id", repo).head
        if head is None:
            raise DetachedOrUnborn(str(repo))
        return head

    def is_dirty(self, repo: Path, pathspec: Optional[str] = None) -> bool:
        state = self._repo("is_dirty", repo)
        if pathspec is not None:
            return pathspec in state.dirty_paths
        return state.dirty or bool(state.dirty_paths)

    def is_detached(self, repo: Path) -> bool:
        return self._repo("is_detached", repo).branch is None

    def current_branch(self, repo: Path) -> Optional[str]:
        return self._repo("current_branch", repo).branch

    def is_ancestor(self, ancestor: str, descendant: str, repo: Path) -> bool:
        return ancestor in self._repo("is_ancestor", repo).ancestors(descendant)

    def merge_base(self, first: str, second: str, repo: Path) -> Optional[str]:
        state = self._repo("merge_base", repo)
        common = state.ancestors(first) & state.ancestors(second)
        if not common:
            return None
        # best common ancestor: one not reachable from any other
        best = [
            sha
            for sha in common
            if not any(sha in state.ancestors(other) and sha != other for other in common)
        ]
        return sorted(best)[0]

    def is_known_commit(self, commit: str, repo: Path) -> bool:
        return commit in self._repo("is_known_commit", repo).parents

    def has_file_at_head(self, path: str, repo: Path) -> bool:
        return path in self._repo("has_file_at_head", repo).files

    def list_tree(self, repo: Path, path: str = "") -> List[TreeEntry]:
        files = self._repo("list_tree", repo).files
        prefix = f"{path.strip('/')}/" if path.strip("/") else ""
        entries: Dict[str, bool] = {}
        for name in files:
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):].split("/")
            entries[rest[0]] = entries.get(rest[0], False) or len(rest) > 1
        return [TreeEntry(name, is_dir) for name, is_dir in sorted(entries.items())]

    def read_file(self, repo: Path, path: str) -> str:
        files = self._repo("read_file", repo).files
        if path not in files:
            raise VersionControlError(f"no such path at HEAD: {path}")
        return files[path]


def metadata_files(packages: Dict[str, Dict[str, Tuple[str, Iterable[str]]]]) -> Dict[str, str]:
    """Lay out published metadata as ``HEAD`` files.

    ``packages`` maps a package to ``{version: (sha1, requires_lines)}``.
    """
    files: Dict[str, str] = {}
    for package, versions in packages.items():
        files[f"{package}/url"] = f"https://github.com/example/{package}.jl.git\n"
        for version, (sha1, requires) in versions.items():
            files[f"{package}/versions/{version}/sha1"] = f"{sha1}\n"
            lines = list(requires)
            if lines:
                files[f"{package}/versions/{version}/requires"] = "".join(
                    f"{line}\n" for line in lines
                )
    return files


@pytest.fixture
def fake_vcs() -> FakeVCS:
    return FakeVCS()
