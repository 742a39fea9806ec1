"""Git backend for the version-control collaborator.

Drives the ``git`` executable through :mod:`subprocess`; no shell is
involved and every invocation runs with ``-C <repo>``.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from requirekit.constants import DEFAULT_GIT_TIMEOUT, GIT_EXECUTABLE
from requirekit.exceptions import DetachedOrUnborn, VersionControlError
from requirekit.utils.logger import get_logger
from requirekit.vcs.base import TreeEntry

logger = get_logger("vcs.git")


class GitCLI:
    """:class:`~requirekit.vcs.base.VersionControl` implemented with the git CLI.

    Args:
        executable: Git executable to run.
        timeout: Seconds before a single invocation is abandoned.
    """

    def __init__(
        self,
        executable: str = GIT_EXECUTABLE,
        timeout: int = DEFAULT_GIT_TIMEOUT,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def _run(
        self,
        repo: Path,
        args: Sequence[str],
        *,
        ok_codes: Sequence[int] = (0,),
    ) -> subprocess.CompletedProcess:
        cmd = [self.executable, "-C", str(repo), *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise VersionControlError(
                f"git invocation failed: {exc}",
                command=" ".join(cmd),
            ) from exc

        if result.returncode not in ok_codes:
            raise VersionControlError(
                f"git {args[0]} failed",
                command=" ".join(cmd),
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    # ------------------------------------------------------------------
    # Working copy state
    # ------------------------------------------------------------------

    def is_repository(self, path: Path) -> bool:
        return (Path(path) / ".git").exists()

    def current_commit_id(self, repo: Path) -> str:
        result = self._run(
            repo, ["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], ok_codes=(0, 1, 128)
        )
        commit = result.stdout.strip()
        if result.returncode != 0 or not commit:
            raise DetachedOrUnborn(str(repo))
        return commit

    def is_dirty(self, repo: Path, pathspec: Optional[str] = None) -> bool:
        args = ["status", "--porcelain", "--untracked-files=no"]
        if pathspec:
            args += ["--", pathspec]
        return bool(self._run(repo, args).stdout.strip())

    def is_detached(self, repo: Path) -> bool:
        result = self._run(repo, ["symbolic-ref", "--quiet", "HEAD"], ok_codes=(0, 1))
        return result.returncode == 1

    def current_branch(self, repo: Path) -> Optional[str]:
        result = self._run(
            repo, ["symbolic-ref", "--quiet", "--short", "HEAD"], ok_codes=(0, 1)
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def is_ancestor(self, ancestor: str, descendant: str, repo: Path) -> bool:
        result = self._run(
            repo, ["merge-base", "--is-ancestor", ancestor, descendant], ok_codes=(0, 1)
        )
        return result.returncode == 0

    def merge_base(self, first: str, second: str, repo: Path) -> Optional[str]:
        result = self._run(repo, ["merge-base", first, second], ok_codes=(0, 1))
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def is_known_commit(self, commit: str, repo: Path) -> bool:
        if not commit:
            return False
        result = self._run(
            repo, ["cat-file", "-e", f"{commit}^{{commit}}"], ok_codes=(0, 1, 128)
        )
        return result.returncode == 0

    # ------------------------------------------------------------------
    # Committed tree
    # ------------------------------------------------------------------

    def has_file_at_head(self, path: str, repo: Path) -> bool:
        result = self._run(repo, ["cat-file", "-e", f"HEAD:{path}"], ok_codes=(0, 1, 128))
        return result.returncode == 0

    def list_tree(self, repo: Path, path: str = "") -> List[TreeEntry]:
        args = ["ls-tree", "-z", "HEAD"]
        if path:
            args += ["--", path.rstrip("/") + "/"]
        entries: List[TreeEntry] = []
        for record in self._run(repo, args).stdout.split("\0"):
            # "<mode> SP <type> SP <object> TAB <path>" NUL, path never quoted
            meta, _, name = record.partition("\t")
            if not name:
                continue
            kind = meta.split()[1]
            entries.append(TreeEntry(name.rsplit("/", 1)[-1], kind == "tree"))
        return entries

    def read_file(self, repo: Path, path: str) -> str:
        return self._run(repo, ["show", f"HEAD:{path}"]).stdout
