"""Installed package state assembly for requirekit.

Classifies every installed package as *fixed* (the resolver must keep
its version) or *free*, works out where each checkout sits relative to
the published versions, and collects the requirements a fixed package
imposes. The output is the input contract for a resolver::

    inspector = StateInspector(root, GitCLI())
    avail = available(inspector.metadata_path, inspector.vcs, cache=cache)
    inst = inspector.installed(avail)
    fixed = inspector.fixed(avail, inst.value, dont_update={"Compat"})
    free = inspector.free(inst.value, dont_update={"Compat"})

A :class:`StateInspector` represents a single resolution pass: it
remembers ``HEAD`` commits and commit lookups it has already made, so a
new inspector must be created when repositories may have changed.

Ancestry searches never abort. Published commits missing from the local
repositories and histories where a version is both ancestor and
descendant of ``HEAD`` are reported as
:class:`~requirekit.models.Advisory` entries on the returned
:class:`~requirekit.models.Assessed` values, and logged as warnings.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from requirekit.constants import (
    DEFAULT_RUNTIME_NAME,
    GITHUB_URL_PATTERN,
    METADATA_DIR,
    PINNED_BRANCH_PATTERN,
    REQUIRE_FILE,
    REQUIRES_FILE,
    RESERVED_NAMES,
    VERSIONS_DIR,
)
from requirekit.core import parser
from requirekit.core.metadata import AvailableMap, read_url
from requirekit.exceptions import DetachedOrUnborn, NotInstalled, UnknownCommit
from requirekit.models import (
    Advisory,
    AdvisoryKind,
    Assessed,
    Fixed,
    InstalledState,
    InstalledVersion,
    Requires,
    VersionNumber,
)
from requirekit.models.package import Versions
from requirekit.utils.filesystem import list_directories
from requirekit.utils.logger import get_logger
from requirekit.utils.platform import Platform, runtime_version
from requirekit.vcs.base import VersionControl

logger = get_logger("state")

_PINNED_BRANCH = re.compile(PINNED_BRANCH_PATTERN)
_GITHUB_URL = re.compile(GITHUB_URL_PATTERN, re.IGNORECASE)

__all__ = ["StateInspector"]


class StateInspector:
    """Inspects installed packages under a package root for one pass.

    Args:
        root: Directory holding one checkout per installed package.
        vcs: Version-control backend.
        metadata_path: Published metadata checkout; defaults to
            ``root / "METADATA"``.
        cache_root: Directory of per-package clone caches. When a cache
            clone knows a checkout's ``HEAD`` it is searched before the
            checkout itself.
        platform: Platform used to read local ``REQUIRE`` files.
        runtime_name: Name of the runtime entry added by :meth:`fixed`.
    """

    def __init__(
        self,
        root: Path,
        vcs: VersionControl,
        *,
        metadata_path: Optional[Path] = None,
        cache_root: Optional[Path] = None,
        platform: Optional[Platform] = None,
        runtime_name: str = DEFAULT_RUNTIME_NAME,
    ) -> None:
        self.root = Path(root)
        self.vcs = vcs
        self.metadata_path = Path(metadata_path) if metadata_path else self.root / METADATA_DIR
        self.cache_root = Path(cache_root) if cache_root else None
        self.platform = platform or Platform.current()
        self.runtime_name = runtime_name

        self._heads: Dict[str, Optional[str]] = {}
        self._known: Dict[Tuple[Path, str], bool] = {}
        self._warned: Set[Tuple[str, str]] = set()

    # ------------------------------------------------------------------
    # Installed packages
    # ------------------------------------------------------------------

    def package_path(self, package: str) -> Path:
        return self.root / package

    def is_installed(self, package: str) -> bool:
        return (
            bool(package)
            and package not in RESERVED_NAMES
            and not package.startswith(".")
            and self.package_path(package).is_dir()
        )

    def installed_packages(self) -> List[str]:
        """Names of every installed package, sorted."""
        return [name for name in list_directories(self.root) if self.is_installed(name)]

    def _require_installed(self, package: str) -> Path:
        if not self.is_installed(package):
            raise NotInstalled(package)
        return self.package_path(package)

    # ------------------------------------------------------------------
    # Memoized repository queries
    # ------------------------------------------------------------------

    def _head(self, package: str) -> Optional[str]:
        """``HEAD`` commit of a checkout, or None when it has no commit."""
        if package not in self._heads:
            try:
                self._heads[package] = self.vcs.current_commit_id(self.package_path(package))
            except DetachedOrUnborn:
                self._heads[package] = None
        return self._heads[package]

    def _knows(self, repo: Path, commit: str) -> bool:
        key = (repo, commit)
        if key not in self._known:
            self._known[key] = self.vcs.is_known_commit(commit, repo)
        return self._known[key]

    def _search_repos(self, package: str, head: str) -> List[Path]:
        """Repositories to search for published commits, cache clone first."""
        repos: List[Path] = []
        if self.cache_root is not None:
            cache = self.cache_root / package
            if self.vcs.is_repository(cache) and self._knows(cache, head):
                repos.append(cache)
        repos.append(self.package_path(package))
        return repos

    def _repo_knowing(self, commit: str, repos: Iterable[Path]) -> Optional[Path]:
        for repo in repos:
            if self._knows(repo, commit):
                return repo
        return None

    def _unknown_commit(self, package: str, commit: str) -> Advisory:
        advisory = Advisory.from_error(
            AdvisoryKind.UNKNOWN_COMMIT, package, UnknownCommit(package, commit)
        )
        if (package, commit) not in self._warned:
            self._warned.add((package, commit))
            logger.warning("%s", advisory)
        return advisory

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_pinned(self, package: str) -> bool:
        """True when the checkout sits on a ``pinned.<sha>.tmp`` branch."""
        path = self._require_installed(package)
        if not self.vcs.is_repository(path):
            return False
        branch = self.vcs.current_branch(path)
        return branch is not None and _PINNED_BRANCH.match(branch) is not None

    def is_fixed(self, package: str, versions: Versions) -> Assessed[bool]:
        """Decide whether the resolver must keep ``package`` at its version.

        A package is fixed when it has no published versions, is not a
        version-controlled checkout, has local changes, is checked out on
        a branch, or has a ``REQUIRE`` file missing from its ``HEAD``
        commit. Otherwise it is free when ``HEAD`` is a published commit
        or an ancestor of one, and fixed when no published commit can be
        related to it.

        Args:
            package: Installed package name.
            versions: Published versions of ``package``.

        Raises:
            NotInstalled: ``package`` has no checkout under the root.
            DetachedOrUnborn: The checkout has no commit to compare.
        """
        path = self._require_installed(package)

        if not versions:
            return Assessed(True)
        if not self.vcs.is_repository(path):
            return Assessed(True)
        if self.vcs.is_dirty(path):
            return Assessed(True)
        if not self.vcs.is_detached(path):
            return Assessed(True)
        if (path / REQUIRE_FILE).is_file() and not self.vcs.has_file_at_head(REQUIRE_FILE, path):
            return Assessed(True)

        head = self._head(package)
        if head is None:
            raise DetachedOrUnborn(str(path))

        if any(info.sha1 == head for info in versions.values()):
            return Assessed(False)

        result: Assessed[bool] = Assessed(True)
        repos = self._search_repos(package, head)
        for version in sorted(versions):
            sha1 = versions[version].sha1
            repo = self._repo_knowing(sha1, repos)
            if repo is None:
                result.extend([self._unknown_commit(package, sha1)])
                continue
            if self.vcs.is_ancestor(head, sha1, repo):
                result.value = False
                break
        return result

    def installed_version(self, package: str, versions: Versions) -> Assessed[InstalledVersion]:
        """Locate the checkout relative to the published versions.

        An exact match of ``HEAD`` wins outright. Otherwise every
        published commit is related to ``HEAD``: the checkout is *behind*
        the lowest version that descends from it, or, failing that,
        *ahead* of the highest version it descends from. With neither,
        or without a commit at all, the version is unknown.

        Raises:
            NotInstalled: ``package`` has no checkout under the root.
        """
        path = self._require_installed(package)
        if not self.vcs.is_repository(path):
            return Assessed(InstalledVersion.unknown())

        head = self._head(package)
        if head is None:
            return Assessed(InstalledVersion.unknown())

        matches = [version for version, info in versions.items() if info.sha1 == head]
        if matches:
            return Assessed(InstalledVersion.exact(max(matches)))

        result: Assessed[InstalledVersion] = Assessed(InstalledVersion.unknown())
        ancestors: List[VersionNumber] = []
        descendants: List[VersionNumber] = []
        repos = self._search_repos(package, head)

        for version in sorted(versions):
            sha1 = versions[version].sha1
            repo = self._repo_knowing(sha1, repos)
            if repo is None:
                result.extend([self._unknown_commit(package, sha1)])
                continue
            base = self.vcs.merge_base(head, sha1, repo)
            if base == sha1:
                ancestors.append(version)
            if base == head:
                descendants.append(version)

        both = sorted(set(ancestors) & set(descendants))
        if both:
            advisory = Advisory(
                AdvisoryKind.AMBIGUOUS_ANCESTRY,
                package,
                "some versions are both ancestors and descendants of head: "
                + ", ".join(str(version) for version in both),
                {"versions": [str(version) for version in both]},
            )
            logger.warning("%s", advisory)
            result.extend([advisory])

        if descendants:
            result.value = InstalledVersion.behind(min(descendants))
        elif ancestors:
            result.value = InstalledVersion.ahead(max(ancestors))
        return result

    # ------------------------------------------------------------------
    # Requirements
    # ------------------------------------------------------------------

    def local_requires(self, package: str) -> Requires:
        """Requirements from the checkout's own ``REQUIRE`` file."""
        return parser.parse_file(self.package_path(package) / REQUIRE_FILE, self.platform)

    def _published_match(self, package: str, versions: Versions) -> Optional[VersionNumber]:
        """Published version whose requirements describe the checkout, if any.

        None when ``REQUIRE`` has local changes or is not committed, or when
        ``HEAD`` is not a published commit.
        """
        path = self._require_installed(package)
        if not self.vcs.is_repository(path):
            return None
        if self.vcs.is_dirty(path, REQUIRE_FILE):
            return None
        if (path / REQUIRE_FILE).is_file() and not self.vcs.has_file_at_head(REQUIRE_FILE, path):
            return None

        head = self._head(package)
        for version in sorted(versions, reverse=True):
            if versions[version].sha1 == head:
                return version
        return None

    def requires_path(self, package: str, versions: Versions) -> Path:
        """File holding the requirements ``package`` imposes in its current state.

        The published ``requires`` file of the checked-out version inside
        the metadata checkout, otherwise the package's own ``REQUIRE``.
        """
        version = self._published_match(package, versions)
        if version is None:
            return self.package_path(package) / REQUIRE_FILE
        return self.metadata_path / package / VERSIONS_DIR / str(version) / REQUIRES_FILE

    def requires_dict(self, package: str, versions: Versions) -> Requires:
        """Requirements ``package`` imposes in its current state.

        The published requirements of the version whose commit is checked
        out, unless ``REQUIRE`` has local changes or is not committed;
        in every other case the checkout's own ``REQUIRE`` file.
        """
        version = self._published_match(package, versions)
        if version is None:
            return self.local_requires(package)
        return dict(versions[version].requires)

    def requires_list(self, package: str, versions: Versions) -> List[str]:
        return list(self.requires_dict(package, versions))

    # ------------------------------------------------------------------
    # Resolver input
    # ------------------------------------------------------------------

    def installed(self, available: AvailableMap) -> Assessed[Dict[str, InstalledState]]:
        """Installed version and fixed flag of every installed package."""
        states: Dict[str, InstalledState] = {}
        result: Assessed[Dict[str, InstalledState]] = Assessed(states)

        for package in self.installed_packages():
            versions = available.get(package, {})
            if not self.vcs.is_repository(self.package_path(package)):
                states[package] = InstalledState(InstalledVersion.unknown(), True)
                continue
            version = self.installed_version(package, versions)
            fixed = self.is_fixed(package, versions)
            result.extend(version.advisories)
            result.extend(fixed.advisories)
            states[package] = InstalledState(version.value, fixed.value)

        logger.debug("Inspected %d installed package(s)", len(states))
        return result

    def fixed(
        self,
        available: AvailableMap,
        installed: Mapping[str, InstalledState],
        dont_update: Iterable[str] = (),
        runtime: Optional[VersionNumber] = None,
    ) -> Dict[str, Fixed]:
        """Packages the resolver must not change, with their requirements.

        Fixed packages and those named in ``dont_update`` are included,
        plus the runtime entry held at ``runtime`` (default: the running
        interpreter's version).
        """
        held = set(dont_update)
        pkgs: Dict[str, Fixed] = {}
        for package, state in installed.items():
            if not (state.fixed or package in held):
                continue
            requires = self.requires_dict(package, available.get(package, {}))
            pkgs[package] = Fixed(state.version.bound, requires)
        pkgs[self.runtime_name] = Fixed(runtime or runtime_version())
        return pkgs

    def free(
        self,
        installed: Mapping[str, InstalledState],
        dont_update: Iterable[str] = (),
    ) -> Dict[str, VersionNumber]:
        """Installed versions of the packages the resolver may change."""
        held = set(dont_update)
        return {
            package: state.version.bound
            for package, state in installed.items()
            if not (state.fixed or package in held)
        }

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    def issue_url(self, package: str) -> str:
        """GitHub issue tracker of a package, or ``""`` when not on GitHub."""
        if not self.vcs.is_repository(self.package_path(package)):
            return ""
        match = _GITHUB_URL.match(read_url(self.metadata_path, self.vcs, package))
        if match is None:
            return ""
        return f"https://github.com/{match.group(1)}/issues"
