"""Published package metadata for requirekit.

The metadata repository records, for every package, each published
version's commit and requirements. It is read from the committed
``HEAD`` tree, never from the working copy::

    METADATA/
        Compat/
            url
            versions/
                0.9.0/
                    sha1
                    requires
                1.0.0/
                    sha1

Reading the whole snapshot means one tree listing and one or two blob
reads per version, so results are kept in an :class:`AvailableCache`
keyed by the metadata ``HEAD`` commit and the platform the requirements
were filtered for. A dirty metadata checkout bypasses the cache entirely.

Typical usage::

    from requirekit.vcs import GitCLI
    from requirekit.core.metadata import AvailableCache, available, latest

    cache = AvailableCache()
    avail = available(Path("~/.pkgs/METADATA"), GitCLI(), cache=cache)
    newest = latest(avail)
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from requirekit.constants import REQUIRES_FILE, SHA1_FILE, URL_FILE, VERSIONS_DIR
from requirekit.core import parser
from requirekit.exceptions import MetadataError
from requirekit.models import Available, VersionNumber, parse_version
from requirekit.models.package import Versions
from requirekit.utils.logger import get_logger
from requirekit.utils.platform import Platform
from requirekit.vcs.base import VersionControl

logger = get_logger("metadata")

#: Published versions of every package.
AvailableMap = Dict[str, Versions]

__all__ = [
    "AvailableCache",
    "AvailableMap",
    "available",
    "latest",
    "package_names",
    "read_available",
    "read_package",
    "read_url",
]


@dataclass
class AvailableCache:
    """Published metadata computed for one metadata commit and platform.

    Attributes:
        key: Metadata ``HEAD`` commit the entries were read from; empty
            when nothing has been cached yet.
        packages: Published versions per package.
        platform: Platform the published requirements were filtered for.
    """

    key: str = ""
    packages: AvailableMap = field(default_factory=dict)
    platform: Optional[Platform] = None

    def matches(self, key: str, platform: Optional[Platform] = None) -> bool:
        return bool(self.key) and self.key == key and self.platform == platform

    def store(
        self, key: str, packages: AvailableMap, platform: Optional[Platform] = None
    ) -> None:
        self.key = key
        self.packages = packages
        self.platform = platform

    def invalidate(self) -> None:
        self.key = ""
        self.packages = {}
        self.platform = None


# ---------------------------------------------------------------------------
# Tree traversal
# ---------------------------------------------------------------------------


def package_names(metadata: Path, vcs: VersionControl) -> List[str]:
    """Top-level package directories of the metadata snapshot."""
    return sorted(
        entry.name
        for entry in vcs.list_tree(metadata)
        if entry.is_dir and not entry.name.startswith(".")
    )


def read_package(
    metadata: Path,
    vcs: VersionControl,
    package: str,
    platform: Optional[Platform] = None,
) -> Versions:
    """Read every published version of one package.

    Raises:
        MetadataError: A version directory is not a valid version or has
            no ``sha1`` file.
    """
    versions: Versions = {}
    versions_dir = f"{package}/{VERSIONS_DIR}"

    for entry in vcs.list_tree(metadata, versions_dir):
        if not entry.is_dir:
            continue
        version_dir = f"{versions_dir}/{entry.name}"
        try:
            version = parse_version(entry.name)
        except ValueError as exc:
            raise MetadataError(
                f"invalid version directory for {package}: {entry.name}",
                path=version_dir,
            ) from exc

        files = {item.name for item in vcs.list_tree(metadata, version_dir) if not item.is_dir}
        if SHA1_FILE not in files:
            raise MetadataError(
                f"{package} {version} has no published commit",
                path=version_dir,
            )

        sha1 = vcs.read_file(metadata, f"{version_dir}/{SHA1_FILE}").strip()
        requires = {}
        if REQUIRES_FILE in files:
            text = vcs.read_file(metadata, f"{version_dir}/{REQUIRES_FILE}")
            requires = parser.parse(
                parser.read_lines(text.splitlines(), file_path=f"{version_dir}/{REQUIRES_FILE}"),
                platform,
            )
        versions[version] = Available(sha1, requires)

    return versions


def read_available(
    metadata: Path,
    vcs: VersionControl,
    names: Optional[Iterable[str]] = None,
    platform: Optional[Platform] = None,
) -> AvailableMap:
    """Read published versions for ``names`` (default: every package).

    Packages without any published version are left out.
    """
    packages: AvailableMap = {}
    for name in names if names is not None else package_names(metadata, vcs):
        versions = read_package(metadata, vcs, name, platform)
        if versions:
            packages[name] = versions
    logger.debug("Read metadata for %d package(s)", len(packages))
    return packages


def read_url(metadata: Path, vcs: VersionControl, package: str) -> str:
    """First line of the package's published ``url`` file."""
    text = vcs.read_file(metadata, f"{package}/{URL_FILE}")
    lines = text.splitlines()
    return lines[0].strip() if lines else ""


# ---------------------------------------------------------------------------
# Cached access
# ---------------------------------------------------------------------------


def available(
    metadata: Path,
    vcs: VersionControl,
    *,
    cache: Optional[AvailableCache] = None,
    platform: Optional[Platform] = None,
) -> AvailableMap:
    """Published versions of every package, reusing ``cache`` when valid.

    The cache is consulted only when the metadata checkout is clean. A
    different ``HEAD`` commit or platform invalidates it and the snapshot
    is read again; a dirty checkout is read without touching the cache.
    ``platform`` defaults to the host.

    Returns:
        A fresh top-level mapping; callers may add or drop packages
        without affecting the cache.

    Raises:
        DetachedOrUnborn: The metadata repository has no commit.
    """
    head = vcs.current_commit_id(metadata)
    platform = platform or Platform.current()

    if cache is None:
        return read_available(metadata, vcs, platform=platform)

    if vcs.is_dirty(metadata):
        logger.info("Metadata checkout has local changes; bypassing cache")
        return read_available(metadata, vcs, platform=platform)

    if not cache.matches(head, platform):
        logger.debug("Metadata cache miss (%s -> %s)", cache.key[:8] or "<empty>", head[:8])
        cache.store(head, read_available(metadata, vcs, platform=platform), platform)

    return dict(cache.packages)


def latest(packages: AvailableMap) -> Dict[str, Available]:
    """The highest published version's record for every package."""
    result: Dict[str, Available] = {}
    for name, versions in packages.items():
        if not name or not versions:
            continue
        newest: VersionNumber = max(versions)
        result[name] = versions[newest]
    return result
