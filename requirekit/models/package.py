"""
Package state data model for requirekit.

These records are the inputs handed to a resolver: what each published
version of a package requires (:class:`Available`), which installed
packages must keep their version (:class:`Fixed`), and where every
installed checkout sits relative to the published versions
(:class:`InstalledVersion`).
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict

from requirekit.models.version import MIN_VERSION, VersionNumber, VersionSet

#: Dependency constraints of one package version, keyed by package name.
Requires = Dict[str, VersionSet]

#: Published versions of one package.
Versions = Dict[VersionNumber, "Available"]


@dataclass(frozen=True)
class Available:
    """
    One published version of a package.

    Attributes:
        sha1: Commit identifying the published source tree.
        requires: Constraints recorded for this version.
    """

    sha1: str
    requires: Requires = field(default_factory=dict)


@dataclass(frozen=True)
class Fixed:
    """
    A package whose version the resolver must not change.

    Attributes:
        version: Version to hold the package at.
        requires: Constraints the package imposes at that version.
    """

    version: VersionNumber
    requires: Requires = field(default_factory=dict)


class InstallStatus(str, Enum):
    """Where an installed checkout sits relative to published versions."""

    EXACT = "exact"
    BEHIND = "behind"
    AHEAD = "ahead"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InstalledVersion:
    """
    Installed version of a package.

    ``version`` is the nearest published version and compares equal to
    it; ``status`` tells whether the checkout is exactly that version,
    precedes it, or follows it. :attr:`bound` is the synthetic version a
    resolver should use.

    Attributes:
        version: Nearest published version, or ``MIN_VERSION`` if none.
        status: Relation of the checkout to ``version``.
    """

    version: VersionNumber = MIN_VERSION
    status: InstallStatus = InstallStatus.UNKNOWN

    @classmethod
    def exact(cls, version: VersionNumber) -> "InstalledVersion":
        return cls(version, InstallStatus.EXACT)

    @classmethod
    def behind(cls, version: VersionNumber) -> "InstalledVersion":
        return cls(version, InstallStatus.BEHIND)

    @classmethod
    def ahead(cls, version: VersionNumber) -> "InstalledVersion":
        return cls(version, InstallStatus.AHEAD)

    @classmethod
    def unknown(cls) -> "InstalledVersion":
        return cls(MIN_VERSION, InstallStatus.UNKNOWN)

    @property
    def is_exact(self) -> bool:
        return self.status is InstallStatus.EXACT

    @property
    def bound(self) -> VersionNumber:
        """Version to report to a resolver.

        ``X.Y.Z-`` when behind ``X.Y.Z``, ``X.Y.Z+`` when ahead of it.
        """
        if self.status is InstallStatus.BEHIND:
            return self.version.lower_neighbor()
        if self.status is InstallStatus.AHEAD:
            return self.version.upper_neighbor()
        return self.version

    def __str__(self) -> str:
        if self.status is InstallStatus.UNKNOWN:
            return "unknown"
        if self.status is InstallStatus.EXACT:
            return str(self.version)
        return f"{self.version} ({self.status.value})"


@dataclass(frozen=True)
class InstalledState:
    """Installed version of a package and whether it is fixed."""

    version: InstalledVersion
    fixed: bool
