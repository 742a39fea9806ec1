"""
Host platform detection for requirekit.

Requirement lines may be restricted to platform families with ``@tag``
prefixes (``@windows``, ``@unix``, ``@osx``, ``@linux``, ``@bsd``) or
excluded from them with ``@!tag``. This module describes the families the
current host belongs to and decides whether a tagged line applies.
"""

from __future__ import annotations

import sys
import platform as _platform
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from requirekit.constants import NEGATION_PREFIX, PLATFORM_TAGS
from requirekit.models.version import VersionNumber


@dataclass(frozen=True)
class Platform:
    """Membership of a host in each platform family.

    ``unix`` is true for linux, bsd and apple hosts as well as other
    POSIX systems.
    """

    windows: bool = False
    unix: bool = False
    osx: bool = False
    linux: bool = False
    bsd: bool = False

    @classmethod
    def from_name(cls, name: str) -> "Platform":
        """Build a platform from a family tag or a ``sys.platform`` value.

        Raises:
            ValueError: ``name`` is not recognised.
        """
        key = name.lower()
        if key in ("windows", "win32", "cygwin"):
            return cls(windows=True)
        if key in ("osx", "apple", "darwin", "macos"):
            return cls(unix=True, osx=True)
        if key.startswith("linux"):
            return cls(unix=True, linux=True)
        if key == "bsd" or key.endswith("bsd") or key.startswith("dragonfly"):
            return cls(unix=True, bsd=True)
        if key in ("unix", "posix", "aix", "sunos5", "solaris"):
            return cls(unix=True)
        raise ValueError(f"Unknown platform: {name}")

    @classmethod
    def current(cls) -> "Platform":
        """Return the platform of the running interpreter."""
        try:
            return cls.from_name(sys.platform)
        except ValueError:
            return cls(unix=True)

    @property
    def families(self) -> Tuple[str, ...]:
        """Tags of every family this platform belongs to."""
        return tuple(tag for tag in PLATFORM_TAGS if getattr(self, tag))

    def applies(self, system: Iterable[str]) -> bool:
        """Decide whether a requirement tagged with ``system`` applies here.

        A line applies when it names no positive tag or at least one
        positive tag matching this platform, and no negated tag matches.
        Untagged lines always apply.
        """
        tags = tuple(system)
        if not tags:
            return True

        families = self.families
        positive = [tag for tag in tags if not tag.startswith(NEGATION_PREFIX)]
        negative = [tag[len(NEGATION_PREFIX):] for tag in tags if tag.startswith(NEGATION_PREFIX)]

        if positive and not any(tag in families for tag in positive):
            return False
        return not any(tag in families for tag in negative)


def resolve_platform(name: Optional[str]) -> Platform:
    """Return the named platform, or the host platform when ``name`` is empty."""
    return Platform.from_name(name) if name else Platform.current()


def runtime_version() -> VersionNumber:
    """Version of the running Python interpreter."""
    return VersionNumber.from_pep440(_platform.python_version())
