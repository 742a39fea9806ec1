"""
Requirement data model for requirekit.

This module defines a structured representation of a single line of a
``REQUIRE`` file::

    [@tag ...] [@!tag ...] package [version [version ...]]

Versions are alternating lower/upper bounds: ``Foo 1.0.0 2.0.0 3.0.0``
accepts ``[1.0.0, 2.0.0)`` and anything from ``3.0.0`` up.

Two requirements are equal when their textual ``content`` is equal, so
equality always agrees with what is written to disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from requirekit.constants import COMMENT_MARKER, PLATFORM_PREFIX
from requirekit.exceptions import InvalidRequirement
from requirekit.models.version import VersionNumber, VersionSet, is_version, parse_version


@dataclass(frozen=True, eq=False)
class Requirement:
    """
    A single parsed requirement line.

    Attributes:
        content: Line text as read, or the canonical text when built
            from a package and version set.
        package: Package name (case-sensitive).
        versions: Accepted versions.
        system: Platform tags without the ``@`` prefix; negated tags keep
            their leading ``!``.
    """

    content: str
    package: str
    versions: VersionSet = field(default_factory=VersionSet)
    system: Tuple[str, ...] = ()

    @classmethod
    def parse(
        cls,
        content: str,
        *,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ) -> "Requirement":
        """
        Parse one requirement line.

        Everything from the first ``#`` is ignored. Leading ``@`` tokens
        become platform tags, the next token is the package name and the
        remaining tokens must be strictly increasing versions.

        Args:
            content: Line text without its trailing newline.
            line_number: Line number, used in error reports.
            file_path: Source file, used in error reports.

        Returns:
            The parsed requirement. ``content`` is kept verbatim.

        Raises:
            InvalidRequirement: The package name is missing, or a version
                token is malformed or out of order.
        """
        fields = content.split(COMMENT_MARKER, 1)[0].split()

        system: List[str] = []
        while fields and fields[0].startswith(PLATFORM_PREFIX):
            system.append(fields.pop(0)[len(PLATFORM_PREFIX):])

        if not fields:
            raise InvalidRequirement(
                f"invalid requires entry: {content}",
                line=content,
                line_number=line_number,
                file_path=file_path,
            )

        package = fields.pop(0)
        if not all(is_version(token) for token in fields):
            raise InvalidRequirement(
                f"invalid requires entry for {package}: {content}",
                line=content,
                line_number=line_number,
                file_path=file_path,
            )

        try:
            versions = VersionSet.from_bounds([parse_version(token) for token in fields])
        except ValueError as exc:
            raise InvalidRequirement(
                f"invalid requires entry for {package}: {content}",
                line=content,
                line_number=line_number,
                file_path=file_path,
            ) from exc

        return cls(content, package, versions, tuple(system))

    @classmethod
    def from_versions(
        cls,
        package: str,
        versions: Optional[VersionSet] = None,
        system: Iterable[str] = (),
    ) -> "Requirement":
        """
        Build a requirement and its canonical line.

        Renders ``@tag ... package lower1 [upper1 lower2 [upper2 ...]]``;
        an unbounded upper is omitted and an unconstrained set renders as
        the bare package name.

        Raises:
            InvalidRequirement: ``versions`` is empty; no line can express it.
        """
        versions = VersionSet() if versions is None else versions
        tags = tuple(system)

        if versions.is_empty:
            raise InvalidRequirement(
                f"no versions of {package} satisfy the combined requirements",
                line=package,
            )

        parts = [f"{PLATFORM_PREFIX}{tag}" for tag in tags]
        parts.append(package)
        if not versions.is_unbounded:
            parts.extend(str(version) for version in versions.bounds())

        return cls(" ".join(parts), package, versions, tags)

    @property
    def is_conditional(self) -> bool:
        """True when the line carries platform tags."""
        return bool(self.system)

    def accepts(self, version: VersionNumber) -> bool:
        return version in self.versions

    def to_string(self) -> str:
        """Return the canonical text for this requirement's fields."""
        return Requirement.from_versions(self.package, self.versions, self.system).content

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Requirement):
            return NotImplemented
        return self.content == other.content

    def __hash__(self) -> int:
        return hash(self.content)

    def __str__(self) -> str:
        return self.content

    def __repr__(self) -> str:
        return (
            "Requirement("
            f"package={self.package!r}, "
            f"versions={str(self.versions)!r}, "
            f"system={list(self.system)!r}"
            ")"
        )
