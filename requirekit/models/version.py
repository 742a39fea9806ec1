"""
Version numbers, intervals and version sets for requirekit.

A :class:`VersionSet` is a canonical, sorted sequence of half-open
:class:`VersionInterval` ranges. Requirement lines are parsed into version
sets and combined by intersection, so the canonical form is what makes
aggregation independent of the order in which requirements are read.

Example:
    >>> a = VersionSet.from_bounds([parse_version("1.0.0"), parse_version("2.0.0")])
    >>> b = VersionSet.from_bounds([parse_version("1.5.0")])
    >>> str(a & b)
    '[1.5.0, 2.0.0)'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from packaging.version import Version

Identifier = Union[int, str]

_IDENT = r"[0-9A-Za-z-]+"
_VERSION_RE = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)"
    rf"(?:(-)|-((?:{_IDENT}\.)*{_IDENT}))?"
    rf"(?:(\+)|\+((?:{_IDENT}\.)*{_IDENT}))?$"
)


def _split_identifiers(text: Optional[str], bare: Optional[str]) -> Tuple[Identifier, ...]:
    """Split a prerelease/build suffix into identifiers."""
    if bare:
        return ("",)
    if not text:
        return ()
    return tuple(int(part) if part.isdigit() else part for part in text.split("."))


def _identifier_key(ident: Identifier) -> Tuple[int, int, str]:
    # empty tag first, then numeric identifiers, then alphanumeric ones
    if ident == "":
        return (-1, 0, "")
    if isinstance(ident, int):
        return (0, ident, "")
    return (1, 0, ident)


@total_ordering
@dataclass(frozen=True, eq=False)
class VersionNumber:
    """Semantic version with optional prerelease and build identifiers.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
        prerelease: Prerelease identifiers. ``("",)`` is the empty tag and
            sorts below every other prerelease of the same release.
        build: Build identifiers. ``("",)`` is the empty tag and sorts
            above the plain release.
        unbounded: Set only on :data:`MAX_VERSION`; sorts above every
            finite version whatever its components.
    """

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[Identifier, ...] = ()
    build: Tuple[Identifier, ...] = ()
    unbounded: bool = field(default=False, repr=False)

    @classmethod
    def from_pep440(cls, text: str) -> "VersionNumber":
        """Convert a PEP 440 version string such as ``3.12.1rc1``.

        The release segment is padded or truncated to three components,
        pre and dev releases become prerelease identifiers, and post and
        local segments become build identifiers.

        Raises:
            packaging.version.InvalidVersion: ``text`` is not PEP 440.
        """
        parsed = Version(text)
        major, minor, patch = (tuple(parsed.release) + (0, 0, 0))[:3]

        prerelease: List[Identifier] = []
        if parsed.pre is not None:
            prerelease.append(f"{parsed.pre[0]}{parsed.pre[1]}")
        if parsed.dev is not None:
            prerelease.append(f"dev{parsed.dev}")

        build: List[Identifier] = []
        if parsed.post is not None:
            build.append(f"post{parsed.post}")
        if parsed.local:
            build.extend(_split_identifiers(parsed.local, None))

        return cls(major, minor, patch, tuple(prerelease), tuple(build))

    # ------------------------------------------------------------------
    # Synthetic neighbours
    # ------------------------------------------------------------------

    def lower_neighbor(self) -> "VersionNumber":
        """Return ``X.Y.Z-``, just below the plain release."""
        return VersionNumber(self.major, self.minor, self.patch, ("",), ())

    def upper_neighbor(self) -> "VersionNumber":
        """Return ``X.Y.Z+``, just above the plain release."""
        return VersionNumber(self.major, self.minor, self.patch, (), ("",))

    def release(self) -> "VersionNumber":
        """Return the version without prerelease or build identifiers."""
        return VersionNumber(self.major, self.minor, self.patch)

    @property
    def is_unbounded(self) -> bool:
        """True for the :data:`MAX_VERSION` sentinel."""
        return self.unbounded

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _key(self) -> tuple:
        if self.prerelease:
            pre: tuple = (0,) + tuple(_identifier_key(i) for i in self.prerelease)
        else:
            pre = (1,)
        if self.build:
            build: tuple = (1,) + tuple(_identifier_key(i) for i in self.build)
        else:
            build = (0,)
        return (self.unbounded, self.major, self.minor, self.patch, pre, build)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "VersionNumber") -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        if self.is_unbounded:
            return "∞"
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(i) for i in self.prerelease)
        if self.build:
            text += "+" + ".".join(str(i) for i in self.build)
        return text

    def __repr__(self) -> str:
        return f"VersionNumber('{self}')"


#: Smallest version; also reported for unknown installed state.
MIN_VERSION = VersionNumber(0, 0, 0, ("",), ())

#: Unbounded upper sentinel, above every finite version.
MAX_VERSION = VersionNumber(0, unbounded=True)


def is_version(text: str) -> bool:
    """Return True if ``text`` matches the version grammar."""
    return _VERSION_RE.match(text) is not None


def parse_version(text: str) -> VersionNumber:
    """Parse ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``.

    A bare trailing ``-`` or ``+`` denotes the empty tag, so the synthetic
    bounds produced by :meth:`VersionNumber.lower_neighbor` and
    :meth:`VersionNumber.upper_neighbor` parse back to themselves.

    Raises:
        ValueError: ``text`` does not match the grammar.
    """
    match = _VERSION_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid version string: {text}")

    major, minor, patch, bare_pre, pre, bare_build, build = match.groups()
    return VersionNumber(
        int(major),
        int(minor),
        int(patch),
        _split_identifiers(pre, bare_pre),
        _split_identifiers(build, bare_build),
    )


# ---------------------------------------------------------------------------
# Intervals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VersionInterval:
    """Half-open range ``[lower, upper)``; empty when ``upper <= lower``."""

    lower: VersionNumber = MIN_VERSION
    upper: VersionNumber = MAX_VERSION

    @property
    def is_empty(self) -> bool:
        return self.upper <= self.lower

    def intersect(self, other: "VersionInterval") -> "VersionInterval":
        return VersionInterval(max(self.lower, other.lower), min(self.upper, other.upper))

    def __contains__(self, version: VersionNumber) -> bool:
        return self.lower <= version < self.upper

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper})"


def _canonicalize(intervals: Iterable[VersionInterval]) -> Tuple[VersionInterval, ...]:
    """Sort intervals, drop empty ones and merge overlapping or touching ones."""
    ordered = sorted(
        (ival for ival in intervals if not ival.is_empty),
        key=lambda ival: (ival.lower, ival.upper),
    )
    merged: List[VersionInterval] = []
    for ival in ordered:
        if merged and ival.lower <= merged[-1].upper:
            last = merged[-1]
            merged[-1] = VersionInterval(last.lower, max(last.upper, ival.upper))
        else:
            merged.append(ival)
    return tuple(merged)


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


class VersionSet:
    """Canonical union of disjoint, non-touching version intervals.

    ``VersionSet()`` accepts any version. ``VersionSet([])`` (or
    :meth:`empty`) accepts none. Instances are immutable; the set
    operations return new values.
    """

    __slots__ = ("_intervals",)

    def __init__(self, intervals: Optional[Iterable[VersionInterval]] = None) -> None:
        if intervals is None:
            intervals = (VersionInterval(),)
        self._intervals: Tuple[VersionInterval, ...] = _canonicalize(intervals)

    @classmethod
    def empty(cls) -> "VersionSet":
        return cls(())

    @classmethod
    def from_bounds(cls, versions: Sequence[VersionNumber]) -> "VersionSet":
        """Build a set from alternating lower/upper bounds.

        ``[a, b, c]`` yields ``[a, b) ∪ [c, ∞)``. No bounds at all yields
        the unconstrained set.

        Raises:
            ValueError: The bounds are not strictly increasing.
        """
        if not versions:
            return cls()
        for lower, upper in zip(versions, versions[1:]):
            if not lower < upper:
                raise ValueError(f"version bounds not strictly increasing: {lower} >= {upper}")

        bounds = list(versions)
        if len(bounds) % 2:
            bounds.append(MAX_VERSION)
        return cls(
            VersionInterval(bounds[i], bounds[i + 1]) for i in range(0, len(bounds), 2)
        )

    @property
    def intervals(self) -> Tuple[VersionInterval, ...]:
        return self._intervals

    @property
    def is_empty(self) -> bool:
        """True when no version is accepted."""
        return not self._intervals

    @property
    def is_unbounded(self) -> bool:
        """True when every version is accepted."""
        return self._intervals == _UNBOUNDED

    def bounds(self) -> List[VersionNumber]:
        """Return the alternating bound list, omitting an unbounded upper."""
        result: List[VersionNumber] = []
        for ival in self._intervals:
            result.append(ival.lower)
            if not ival.upper.is_unbounded:
                result.append(ival.upper)
        return result

    def intersect(self, other: "VersionSet") -> "VersionSet":
        if self.is_empty or other.is_empty:
            return VersionSet.empty()
        return VersionSet(a.intersect(b) for a in self._intervals for b in other._intervals)

    def union(self, other: "VersionSet") -> "VersionSet":
        return VersionSet(self._intervals + other._intervals)

    __and__ = intersect
    __or__ = union

    def __contains__(self, version: VersionNumber) -> bool:
        return any(version in ival for ival in self._intervals)

    def __iter__(self) -> Iterator[VersionInterval]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionSet):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __str__(self) -> str:
        if self.is_empty:
            return "∅"
        return " ∪ ".join(str(ival) for ival in self._intervals)

    def __repr__(self) -> str:
        return f"VersionSet({str(self)!r})"


_UNBOUNDED = (VersionInterval(),)
