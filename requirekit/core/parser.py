"""Requirement file reading, aggregation and editing.

``REQUIRE`` files hold one requirement per line::

    # comments run to end of line
    julia 0.5.0
    Compat 0.9.0 2.0.0
    @windows WinRPM
    @!osx Gtk 0.10.0

Reading turns lines into :class:`~requirekit.models.Requirement` records;
:func:`parse` reduces those records, filtered by platform, to a single
:class:`~requirekit.models.VersionSet` per package; :func:`add` and
:func:`remove` edit a list of records without touching unrelated lines.

Typical usage::

    from requirekit.core.parser import add, parse, read_file, write_file

    lines = read_file("REQUIRE")
    requires = parse(lines)
    write_file("REQUIRE", add(lines, "Compat", requires["Compat"]))
"""

from __future__ import annotations

import re
from pathlib import Path
from functools import reduce
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from requirekit.models import Available, Requirement, Requires, VersionSet
from requirekit.utils.filesystem import safe_read_file, safe_write_file
from requirekit.utils.logger import get_logger
from requirekit.utils.platform import Platform

logger = get_logger("parser")

# Lines holding only whitespace and/or a comment
_SKIP_LINE = re.compile(r"^\s*(?:#|$)")


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_lines(
    lines: Iterable[str],
    *,
    file_path: Optional[str] = None,
) -> List[Requirement]:
    """Parse requirement lines, skipping blank and comment-only lines.

    Args:
        lines: Lines of text; trailing newlines are removed.
        file_path: Source file, used in error reports.

    Returns:
        Requirements in file order.

    Raises:
        InvalidRequirement: A line is malformed. The error names the line
            and its 1-based number.
    """
    requirements: List[Requirement] = []
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if _SKIP_LINE.match(line):
            continue
        requirements.append(
            Requirement.parse(line, line_number=line_number, file_path=file_path)
        )
    return requirements


def read_file(path: Union[str, Path]) -> List[Requirement]:
    """Read a requirement file; a missing file reads as no requirements."""
    file_path = Path(path)
    if not file_path.is_file():
        logger.debug("No requirement file at %s", file_path)
        return []

    content = safe_read_file(file_path)
    requirements = read_lines(content.splitlines(), file_path=str(file_path))
    logger.debug("Read %d requirement(s) from %s", len(requirements), file_path)
    return requirements


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def format_lines(requirements: Iterable[Requirement]) -> str:
    """Render requirements as file text, one ``content`` per line."""
    return "".join(f"{req.content}\n" for req in requirements)


def format_requires(requires: Mapping[str, VersionSet]) -> str:
    """Render a requirement map as canonical lines sorted case-insensitively."""
    return "".join(
        f"{Requirement.from_versions(package, requires[package]).content}\n"
        for package in sorted(requires, key=str.lower)
    )


def write_file(
    path: Union[str, Path],
    content: Union[Sequence[Requirement], Mapping[str, VersionSet]],
    *,
    backup: bool = False,
) -> Optional[Path]:
    """Atomically write requirement lines or a requirement map to ``path``.

    Returns:
        Path of the backup copy when ``backup`` is set and the file existed.
    """
    if isinstance(content, Mapping):
        text = format_requires(content)
    else:
        text = format_lines(content)
    logger.debug("Writing %s", path)
    return safe_write_file(path, text, backup=backup)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def parse(
    requirements: Iterable[Requirement],
    platform: Optional[Platform] = None,
) -> Requires:
    """Reduce requirements to one version set per package.

    Lines whose platform tags do not apply to ``platform`` (default: the
    host) are skipped. Repeated packages are intersected, so the result
    does not depend on line order.
    """
    host = platform or Platform.current()
    requires: Requires = {}
    for req in requirements:
        if not host.applies(req.system):
            logger.debug("Skipping %r: not for this platform", req.content)
            continue
        if req.package in requires:
            requires[req.package] = requires[req.package] & req.versions
        else:
            requires[req.package] = req.versions
    return requires


def parse_file(path: Union[str, Path], platform: Optional[Platform] = None) -> Requires:
    """Read and aggregate a requirement file."""
    return parse(read_file(path), platform)


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


def add(
    lines: Sequence[Requirement],
    package: str,
    versions: Optional[VersionSet] = None,
) -> List[Requirement]:
    """Require ``package`` at ``versions`` on top of what ``lines`` already say.

    Unconditional lines for ``package`` are replaced by one canonical line
    holding the intersection of their versions with ``versions``; that
    line goes last. Lines with platform tags are kept. When a single
    existing line already lies within ``versions``, ``lines`` is returned
    unchanged (as a copy).

    Raises:
        InvalidRequirement: The combined version set is empty.
    """
    requested = VersionSet() if versions is None else versions

    existing: List[VersionSet] = []
    kept: List[Requirement] = []
    for line in lines:
        if line.package == package and not line.is_conditional:
            existing.append(line.versions)
        else:
            kept.append(line)

    if len(existing) == 1 and existing[0] == existing[0] & requested:
        logger.debug("%s already satisfies %s", package, requested)
        return list(lines)

    combined = reduce(VersionSet.intersect, existing, requested)
    kept.append(Requirement.from_versions(package, combined))
    return kept


def remove(lines: Sequence[Requirement], package: str) -> List[Requirement]:
    """Drop every line for ``package``, conditional or not."""
    return [line for line in lines if line.package != package]


def dependents(package: str, latest: Mapping[str, Available]) -> List[str]:
    """Packages whose latest published version requires ``package``."""
    return sorted(name for name, info in latest.items() if package in info.requires)


def group_by_package(requirements: Iterable[Requirement]) -> Dict[str, List[Requirement]]:
    """Group requirement lines by package, keeping file order within a group."""
    grouped: Dict[str, List[Requirement]] = {}
    for req in requirements:
        grouped.setdefault(req.package, []).append(req)
    return grouped
