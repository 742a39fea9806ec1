"""Add and remove commands for requirekit.

Both commands rewrite a ``REQUIRE`` file in place. Lines for other
packages, and platform-tagged lines for the edited package when adding,
are left exactly as they were.

Typical usage::

    # Require Compat in [0.9.0, 2.0.0)
    $ requirekit add REQUIRE Compat 0.9.0 2.0.0

    # Drop every line mentioning Gtk, keeping a backup copy
    $ requirekit rm REQUIRE Gtk --backup
"""

from __future__ import annotations

import sys
import click
from pathlib import Path
from typing import Optional, Sequence, Tuple

from requirekit.constants import RESERVED_NAMES
from requirekit.context import RequireKitContext, pass_context
from requirekit.core.parser import add as add_requirement
from requirekit.core.parser import read_file, remove, write_file
from requirekit.exceptions import RequireKitError
from requirekit.models import VersionSet, parse_version
from requirekit.utils import get_logger, print_error, print_success, print_warning

logger = get_logger("commands.edit")

_FILE_ARGUMENT = click.argument(
    "file",
    type=click.Path(dir_okay=False, path_type=Path),
)
_BACKUP_OPTION = click.option(
    "--backup/--no-backup",
    default=False,
    help="Keep a timestamped copy of the file before rewriting it.",
)


def _parse_versions(values: Sequence[str]) -> VersionSet:
    """Turn ``VERSION...`` arguments into a version set.

    Raises:
        click.BadParameter: A token is not a version, or bounds are not
            strictly increasing.
    """
    try:
        return VersionSet.from_bounds([parse_version(value) for value in values])
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="VERSION") from exc


def _check_package_name(package: str) -> None:
    if package in RESERVED_NAMES or package.startswith("."):
        raise click.BadParameter(f"{package!r} is not a package name", param_hint="PACKAGE")


def _report_write(file: Path, backup_path: Optional[Path]) -> None:
    if backup_path is not None:
        logger.info("Backup written to %s", backup_path)
    print_success(f"Updated {file}")


@click.command()
@_FILE_ARGUMENT
@click.argument("package")
@click.argument("versions", nargs=-1, metavar="[VERSION]...")
@_BACKUP_OPTION
@pass_context
def add(
    ctx: RequireKitContext,
    file: Path,
    package: str,
    versions: Tuple[str, ...],
    backup: bool,
) -> None:
    """Require PACKAGE in FILE, narrowed to the given VERSION bounds.

    Bounds come in pairs ``LOWER UPPER``; an odd trailing bound leaves
    the last range open. Existing unconditional lines for PACKAGE are
    merged with the new bounds into a single line. The file is created
    when it does not exist.

    Exits:
        0 on success, 1 if the file cannot be read or the result is
        unsatisfiable.
    """
    _check_package_name(package)
    requested = _parse_versions(versions)

    try:
        lines = read_file(file)
        updated = add_requirement(lines, package, requested)
        if updated == lines and file.exists():
            print_success(f"{package} already satisfies {requested}")
            return
        _report_write(file, write_file(file, updated, backup=backup))
    except RequireKitError as e:
        print_error(f"{e}")
        sys.exit(1)


@click.command()
@_FILE_ARGUMENT
@click.argument("package")
@_BACKUP_OPTION
@pass_context
def rm(
    ctx: RequireKitContext,
    file: Path,
    package: str,
    backup: bool,
) -> None:
    """Remove every line for PACKAGE from FILE.

    Exits:
        0 on success (including when PACKAGE is not mentioned), 1 if the
        file cannot be read or written.
    """
    try:
        lines = read_file(file)
        updated = remove(lines, package)
        if len(updated) == len(lines):
            print_warning(f"{package} is not required in {file}")
            return
        _report_write(file, write_file(file, updated, backup=backup))
    except RequireKitError as e:
        print_error(f"{e}")
        sys.exit(1)
