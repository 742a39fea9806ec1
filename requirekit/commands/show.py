"""Show command implementation for requirekit.

Reads a ``REQUIRE`` file and prints the version set each package is
constrained to on the selected platform, together with how many lines
mention it.

Typical usage::

    # Aggregated view for the host platform
    $ requirekit show REQUIRE

    # Evaluate @tag lines as if running on windows
    $ requirekit show REQUIRE --platform windows

    # Canonical one-line-per-package text
    $ requirekit show REQUIRE --format simple
"""

from __future__ import annotations

import sys
import click
from pathlib import Path
from typing import Any, Dict, List, Optional

from requirekit.constants import PLATFORM_TAGS
from requirekit.context import RequireKitContext, pass_context
from requirekit.core.parser import format_requires, group_by_package, parse, read_file
from requirekit.exceptions import RequireKitError
from requirekit.models import Requirement, Requires
from requirekit.utils import (
    get_logger,
    get_raw_console,
    print_error,
    print_table,
    print_warning,
    resolve_platform,
)

logger = get_logger("commands.show")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default="REQUIRE",
)
@click.option(
    "--platform",
    "-p",
    type=click.Choice(PLATFORM_TAGS, case_sensitive=False),
    default=None,
    help="Platform family used to evaluate @tag lines (default: config, then host).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def show(
    ctx: RequireKitContext,
    file: Path,
    platform: Optional[str],
    format: str,
) -> None:
    """Show the aggregated requirements of a REQUIRE file.

    Repeated lines for a package are intersected, and lines whose
    platform tags do not apply are skipped.

    Exits:
        0 on success, 1 if the file cannot be read or parsed.
    """
    try:
        _show(ctx, file, platform, format)
    except RequireKitError as e:
        print_error(f"{e}")
        sys.exit(1)


def _show(ctx: RequireKitContext, file: Path, platform: Optional[str], format: str) -> None:
    config = ctx.get_config()
    host = resolve_platform(platform or config.platform)
    logger.info("Reading %s for %s", file, ", ".join(host.families) or "unknown platform")

    lines = read_file(file)
    if not lines:
        print_warning("No requirements found")
        return

    requires = parse(lines, host)
    if format == "simple":
        # Canonical text is meant to be piped; bypass Rich wrapping
        click.echo(format_requires(requires), nl=False)
        return

    _display_table(requires, group_by_package(lines))

    skipped = sorted(set(group_by_package(lines)) - set(requires), key=str.lower)
    if skipped:
        get_raw_console().print(
            f"\n[dim]Not required on this platform: {', '.join(skipped)}[/dim]"
        )


def _display_table(requires: Requires, grouped: Dict[str, List[Requirement]]) -> None:
    data: List[Dict[str, Any]] = []
    for package in sorted(requires, key=str.lower):
        versions = requires[package]
        data.append(
            {
                "Package": package,
                "Versions": "∅" if versions.is_empty else str(versions),
                "Lines": len(grouped.get(package, [])),
            }
        )

    column_styles: Dict[str, Dict[str, Any]] = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Versions": {"justify": "left"},
        "Lines": {"justify": "right", "style": "dim"},
    }
    print_table(data, title="Requirements", column_styles=column_styles)
