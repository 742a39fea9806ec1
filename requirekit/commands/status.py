"""Status command implementation for requirekit.

Inspects every installed package under a package root and reports where
its checkout sits relative to the published versions, and whether a
resolver would have to keep it (fixed) or may change it (free).

The command wires together three core components:

1. **available** reads published metadata from the metadata checkout,
   reusing the invocation's :class:`AvailableCache`.
2. **StateInspector** classifies each installed checkout.
3. **fixed / free** split the result into resolver input.

Typical usage::

    $ requirekit status ~/.pkgs
    $ requirekit status ~/.pkgs --dont-update Compat --cache-root ~/.pkgs/.cache
"""

from __future__ import annotations

import sys
import click
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from requirekit.constants import METADATA_DIR, PLATFORM_TAGS
from requirekit.context import RequireKitContext, pass_context
from requirekit.core import StateInspector, available
from requirekit.exceptions import MetadataError, RequireKitError
from requirekit.models import Fixed, InstalledState, VersionNumber
from requirekit.utils import (
    colorize_status,
    get_logger,
    get_raw_console,
    print_advisories,
    print_error,
    print_table,
    print_warning,
    resolve_platform,
)
from requirekit.vcs import GitCLI, VersionControl

logger = get_logger("commands.status")


@click.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--metadata",
    "-m",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Published metadata checkout (default: ROOT/{METADATA_DIR}).",
)
@click.option(
    "--cache-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory of per-package clone caches searched for commits.",
)
@click.option(
    "--platform",
    "-p",
    type=click.Choice(PLATFORM_TAGS, case_sensitive=False),
    default=None,
    help="Platform family used to evaluate @tag lines.",
)
@click.option(
    "--dont-update",
    multiple=True,
    help="Treat PACKAGE as fixed (repeatable; added to the config list).",
    metavar="PACKAGE",
)
@pass_context
def status(
    ctx: RequireKitContext,
    root: Path,
    metadata: Optional[Path],
    cache_root: Optional[Path],
    platform: Optional[str],
    dont_update: Tuple[str, ...],
) -> None:
    """Classify installed packages under ROOT as fixed or free.

    Exits:
        0 on success, 1 if metadata or a checkout cannot be read.
    """
    try:
        _status(ctx, root, metadata, cache_root, platform, dont_update, GitCLI())
    except RequireKitError as e:
        print_error(f"{e}")
        sys.exit(1)


def _status(
    ctx: RequireKitContext,
    root: Path,
    metadata: Optional[Path],
    cache_root: Optional[Path],
    platform: Optional[str],
    dont_update: Tuple[str, ...],
    vcs: VersionControl,
) -> None:
    config = ctx.get_config()
    host = resolve_platform(platform or config.platform)
    held = sorted(set(config.dont_update) | set(dont_update))

    inspector = StateInspector(
        root,
        vcs,
        metadata_path=metadata,
        cache_root=cache_root,
        platform=host,
        runtime_name=config.runtime_name,
    )
    if not vcs.is_repository(inspector.metadata_path):
        raise MetadataError(
            "metadata checkout is not a repository",
            path=str(inspector.metadata_path),
        )

    logger.info("Reading published metadata from %s", inspector.metadata_path)
    avail = available(
        inspector.metadata_path,
        vcs,
        cache=ctx.cache if config.use_cache else None,
        platform=host,
    )

    result = inspector.installed(avail)
    if not result.value:
        print_warning(f"No installed packages under {root}")
        return

    fixed = inspector.fixed(avail, result.value, held)
    free = inspector.free(result.value, held)
    if inspector.runtime_name in result.value:
        print_warning(
            f"Installed package {inspector.runtime_name} is shadowed by the runtime entry"
        )

    _display_table(result.value, fixed, free)
    fixed_count = len(result.value) - len(free)
    get_raw_console().print(
        f"\n{fixed_count} fixed, {len(free)} free "
        f"({inspector.runtime_name} held at {fixed[inspector.runtime_name].version})"
    )

    if print_advisories(result.advisories):
        logger.debug("Reported %d advisory(ies)", len(result.advisories))


def _display_table(
    installed: Mapping[str, InstalledState],
    fixed: Mapping[str, Fixed],
    free: Mapping[str, VersionNumber],
) -> None:
    data: List[Dict[str, Any]] = []
    for package in sorted(installed, key=str.lower):
        state = installed[package]
        if package not in free:
            mode = "[fixed]fixed[/fixed]" if state.fixed else "[fixed]held[/fixed]"
            requires = ", ".join(sorted(fixed[package].requires, key=str.lower)) or "-"
        else:
            mode = "free"
            requires = "-"
        data.append(
            {
                "Package": package,
                "Version": str(state.version),
                "Status": colorize_status(state.version.status),
                "Bound": str(state.version.bound),
                "Mode": mode,
                "Requires": requires,
            }
        )

    column_styles: Dict[str, Dict[str, Any]] = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Version": {"justify": "center"},
        "Status": {"justify": "center", "no_wrap": True},
        "Bound": {"justify": "center", "style": "dim"},
        "Mode": {"justify": "center"},
        "Requires": {"justify": "left"},
    }
    print_table(data, title="Installed Packages", column_styles=column_styles)
