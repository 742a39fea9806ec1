"""
Command-line interface for requirekit.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from requirekit.config import load_config
from requirekit.__version__ import __version__
from requirekit.context import RequireKitContext
from requirekit.exceptions import ConfigError, RequireKitError
from requirekit.utils.logger import get_logger, setup_logging, verbosity_to_level
from requirekit.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="REQUIREKIT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="REQUIREKIT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="requirekit",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """requirekit — inspect and edit REQUIRE files and installed package state.

    \b
    Available commands:
      requirekit show REQUIRE              Show aggregated requirements
      requirekit add REQUIRE PKG [V...]    Require a package
      requirekit rm REQUIRE PKG            Drop a package
      requirekit status ROOT               Classify installed packages

    Use ``requirekit COMMAND --help`` for command-specific options.
    """
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    requirekit_ctx = RequireKitContext()
    requirekit_ctx.config_path = config or loaded_config.source_path
    requirekit_ctx.color = color
    requirekit_ctx.verbose = verbose
    requirekit_ctx.config = loaded_config
    ctx.obj = requirekit_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("requirekit v%s", __version__)
    logger.debug("Config path: %s", requirekit_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


from requirekit.commands.edit import add, rm  # noqa: E402
from requirekit.commands.show import show  # noqa: E402
from requirekit.commands.status import status  # noqa: E402

cli.add_command(show)
cli.add_command(add)
cli.add_command(rm)
cli.add_command(status)


def main() -> int:
    """Main entry point for the requirekit CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("Aborted")
        return 1

    except RequireKitError as exc:
        print_error(str(exc))
        logger.debug("RequireKitError details: %s", exc.details or "<none>", exc_info=True)
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
