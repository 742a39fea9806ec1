"""
Shared context object for requirekit CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from requirekit.config import RequireKitConfig
from requirekit.core.metadata import AvailableCache


class RequireKitContext:
    """Global context object for requirekit CLI commands.

    An instance of this class is created once per CLI invocation and
    passed to commands using Click's context mechanism.

    Attributes:
        config_path: Path to the requirekit configuration file, if provided.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; ``None`` until the group callback runs.
        cache: Published-metadata cache shared by commands of one invocation.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "cache")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[RequireKitConfig] = None
        self.cache: AvailableCache = AvailableCache()

    def get_config(self) -> RequireKitConfig:
        """Loaded configuration, or defaults when none was loaded."""
        return self.config if self.config is not None else RequireKitConfig()


#: Click decorator for injecting :class:`RequireKitContext` into commands.
pass_context = click.make_pass_decorator(RequireKitContext, ensure=True)
