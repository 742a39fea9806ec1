"""Configuration file loader for requirekit.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``requirekit.toml`` — settings under ``[requirekit]`` table
- ``pyproject.toml`` — settings under ``[tool.requirekit]`` table

Discovery order:

1. Explicit path from ``--config`` or ``REQUIREKIT_CONFIG``
2. ``requirekit.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.requirekit]`` section

Example (``requirekit.toml``)::

    [requirekit]
    platform = "linux"
    runtime_name = "python"
    dont_update = ["Compat"]
    use_cache = true
"""

from __future__ import annotations

import tomli
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from requirekit.constants import DEFAULT_RUNTIME_NAME, DEFAULT_USE_CACHE, PLATFORM_TAGS
from requirekit.exceptions import ConfigError
from requirekit.utils.logger import get_logger
from requirekit.utils.platform import Platform, resolve_platform

logger = get_logger("config")


@dataclass
class RequireKitConfig:
    """Parsed and validated requirekit configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        platform: Platform family used to evaluate ``@tag`` lines, or
            ``None`` to detect the host.
        runtime_name: Package name of the runtime entry in the fixed set.
        dont_update: Installed packages always treated as fixed.
        use_cache: Reuse published metadata while its commit is unchanged.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    platform: Optional[str] = None
    runtime_name: str = DEFAULT_RUNTIME_NAME
    dont_update: List[str] = field(default_factory=list)
    use_cache: bool = DEFAULT_USE_CACHE

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def resolved_platform(self) -> Platform:
        return resolve_platform(self.platform)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "platform": self.platform,
            "runtime_name": self.runtime_name,
            "dont_update": list(self.dont_update),
            "use_cache": self.use_cache,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    requirekit_toml = cwd / "requirekit.toml"
    if requirekit_toml.is_file():
        logger.debug("Found requirekit.toml: %s", requirekit_toml)
        return requirekit_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.requirekit] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check whether ``pyproject.toml`` has a ``[tool.requirekit]`` table.

    An unreadable or invalid file counts as not having one.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "requirekit" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> RequireKitConfig:
    """Load and validate requirekit configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`RequireKitConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return RequireKitConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("requirekit", {})
    else:
        section = raw.get("requirekit", {})

    if not section:
        logger.debug("Config file found but no requirekit section, using defaults")
        return RequireKitConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomli.load(fh)
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> RequireKitConfig:
    """Validate a ``[requirekit]`` / ``[tool.requirekit]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = RequireKitConfig()

    known = {"platform", "runtime_name", "dont_update", "use_cache"}
    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "platform" in section:
        val = section["platform"]
        if not isinstance(val, str) or val not in PLATFORM_TAGS:
            raise ConfigError(
                f"platform must be one of {', '.join(PLATFORM_TAGS)}, got {val!r}",
                config_path=config_path,
                option="platform",
            )
        config.platform = val

    if "runtime_name" in section:
        val = section["runtime_name"]
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(
                "runtime_name must be a non-empty string",
                config_path=config_path,
                option="runtime_name",
            )
        config.runtime_name = val.strip()

    if "dont_update" in section:
        val = section["dont_update"]
        if not isinstance(val, list) or not all(isinstance(item, str) for item in val):
            raise ConfigError(
                "dont_update must be a list of package names",
                config_path=config_path,
                option="dont_update",
            )
        config.dont_update = list(val)

    if "use_cache" in section:
        val = section["use_cache"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"use_cache must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="use_cache",
            )
        config.use_cache = val

    return config
