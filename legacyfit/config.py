"""Configuration file loader for legacyfit.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``legacyfit.toml`` — settings under ``[legacyfit]`` table
- ``pyproject.toml`` — settings under ``[tool.legacyfit]`` table

Discovery order:

1. Explicit path from ``--config`` or ``LEGACYFIT_CONFIG``
2. ``legacyfit.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.legacyfit]`` section

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``legacyfit.toml``)::

    [legacyfit]
    search_root = "/Volumes/Legacy/Applications"
    catalog_url = "https://example.org/legacyfit/catalog.plist"
    refresh_catalog = true
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from legacyfit.exceptions import ConfigError
from legacyfit.utils.logger import get_logger
from legacyfit.constants import (
    DEFAULT_CATALOG_URL,
    DEFAULT_REFRESH_CATALOG,
    DEFAULT_SEARCH_ROOT,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "legacyfit.toml"


@dataclass
class LegacyFitConfig:
    """Parsed and validated legacyfit configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        search_root: Directory scanned for installed applications.
        catalog_url: Remote catalog document merged over the built-in
            targets. Empty means built-in targets only.
        refresh_catalog: Fetch ``catalog_url`` before every check.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    search_root: str = DEFAULT_SEARCH_ROOT
    catalog_url: str = DEFAULT_CATALOG_URL
    refresh_catalog: bool = DEFAULT_REFRESH_CATALOG

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "search_root": self.search_root,
            "catalog_url": self.catalog_url,
            "refresh_catalog": self.refresh_catalog,
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

    legacyfit_toml = cwd / CONFIG_FILE_NAME
    if legacyfit_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, legacyfit_toml)
        return legacyfit_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_legacyfit_section(pyproject_toml):
        logger.debug("Found [tool.legacyfit] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_legacyfit_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.legacyfit] section.

    An unparseable pyproject.toml is treated as having no section.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "legacyfit" in tool


def load_config(config_path: Optional[Path] = None) -> LegacyFitConfig:
    """Load and validate legacyfit configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`LegacyFitConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return LegacyFitConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("legacyfit", {})
    else:
        section = raw.get("legacyfit", {})

    if not section:
        logger.debug("Config file found but no legacyfit section, using defaults")
        return LegacyFitConfig(source_path=resolved)

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
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_OPTION_TYPES = {
    "search_root": str,
    "catalog_url": str,
    "refresh_catalog": bool,
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> LegacyFitConfig:
    """Parse and validate the ``[legacyfit]`` or ``[tool.legacyfit]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    if not isinstance(section, dict):
        raise ConfigError(
            "legacyfit configuration must be a table",
            config_path=config_path,
        )

    unknown = set(section.keys()) - set(_OPTION_TYPES)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = LegacyFitConfig()
    for option, expected in _OPTION_TYPES.items():
        if option not in section:
            continue
        value = section[option]
        if not isinstance(value, expected):
            kind = "a boolean" if expected is bool else "a string"
            raise ConfigError(
                f"{option} must be {kind}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, value)

    if not config.search_root:
        raise ConfigError(
            "search_root must not be empty",
            config_path=config_path,
            option="search_root",
        )

    return config
