"""Configuration file loader for portkeeper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``portkeeper.toml`` with settings under a ``[portkeeper]`` table
- ``pyproject.toml`` with settings under a ``[tool.portkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``PORTKEEPER_CONFIG``
2. ``portkeeper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.portkeeper]`` section

Configuration precedence: defaults < config file < environment < CLI args.
The first three are applied here; CLI options are layered on top by
:class:`~portkeeper.context.PortKeeperContext`.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``portkeeper.toml``)::

    [portkeeper]
    database = "/var/db/portkeeper/installed.json"
    index = "/var/db/portkeeper/index.json"
    os_release = "13.2"
    delete_command = "pkg-delete-helper --force"
"""

from __future__ import annotations

import os
import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, field

from portkeeper.exceptions import ConfigError
from portkeeper.utils.logger import get_logger
from portkeeper.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_BACKUP,
    DEFAULT_DATABASE_PATH,
    DEFAULT_INDEX_PATH,
    ENV_DATABASE,
    ENV_INDEX,
    ENV_OS_RELEASE,
)

logger = get_logger("config")

_PATH_KEYS = ("database", "index")
_STRING_KEYS = ("os_release", "delete_command")
_BOOL_KEYS = ("backup",)


@dataclass
class PortKeeperConfig:
    """Parsed and validated portkeeper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        database_path: JSON database of installed packages.
        index_path: Downloaded index of available packages.
        os_release: Override for the running system's OS release. ``None``
            asks the kernel.
        delete_command: External program used to delete one package. ``None``
            edits the database directly.
        backup: Keep a timestamped copy of the database before each write.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    database_path: Path = field(default_factory=lambda: Path(DEFAULT_DATABASE_PATH))
    index_path: Path = field(default_factory=lambda: Path(DEFAULT_INDEX_PATH))
    os_release: Optional[str] = None
    delete_command: Optional[str] = None
    backup: bool = DEFAULT_BACKUP

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "database": str(self.database_path),
            "index": str(self.index_path),
            "os_release": self.os_release,
            "delete_command": self.delete_command,
            "backup": self.backup,
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

    portkeeper_toml = cwd / CONFIG_FILE_NAME
    if portkeeper_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, portkeeper_toml)
        return portkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_portkeeper_section(pyproject_toml):
        logger.debug("Found [tool.portkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_portkeeper_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.portkeeper]`` section.

    A pyproject.toml that cannot be parsed is treated as having no section;
    it belongs to some other tool.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return False
    return "portkeeper" in raw.get("tool", {})


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PortKeeperConfig:
    """Load and validate portkeeper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).
        environ: Environment used for overrides. Defaults to ``os.environ``.

    Returns:
        Validated :class:`PortKeeperConfig` with file and environment values
        applied over the defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        config = PortKeeperConfig()
    else:
        logger.info("Loading configuration from %s", resolved)
        raw = _read_toml(resolved)

        if resolved.name == "pyproject.toml":
            section = raw.get("tool", {}).get("portkeeper", {})
        else:
            section = raw.get("portkeeper", {})

        if not isinstance(section, dict):
            raise ConfigError(
                "portkeeper configuration must be a table",
                config_path=str(resolved),
            )

        config = _parse_section(section, config_path=str(resolved))
        config.source_path = resolved

    apply_environment(config, os.environ if environ is None else environ)

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def apply_environment(config: PortKeeperConfig, environ: Mapping[str, str]) -> None:
    """Override *config* in place from ``PORTKEEPER_*`` variables.

    Empty variables are ignored.
    """
    database = environ.get(ENV_DATABASE)
    if database:
        config.database_path = Path(database)

    index = environ.get(ENV_INDEX)
    if index:
        config.index_path = Path(index)

    os_release = environ.get(ENV_OS_RELEASE)
    if os_release:
        config.os_release = os_release


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


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PortKeeperConfig:
    """Parse and validate the ``[portkeeper]`` or ``[tool.portkeeper]`` table.

    Relative paths are resolved against the directory holding the config
    file.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = PortKeeperConfig()

    known = set(_PATH_KEYS) | set(_STRING_KEYS) | set(_BOOL_KEYS)
    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for key in _PATH_KEYS + _STRING_KEYS:
        if key in section and not isinstance(section[key], str):
            raise ConfigError(
                f"{key} must be a string, got {type(section[key]).__name__}",
                config_path=config_path,
                option=key,
            )

    for key in _BOOL_KEYS:
        if key in section and not isinstance(section[key], bool):
            raise ConfigError(
                f"{key} must be a boolean, got {type(section[key]).__name__}",
                config_path=config_path,
                option=key,
            )

    base = Path(config_path).parent
    if "database" in section:
        config.database_path = base / Path(section["database"]).expanduser()
    if "index" in section:
        config.index_path = base / Path(section["index"]).expanduser()
    if "os_release" in section:
        config.os_release = section["os_release"] or None
    if "delete_command" in section:
        config.delete_command = section["delete_command"] or None
    if "backup" in section:
        config.backup = section["backup"]

    return config
