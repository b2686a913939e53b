"""
Configuration loading for pinkeeper.

Settings live either in ``pinkeeper.toml`` under ``[pinkeeper]`` or in
``pyproject.toml`` under ``[tool.pinkeeper]``. The file is chosen in this
order:

1. ``--config`` / ``PINKEEPER_CONFIG``
2. ``pinkeeper.toml`` in the working directory
3. ``pyproject.toml`` in the working directory, if it has the table

Command-line options override the file, which overrides the defaults.

Example (``pinkeeper.toml``)::

    [pinkeeper]
    policy = "minor"
    manifest = "requirements/base.in"
    lock_file = "requirements/base.txt"
    query_command = "pip index versions {name} --pre"
    query_timeout = 30
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

from pinkeeper.exceptions import ConfigError
from pinkeeper.models.version import PinPolicy
from pinkeeper.utils.logger import get_logger
from pinkeeper.constants import (
    DEFAULT_BACKUP,
    DEFAULT_LOCK_FILE,
    DEFAULT_MANIFEST_FILE,
    DEFAULT_POLICY,
    DEFAULT_QUERY_COMMAND,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "pinkeeper.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


@dataclass
class PinKeeperConfig:
    """Resolved settings; every field has a default.

    Attributes:
        policy: Pin policy used when ``--policy`` is not given.
        manifest: Editable requirements file that receives the pins.
        lock_file: Compiled file holding the currently locked versions.
        query_command: Registry query for one package, with ``{name}``.
        batch_query_command: Optional registry query for many packages,
            with ``{names}``; its output must have one
            ``name (v1, v2, ...)`` line per package.
        query_timeout: Seconds before a registry query is abandoned.
        backup: Keep a timestamped copy of the manifest before rewriting.
        source_path: File the settings came from, if any.
    """

    policy: PinPolicy = PinPolicy(DEFAULT_POLICY)
    manifest: str = DEFAULT_MANIFEST_FILE
    lock_file: str = DEFAULT_LOCK_FILE
    query_command: str = DEFAULT_QUERY_COMMAND
    batch_query_command: Optional[str] = None
    query_timeout: Optional[float] = None
    backup: bool = DEFAULT_BACKUP

    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """User-facing settings as plain values, for debug logging."""
        return {
            "policy": str(self.policy),
            "manifest": self.manifest,
            "lock_file": self.lock_file,
            "query_command": self.query_command,
            "batch_query_command": self.batch_query_command,
            "query_timeout": self.query_timeout,
            "backup": self.backup,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Return the configuration file to use, or ``None`` for defaults.

    Raises:
        ConfigError: ``explicit_path`` was given but is not a file.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        return resolved

    cwd = Path.cwd()
    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate

    pyproject = cwd / PYPROJECT_FILE_NAME
    if pyproject.is_file() and _pyproject_has_pinkeeper_section(pyproject):
        return pyproject

    logger.debug("No %s or [tool.pinkeeper] table in %s", CONFIG_FILE_NAME, cwd)
    return None


def _pyproject_has_pinkeeper_section(path: Path) -> bool:
    """An unreadable or malformed pyproject.toml counts as having no table."""
    try:
        return "pinkeeper" in _read_toml(path).get("tool", {})
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False


def load_config(config_path: Optional[Path] = None) -> PinKeeperConfig:
    """Discover, read and validate the configuration.

    Raises:
        ConfigError: The file cannot be parsed or holds invalid settings.
    """
    path = discover_config_file(config_path)
    if path is None:
        return PinKeeperConfig()

    logger.info("Loading configuration from %s", path)
    document = _read_toml(path)
    if path.name == PYPROJECT_FILE_NAME:
        section = document.get("tool", {}).get("pinkeeper", {})
    else:
        section = document.get("pinkeeper", {})

    config = _parse_section(section, config_path=str(path)) if section else PinKeeperConfig()
    config.source_path = path
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path.name}: {exc}", config_path=str(path)) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}", config_path=str(path)
        ) from exc


# ---------------------------------------------------------------------------
# Option validation
# ---------------------------------------------------------------------------


def _policy(value: Any) -> PinPolicy:
    if not isinstance(value, str):
        raise ValueError(f"policy must be a string, got {type(value).__name__}")
    return PinPolicy.from_string(value)


def _text(option: str, placeholder: Optional[str] = None) -> Callable[[Any], str]:
    def validate(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{option} must be a non-empty string, got {value!r}")
        if placeholder and placeholder not in value:
            raise ValueError(f"{option} must contain a '{placeholder}' placeholder")
        return value

    return validate


def _timeout(value: Any) -> float:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"query_timeout must be a positive number, got {value!r}")
    return float(value)


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"backup must be a boolean, got {type(value).__name__}")
    return value


_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "policy": _policy,
    "manifest": _text("manifest"),
    "lock_file": _text("lock_file"),
    "query_command": _text("query_command", "{name}"),
    "batch_query_command": _text("batch_query_command", "{names}"),
    "query_timeout": _timeout,
    "backup": _flag,
}


def _parse_section(section: Dict[str, Any], *, config_path: str) -> PinKeeperConfig:
    """Build a :class:`PinKeeperConfig` from a ``[pinkeeper]`` table.

    Raises:
        ConfigError: Unknown key, wrong type or invalid value.
    """
    unknown = sorted(set(section) - set(_VALIDATORS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            config_path=config_path,
        )

    config = PinKeeperConfig()
    for option, value in section.items():
        try:
            setattr(config, option, _VALIDATORS[option](value))
        except ValueError as exc:
            raise ConfigError(str(exc), config_path=config_path, option=option) from exc
    return config
