"""Configuration for cronexpr.

Configuration is read from three places, later ones overriding earlier:

    defaults  ->  config file (YAML or JSON)  ->  CRONEXPR_* environment

Usage:
    >>> from cronexpr.config import load_config
    >>> config = load_config("cronexpr.yaml")
    >>> config.datetime_format
    '%Y-%m-%d %H:%M:%S'

Environment variables:
    - CRONEXPR_CONFIG: Path of a config file to load
    - CRONEXPR_DATETIME_FORMAT: strftime pattern for printed fire times
    - CRONEXPR_STRICT_DAY_PAIRING: Reject expressions without exactly one '?'
    - CRONEXPR_LOG_LEVEL: Log level name
    - CRONEXPR_LOG_FORMAT: "console" or "json"
    - CRONEXPR_DEFAULT_COUNT: Number of fire times listed by default
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from cronexpr.errors import ConfigError
from cronexpr.formatter import DEFAULT_DATETIME_FORMAT

ENV_PREFIX = "CRONEXPR_"
CONFIG_PATH_VAR = "CRONEXPR_CONFIG"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("console", "json")
_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


@dataclass(frozen=True)
class CronConfig:
    """Settings shared by the API helpers and the command line."""

    datetime_format: str = DEFAULT_DATETIME_FORMAT
    strict_day_pairing: bool = False
    log_level: str = "WARNING"
    log_format: str = "console"
    default_count: int = 5

    def __post_init__(self) -> None:
        errors = []
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        if self.log_format not in _LOG_FORMATS:
            errors.append(f"log_format must be one of {', '.join(_LOG_FORMATS)}")
        if self.default_count < 1:
            errors.append("default_count must be greater than 0")
        if not self.datetime_format:
            errors.append("datetime_format must not be empty")
        if errors:
            raise ConfigError(f"Invalid configuration: {'; '.join(errors)}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CronConfig":
        """Build a config from a mapping, converting string values.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, raw in data.items():
            default = getattr(cls, key)
            values[key] = _coerce(key, raw, type(default))
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CronConfig":
        """Build a config from ``CRONEXPR_*`` environment variables."""
        return cls.from_dict(_env_values(os.environ if environ is None else environ))

    @classmethod
    def from_file(cls, path: str | Path) -> "CronConfig":
        """Build a config from a YAML or JSON file."""
        return cls.from_dict(_read_file(Path(path)))

    def merge(self, overrides: Mapping[str, Any]) -> "CronConfig":
        """Return a copy with ``overrides`` applied."""
        data = asdict(self)
        data.update(overrides)
        return CronConfig.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CronConfig:
    """Load configuration from defaults, a file, and the environment.

    Args:
        path: Config file path. Falls back to ``CRONEXPR_CONFIG``.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Merged configuration.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get(CONFIG_PATH_VAR) or None

    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_file(Path(path)))
    data.update(_env_values(env))
    return CronConfig.from_dict(data)


# =============================================================================
# Helpers
# =============================================================================


def _env_values(environ: Mapping[str, str]) -> dict[str, str]:
    names = {f.name for f in fields(CronConfig)}
    result = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_PATH_VAR:
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in names:
            result[name] = value
    return result


def _read_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content)
        else:
            raise ConfigError(f"Unsupported file format: {suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def _coerce(key: str, value: Any, target: type) -> Any:
    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        raise ConfigError(f"{key} must be a boolean, got {value!r}")

    if target is int:
        if isinstance(value, bool):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key} must be an integer, got {value!r}") from e

    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    return value
