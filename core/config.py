"""Configuration management for the plugin runner."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError, wrap_exception

ENV_PREFIX = "RUNNER__"


class PluginConfig(BaseModel):
    """One entry of the ``plugins`` list.

    Exactly one source is used, checked in this order: ``inline`` (an object
    supplied from Python), ``path`` (a file pattern resolved against the
    config directory) and ``package`` (an importable module name). Unknown
    keys are kept so plugins can read their own settings.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    name: str | None = None
    path: str | None = None
    package: str | None = None
    inline: Any = None

    def has_source(self) -> bool:
        """Return whether the entry names an inline object, a path or a package."""
        return self.inline is not None or bool(self.path) or bool(self.package)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = "INFO"
    format: str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    file_path: str | None = None
    json_format: bool = False


class RunnerConfig(BaseModel):
    """Top-level runner configuration model."""

    model_config = ConfigDict(extra="allow")

    config_dir: str | None = None
    plugins: list[PluginConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Load and validate runner configuration from TOML files or dicts."""

    def __init__(self, defaults: RunnerConfig | None = None) -> None:
        self._defaults = defaults or RunnerConfig()

    @property
    def defaults(self) -> RunnerConfig:
        """Return default configuration."""
        return self._defaults

    def load(self, path: str | Path) -> RunnerConfig:
        """Load a TOML file; ``config_dir`` defaults to the file's directory."""
        config_path = Path(path)
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise wrap_exception(
                exc,
                ConfigurationError,
                f"Cannot read runner config: {config_path}",
                context={"path": str(config_path)},
            ) from exc

        data.setdefault("config_dir", str(config_path.resolve().parent))
        return self.from_dict(data)

    def from_dict(self, data: dict[str, Any]) -> RunnerConfig:
        """Validate configuration from dict, merged onto defaults and env vars."""
        merged = _deep_merge(
            self._defaults.model_dump(mode="python", exclude={"plugins"}),
            data,
        )
        merged.setdefault("plugins", [])
        merged_with_env = _apply_env_overrides(merged)
        try:
            return RunnerConfig.model_validate(merged_with_env)
        except ValidationError as exc:
            raise wrap_exception(
                exc, ConfigurationError, "Invalid runner configuration"
            ) from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply env overrides using RUNNER__A__B style keys."""
    overridden = dict(config)
    for key in ("logging",):
        if isinstance(overridden.get(key), dict):
            overridden[key] = deepcopy(overridden[key])

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        path = key[len(ENV_PREFIX) :].strip("_")
        keys = [part.lower() for part in path.split("__") if part]
        if not keys or keys[0] == "plugins":
            continue

        _set_nested(overridden, keys, _parse_env_value(raw_value))

    return overridden


def _set_nested(root: dict[str, Any], keys: list[str], value: Any) -> None:
    current: dict[str, Any] = root
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def _parse_env_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return lowered == "true"

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
