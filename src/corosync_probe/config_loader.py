# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import ValidationError

from .config import CONFIG_SECTION, ConfigError, ProbeConfig

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")

DEFAULT_CONFIG_PATH: Final[Path] = Path("/etc/corosync-probe/corosync-probe.toml")


class ConfigSource(Protocol):
    """Provide a configuration fragment from a single origin."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the raw configuration fragment for this source."""

    def describe(self) -> str:
        """Return a human-readable description of the source."""


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return ProbeConfig().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load the ``[corosync]`` table from a TOML document."""

    def __init__(
        self,
        path: Path,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._path = path
        self.name = str(path)
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration at {self._path} is not valid TOML: {exc}") from exc
        section = data.get(CONFIG_SECTION, {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"[{CONFIG_SECTION}] in {self._path} must be a table")
        return _expand_env(section, self._env)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class MappingConfigSource:
    """Wrap an in-memory mapping, typically command-line overrides."""

    def __init__(self, data: Mapping[str, Any], *, name: str = "overrides") -> None:
        self._data = {key: value for key, value in data.items() if value is not None}
        self.name = name

    def load(self) -> Mapping[str, Any]:
        return dict(self._data)

    def describe(self) -> str:
        return f"Explicit {self.name}"


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        """Initialise a loader that merges ``sources`` in order.

        Args:
            sources: Ordered collection of configuration sources; later
                sources override earlier ones.
        """

        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)

    @classmethod
    def for_path(
        cls,
        config_path: Path | None = None,
        *,
        overrides: Mapping[str, Any] | None = None,
    ) -> ConfigLoader:
        """Build a loader for the defaults, a TOML file and explicit overrides.

        Args:
            config_path: TOML file to read; the system-wide default path is
                used when omitted and silently skipped when it does not exist.
            overrides: Optional values taking precedence over the file.

        Returns:
            ConfigLoader: Loader configured with default precedence ordering.

        Raises:
            ConfigError: If an explicitly requested file does not exist.
        """

        if config_path is not None and not config_path.exists():
            raise ConfigError(f"Configuration file {config_path} does not exist")
        path = config_path if config_path is not None else DEFAULT_CONFIG_PATH
        sources: list[ConfigSource] = [DefaultConfigSource(), TomlConfigSource(path)]
        if overrides:
            sources.append(MappingConfigSource(overrides))
        return cls(sources)

    def load(self) -> ProbeConfig:
        """Return the merged and validated configuration.

        Returns:
            ProbeConfig: Fully merged configuration model.

        Raises:
            ConfigError: If a source is malformed or the merged values are invalid.
        """

        merged: dict[str, Any] = {}
        for source in self._sources:
            merged = _deep_merge(merged, source.load())
        try:
            return ProbeConfig.model_validate(merged)
        except ValidationError as exc:
            origins = ", ".join(source.describe() for source in self._sources)
            raise ConfigError(f"Invalid configuration ({origins}): {exc}") from exc


def load_config(config_path: Path | None = None, *, overrides: Mapping[str, Any] | None = None) -> ProbeConfig:
    """Load configuration from the default sources plus ``overrides``."""
    return ConfigLoader.for_path(config_path, overrides=overrides).load()


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "MappingConfigSource",
    "TomlConfigSource",
    "load_config",
]
