"""
Configuration loading.

The config file is YAML (default ~/.gush.yml). Keys may sit under a
top-level `parameters` mapping or at the root:

    parameters:
        github:
            token: env:GITHUB_TOKEN
            base_url: https://api.github.com
        remote: origin

Nested values are read with dotted keys, e.g. get("github.token").
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .harness.errors import ConfigError

CONFIG_ENV_VAR = "GUSH_CONFIG"
DEFAULT_CONFIG_NAME = ".gush.yml"


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / DEFAULT_CONFIG_NAME


class Config:
    """Read-only key lookup over the loaded configuration."""

    def __init__(self, parameters: Mapping[str, Any] | None = None, path: Path | None = None):
        self._parameters = dict(parameters or {})
        self.path = path

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._parameters:
            return self._parameters[key]

        current: Any = self._parameters
        for part in key.split("."):
            if not isinstance(current, Mapping) or part not in current:
                return default
            current = current[part]
        return current

    @classmethod
    def from_yaml(cls, text: str, path: Path | None = None) -> Config:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        parameters = data.get("parameters", data)
        if not isinstance(parameters, dict):
            raise ConfigError("'parameters' must be a mapping")
        return cls(parameters, path=path)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """
        Load configuration from path (or the default location).

        A missing file yields an empty config; an unreadable or malformed
        file raises ConfigError.
        """
        path = path or default_config_path()
        if not path.exists():
            return cls({}, path=path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        return cls.from_yaml(text, path=path)
