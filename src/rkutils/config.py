"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field

from rkutils.errors import ConfigError, ConfigNotFoundError
from rkutils.paths import get_value_by_path, has_key_by_path, set_value_by_path

__all__ = ["Config", "ConfigSchema", "ShellSettings", "WaitUntilSettings"]

_logger = logging.getLogger(__name__)


class ShellSettings(BaseModel):
    """Settings for the shell command helpers."""

    model_config = ConfigDict(extra="forbid")

    encoding: str = "utf-8"


class WaitUntilSettings(BaseModel):
    """Polling defaults for ``wait_until``."""

    model_config = ConfigDict(extra="forbid")

    interval: float = Field(default=1.0, ge=0)
    max_rounds: int = Field(default=10, ge=0)


class ConfigSchema(BaseModel):
    """Known configuration sections. Unknown top-level sections are kept as-is."""

    model_config = ConfigDict(extra="allow")

    shell: ShellSettings = Field(default_factory=ShellSettings)
    wait_until: WaitUntilSettings = Field(default_factory=WaitUntilSettings)


class Config:
    """Configuration accessor with dot-path key support.

    Keys are dot-separated paths into the underlying dict, e.g.
    ``config.get("wait_until.interval")``.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data if data is not None else {}

    @classmethod
    def load(cls, yaml_path: str) -> Config:
        """Load and validate configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            A new Config holding the file's contents.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the YAML is malformed, is not a mapping, or fails
                validation.
        """
        if not os.path.isfile(yaml_path):
            raise ConfigNotFoundError(config_path=yaml_path)

        with open(yaml_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        config = cls(data)
        config.validate()
        _logger.debug("Loaded configuration from %s", yaml_path)
        return config

    @property
    def data(self) -> dict[str, Any]:
        """The underlying configuration dict."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        return get_value_by_path(self._data, key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-path key, creating missing sections."""
        set_value_by_path(self._data, key, value)

    def has(self, key: str) -> bool:
        """Return True if the dot-path key is present, even when its value is falsy."""
        return has_key_by_path(self._data, key)

    def validate(self) -> ConfigSchema:
        """Validate the known sections and return the typed view.

        Raises:
            ConfigError: With field-level errors when validation fails.
        """
        try:
            return ConfigSchema.model_validate(self._data)
        except pydantic.ValidationError as e:
            errors = [
                {
                    "field": ".".join(str(loc) for loc in err["loc"]),
                    "code": err["type"],
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            raise ConfigError("Configuration validation failed", errors=errors) from e


def config_value(config: Config | None, key: str, default: Any) -> Any:
    """Read ``key`` from an optional config, falling back to ``default``."""
    if config is None:
        return default
    val = config.get(key)
    return val if val is not None else default
