"""
Configuration management for PyObstacles.

This module provides:
- ObstacleConfig: Typed configuration dataclass
- ConfigManager: Central configuration management with environment support
- create_default_config: Factory function for default configurations
- load_config: Load configuration from YAML files
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pyobstacles.exceptions import ConfigNotFoundError, ConfigValidationError

DUPLICATE_POLICIES = ("reject", "overwrite")


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class RegistryConfig:
    """Obstacle registry configuration."""

    duplicate_policy: str = "reject"

    def validate(self) -> None:
        """Validate registry configuration."""
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigValidationError(
                "registry.duplicate_policy",
                f"must be one of {DUPLICATE_POLICIES}",
                self.duplicate_policy,
            )


@dataclass
class MessageConfig:
    """Prediction message decoding configuration."""

    strict: bool = True

    def validate(self) -> None:
        """Validate message configuration."""
        if not isinstance(self.strict, bool):
            raise ConfigValidationError("message.strict", "must be a boolean", self.strict)


@dataclass
class ObstacleConfig:
    """Complete PyObstacles configuration."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    message: MessageConfig = field(default_factory=MessageConfig)

    def validate(self) -> None:
        """Validate all configuration settings."""
        self.registry.validate()
        self.message.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "registry": {
                "duplicate_policy": self.registry.duplicate_policy,
            },
            "message": {
                "strict": self.message.strict,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObstacleConfig":
        """Create ObstacleConfig from dictionary."""
        registry_data = data.get("registry") or {}
        message_data = data.get("message") or {}

        return cls(
            registry=RegistryConfig(
                duplicate_policy=registry_data.get("duplicate_policy", "reject"),
            ),
            message=MessageConfig(
                strict=message_data.get("strict", True),
            ),
        )


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Central configuration management with environment variable support.

    Environment variables take precedence over config files.
    Config files take precedence over defaults.

    Environment variable format: PYOBSTACLES_<SECTION>_<KEY>
    Example: PYOBSTACLES_REGISTRY_DUPLICATE_POLICY=overwrite
    """

    ENV_PREFIX = "PYOBSTACLES"
    # Logging is configured through its own variables in pyobstacles.logging
    ENV_IGNORED_SECTIONS = ("log",)

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to YAML configuration file.
        """
        self._config: Optional[ObstacleConfig] = None
        self._config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}

    def load(self, validate: bool = True) -> ObstacleConfig:
        """Load and return configuration.

        Args:
            validate: Whether to validate configuration after loading.

        Returns:
            Loaded ObstacleConfig instance.
        """
        self._raw_config = create_default_config()

        if self._config_path:
            self._load_from_file(self._config_path)

        self._load_from_env()

        self._config = ObstacleConfig.from_dict(self._raw_config)

        if validate:
            self._config.validate()

        return self._config

    def _load_from_file(self, path: Path) -> None:
        """Load configuration from YAML file."""
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        with open(path, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config:
            self._deep_update(self._raw_config, file_config)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(f"{self.ENV_PREFIX}_"):
                config_key = key[len(self.ENV_PREFIX) + 1 :].lower()
                self._set_nested_value(config_key, value)

    def _set_nested_value(self, key: str, value: str) -> None:
        """Set a section value from an environment variable.

        Only the first underscore separates section from key, so
        ``registry_duplicate_policy`` maps to ``registry.duplicate_policy``.
        """
        section, _, name = key.partition("_")
        if not name or section in self.ENV_IGNORED_SECTIONS:
            return

        target = self._raw_config.setdefault(section, {})
        if isinstance(target, dict):
            target[name] = self._parse_value(value)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _deep_update(base: dict, update: dict) -> dict:
        """Deep merge update into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_update(base[key], value)
            else:
                base[key] = value
        return base

    @property
    def config(self) -> ObstacleConfig:
        """Get current configuration (loads if not already loaded)."""
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key path.

        Args:
            key: Dotted key path (e.g., "registry.duplicate_policy").
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        parts = key.split(".")
        value = self._raw_config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Create default configuration dictionary."""
    return {
        "registry": {
            "duplicate_policy": "reject",
        },
        "message": {
            "strict": True,
        },
    }


def load_config(path: Union[str, Path], validate: bool = True) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.
        validate: Whether to validate configuration.

    Returns:
        Configuration dictionary.
    """
    manager = ConfigManager(path)
    config = manager.load(validate=validate)
    return config.to_dict()


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize global configuration from file.

    Args:
        path: Optional path to configuration file.

    Returns:
        Initialized ConfigManager instance.
    """
    global _global_config
    _global_config = ConfigManager(path)
    _global_config.load()
    return _global_config
