"""Configuration management for wingetctl."""

import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from wingetctl.exceptions import ConfigError
from wingetctl.models.config import AppConfig


def default_config_path() -> Path:
    """Platform-specific location of ``config.yaml``."""
    if sys.platform == "win32":
        # Windows: %APPDATA%\wingetctl
        config_dir = Path(os.getenv("APPDATA", str(Path.home()))) / "wingetctl"
    elif sys.platform == "darwin":
        config_dir = Path.home() / "Library" / "Application Support" / "wingetctl"
    else:
        config_dir = Path.home() / ".config" / "wingetctl"
    return config_dir / "config.yaml"


class ConfigManager:
    """Manages configuration with YAML file and environment variable support."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. If None, uses WINGETCTL_CONFIG_PATH
                        environment variable or defaults to platform-specific config directory
        """
        if config_path is None:
            env_path = os.getenv("WINGETCTL_CONFIG_PATH")
            config_path = Path(env_path).expanduser() if env_path else default_config_path()

        self.config_path = config_path
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """Load configuration from file and apply environment variable overrides.

        Raises:
            ConfigError: If the file exists but is not valid YAML or does not
                match the configuration schema
        """
        config_data: dict[str, Any] = {}

        if self.config_path.exists():
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    config_data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError("Cannot read config file {path}: {error}", path=self.config_path, error=e) from e

        try:
            config = AppConfig(**config_data)
        except (PydanticValidationError, TypeError) as e:
            raise ConfigError("Invalid config file {path}: {error}", path=self.config_path, error=e) from e

        return self._apply_env_overrides(config)

    def save(self, config: AppConfig) -> None:
        """Save configuration to the YAML file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = config.model_dump(mode="json", exclude_none=True)

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def _apply_env_overrides(self, config: AppConfig) -> AppConfig:
        """Apply environment variable overrides.

        Environment variables use the format: WINGETCTL_<SECTION>_<KEY>
        Examples:
            - WINGETCTL_WINGET_EXECUTABLE=C:\\tools\\winget.exe
            - WINGETCTL_LOG_LEVEL=DEBUG
        """
        if executable := os.getenv("WINGETCTL_WINGET_EXECUTABLE"):
            config.winget.executable = executable
        if query_timeout := os.getenv("WINGETCTL_WINGET_QUERY_TIMEOUT"):
            seconds = float(query_timeout)
            config.winget.query_timeout = seconds if seconds > 0 else None
        if probe_timeout := os.getenv("WINGETCTL_WINGET_PROBE_TIMEOUT"):
            seconds = float(probe_timeout)
            if seconds > 0:
                config.winget.probe_timeout = seconds

        if level := os.getenv("WINGETCTL_LOG_LEVEL"):
            if level.upper() in ("INFO", "DEBUG", "TRACE"):
                config.logging.level = level.upper()  # type: ignore
        if log_format := os.getenv("WINGETCTL_LOG_FORMAT"):
            if log_format in ("json", "console"):
                config.logging.format = log_format  # type: ignore

        return config

    def get_config(self) -> AppConfig:
        """Get configuration, loading it on first use."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = self.load()
        return self._config


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config() -> AppConfig:
    """Get global application configuration."""
    return _config_manager.get_config()


def reload_config() -> AppConfig:
    """Reload configuration from file."""
    return _config_manager.reload()


def save_config(config: AppConfig) -> None:
    """Save configuration to file."""
    _config_manager.save(config)
