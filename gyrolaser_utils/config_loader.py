#!/usr/bin/env python3
"""Configuration loader for the GyroLaser relay server.

This module provides a centralized configuration manager. It loads default
values, merges ``config/server_config.json`` on top of them and finally
applies environment overrides (a ``.env`` file is honoured through
python-dotenv).

Key Features:
- Hierarchical configuration management
- Default configuration values
- JSON file-based configuration with validation
- Environment variable overrides for host, port and log level
- Runtime configuration updates
"""
import os
import copy
import json
import logging
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .path_config import get_server_config_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "file": None
    },
    "server": {
        "host": "localhost",
        "port": 3000,
        "public_host": None,
        "cors_origins": "*",
        "static_root": None
    },
    "health_check": {
        "enabled": True,
        "interval": 60
    },
    "qrcode": {
        "box_size": 8,
        "border": 2
    },
    "sessions": {
        "enabled": False
    }
}


def _port(raw: str) -> int:
    port = int(raw)
    if not 1 <= port <= 65535:
        raise ValueError(f"port {port} out of range")
    return port


# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", _port),
    "PUBLIC_HOST": ("server", "public_host", str),
    "LOG_LEVEL": ("logging", "level", str),
}


class ConfigError(ValueError):
    """Raised when a configuration file fails validation."""


class ConfigManager:
    def __init__(self, config_file: Optional[str] = None, use_env: bool = True,
                 env_file: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_file: Path of the JSON config file. Defaults to
                ``config/server_config.json`` under the config directory.
            use_env: Whether to apply environment variable overrides.
            env_file: Explicit ``.env`` path. By default python-dotenv
                searches for one.
        """
        self._config: Dict[str, Any] = {}
        # .env may set GYROLASER_CONFIG_DIR, so it is loaded before the path is resolved
        if use_env:
            load_dotenv(env_file)
        self.config_file = config_file or get_server_config_file()
        self._load_defaults()
        self._load_config_file()
        if use_env:
            self._apply_env_overrides(os.environ)

    def _load_defaults(self) -> None:
        """Load default configuration values."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)

    def _load_config_file(self) -> None:
        """Merge the JSON config file, if present. Invalid files are ignored."""
        if not os.path.exists(self.config_file):
            logger.debug(f"No config file at {self.config_file}, using defaults")
            return
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
            self._validate_config(file_config)
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            logger.error(f"Error loading config file {self.config_file}: {e}. Using defaults.")
            return
        self._merge_config(self._config, file_config)
        logger.debug(f"Loaded config from {self.config_file}")

    def _merge_config(self, base: Dict, update: Dict) -> None:
        """
        Recursively merge two configuration dictionaries.
        Args:
            base: Base configuration dictionary
            update: Dictionary with updates to merge
        """
        for key, value in update.items():
            if (
                key in base and
                isinstance(base[key], dict) and
                isinstance(value, dict)
            ):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _validate_config(self, config: Any) -> None:
        """Validate the structure of a loaded config file."""
        if not isinstance(config, dict):
            raise ConfigError("Config file must contain a JSON object")
        server = config.get("server")
        if server is None:
            return
        if not isinstance(server, dict):
            raise ConfigError("'server' section must be an object")
        if "host" in server and not isinstance(server["host"], str):
            raise ConfigError("Server host must be a string")
        if "port" in server:
            port = server["port"]
            if isinstance(port, bool) or not isinstance(port, int):
                raise ConfigError("Server port must be an integer")
            if not 1 <= port <= 65535:
                raise ConfigError("Server port must be between 1 and 65535")

    def _apply_env_overrides(self, environ) -> None:
        """Apply HOST/PORT/PUBLIC_HOST/LOG_LEVEL from the environment."""
        for name, (section, key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(name)
            if raw is None or raw == "":
                continue
            try:
                value = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {name}: {raw!r}")
                continue
            self.set(section, key, value)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Args:
            section: Configuration section
            key: Configuration key
            default: Default value if not found
        Returns:
            Configuration value or default
        """
        try:
            return self._config[section][key]
        except KeyError:
            return default

    def set(self, section: str, key: str, value: Any) -> None:
        """
        Set a configuration value.
        Args:
            section: Configuration section
            key: Configuration key
            value: Value to set
        """
        if section not in self._config:
            self._config[section] = {}
        self._config[section][key] = value

    @property
    def config(self) -> Dict[str, Any]:
        """Get a deep copy of the complete configuration dictionary."""
        return copy.deepcopy(self._config)
