"""Utility functions and helpers for the GyroLaser relay server"""
from .path_config import (
    get_app_root,
    get_config_dir,
    get_server_config_file,
    get_logs_dir,
    get_static_dirs
)
from .config_loader import ConfigManager, ConfigError, DEFAULT_CONFIG
from .logging_utils import setup_logging

__all__ = [
    'get_app_root',
    'get_config_dir',
    'get_server_config_file',
    'get_logs_dir',
    'get_static_dirs',
    'ConfigManager',
    'ConfigError',
    'DEFAULT_CONFIG',
    'setup_logging'
]
