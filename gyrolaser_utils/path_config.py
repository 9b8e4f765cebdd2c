"""Path configuration utilities for the GyroLaser relay server.

This module provides centralized path management for configuration, logs and
static client assets. Directories are resolved relative to the application
root unless overridden through the environment.
"""
import os
from pathlib import Path

CONFIG_DIR_ENV = "GYROLASER_CONFIG_DIR"


def get_app_root():
    """Get the root directory of the application."""
    return str(Path(__file__).parent.parent.absolute())


def get_config_dir():
    """Get the configuration directory path (not created if missing)."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return str(Path(override).expanduser().absolute())
    return os.path.join(get_app_root(), "config")


def get_server_config_file():
    """Get the server configuration file path."""
    return os.path.join(get_config_dir(), "server_config.json")


def get_logs_dir():
    """Get the logs directory path."""
    logs_dir = os.path.join(get_app_root(), "logs")
    os.makedirs(logs_dir, exist_ok=True)
    return logs_dir


def get_static_dirs(static_root=None):
    """Resolve the viewer and controller static directories.

    Prefers ``frontend/client-desktop`` and ``frontend/client-mobile`` under the
    static root, falling back to ``client-desktop`` and ``client-mobile``.
    Returns a dict mapping ``desktop``/``mobile`` to a path (which may not exist).
    """
    root = static_root or get_app_root()
    dirs = {}
    for name in ("desktop", "mobile"):
        preferred = os.path.join(root, "frontend", f"client-{name}")
        fallback = os.path.join(root, f"client-{name}")
        dirs[name] = preferred if os.path.isdir(preferred) else fallback
    return dirs
