"""Tests for configuration loading and environment overrides."""
import json

import pytest

from gyrolaser_utils.config_loader import ConfigManager, DEFAULT_CONFIG


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "PUBLIC_HOST", "LOG_LEVEL", "GYROLASER_CONFIG_DIR"):
        # setenv first so teardown also removes values a .env file puts in place
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def write_config(tmp_path, data):
    path = tmp_path / "server_config.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(path)


def test_defaults_without_file(tmp_path, clean_env):
    manager = ConfigManager(config_file=str(tmp_path / "missing.json"), use_env=False)
    assert manager.get("server", "host") == "localhost"
    assert manager.get("server", "port") == 3000
    assert manager.config == DEFAULT_CONFIG


def test_file_values_are_merged(tmp_path, clean_env):
    path = write_config(tmp_path, {"server": {"host": "0.0.0.0", "port": 8080}, "logging": {"level": "DEBUG"}})
    manager = ConfigManager(config_file=path, use_env=False)
    assert manager.get("server", "host") == "0.0.0.0"
    assert manager.get("server", "port") == 8080
    assert manager.get("server", "cors_origins") == "*"
    assert manager.get("logging", "level") == "DEBUG"
    assert manager.get("logging", "format") == DEFAULT_CONFIG["logging"]["format"]


@pytest.mark.parametrize("content", [
    "{not json",
    json.dumps(["server"]),
    json.dumps({"server": {"port": "3000"}}),
    json.dumps({"server": {"port": 70000}}),
    json.dumps({"server": {"host": 42}}),
    json.dumps({"server": "localhost"}),
])
def test_invalid_file_falls_back_to_defaults(tmp_path, clean_env, content):
    path = write_config(tmp_path, content)
    manager = ConfigManager(config_file=path, use_env=False)
    assert manager.config == DEFAULT_CONFIG


def test_env_overrides_file(tmp_path, clean_env):
    path = write_config(tmp_path, {"server": {"host": "0.0.0.0", "port": 8080}})
    clean_env.setenv("HOST", "127.0.0.1")
    clean_env.setenv("PORT", "4000")
    clean_env.setenv("PUBLIC_HOST", "presenter.local")
    clean_env.setenv("LOG_LEVEL", "WARNING")
    manager = ConfigManager(config_file=path)
    assert manager.get("server", "host") == "127.0.0.1"
    assert manager.get("server", "port") == 4000
    assert manager.get("server", "public_host") == "presenter.local"
    assert manager.get("logging", "level") == "WARNING"


@pytest.mark.parametrize("port", ["not-a-port", "0", "70000", "-1"])
def test_invalid_env_port_is_ignored(tmp_path, clean_env, port):
    clean_env.setenv("PORT", port)
    manager = ConfigManager(config_file=str(tmp_path / "missing.json"))
    assert manager.get("server", "port") == 3000


def test_get_set_and_copy(tmp_path, clean_env):
    manager = ConfigManager(config_file=str(tmp_path / "missing.json"), use_env=False)
    assert manager.get("nope", "key", default="fallback") == "fallback"
    manager.set("extra", "key", 1)
    assert manager.get("extra", "key") == 1

    snapshot = manager.config
    snapshot["server"]["port"] = 1
    assert manager.get("server", "port") == 3000


def test_dotenv_config_dir_selects_config_file(tmp_path, clean_env):
    config_dir = tmp_path / "elsewhere"
    config_dir.mkdir()
    (config_dir / "server_config.json").write_text(json.dumps({"server": {"port": 4444}}))
    env_file = tmp_path / ".env"
    env_file.write_text(f"GYROLASER_CONFIG_DIR={config_dir}\n")

    manager = ConfigManager(env_file=str(env_file))
    assert manager.config_file == str(config_dir / "server_config.json")
    assert manager.get("server", "port") == 4444


def test_dotenv_values_override_file(tmp_path, clean_env):
    path = write_config(tmp_path, {"server": {"port": 8080}})
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=5050\nPUBLIC_HOST=presenter.local\n")

    manager = ConfigManager(config_file=path, env_file=str(env_file))
    assert manager.get("server", "port") == 5050
    assert manager.get("server", "public_host") == "presenter.local"
