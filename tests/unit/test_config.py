"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from zimmount.config import ZimmountConfig, load_config
from zimmount.core.errors import ConfigError


@pytest.fixture()
def config_dir(tmp_path: Path) -> Path:
    """Create a temp config directory."""
    d = tmp_path / ".zimmount"
    d.mkdir()
    return d


@pytest.fixture()
def valid_config_data() -> dict:
    """Minimal valid config data."""
    return {
        "server": {"host": "0.0.0.0", "port": 9000},
        "archives_dir": "/srv/zim",
    }


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment from leaking into tests."""
    for name in ("ZIMMOUNT_ARCHIVES_DIR", "ZIMMOUNT_STATIC_DIR", "ZIMMOUNT_HOST", "ZIMMOUNT_PORT"):
        monkeypatch.delenv(name, raising=False)


def write_config(path: Path, data: object) -> Path:
    """Write config data to a YAML file."""
    config_file = path / "config.yaml"
    config_file.write_text(yaml.dump(data))
    return config_file


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_valid_config(self, config_dir: Path, valid_config_data: dict) -> None:
        config_file = write_config(config_dir, valid_config_data)
        config = load_config(str(config_file))

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000
        assert config.archives_dir == "/srv/zim"
        assert config.static_dir == "./web-content"
        assert config.mount_base_path == "/zim/"

    def test_missing_explicit_file_raises_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(str(tmp_path / "nonexistent.yaml"))

    def test_missing_default_file_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("zimmount.config.DEFAULT_CONFIG_PATH", str(tmp_path / "none.yaml"))
        config = load_config()
        assert config.server.port == 8000
        assert config.archives_dir == "./zim-content"

    def test_invalid_yaml_raises_config_error(self, config_dir: Path) -> None:
        config_file = config_dir / "config.yaml"
        config_file.write_text(":\n  bad: [yaml\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_non_mapping_yaml_raises_config_error(self, config_dir: Path) -> None:
        config_file = config_dir / "config.yaml"
        config_file.write_text("- just a list\n")
        with pytest.raises(ConfigError, match="must contain a YAML mapping"):
            load_config(str(config_file))

    def test_empty_file_uses_defaults(self, config_dir: Path) -> None:
        config_file = config_dir / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)).server.port == 8000

    def test_invalid_values_raise_config_error(self, config_dir: Path) -> None:
        config_file = write_config(config_dir, {"server": {"port": "not-a-port"}})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(str(config_file))

    def test_env_var_overrides(
        self, config_dir: Path, valid_config_data: dict, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ZIMMOUNT_ARCHIVES_DIR", "/env/zim")
        monkeypatch.setenv("ZIMMOUNT_STATIC_DIR", "/env/web")
        monkeypatch.setenv("ZIMMOUNT_HOST", "10.0.0.1")
        monkeypatch.setenv("ZIMMOUNT_PORT", "8080")
        config_file = write_config(config_dir, valid_config_data)

        config = load_config(str(config_file))
        assert config.archives_dir == "/env/zim"
        assert config.static_dir == "/env/web"
        assert config.server.host == "10.0.0.1"
        assert config.server.port == 8080

    def test_env_var_creates_server_section(
        self, config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ZIMMOUNT_PORT", "8081")
        config_file = write_config(config_dir, {"archives_dir": "/srv/zim"})

        assert load_config(str(config_file)).server.port == 8081


class TestZimmountConfig:
    """Tests for ZimmountConfig validation."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("/zim/", "/zim/"), ("zim", "/zim/"), ("/a/b", "/a/b/"), ("/", "/"), ("", "/")],
    )
    def test_mount_base_path_normalized(self, value: str, expected: str) -> None:
        assert ZimmountConfig(mount_base_path=value).mount_base_path == expected

    def test_log_level_normalized(self) -> None:
        assert ZimmountConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError):
            ZimmountConfig(log_level="LOUD")

    def test_server_url(self) -> None:
        config = ZimmountConfig(server={"host": "localhost", "port": 8000})
        assert config.server_url == "http://localhost:8000"
