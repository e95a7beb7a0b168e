"""Configuration loading and validation for zimmount."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from zimmount.core.errors import ConfigError

DEFAULT_CONFIG_PATH = "~/.zimmount/config.yaml"


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=8000, ge=1, le=65535, description="Port to listen on")


class ZimmountConfig(BaseModel):
    """Top-level zimmount configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    archives_dir: str = Field(default="./zim-content", description="Directory of *.zim files")
    static_dir: str = Field(default="./web-content", description="Directory of custom sites")
    mount_base_path: str = Field(default="/zim/", description="URL root all archives mount under")
    html_parser: str = Field(default="html.parser", description="BeautifulSoup parser")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("mount_base_path")
    @classmethod
    def normalize_mount_base_path(cls, v: str) -> str:
        """Ensure the base path starts and ends with a slash."""
        stripped = v.strip().strip("/")
        return f"/{stripped}/" if stripped else "/"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the level is one logging understands."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v!r}")
        return level

    @property
    def server_url(self) -> str:
        """Origin the dashboard links to."""
        return f"http://{self.server.host}:{self.server.port}"


def load_config(path: str | None = None) -> ZimmountConfig:
    """Load and validate configuration from a YAML file.

    If no path is given and the default file does not exist, the built-in
    defaults are used.

    Environment variable overrides:
        ZIMMOUNT_ARCHIVES_DIR: overrides archives_dir
        ZIMMOUNT_STATIC_DIR: overrides static_dir
        ZIMMOUNT_HOST: overrides server.host
        ZIMMOUNT_PORT: overrides server.port

    Args:
        path: Path to config file. Defaults to ~/.zimmount/config.yaml.

    Returns:
        Validated ZimmountConfig.

    Raises:
        ConfigError: If config file is missing, unreadable, or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    if config_path.exists():
        try:
            raw = config_path.read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a YAML mapping")
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        data = {}

    # Apply environment variable overrides
    env_archives = os.environ.get("ZIMMOUNT_ARCHIVES_DIR")
    if env_archives:
        data["archives_dir"] = env_archives

    env_static = os.environ.get("ZIMMOUNT_STATIC_DIR")
    if env_static:
        data["static_dir"] = env_static

    server = data.get("server")
    if server is None:
        server = data["server"] = {}
    if isinstance(server, dict):
        env_host = os.environ.get("ZIMMOUNT_HOST")
        if env_host:
            server["host"] = env_host

        env_port = os.environ.get("ZIMMOUNT_PORT")
        if env_port:
            server["port"] = env_port

    try:
        return ZimmountConfig(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
