"""Configuration loading from environment and YAML files."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG: dict[str, Any] = {"enabled_providers": ["example"]}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Server info reported by initialize
    server_name: str = "toolrpc-mcp-server"
    server_version: str = "1.0.0"

    # Host, port and the path the MCP endpoint is mapped to
    host: str = "0.0.0.0"
    port: int = 8080
    mcp_path: str = "/mcp"

    # Provider configuration file
    config_path: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_server_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load server configuration from a YAML file.

    Args:
        config_path: Path to the config file. If None, uses default location.

    Returns:
        Dictionary with configuration data.
    """
    if config_path is None:
        possible_paths = [
            Path("config/server.yaml"),
            Path(__file__).resolve().parents[2] / "config" / "server.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            return dict(DEFAULT_CONFIG)

    config_path = Path(config_path)
    if not config_path.exists():
        return dict(DEFAULT_CONFIG)

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return config


def get_enabled_providers(config: dict[str, Any] | None = None) -> list[str]:
    """Get list of enabled provider names."""
    if config is None:
        config = load_server_config()
    return config.get("enabled_providers", DEFAULT_CONFIG["enabled_providers"])
