"""Configuration loading and management."""

from toolrpc.config.loader import Settings, get_settings, load_server_config

__all__ = ["Settings", "get_settings", "load_server_config"]
