"""Configuration loading (YAML + JSON schema validation)."""

from .loader import ConfigError, load_config

__all__ = [
    "ConfigError",
    "load_config",
]
