from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_COURIER,
    DEFAULT_HEADER_MARKERS,
    DatabaseConfig,
    ImportConfig,
)
from ..models.resolver_settings import ResolverSettings

"""Config loader.

Responsibilities:
- Load YAML config (default config/import.yml)
- Validate against the packaged JSON schema (unknown keys rejected)
- Apply defaults (timezone=UTC, courier, header markers, resolver thresholds)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            violates the schema (missing required keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_resolver_settings(raw: dict[str, Any]) -> ResolverSettings:
    defaults = ResolverSettings()
    prefixes = raw.get("courier_prefixes")
    return ResolverSettings(
        bio_min_length=raw.get("bio_min_length", defaults.bio_min_length),
        courier_prefixes=tuple(prefixes) if prefixes is not None else defaults.courier_prefixes,
        unnamed_placeholder=raw.get("unnamed_placeholder", defaults.unnamed_placeholder),
    )


def _build_database_config(raw: dict[str, Any]) -> DatabaseConfig:
    defaults = DatabaseConfig()
    return DatabaseConfig(
        table=raw.get("table", defaults.table),
        batch_size=raw.get("batch_size", defaults.batch_size),
        host=raw.get("host"),
        port=raw.get("port"),
        user=raw.get("user"),
        password=raw.get("password"),
        database=raw.get("database"),
        dsn=raw.get("dsn"),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    tz = data.get("timezone", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    markers = data.get("header_markers")
    return ImportConfig(
        source_directory=data["source_directory"],
        courier=data.get("courier", DEFAULT_COURIER),
        timezone=tz,
        header_markers=tuple(markers) if markers is not None else DEFAULT_HEADER_MARKERS,
        resolver=_build_resolver_settings(data.get("resolver") or {}),
        database=_build_database_config(data.get("database") or {}),
    )
