from __future__ import annotations

from pathlib import Path

import pytest

from shipclip.config.loader import ConfigError, load_config
from shipclip.models.config_models import DEFAULT_COURIER, DEFAULT_HEADER_MARKERS
from shipclip.models.resolver_settings import ResolverSettings


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.courier == "Kerry Express"
    assert cfg.timezone == "Asia/Bangkok"
    assert cfg.header_markers == ("Barcode", "Tracking", "ผู้รับ")
    assert cfg.resolver.bio_min_length == 20
    assert cfg.resolver.courier_prefixes == ("JN", "SP", "TH", "Kerry", "Flash")
    assert cfg.database.table == "shipments"
    assert cfg.database.batch_size == 500
    assert cfg.database.port == 5432


def test_load_config_minimal_applies_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("source_directory: ./data\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.timezone == "UTC"
    assert cfg.courier == DEFAULT_COURIER
    assert cfg.header_markers == DEFAULT_HEADER_MARKERS
    assert cfg.resolver == ResolverSettings()
    assert cfg.database.table == "shipments"
    assert cfg.database.batch_size == 1000
    assert cfg.database.dsn is None


def test_load_config_resolver_overrides(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text(
        "source_directory: ./data\n"
        "resolver:\n"
        "  bio_min_length: 30\n"
        "  courier_prefixes: [JN, SP]\n"
        "  unnamed_placeholder: unknown\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.resolver == ResolverSettings(
        bio_min_length=30, courier_prefixes=("JN", "SP"), unnamed_placeholder="unknown"
    )


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("source_directory: ./data\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("bio_min_length: 20", "bio_min_length: long")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_rejects_unsafe_table_name(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "table: shipments", "table: 'shipments; DROP TABLE x'"
    )
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_non_mapping_root(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(path)


def test_load_config_unknown_timezone(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("Asia/Bangkok", "Mars/Olympus")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="unknown timezone"):
        load_config(write_config)
