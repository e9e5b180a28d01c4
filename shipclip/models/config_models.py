from __future__ import annotations

from dataclasses import dataclass, field

from .resolver_settings import ResolverSettings

"""Configuration dataclasses built by shipclip.config.loader."""

__all__ = [
    "DEFAULT_COURIER",
    "DEFAULT_HEADER_MARKERS",
    "DatabaseConfig",
    "ImportConfig",
]

DEFAULT_COURIER = "Thailand Post - EMS"
# 見出し行の判定に使う部分文字列
DEFAULT_HEADER_MARKERS: tuple[str, ...] = ("Barcode", "Tracking", "ผู้รับ")


@dataclass(frozen=True)
class DatabaseConfig:
    """Database target and connection fallback.

    Environment variables (DATABASE_URL / PGDSN / PG*) take precedence over
    the connection values here.
    """
    table: str = "shipments"
    batch_size: int = 1000
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    source_directory: str  # directory scanned for .txt/.tsv/.xlsx
    courier: str = DEFAULT_COURIER
    timezone: str = "UTC"  # used for the default import date
    header_markers: tuple[str, ...] = DEFAULT_HEADER_MARKERS
    resolver: ResolverSettings = field(default_factory=ResolverSettings)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
