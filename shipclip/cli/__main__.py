from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ..clip.resolver import resolve_fields
from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.init import enable_debug, get_logger, log_summary, setup_logging
from ..models.config_models import ImportConfig
from ..models.import_result import ImportResult
from ..models.resolver_settings import ResolverSettings
from ..services.importer import ProcessingError, process_all, read_source_rows
from ..services.summary import render_file_stat, render_summary_line

"""CLI entrypoint.

Two modes:
- ``--file PATH``: parse one pasted-text/xlsx file and print the resolved
  record of every row as JSON (no config, no database)
- default: import the configured source directory and print a SUMMARY line

Exit codes: 0 all files imported (or none found), 2 at least one file
failed, 1 fatal (config / directory / processing error).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Provide a psycopg2 cursor.

    接続情報の優先順位:
        1. .env (main() 冒頭で override 読み込み済み) / 環境変数
           - DATABASE_URL / PGDSN があれば DSN 全体を使用
           - 個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        2. config の database セクション (不足分のフォールバック)
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    # トランザクション境界は importer が BEGIN/COMMIT で明示
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Shipment clipboard/xlsx importer")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    p.add_argument("--file", type=Path, help="Parse a single file and print resolved rows as JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Resolve and count rows without a database")
    return p.parse_args(argv)


def _inspect_file(path: Path, settings: ResolverSettings) -> int:
    if not path.exists():
        print(f"inspect: file not found: {path}")
        return EXIT_FATAL
    try:
        rows = read_source_rows(path)
    except Exception as e:
        print(f"inspect: read_error: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name} rows={len(rows)}")
    for i, row in enumerate(rows, start=1):
        record = resolve_fields(row, settings)
        print(f"  [{i}] {json.dumps(record.to_dict(), ensure_ascii=False)}")
    return EXIT_SUCCESS_ALL


def _load_settings_for_inspect(config_path: Path) -> ResolverSettings:
    # config が無くても既定値で解析できるようにする
    if not config_path.exists():
        return ResolverSettings()
    return load_config(config_path).resolver


def _run_import(cfg: ImportConfig, use_db: bool) -> tuple[ImportResult, str]:
    logger = get_logger()
    if not use_db:
        return process_all(cfg, cursor=None), "mock"
    try:
        with _db_connection(cfg) as cur:
            return process_all(cfg, cursor=cur), "live"
    except psycopg2.Error as db_e:
        logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")
    return process_all(cfg, cursor=None), "mock"


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] を渡されたとき sys.argv を読まないよう None のみ判定
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=True)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    if args.file is not None:
        try:
            settings = _load_settings_for_inspect(args.config)
        except ConfigError as e:
            logger.error(f"config: {e}")
            return EXIT_FATAL
        return _inspect_file(args.file, settings)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Processing files from: {directory}")

    use_db = not (args.dry_run or os.getenv("DISABLE_DB_CONNECT") == "1")
    try:
        result, db_mode = _run_import(cfg, use_db)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for stat in result.file_stats or []:
        logger.info(render_file_stat(stat), extra={"source_file": stat.file_name})
    logger.info(f"mode={db_mode} total_rows={result.total_imported_rows}")
    # log_summary が "SUMMARY " を付与するので先頭ラベルは除く
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
