from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from ..clip.amounts import find_cod_amount
from ..clip.layout import DEFAULT_STATUS, read_column_layout
from ..clip.names import clean_customer_name
from ..clip.resolver import resolve_fields
from ..clip.tokenizer import Row, tokenize
from ..db.batch_insert import BatchInsertError, BatchMetrics, insert_shipments
from ..excel.reader import read_first_sheet, sheet_to_rows
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord
from ..models.import_result import BatchStatsAccumulator, FileStat, ImportResult
from ..models.resolver_settings import ResolverSettings
from ..models.shipment import ImportedShipment
from ..models.shipment_record import ShipmentRecord
from ..models.source_file import FileStatus, SourceFile
from .file_meta import date_from_filename, time_from_filename
from .progress import ProgressTracker

"""Import orchestration.

Scans the source directory, turns every file into rows (tokenizer for text,
pandas for xlsx), resolves each row and hands the resulting shipments to the
database. Each file is imported in its own transaction: a failing file is
rolled back and logged, the run continues with the next one.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "SOURCE_SUFFIXES",
    "FileShipments",
    "scan_source_files",
    "read_source_rows",
    "is_header_row",
    "default_import_date",
    "build_shipments",
    "process_all",
]

SOURCE_SUFFIXES = (".txt", ".tsv", ".xlsx")


class ProcessingError(Exception):
    """Fatal error that stops the whole run."""


@dataclass
class FileShipments:
    """Shipments built from one file plus the rows that were left out."""
    shipments: list[ImportedShipment] = field(default_factory=list)
    skipped_rows: int = 0  # no tracking number
    header_rows: int = 0


def scan_source_files(directory: Path) -> list[Path]:
    """List importable files in directory (non-recursive, sorted by name).

    Raises:
        ProcessingError: If the directory is missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def read_source_rows(path: Path) -> list[Row]:
    if path.suffix.lower() == ".xlsx":
        return sheet_to_rows(read_first_sheet(path))
    # utf-8-sig: Excel の「Unicode テキスト」保存時の BOM を除去
    return tokenize(path.read_text(encoding="utf-8-sig"))


def is_header_row(row: Sequence[str], markers: Sequence[str]) -> bool:
    return any(marker in cell for cell in row for marker in markers)


def default_import_date(timezone: str) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


def _to_shipment(
    record: ShipmentRecord,
    tracking_number: str,
    row: Row,
    *,
    placeholder: str,
    courier: str,
    import_date: date,
    import_time: str,
    source_name: str,
    row_number: int,
) -> ImportedShipment:
    """Combine the resolved record with the positional export columns.

    Columns read by position win over the resolver's guesses; rows without
    the export layout (bio rows) keep the resolver result.
    """
    sequence, name = clean_customer_name(record.customer_name, placeholder)
    phone = record.phone_number
    cod = find_cod_amount(row)
    shipping_cost = 0.0
    status = DEFAULT_STATUS

    layout = read_column_layout(row, tracking_number)
    if layout is not None:
        name = layout.customer_name or name
        sequence = layout.sequence_number or sequence
        phone = phone or layout.phone_number
        if layout.cod_amount is not None:
            cod = layout.cod_amount
        shipping_cost = layout.shipping_cost or 0.0
        status = layout.status
        import_date = layout.import_date or import_date

    return ImportedShipment(
        tracking_number=tracking_number,
        customer_name=name,
        phone_number=phone,
        zip_code=record.zip_code,
        cod_amount=cod,
        courier=courier,
        import_date=import_date,
        import_time=import_time,
        sequence_number=sequence or None,
        source_file=source_name,
        row_number=row_number,
        shipping_cost=shipping_cost,
        status=status,
    )


def build_shipments(
    rows: Sequence[Row],
    *,
    source_name: str,
    settings: ResolverSettings,
    courier: str,
    import_date: date,
    import_time: str,
    header_markers: Sequence[str] = (),
    error_log: ErrorLogBuffer | None = None,
) -> FileShipments:
    """Resolve rows into shipments.

    Header rows are ignored; rows without a tracking number are counted as
    skipped (and logged when error_log is given). A tracking number seen
    twice in the same file keeps its first position but the later row's
    values.
    """
    result = FileShipments()
    by_tracking: dict[str, ImportedShipment] = {}

    for row_number, row in enumerate(rows, start=1):
        if is_header_row(row, header_markers):
            result.header_rows += 1
            continue

        record = resolve_fields(row, settings)
        # 電話番号だけの行は英数字形状の追跡番号にも一致してしまう
        if record.tracking_number is None or record.tracking_number == record.phone_number:
            result.skipped_rows += 1
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(
                        file=source_name,
                        row=row_number,
                        error_type="NO_TRACKING_NUMBER",
                        message=" | ".join(c.replace("\n", " / ") for c in row),
                    )
                )
            continue

        by_tracking[record.tracking_number] = _to_shipment(
            record,
            record.tracking_number,
            row,
            placeholder=settings.unnamed_placeholder,
            courier=courier,
            import_date=import_date,
            import_time=import_time,
            source_name=source_name,
            row_number=row_number,
        )

    result.shipments = list(by_tracking.values())
    return result


def process_all(config: ImportConfig, cursor: Any = None) -> ImportResult:
    """Import every source file in the configured directory.

    Args:
        config: Import configuration
        cursor: Database cursor (None = mock mode, nothing is written)

    Returns:
        ImportResult with aggregated metrics and file stats

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer()

    file_paths = scan_source_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_skipped = 0
    total_duplicates = 0
    # 実行全体で取り込み済みの追跡番号
    seen_tracking: set[str] = set()

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            batch_stats = BatchStatsAccumulator()

            source = _process_single_file(
                file_path, config, cursor, error_log, seen_tracking, batch_stats
            )

            if source.status == FileStatus.SUCCESS:
                success_count += 1
                total_rows += source.imported_rows
                total_duplicates += source.duplicate_rows
            else:
                failed_count += 1
                logger.warning(source.error, extra={"source_file": file_path.name})
            total_skipped += source.skipped_rows

            progress.set_postfix(ok=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()

            elapsed = 0.0
            if source.start_time is not None and source.end_time is not None:
                elapsed = (source.end_time - source.start_time).total_seconds()
            batches, avg_batch, p95_batch = batch_stats.get_stats()
            file_stats.append(
                FileStat(
                    file_name=source.name,
                    status=source.status.value,
                    imported_rows=source.imported_rows,
                    skipped_rows=source.skipped_rows,
                    duplicate_rows=source.duplicate_rows,
                    elapsed_seconds=elapsed,
                    total_batches=batches,
                    avg_batch_seconds=avg_batch,
                    p95_batch_seconds=p95_batch,
                )
            )

    counts = error_log.counts_by_type()
    try:
        log_path = error_log.flush()
        if log_path is not None:
            breakdown = " ".join(f"{k}={v}" for k, v in sorted(counts.items()))
            logger.info(f"error log written: {log_path} ({breakdown})")
    except OSError as e:
        # エラーログ書き込み失敗で全体を失敗扱いにはしない
        logger.warning(f"failed to write error log: {e}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ImportResult(
        success_files=success_count,
        failed_files=failed_count,
        total_imported_rows=total_rows,
        skipped_rows=total_skipped,
        duplicate_rows=total_duplicates,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
    )


def _file_error(
    error_log: ErrorLogBuffer, file_name: str, error_type: str, message: str
) -> None:
    error_log.append(
        ErrorRecord.create(file=file_name, row=FILE_LEVEL_ROW, error_type=error_type, message=message)
    )


def _rollback(cursor: Any, error_log: ErrorLogBuffer, file_name: str) -> None:
    try:
        cursor.execute("ROLLBACK")
    except Exception as e:
        _file_error(error_log, file_name, "TRANSACTION_ROLLBACK_ERROR", str(e))


def _process_single_file(
    file_path: Path,
    config: ImportConfig,
    cursor: Any,
    error_log: ErrorLogBuffer,
    seen_tracking: set[str],
    batch_stats: BatchStatsAccumulator,
) -> SourceFile:
    """Import one file inside its own transaction.

    On failure the transaction is rolled back and the file is reported as
    FAILED; seen_tracking is only extended when the file succeeds.
    """
    start_time = datetime.now(UTC)
    name = file_path.name

    def failed(error: str, skipped: int = 0) -> SourceFile:
        return SourceFile(
            path=file_path,
            name=name,
            status=FileStatus.FAILED,
            start_time=start_time,
            end_time=datetime.now(UTC),
            skipped_rows=skipped,
            error=error,
        )

    try:
        rows = read_source_rows(file_path)
    except Exception as e:
        _file_error(error_log, name, "READ_ERROR", str(e))
        return failed(f"read failed: {e}")

    built = build_shipments(
        rows,
        source_name=name,
        settings=config.resolver,
        courier=config.courier,
        import_date=date_from_filename(name) or default_import_date(config.timezone),
        import_time=time_from_filename(name),
        header_markers=config.header_markers,
        error_log=error_log,
    )
    fresh = [s for s in built.shipments if s.tracking_number not in seen_tracking]
    duplicates = len(built.shipments) - len(fresh)
    logger.debug(
        f"rows={len(rows)} header={built.header_rows} "
        f"resolved={len(built.shipments)} skipped={built.skipped_rows} duplicates={duplicates}",
        extra={"source_file": name},
    )

    if cursor is not None:
        try:
            cursor.execute("BEGIN")
        except Exception as e:
            _file_error(error_log, name, "TRANSACTION_BEGIN_ERROR", str(e))
            return failed(f"failed to begin transaction: {e}", built.skipped_rows)

        def on_batch(metrics: BatchMetrics) -> None:
            batch_stats.add_batch_time(metrics.elapsed_seconds)

        try:
            inserted = insert_shipments(
                cursor,
                config.database.table,
                fresh,
                page_size=config.database.batch_size,
                metrics_callback=on_batch,
            )
        except BatchInsertError as e:
            _rollback(cursor, error_log, name)
            _file_error(error_log, name, "INSERT_ERROR", str(e))
            return failed(f"insert failed - transaction rolled back: {e}", built.skipped_rows)

        try:
            cursor.execute("COMMIT")
        except Exception as e:
            _rollback(cursor, error_log, name)
            _file_error(error_log, name, "TRANSACTION_COMMIT_ERROR", str(e))
            return failed(f"commit failed: {e}", built.skipped_rows)

        imported_rows = inserted.inserted_rows
    else:
        imported_rows = len(fresh)

    seen_tracking.update(s.tracking_number for s in fresh)
    return SourceFile(
        path=file_path,
        name=name,
        status=FileStatus.SUCCESS,
        start_time=start_time,
        end_time=datetime.now(UTC),
        imported_rows=imported_rows,
        skipped_rows=built.skipped_rows,
        duplicate_rows=duplicates,
    )
