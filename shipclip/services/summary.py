from __future__ import annotations

from ..models.import_result import FileStat, ImportResult

"""SUMMARY line rendering for the CLI."""

__all__ = [
    "format_number",
    "render_file_stat",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integers without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an import run.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
    skipped_rows={skipped} duplicates={duplicates} elapsed_sec={elapsed} throughput_rps={throughput}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportResult(
        ...     success_files=1, failed_files=0, total_imported_rows=120,
        ...     skipped_rows=3, duplicate_rows=0, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=60.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=1/1 success=1 failed=0 rows=120 skipped_rows=3 duplicates=0 elapsed_sec=2 throughput_rps=60'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_imported_rows} "
        f"skipped_rows={result.skipped_rows} "
        f"duplicates={result.duplicate_rows} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )


def render_file_stat(stat: FileStat) -> str:
    """Per-file line printed before the SUMMARY line (file name excluded)."""
    return (
        f"status={stat.status} "
        f"rows={stat.imported_rows} "
        f"skipped_rows={stat.skipped_rows} "
        f"duplicates={stat.duplicate_rows} "
        f"elapsed_sec={format_number(round(stat.elapsed_seconds, 3))} "
        f"batches={stat.total_batches} "
        f"avg_batch_sec={format_number(round(stat.avg_batch_seconds, 3))} "
        f"p95_batch_sec={format_number(round(stat.p95_batch_seconds, 3))}"
    )
