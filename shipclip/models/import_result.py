from __future__ import annotations

import statistics
from dataclasses import dataclass
from datetime import datetime

"""Result models aggregated over one import run.

FileStat is the per-file line item, ImportResult the run total used for the
SUMMARY line, and BatchStatsAccumulator collects INSERT batch timings.
"""

__all__ = [
    "FileStat",
    "ImportResult",
    "BatchStatsAccumulator",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    imported_rows: int
    skipped_rows: int
    duplicate_rows: int
    elapsed_seconds: float
    total_batches: int = 0
    avg_batch_seconds: float = 0.0
    p95_batch_seconds: float = 0.0


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results of one run over the source directory."""
    success_files: int
    failed_files: int
    total_imported_rows: int
    skipped_rows: int  # rows without a tracking number
    duplicate_rows: int  # rows dropped because the tracking number was already imported
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # total_imported / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files


class BatchStatsAccumulator:
    """Accumulates INSERT batch timings for FileStat."""

    def __init__(self) -> None:
        self.batch_times: list[float] = []

    def add_batch_time(self, elapsed_seconds: float) -> None:
        self.batch_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Calculate batch statistics.

        Returns:
            tuple: (total_batches, avg_batch_seconds, p95_batch_seconds)
        """
        if not self.batch_times:
            return (0, 0.0, 0.0)

        total_batches = len(self.batch_times)
        avg_batch_seconds = statistics.mean(self.batch_times)

        if total_batches == 1:
            p95_batch_seconds = self.batch_times[0]
        else:
            # 20 分位の 19 番目 = p95
            p95_batch_seconds = statistics.quantiles(
                self.batch_times, n=20, method="inclusive"
            )[18]

        return (total_batches, avg_batch_seconds, p95_batch_seconds)
