from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from ..models.shipment import SHIPMENT_COLUMNS, ImportedShipment

"""Batched INSERT of imported shipments.

Uses psycopg2.extras.execute_values. The target table is owned by the
persistence layer; only the column names in SHIPMENT_COLUMNS are assumed.
Transaction boundaries (BEGIN/COMMIT/ROLLBACK) belong to the caller.
"""

__all__ = [
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "insert_shipments",
]


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of a single execute_values call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float  # time.time()
    end_time: float  # time.time()


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    batches: int


def _chunks(rows: Sequence[tuple[Any, ...]], size: int) -> Iterator[Sequence[tuple[Any, ...]]]:
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def insert_shipments(
    cursor: object,
    table: str,
    shipments: Iterable[ImportedShipment],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Insert shipments in batches of ``page_size`` rows.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: 対象テーブル名 (config スキーマで識別子形式を検証済み)
    shipments: 挿入対象
    page_size: rows per execute_values call
    metrics_callback: called once per batch with its timing, also for the
        batch that failed
    """
    rows = [s.as_row() for s in shipments]
    if not rows:
        return InsertResult(inserted_rows=0, batches=0)

    cols_sql = ",".join(f'"{c}"' for c in SHIPMENT_COLUMNS)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"

    inserted = 0
    batches = 0
    for chunk in _chunks(rows, page_size):
        start_time = time.time()
        try:
            execute_values(cursor, sql, chunk, page_size=page_size)
        except Exception as e:
            raise BatchInsertError(f"batch {batches + 1} (rows {inserted + 1}-{inserted + len(chunk)}): {e}") from e
        finally:
            end_time = time.time()
            if metrics_callback is not None:
                metrics_callback(
                    BatchMetrics(
                        batch_size=len(chunk),
                        elapsed_seconds=end_time - start_time,
                        start_time=start_time,
                        end_time=end_time,
                    )
                )
        inserted += len(chunk)
        batches += 1

    return InsertResult(inserted_rows=inserted, batches=batches)
