from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""SourceFile domain model and FileStatus enum.

A SourceFile is the processing context of one pasted-text or xlsx export
while it moves through the import lifecycle.
"""

__all__ = [
    "FileStatus",
    "SourceFile",
]


class FileStatus(Enum):
    """Status of a source file.

    A file ends the run either imported (its transaction committed, or
    resolved in mock mode) or failed.
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceFile:
    """Processing context for a single source file."""
    path: Path
    name: str
    status: FileStatus
    start_time: datetime | None = None  # UTC
    end_time: datetime | None = None  # UTC
    imported_rows: int = 0  # rows handed to the DB (or counted in mock mode)
    skipped_rows: int = 0  # rows without a tracking number
    duplicate_rows: int = 0  # tracking numbers already imported earlier in the run
    error: str | None = None  # failure reason summary
