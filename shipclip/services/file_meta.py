from __future__ import annotations

import re
from datetime import date

"""Import date/time taken from export file names.

Daily exports are named like ``orders 18-01-2569_14-30.xlsx``; the year may be
in the Buddhist era (BE = CE + 543).
"""

__all__ = [
    "BUDDHIST_ERA_OFFSET",
    "DEFAULT_IMPORT_TIME",
    "date_from_filename",
    "time_from_filename",
]

BUDDHIST_ERA_OFFSET = 543
BUDDHIST_ERA_THRESHOLD = 2400
DEFAULT_IMPORT_TIME = "00:00"

_DATE_RE = re.compile(r"(\d{2})[-/.](\d{2})[-/.](\d{4})", re.ASCII)
_TIME_RE = re.compile(r"(?:_|\s)(\d{1,2})[-.:](\d{2})(?:_|\s|\.)", re.ASCII)


def date_from_filename(name: str) -> date | None:
    m = _DATE_RE.search(name)
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    if year > BUDDHIST_ERA_THRESHOLD:
        year -= BUDDHIST_ERA_OFFSET
    try:
        return date(year, month, day)
    except ValueError:
        return None


def time_from_filename(name: str) -> str:
    """Return ``HH:MM`` from the file name, or ``00:00`` when absent/invalid."""
    m = _TIME_RE.search(name)
    if not m:
        return DEFAULT_IMPORT_TIME
    hour, minute = int(m.group(1)), int(m.group(2))
    if 0 <= hour < 24 and 0 <= minute < 60:
        return f"{hour:02d}:{minute:02d}"
    return DEFAULT_IMPORT_TIME
