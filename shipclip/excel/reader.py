from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..clip.tokenizer import Row

"""Excel reader.

xlsx exports are read with pandas (openpyxl engine). Only the first sheet is
used: operators export one sheet per day. Every cell is turned into a trimmed
string so rows look exactly like tokenized clipboard rows and go through the
same resolver. Rows whose cells are all empty are dropped.
"""

__all__ = [
    "SheetReadError",
    "read_first_sheet",
    "sheet_to_rows",
]


class SheetReadError(Exception):
    """Raised when a workbook has no readable sheet."""


def _cell_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    # 整数値の float は "812345678.0" にならないよう int 化
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value).strip()


def read_first_sheet(path: Path) -> pd.DataFrame:
    """Read the first sheet without a header row and without NA conversion.

    keep_default_na=False keeps strings such as "NA" or "null" as text.
    """
    xls = pd.ExcelFile(path)
    if not xls.sheet_names:
        raise SheetReadError(f"workbook '{path.name}' has no sheets")
    return xls.parse(xls.sheet_names[0], header=None, dtype=object, keep_default_na=False)


def sheet_to_rows(df: pd.DataFrame) -> list[Row]:
    rows: list[Row] = []
    for raw in df.itertuples(index=False, name=None):
        cells = [_cell_text(v) for v in raw]
        if not any(cells):
            continue
        rows.append(cells)
    return rows
