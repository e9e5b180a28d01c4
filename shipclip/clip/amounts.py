from __future__ import annotations

import re
from collections.abc import Sequence

"""COD (cash on delivery) amount parsing.

Amounts are written like ``1,250`` or ``฿590.50``; the COD amount is found in
a cell or bio line shaped like ``COD 590`` / ``COD: ฿1,250``.
"""

__all__ = [
    "MAX_AMOUNT",
    "parse_amount",
    "find_cod_amount",
]

MAX_AMOUNT = 9_999_999
_AMOUNT_NOISE_RE = re.compile(r"[฿,\s]")
_COD_RE = re.compile(r"COD\s*[:=]?\s*฿?\s*([0-9][0-9,]*(?:\.[0-9]+)?)", re.IGNORECASE)


def parse_amount(text: str | None) -> float:
    """Parse a money string; anything unusable counts as 0.0."""
    if not text:
        return 0.0
    cleaned = _AMOUNT_NOISE_RE.sub("", text)
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    # nan/inf も範囲外として扱う
    if not 0 <= value <= MAX_AMOUNT:
        return 0.0
    return value


def find_cod_amount(cells: Sequence[str]) -> float:
    for cell in cells:
        for line in cell.split("\n"):
            m = _COD_RE.search(line)
            if m:
                return parse_amount(m.group(1))
    return 0.0
