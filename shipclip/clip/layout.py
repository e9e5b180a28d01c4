"""Positional reading of the daily export layout.

The back-office export lists a shipment as
``tracking, [sequence], [COD], name, phone, zip, [shipping cost], [status]``
with optional columns left out. Once the tracking number is known, the
phone column after it anchors the rest: the name sits right before the
phone, a bare number two columns before the phone is the COD amount, the
number after the zip is the shipping cost and the last column carries the
status (or the import date). Rows without a phone column after the tracking
number (bio rows, clipped fragments) have no layout.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .amounts import parse_amount
from .names import split_sequence, strip_social_prefix
from .patterns import COD_MARKER, NON_DIGIT_RE, normalize_phone

__all__ = [
    "DEFAULT_STATUS",
    "ColumnLayout",
    "read_column_layout",
]

# ไปรษณีย์รับฝากแล้ว
DEFAULT_STATUS = "รับฝาก"
STATUS_MAX_LENGTH = 20
STATUS_KEYWORDS = ("รับฝาก", "Deliver")

LAYOUT_PHONE_RE = re.compile(r"^[\d\-\s]{9,12}$", re.ASCII)
LAYOUT_PHONE_LEADS = ("0", "6", "8", "9")
NUMERIC_RE = re.compile(r"^[\d,.]+$", re.ASCII)
SEQUENCE_ONLY_RE = re.compile(r"^(\d+)\.+$", re.ASCII)
ZIP_RE = re.compile(r"^\d{5}$", re.ASCII)
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


@dataclass(frozen=True)
class ColumnLayout:
    """Fields read by column position; None where the column is absent."""
    phone_number: str
    customer_name: str | None = None
    sequence_number: str | None = None
    cod_amount: float | None = None
    shipping_cost: float | None = None
    status: str = DEFAULT_STATUS
    import_date: date | None = None


def _is_layout_phone(cell: str) -> bool:
    return LAYOUT_PHONE_RE.match(cell) is not None and cell.startswith(LAYOUT_PHONE_LEADS)


def _amount(cell: str) -> float | None:
    if NUMERIC_RE.match(cell) is None:
        return None
    return parse_amount(cell)


def _shipping_cost(parts: Sequence[str], used: set[int], zip_idx: int | None) -> tuple[float | None, int | None]:
    # 郵便番号の次の列、郵便番号が末尾なら末尾から 2 列目
    if zip_idx is not None and zip_idx + 1 < len(parts):
        idx = zip_idx + 1
    else:
        idx = len(parts) - 2
    if idx < 0 or idx in used:
        return None, None
    cost = _amount(parts[idx])
    if cost is None:
        return None, None
    return cost, idx


def _status_and_date(parts: Sequence[str], used: set[int]) -> tuple[str, date | None]:
    last_idx = len(parts) - 1
    if last_idx in used:
        return DEFAULT_STATUS, None

    last = parts[last_idx]
    m = ISO_DATE_RE.search(last)
    if m:
        try:
            imported = date.fromisoformat(m.group(0))
        except ValueError:
            imported = None
        # 最終列が日付のときはその前の列がステータス
        before = last_idx - 1
        if before >= 0 and before not in used and _amount(parts[before]) is None:
            return parts[before], imported
        return DEFAULT_STATUS, imported

    if _amount(last) is None and COD_MARKER not in last.upper() and (
        any(k in last for k in STATUS_KEYWORDS) or len(last) < STATUS_MAX_LENGTH
    ):
        return last, None
    return DEFAULT_STATUS, None


def read_column_layout(cells: Sequence[str], tracking_number: str) -> ColumnLayout | None:
    """Read the export layout around a known tracking number.

    Empty cells are ignored when counting positions.

    Returns:
        ColumnLayout, or None when no phone column follows the tracking number
    """
    parts = [c for c in cells if c]
    if tracking_number not in parts:
        return None
    tracking_idx = parts.index(tracking_number)

    phone_idx = next(
        (i for i in range(tracking_idx + 1, len(parts)) if _is_layout_phone(parts[i])),
        None,
    )
    if phone_idx is None:
        return None

    zip_idx = next(
        (i for i in range(tracking_idx + 1, len(parts)) if ZIP_RE.match(parts[i])),
        None,
    )
    if zip_idx is None and phone_idx + 1 < len(parts) and ZIP_RE.match(parts[phone_idx + 1]):
        zip_idx = phone_idx + 1

    used = {tracking_idx, phone_idx}
    if zip_idx is not None:
        used.add(zip_idx)

    name: str | None = None
    sequence = ""
    name_idx = phone_idx - 1
    if name_idx > tracking_idx:
        used.add(name_idx)
        sequence, raw_name = split_sequence(parts[name_idx])
        name = strip_social_prefix(raw_name) or None

    cod: float | None = None
    prev_idx = phone_idx - 2
    if prev_idx > tracking_idx:
        m = SEQUENCE_ONLY_RE.match(parts[prev_idx])
        if m:
            sequence = sequence or m.group(1)
            used.add(prev_idx)
        else:
            cod = _amount(parts[prev_idx])
            if cod is not None:
                used.add(prev_idx)

    # シーケンス番号のみの列が COD の前にある並び ("718.", "1,250", name, phone)
    if not sequence and cod is not None and prev_idx - 1 > tracking_idx:
        m = SEQUENCE_ONLY_RE.match(parts[prev_idx - 1])
        if m:
            sequence = m.group(1)
            used.add(prev_idx - 1)

    cost, cost_idx = _shipping_cost(parts, used, zip_idx)
    if cost_idx is not None:
        used.add(cost_idx)
    status, imported = _status_and_date(parts, used)

    return ColumnLayout(
        phone_number=normalize_phone(NON_DIGIT_RE.sub("", parts[phone_idx])),
        customer_name=name,
        sequence_number=sequence or None,
        cod_amount=cod,
        shipping_cost=cost,
        status=status,
        import_date=imported,
    )
