from __future__ import annotations

import re
from functools import lru_cache

"""Named shape predicates used by the field resolver.

Each predicate answers one "does this cell look like X" question so that a
single courier or phone rule can be tested on its own. Digit classes are
compiled with ``re.ASCII``: Thai digits and other non-ASCII numerals never
count as digits here, while the rest of a cell may hold any script.
"""

__all__ = [
    "DEFAULT_COURIER_PREFIXES",
    "DEFAULT_BIO_MIN_LENGTH",
    "UNNAMED_CUSTOMER",
    "courier_tracking_pattern",
    "is_courier_tracking",
    "is_fallback_tracking",
    "phone_digits_if_column",
    "find_embedded_phone",
    "normalize_phone",
    "is_bio_cell",
    "is_product_code",
    "is_name_noise_line",
    "is_zip_cell",
    "find_embedded_zip",
]

DEFAULT_COURIER_PREFIXES: tuple[str, ...] = ("JN", "SP", "TH", "Kerry", "Flash")
DEFAULT_BIO_MIN_LENGTH = 20
# 名前を特定できなかった場合の表示用プレースホルダ
UNNAMED_CUSTOMER = "ไม่ระบุชื่อ"

# Thailand Post: JN.........TH
POSTAL_PREFIX = "JN"
POSTAL_SUFFIX = "TH"

FALLBACK_TRACKING_RE = re.compile(r"^[A-Z0-9]{10,15}$", re.ASCII)
NON_DIGIT_RE = re.compile(r"[^0-9]")
PHONE_COLUMN_RE = re.compile(r"^0\d{9}$", re.ASCII)
EMBEDDED_PHONE_RE = re.compile(r"0\d{8,9}", re.ASCII)
PRODUCT_CODE_RE = re.compile(r"^[A-Z]\d+B\d+", re.ASCII)
ZIP_CELL_RE = re.compile(r"^\d{5}$", re.ASCII)
EMBEDDED_ZIP_RE = re.compile(r"\b\d{5}\b", re.ASCII)

NOISE_LINE_PREFIXES = ("#", "💢")
COD_MARKER = "COD"
MIN_NAME_LENGTH = 2


@lru_cache(maxsize=32)
def courier_tracking_pattern(prefixes: tuple[str, ...]) -> re.Pattern[str]:
    """Compile the prefixed tracking-number pattern for a set of couriers."""
    alternation = "|".join(re.escape(p) for p in prefixes)
    return re.compile(rf"^(?:{alternation})\d{{8,16}}[A-Z]*$", re.IGNORECASE | re.ASCII)


def is_courier_tracking(cell: str, prefixes: tuple[str, ...] = DEFAULT_COURIER_PREFIXES) -> bool:
    if prefixes and courier_tracking_pattern(prefixes).match(cell):
        return True
    return cell.startswith(POSTAL_PREFIX) and cell.endswith(POSTAL_SUFFIX)


def is_fallback_tracking(cell: str) -> bool:
    return FALLBACK_TRACKING_RE.match(cell) is not None


def phone_digits_if_column(cell: str) -> str | None:
    """Return the digits of a cell that is a whole 10-digit phone number.

    Separators are ignored, so ``"081-234-5678"`` qualifies.
    """
    digits = NON_DIGIT_RE.sub("", cell)
    return digits if PHONE_COLUMN_RE.match(digits) else None


def find_embedded_phone(text: str) -> str | None:
    m = EMBEDDED_PHONE_RE.search(text)
    return m.group(0) if m else None


def normalize_phone(digits: str) -> str:
    """Prepend the leading zero to a 9-digit match; anything else is kept."""
    if len(digits) == 9:
        return "0" + digits
    return digits


def is_bio_cell(cell: str, min_length: int = DEFAULT_BIO_MIN_LENGTH) -> bool:
    """A multi-line free text block (name, address and phone pasted together)."""
    return len(cell) > min_length and "\n" in cell


def is_product_code(line: str) -> bool:
    return PRODUCT_CODE_RE.match(line) is not None


def is_name_noise_line(line: str) -> bool:
    """Bio lines that can never be the customer name."""
    return (
        line.startswith(NOISE_LINE_PREFIXES)
        or COD_MARKER in line
        or is_product_code(line)
        or len(line) <= MIN_NAME_LENGTH
    )


def is_zip_cell(cell: str) -> bool:
    return ZIP_CELL_RE.match(cell) is not None


def find_embedded_zip(text: str) -> str | None:
    m = EMBEDDED_ZIP_RE.search(text)
    return m.group(0) if m else None
