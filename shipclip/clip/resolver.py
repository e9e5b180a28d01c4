from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..models.resolver_settings import ResolverSettings
from ..models.shipment_record import ShipmentRecord
from . import patterns

"""Heuristic field resolver for one pasted row.

Columns carry no fixed schema: the same field shows up in different
positions depending on which sheet the operator copied from. Each field is
resolved by an ordered tuple of named strategies; the first one returning a
value wins. Nothing here raises on content - a field with no match stays
None (or the placeholder, for the customer name).
"""

__all__ = [
    "RowContext",
    "TRACKING_STRATEGIES",
    "PHONE_STRATEGIES",
    "BIO_NAME_STRATEGIES",
    "CELL_NAME_STRATEGIES",
    "ZIP_STRATEGIES",
    "resolve_fields",
]

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = ResolverSettings()

NAME_MAX_LENGTH = 50
NAME_EXCLUDED_PREFIXES = ("COD", "TT")


@dataclass(frozen=True)
class RowContext:
    """Inputs shared by every strategy for one row."""
    cells: Sequence[str]
    settings: ResolverSettings
    bio: str | None = None
    tracking_number: str | None = None
    phone_number: str | None = None


Strategy = Callable[[RowContext], str | None]


def _first_match(field: str, strategies: Sequence[tuple[str, Strategy]], ctx: RowContext) -> str | None:
    for name, strategy in strategies:
        value = strategy(ctx)
        if value:
            logger.debug(f"{field}: matched by {name}")
            return value
    return None


def _find_bio(cells: Sequence[str], min_length: int) -> str | None:
    return next((c for c in cells if patterns.is_bio_cell(c, min_length)), None)


# --- tracking number ---

def _tracking_by_courier_prefix(ctx: RowContext) -> str | None:
    prefixes = tuple(ctx.settings.courier_prefixes)
    return next((c for c in ctx.cells if patterns.is_courier_tracking(c, prefixes)), None)


def _tracking_by_alnum_shape(ctx: RowContext) -> str | None:
    return next((c for c in ctx.cells if patterns.is_fallback_tracking(c)), None)


TRACKING_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("courier_prefix", _tracking_by_courier_prefix),
    ("alnum_shape", _tracking_by_alnum_shape),
)


# --- phone number ---

def _phone_by_column(ctx: RowContext) -> str | None:
    for cell in ctx.cells:
        digits = patterns.phone_digits_if_column(cell)
        if digits:
            return digits
    return None


def _phone_in_bio(ctx: RowContext) -> str | None:
    if ctx.bio is None:
        return None
    return patterns.find_embedded_phone(ctx.bio)


def _phone_in_any_cell(ctx: RowContext) -> str | None:
    # bio セルがある場合は bio 検索の結果のみを採用 (全セル走査しない)
    if ctx.bio is not None:
        return None
    for cell in ctx.cells:
        found = patterns.find_embedded_phone(cell)
        if found:
            return found
    return None


PHONE_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("phone_column", _phone_by_column),
    ("bio_search", _phone_in_bio),
    ("any_cell_search", _phone_in_any_cell),
)


# --- customer name ---

def _name_from_bio_lines(ctx: RowContext) -> str | None:
    if ctx.bio is None:
        return None
    lines = [line.strip() for line in ctx.bio.split("\n")]
    return next((line for line in lines if line and not patterns.is_name_noise_line(line)), None)


def _is_name_candidate(cell: str, ctx: RowContext) -> bool:
    if cell == ctx.tracking_number:
        return False
    if ctx.phone_number and ctx.phone_number in cell:
        return False
    if not (patterns.MIN_NAME_LENGTH < len(cell) < NAME_MAX_LENGTH):
        return False
    if cell.isascii() and cell.isdigit():
        return False
    return not cell.upper().startswith(NAME_EXCLUDED_PREFIXES)


def _name_from_cells(ctx: RowContext) -> str | None:
    return next((c for c in ctx.cells if _is_name_candidate(c, ctx)), None)


BIO_NAME_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("bio_lines", _name_from_bio_lines),
)
CELL_NAME_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("plain_cell", _name_from_cells),
)


# --- zip code ---

def _zip_by_column(ctx: RowContext) -> str | None:
    return next((c for c in ctx.cells if patterns.is_zip_cell(c)), None)


def _zip_in_bio(ctx: RowContext) -> str | None:
    if ctx.bio is None:
        return None
    return patterns.find_embedded_zip(ctx.bio)


ZIP_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("zip_column", _zip_by_column),
    ("bio_search", _zip_in_bio),
)


def resolve_fields(row: Sequence[str], settings: ResolverSettings | None = None) -> ShipmentRecord:
    """Recognise tracking number, phone, customer name and zip code in a row.

    Args:
        row: Cells of one tokenized row, in pasted column order
        settings: Resolver thresholds (defaults when None)

    Returns:
        ShipmentRecord; unmatched fields are None, the name falls back to
        ``settings.unnamed_placeholder``
    """
    settings = settings or DEFAULT_SETTINGS
    cells = tuple(row)
    ctx = RowContext(cells=cells, settings=settings, bio=_find_bio(cells, settings.bio_min_length))

    tracking = _first_match("tracking_number", TRACKING_STRATEGIES, ctx)

    phone = _first_match("phone_number", PHONE_STRATEGIES, ctx)
    if phone is not None:
        phone = patterns.normalize_phone(phone)

    ctx = RowContext(
        cells=cells,
        settings=settings,
        bio=ctx.bio,
        tracking_number=tracking,
        phone_number=phone,
    )
    # bio セルが存在する場合は bio の行のみから名前を選ぶ
    name_strategies = BIO_NAME_STRATEGIES if ctx.bio is not None else CELL_NAME_STRATEGIES
    name = _first_match("customer_name", name_strategies, ctx) or settings.unnamed_placeholder

    zip_code = _first_match("zip_code", ZIP_STRATEGIES, ctx)

    return ShipmentRecord(
        customer_name=name,
        tracking_number=tracking,
        phone_number=phone,
        zip_code=zip_code,
    )
