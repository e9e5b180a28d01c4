"""shipclip - shipment records from spreadsheet copy/paste text.

Public entry points:
- tokenize(raw) -> list of rows (each a list of trimmed cells)
- resolve_fields(row, settings=None) -> ShipmentRecord
"""

from .clip.resolver import resolve_fields
from .clip.tokenizer import Row, tokenize
from .models.resolver_settings import ResolverSettings
from .models.shipment_record import ShipmentRecord

__all__ = [
    "Row",
    "ResolverSettings",
    "ShipmentRecord",
    "resolve_fields",
    "tokenize",
]
