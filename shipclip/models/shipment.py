from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from ..clip.layout import DEFAULT_STATUS

"""ImportedShipment model: a resolved row enriched with import metadata."""

__all__ = [
    "ImportedShipment",
    "SHIPMENT_COLUMNS",
]

# INSERT 列順 (ImportedShipment.as_row と一致させること)
SHIPMENT_COLUMNS: tuple[str, ...] = (
    "tracking_number",
    "customer_name",
    "phone_number",
    "zip_code",
    "cod_amount",
    "shipping_cost",
    "status",
    "courier",
    "import_date",
    "import_time",
    "sequence_number",
    "source_file",
)


@dataclass(frozen=True)
class ImportedShipment:
    """One shipment ready to be handed to the persistence layer."""
    tracking_number: str
    customer_name: str
    phone_number: str | None
    zip_code: str | None
    cod_amount: float
    courier: str
    import_date: date
    import_time: str  # HH:MM
    sequence_number: str | None  # running order number of the day, e.g. "718"
    source_file: str
    row_number: int  # 1-based row in the source file (header rows included)
    shipping_cost: float = 0.0
    status: str = DEFAULT_STATUS

    def as_row(self) -> tuple[Any, ...]:
        return tuple(getattr(self, col) for col in SHIPMENT_COLUMNS)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["import_date"] = self.import_date.isoformat()
        return data
