from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""ShipmentRecord model: the best-effort result of resolving one pasted row."""

__all__ = [
    "ShipmentRecord",
]


@dataclass(frozen=True)
class ShipmentRecord:
    """Fields recognised in a single row.

    Unrecognised fields stay None; customer_name always holds a value and
    falls back to the configured placeholder.
    """
    customer_name: str
    tracking_number: str | None = None
    phone_number: str | None = None  # 10 digits, leading 0
    zip_code: str | None = None  # 5 digits

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
