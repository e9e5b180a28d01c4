from __future__ import annotations

from dataclasses import dataclass

from ..clip.patterns import DEFAULT_BIO_MIN_LENGTH, DEFAULT_COURIER_PREFIXES, UNNAMED_CUSTOMER

"""Tunable constants for the field resolver.

Older paste scripts disagreed on the bio-cell cutoff (20 vs 30 characters)
and on which courier prefixes to accept, so both are settings rather than
literals. Values come from the ``resolver`` section of config/import.yml.
"""

__all__ = [
    "ResolverSettings",
]


@dataclass(frozen=True)
class ResolverSettings:
    """Thresholds and markers used by resolve_fields()."""
    bio_min_length: int = DEFAULT_BIO_MIN_LENGTH  # bio cell: len > this and contains "\n"
    courier_prefixes: tuple[str, ...] = DEFAULT_COURIER_PREFIXES
    unnamed_placeholder: str = UNNAMED_CUSTOMER  # name not identified
