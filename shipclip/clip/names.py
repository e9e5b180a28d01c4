from __future__ import annotations

import re

"""Customer name clean-up applied at import time.

Operators often prefix the name with the running order number of the day
("718. Somchai") or with the channel the order came from ("FB. Somchai").
"""

__all__ = [
    "split_sequence",
    "strip_social_prefix",
    "clean_customer_name",
]

SEQUENCE_RE = re.compile(r"^(\d+)[.\s]+(.*)", re.ASCII | re.DOTALL)
SOCIAL_PREFIX_RE = re.compile(r"^(fb|f\.b\.|f\.b|facebook)[.\s]*", re.IGNORECASE)


def split_sequence(raw_name: str) -> tuple[str, str]:
    """Return (sequence, name); sequence is "" when the name has none."""
    name = raw_name.strip()
    m = SEQUENCE_RE.match(name)
    if m:
        return m.group(1), m.group(2).strip()
    return "", name


def strip_social_prefix(name: str) -> str:
    return SOCIAL_PREFIX_RE.sub("", name, count=1).strip()


def clean_customer_name(raw_name: str, placeholder: str) -> tuple[str, str]:
    """Split off the sequence number and channel prefix from a resolved name.

    The placeholder itself passes through untouched.

    Returns:
        (sequence, name) where name falls back to placeholder when empty
    """
    if raw_name == placeholder:
        return "", placeholder
    sequence, name = split_sequence(raw_name)
    name = strip_social_prefix(name)
    return sequence, name or placeholder
