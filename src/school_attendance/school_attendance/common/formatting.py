from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union


def percentage(part: int, whole: int) -> str:
    """part/whole as a percentage string with two decimals, "0.00%" for an empty whole."""
    if whole <= 0:
        return "0.00%"
    return f"{part / whole * 100:.2f}%"


def iso_or_none(value: Optional[Union[date, datetime]]) -> Optional[str]:
    return value.isoformat() if value else None
