from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_CLASS, MAX_PAGE_LIMIT, MIN_CLASS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)


def parse_class_filter(value: Optional[str], field_name: str = "class") -> Optional[int]:
    """Blank means no filter; anything else must be a class number in range."""
    if value is None or not str(value).strip():
        return None
    class_number = require_int(str(value).strip(), field_name)
    if not MIN_CLASS <= class_number <= MAX_CLASS:
        raise ValidationError(f"{field_name} must be between {MIN_CLASS} and {MAX_CLASS}", field=field_name)
    return class_number


def parse_page(value: Optional[str], *, default: int = 1) -> int:
    if value is None or not str(value).strip():
        return default
    page = require_int(value, "page")
    if page < 1:
        raise ValidationError("page must be at least 1", field="page")
    return page


def parse_limit(value: Optional[str], *, default: int) -> int:
    if value is None or not str(value).strip():
        return default
    limit = require_int(value, "limit")
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}", field="limit")
    return limit


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
