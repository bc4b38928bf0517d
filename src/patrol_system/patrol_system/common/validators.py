from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_float(value: Any, field_name: str) -> float:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} must be a number")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if result != result or result in (float("inf"), float("-inf")):
        raise ValidationError(f"{field_name} must be a number")
    return result


def parse_optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_float(value, field_name)


def require_between(value: float, field_name: str, low: float, high: float) -> float:
    if value < low or value > high:
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    return value


def parse_month_year(month: Any, year: Any) -> tuple[int, int]:
    """Validate report parameters before any query is built."""
    m = parse_int(month, "month")
    y = parse_int(year, "year")
    if not 1 <= m <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1000 <= y <= 9999:
        raise ValidationError("year must be a 4-digit year")
    if (y, m) == (9999, 12):
        # The month after would fall past datetime.max.
        raise ValidationError("month/year is past the last supported month (11/9999)")
    return m, y


def parse_bool(value: Any, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
