from __future__ import annotations

from numbers import Real
from typing import Any, Optional

from ..core.constants import MAX_WEEKS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


def require_week_number(value: Any) -> int:
    # bool is an int subclass; "true" is not a week number
    if isinstance(value, bool):
        raise ValidationError("Week number must be between 1 and 24")
    try:
        week_number = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Week number must be between 1 and 24")
    if week_number != value and str(week_number) != str(value).strip():
        raise ValidationError("Week number must be between 1 and 24")
    if week_number < 1 or week_number > MAX_WEEKS:
        raise ValidationError("Week number must be between 1 and 24")
    return week_number


def require_number_in_range(value: Any, field_name: str, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, str)):
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    try:
        number = float(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    if number != number or number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    return number


def require_string_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    out: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError(f"{field_name} must contain non-empty strings")
        out.append(item.strip())
    return out
