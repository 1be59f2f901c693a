from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def is_digits(value: Optional[str], length: int) -> bool:
    return bool(value) and len(value) == length and value.isdigit()


def is_email(value: Optional[str]) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value))


def check_date_order(start: Optional[date], end: Optional[date]) -> bool:
    """True when either side is missing or end is not before start."""
    if start is None or end is None:
        return True
    return end >= start


def raise_if_errors(errors: dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise ValidationError(message, errors)
