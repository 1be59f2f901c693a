"""Parsing of request payload values into domain types."""
from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import coerce_date


def optional_date(payload: Mapping[str, Any], key: str) -> Optional[date]:
    try:
        return coerce_date(payload.get(key))
    except ValueError:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)", {key: "Invalid date"})


def as_bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
