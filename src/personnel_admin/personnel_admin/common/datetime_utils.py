from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> Optional[date]:
    """Accept date, datetime, ISO strings or blanks (stored documents carry strings)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return parse_iso_date(text[:10])


def coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    return datetime.fromisoformat(str(value).strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def later_than(previous: Optional[datetime], now: datetime) -> datetime:
    """Return ``now``, nudged forward so it is strictly after ``previous``."""
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def calculate_age(birth_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Completed years between birth_date and today.

    One year is subtracted when this year's birthday has not happened yet.
    """
    if birth_date is None:
        return None
    today = today or now_local().date()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def format_display_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else ""
