from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import ReportType
from ..core.exceptions import ValidationError
from .service import ReportFilters


@dataclass(frozen=True)
class Page:
    rows: list[dict]
    page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: Any, pages: int) -> int:
    try:
        value = int(page)
    except (TypeError, ValueError):
        value = 1
    return max(1, min(pages, value))


def paginate(rows: Sequence[dict], page: Any = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    if page_size < 1:
        raise ValueError("page_size must be positive")
    pages = total_pages(len(rows), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        rows=list(rows[start:start + page_size]),
        page=current,
        total_pages=pages,
        total_items=len(rows),
        page_size=page_size,
    )


@dataclass
class ReportPreview:
    """On-screen preview state. Changing the report type or any filter goes back to page 1."""

    report_type: ReportType = ReportType.EMPLOYEES
    filters: ReportFilters = field(default_factory=ReportFilters)
    page: int = 1

    def select(self, report_type: ReportType, filters: Optional[ReportFilters] = None, page: Any = 1) -> None:
        filters = filters or ReportFilters()
        if report_type != self.report_type or filters != self.filters:
            self.report_type = report_type
            self.filters = filters
            self.page = 1
        else:
            try:
                self.page = max(1, int(page))
            except (TypeError, ValueError):
                self.page = 1

    def render(self, rows: Sequence[dict], page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        result = paginate(rows, self.page, page_size)
        self.page = result.page
        return result

    def to_session(self) -> dict:
        return {"type": self.report_type.value, "filters": self.filters.as_dict(), "page": self.page}

    @classmethod
    def from_session(cls, data: Optional[dict]) -> "ReportPreview":
        if not data:
            return cls()
        try:
            return cls(
                report_type=ReportType(data.get("type", ReportType.EMPLOYEES.value)),
                filters=ReportFilters.from_mapping(data.get("filters") or {}),
                page=int(data.get("page", 1)),
            )
        except (ValueError, TypeError, ValidationError):
            return cls()
