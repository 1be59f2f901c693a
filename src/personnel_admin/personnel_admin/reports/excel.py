from __future__ import annotations

import io
from datetime import date
from typing import Mapping, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..core.constants import COLUMN_PADDING, MIN_COLUMN_WIDTH

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def column_widths(columns: Sequence[str], rows: Sequence[Mapping[str, object]]) -> list[int]:
    """Width per column: max(header, longest cell, floor) plus padding."""
    widths = []
    for col in columns:
        longest = max((len(_cell_text(r.get(col))) for r in rows), default=0)
        widths.append(max(len(col), longest, MIN_COLUMN_WIDTH) + COLUMN_PADDING)
    return widths


def write_workbook(sheets: Mapping[str, tuple[Sequence[str], Sequence[Mapping[str, object]]]]) -> bytes:
    """Write one sheet per entry (name -> (columns, rows)) and return the xlsx bytes."""
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet_name, (columns, rows) in sheets.items():
            df = pd.DataFrame([{c: r.get(c, "") for c in columns} for r in rows], columns=list(columns))
            df.to_excel(writer, index=False, sheet_name=sheet_name)

            ws = writer.sheets[sheet_name]
            for i, width in enumerate(column_widths(columns, rows), start=1):
                ws.column_dimensions[get_column_letter(i)].width = width

    return output.getvalue()


def export_filename(kind: str, on: date) -> str:
    return f"{kind}-report-{on.isoformat()}.xlsx"


def _cell_text(value: object) -> str:
    return "" if value is None else str(value)
