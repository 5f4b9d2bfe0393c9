from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger
from openpyxl.styles import Font

from .config import OUTPUT_FILENAMES, SHEET_COLUMNS, TIMESTAMP_FORMAT, ChecklistSheet, RequestMode
from .utils.urls import is_url

# Excel limits on worksheet titles
_SHEET_TITLE_MAX = 31
_SHEET_TITLE_FORBIDDEN = re.compile(r"[\[\]:*?/\\]")

_HYPERLINK_FONT = Font(color="0563C1", underline="single")


def output_filename(mode: RequestMode, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{now.strftime(TIMESTAMP_FORMAT)}-{OUTPUT_FILENAMES[RequestMode(mode)]}"


def sheet_titles(labels: Sequence[str]) -> List[str]:
    """Excel-safe, unique worksheet titles in label order."""
    titles: List[str] = []
    used = set()
    for label in labels:
        base = _SHEET_TITLE_FORBIDDEN.sub("_", label).strip().strip("'") or "Sheet"
        base = base[:_SHEET_TITLE_MAX]
        title = base
        n = 2
        while title.lower() in used:
            suffix = f" {n}"
            title = base[:_SHEET_TITLE_MAX - len(suffix)] + suffix
            n += 1
        used.add(title.lower())
        titles.append(title)
    return titles


def _sheet_frame(sheet: ChecklistSheet) -> pd.DataFrame:
    rows = [r.model_dump(by_alias=True) for r in sheet.rows]
    return pd.DataFrame(rows, columns=SHEET_COLUMNS)


def _link_url_cells(ws) -> int:
    linked = 0
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if is_url(cell.value):
                cell.hyperlink = cell.value
                cell.font = _HYPERLINK_FONT
                linked += 1
    return linked


def write_workbook(sheets: Sequence[ChecklistSheet], destination: Path) -> Path:
    """
    Write one worksheet per reviewer to ``destination``.

    The workbook is written next to the destination first and moved into
    place once complete, so a failed write leaves no file behind.
    """
    if not sheets:
        raise ValueError("Refusing to write a workbook with no sheets")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(f".partial-{destination.name}")

    titles = sheet_titles([s.label for s in sheets])
    try:
        with pd.ExcelWriter(partial, engine="openpyxl") as xw:
            for title, sheet in zip(titles, sheets):
                _sheet_frame(sheet).to_excel(xw, sheet_name=title, index=False)
                _link_url_cells(xw.sheets[title])
        partial.replace(destination)
    finally:
        if partial.exists():
            partial.unlink()

    logger.info("Workbook with {} sheets written to {}", len(sheets), destination)
    return destination
