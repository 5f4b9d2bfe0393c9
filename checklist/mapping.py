from __future__ import annotations
"""
Mapping utilities to turn allocated article ids into sheet rows.

Centralises the conversion from the id -> article lookup into the
Pydantic schemas (ChecklistRow / ChecklistSheet) so the exporter only
ever sees fully-built rows.
"""

from typing import List, Mapping, Sequence

from loguru import logger

from .allocation import Allocation
from .config import CandidateItem, ChecklistRow, ChecklistSheet
from .text_utils import article_state, article_text
from .utils.urls import article_url


def to_sheet_row(item: CandidateItem, ordinal: int) -> ChecklistRow:
    """Build one row; ordinal is 1-based within the reviewer's sheet."""
    return ChecklistRow(
        ordinal=ordinal,
        state=article_state(item).marker,
        link=article_url(item.id),
        text=article_text(item),
        done="",
    )


def map_group_to_rows(ids: Sequence[str], lookup: Mapping[str, CandidateItem]) -> List[ChecklistRow]:
    missing = [i for i in ids if i not in lookup]
    if missing:
        raise KeyError(f"Allocated ids missing from article lookup: {missing}")
    return [to_sheet_row(lookup[i], n) for n, i in enumerate(ids, start=1)]


def map_allocation_to_sheets(
    allocation: Allocation,
    labels: Sequence[str],
    lookup: Mapping[str, CandidateItem],
) -> List[ChecklistSheet]:
    if len(labels) != len(allocation):
        raise ValueError(f"{len(labels)} labels for {len(allocation)} groups")
    sheets = [
        ChecklistSheet(label=label, rows=map_group_to_rows(ids, lookup))
        for label, ids in zip(labels, allocation)
    ]
    logger.debug("Mapped {} groups into sheets", len(sheets))
    return sheets
