from __future__ import annotations

"""
End-to-end checklist generation.

- Pools are fetched according to the request mode, all before sampling
- Any error (roster, fetch, shortage) is raised before the workbook is written
- The written path is returned so callers can report or open it
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from loguru import logger

from .allocation import allocate, expand_distribution
from .catalog_fetch import OrderKey
from .config import DIST_DIR, AttendeeRecord, CandidateItem, DistributionEntry, RequestMode
from .export import output_filename, write_workbook
from .mapping import map_allocation_to_sheets
from .roster import resolve_labels
from .sampling import Shuffler, build_item_lookup, dedupe_candidates, fill_from_fallback


class CandidateSource(Protocol):
    def fetch_unanswered(self, count: int, order: OrderKey) -> List[CandidateItem]: ...

    def fetch_low_feedback_answered(self, count: int) -> List[CandidateItem]: ...


def generate_checklist(
    distribution: Sequence[DistributionEntry],
    mode: RequestMode,
    source: CandidateSource,
    shuffler: Shuffler,
    roster: Optional[Sequence[AttendeeRecord]] = None,
    dist_dir: Path = DIST_DIR,
    now: Optional[datetime] = None,
) -> Path:
    plan = expand_distribution(distribution)
    amount = plan.total_required
    labels = resolve_labels(roster, plan.group_count)

    newest: List[CandidateItem] = []
    most_asked: List[CandidateItem] = []
    low_feedback: List[CandidateItem] = []

    # --- 1) Fetch pools ---
    if mode != RequestMode.FEEDBACK:
        newest = source.fetch_unanswered(amount, OrderKey.RECENCY)
        logger.info("Fetched {} latest not-replied articles.", len(newest))
        most_asked = source.fetch_unanswered(amount, OrderKey.REQUEST_FREQUENCY)
        logger.info("Fetched {} most-asked not-replied articles.", len(most_asked))

    if mode != RequestMode.REPLY:
        low_feedback = source.fetch_low_feedback_answered(amount)
        logger.info("Fetched {} replied articles with not enough feedback.", len(low_feedback))

    lookup = build_item_lookup(newest, most_asked, low_feedback)

    # --- 2) Sample ---
    candidate_ids = dedupe_candidates(newest, most_asked, amount, shuffler)
    candidate_ids = fill_from_fallback(candidate_ids, amount, low_feedback, shuffler)

    # --- 3) Partition + map ---
    allocation = allocate(candidate_ids, plan)
    sheets = map_allocation_to_sheets(allocation, labels, lookup)

    # --- 4) Export ---
    destination = Path(dist_dir) / output_filename(mode, now)
    write_workbook(sheets, destination)

    logger.info('File "{}" has been saved to: {}', destination.name, destination.parent)
    for entry in distribution:
        logger.info("=> {} articles for {} people", entry.quota, entry.group_count)
    return destination
