from __future__ import annotations

import zipfile
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from .config import BACKUP_LABEL, ROSTER_ACTIVATED_STATUS, AttendeeRecord
from .errors import RosterFormatError, RosterMismatch


# ---------------------------
# Column detection / standardization
# ---------------------------

# Attendee exports come from different ticketing tools; accept the usual headers.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "nickname": ["nickname", "Nickname", "Nick Name", "display_name", "暱稱"],
    "name": ["name", "Name", "Full Name", "Legal Name", "姓名"],
    "email": ["email", "Email", "E-mail", "Email Address", "電子郵件"],
    "status": ["status", "Status", "Ticket Status", "狀態"],
}


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).strip().lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.debug("Standardizing roster columns with map: {}", col_map)
    return df.rename(columns=col_map)


def _read_any(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Roster file not found: {path}")
    try:
        if path.suffix.lower() in [".xlsx", ".xls"]:
            return pd.read_excel(path, dtype=str)
        return pd.read_csv(path, dtype=str, encoding="utf-8-sig")
    # EmptyDataError, ParserError and UnicodeDecodeError are ValueErrors
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise RosterFormatError(f"Cannot read roster {path}: {e}") from e


def _cell(row: pd.Series, col: str) -> str:
    val = row.get(col)
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return ""
    return str(val).strip()


def load_roster(path: Path) -> List[AttendeeRecord]:
    """
    Read an attendee export (CSV or Excel).

    Keeps only activated attendees, drops repeated emails (first one wins)
    and preserves file order.
    """
    df = _standardize_columns(_read_any(Path(path)))
    if "status" not in df.columns:
        logger.warning("Roster {} has no status column; treating every row as activated", path)

    records: List[AttendeeRecord] = []
    seen_emails = set()
    skipped = 0
    for _, row in df.iterrows():
        status = _cell(row, "status").lower() if "status" in df.columns else ROSTER_ACTIVATED_STATUS
        if status != ROSTER_ACTIVATED_STATUS:
            skipped += 1
            continue
        email = _cell(row, "email")
        key = email.lower()
        if key and key in seen_emails:
            skipped += 1
            continue
        if key:
            seen_emails.add(key)
        records.append(
            AttendeeRecord(
                nickname=_cell(row, "nickname"),
                name=_cell(row, "name"),
                email=email,
                status=status,
            )
        )

    if skipped:
        logger.warning("Skipped {} roster rows (not activated or repeated email)", skipped)
    logger.info("Loaded {} attendees from {}", len(records), path)
    return records


def backup_records(count: int) -> List[AttendeeRecord]:
    """Synthetic seats appended after the real attendees."""
    return [AttendeeRecord(nickname=f"{BACKUP_LABEL} {i}") for i in range(1, count + 1)]


# ---------------------------
# Identity resolution
# ---------------------------

def email_handle(record: AttendeeRecord) -> str:
    return record.email.split("@", 1)[0].strip()


def normalize_legal_name(name: str) -> str:
    name = (name or "").strip()
    # three characters: one-character family name, keep the given name
    if len(name) == 3:
        return name[1:]
    return name


def display_name(record: AttendeeRecord) -> str:
    nickname = record.nickname.strip()
    if nickname:
        return nickname
    return normalize_legal_name(record.name) or email_handle(record)


def ordinal_labels(group_count: int) -> List[str]:
    return [f"No. {k + 1}" for k in range(group_count)]


def resolve_labels(records: Optional[Sequence[AttendeeRecord]], group_count: int) -> List[str]:
    """
    One label per group. Record i labels group i.

    Names shared by several records get the email handle appended,
    e.g. ``Amy (amy.chen)``.
    """
    if records is None:
        return ordinal_labels(group_count)
    if len(records) != group_count:
        raise RosterMismatch(roster_size=len(records), group_count=group_count)

    names = [display_name(r) for r in records]
    counts = Counter(names)

    labels: List[str] = []
    for idx, (record, name) in enumerate(zip(records, names)):
        if counts[name] > 1:
            key = email_handle(record) or f"#{idx + 1}"
            labels.append(f"{name} ({key})")
        else:
            labels.append(name)
    return labels
