from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DIST_DIR = Path(os.getenv("CHECKLIST_DIST_DIR", str(PROJECT_ROOT / "dist")))


# ---------------------------
# Catalog service
# ---------------------------

DEFAULT_API_URL = "https://api.cofacts.tw/graphql"
CATALOG_API_URL = os.getenv("CHECKLIST_API_URL", DEFAULT_API_URL)

ARTICLE_URL_BASE = "https://cofacts.tw/article/"

HTTP_CONNECT_TIMEOUT = 5.0
HTTP_READ_TIMEOUT = 30.0

HTTP_USER_AGENT = "checklist-builder/1.0"


# ---------------------------
# Run policy
# ---------------------------

DEFAULT_PEOPLE = 2

# Sortable timestamp prefix of the output file name
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class RequestMode(str, Enum):
    """Which candidate pools a run draws from."""

    BOTH = "BOTH"
    FEEDBACK = "FEEDBACK"
    REPLY = "REPLY"


OUTPUT_FILENAMES: Dict[RequestMode, str] = {
    RequestMode.BOTH: "articles.xlsx",
    RequestMode.FEEDBACK: "articles-feedback.xlsx",
    RequestMode.REPLY: "articles-reply.xlsx",
}

SHEET_COLUMNS: List[str] = ["ID", "State", "Link", "Text", "Done"]

ROSTER_ACTIVATED_STATUS = "activated"
BACKUP_LABEL = "Backup"


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class Hyperlink(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    title: Optional[str] = None


class CandidateItem(BaseModel):
    """
    One article fetched from the catalog.
    Immutable once fetched; reply_count only classifies its state.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    text: str = ""
    hyperlinks: List[Hyperlink] = Field(default_factory=list)
    reply_count: int = Field(default=0, ge=0, alias="replyCount")


class DistributionEntry(BaseModel):
    """`group_count` reviewers, each wanting exactly `quota` articles."""

    model_config = ConfigDict(frozen=True)

    quota: int = Field(ge=1)
    group_count: int = Field(ge=1)


class AttendeeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    nickname: str = ""
    name: str = ""
    email: str = ""
    status: str = ROSTER_ACTIVATED_STATUS


class ChecklistRow(BaseModel):
    """
    One line of a reviewer's sheet.
    Field aliases match the sheet headers exactly.
    """

    model_config = ConfigDict(populate_by_name=True)

    ordinal: int = Field(ge=1, alias="ID")
    state: str = Field(alias="State")
    link: str = Field(alias="Link")
    text: str = Field(alias="Text")
    done: str = Field(default="", alias="Done")


class ChecklistSheet(BaseModel):
    label: str
    rows: List[ChecklistRow]
