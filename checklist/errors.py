"""Errors that abort a checklist run before anything is written."""

from __future__ import annotations


class ChecklistError(Exception):
    """Base class for fatal run errors."""


class InsufficientCandidates(ChecklistError):
    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Only {available} articles available, but {requested} were requested in total. "
            "Please adjust your params."
        )


class MalformedDistributionSpec(ChecklistError):
    def __init__(self, token: str, reason: str = "expected <quota>:<people> with both values >= 1"):
        self.token = token
        super().__init__(f"Malformed distribution {token!r}: {reason}")


class UpstreamFetchFailure(ChecklistError):
    """Transport, HTTP or GraphQL error from the catalog service."""


class RosterMismatch(ChecklistError):
    def __init__(self, roster_size: int, group_count: int):
        self.roster_size = roster_size
        self.group_count = group_count
        super().__init__(
            f"Roster provides {roster_size} names (backups included) "
            f"but the distribution asks for {group_count} reviewers"
        )


class RosterFormatError(ChecklistError):
    """Roster file exists but cannot be read as CSV or Excel."""
