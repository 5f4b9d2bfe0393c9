from __future__ import annotations

"""
Partition a shuffled candidate list into per-reviewer groups.

A distribution such as ``10:2 5:3`` means two reviewers get ten articles
each, then three reviewers get five each. :func:`expand_distribution`
flattens it to one quota per reviewer, and :func:`allocate` slices the
candidate list contiguously in that order. No randomness happens here.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pydantic import ValidationError

from .config import DistributionEntry
from .errors import MalformedDistributionSpec

_TOKEN_RE = re.compile(r"^\s*(\d+)\s*:\s*(\d+)\s*$")


@dataclass(frozen=True)
class FlatAllocationPlan:
    """One quota per group, in distribution order."""

    quotas: Tuple[int, ...]

    @property
    def total_required(self) -> int:
        return sum(self.quotas)

    @property
    def group_count(self) -> int:
        return len(self.quotas)

    def cursors(self) -> Tuple[int, ...]:
        """Exclusive running sum: where each group's slice starts."""
        out: List[int] = []
        running = 0
        for q in self.quotas:
            out.append(running)
            running += q
        return tuple(out)


Allocation = Tuple[Tuple[str, ...], ...]


def parse_distribution_token(token: str) -> DistributionEntry:
    m = _TOKEN_RE.match(token or "")
    if not m:
        raise MalformedDistributionSpec(token)
    try:
        return DistributionEntry(quota=int(m.group(1)), group_count=int(m.group(2)))
    except ValidationError as e:
        raise MalformedDistributionSpec(token) from e


def parse_distribution(tokens: Sequence[str]) -> List[DistributionEntry]:
    return [parse_distribution_token(t) for t in tokens]


def required_total(distribution: Sequence[DistributionEntry]) -> int:
    return sum(e.quota * e.group_count for e in distribution)


def expand_distribution(distribution: Sequence[DistributionEntry]) -> FlatAllocationPlan:
    quotas: List[int] = []
    for entry in distribution:
        quotas.extend([entry.quota] * entry.group_count)
    return FlatAllocationPlan(quotas=tuple(quotas))


def allocate(candidate_ids: Sequence[str], plan: FlatAllocationPlan) -> Allocation:
    """
    candidate_ids: final candidate set, exactly plan.total_required long
    plan: flattened quotas

    Group k receives candidate_ids[cursor_k : cursor_k + quota_k].
    """
    if len(candidate_ids) != plan.total_required:
        raise ValueError(
            f"Candidate set has {len(candidate_ids)} ids, plan needs {plan.total_required}"
        )
    ids = tuple(candidate_ids)
    return tuple(
        ids[cursor:cursor + quota] for cursor, quota in zip(plan.cursors(), plan.quotas)
    )
