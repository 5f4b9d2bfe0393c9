from __future__ import annotations

"""
Candidate sampling: merge the unanswered pools, shuffle, and top up from
the low-feedback pool when the merged set is short.

Randomness only enters through a :class:`Shuffler`, so a seeded shuffler
reproduces a run exactly. Everything downstream of this module is
deterministic.
"""

import random
from types import MappingProxyType
from typing import Hashable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from loguru import logger

from .config import CandidateItem
from .errors import InsufficientCandidates

T = TypeVar("T")


class Shuffler:
    """Uniform random permutations from a private ``random.Random``."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def shuffle(self, seq: Iterable[T]) -> List[T]:
        out = list(seq)
        # Fisher-Yates; every permutation equally likely
        self._rng.shuffle(out)
        return out


def _unique_in_order(ids: Iterable[Hashable]) -> List:
    seen = set()
    out = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


def dedupe_candidates(
    pool_a: Sequence[CandidateItem],
    pool_b: Sequence[CandidateItem],
    required: int,
    shuffler: Shuffler,
) -> List[str]:
    """
    Union of the identifiers in both pools, shuffled, truncated to ``required``.
    The result is shorter than ``required`` when the union is.
    """
    if required <= 0:
        return []
    union = _unique_in_order(item.id for item in [*pool_a, *pool_b])
    picked = shuffler.shuffle(union)[:required]
    logger.info("{} unique unanswered articles, kept {}", len(union), len(picked))
    return picked


def fill_from_fallback(
    current: Sequence[str],
    required: int,
    fallback_pool: Sequence[CandidateItem],
    shuffler: Shuffler,
) -> List[str]:
    """
    Top ``current`` up to exactly ``required`` ids from ``fallback_pool``.

    Members of ``current`` are never dropped; fallback ids already in
    ``current`` are skipped. Raises InsufficientCandidates when the
    combined unique ids still fall short.
    """
    if len(current) >= required:
        return list(current)[:required]

    combined = _unique_in_order([*current, *(item.id for item in fallback_pool)])
    if len(combined) < required:
        raise InsufficientCandidates(available=len(combined), requested=required)

    topped_up = shuffler.shuffle(combined[:required])
    logger.info(
        "Filled {} slots from the low-feedback pool ({} fallback articles offered)",
        required - len(current),
        len(fallback_pool),
    )
    return topped_up


def build_item_lookup(*pools: Sequence[CandidateItem]) -> Mapping[str, CandidateItem]:
    """Read-only id -> item table over every pool; later pools win on collision."""
    table = {}
    for pool in pools:
        for item in pool:
            table[item.id] = item
    return MappingProxyType(table)
