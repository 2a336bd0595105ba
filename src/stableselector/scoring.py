from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping

from .models import SelectorCandidate

INVALID_SELECTOR_COUNT = -1


def candidate_sort_key(candidate: SelectorCandidate) -> tuple[int, int, int]:
    return (-candidate.score, candidate.priority, candidate.order)


def sort_candidates(candidates: Iterable[SelectorCandidate]) -> list[SelectorCandidate]:
    return sorted(candidates, key=candidate_sort_key)


def match_count_for(key: str | None, match_counts: Mapping[str, int]) -> int | None:
    """Return the recorded count for ``key``, or None when the probe never saw it."""
    raw = match_counts.get(key) if key else None
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        return INVALID_SELECTOR_COUNT


def lookup_match_count(candidate: SelectorCandidate, match_counts: Mapping[str, int]) -> int:
    for key in (candidate.selector, candidate.css_selector):
        count = match_count_for(key, match_counts)
        if count is not None:
            return count
    return INVALID_SELECTOR_COUNT


def attach_match_count(candidate: SelectorCandidate, match_counts: Mapping[str, int]) -> SelectorCandidate:
    count = lookup_match_count(candidate, match_counts)
    return replace(candidate, match_count=count, is_unique=count == 1)
