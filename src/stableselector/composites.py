from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Protocol

from .config import DEFAULT_CONFIG, EngineConfig
from .locator_generator import generate_candidates, python_literal
from .models import CandidateType, ElementFingerprint, SelectorCandidate
from .scoring import INVALID_SELECTOR_COUNT, attach_match_count, match_count_for, sort_candidates
from .selector_rules import escape_css_string, is_dynamic_text, normalize_space

PARENT_SCOPE_PENALTY = 1
FILTER_PENALTY = 1
INDEX_PENALTY = 3
MIN_SCORE = 1


@dataclass(frozen=True, slots=True)
class CompositeContext:
    ancestor_lookup: Mapping[str, ElementFingerprint] | None = None
    match_counts: Mapping[str, int] = field(default_factory=dict)
    config: EngineConfig = DEFAULT_CONFIG


class CompositeStrategy(Protocol):
    name: str

    def attempt(
        self,
        fingerprint: ElementFingerprint,
        best: SelectorCandidate,
        context: CompositeContext,
    ) -> SelectorCandidate | None: ...


class ParentScopeStrategy:
    """Scope the child selector under its nearest captured ancestor.

    The parent must offer a candidate scoring at least ``parent_score_floor``; scoping
    under a fragile parent only multiplies the fragility.
    """

    name = "parent-scope"

    def attempt(
        self,
        fingerprint: ElementFingerprint,
        best: SelectorCandidate,
        context: CompositeContext,
    ) -> SelectorCandidate | None:
        if not fingerprint.parent_ref or not context.ancestor_lookup:
            return None
        parent = context.ancestor_lookup.get(fingerprint.parent_ref)
        if parent is None or parent.ref == fingerprint.ref:
            return None

        parent_best = _pick_parent_candidate(parent, context)
        if parent_best is None:
            return None

        child_selector = best.css_selector or best.selector
        locator = f"{parent_best.locator}.locator({python_literal(child_selector)})"
        chained = f"{parent_best.locator}.{_strip_page_prefix(best.locator)}"
        css = None
        if parent_best.css_selector and best.css_selector:
            css = f"{parent_best.css_selector} {best.css_selector}"

        return _composite(
            best,
            candidate_type="composite",
            strategy=f"composite:{parent_best.strategy}>{best.strategy}",
            selector=css or f"{parent_best.selector} >> {best.selector}",
            css_selector=css,
            locator=locator,
            chained_locator=chained,
            score=min(parent_best.score, best.score) - PARENT_SCOPE_PENALTY,
            context=context,
        )


class FilterRefinementStrategy:
    name = "filter"

    def attempt(
        self,
        fingerprint: ElementFingerprint,
        best: SelectorCandidate,
        context: CompositeContext,
    ) -> SelectorCandidate | None:
        text = fingerprint.text
        if is_dynamic_text(text) or len(text) > context.config.filter_text_limit:
            return None
        # Filtering on the very value the candidate already matches cannot narrow it, so
        # twin "Save" buttons fall through to index disambiguation ("nth:role+name[1]").
        if best.source_value and normalize_space(best.source_value).lower() == normalize_space(text).lower():
            return None

        return _composite(
            best,
            candidate_type="filtered",
            strategy=f"filtered:{best.strategy}+text",
            selector=f'{best.selector} >> internal:has-text="{escape_css_string(text)}"',
            css_selector=None,
            locator=f"{best.locator}.filter(has_text={python_literal(text)})",
            chained_locator=None,
            score=best.score - FILTER_PENALTY,
            context=context,
        )


class IndexDisambiguationStrategy:
    name = "index"

    def attempt(
        self,
        fingerprint: ElementFingerprint,
        best: SelectorCandidate,
        context: CompositeContext,
    ) -> SelectorCandidate | None:
        index = fingerprint.nth_index
        if index is None or index < 0:
            return None

        return _composite(
            best,
            candidate_type="nth",
            strategy=f"nth:{best.strategy}[{index}]",
            selector=f"{best.selector} >> nth={index}",
            css_selector=None,
            locator=f"{best.locator}.nth({index})",
            chained_locator=None,
            score=max(MIN_SCORE, best.score - INDEX_PENALTY),
            context=context,
        )


DEFAULT_COMPOSITE_STRATEGIES: tuple[CompositeStrategy, ...] = (
    ParentScopeStrategy(),
    FilterRefinementStrategy(),
    IndexDisambiguationStrategy(),
)


def build_composite(
    fingerprint: ElementFingerprint,
    best: SelectorCandidate,
    context: CompositeContext,
    strategies: tuple[CompositeStrategy, ...] = DEFAULT_COMPOSITE_STRATEGIES,
) -> SelectorCandidate | None:
    for strategy in strategies:
        composite = strategy.attempt(fingerprint, best, context)
        if composite is not None:
            return composite
    return None


def _pick_parent_candidate(parent: ElementFingerprint, context: CompositeContext) -> SelectorCandidate | None:
    ordered = sort_candidates(generate_candidates(parent, context.config))
    if not ordered or ordered[0].score < context.config.parent_score_floor:
        return None

    eligible = [
        attach_match_count(candidate, context.match_counts)
        for candidate in ordered
        if candidate.score >= context.config.parent_score_floor
    ]
    return next((candidate for candidate in eligible if candidate.is_unique), eligible[0])


def _composite(
    best: SelectorCandidate,
    *,
    candidate_type: CandidateType,
    strategy: str,
    selector: str,
    css_selector: str | None,
    locator: str,
    chained_locator: str | None,
    score: int,
    context: CompositeContext,
) -> SelectorCandidate:
    count = match_count_for(css_selector, context.match_counts)
    if count is None:
        count = INVALID_SELECTOR_COUNT
    return SelectorCandidate(
        type=candidate_type,
        strategy=strategy,
        selector=selector,
        css_selector=css_selector,
        locator=locator,
        score=score,
        priority=best.priority,
        order=best.order,
        source_attr=best.source_attr,
        source_value=best.source_value,
        match_count=count,
        is_unique=count == 1,
        chained_locator=chained_locator,
        is_composite=True,
    )


def _strip_page_prefix(locator: str) -> str:
    return locator[len("page."):] if locator.startswith("page.") else locator
