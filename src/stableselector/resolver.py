from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .composites import DEFAULT_COMPOSITE_STRATEGIES, CompositeContext, CompositeStrategy, build_composite
from .config import DEFAULT_CONFIG, EngineConfig
from .locator_generator import generate_candidates
from .models import ElementFingerprint, ResolvedElement, SelectorCandidate, SelectorDescriptor
from .scoring import INVALID_SELECTOR_COUNT, attach_match_count, sort_candidates

LOGGER = logging.getLogger(__name__)

FALLBACK_STRATEGY = "tag-nth-fallback"
FALLBACK_SCORE = 1


def resolve_selector(
    fingerprint: ElementFingerprint,
    match_counts: Mapping[str, int] | None = None,
    *,
    ancestor_lookup: Mapping[str, ElementFingerprint] | None = None,
    config: EngineConfig | None = None,
    strategies: tuple[CompositeStrategy, ...] = DEFAULT_COMPOSITE_STRATEGIES,
) -> SelectorDescriptor:
    """Pick the most stable selector for one fingerprint.

    Candidates are probed against ``match_counts`` in score order; the first one matching
    exactly one node wins. When nothing is unique, composite strategies are tried before
    settling for the best raw candidate with ``is_unique=False``.
    """
    counts = match_counts or {}
    engine_config = config or DEFAULT_CONFIG

    candidates = sort_candidates(generate_candidates(fingerprint, engine_config))
    if not candidates:
        LOGGER.debug("No candidates for %s (%s); using tag index fallback", fingerprint.ref, fingerprint.tag)
        return _degraded_descriptor(fingerprint)

    probed = [attach_match_count(candidate, counts) for candidate in candidates]

    primary: SelectorCandidate | None = None
    fallback: SelectorCandidate | None = None
    for candidate in probed:
        if candidate.is_unique and primary is None:
            primary = candidate
        elif fallback is None:
            fallback = candidate
        if primary is not None and fallback is not None:
            break

    composite: SelectorCandidate | None = None
    if primary is None:
        best = probed[0]
        context = CompositeContext(ancestor_lookup=ancestor_lookup, match_counts=counts, config=engine_config)
        composite = build_composite(fingerprint, best, context, strategies)
        if composite is not None:
            LOGGER.debug("%s: no unique candidate, using %s", fingerprint.ref, composite.strategy)
            primary, fallback = composite, best
        else:
            LOGGER.debug("%s: no unique candidate and no composite, keeping %s", fingerprint.ref, best.strategy)
            primary = best
            fallback = probed[1] if len(probed) > 1 else None
    else:
        LOGGER.debug("%s: unique candidate %s", fingerprint.ref, primary.strategy)

    return SelectorDescriptor(
        primary=primary.locator or primary.chained_locator or primary.selector,
        fallback=fallback.locator if fallback is not None else None,
        composite=(composite.chained_locator or composite.locator) if composite is not None else None,
        strategy=primary.strategy,
        stability_score=primary.score,
        is_unique=primary.is_unique,
        match_count=primary.match_count,
        css_selector=primary.css_selector or probed[0].css_selector,
        candidates=tuple(probed),
    )


def process_snapshot_elements(
    fingerprints: Iterable[ElementFingerprint],
    match_counts: Mapping[str, int] | None = None,
    *,
    config: EngineConfig | None = None,
) -> list[ResolvedElement]:
    items = list(fingerprints)
    lookup: dict[str, ElementFingerprint] = {}
    for fingerprint in items:
        if fingerprint.ref in lookup:
            LOGGER.warning("Duplicate element ref %s in snapshot; keeping the first occurrence", fingerprint.ref)
            continue
        lookup[fingerprint.ref] = fingerprint

    return [
        ResolvedElement(
            fingerprint=fingerprint,
            selector=resolve_selector(fingerprint, match_counts, ancestor_lookup=lookup, config=config),
        )
        for fingerprint in items
    ]


def _degraded_descriptor(fingerprint: ElementFingerprint) -> SelectorDescriptor:
    tag = fingerprint.tag or "div"
    index = fingerprint.nth_index or 0
    return SelectorDescriptor(
        primary=f'page.locator("{tag}").nth({index})',
        fallback=None,
        composite=None,
        strategy=FALLBACK_STRATEGY,
        stability_score=FALLBACK_SCORE,
        is_unique=False,
        match_count=INVALID_SELECTOR_COUNT,
        css_selector=tag,
    )
