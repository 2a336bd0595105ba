from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from playwright.sync_api import Error as PlaywrightError

from .models import ElementFingerprint
from .scoring import INVALID_SELECTOR_COUNT

if TYPE_CHECKING:
    from playwright.sync_api import Page

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SnapshotValidation:
    ok: bool
    message: str
    duplicate_refs: tuple[str, ...] = ()


def validate_snapshot(fingerprints: Sequence[ElementFingerprint]) -> SnapshotValidation:
    if not fingerprints:
        return SnapshotValidation(False, "Snapshot contains no elements.")

    seen: set[str] = set()
    duplicates: list[str] = []
    for fingerprint in fingerprints:
        ref = fingerprint.ref
        if not ref:
            return SnapshotValidation(False, f"Element without ref ({fingerprint.tag or 'unknown tag'}).")
        if ref in seen and ref not in duplicates:
            duplicates.append(ref)
        seen.add(ref)

    if duplicates:
        return SnapshotValidation(
            False,
            f"Duplicate element refs: {', '.join(duplicates)}.",
            tuple(duplicates),
        )
    return SnapshotValidation(True, f"{len(fingerprints)} element(s), refs unique.")


def count_engine_selector_matches(page: Page, selectors: Iterable[str]) -> dict[str, int]:
    """Count matches for Playwright engine selectors that ``querySelectorAll`` cannot parse."""
    counts: dict[str, int] = {}
    for selector in selectors:
        text = str(selector or "").strip()
        if not text or text in counts:
            continue
        try:
            counts[text] = page.locator(text).count()
        except PlaywrightError as exc:
            LOGGER.warning("Could not count matches for %s: %s", text, exc)
            counts[text] = INVALID_SELECTOR_COUNT
    return counts
