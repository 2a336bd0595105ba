from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from playwright.sync_api import Error as PlaywrightError

from .config import DEFAULT_CONFIG, EngineConfig
from .locator_generator import generate_candidates
from .models import Bounds, ElementFingerprint, ResolvedElement
from .probe import build_probe_script
from .resolver import process_snapshot_elements
from .validation import count_engine_selector_matches
from .walker import get_walker_source

if TYPE_CHECKING:
    from playwright.sync_api import Page

LOGGER = logging.getLogger(__name__)

_STRING_FIELDS = {
    "ref": "ref",
    "text": "text",
    "textFull": "text_full",
    "inputType": "input_type",
    "href": "href",
    "computedLabel": "computed_label",
    "associatedLabel": "associated_label",
    "parentRef": "parent_ref",
}

# Kept byte for byte: these end up inside exact attribute selectors.
_ATTRIBUTE_FIELDS = {
    "role": "role",
    "id": "id",
    "name": "name",
    "placeholder": "placeholder",
    "ariaLabel": "aria_label",
    "title": "title",
    "alt": "alt",
    "dataTestId": "data_testid",
    "dataTestIdAlt": "data_test_id",
    "dataQa": "data_qa",
}


@dataclass(frozen=True, slots=True)
class SnapshotCapture:
    url: str
    title: str
    elements: tuple[ResolvedElement, ...]
    match_counts: dict[str, int] = field(default_factory=dict)

    @property
    def fingerprints(self) -> tuple[ElementFingerprint, ...]:
        return tuple(item.fingerprint for item in self.elements)


def fingerprint_from_payload(payload: Mapping[str, Any]) -> ElementFingerprint:
    values: dict[str, Any] = {attr: _clean_text(payload.get(key)) for key, attr in _STRING_FIELDS.items()}
    values.update({attr: _raw_attribute(payload.get(key)) for key, attr in _ATTRIBUTE_FIELDS.items()})
    values["ref"] = values["ref"] or ""
    values["tag"] = (_clean_text(payload.get("tag")) or "").lower()
    values["classes"] = normalize_classes(payload.get("className"))
    values["visible"] = payload.get("visible", True) is not False
    values["is_interactive"] = payload.get("isInteractive") is True
    values["nth_index"] = _as_int(payload.get("nthIndex"))
    values["bounds"] = _parse_bounds(payload.get("bounds"))
    return ElementFingerprint(**values)


def fingerprints_from_payload(items: Any) -> list[ElementFingerprint]:
    if not isinstance(items, (list, tuple)):
        return []
    return [fingerprint_from_payload(item) for item in items if isinstance(item, Mapping)]


def normalize_classes(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        tokens = value.split()
    elif isinstance(value, (list, tuple)):
        tokens = [str(item).strip() for item in value]
    else:
        return ()
    return tuple(dict.fromkeys(token for token in tokens if token))


def capture_snapshot(
    page: Page,
    *,
    config: EngineConfig | None = None,
    count_engine_selectors: bool = True,
) -> SnapshotCapture:
    """Walk the live page, probe candidate selectors and resolve every captured element.

    A failing walker is fatal. A failing probe only costs uniqueness information: the
    elements still resolve, just without match counts.
    """
    engine_config = config or DEFAULT_CONFIG
    fingerprints = fingerprints_from_payload(page.evaluate(get_walker_source()))
    LOGGER.info("Captured %d element(s) from %s", len(fingerprints), page.url)

    match_counts: dict[str, int] = {}
    if fingerprints:
        try:
            raw_counts = page.evaluate(build_probe_script(fingerprints, engine_config))
        except PlaywrightError as exc:
            LOGGER.warning("Uniqueness probe failed, resolving without match counts: %s", exc)
            raw_counts = {}
        match_counts.update(_clean_counts(raw_counts))

        if count_engine_selectors:
            engine_selectors = _engine_selectors(fingerprints, engine_config)
            match_counts.update(count_engine_selector_matches(page, engine_selectors))

    elements = process_snapshot_elements(fingerprints, match_counts, config=engine_config)
    return SnapshotCapture(
        url=page.url,
        title=_safe_title(page),
        elements=tuple(elements),
        match_counts=match_counts,
    )


def _engine_selectors(fingerprints: Iterable[ElementFingerprint], config: EngineConfig) -> list[str]:
    selectors: dict[str, None] = {}
    for fingerprint in fingerprints:
        for candidate in generate_candidates(fingerprint, config):
            if candidate.css_selector is None:
                selectors.setdefault(candidate.selector, None)
    return list(selectors)


def _clean_counts(raw: Any) -> dict[str, int]:
    if not isinstance(raw, Mapping):
        return {}
    counts: dict[str, int] = {}
    for key, value in raw.items():
        parsed = _as_int(value)
        if isinstance(key, str) and parsed is not None:
            counts[key] = parsed
    return counts


def _safe_title(page: Page) -> str:
    try:
        return page.title()
    except PlaywrightError:
        return ""


def _clean_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _raw_attribute(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_bounds(value: Any) -> Bounds | None:
    if not isinstance(value, Mapping):
        return None
    parts = [_as_int(value.get(key)) for key in ("x", "y", "width", "height")]
    if any(part is None for part in parts):
        return None
    return Bounds(*parts)  # type: ignore[arg-type]
