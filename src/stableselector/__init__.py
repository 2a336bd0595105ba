"""Stable Playwright selector generation from page element fingerprints."""

from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from .dom_extractor import SnapshotCapture, capture_snapshot, fingerprint_from_payload, fingerprints_from_payload
from .fast_resolver import resolve_fast_css_selector
from .locator_generator import generate_candidates
from .models import Bounds, ElementFingerprint, ResolvedElement, SelectorCandidate, SelectorDescriptor
from .probe import build_probe_script, collect_probe_selectors
from .resolver import process_snapshot_elements, resolve_selector
from .selector_rules import extract_stable_text_portion, is_dynamic_id, is_dynamic_text, map_aria_role
from .validation import SnapshotValidation, validate_snapshot
from .walker import get_walker_source

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "DEFAULT_CONFIG",
    "ElementFingerprint",
    "EngineConfig",
    "ResolvedElement",
    "SelectorCandidate",
    "SelectorDescriptor",
    "SnapshotCapture",
    "SnapshotValidation",
    "build_probe_script",
    "capture_snapshot",
    "collect_probe_selectors",
    "extract_stable_text_portion",
    "fingerprint_from_payload",
    "fingerprints_from_payload",
    "generate_candidates",
    "get_walker_source",
    "is_dynamic_id",
    "is_dynamic_text",
    "load_engine_config",
    "map_aria_role",
    "process_snapshot_elements",
    "resolve_fast_css_selector",
    "resolve_selector",
    "validate_snapshot",
]
