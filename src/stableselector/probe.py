from __future__ import annotations

import json
from typing import Iterable

from .config import EngineConfig
from .locator_generator import generate_candidates
from .models import ElementFingerprint

PROBE_TEMPLATE = r"""
(() => {
  const selectors = __SELECTORS__;
  const counts = {};
  for (const selector of selectors) {
    try {
      counts[selector] = document.querySelectorAll(selector).length;
    } catch (error) {
      counts[selector] = -1;
    }
  }
  return counts;
})()
"""


def collect_probe_selectors(
    fingerprints: Iterable[ElementFingerprint],
    config: EngineConfig | None = None,
) -> list[str]:
    seen: set[str] = set()
    selectors: list[str] = []
    for fingerprint in fingerprints:
        for candidate in generate_candidates(fingerprint, config):
            css = candidate.css_selector
            if not css or css in seen:
                continue
            seen.add(css)
            selectors.append(css)
    return selectors


def build_probe_script(
    fingerprints: Iterable[ElementFingerprint],
    config: EngineConfig | None = None,
) -> str:
    """Return an in-page expression that evaluates to ``{css selector: match count}``.

    Selectors the browser refuses to parse are reported as -1 instead of throwing, so a
    zero-match selector stays distinguishable from a broken one.
    """
    selectors = collect_probe_selectors(fingerprints, config)
    return PROBE_TEMPLATE.replace("__SELECTORS__", json.dumps(selectors))
