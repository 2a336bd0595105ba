import json

from stableselector.models import ElementFingerprint
from stableselector.probe import build_probe_script, collect_probe_selectors


def _fingerprint(ref: str, tag: str = "div", **fields: object) -> ElementFingerprint:
    return ElementFingerprint(ref=ref, tag=tag, **fields)  # type: ignore[arg-type]


def test_probe_collects_css_selectors_once_in_first_seen_order() -> None:
    fingerprints = [
        _fingerprint("s1e1", data_testid="a", id="main", text="Home"),
        _fingerprint("s1e2", "input", data_testid="a", placeholder="Search"),
    ]

    selectors = collect_probe_selectors(fingerprints)

    assert selectors == ['[data-testid="a"]', "#main", '[placeholder="Search"]']
    assert 'text="Home"' not in selectors


def test_probe_script_embeds_selectors_as_json() -> None:
    fingerprints = [_fingerprint("s1e1", aria_label='Say "hi"')]

    script = build_probe_script(fingerprints)

    assert script.strip().startswith("(() => {")
    assert json.dumps(['[aria-label="Say \\"hi\\""]']) in script
    assert "document.querySelectorAll(selector).length" in script
    assert "counts[selector] = -1;" in script
    assert "__SELECTORS__" not in script


def test_probe_script_for_empty_batch_is_still_valid() -> None:
    script = build_probe_script([])

    assert "const selectors = [];" in script
