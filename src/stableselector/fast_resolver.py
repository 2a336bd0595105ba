from __future__ import annotations

from .models import ElementFingerprint
from .selector_rules import attribute_selector, escape_css_string, id_selector, is_dynamic_id, is_dynamic_text

FAST_TEXT_LIMIT = 80


def resolve_fast_css_selector(fingerprint: ElementFingerprint | None) -> str | None:
    """Single pass, uncounted selector for direct interaction.

    Cheaper than ``resolve_selector`` because no match counts are needed, but nothing
    guarantees the result matches a single node.
    """
    if fingerprint is None:
        return None

    for attr, value in (
        ("data-testid", fingerprint.data_testid),
        ("data-test-id", fingerprint.data_test_id),
        ("data-qa", fingerprint.data_qa),
    ):
        if value:
            return attribute_selector(attr, value)

    if fingerprint.id and not is_dynamic_id(fingerprint.id):
        return id_selector(fingerprint.id)

    for attr, value in (
        ("aria-label", fingerprint.aria_label),
        ("name", fingerprint.name),
        ("placeholder", fingerprint.placeholder),
        ("title", fingerprint.title),
    ):
        if value:
            return attribute_selector(attr, value)

    text = fingerprint.text
    if not is_dynamic_text(text) and len(text) <= FAST_TEXT_LIMIT:
        return f'text="{escape_css_string(text)}"'

    if fingerprint.role and fingerprint.tag:
        return attribute_selector("role", fingerprint.role, tag=fingerprint.tag)
    if fingerprint.tag:
        return fingerprint.tag
    return None
