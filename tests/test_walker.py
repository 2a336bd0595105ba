import json

from stableselector.selector_rules import INTERACTIVE_ROLES, INTERACTIVE_TAGS
from stableselector.walker import WALKER_SCRIPT, get_walker_source


def test_walker_source_is_a_self_invoking_expression() -> None:
    source = get_walker_source()

    assert source is WALKER_SCRIPT
    assert source.strip().startswith("(() => {")
    assert source.strip().endswith("})()")
    assert "walk(document.body, null);" in source


def test_walker_embeds_membership_sets_from_python_constants() -> None:
    source = get_walker_source()

    assert f"new Set({json.dumps(sorted(INTERACTIVE_TAGS))})" in source
    assert f"new Set({json.dumps(sorted(INTERACTIVE_ROLES))})" in source
    assert '["data-testid", "data-test-id", "data-qa"]' in source
    assert "__INTERACTIVE" not in source
    assert "__TEST_ID" not in source


def test_walker_emits_the_keys_the_payload_parser_reads() -> None:
    source = get_walker_source()

    for key in (
        "textFull",
        "className",
        "inputType",
        "ariaLabel",
        "computedLabel",
        "associatedLabel",
        "dataTestId",
        "dataTestIdAlt",
        "dataQa",
        "bounds",
        "nthIndex",
        "parentRef",
        "isInteractive",
    ):
        assert f"{key}" in source
    assert "'s1e' + counter" in source


def test_walker_records_attribute_values_without_rewriting_them() -> None:
    source = get_walker_source()

    for attr in ("aria-label", "placeholder", "title", "alt", "name"):
        assert f"rawAttribute(node, '{attr}')" in source
        assert f"clean(node.getAttribute('{attr}')" not in source
    assert "computedLabel: clean(ariaLabel || placeholder || title || alt, 500) || text" in source
