from stableselector.config import EngineConfig
from stableselector.locator_generator import STRATEGY_PRIORITY, STRATEGY_SCORES, generate_candidates, href_path
from stableselector.models import ElementFingerprint


def _fingerprint(tag: str = "div", **fields: object) -> ElementFingerprint:
    return ElementFingerprint(ref=str(fields.pop("ref", "s1e1")), tag=tag, **fields)  # type: ignore[arg-type]


def test_button_generates_candidates_in_score_table_order() -> None:
    fingerprint = _fingerprint(
        "button",
        text="Submit",
        computed_label="Submit",
        data_testid="submit-btn",
        id="submit",
        name="submitAction",
        title="Submit form",
    )

    candidates = generate_candidates(fingerprint)

    assert [candidate.strategy for candidate in candidates] == [
        "data-testid",
        "role+name",
        "id",
        "title",
        "name-attr",
        "text-content",
    ]
    assert [candidate.score for candidate in candidates] == [10, 9, 8, 5, 5, 4]
    assert [candidate.order for candidate in candidates] == list(range(6))


def test_test_id_candidates_use_get_by_test_id_for_data_testid_only() -> None:
    fingerprint = _fingerprint("div", data_testid="cart", data_test_id="cart-alt", data_qa="cart-qa")

    by_strategy = {candidate.strategy: candidate for candidate in generate_candidates(fingerprint)}

    assert by_strategy["data-testid"].selector == '[data-testid="cart"]'
    assert by_strategy["data-testid"].locator == 'page.get_by_test_id("cart")'
    assert by_strategy["data-test-id"].css_selector == '[data-test-id="cart-alt"]'
    assert by_strategy["data-test-id"].locator == "page.locator('[data-test-id=\"cart-alt\"]')"
    assert by_strategy["data-qa"].selector == '[data-qa="cart-qa"]'
    assert all(candidate.score == 10 for candidate in by_strategy.values())


def test_role_name_candidate_uses_engine_selector_and_exact_locator() -> None:
    candidate = generate_candidates(_fingerprint("button", computed_label="Save", text="Save"))[0]

    assert candidate.strategy == "role+name"
    assert candidate.selector == 'role=button[name="Save" s]'
    assert candidate.css_selector is None
    assert candidate.locator == 'page.get_by_role("button", name="Save", exact=True)'
    assert candidate.source_value == "Save"


def test_role_name_candidate_has_css_when_label_comes_from_explicit_aria_label() -> None:
    fingerprint = _fingerprint("div", role="button", aria_label="Close", computed_label="Close")

    by_strategy = {candidate.strategy: candidate for candidate in generate_candidates(fingerprint)}

    assert by_strategy["role+name"].css_selector == '[role="button"][aria-label="Close"]'
    assert by_strategy["aria-label"].css_selector == '[aria-label="Close"]'
    assert by_strategy["aria-label"].score == 7


def test_role_css_keeps_explicit_role_casing() -> None:
    fingerprint = _fingerprint("div", role="Button", aria_label="Close", computed_label="Close")

    role_name = generate_candidates(fingerprint)[0]

    assert role_name.strategy == "role+name"
    assert role_name.selector == 'role=button[name="Close" s]'
    assert role_name.css_selector == '[role="Button"][aria-label="Close"]'
    assert role_name.locator == 'page.get_by_role("button", name="Close", exact=True)'


def test_counted_selector_and_emitted_locator_agree_on_exact_matching() -> None:
    fingerprint = _fingerprint(
        "input",
        role="searchbox",
        input_type="search",
        data_testid="q",
        id="search",
        name="q",
        aria_label="Search",
        computed_label="Search",
        associated_label="Find",
        placeholder="Search products",
        title="Search the shop",
        text="Go",
    )

    candidates = generate_candidates(fingerprint)

    assert {candidate.strategy for candidate in candidates} >= {"role+name", "label", "placeholder", "title"}
    for candidate in candidates:
        if candidate.locator.startswith("page.locator("):
            assert candidate.css_selector == candidate.selector
        elif candidate.strategy != "data-testid":
            assert candidate.locator.endswith(", exact=True)"), candidate.strategy
        if candidate.css_selector is None:
            assert candidate.selector.endswith(('" s]', '"s')) or candidate.selector.startswith('text="')


def test_dynamic_accessible_name_produces_regex_candidate() -> None:
    fingerprint = _fingerprint("span", role="status", computed_label="42 results", text="42 results")

    candidates = generate_candidates(fingerprint)

    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate.strategy == "role+name-regex"
    assert candidate.score == 7
    assert candidate.selector == "role=status[name=/results/i]"
    assert candidate.locator == 'page.get_by_role("status", name=re.compile("results", re.IGNORECASE))'


def test_dynamic_id_and_missing_role_yield_no_candidates() -> None:
    assert generate_candidates(_fingerprint("div", id=":r1:")) == []
    assert generate_candidates(_fingerprint("div", id="550e8400-e29b-41d4")) == []


def test_form_control_label_and_placeholder_candidates() -> None:
    fingerprint = _fingerprint(
        "input",
        input_type="email",
        associated_label="Email",
        placeholder="you@example.com",
        computed_label="you@example.com",
    )

    by_strategy = {candidate.strategy: candidate for candidate in generate_candidates(fingerprint)}

    assert by_strategy["role+name"].selector == 'role=textbox[name="you@example.com" s]'
    assert by_strategy["label"].selector == 'internal:label="Email"s'
    assert by_strategy["label"].locator == 'page.get_by_label("Email", exact=True)'
    assert by_strategy["label"].css_selector is None
    assert by_strategy["placeholder"].css_selector == '[placeholder="you@example.com"]'
    assert by_strategy["placeholder"].locator == 'page.get_by_placeholder("you@example.com", exact=True)'


def test_alt_and_title_candidates() -> None:
    fingerprint = _fingerprint("img", alt="Company logo", title="Home")

    by_strategy = {candidate.strategy: candidate for candidate in generate_candidates(fingerprint)}

    assert by_strategy["alt-text"].locator == 'page.get_by_alt_text("Company logo", exact=True)'
    assert by_strategy["alt-text"].score == 6
    assert by_strategy["title"].locator == 'page.get_by_title("Home", exact=True)'
    assert by_strategy["title"].score == 5


def test_href_candidate_keeps_only_the_path() -> None:
    fingerprint = _fingerprint(
        "a",
        href="https://shop.example.com/products/shoes?color=red#top",
        text="Shoes",
        computed_label="Shoes",
    )

    href = [candidate for candidate in generate_candidates(fingerprint) if candidate.strategy == "href-path"]

    assert len(href) == 1
    assert href[0].css_selector == 'a[href*="/products/shoes"]'
    assert href[0].score == 3


def test_href_path_skips_unusable_targets() -> None:
    assert href_path("https://example.com/") is None
    assert href_path("javascript:void(0)") is None
    assert href_path("") is None
    assert href_path("https://example.com/" + "a" * 120) is None
    assert href_path("/docs/intro") == "/docs/intro"


def test_text_candidate_respects_length_limit_and_config() -> None:
    long_text = "Read the terms and conditions " * 3
    assert len(long_text) == 90

    default = generate_candidates(_fingerprint("p", text=long_text))
    relaxed = generate_candidates(_fingerprint("p", text=long_text), EngineConfig(max_text_length=120))

    assert default == []
    assert [candidate.strategy for candidate in relaxed] == ["text-content"]


def test_text_candidate_quotes_embedded_double_quotes() -> None:
    candidate = generate_candidates(_fingerprint("span", text='Say "hi"'))[0]

    assert candidate.selector == 'text="Say \\"hi\\""'
    assert candidate.locator == "page.get_by_text('Say \"hi\"', exact=True)"


def test_generation_is_deterministic_and_selectors_are_distinct() -> None:
    fingerprint = _fingerprint(
        "button",
        role="button",
        aria_label="Open menu",
        computed_label="Open menu",
        id="menu-toggle",
        text="Menu",
    )

    first = generate_candidates(fingerprint)
    second = generate_candidates(fingerprint)

    assert first == second
    assert len({candidate.selector for candidate in first}) == len(first)


def test_strategy_tables_cover_the_same_rules() -> None:
    assert set(STRATEGY_PRIORITY) == set(STRATEGY_SCORES)
    assert sorted(STRATEGY_PRIORITY.values()) == list(range(len(STRATEGY_PRIORITY)))
    assert all(1 <= score <= 10 for score in STRATEGY_SCORES.values())
