from __future__ import annotations

import json
import re
from types import MappingProxyType
from urllib.parse import urlsplit

from .config import DEFAULT_CONFIG, EngineConfig
from .models import CandidateType, ElementFingerprint, SelectorCandidate
from .selector_rules import (
    attribute_selector,
    escape_css_string,
    extract_stable_text_portion,
    id_selector,
    is_dynamic_id,
    is_dynamic_text,
    map_aria_role,
)

# Declared tie-break between equal scores; lower wins. Mirrors generation order.
STRATEGY_PRIORITY = MappingProxyType(
    {
        "data-testid": 0,
        "data-test-id": 1,
        "data-qa": 2,
        "role+name": 3,
        "id": 4,
        "role+name-regex": 5,
        "aria-label": 6,
        "label": 7,
        "placeholder": 8,
        "alt-text": 9,
        "title": 10,
        "name-attr": 11,
        "text-content": 12,
        "href-path": 13,
    }
)

STRATEGY_SCORES = MappingProxyType(
    {
        "data-testid": 10,
        "data-test-id": 10,
        "data-qa": 10,
        "role+name": 9,
        "id": 8,
        "role+name-regex": 7,
        "aria-label": 7,
        "label": 6,
        "placeholder": 6,
        "alt-text": 6,
        "title": 5,
        "name-attr": 5,
        "text-content": 4,
        "href-path": 3,
    }
)

_JS_REGEX_SPECIALS = re.compile(r"[.*+?^${}()|\[\]\\/]")


class CandidateFactory:
    """Builds every selector candidate a fingerprint supports, in generation order."""

    def __init__(self, fingerprint: ElementFingerprint, config: EngineConfig | None = None) -> None:
        self.fingerprint = fingerprint
        self.config = config or DEFAULT_CONFIG
        self._candidates: list[SelectorCandidate] = []
        self._seen: set[str] = set()

    def generate(self) -> list[SelectorCandidate]:
        self._add_test_id_strategies()
        self._add_role_name_strategy()
        self._add_id_strategy()
        self._add_role_name_regex_strategy()
        self._add_aria_label_strategy()
        self._add_label_strategy()
        self._add_placeholder_strategy()
        self._add_alt_strategy()
        self._add_title_strategy()
        self._add_name_strategy()
        self._add_text_strategy()
        self._add_href_strategy()
        return list(self._candidates)

    @property
    def role(self) -> str | None:
        fp = self.fingerprint
        role = map_aria_role(fp.role, fp.tag, input_type=fp.input_type)
        if not role or role == "generic":
            return None
        return role

    def _add_test_id_strategies(self) -> None:
        fp = self.fingerprint
        if fp.data_testid:
            css = attribute_selector("data-testid", fp.data_testid)
            self._add(
                "testId",
                "data-testid",
                selector=css,
                css_selector=css,
                locator=f"page.get_by_test_id({python_literal(fp.data_testid)})",
                source=("data-testid", fp.data_testid),
            )
        for attr, value in (("data-test-id", fp.data_test_id), ("data-qa", fp.data_qa)):
            if not value:
                continue
            css = attribute_selector(attr, value)
            self._add(
                "testId",
                attr,
                selector=css,
                css_selector=css,
                locator=_css_locator(css),
                source=(attr, value),
            )

    def _add_role_name_strategy(self) -> None:
        fp = self.fingerprint
        label = fp.computed_label
        role = self.role
        if not role or not label or is_dynamic_text(label):
            return

        css = None
        # Attribute matching is case-sensitive, so the CSS form keeps the role as written.
        if fp.role and fp.role.strip().lower() == role and fp.aria_label and fp.aria_label == label:
            css = f'[role="{escape_css_string(fp.role)}"][aria-label="{escape_css_string(label)}"]'
        self._add(
            "role+name",
            "role+name",
            selector=f'role={role}[name="{escape_css_string(label)}" s]',
            css_selector=css,
            locator=f"page.get_by_role({python_literal(role)}, name={python_literal(label)}, exact=True)",
            source=("computed-label", label),
        )

    def _add_id_strategy(self) -> None:
        fp = self.fingerprint
        if not fp.id or is_dynamic_id(fp.id):
            return
        css = id_selector(fp.id)
        self._add(
            "id",
            "id",
            selector=css,
            css_selector=css,
            locator=_css_locator(css),
            source=("id", fp.id),
        )

    def _add_role_name_regex_strategy(self) -> None:
        fp = self.fingerprint
        label = fp.computed_label
        role = self.role
        if not role or not label or not is_dynamic_text(label):
            return
        stable_part = extract_stable_text_portion(label)
        if not stable_part:
            return

        self._add(
            "role+name-regex",
            "role+name-regex",
            selector=f"role={role}[name=/{_escape_js_regex(stable_part)}/i]",
            css_selector=None,
            locator=(
                f"page.get_by_role({python_literal(role)}, "
                f"name=re.compile({python_literal(re.escape(stable_part))}, re.IGNORECASE))"
            ),
            source=("computed-label", stable_part),
        )

    def _add_aria_label_strategy(self) -> None:
        value = self.fingerprint.aria_label
        if not value or is_dynamic_text(value):
            return
        css = attribute_selector("aria-label", value)
        self._add(
            "ariaLabel",
            "aria-label",
            selector=css,
            css_selector=css,
            locator=_css_locator(css),
            source=("aria-label", value),
        )

    def _add_label_strategy(self) -> None:
        value = self.fingerprint.associated_label
        if not value or is_dynamic_text(value):
            return
        self._add(
            "label",
            "label",
            selector=f"internal:label={json.dumps(value, ensure_ascii=False)}s",
            css_selector=None,
            locator=f"page.get_by_label({python_literal(value)}, exact=True)",
            source=("label", value),
        )

    def _add_placeholder_strategy(self) -> None:
        value = self.fingerprint.placeholder
        if not value or is_dynamic_text(value):
            return
        css = attribute_selector("placeholder", value)
        self._add(
            "placeholder",
            "placeholder",
            selector=css,
            css_selector=css,
            locator=f"page.get_by_placeholder({python_literal(value)}, exact=True)",
            source=("placeholder", value),
        )

    def _add_alt_strategy(self) -> None:
        value = self.fingerprint.alt
        if not value or is_dynamic_text(value):
            return
        css = attribute_selector("alt", value)
        self._add(
            "alt",
            "alt-text",
            selector=css,
            css_selector=css,
            locator=f"page.get_by_alt_text({python_literal(value)}, exact=True)",
            source=("alt", value),
        )

    def _add_title_strategy(self) -> None:
        value = self.fingerprint.title
        if not value or is_dynamic_text(value):
            return
        css = attribute_selector("title", value)
        self._add(
            "title",
            "title",
            selector=css,
            css_selector=css,
            locator=f"page.get_by_title({python_literal(value)}, exact=True)",
            source=("title", value),
        )

    def _add_name_strategy(self) -> None:
        value = self.fingerprint.name
        if not value or is_dynamic_id(value):
            return
        css = attribute_selector("name", value)
        self._add(
            "name",
            "name-attr",
            selector=css,
            css_selector=css,
            locator=_css_locator(css),
            source=("name", value),
        )

    def _add_text_strategy(self) -> None:
        text = self.fingerprint.text
        if is_dynamic_text(text) or len(text) > self.config.max_text_length:
            return
        self._add(
            "text",
            "text-content",
            selector=f'text="{escape_css_string(text)}"',
            css_selector=None,
            locator=f"page.get_by_text({python_literal(text)}, exact=True)",
            source=("text", text),
        )

    def _add_href_strategy(self) -> None:
        fp = self.fingerprint
        if fp.tag != "a" or not fp.href:
            return
        path = href_path(fp.href, max_length=self.config.max_href_length)
        if not path:
            return
        css = attribute_selector("href", path, tag="a", operator="*=")
        self._add(
            "href",
            "href-path",
            selector=css,
            css_selector=css,
            locator=_css_locator(css),
            source=("href", path),
        )

    def _add(
        self,
        candidate_type: CandidateType,
        strategy: str,
        *,
        selector: str,
        css_selector: str | None,
        locator: str,
        source: tuple[str, str],
    ) -> None:
        if selector in self._seen:
            return
        self._seen.add(selector)
        self._candidates.append(
            SelectorCandidate(
                type=candidate_type,
                strategy=strategy,
                selector=selector,
                css_selector=css_selector,
                locator=locator,
                score=STRATEGY_SCORES[strategy],
                priority=STRATEGY_PRIORITY[strategy],
                order=len(self._candidates),
                source_attr=source[0],
                source_value=source[1],
            )
        )


def generate_candidates(fingerprint: ElementFingerprint, config: EngineConfig | None = None) -> list[SelectorCandidate]:
    return CandidateFactory(fingerprint, config).generate()


def href_path(href: str, *, max_length: int = 100) -> str | None:
    raw = href.strip()
    if not raw or raw.lower().startswith("javascript:"):
        return None
    try:
        path = urlsplit(raw).path
    except ValueError:
        return None
    if not path or path == "/" or len(path) >= max_length:
        return None
    return path


def _css_locator(css: str) -> str:
    return f"page.locator({python_literal(css)})"


def python_literal(value: str) -> str:
    if '"' not in value and "\\" not in value and value.isprintable():
        return f'"{value}"'
    return repr(value)


def _escape_js_regex(value: str) -> str:
    return _JS_REGEX_SPECIALS.sub(lambda match: "\\" + match.group(0), value)
