from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any

TEST_ID_ATTRIBUTES = ("data-testid", "data-test-id", "data-qa")

INTERACTIVE_TAGS = frozenset({"a", "button", "input", "select", "textarea", "label"})

INTERACTIVE_ROLES = frozenset(
    {
        "button",
        "link",
        "textbox",
        "checkbox",
        "radio",
        "menuitem",
        "tab",
        "combobox",
        "option",
        "switch",
        "slider",
        "spinbutton",
        "searchbox",
    }
)

FORM_CONTROL_TAGS = frozenset({"input", "select", "textarea"})

IMPLICIT_ROLES = MappingProxyType(
    {
        "a": "link",
        "button": "button",
        "input": "textbox",
        "select": "combobox",
        "textarea": "textbox",
        "img": "img",
        "nav": "navigation",
        "main": "main",
        "header": "banner",
        "footer": "contentinfo",
        "aside": "complementary",
        "form": "form",
        "table": "table",
        "tr": "row",
        "th": "columnheader",
        "td": "cell",
        "ul": "list",
        "ol": "list",
        "li": "listitem",
        "h1": "heading",
        "h2": "heading",
        "h3": "heading",
        "h4": "heading",
        "h5": "heading",
        "h6": "heading",
        "dialog": "dialog",
        "details": "group",
        "summary": "button",
        "progress": "progressbar",
        "meter": "meter",
        "output": "status",
    }
)

INPUT_TYPE_ROLES = MappingProxyType(
    {
        "checkbox": "checkbox",
        "radio": "radio",
        "button": "button",
        "submit": "button",
        "reset": "button",
        "image": "button",
        "search": "searchbox",
        "range": "slider",
        "number": "spinbutton",
    }
)

NON_SEMANTIC_ROLES = frozenset({"presentation", "none"})

_UUID_FRAGMENT = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}", re.IGNORECASE)
_FRAMEWORK_ID_PATTERNS = (
    re.compile(r"^:r[0-9a-z]+:"),
    re.compile(r"^__next"),
    re.compile(r"^(mui|css|jss|sc)-[a-z0-9]{4,}", re.IGNORECASE),
    re.compile(r"^radix-"),
)
_HEX_SUFFIX = re.compile(r"[a-f0-9]{6,}$", re.IGNORECASE)

_DATE = r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"
_RELATIVE_TIME = r"\d+\s+(?:second|minute|hour|day|week|month|year)s?\s+ago"
_CURRENCY = r"\$[\d,]+(?:\.\d{2})?"

_DYNAMIC_TEXT_PATTERNS = (
    re.compile(_DATE),
    re.compile(r"\d{1,2}:\d{2}(?::\d{2})?"),
    re.compile(_RELATIVE_TIME, re.IGNORECASE),
    re.compile(r"just now|a moment ago", re.IGNORECASE),
    re.compile(_CURRENCY),
    re.compile(r"\d+\s+(?:results?|items?|listings?|properties|matches|records)", re.IGNORECASE),
    re.compile(r"showing\s+\d+", re.IGNORECASE),
    re.compile(r"page\s+\d+\s+of\s+\d+", re.IGNORECASE),
)

# Applied in order; leading/trailing numbers go first so "42 results" keeps "results".
_UNSTABLE_TEXT_STRIPPERS = (
    re.compile(r"^\d[\d,]*\s*"),
    re.compile(r"\s*\d[\d,]*$"),
    re.compile(_CURRENCY),
    re.compile(_DATE),
    re.compile(_RELATIVE_TIME, re.IGNORECASE),
)

MAX_STABLE_TEXT_LENGTH = 200
MIN_STABLE_PORTION_LENGTH = 3

_CSS_SAFE_ID_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")


def normalize_space(value: Any, limit: int = 200) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if compact else ""


def is_dynamic_id(id_value: Any) -> bool:
    """Return True when an id looks generated and will not survive a reload.

    Non-string and empty values count as dynamic so callers can treat them as unusable.
    """
    if not id_value or not isinstance(id_value, str):
        return True

    if _UUID_FRAGMENT.search(id_value):
        return True
    if any(pattern.search(id_value) for pattern in _FRAMEWORK_ID_PATTERNS):
        return True

    digits = sum(1 for char in id_value if char.isdigit())
    letters = sum(1 for char in id_value if char.isascii() and char.isalpha())
    if digits > 4 and digits > letters:
        return True

    if len(id_value) > 10 and _HEX_SUFFIX.search(id_value):
        return True
    return False


def is_dynamic_text(text: Any) -> bool:
    if not text or not isinstance(text, str):
        return True
    if len(text) > MAX_STABLE_TEXT_LENGTH:
        return True
    return any(pattern.search(text) for pattern in _DYNAMIC_TEXT_PATTERNS)


def extract_stable_text_portion(text: Any) -> str | None:
    """Strip counts, prices, dates and relative times, keeping what is left.

    "42 results" becomes "results"; a residual shorter than three characters is useless
    for a substring match and yields None.
    """
    if not text or not isinstance(text, str):
        return None

    stable = text
    for pattern in _UNSTABLE_TEXT_STRIPPERS:
        stable = pattern.sub("", stable)
    stable = normalize_space(stable, limit=len(text))
    return stable if len(stable) >= MIN_STABLE_PORTION_LENGTH else None


def map_aria_role(explicit_role: str | None, tag: str | None, *, input_type: str | None = None) -> str | None:
    role = (explicit_role or "").strip().lower()
    if role and role not in NON_SEMANTIC_ROLES:
        return role

    normalized_tag = (tag or "").strip().lower()
    if normalized_tag == "input" and input_type:
        refined = INPUT_TYPE_ROLES.get(input_type.strip().lower())
        if refined:
            return refined
    return IMPLICIT_ROLES.get(normalized_tag)


def escape_css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    # Raw line breaks end a CSS string, so they go in as hex escapes.
    return escaped.replace("\n", "\\a ").replace("\r", "\\d ").replace("\f", "\\c ")


def is_css_safe_id(value: str) -> bool:
    return bool(_CSS_SAFE_ID_PATTERN.fullmatch(value))


def id_selector(id_value: str) -> str:
    if is_css_safe_id(id_value):
        return f"#{id_value}"
    return f'[id="{escape_css_string(id_value)}"]'


def attribute_selector(attr: str, value: str, *, tag: str = "", operator: str = "=") -> str:
    return f'{tag}[{attr}{operator}"{escape_css_string(value)}"]'
