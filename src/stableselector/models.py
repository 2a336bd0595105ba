from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CandidateType = Literal[
    "testId",
    "role+name",
    "id",
    "role+name-regex",
    "ariaLabel",
    "label",
    "placeholder",
    "alt",
    "title",
    "name",
    "text",
    "href",
    "composite",
    "filtered",
    "nth",
]


@dataclass(frozen=True, slots=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class ElementFingerprint:
    ref: str
    tag: str
    role: str | None = None
    text: str | None = None
    text_full: str | None = None
    id: str | None = None
    name: str | None = None
    classes: tuple[str, ...] = ()
    input_type: str | None = None
    href: str | None = None
    placeholder: str | None = None
    aria_label: str | None = None
    title: str | None = None
    alt: str | None = None
    computed_label: str | None = None
    associated_label: str | None = None
    data_testid: str | None = None
    data_test_id: str | None = None
    data_qa: str | None = None
    visible: bool = True
    bounds: Bounds | None = None
    nth_index: int | None = None
    parent_ref: str | None = None
    is_interactive: bool = False


@dataclass(frozen=True, slots=True)
class SelectorCandidate:
    type: CandidateType
    strategy: str
    selector: str
    css_selector: str | None
    locator: str
    score: int
    priority: int = 0
    order: int = 0
    source_attr: str | None = None
    source_value: str | None = None
    match_count: int = -1
    is_unique: bool = False
    chained_locator: str | None = None
    is_composite: bool = False


@dataclass(frozen=True, slots=True)
class SelectorDescriptor:
    primary: str
    fallback: str | None
    composite: str | None
    strategy: str
    stability_score: int
    is_unique: bool
    match_count: int
    css_selector: str | None
    candidates: tuple[SelectorCandidate, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "primary": self.primary,
            "fallback": self.fallback,
            "composite": self.composite,
            "strategy": self.strategy,
            "stabilityScore": self.stability_score,
            "isUnique": self.is_unique,
            "matchCount": self.match_count,
            "cssSelector": self.css_selector,
        }


@dataclass(frozen=True, slots=True)
class ResolvedElement:
    fingerprint: ElementFingerprint
    selector: SelectorDescriptor
