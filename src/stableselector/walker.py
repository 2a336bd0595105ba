from __future__ import annotations

import json
from typing import Iterable

from .selector_rules import FORM_CONTROL_TAGS, INTERACTIVE_ROLES, INTERACTIVE_TAGS, TEST_ID_ATTRIBUTES

_WALKER_TEMPLATE = r"""
(() => {
  const interactiveTags = new Set(__INTERACTIVE_TAGS__);
  const interactiveRoles = new Set(__INTERACTIVE_ROLES__);
  const formControlTags = new Set(__FORM_CONTROL_TAGS__);
  const testIdAttributes = __TEST_ID_ATTRIBUTES__;
  const elements = [];
  let counter = 0;

  function clean(value, limit) {
    if (value === null || value === undefined) return undefined;
    const compact = String(value).replace(/\s+/g, ' ').trim();
    return compact ? compact.slice(0, limit) : undefined;
  }

  function rawAttribute(node, name) {
    const value = node.getAttribute(name);
    return value !== null && value.trim() ? value : undefined;
  }

  function associatedLabelFor(node, tag) {
    if (!formControlTags.has(tag)) return undefined;
    if (node.id) {
      const escaped = window.CSS && CSS.escape ? CSS.escape(node.id) : node.id.replace(/"/g, '\\"');
      const byFor = document.querySelector('label[for="' + escaped + '"]');
      if (byFor) {
        const text = clean(byFor.innerText || byFor.textContent, 100);
        if (text) return text;
      }
    }
    const wrapping = node.closest('label');
    return wrapping ? clean(wrapping.innerText || wrapping.textContent, 100) : undefined;
  }

  function siblingIndex(node, role) {
    if (!node.parentElement) return 0;
    const sameKind = Array.from(node.parentElement.children).filter((sibling) =>
      sibling.tagName === node.tagName && (sibling.getAttribute('role') || '') === (role || '')
    );
    return sameKind.indexOf(node);
  }

  function capture(node, tag, role, parentRef, isInteractive) {
    counter += 1;
    const ref = 's1e' + counter;
    const rect = node.getBoundingClientRect();
    const ariaLabel = rawAttribute(node, 'aria-label');
    const placeholder = rawAttribute(node, 'placeholder');
    const title = rawAttribute(node, 'title');
    const alt = rawAttribute(node, 'alt');
    const rawText = node.innerText || (typeof node.value === 'string' ? node.value : '') || '';
    const textFull = clean(rawText, 500);
    const text = textFull ? textFull.slice(0, 100) : undefined;

    return {
      ref,
      tag,
      role: role || undefined,
      text,
      textFull,
      id: node.id || undefined,
      name: rawAttribute(node, 'name'),
      className: typeof node.className === 'string' ? node.className : undefined,
      inputType: tag === 'input' ? (node.type || 'text') : undefined,
      href: tag === 'a' ? (node.href || node.getAttribute('href') || undefined) : undefined,
      placeholder,
      ariaLabel,
      title,
      alt,
      computedLabel: clean(ariaLabel || placeholder || title || alt, 500) || text,
      associatedLabel: associatedLabelFor(node, tag),
      dataTestId: rawAttribute(node, testIdAttributes[0]),
      dataTestIdAlt: rawAttribute(node, testIdAttributes[1]),
      dataQa: rawAttribute(node, testIdAttributes[2]),
      visible: rect.width > 0 && rect.height > 0,
      bounds: {
        x: Math.round(rect.x),
        y: Math.round(rect.y),
        width: Math.round(rect.width),
        height: Math.round(rect.height),
      },
      nthIndex: siblingIndex(node, role),
      parentRef: parentRef || undefined,
      isInteractive,
    };
  }

  function walk(node, parentRef) {
    if (!node || node.nodeType !== Node.ELEMENT_NODE) return;

    const tag = node.tagName.toLowerCase();
    const role = node.getAttribute('role');
    const isInteractive = interactiveTags.has(tag)
      || (role !== null && interactiveRoles.has(role))
      || typeof node.onclick === 'function'
      || node.hasAttribute('onclick')
      || node.tabIndex >= 0;
    const identifiable = Boolean(node.id)
      || testIdAttributes.some((attr) => node.hasAttribute(attr))
      || node.hasAttribute('aria-label')
      || Boolean(role);

    let childParentRef = parentRef;
    if (isInteractive || identifiable) {
      const element = capture(node, tag, role, parentRef, isInteractive);
      elements.push(element);
      childParentRef = element.ref;
    }

    for (const child of node.children) {
      walk(child, childParentRef);
    }
  }

  walk(document.body, null);
  return elements;
})()
"""


def _js_list(values: Iterable[str]) -> str:
    return json.dumps(sorted(values))


WALKER_SCRIPT = (
    _WALKER_TEMPLATE.replace("__INTERACTIVE_TAGS__", _js_list(INTERACTIVE_TAGS))
    .replace("__INTERACTIVE_ROLES__", _js_list(INTERACTIVE_ROLES))
    .replace("__FORM_CONTROL_TAGS__", _js_list(FORM_CONTROL_TAGS))
    .replace("__TEST_ID_ATTRIBUTES__", json.dumps(list(TEST_ID_ATTRIBUTES)))
)


def get_walker_source() -> str:
    return WALKER_SCRIPT
