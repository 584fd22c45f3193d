"""Visibility diagnostics and existence checks."""

from typing import List, Optional

from selenium.common.exceptions import WebDriverException

from ..actions.elements import element_info, format_descriptor, is_element_visible
from ..responses import ToolResponse, success_response
from ..selectors.resolver import SelectionError, format_selection_info, query_matches, resolve

import logging
logger = logging.getLogger(__name__)


VISIBILITY_JS = """
const element = arguments[0];
const rect = element.getBoundingClientRect();
const vh = window.innerHeight;
const vw = window.innerWidth;

const visibleHeight = Math.max(0, Math.min(vh, rect.bottom) - Math.max(0, rect.top));
const visibleWidth = Math.max(0, Math.min(vw, rect.right) - Math.max(0, rect.left));
const totalArea = rect.height * rect.width;
const viewportRatio = totalArea > 0 ? (visibleHeight * visibleWidth) / totalArea : 0;

const styles = window.getComputedStyle(element);

let isClipped = false;
let parent = element.parentElement;
while (parent) {
  const ps = window.getComputedStyle(parent);
  if (ps.overflow === 'hidden' || ps.overflowX === 'hidden' || ps.overflowY === 'hidden') {
    const pr = parent.getBoundingClientRect();
    if (rect.right < pr.left || rect.left > pr.right || rect.bottom < pr.top || rect.top > pr.bottom) {
      isClipped = true;
      break;
    }
  }
  parent = parent.parentElement;
}

const cx = rect.left + rect.width / 2;
const cy = rect.top + rect.height / 2;
const top = document.elementFromPoint(cx, cy);
const isCovered = !!top && top !== element && !element.contains(top);

let covering = null;
let coveragePercent = 0;
if (isCovered) {
  const classes = (typeof top.className === 'string') ? top.className.split(' ').filter(c => c) : [];
  covering = {
    tag: top.tagName.toLowerCase(),
    testIdAttr: top.hasAttribute('data-testid') ? 'data-testid' : null,
    testId: top.getAttribute('data-testid'),
    id: top.id || null,
    classes: classes,
    zIndex: window.getComputedStyle(top).zIndex
  };
  const points = [
    [cx, cy],
    [rect.left + rect.width * 0.25, rect.top + rect.height * 0.25],
    [rect.left + rect.width * 0.75, rect.top + rect.height * 0.25],
    [rect.left + rect.width * 0.25, rect.top + rect.height * 0.75],
    [rect.left + rect.width * 0.75, rect.top + rect.height * 0.75]
  ];
  let hits = 0;
  for (const [x, y] of points) {
    const at = document.elementFromPoint(x, y);
    if (at !== element && !element.contains(at)) hits++;
  }
  coveragePercent = Math.round(hits / points.length * 100);
}

return {
  viewportRatio: viewportRatio,
  isInViewport: viewportRatio > 0,
  opacity: styles.opacity,
  display: styles.display,
  visibility: styles.visibility,
  isClipped: isClipped,
  isCovered: isCovered,
  covering: covering,
  coveragePercent: coveragePercent,
  pointerEvents: styles.pointerEvents,
  isDisabled: !!element.disabled,
  isReadonly: !!element.readOnly,
  ariaDisabled: element.getAttribute('aria-disabled') === 'true'
};
"""

EXISTS_INFO_JS = """
const el = arguments[0];
const parts = [el.tagName.toLowerCase()];
if (el.id) parts.push('#' + el.id);
if (typeof el.className === 'string') {
  el.className.split(' ').filter(c => c).slice(0, 2).forEach(c => parts.push('.' + c));
}
return parts.join('');
"""


def interactability_issues(data: dict) -> List[str]:
    issues = []
    if data.get("isDisabled"):
        issues.append("disabled")
    if data.get("isReadonly"):
        issues.append("readonly")
    if data.get("ariaDisabled"):
        issues.append("aria-disabled")
    if data.get("pointerEvents") == "none":
        issues.append("pointer-events: none")
    return issues


def format_visibility(data: dict, descriptor: str, selector: str, is_visible: bool, warning: str = "") -> str:
    """
    Render a visibility report.

    ``data`` is the dictionary returned by ``VISIBILITY_JS``; ``is_visible``
    is WebDriver's own displayedness check.
    """
    percent = round(float(data.get("viewportRatio") or 0) * 100)
    in_viewport = bool(data.get("isInViewport"))
    needs_scroll = is_visible and not in_viewport

    if in_viewport:
        viewport_text = "in viewport" + (f" ({percent}% visible)" if percent < 100 else "")
    else:
        viewport_text = "not in viewport" + (f" ({percent}% visible)" if percent > 0 else "")

    lines = []
    if warning:
        lines.append(warning)
    lines.append(f"Visibility: {descriptor}")
    lines.append("")
    lines.append(
        f"{'✓' if is_visible else '✗'} {'visible' if is_visible else 'hidden'}, "
        f"{'✓' if in_viewport else '✗'} {viewport_text}"
    )
    lines.append(
        f"opacity: {data.get('opacity')}, display: {data.get('display')}, visibility: {data.get('visibility')}"
    )

    blocked = interactability_issues(data)
    if blocked:
        lines.append(f"⚠ interactability: {', '.join(blocked)}")

    issues = []
    if data.get("isClipped"):
        issues.append("  ✗ clipped by parent overflow:hidden")
    if data.get("isCovered"):
        coverage = data.get("coveragePercent") or 0
        issues.append("  ✗ covered by another element" + (f" (~{coverage}% covered)" if coverage > 0 else ""))
        covering = data.get("covering")
        if covering:
            issues.append(f"    Covering: {format_descriptor(covering)} (z-index: {covering.get('zIndex')})")
    if needs_scroll:
        issues.append("  ⚠ needs scroll to bring into view")
    if issues:
        lines.append("")
        lines.append("Issues:")
        lines.extend(issues)

    suggestions = []
    if needs_scroll:
        suggestions.append("→ Call scroll_to_element before clicking")
    if data.get("isCovered"):
        suggestions.append("→ Element may be behind modal, overlay, or fixed header")
    if blocked:
        suggestions.append("→ Element cannot be interacted with in current state")
    if suggestions:
        lines.append("")
        lines.extend(suggestions)

    if data.get("isClipped"):
        lines.append("")
        lines.append("💡 Element clipped by parent. Find the clipping container:")
        lines.append(f'   inspect_ancestors({{ selector: "{selector}" }})')
    return "\n".join(lines).strip()


def check_visibility(driver, selector: str, element_index: Optional[int] = None) -> ToolResponse:
    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    warning = format_selection_info(selector, selection.element_index, selection.total_count)
    element = selection.element
    try:
        descriptor = format_descriptor(element_info(driver, element), max_classes=None)
    except WebDriverException:
        descriptor = selector
    data = driver.execute_script(VISIBILITY_JS, element) or {}
    return success_response(
        format_visibility(data, descriptor, selector, is_element_visible(element), warning)
    )


def format_exists(selector: str, count: int, summary: Optional[str]) -> str:
    if count == 0:
        return f"✗ not found: {selector}"
    text = f"✓ exists: <{summary or selector}>"
    if count > 1:
        text += f" ({count} matches)"
    return text


def element_exists(driver, selector: str) -> ToolResponse:
    """Existence is an answer, not a failure: a missing element is a success response."""
    matches = query_matches(driver, selector)
    if isinstance(matches, SelectionError):
        return matches.to_response()
    if not matches:
        return success_response(format_exists(selector, 0, None))
    try:
        summary = driver.execute_script(EXISTS_INFO_JS, matches[0])
    except WebDriverException as e:
        logger.debug("Could not summarize %r: %s", selector, getattr(e, "msg", e))
        summary = None
    return success_response(format_exists(selector, len(matches), summary))


__all__ = [
    "VISIBILITY_JS",
    "EXISTS_INFO_JS",
    "interactability_issues",
    "format_visibility",
    "check_visibility",
    "format_exists",
    "element_exists",
]
