"""
Ambiguity resolution for selectors that match several elements.

Selection failures are returned as ``SelectionError`` values rather than
raised, so every tool has to branch on them explicitly:

    result = resolve(driver, "testid:submit", error_on_multiple=True)
    if isinstance(result, SelectionError):
        return failure_response(result)
    result.element.click()
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from selenium.common.exceptions import InvalidSelectorException, WebDriverException
from selenium.webdriver.remote.webelement import WebElement

from ..actions.elements import is_element_visible
from ..constants import MATCH_TEXT_LIMIT, MAX_MATCH_DESCRIPTIONS
from ..responses import ErrorKind, ToolResponse, failure_response
from .engine import query_all, uses_nth
from .normalize import invalid_selector_message, is_testid_selector, normalize_selector

import logging
logger = logging.getLogger(__name__)


MATCH_INFO_JS = """
const el = arguments[0];
const tag = (el.tagName || '').toLowerCase();
let text = el.innerText || el.textContent || '';
text = (text || '').replace(/\\s+/g, ' ').trim();
const testid = el.getAttribute('data-testid') || el.getAttribute('data-test') || el.getAttribute('data-cy') || null;
const id = el.id || null;
let parentLabel = null;
let p = el.parentElement;
while (p && !parentLabel) {
  const ptid = p.getAttribute('data-testid');
  const ptest = p.getAttribute('data-test');
  const pcy = p.getAttribute('data-cy');
  if (ptid) parentLabel = '[data-testid="' + ptid + '"]';
  else if (ptest) parentLabel = '[data-test="' + ptest + '"]';
  else if (pcy) parentLabel = '[data-cy="' + pcy + '"]';
  else if (p.id) parentLabel = '#' + p.id;
  p = p.parentElement;
}
return {tag: tag, text: text, testid: testid, id: id, parentLabel: parentLabel};
"""


@dataclass
class Selection:
    element: WebElement
    element_index: int
    total_count: int


@dataclass
class SelectionError:
    kind: ErrorKind
    message: str

    def to_response(self) -> ToolResponse:
        return failure_response(self)


def truncate_text(text: str, limit: int = MATCH_TEXT_LIMIT) -> str:
    if text and len(text) > limit:
        return text[:limit - 3] + "..."
    return text


def format_match_description(index: int, info: dict, original_selector: str) -> str:
    """One ``[i] <tag> "text"`` entry of an ambiguity report."""
    text = truncate_text(" ".join(str(info.get("text") or "").split()))
    suggestion = f"{original_selector} >> nth={index}"
    alt = None
    if info.get("testid"):
        suggestion, alt = f"testid:{info['testid']}", suggestion
    elif info.get("id"):
        suggestion, alt = f"id={info['id']}", suggestion

    lines = [f"[{index}] <{info.get('tag') or ''}>" + (f' "{text}"' if text else "")]
    if info.get("parentLabel"):
        lines.append(f"    parent: {info['parentLabel']}")
    lines.append(f"    selector: {suggestion}")
    if alt:
        lines.append(f"    alt: {alt}")
    return "\n".join(lines)


def describe_matched_elements(driver, elements: Sequence[WebElement], original_selector: str) -> str:
    count = len(elements)
    shown = min(count, MAX_MATCH_DESCRIPTIONS)
    entries = []
    for i in range(shown):
        try:
            info = driver.execute_script(MATCH_INFO_JS, elements[i]) or {}
        except WebDriverException as e:
            logger.debug("Could not describe match %d of %r: %s", i, original_selector, getattr(e, "msg", e))
            entries.append(f"[{i}] (element)\n    selector: {original_selector} >> nth={i}")
            continue
        entries.append(format_match_description(i, info, original_selector))
    if count > shown:
        entries.append(f"… and {count - shown} more matches (use >> nth=<index> to target).")
    return "\n".join(entries)


def ambiguous_message(selector: str, count: int, details: str) -> str:
    return (
        f'Selector "{selector}" matched {count} elements. Please use a more specific selector.\n'
        "1) Preferred: add a unique data-testid and select it directly (e.g., testid:submit).\n"
        "2) If you cannot change markup: append `>> nth=<index>` to target a specific match.\n"
        "\n"
        f"Matches:\n{details}"
    )


def select_preferred(
    driver,
    elements: Sequence[WebElement],
    element_index: Optional[int] = None,
    error_on_multiple: bool = False,
    original_selector: Optional[str] = None,
) -> Union[Selection, SelectionError]:
    """
    Pick one element out of a match set.

    Order of rules: no match, ambiguity when ``error_on_multiple``, explicit
    1-based ``element_index``, single match, then the first displayed element
    in document order (match 0 when none is displayed).
    """
    selector = original_selector or "selector"
    count = len(elements)

    if count == 0:
        return SelectionError(ErrorKind.NOT_FOUND, f"Element not found: {selector}")

    if error_on_multiple and count > 1:
        details = describe_matched_elements(driver, elements, selector)
        return SelectionError(ErrorKind.AMBIGUOUS, ambiguous_message(selector, count, details))

    if element_index is not None:
        if element_index < 1 or element_index > count:
            return SelectionError(
                ErrorKind.INDEX_OUT_OF_RANGE,
                f"Only {count} element(s) found, cannot select element {element_index}",
            )
        return Selection(elements[element_index - 1], element_index - 1, count)

    if count == 1:
        return Selection(elements[0], 0, 1)

    for i, element in enumerate(elements):
        if is_element_visible(element):
            return Selection(element, i, count)
    return Selection(elements[0], 0, count)


def query_matches(driver, selector: str) -> Union[Sequence[WebElement], SelectionError]:
    """Normalize and run ``selector``; syntax errors come back as INVALID_SELECTOR."""
    try:
        return query_all(driver, normalize_selector(selector))
    except InvalidSelectorException as e:
        return SelectionError(ErrorKind.INVALID_SELECTOR, invalid_selector_message(selector, e.msg or str(e)))


def resolve(
    driver,
    selector: str,
    element_index: Optional[int] = None,
    error_on_multiple: bool = False,
) -> Union[Selection, SelectionError]:
    matches = query_matches(driver, selector)
    if isinstance(matches, SelectionError):
        return matches
    return select_preferred(
        driver,
        matches,
        element_index=element_index,
        error_on_multiple=error_on_multiple,
        original_selector=selector,
    )


def duplicate_testid_warning(selector: str, total_count: int) -> str:
    if total_count <= 1:
        return ""
    if is_testid_selector(selector):
        return (
            "💡 Tip: Test IDs should be unique. Consider making this test ID unique to avoid ambiguity.\n"
            "   Primary fix: assign a unique data-testid to the intended element.\n"
            "   Workaround: if you cannot change markup, you may use '>> nth=<index>' temporarily."
        )
    return (
        "💡 Tip: Consider adding a unique data-testid attribute for more reliable selection.\n"
        "   Primary fix: add data-testid and target it (e.g., testid:submit).\n"
        "   Workaround: use '>> nth=<index>' only when you can't add test IDs."
    )


def build_nth_selector_hint(selector: str, total_count: int) -> str:
    trimmed = selector.strip()
    if not trimmed or uses_nth(trimmed):
        return ""
    last_index = max(total_count - 1, 1)
    return (
        "Primary fix: add a unique data-testid to the intended element and select it directly.\n"
        'Workaround: Append ">> nth=<index>" to target a specific match when you cannot change markup.\n'
        f"   Example: {trimmed} >> nth=0 (first match)\n"
        f"   Or: {trimmed} >> nth={last_index} (last match)\n"
        "Note: nth selectors are brittle and may break with layout/content changes.\n"
        "Prefer unique data-testid attributes for long-term stability."
    )


def format_selection_info(
    selector: str,
    element_index: int,
    total_count: int,
    preferred_visible: bool = True,
) -> str:
    """Warning block shown when a selector matched several elements; empty otherwise."""
    if total_count <= 1:
        return ""
    extras = [
        duplicate_testid_warning(selector, total_count),
        build_nth_selector_hint(selector, total_count),
        "💡 Tip: Avoid relying on '>> nth='; add a unique data-testid instead." if uses_nth(selector) else "",
    ]
    base = f'⚠ Found {total_count} elements matching "{selector}", using element {element_index + 1}'
    if preferred_visible:
        base += " (first visible)"
    extra_text = "\n".join(e for e in extras if e)
    return f"{base}\n{extra_text}" if extra_text else base


__all__ = [
    "Selection",
    "SelectionError",
    "MATCH_INFO_JS",
    "truncate_text",
    "format_match_description",
    "describe_matched_elements",
    "ambiguous_message",
    "select_preferred",
    "query_matches",
    "resolve",
    "duplicate_testid_warning",
    "build_nth_selector_hint",
    "format_selection_info",
]
