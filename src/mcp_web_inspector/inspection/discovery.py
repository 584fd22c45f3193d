"""
Element discovery: which elements does a selector hit, which elements carry a
given text, and which test ids does the page offer.

These tools answer "what is there" before the layout tools answer "why does
it look like this"; they never pick a single element, so ambiguity is part of
the answer rather than an error.
"""

import re
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from selenium.common.exceptions import WebDriverException

from ..actions.elements import TEST_ID_ATTRIBUTES, is_element_visible
from ..constants import (
    QUERY_LIMIT_DEFAULT,
    QUERY_LIMIT_SUGGESTED_MAX,
    TEST_IDS_INLINE_MAX,
    TEST_IDS_PREVIEW,
)
from ..responses import ErrorKind, ToolResponse, error_response, success_response
from ..selectors.engine import InvalidTextPattern, query_all
from ..selectors.normalize import SHORTHAND_PREFIXES
from ..selectors.resolver import SelectionError, query_matches

import logging
logger = logging.getLogger(__name__)


QUERY_INFO_JS = """
const el = arguments[0];
const attrList = arguments[1] || [];
const rect = el.getBoundingClientRect();
const styles = window.getComputedStyle(el);
const visible = styles.display !== 'none' && styles.visibility !== 'hidden' &&
  parseFloat(styles.opacity) > 0 && rect.width > 0 && rect.height > 0;
let selector = '';
const testIdAttr = ['data-testid', 'data-test', 'data-cy'].find(a => el.getAttribute(a));
if (testIdAttr) {
  selector = testIdAttr + '="' + el.getAttribute(testIdAttr) + '"';
} else if (el.id) {
  selector = '#' + el.id;
} else if (typeof el.className === 'string' && el.className.trim()) {
  selector = 'class="' + el.className.trim().split(/\\s+/).slice(0, 3).join('.') + '"';
}
const tag = el.tagName.toLowerCase();
const interactive = ['button', 'a', 'input', 'select', 'textarea'].includes(tag) ||
  el.hasAttribute('onclick') || el.hasAttribute('contenteditable') ||
  el.getAttribute('role') === 'button';
const attributes = {};
for (const name of attrList) {
  const value = el.getAttribute(name);
  if (value !== null) attributes[name] = value;
}
return {
  tag: tag,
  selector: selector,
  text: (el.textContent || '').trim().slice(0, 100),
  x: Math.round(rect.x), y: Math.round(rect.y),
  width: Math.round(rect.width), height: Math.round(rect.height),
  visible: visible,
  interactive: interactive,
  opacity: parseFloat(styles.opacity),
  display: styles.display,
  attributes: attributes
};
"""

TEXT_MATCH_INFO_JS = """
const el = arguments[0];
const tag = el.tagName.toLowerCase();
const testIdAttr = ['data-testid', 'data-test', 'data-cy'].find(a => el.getAttribute(a)) || null;
let box = null;
if (el.getClientRects().length > 0) {
  const r = el.getBoundingClientRect();
  box = {x: Math.round(r.x), y: Math.round(r.y), width: Math.round(r.width), height: Math.round(r.height)};
}
const style = window.getComputedStyle(el);
let hiddenReason = '';
if (style.display === 'none') hiddenReason = 'display: none';
else if (style.visibility === 'hidden') hiddenReason = 'visibility: hidden';
else if (style.opacity === '0') hiddenReason = 'opacity: 0';
else if (!box || box.width === 0 || box.height === 0) hiddenReason = 'zero size';
return {
  tag: tag,
  id: el.id || null,
  classes: (typeof el.className === 'string') ? el.className.split(' ').slice(0, 2).join(' ') : '',
  testIdAttr: testIdAttr,
  testId: testIdAttr ? el.getAttribute(testIdAttr) : null,
  name: el.getAttribute('name'),
  type: el.getAttribute('type'),
  href: el.getAttribute('href'),
  ariaLabel: el.getAttribute('aria-label'),
  box: box,
  text: el.textContent || '',
  hiddenReason: hiddenReason,
  interactive: ['a', 'button', 'input', 'select', 'textarea'].includes(tag) ||
    !!el.getAttribute('onclick') || el.getAttribute('role') === 'button',
  enabled: el.disabled !== true
};
"""

TEST_IDS_JS = """
return arguments[0].map(attr => [
  attr,
  Array.from(document.querySelectorAll('[' + CSS.escape(attr) + ']'))
    .map(el => el.getAttribute(attr))
    .filter(value => value)
]);
"""

_REGEX_LITERAL_PAT = re.compile(r"^/(.+?)/([gimsuy]*)$", re.S)
_REGEX_SPECIAL_PAT = re.compile(r"[.*+?^${}()|\[\]\\]")


def _shorten(value: str, limit: int = 50) -> str:
    return value if len(value) <= limit else value[:limit - 3] + "..."


def _plural(count: int, word: str) -> str:
    return word if count == 1 else word + "s"


def _matches_word(count: int) -> str:
    return "match" if count == 1 else "matches"


def split_list_argument(value: Optional[str]) -> List[str]:
    """``"id, name,,href"`` -> ``["id", "name", "href"]``."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# ============================================================================
# query_selector
# ============================================================================

def format_query_match(index: int, info: dict) -> List[str]:
    tag = f"<{info.get('tag')}" + (f" {info['selector']}" if info.get("selector") else "") + ">"
    lines = [
        f"[{index}] {tag}",
        f"    @ ({info.get('x', 0)},{info.get('y', 0)}) {info.get('width', 0)}x{info.get('height', 0)}px",
    ]
    if info.get("text"):
        lines.append(f'    "{_shorten(info["text"])}"')
    for name, value in (info.get("attributes") or {}).items():
        lines.append(f'    {name}: "{_shorten(str(value))}"')

    status = ["✓ visible" if info.get("visible") else "✗ hidden"]
    if not info.get("visible"):
        if info.get("display") == "none":
            status.append("display: none")
        elif info.get("opacity") == 0:
            status.append("opacity: 0")
        elif not info.get("width") or not info.get("height"):
            status.append("zero size")
    if info.get("interactive"):
        status.append("⚡ interactive")
    lines.append(f"    {', '.join(status)}")
    return lines


def format_query_results(
    selector: str,
    total: int,
    matches: Sequence[dict],
    limit: int,
    only_visible: Optional[bool] = None,
) -> str:
    """
    Render query_selector output.

    ``matches`` are QUERY_INFO_JS payloads already filtered by ``only_visible``
    (True keeps visible, False keeps hidden, None keeps all).
    """
    kind = {True: "visible", False: "hidden"}.get(only_visible, "")
    header = f'Found {total} {_plural(total, "element")} matching "{selector}"'
    if kind:
        header += f" ({len(matches)} {kind})"
    lines = [header + ":", ""]

    for index, info in enumerate(matches[:limit]):
        lines.extend(format_query_match(index, info))
        lines.append("")

    qualifier = f"{kind} " if kind else ""
    if len(matches) > limit:
        lines.append(
            f"Showing {limit} of {len(matches)} {qualifier}matches ({len(matches) - limit} omitted)"
        )
        lines.append(
            f'Use limit parameter to show more: {{ selector: "{selector}", '
            f"limit: {min(len(matches), QUERY_LIMIT_SUGGESTED_MAX)} }}"
        )
    elif kind:
        lines.append(f"Showing {len(matches)} {kind} {_matches_word(len(matches))}")
    else:
        lines.append(f"Showing all {len(matches)} {_matches_word(len(matches))}")
    return "\n".join(lines)


def query_selector(
    driver,
    selector: str,
    limit: Optional[int] = None,
    only_visible: Optional[bool] = None,
    show_attributes: Optional[str] = None,
) -> ToolResponse:
    elements = query_matches(driver, selector)
    if isinstance(elements, SelectionError):
        return elements.to_response()
    if not elements:
        return success_response(
            f'No elements found matching "{selector}"\n\nTip: Try using inspect_dom to explore the page structure.'
        )

    attributes = split_list_argument(show_attributes)
    infos = []
    for element in elements:
        try:
            infos.append(driver.execute_script(QUERY_INFO_JS, element, attributes) or {})
        except WebDriverException as e:
            # detached between the query and the evaluation
            logger.debug("Skipping match of %r: %s", selector, getattr(e, "msg", e))
    if only_visible is not None:
        infos = [info for info in infos if bool(info.get("visible")) == only_visible]

    limit = QUERY_LIMIT_DEFAULT if limit is None else max(1, limit)
    return success_response(format_query_results(selector, len(elements), infos, limit, only_visible))


# ============================================================================
# find_by_text
# ============================================================================

def text_search_selector(text: str, exact: bool = False, case_sensitive: bool = False, regex: bool = False) -> str:
    """
    Selector the search runs, also used for the ``>> nth=`` suggestions.

    A regex may be given as ``/pattern/flags`` or as a bare pattern; partial
    matches are escaped into a pattern, case-insensitive unless asked otherwise.
    """
    if regex:
        literal = _REGEX_LITERAL_PAT.match(text)
        if literal:
            return f"text=/{literal.group(1)}/{literal.group(2)}"
        return f"text=/{text}/"
    if exact:
        return f'text="{text}"'
    escaped = _REGEX_SPECIAL_PAT.sub(lambda m: "\\" + m.group(0), text)
    return f"text=/{escaped}/{'' if case_sensitive else 'i'}"


def _search_description(text: str, exact: bool, regex: bool) -> str:
    if regex:
        return f"matching regex {text}"
    if exact:
        return f'with exact text "{text}"'
    return f'containing "{text}"'


def format_text_match(index: int, info: dict, visible: bool, selector: str) -> str:
    tag = f"<{info.get('tag')}"
    if info.get("id"):
        tag += f"#{info['id']}"
    if info.get("classes"):
        tag += f' class="{info["classes"]}"'
    if info.get("testId"):
        tag += f' {info.get("testIdAttr") or "data-testid"}="{info["testId"]}"'
    for attr, key in (("name", "name"), ("type", "type")):
        if info.get(key):
            tag += f' {attr}="{info[key]}"'
    if info.get("href"):
        href = info["href"]
        tag += f' href="{href[:30]}{"..." if len(href) > 30 else ""}"'
    if info.get("ariaLabel"):
        tag += f' aria-label="{info["ariaLabel"]}"'
    tag += ">"

    box = info.get("box")
    if box:
        position = f"    @ ({box['x']},{box['y']}) {box['width']}x{box['height']}px"
    else:
        position = "    @ (no bounding box)"

    text = " ".join(str(info.get("text") or "").split())
    if len(text) > 100:
        text = text[:100] + "..."

    if visible:
        state = "    ✓ visible"
        if info.get("interactive"):
            state += ", ⚡ interactive" if info.get("enabled", True) else ", ✗ disabled"
    else:
        state = "    ✗ hidden"
        if info.get("hiddenReason"):
            state += f" ({info['hiddenReason']})"

    return "\n".join([
        f"[{index}] {tag}",
        position,
        f'    "{text}"',
        state,
        f"    selector: {selector} >> nth={index}",
    ])


def find_by_text(
    driver,
    text: str,
    exact: bool = False,
    case_sensitive: bool = False,
    regex: bool = False,
    limit: Optional[int] = None,
) -> ToolResponse:
    selector = text_search_selector(text, exact, case_sensitive, regex)
    try:
        elements = query_all(driver, selector)
    except InvalidTextPattern as e:
        return error_response(f"✗ Invalid regex pattern: {e.reason}", ErrorKind.INVALID_ARGUMENT)

    description = _search_description(text, exact, regex)
    count = len(elements)
    if count == 0:
        return success_response(f"✗ No elements found {description}")

    limit = QUERY_LIMIT_DEFAULT if limit is None else max(1, limit)
    entries = []
    for index, element in enumerate(elements[:limit]):
        info = driver.execute_script(TEXT_MATCH_INFO_JS, element) or {}
        entries.append(format_text_match(index, info, is_element_visible(element), selector))

    if count > limit:
        header = f"Found {count} elements {description} (showing first {limit}):"
    else:
        header = f"Found {count} {_plural(count, 'element')} {description}:"
    return success_response(header + "\n\n" + "\n\n".join(entries))


# ============================================================================
# get_test_ids
# ============================================================================

def _shorthand(attribute: str, value: str) -> str:
    for prefix, attr in SHORTHAND_PREFIXES:
        if attr == attribute:
            return f"{prefix}{value}"
    return f"[{attribute}='{value}']"


def find_duplicates(values: Sequence[str]) -> List[Tuple[str, int]]:
    """Values seen more than once, in order of first appearance."""
    return [(value, count) for value, count in Counter(values).items() if count > 1]


def format_test_ids(attributes: Sequence[str], found: Sequence[Tuple[str, List[str]]], show_all: bool = False) -> str:
    """
    Render get_test_ids output.

    ``found`` pairs each searched attribute with its non-empty values in
    document order; attributes without values are skipped.
    """
    found = [(attr, values) for attr, values in found if values]
    total = sum(len(values) for _attr, values in found)

    if total == 0:
        lines = ["Found 0 test IDs", "", "⚠ No test ID attributes found on this page.", "", "Searched for:"]
        lines.extend(f"  • {attr}" for attr in attributes)
        lines.extend([
            "",
            "Suggestions:",
            "  - Use inspect_dom to see page structure",
            "  - Consider adding test IDs to interactive elements",
            '  - Example: <button data-testid="submit-button">Submit</button>',
        ])
        return "\n".join(lines)

    lines = [f"Found {total} test {'ID' if total == 1 else 'IDs'}:", ""]
    for attr, values in found:
        lines.append(f"{attr} ({len(values)}):")
        if show_all or len(values) <= TEST_IDS_INLINE_MAX:
            lines.append(f"  {', '.join(values)}")
        else:
            lines.append(f"  {', '.join(values[:TEST_IDS_PREVIEW])},")
            lines.append(f"  ... and {len(values) - TEST_IDS_PREVIEW} more")
            lines.append(f"  💡 Use showAll: true to see all {len(values)} test IDs")
        lines.append("")

    duplicates = [(attr, find_duplicates(values)) for attr, values in found]
    duplicates = [(attr, dups) for attr, dups in duplicates if dups]
    if duplicates:
        lines.append("⚠ Warning: Duplicate test IDs found (test IDs should be unique):")
        lines.append("")
        for attr, dups in duplicates:
            lines.extend(f'  {attr}: "{value}" appears {count} times' for value, count in dups)
        first_attr, first_dups = duplicates[0]
        first_value = first_dups[0][0]
        lines.extend([
            "",
            "⚠ Impact of Duplicate Test IDs:",
            "   - Flaky tests (selectors match multiple elements)",
            "   - Ambiguous interactions (which element to click?)",
            "   - Test automation will fail or behave unpredictably",
            "",
            "🔧 How to Fix:",
            "   1. Use query_selector to locate all duplicates",
            f'      query_selector({{ selector: "{_shorthand(first_attr, first_value)}" }})',
            "   2. Identify which elements should keep the test ID",
            "   3. Rename duplicates to be unique and descriptive",
            f'      Example: "{first_value}" → "{first_value}-primary", "{first_value}-mobile"',
            "   4. If one is hidden/unused, consider removing it entirely",
            "",
            "💡 Best Practice: Test IDs must be unique across the entire page",
            "",
        ])

    first_attr, first_values = found[0]
    lines.append("💡 Tip: Use these test IDs with selector shortcuts:")
    lines.append(f'   {_shorthand(first_attr, first_values[0])} → [{first_attr}="{first_values[0]}"]')
    return "\n".join(lines)


def get_test_ids(driver, attributes: Optional[str] = None, show_all: bool = False) -> ToolResponse:
    names = split_list_argument(attributes) or list(TEST_ID_ATTRIBUTES)
    raw = driver.execute_script(TEST_IDS_JS, names) or []
    found = [(str(attr), [str(v) for v in (values or [])]) for attr, values in raw]
    return success_response(format_test_ids(names, found, show_all))


__all__ = [
    "QUERY_INFO_JS",
    "TEXT_MATCH_INFO_JS",
    "TEST_IDS_JS",
    "split_list_argument",
    "format_query_match",
    "format_query_results",
    "query_selector",
    "text_search_selector",
    "format_text_match",
    "find_by_text",
    "find_duplicates",
    "format_test_ids",
    "get_test_ids",
]
