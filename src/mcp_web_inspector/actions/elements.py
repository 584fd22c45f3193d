"""Element description, visibility and geometry helpers."""

from typing import Optional

from selenium.common.exceptions import StaleElementReferenceException, WebDriverException

import logging
logger = logging.getLogger(__name__)


TEST_ID_ATTRIBUTES = ("data-testid", "data-test", "data-cy")

ELEMENT_INFO_JS = """
const el = arguments[0];
const attrs = ['data-testid', 'data-test', 'data-cy'];
let testIdAttr = null;
for (const a of attrs) { if (el.hasAttribute(a)) { testIdAttr = a; break; } }
const classes = (typeof el.className === 'string')
  ? el.className.split(' ').filter(c => c)
  : [];
return {
  tag: el.tagName.toLowerCase(),
  testIdAttr: testIdAttr,
  testId: testIdAttr ? el.getAttribute(testIdAttr) : null,
  id: el.id || null,
  classes: classes
};
"""

BOUNDING_BOX_JS = """
const el = arguments[0];
if (!el.isConnected || el.getClientRects().length === 0) return null;
const r = el.getBoundingClientRect();
return {x: r.x, y: r.y, width: r.width, height: r.height};
"""


def format_descriptor(info: dict, max_classes: int = 2) -> str:
    """
    Render ``<tag data-testid="x">``, ``<tag #id>``, ``<tag .a.b>`` or ``<tag>``.

    Test-id attributes win over the id, which wins over class names.
    """
    tag = info.get("tag") or "element"
    if info.get("testId"):
        attr = info.get("testIdAttr") or "data-testid"
        return f'<{tag} {attr}="{info["testId"]}">'
    if info.get("id"):
        return f"<{tag} #{info['id']}>"
    classes = [c for c in (info.get("classes") or []) if c][:max_classes]
    if classes:
        return f"<{tag} .{'.'.join(classes)}>"
    return f"<{tag}>"


def element_info(driver, element) -> dict:
    return driver.execute_script(ELEMENT_INFO_JS, element) or {}


def describe_element(driver, element, fallback: str) -> str:
    """Short descriptor for ``element``; ``fallback`` when the node cannot be evaluated."""
    try:
        info = element_info(driver, element)
    except WebDriverException as e:
        logger.debug("Could not describe element, using %r: %s", fallback, getattr(e, "msg", e))
        return fallback
    if not info:
        return fallback
    return format_descriptor(info)


def is_element_visible(element) -> bool:
    try:
        return bool(element.is_displayed())
    except StaleElementReferenceException:
        return False


def bounding_box(driver, element) -> Optional[dict]:
    """Viewport box of ``element`` or None when it renders no box."""
    box = driver.execute_script(BOUNDING_BOX_JS, element)
    if not box:
        return None
    return {k: float(box.get(k) or 0) for k in ("x", "y", "width", "height")}


__all__ = [
    "TEST_ID_ATTRIBUTES",
    "ELEMENT_INFO_JS",
    "BOUNDING_BOX_JS",
    "format_descriptor",
    "element_info",
    "describe_element",
    "is_element_visible",
    "bounding_box",
]
