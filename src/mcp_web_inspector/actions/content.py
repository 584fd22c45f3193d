"""Visible text and HTML extraction for the page or one element."""

from typing import List, Optional

from ..cleaners import normalize_text, strip_markup, truncate_content
from ..constants import MAX_CONTENT_CHARS
from ..responses import ToolResponse, success_response
from ..selectors.resolver import SelectionError, format_selection_info, resolve


INNER_TEXT_JS = """
const el = arguments[0] || document.body;
if (!el) return '';
return (typeof el.innerText === 'string') ? el.innerText : (el.textContent || '');
"""

OUTER_HTML_JS = "return arguments[0].outerHTML || arguments[0].innerHTML || '';"


def _effective_limit(max_length: Optional[int]) -> int:
    if isinstance(max_length, int) and max_length > 0:
        return max_length
    return MAX_CONTENT_CHARS


def _scope(driver, selector: Optional[str], element_index: Optional[int]):
    """Resolve an optional scope; returns (element or None, warning, error)."""
    if not selector:
        return None, "", None
    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return None, "", selection
    warning = format_selection_info(selector, selection.element_index, selection.total_count)
    return selection.element, warning, None


def format_content(
    title: str,
    body: str,
    original_length: int,
    limit: int,
    truncated: bool,
    warning: str = "",
    mode_line: str = "",
    tip: str = "",
) -> str:
    lines: List[str] = [title]
    if warning:
        lines.append(warning.rstrip())
    if mode_line:
        lines.append(mode_line)
    lines.append("")
    lines.append(body)
    if truncated:
        lines.append("")
        lines.append(
            f"Output truncated due to size limits (returned {limit} of {original_length} characters)"
        )
    if tip:
        lines.append("")
        lines.append(tip)
    return "\n".join(lines)


def get_text(
    driver,
    selector: Optional[str] = None,
    element_index: Optional[int] = None,
    max_length: Optional[int] = None,
) -> ToolResponse:
    element, warning, error = _scope(driver, selector, element_index)
    if error:
        return error.to_response()

    raw = normalize_text(driver.execute_script(INNER_TEXT_JS, element) or "")
    limit = _effective_limit(max_length)
    body, truncated = truncate_content(raw, limit, "[Output truncated due to size limits]")
    scope = f' (from "{selector}")' if selector else " (entire page)"
    return success_response(format_content(
        f"Visible text content{scope}",
        body,
        len(raw),
        limit,
        truncated,
        warning=warning,
        tip="💡 TIP: If you need structured inspection, try inspect_dom() or element_exists().",
    ))


def get_html(
    driver,
    selector: Optional[str] = None,
    element_index: Optional[int] = None,
    clean: bool = False,
    max_length: Optional[int] = None,
) -> ToolResponse:
    element, warning, error = _scope(driver, selector, element_index)
    if error:
        return error.to_response()

    raw = driver.execute_script(OUTER_HTML_JS, element) if element is not None else driver.page_source
    html, _counts = strip_markup(raw or "", clean=clean)
    limit = _effective_limit(max_length)
    body, truncated = truncate_content(html, limit, "<!-- Output truncated due to size limits -->")
    scope = f' (from "{selector}")' if selector else " (entire page)"
    mode = (
        "clean mode enabled (scripts, styles, comments, meta removed)"
        if clean else "scripts removed (clean=false default)"
    )
    return success_response(format_content(
        f"HTML content{scope}",
        body,
        len(html),
        limit,
        truncated,
        warning=warning,
        mode_line=mode,
        tip="💡 TIP: If you need structured inspection, try inspect_dom() or get_computed_styles().",
    ))


__all__ = [
    "INNER_TEXT_JS",
    "OUTER_HTML_JS",
    "format_content",
    "get_text",
    "get_html",
]
