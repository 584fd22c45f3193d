"""Run page JavaScript and point at specialized tools the script could have used."""

import json
import re
from typing import List

from ..responses import ErrorKind, ToolResponse, error_response, success_response


EVALUATE_JS = "return eval(arguments[0]);"

TOOL_SUGGESTIONS = [
    (
        re.compile(r"queryselector|getelementby|getelement|innerhtml|outerhtml|children|childnodes"),
        '📍 DOM Inspection - Use inspect_dom({ selector: "..." })\n'
        "   Why: Returns semantic structure with test IDs, ARIA roles, interactive elements\n"
        "   Token savings: ~60% fewer tokens than parsing raw HTML",
    ),
    (
        re.compile(r"textcontent|innertext"),
        "📝 Text Content\n"
        '   • get_text() - Extract all visible text\n'
        '   • get_text({ selector: "..." }) - Text of one container',
    ),
    (
        re.compile(
            r"scrollheight.*clientheight|clientheight.*scrollheight"
            r"|scrollwidth.*clientwidth|clientwidth.*scrollwidth"
        ),
        '📜 Scroll Detection - Use inspect_ancestors({ selector: "..." })\n'
        '   Why: Already flags scrollable containers with "↕️ [amount]px" overflow\n'
        "   Better than: Comparing scrollHeight > clientHeight manually",
    ),
    (
        re.compile(r"getboundingclientrect|offsetwidth|offsetheight|offsetleft|offsettop"),
        '📏 Element Measurements - Use measure_element({ selector: "..." })\n'
        "   Why: Returns position, size and the full box model\n"
        "   Better than: Manual getBoundingClientRect() + computed padding/margin",
    ),
    (
        re.compile(r"parentelement|parentnode|offsetparent|closest"),
        '🔼 Parent Chain - Use inspect_ancestors({ selector: "..." })\n'
        "   Why: Shows width constraints, margins, overflow, flexbox/grid context\n"
        "   Detects: Clipping points (🎯), centering via auto margins, layout issues",
    ),
    (
        re.compile(r"offsetparent|visibility|display.*none|opacity"),
        '👁️  Visibility Check - Use check_visibility({ selector: "..." })\n'
        "   Returns: visible, in viewport, opacity, display, visibility, covering elements\n"
        "   More reliable: Handles edge cases (opacity:0, visibility:hidden, etc.)",
    ),
    (
        re.compile(r"getcomputedstyle|style\.|currentstyle"),
        '🎨 CSS Styles - Use get_computed_styles({ selector: "..." })\n'
        "   Why: Returns filtered, relevant styles in compact format\n"
        "   Token savings: ~70% fewer tokens than full getComputedStyle() dump",
    ),
    (
        re.compile(r"(!=\s*null|!==\s*null).*queryselector|queryselector.*(!=\s*null|!==\s*null)"),
        '✓ Element Existence - Use element_exists({ selector: "..." })\n'
        "   Returns: exists/not found + element summary\n"
        "   Simpler: No need for null checks",
    ),
    (
        re.compile(r"data-testid|data-test|data-cy"),
        "🔍 Test IDs - Use the testid: shorthand in any selector\n"
        '   Example: inspect_dom({ selector: "testid:main" })\n'
        "   Duplicated test IDs are reported when a selector matches several elements",
    ),
    (
        re.compile(r"getboundingclientrect.*getboundingclientrect"),
        '⚖️  Position Comparison - Use compare_element_alignment({ selector1: "...", selector2: "..." })\n'
        "   Returns: Edge, center and dimension alignment with pixel differences\n"
        "   Perfect for: Checking if elements are aligned",
    ),
    (
        re.compile(r"scrollto|scrollby|scrollintoview|scrolltop|scrollleft|window\.scroll|pageyoffset|scrolly"),
        "📜 Scrolling - Use scroll_to_element\n"
        '   • scroll_to_element({ selector: "...", position: "start|center|end" })\n'
        "     → Scrolls element into view (handles containers automatically)",
    ),
]


def detect_tool_suggestions(script: str) -> List[str]:
    """Suggestions whose pattern matches ``script`` (case-insensitive), in table order."""
    lowered = script.lower()
    return [text for pattern, text in TOOL_SUGGESTIONS if pattern.search(lowered)]


def format_result(result) -> str:
    try:
        return json.dumps(result, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(result)


def format_evaluation(result, script: str) -> List[str]:
    messages = ["✓ JavaScript execution result:", format_result(result)]
    suggestions = detect_tool_suggestions(script)
    if suggestions:
        messages.append("")
        messages.append("💡 Consider using specialized tools instead:")
        messages.extend(f"   {s}" for s in suggestions)
        messages.append("")
        messages.append("ℹ️  Specialized tools are more reliable and token-efficient than evaluate()")
    return messages


def evaluate(driver, script: str) -> ToolResponse:
    if not script or not script.strip():
        return error_response("Script must not be empty", ErrorKind.INVALID_ARGUMENT)
    result = driver.execute_script(EVALUATE_JS, script)
    return success_response(format_evaluation(result, script))


__all__ = [
    "EVALUATE_JS",
    "TOOL_SUGGESTIONS",
    "detect_tool_suggestions",
    "format_result",
    "format_evaluation",
    "evaluate",
]
