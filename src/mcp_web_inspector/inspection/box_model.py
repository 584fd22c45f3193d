"""Box model measurement, alignment comparison and computed style grouping."""

from typing import Dict, List, Optional, Sequence

from ..actions.elements import bounding_box, describe_element
from ..constants import ALIGNMENT_TOLERANCE_PX
from ..responses import ErrorKind, ToolResponse, error_response, success_response
from ..selectors.resolver import SelectionError, format_selection_info, resolve


MEASURE_JS = """
const el = arguments[0];
const cs = window.getComputedStyle(el);
const rect = el.getBoundingClientRect();
const px = (v) => parseFloat(v) || 0;
return {
  x: Math.round(rect.x), y: Math.round(rect.y),
  width: px(cs.width), height: px(cs.height),
  marginTop: px(cs.marginTop), marginRight: px(cs.marginRight),
  marginBottom: px(cs.marginBottom), marginLeft: px(cs.marginLeft),
  paddingTop: px(cs.paddingTop), paddingRight: px(cs.paddingRight),
  paddingBottom: px(cs.paddingBottom), paddingLeft: px(cs.paddingLeft),
  borderTopWidth: px(cs.borderTopWidth), borderRightWidth: px(cs.borderRightWidth),
  borderBottomWidth: px(cs.borderBottomWidth), borderLeftWidth: px(cs.borderLeftWidth),
  borderStyle: cs.borderStyle,
  boxSizing: cs.boxSizing
};
"""

COMPUTED_STYLES_JS = """
const el = arguments[0];
const props = arguments[1];
const cs = window.getComputedStyle(el);
const out = {};
for (const p of props) { out[p] = cs.getPropertyValue(p); }
return out;
"""

DEFAULT_STYLE_PROPERTIES = (
    "display", "position", "width", "height",
    "opacity", "visibility", "z-index", "overflow",
    "margin", "padding",
    "font-size", "font-weight", "color", "background-color",
)

STYLE_GROUPS = (
    ("Layout", ("display", "position", "width", "height", "top", "left", "right", "bottom")),
    ("Visibility", ("opacity", "visibility", "z-index", "overflow", "overflow-x", "overflow-y")),
    ("Spacing", (
        "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
        "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    )),
    ("Typography", ("font-size", "font-weight", "font-family", "color", "line-height", "text-align")),
)


def _fmt(value: float) -> str:
    return f"{int(round(value))}"


# ============================================================================
# measure_element
# ============================================================================

def format_spacing(top: float, right: float, bottom: float, left: float) -> str:
    parts = []
    if top > 0:
        parts.append(f"↑{_fmt(top)}px")
    if bottom > 0:
        parts.append(f"↓{_fmt(bottom)}px")
    if left > 0:
        parts.append(f"←{_fmt(left)}px")
    if right > 0:
        parts.append(f"→{_fmt(right)}px")
    return " ".join(parts) if parts else "0px"


def format_box_border(m: dict) -> str:
    sides = [m["borderTopWidth"], m["borderRightWidth"], m["borderBottomWidth"], m["borderLeftWidth"]]
    style = m.get("borderStyle") or "solid"
    if len(set(sides)) == 1:
        if sides[0] == 0:
            return "  Border:  none"
        return f"  Border:  {_fmt(sides[0])}px {style}"
    arrows = []
    for arrow, value in zip(("↑", "→", "↓", "←"), sides):
        if value > 0:
            arrows.append(f"{arrow}{_fmt(value)}px")
    return f"  Border:  {' '.join(arrows)} {style}" if arrows else "  Border:  none"


def format_measurements(m: dict, descriptor: str, selector: str, warning: str = "") -> str:
    """
    Render the box model of one element.

    ``width``/``height`` are the computed values; with ``border-box`` sizing
    they include padding and border, which are subtracted for the content box.
    """
    box_w = m["width"]
    box_h = m["height"]
    content_w = box_w - m["paddingLeft"] - m["paddingRight"]
    content_h = box_h - m["paddingTop"] - m["paddingBottom"]
    if m.get("boxSizing") == "border-box":
        content_w -= m["borderLeftWidth"] + m["borderRightWidth"]
        content_h -= m["borderTopWidth"] + m["borderBottomWidth"]
    total_w = box_w + m["marginLeft"] + m["marginRight"]
    total_h = box_h + m["marginTop"] + m["marginBottom"]

    sections: List[str] = []
    if warning:
        sections.append(warning.strip())
    sections.append(f"Element: {descriptor}")
    sections.append(f"@ ({m['x']},{m['y']}) {_fmt(box_w)}x{_fmt(box_h)}px")
    sections.append("")
    sections.append("Box Model:")
    sections.append(f"  Content: {_fmt(max(content_w, 0))}x{_fmt(max(content_h, 0))}px")
    sections.append(
        f"  Padding: {format_spacing(m['paddingTop'], m['paddingRight'], m['paddingBottom'], m['paddingLeft'])}"
    )
    sections.append(format_box_border(m))
    sections.append(
        f"  Margin:  {format_spacing(m['marginTop'], m['marginRight'], m['marginBottom'], m['marginLeft'])}"
    )
    sections.append("")
    sections.append(f"Total Space: {_fmt(total_w)}x{_fmt(total_h)}px (with margin)")

    unusual_margins = m["marginLeft"] > 100 or m["marginRight"] > 100
    width_constrained = box_w < 800 and (m["marginLeft"] + m["marginRight"]) > 200
    if unusual_margins or width_constrained:
        sections.append("")
        sections.append("💡 Unexpected spacing/width detected. Check parent constraints:")
        sections.append(f'   inspect_ancestors({{ selector: "{selector}" }})')
    return "\n".join(sections)


def measure_element(driver, selector: str, element_index: Optional[int] = None) -> ToolResponse:
    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    warning = format_selection_info(selector, selection.element_index, selection.total_count)
    descriptor = describe_element(driver, selection.element, selector)
    measurements = driver.execute_script(MEASURE_JS, selection.element)
    return success_response(format_measurements(measurements, descriptor, selector, warning))


# ============================================================================
# compare_element_alignment
# ============================================================================

def short_name(descriptor: str, selector: str) -> str:
    """Test id or id pulled out of a descriptor, else the selector itself."""
    marker = 'data-testid="'
    if marker in descriptor:
        return descriptor.split(marker, 1)[1].split('"', 1)[0]
    if " #" in descriptor:
        return descriptor.split(" #", 1)[1].rstrip(">")
    return selector


def _alignment(aligned: bool, a: int, b: int) -> str:
    if aligned:
        return f"✓ aligned (both @ {a}px)"
    return f"✗ not aligned ({a}px vs {b}px, diff: {abs(a - b)}px)"


def _dimension(same: bool, a: int, b: int) -> str:
    if same:
        return f"✓ same ({a}px)"
    return f"✗ different ({a}px vs {b}px, diff: {abs(a - b)}px)"


def format_alignment(
    box1: dict,
    box2: dict,
    descriptor1: str,
    descriptor2: str,
    selector1: str,
    selector2: str,
    warnings: str = "",
    tolerance: int = ALIGNMENT_TOLERANCE_PX,
) -> str:
    def edges(box):
        left, top = round(box["x"]), round(box["y"])
        right = round(box["x"] + box["width"])
        bottom = round(box["y"] + box["height"])
        center_h = round(box["x"] + box["width"] / 2)
        center_v = round(box["y"] + box["height"] / 2)
        return {
            "top": top, "left": left, "right": right, "bottom": bottom,
            "center_h": center_h, "center_v": center_v,
            "width": round(box["width"]), "height": round(box["height"]),
        }

    e1, e2 = edges(box1), edges(box2)
    ok = {key: abs(e1[key] - e2[key]) <= tolerance for key in e1}
    name1, name2 = short_name(descriptor1, selector1), short_name(descriptor2, selector2)

    lines = []
    if warnings:
        lines.extend([warnings, ""])
    lines.extend([
        f"Alignment: {descriptor1} vs {descriptor2}",
        f"  {name1}: @ ({e1['left']},{e1['top']}) {e1['width']}×{e1['height']}px",
        f"  {name2}: @ ({e2['left']},{e2['top']}) {e2['width']}×{e2['height']}px",
        "",
        "Edges:",
        f"  Top:    {_alignment(ok['top'], e1['top'], e2['top'])}",
        f"  Left:   {_alignment(ok['left'], e1['left'], e2['left'])}",
        f"  Right:  {_alignment(ok['right'], e1['right'], e2['right'])}",
        f"  Bottom: {_alignment(ok['bottom'], e1['bottom'], e2['bottom'])}",
        "",
        "Centers:",
        f"  Horizontal: {_alignment(ok['center_h'], e1['center_h'], e2['center_h'])}",
        f"  Vertical:   {_alignment(ok['center_v'], e1['center_v'], e2['center_v'])}",
        "",
        "Dimensions:",
        f"  Width:  {_dimension(ok['width'], e1['width'], e2['width'])}",
        f"  Height: {_dimension(ok['height'], e1['height'], e2['height'])}",
    ])

    significant = any(abs(e1[k] - e2[k]) > 5 for k in ("top", "left", "right"))
    nothing_aligned = not any(ok[k] for k in ("top", "left", "right", "bottom"))
    if nothing_aligned and significant:
        lines.extend([
            "",
            "💡 Alignment issue detected. Check if parent layout affects positioning:",
            f'   inspect_ancestors({{ selector: "{selector1}" }})',
            f'   inspect_ancestors({{ selector: "{selector2}" }})',
        ])
    return "\n".join(lines)


def compare_element_alignment(driver, selector1: str, selector2: str) -> ToolResponse:
    first = resolve(driver, selector1)
    if isinstance(first, SelectionError):
        if first.kind == ErrorKind.NOT_FOUND:
            return error_response(f"First element not found: {selector1}", ErrorKind.NOT_FOUND)
        return first.to_response()
    second = resolve(driver, selector2)
    if isinstance(second, SelectionError):
        if second.kind == ErrorKind.NOT_FOUND:
            return error_response(f"Second element not found: {selector2}", ErrorKind.NOT_FOUND)
        return second.to_response()

    warnings = "\n".join(
        w for w in (
            format_selection_info(selector1, first.element_index, first.total_count),
            format_selection_info(selector2, second.element_index, second.total_count),
        ) if w
    )

    descriptor1 = describe_element(driver, first.element, selector1)
    descriptor2 = describe_element(driver, second.element, selector2)
    box1 = bounding_box(driver, first.element)
    box2 = bounding_box(driver, second.element)
    if box1 is None:
        return error_response(f"First element is hidden or has no dimensions: {descriptor1}")
    if box2 is None:
        return error_response(f"Second element is hidden or has no dimensions: {descriptor2}")

    return success_response(
        format_alignment(box1, box2, descriptor1, descriptor2, selector1, selector2, warnings)
    )


# ============================================================================
# get_computed_styles
# ============================================================================

def parse_properties(properties: Optional[str]) -> List[str]:
    if not properties:
        return list(DEFAULT_STYLE_PROPERTIES)
    return [p.strip() for p in properties.split(",") if p.strip()]


def group_styles(styles: Dict[str, str]) -> List[tuple]:
    """Split ``styles`` into (section, lines) pairs, keeping request order within a section."""
    grouped: Dict[str, List[str]] = {name: [] for name, _props in STYLE_GROUPS}
    grouped["Other"] = []
    for prop, value in styles.items():
        section = next((name for name, props in STYLE_GROUPS if prop in props), "Other")
        grouped[section].append(f"  {prop}: {value}")
    return [(name, lines) for name, lines in grouped.items() if lines]


def format_computed_styles(styles: Dict[str, str], descriptor: str, warning: str = "") -> str:
    sections: List[str] = []
    if warning:
        sections.append(warning.strip())
    sections.append(f"Computed Styles: {descriptor}")
    for name, lines in group_styles(styles):
        sections.append(f"{name}:\n" + "\n".join(lines))
    return "\n\n".join(sections)


def get_computed_styles(
    driver,
    selector: str,
    properties: Optional[str] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    props: Sequence[str] = parse_properties(properties)
    warning = format_selection_info(selector, selection.element_index, selection.total_count)
    descriptor = describe_element(driver, selection.element, selector)
    styles = driver.execute_script(COMPUTED_STYLES_JS, selection.element, list(props)) or {}
    ordered = {p: styles.get(p, "") for p in props}
    return success_response(format_computed_styles(ordered, descriptor, warning))


__all__ = [
    "MEASURE_JS",
    "COMPUTED_STYLES_JS",
    "DEFAULT_STYLE_PROPERTIES",
    "STYLE_GROUPS",
    "format_spacing",
    "format_box_border",
    "format_measurements",
    "measure_element",
    "short_name",
    "format_alignment",
    "compare_element_alignment",
    "parse_properties",
    "group_styles",
    "format_computed_styles",
    "get_computed_styles",
]
