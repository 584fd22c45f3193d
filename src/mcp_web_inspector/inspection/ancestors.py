"""
Ancestor chain inspection and layout diagnostics.

Walks from a target element up to ``<body>`` collecting box metrics and the
layout-relevant computed styles of every node, then renders them as an
indexed chain followed by a ``Diagnostics:`` section naming the clipping
point, width constraints and the nearest scrollable container.

The formatting half is pure and works on ``AncestorRecord`` values, so it can
be exercised without a browser.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..actions.elements import format_descriptor
from ..constants import ANCESTOR_LIMIT_DEFAULT, ANCESTOR_LIMIT_MAX
from ..responses import ToolResponse, success_response
from ..selectors.resolver import SelectionError, format_selection_info, resolve

import logging
logger = logging.getLogger(__name__)


ANCESTORS_JS = """
const el = arguments[0];
const limit = arguments[1];
const chain = [];
let current = el;
while (current && chain.length < limit) {
  const rect = current.getBoundingClientRect();
  const cs = window.getComputedStyle(current);
  let testIdAttr = null;
  for (const a of ['data-testid', 'data-test', 'data-cy']) {
    if (current.hasAttribute(a)) { testIdAttr = a; break; }
  }
  chain.push({
    tag: current.tagName.toLowerCase(),
    testIdAttr: testIdAttr,
    testId: testIdAttr ? current.getAttribute(testIdAttr) : null,
    id: current.id || null,
    classes: (typeof current.className === 'string') ? current.className : '',
    rect: {
      x: Math.round(rect.x), y: Math.round(rect.y),
      width: Math.round(rect.width), height: Math.round(rect.height)
    },
    width: cs.width, maxWidth: cs.maxWidth, minWidth: cs.minWidth,
    margin: cs.margin,
    marginTop: cs.marginTop, marginRight: cs.marginRight,
    marginBottom: cs.marginBottom, marginLeft: cs.marginLeft,
    padding: cs.padding,
    display: cs.display,
    overflow: cs.overflow, overflowX: cs.overflowX, overflowY: cs.overflowY,
    scrollHeight: current.scrollHeight, scrollWidth: current.scrollWidth,
    clientHeight: current.clientHeight, clientWidth: current.clientWidth,
    border: cs.border,
    borderTop: cs.borderTop, borderRight: cs.borderRight,
    borderBottom: cs.borderBottom, borderLeft: cs.borderLeft,
    flexDirection: cs.flexDirection, justifyContent: cs.justifyContent,
    alignItems: cs.alignItems, gap: cs.gap,
    gridTemplateColumns: cs.gridTemplateColumns, gridTemplateRows: cs.gridTemplateRows,
    position: cs.position !== 'static' ? cs.position : null,
    zIndex: cs.zIndex !== 'auto' ? cs.zIndex : null,
    transform: cs.transform !== 'none' ? cs.transform : null
  });
  if (current.tagName.toLowerCase() === 'body') break;
  current = current.parentElement;
}
return chain;
"""

_PX_PAT = re.compile(r"^(-?[\d.]+)px$")
_CLIPPING_VALUES = ("hidden", "clip")
_SCROLLING_VALUES = ("auto", "scroll", "overlay")


def parse_px(value: Optional[str]) -> float:
    m = _PX_PAT.match((value or "").strip())
    return float(m.group(1)) if m else 0.0


def _is_default_border(value: Optional[str]) -> bool:
    value = (value or "").strip()
    return not value or value == "none" or value.startswith("0px")


@dataclass
class AncestorRecord:
    tag: str
    test_id: Optional[str] = None
    test_id_attr: Optional[str] = None
    element_id: Optional[str] = None
    classes: str = ""
    x: int = 0
    y: int = 0
    box_width: int = 0
    box_height: int = 0
    width: str = "auto"
    max_width: str = "none"
    min_width: str = "0px"
    margin: str = "0px"
    margin_top: str = "0px"
    margin_right: str = "0px"
    margin_bottom: str = "0px"
    margin_left: str = "0px"
    padding: str = "0px"
    display: str = "block"
    overflow: str = "visible"
    overflow_x: str = "visible"
    overflow_y: str = "visible"
    scroll_height: int = 0
    scroll_width: int = 0
    client_height: int = 0
    client_width: int = 0
    border: str = ""
    border_top: str = ""
    border_right: str = ""
    border_bottom: str = ""
    border_left: str = ""
    flex_direction: str = "row"
    justify_content: str = "normal"
    align_items: str = "normal"
    gap: str = "normal"
    grid_template_columns: str = "none"
    grid_template_rows: str = "none"
    position: Optional[str] = None
    z_index: Optional[str] = None
    transform: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict) -> "AncestorRecord":
        rect = raw.get("rect") or {}
        return cls(
            tag=raw.get("tag") or "element",
            test_id=raw.get("testId"),
            test_id_attr=raw.get("testIdAttr"),
            element_id=raw.get("id"),
            classes=raw.get("classes") or "",
            x=int(rect.get("x") or 0),
            y=int(rect.get("y") or 0),
            box_width=int(rect.get("width") or 0),
            box_height=int(rect.get("height") or 0),
            width=raw.get("width") or "auto",
            max_width=raw.get("maxWidth") or "none",
            min_width=raw.get("minWidth") or "0px",
            margin=raw.get("margin") or "0px",
            margin_top=raw.get("marginTop") or "0px",
            margin_right=raw.get("marginRight") or "0px",
            margin_bottom=raw.get("marginBottom") or "0px",
            margin_left=raw.get("marginLeft") or "0px",
            padding=raw.get("padding") or "0px",
            display=raw.get("display") or "block",
            overflow=raw.get("overflow") or "visible",
            overflow_x=raw.get("overflowX") or "visible",
            overflow_y=raw.get("overflowY") or "visible",
            scroll_height=int(raw.get("scrollHeight") or 0),
            scroll_width=int(raw.get("scrollWidth") or 0),
            client_height=int(raw.get("clientHeight") or 0),
            client_width=int(raw.get("clientWidth") or 0),
            border=raw.get("border") or "",
            border_top=raw.get("borderTop") or "",
            border_right=raw.get("borderRight") or "",
            border_bottom=raw.get("borderBottom") or "",
            border_left=raw.get("borderLeft") or "",
            flex_direction=raw.get("flexDirection") or "row",
            justify_content=raw.get("justifyContent") or "normal",
            align_items=raw.get("alignItems") or "normal",
            gap=raw.get("gap") or "normal",
            grid_template_columns=raw.get("gridTemplateColumns") or "none",
            grid_template_rows=raw.get("gridTemplateRows") or "none",
            position=raw.get("position"),
            z_index=raw.get("zIndex"),
            transform=raw.get("transform"),
        )

    @property
    def class_list(self) -> List[str]:
        return self.classes.split()

    @property
    def descriptor(self) -> str:
        return format_descriptor({
            "tag": self.tag,
            "testId": self.test_id,
            "testIdAttr": self.test_id_attr,
            "id": self.element_id,
            "classes": self.class_list,
        })

    @property
    def vertical_overflow(self) -> int:
        return max(0, self.scroll_height - self.client_height)

    @property
    def horizontal_overflow(self) -> int:
        return max(0, self.scroll_width - self.client_width)

    @property
    def has_overflow_style(self) -> bool:
        return self.overflow_x != "visible" or self.overflow_y != "visible"

    @property
    def is_centered(self) -> bool:
        """Horizontally centered by auto margins or by large equal side margins."""
        if self.margin_left == "auto" and self.margin_right == "auto":
            return True
        left, right = parse_px(self.margin_left), parse_px(self.margin_right)
        return (
            left > 100 and right > 100 and abs(left - right) < 2
            and parse_px(self.margin_top) == 0 and parse_px(self.margin_bottom) == 0
        )

    @property
    def clipped_axes(self) -> List[str]:
        """Axes whose overflow is hidden while content actually overflows."""
        axes = []
        if self.overflow_y in _CLIPPING_VALUES and self.vertical_overflow > 0:
            axes.append("vertical")
        if self.overflow_x in _CLIPPING_VALUES and self.horizontal_overflow > 0:
            axes.append("horizontal")
        return axes

    @property
    def scroll_axes(self) -> List[str]:
        """Axes with more content than room that are not clipped away."""
        axes = []
        if self.vertical_overflow > 0 and self.overflow_y not in _CLIPPING_VALUES:
            axes.append("vertically")
        if self.horizontal_overflow > 0 and self.overflow_x not in _CLIPPING_VALUES:
            axes.append("horizontally")
        return axes

    @property
    def is_clipping_point(self) -> bool:
        return bool(self.clipped_axes)

    @property
    def is_scrollable(self) -> bool:
        return bool(self.scroll_axes)


# ============================================================================
# Per-record formatting
# ============================================================================

def format_identifier(index: int, record: AncestorRecord) -> str:
    identifier = f"[{index}] <{record.tag}>"
    if record.test_id:
        return f"{identifier} | testid:{record.test_id}"
    classes = record.class_list[:3]
    if classes:
        return f"{identifier} | {' '.join(classes)}"
    return identifier


def format_box_line(record: AncestorRecord) -> str:
    info = [f"w:{record.width}"]
    if record.display != "block":
        info.append(f"display:{record.display}")
    if record.margin != "0px":
        info.append(f"m:{record.margin}")
    if record.padding != "0px":
        info.append(f"p:{record.padding}")
    if record.max_width != "none":
        info.append(f"max-w:{record.max_width}")
    if record.min_width not in ("0px", "auto"):
        info.append(f"min-w:{record.min_width}")
    return f"@ ({record.x},{record.y}) {record.box_width}x{record.box_height}px | {' '.join(info)}"


def _has_gap(gap: str) -> bool:
    return bool(gap) and gap not in ("0px", "normal")


def format_layout_context(record: AncestorRecord) -> Optional[str]:
    """``flex: ...`` or ``grid: ...`` for flex and grid containers."""
    if record.display in ("flex", "inline-flex"):
        parts = [record.flex_direction or "row"]
        if record.justify_content not in ("normal", "flex-start", "start", ""):
            parts.append(f"justify:{record.justify_content}")
        if record.align_items not in ("normal", "stretch", ""):
            parts.append(f"align:{record.align_items}")
        if _has_gap(record.gap):
            parts.append(f"gap:{record.gap}")
        return "flex: " + ", ".join(parts)

    if record.display in ("grid", "inline-grid"):
        parts = []
        if record.grid_template_columns not in ("none", ""):
            parts.append(f"cols:{record.grid_template_columns}")
        if record.grid_template_rows not in ("none", ""):
            parts.append(f"rows:{record.grid_template_rows}")
        if _has_gap(record.gap):
            parts.append(f"gap:{record.gap}")
        return "grid: " + ", ".join(parts) if parts else "grid"

    return None


def _margin_arrows(record: AncestorRecord) -> str:
    sides = (
        ("↑", record.margin_top),
        ("→", record.margin_right),
        ("↓", record.margin_bottom),
        ("←", record.margin_left),
    )
    parts = [f"{arrow}{value}" for arrow, value in sides if value != "0px"]
    return " ".join(parts)


def format_margin(record: AncestorRecord) -> Optional[str]:
    """
    Directional margin line.

    Auto margins and centering are always spelled out; uniform margins are
    left to the ``m:`` value on the box line.
    """
    sides = (record.margin_top, record.margin_right, record.margin_bottom, record.margin_left)
    has_auto = "auto" in record.margin or "auto" in sides

    if has_auto:
        line = f"margin: {_margin_arrows(record)}"
        if record.margin_left == "auto" and record.margin_right == "auto":
            return f"{line} ← Horizontally centered by auto margins"
        return line

    if record.is_centered:
        return (
            f"margin: →{record.margin_right} ←{record.margin_left}"
            " ← Horizontally centered (likely margin:0 auto)"
        )

    if len(set(sides)) > 1 and any(v != "0px" for v in sides):
        return f"margin: {_margin_arrows(record)}"
    return None


def format_border(record: AncestorRecord) -> Optional[str]:
    if not _is_default_border(record.border):
        return f"border: {record.border}"
    sides = (
        ("top", record.border_top),
        ("right", record.border_right),
        ("bottom", record.border_bottom),
        ("left", record.border_left),
    )
    set_sides = [f"{name}:{value}" for name, value in sides if not _is_default_border(value)]
    if set_sides:
        return f"border: {', '.join(set_sides)}"
    return None


def _axis_overflow(axis_value: str, amount: int, arrow: str) -> str:
    if axis_value in _CLIPPING_VALUES:
        suffix = f" ({amount}px clipped)" if amount else ""
        return f"🔒 {axis_value}{suffix}"
    if axis_value in _SCROLLING_VALUES:
        if amount:
            return f"{arrow} {axis_value} ({amount}px scrollable)"
        if axis_value == "scroll":
            return f"{arrow} {axis_value} (no overflow)"
    return axis_value


def format_overflow(record: AncestorRecord) -> Optional[str]:
    """Overflow line; None whenever both axes are ``visible``."""
    if not record.has_overflow_style:
        return None

    v_amount = record.vertical_overflow
    h_amount = record.horizontal_overflow

    if record.overflow_x == record.overflow_y:
        value = record.overflow_x
        if value in _CLIPPING_VALUES:
            clipped = []
            if v_amount:
                clipped.append(f"↕️ {v_amount}px clipped")
            if h_amount:
                clipped.append(f"↔️ {h_amount}px clipped")
            info = f" ({', '.join(clipped)})" if clipped else ""
            return f"overflow: 🔒 {value}{info}"
        if value in _SCROLLING_VALUES:
            scroll = []
            if v_amount:
                scroll.append(f"↕️ {v_amount}px")
            if h_amount:
                scroll.append(f"↔️ {h_amount}px")
            if scroll:
                icon = "↕️↔️" if v_amount and h_amount else ("↕️" if v_amount else "↔️")
                return f"overflow: {icon} {value} ({', '.join(scroll)} scrollable)"
            if value == "scroll":
                return f"overflow: {value} (no overflow)"
        return f"overflow: {value}"

    parts = [
        f"overflow-y: {_axis_overflow(record.overflow_y, v_amount, '↕️')}",
        f"overflow-x: {_axis_overflow(record.overflow_x, h_amount, '↔️')}",
    ]
    return ", ".join(parts)


def format_extras(record: AncestorRecord) -> Optional[str]:
    extras = []
    if record.position:
        extras.append(f"position:{record.position}")
    if record.z_index:
        extras.append(f"z-index:{record.z_index}")
    if record.transform:
        extras.append(f"transform:{record.transform}")
    return ", ".join(extras) if extras else None


def record_markers(record: AncestorRecord, index: int) -> List[str]:
    markers = []
    if record.overflow_x in _CLIPPING_VALUES or record.overflow_y in _CLIPPING_VALUES:
        markers.append("🎯 CLIPPING POINT - May clip overflowing children")
    if record.scroll_axes:
        markers.append(f"🎯 SCROLLABLE CONTAINER - {' & '.join(record.scroll_axes)}")
    if record.max_width != "none" and index > 0:
        markers.append("🎯 WIDTH CONSTRAINT")
    return markers


def format_record(index: int, record: AncestorRecord) -> str:
    lines = [format_identifier(index, record), "    " + format_box_line(record)]
    for detail in (
        format_layout_context(record),
        format_margin(record),
        format_border(record),
        format_overflow(record),
        format_extras(record),
    ):
        if detail:
            lines.append(f"    {detail}")
    lines.extend(f"    {marker}" for marker in record_markers(record, index))
    return "\n".join(lines)


# ============================================================================
# Chain diagnostics
# ============================================================================

def find_clipping_point(records: Sequence[AncestorRecord]) -> Optional[tuple]:
    """
    Nearest ancestor that hides overflow on an axis where the target spills out.

    Returns ``(index, record, axes)`` or None.
    """
    if not records:
        return None
    target = records[0]
    for index in range(1, len(records)):
        record = records[index]
        spills_y = target.y < record.y or target.y + target.box_height > record.y + record.box_height
        spills_x = target.x < record.x or target.x + target.box_width > record.x + record.box_width
        axes = []
        if record.overflow_y in _CLIPPING_VALUES and (record.vertical_overflow > 0 or spills_y):
            axes.append("vertical")
        if record.overflow_x in _CLIPPING_VALUES and (record.horizontal_overflow > 0 or spills_x):
            axes.append("horizontal")
        if axes:
            return index, record, axes
    return None


def find_width_constraints(records: Sequence[AncestorRecord]) -> List[tuple]:
    """Ancestors with a max-width that leaves them narrower than their parent, target outward."""
    found = []
    for index in range(1, len(records) - 1):
        record = records[index]
        parent = records[index + 1]
        if record.max_width == "none":
            continue
        if record.box_width < parent.box_width:
            found.append((index, record, parent))
    return found


def find_scrollable_container(records: Sequence[AncestorRecord]) -> Optional[tuple]:
    for index in range(1, len(records)):
        record = records[index]
        if record.is_scrollable:
            return index, record
    return None


def format_diagnostics(records: Sequence[AncestorRecord]) -> List[str]:
    lines: List[str] = []

    clipping = find_clipping_point(records)
    if clipping:
        index, record, axes = clipping
        amounts = []
        if "vertical" in axes and record.vertical_overflow:
            amounts.append(f"↕️ {record.vertical_overflow}px hidden")
        if "horizontal" in axes and record.horizontal_overflow:
            amounts.append(f"↔️ {record.horizontal_overflow}px hidden")
        amount_text = f" ({', '.join(amounts)})" if amounts else ""
        lines.append(
            f"🎯 CLIPPING POINT: [{index}] {record.descriptor} clips {' & '.join(axes)} overflow{amount_text}"
        )

    constraints = find_width_constraints(records)
    # a single max-width is already flagged on its own record
    if len(constraints) >= 2:
        lines.append("🎯 WIDTH CONSTRAINT:")
        for index, record, parent in constraints:
            lines.append(
                f"   [{index}] {record.descriptor} max-width:{record.max_width} "
                f"→ {record.box_width}px (parent {parent.box_width}px)"
            )

    scrollable = find_scrollable_container(records)
    if scrollable:
        index, record = scrollable
        amounts = []
        if "vertically" in record.scroll_axes:
            amounts.append(f"↕️ {record.vertical_overflow}px")
        if "horizontally" in record.scroll_axes:
            amounts.append(f"↔️ {record.horizontal_overflow}px")
        lines.append(
            f"🎯 SCROLLABLE CONTAINER: [{index}] {record.descriptor} scrolls "
            f"{' & '.join(record.scroll_axes)} ({', '.join(amounts)})"
        )

    return lines


def format_ancestor_chain(
    records: Sequence[AncestorRecord],
    selector: str,
    element_index: int = 0,
    total_count: int = 1,
) -> str:
    selection_info = format_selection_info(selector, element_index, total_count)
    if selection_info:
        header = f"{selection_info}\nAncestor Chain:"
    else:
        header = f"Ancestor Chain: {selector}"

    blocks = [header]
    blocks.extend(format_record(i, record) for i, record in enumerate(records))

    diagnostics = format_diagnostics(records)
    if diagnostics:
        blocks.append("Diagnostics:\n" + "\n".join(diagnostics))
    return "\n\n".join(blocks)


# ============================================================================
# Collection
# ============================================================================

def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return ANCESTOR_LIMIT_DEFAULT
    return max(1, min(int(limit), ANCESTOR_LIMIT_MAX))


def collect_ancestors(driver, element, limit: int) -> List[AncestorRecord]:
    raw = driver.execute_script(ANCESTORS_JS, element, limit) or []
    return [AncestorRecord.from_dict(item) for item in raw]


def inspect_ancestors(
    driver,
    selector: str,
    limit: Optional[int] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    records = collect_ancestors(driver, selection.element, clamp_limit(limit))
    logger.debug("Collected %d ancestor records for %r", len(records), selector)
    return success_response(
        format_ancestor_chain(records, selector, selection.element_index, selection.total_count)
    )


__all__ = [
    "ANCESTORS_JS",
    "AncestorRecord",
    "parse_px",
    "format_identifier",
    "format_box_line",
    "format_layout_context",
    "format_margin",
    "format_border",
    "format_overflow",
    "format_extras",
    "record_markers",
    "format_record",
    "find_clipping_point",
    "find_width_constraints",
    "find_scrollable_container",
    "format_diagnostics",
    "format_ancestor_chain",
    "clamp_limit",
    "collect_ancestors",
    "inspect_ancestors",
]
