"""
Progressive DOM inspection.

Shows the semantic children of an element (drilling through anonymous
wrapper ``<div>``s), their position relative to the parent edges, the gap
to the previous sibling and a guess at the layout direction.
"""

from typing import List, Optional

from ..constants import DOM_MAX_CHILDREN_DEFAULT, DOM_MAX_DEPTH_DEFAULT
from ..responses import ToolResponse, success_response
from ..selectors.resolver import SelectionError, format_selection_info, resolve


DOM_INSPECTION_JS = """
const target = arguments[0];
const hidden = arguments[1];
const maxDepth = arguments[2];

const SEMANTIC = new Set(['header', 'nav', 'main', 'article', 'section', 'aside', 'footer',
  'form', 'button', 'input', 'select', 'textarea', 'a', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
  'p', 'ul', 'ol', 'li', 'table', 'img', 'video', 'audio', 'svg', 'canvas', 'iframe',
  'dialog', 'details', 'summary']);
const INTERACTIVE = new Set(['button', 'a', 'input', 'select', 'textarea']);

const rectOf = (el) => {
  const r = el.getBoundingClientRect();
  return {x: Math.round(r.x), y: Math.round(r.y), width: Math.round(r.width), height: Math.round(r.height)};
};
const isVisible = (el) => {
  const r = el.getBoundingClientRect();
  const s = window.getComputedStyle(el);
  return s.display !== 'none' && s.visibility !== 'hidden' && parseFloat(s.opacity) > 0 && r.width > 0 && r.height > 0;
};
const testIdOf = (el) => el.getAttribute('data-testid') || el.getAttribute('data-test') || el.getAttribute('data-cy') || null;
const isInteractive = (el) => INTERACTIVE.has(el.tagName.toLowerCase()) || el.hasAttribute('onclick')
  || el.hasAttribute('contenteditable') || el.getAttribute('role') === 'button';
const scrollOf = (el) => {
  const v = el.scrollHeight > el.clientHeight;
  const h = el.scrollWidth > el.clientWidth;
  if (!v && !h) return null;
  return {vertical: v ? el.scrollHeight - el.clientHeight : 0, horizontal: h ? el.scrollWidth - el.clientWidth : 0};
};
const isSemantic = (el) => {
  if (SEMANTIC.has(el.tagName.toLowerCase())) return true;
  if (testIdOf(el)) return true;
  if (el.hasAttribute('role')) return true;
  if (el.hasAttribute('onclick') || el.hasAttribute('contenteditable')) return true;
  const direct = Array.from(el.childNodes).filter(n => n.nodeType === Node.TEXT_NODE)
    .map(n => (n.textContent || '').trim()).join(' ').trim();
  if (direct.length > 10) return true;
  return scrollOf(el) !== null;
};
const selectorOf = (el) => {
  const tid = testIdOf(el);
  if (tid) return '[data-testid="' + tid + '"]';
  if (el.id) return '#' + el.id;
  const tag = el.tagName.toLowerCase();
  const cls = Array.from(el.classList).slice(0, 2).join('.');
  return cls ? tag + '.' + cls : tag;
};

const children = [];
let skippedWrappers = 0;
const collect = (elements, depth) => {
  for (const child of elements) {
    const visible = isVisible(child);
    if (!hidden && !visible) { if (depth === 0) skippedWrappers++; continue; }
    if (isSemantic(child)) {
      const tag = child.tagName.toLowerCase();
      const interactive = isInteractive(child);
      children.push({
        tag: tag,
        selector: selectorOf(child),
        testId: testIdOf(child),
        role: child.getAttribute('role'),
        text: (child.textContent || '').trim().replace(/\\s+/g, ' ').slice(0, 100),
        position: rectOf(child),
        isVisible: visible,
        isInteractive: interactive,
        childCount: child.children.length,
        scrollable: scrollOf(child)
      });
    } else {
      if (depth === 0) skippedWrappers++;
      if (depth < maxDepth) collect(Array.from(child.children), depth + 1);
    }
  }
};
collect(Array.from(target.children), 0);

const tag = target.tagName.toLowerCase();
let tree = null;
if (tag === 'body' || tag === 'main') {
  const counts = {};
  const tCounts = {};
  const walk = (el) => {
    const t = el.tagName.toLowerCase();
    counts[t] = (counts[t] || 0) + 1;
    if (isInteractive(el)) tCounts[t] = (tCounts[t] || 0) + 1;
    Array.from(el.children).forEach(walk);
  };
  walk(target);
  tree = {counts: counts, interactiveCounts: tCounts,
    testIdCount: target.querySelectorAll('[data-testid], [data-test], [data-cy]').length};
}

return {
  target: {
    tag: tag,
    selector: selectorOf(target),
    position: rectOf(target),
    isVisible: isVisible(target),
    isSemantic: isSemantic(target),
    isInteractive: isInteractive(target),
    testId: testIdOf(target),
    role: target.getAttribute('role'),
    text: (target.textContent || '').trim().replace(/\\s+/g, ' ').slice(0, 120)
  },
  children: children,
  totalChildren: target.children.length,
  skippedWrappers: skippedWrappers,
  tree: tree
};
"""

STRUCTURE_TAGS = ("header", "nav", "main", "article", "section", "aside", "footer")
INTERACTIVE_TAGS = ("button", "a", "input", "select", "textarea")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _interactive_label(tag: str) -> str:
    return "link" if tag == "a" else tag


def detect_layout(children: List[dict]) -> Optional[str]:
    """
    Guess ``vertical``, ``horizontal`` or ``grid`` from the first two children.

    Vertical: the second starts below the first at roughly the same x.
    Horizontal: it starts right of the first at roughly the same y.
    """
    if len(children) < 2:
        return None
    first, second = children[0]["position"], children[1]["position"]
    below = second["y"] - (first["y"] + first["height"])
    beside = second["x"] - (first["x"] + first["width"])
    if below >= -2 and abs(second["x"] - first["x"]) < 50:
        return "vertical"
    if beside >= -2 and abs(second["y"] - first["y"]) < 50:
        return "horizontal"
    if abs(below) < 50 and abs(beside) < 50:
        return "grid"
    return None


def _status_parts(item: dict) -> List[str]:
    parts = ["✓ visible" if item.get("isVisible") else "✗ hidden"]
    if item.get("isInteractive"):
        parts.append("⚡ interactive")
    scroll = item.get("scrollable")
    if scroll:
        icons = []
        if scroll.get("vertical"):
            icons.append(f"↕️ {scroll['vertical']}px")
        if scroll.get("horizontal"):
            icons.append(f"↔️ {scroll['horizontal']}px")
        parts.append(f"scrollable {' '.join(icons)}")
    return parts


def _child_label(child: dict) -> str:
    if child.get("testId"):
        return f'<{child["tag"]} data-testid="{child["testId"]}">'
    return f"<{child['tag']} {child['selector']}>" if child.get("selector") else f"<{child['tag']}>"


def format_page_overview(tree: dict) -> List[str]:
    counts = tree.get("counts") or {}
    interactive = tree.get("interactiveCounts") or {}
    lines = ["Page Overview:"]

    structure = [_plural(counts[t], t) for t in STRUCTURE_TAGS if counts.get(t)]
    if structure:
        lines.append(f"  Structure: {', '.join(structure)}")

    summary = [_plural(interactive[t], _interactive_label(t)) for t in INTERACTIVE_TAGS if interactive.get(t)]
    if summary:
        lines.append(f"  Interactive: {', '.join(summary)}")

    forms = counts.get("form", 0)
    inputs = counts.get("input", 0) + counts.get("select", 0) + counts.get("textarea", 0)
    if forms:
        lines.append(f"  Forms: {_plural(forms, 'form')} with {_plural(inputs, 'input')}")

    test_ids = tree.get("testIdCount") or 0
    if test_ids:
        lines.append(f"  Test Coverage: {_plural(test_ids, 'element')} with test IDs")
    lines.append("")
    return lines


def format_child(index: int, child: dict, target_pos: dict, previous: Optional[dict]) -> List[str]:
    pos = child["position"]
    role = f" | {child['role']}" if child.get("role") else ""
    lines = [
        f"[{index}] {_child_label(child)}{role}",
        f"    @ ({pos['x']},{pos['y']}) {pos['width']}x{pos['height']}px",
    ]

    from_left = pos["x"] - target_pos["x"]
    from_right = (target_pos["x"] + target_pos["width"]) - (pos["x"] + pos["width"])
    from_top = pos["y"] - target_pos["y"]
    from_bottom = (target_pos["y"] + target_pos["height"]) - (pos["y"] + pos["height"])
    lines.append(f"    from edges: ←{from_left}px →{from_right}px ↑{from_top}px ↓{from_bottom}px")

    if previous is not None:
        prev = previous["position"]
        h_gap = pos["x"] - (prev["x"] + prev["width"])
        v_gap = pos["y"] - (prev["y"] + prev["height"])
        if abs(pos["x"] - prev["x"]) < 50 and v_gap >= 0:
            lines.append(f"    gap from [{index - 1}]: ↓{round(v_gap)}px (vertical layout)")
        elif abs(pos["y"] - prev["y"]) < 50 and h_gap >= 0:
            lines.append(f"    gap from [{index - 1}]: →{round(h_gap)}px (horizontal layout)")

    if child.get("text"):
        lines.append(f'    "{child["text"]}"')

    status = _status_parts(child)
    if child.get("childCount"):
        status.append(f"{child['childCount']} children")
    if child.get("testId"):
        status.append("has test ID")
    lines.append(f"    {', '.join(status)}")
    lines.append("")
    return lines


def format_dom_inspection(
    data: dict,
    selector: str,
    element_index: int = 0,
    total_count: int = 1,
    max_children: int = DOM_MAX_CHILDREN_DEFAULT,
    max_depth: int = DOM_MAX_DEPTH_DEFAULT,
) -> str:
    lines: List[str] = []
    selection_info = format_selection_info(selector, element_index, total_count)
    if selection_info:
        lines.append(selection_info)

    target = data["target"]
    pos = target["position"]
    lines.append(f"DOM Inspection: <{target['tag']}{' ' + target['selector'] if target.get('selector') else ''}>")
    lines.append(f"@ ({pos['x']},{pos['y']}) {pos['width']}x{pos['height']}px")

    state = ["✓ visible" if target.get("isVisible") else "✗ hidden"]
    if target.get("isInteractive"):
        state.append("⚡ interactive")
    if target.get("isSemantic"):
        state.append("semantic element")
    if target.get("testId"):
        state.append(f"testid={target['testId']}")
    if target.get("role"):
        state.append(f"role={target['role']}")
    lines.append(f"State: {', '.join(state)}")
    if target.get("text"):
        lines.append(f'Text: "{target["text"]}"')
    lines.append("")

    if data.get("tree"):
        lines.extend(format_page_overview(data["tree"]))

    children = data.get("children") or []
    skipped = data.get("skippedWrappers") or 0
    shown = children[:max_children]
    omitted = max(0, len(children) - max_children)

    if not children:
        wrapper_note = f" (skipped {_plural(skipped, 'wrapper')})" if skipped else ""
        lines.append(f"Children (0 semantic{wrapper_note}):")
        lines.append("")
        if target.get("isSemantic") or target.get("isInteractive"):
            suffix = " and interactive" if target.get("isInteractive") else ""
            lines.append(
                f"Target element is already semantic{suffix}; "
                f"no semantic descendants surfaced within maxDepth={max_depth}."
            )
            lines.append("")
        else:
            lines.append("⚠ No semantic or interactive descendants surfaced at this level.")
            lines.append("   Likely dominated by anonymous <div> wrappers without ARIA roles or test IDs.")
            lines.append("")
        if skipped:
            lines.append(f"💡 Increase maxDepth (e.g., {max_depth + 3}) to drill through wrapper divs.")
            lines.append("")
        lines.append("Next steps:")
        lines.append(
            f'1. Re-run inspect_dom({{ selector: "{selector}", maxDepth: {max(max_depth + 3, 8)} }}) '
            "to include deeper children"
        )
        lines.append(f'2. Use get_html({{ selector: "{selector}" }}) when structure remains opaque')
        lines.append("3. Add data-testid attributes or semantic tags to reduce wrapper skipping")
        return "\n".join(lines).rstrip()

    skipped_note = f", skipped {skipped} wrappers" if skipped else ""
    lines.append(f"Children ({len(shown)} of {len(children)}{skipped_note}):")
    lines.append("")
    for index, child in enumerate(shown):
        previous = shown[index - 1] if index > 0 else None
        lines.extend(format_child(index, child, pos, previous))

    if omitted:
        lines.append(f"... {omitted} more semantic children omitted (use maxChildren to show more)")
        lines.append("")

    layout = detect_layout(shown)
    if layout:
        lines.append(f"Layout: {layout}")

    if skipped >= 3:
        lines.append("")
        lines.append(f"💡 Tip: Some elements found, but {skipped} wrapper containers were skipped.")
        lines.append("   Consider adding test IDs to key elements for easier selection.")
    if skipped >= 6:
        lines.append("")
        lines.append(f"💡 Lots of wrapper containers ({skipped}). To inspect parent constraints:")
        lines.append(f'   inspect_ancestors({{ selector: "{selector}" }})')

    return "\n".join(lines).rstrip()


def inspect_dom(
    driver,
    selector: Optional[str] = None,
    include_hidden: bool = False,
    max_children: Optional[int] = None,
    max_depth: Optional[int] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    selector = selector or "body"
    max_children = DOM_MAX_CHILDREN_DEFAULT if max_children is None else max(1, int(max_children))
    max_depth = DOM_MAX_DEPTH_DEFAULT if max_depth is None else max(0, int(max_depth))

    selection = resolve(driver, selector, element_index=element_index)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    data = driver.execute_script(DOM_INSPECTION_JS, selection.element, bool(include_hidden), max_depth)
    return success_response(
        format_dom_inspection(
            data,
            selector,
            selection.element_index,
            selection.total_count,
            max_children=max_children,
            max_depth=max_depth,
        )
    )


__all__ = [
    "DOM_INSPECTION_JS",
    "detect_layout",
    "format_page_overview",
    "format_child",
    "format_dom_inspection",
    "inspect_dom",
]
