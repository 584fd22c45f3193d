#region Overview
"""
## Browser inspection over MCP

The server drives one Chrome instance (headless by default) and exposes tools
to inspect layout problems: why an element is clipped, narrow, hidden or
misaligned. Every tool takes the same selector syntax:

* CSS (`#main .card`), `text=Sign in`, `text=/sign.*in/i`, `xpath=//button`, `id=my:id`
* test id shorthands: `testid:submit`, `data-test:submit`, `data-cy:submit`
* chains and positions: `ul.items >> li >> nth=2`

When a selector matches several elements, inspection tools use the first
visible match and say so; interaction tools refuse to guess and list the
matches instead.

## Arguments

Tool arguments use camelCase on the wire (`elementIndex`, `includeHidden`,
`maxChildren`, ...). Each parameter below declares its wire name with
`Field(validation_alias=...)`; FastMCP advertises and validates that name and
passes the snake_case keyword to the handler.

## Session

There is one BrowserSession per server process. The browser is launched by
the first tool that needs a page and relaunched automatically after a
disconnect. Tool calls are serialized on the session lock.
"""
#endregion

#region Imports
import sys
import logging
from typing import Annotated, Literal, Optional
from mcp.server.fastmcp import FastMCP
from pydantic import Field
#endregion

#region Import from your package
from mcp_web_inspector import registry
from mcp_web_inspector.config import get_log_level
from mcp_web_inspector.constants import (
    ANCESTOR_LIMIT_DEFAULT,
    ANCESTOR_LIMIT_MAX,
    DOM_MAX_CHILDREN_DEFAULT,
    DOM_MAX_DEPTH_DEFAULT,
    MAX_CONTENT_CHARS,
    NETWORK_LIST_LIMIT_DEFAULT,
    QUERY_LIMIT_DEFAULT,
)
from mcp_web_inspector.context import get_session
from mcp_web_inspector.decorators import tool_envelope
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion

#region Argument types
Selector = Annotated[str, Field(
    description=(
        "CSS selector, text selector, or testid shorthand "
        "(e.g., 'testid:submit-button', '#main', 'text=Sign in', 'button >> nth=1')"
    ),
)]

ElementIndex = Annotated[Optional[int], Field(
    validation_alias="elementIndex",
    description=(
        "When selector matches multiple elements, use this 1-based index to select a specific one "
        "(e.g., 2 = second element). Default: first visible element."
    ),
)]

MaxLength = Annotated[Optional[int], Field(
    validation_alias="maxLength",
    description=f"Maximum number of characters to return (default {MAX_CONTENT_CHARS})",
)]
#endregion

#region Helper Functions
async def _call(name: str, **arguments) -> object:
    """Dispatch to the registry handler with the process session."""
    return await registry.call_tool(name, arguments, get_session())
#endregion

#region FastMCP Initialization
mcp = FastMCP("mcp_web_inspector")
#endregion

#region Tools -- Layout inspection
@mcp.tool()
@tool_envelope
async def inspect_ancestors(
    selector: Selector,
    limit: Annotated[Optional[int], Field(
        description=f"Number of ancestors to walk (default {ANCESTOR_LIMIT_DEFAULT}, max {ANCESTOR_LIMIT_MAX})",
    )] = None,
    element_index: ElementIndex = None,
) -> str:
    """
    Walk up the DOM from an element and show each ancestor's box, margins,
    padding, borders, overflow and flex/grid context.

    Flags clipping points, width constraints and scrollable containers. Use it
    to find out why an element is clipped, narrow or off-center.
    """
    return await _call("inspect_ancestors", selector=selector, limit=limit, element_index=element_index)

@mcp.tool()
@tool_envelope
async def inspect_dom(
    selector: Annotated[Optional[str], Field(
        description="Element to inspect (default: <body>). Same syntax as every other selector.",
    )] = None,
    include_hidden: Annotated[bool, Field(
        validation_alias="includeHidden",
        description="Include hidden children (default false)",
    )] = False,
    max_children: Annotated[Optional[int], Field(
        validation_alias="maxChildren",
        description=f"Maximum semantic children to show (default {DOM_MAX_CHILDREN_DEFAULT})",
    )] = None,
    max_depth: Annotated[Optional[int], Field(
        validation_alias="maxDepth",
        description=f"Wrapper levels to drill through looking for semantic children (default {DOM_MAX_DEPTH_DEFAULT})",
    )] = None,
    element_index: ElementIndex = None,
) -> str:
    """
    Progressive DOM inspection: the target element, its layout and its
    semantic children with positions, edge distances and sibling gaps.
    Omit selector to start at <body>.
    """
    return await _call(
        "inspect_dom",
        selector=selector,
        include_hidden=include_hidden,
        max_children=max_children,
        max_depth=max_depth,
        element_index=element_index,
    )

@mcp.tool()
@tool_envelope
async def measure_element(selector: Selector, element_index: ElementIndex = None) -> str:
    """Box model of an element: position, content size, padding, border, margin and total space."""
    return await _call("measure_element", selector=selector, element_index=element_index)

@mcp.tool()
@tool_envelope
async def get_computed_styles(
    selector: Selector,
    properties: Annotated[Optional[str], Field(
        description="Comma-separated CSS properties (default: a common layout/visibility/typography set)",
    )] = None,
    element_index: ElementIndex = None,
) -> str:
    """Computed CSS values of an element, grouped into Layout, Visibility, Spacing, Typography and Other."""
    return await _call("get_computed_styles", selector=selector, properties=properties, element_index=element_index)

@mcp.tool()
@tool_envelope
async def compare_element_alignment(
    selector1: Annotated[str, Field(description="First element selector")],
    selector2: Annotated[str, Field(description="Second element selector")],
) -> str:
    """Compare two elements' edges, centers and dimensions (2px tolerance)."""
    return await _call("compare_element_alignment", selector1=selector1, selector2=selector2)

@mcp.tool()
@tool_envelope
async def check_visibility(selector: Selector, element_index: ElementIndex = None) -> str:
    """
    Check if an element is visible to the user: viewport intersection,
    clipping by overflow:hidden, covering elements and interactability.
    Use it to debug click/interaction failures.
    """
    return await _call("check_visibility", selector=selector, element_index=element_index)

@mcp.tool()
@tool_envelope
async def element_exists(selector: Selector) -> str:
    """Quick existence check: '✓ exists: <tag#id.class>' with the match count, or '✗ not found'."""
    return await _call("element_exists", selector=selector)
#endregion

#region Tools -- Element discovery
@mcp.tool()
@tool_envelope
async def query_selector(
    selector: Selector,
    limit: Annotated[Optional[int], Field(
        description=f"Maximum number of elements to detail (default {QUERY_LIMIT_DEFAULT}, recommended max 50)",
    )] = None,
    only_visible: Annotated[Optional[bool], Field(
        validation_alias="onlyVisible",
        description="true = only visible elements, false = only hidden elements, omitted = all",
    )] = None,
    show_attributes: Annotated[Optional[str], Field(
        validation_alias="showAttributes",
        description="Comma-separated HTML attributes to show per element (e.g., 'id,name,aria-label,href')",
    )] = None,
) -> str:
    """
    Test a selector and list every matched element: tag, position, text,
    visibility (with the reason when hidden) and whether it is interactive.
    Essential for selector debugging.
    """
    return await _call(
        "query_selector",
        selector=selector,
        limit=limit,
        only_visible=only_visible,
        show_attributes=show_attributes,
    )

@mcp.tool()
@tool_envelope
async def find_by_text(
    text: Annotated[str, Field(
        description="Text to search for; with regex=true a /pattern/flags literal or a bare pattern",
    )],
    exact: Annotated[bool, Field(description="Match the whole text exactly (default false). Ignored with regex.")] = False,
    case_sensitive: Annotated[bool, Field(
        validation_alias="caseSensitive",
        description="Case-sensitive partial match (default false). Ignored with regex; use flags instead.",
    )] = False,
    regex: Annotated[bool, Field(description="Treat text as a JavaScript regular expression (default false)")] = False,
    limit: Annotated[Optional[int], Field(
        description=f"Maximum number of elements to return (default {QUERY_LIMIT_DEFAULT})",
    )] = None,
) -> str:
    """
    Find elements by their text content, with position, visibility and
    interaction state, plus a ready-to-use selector for each match.
    """
    return await _call(
        "find_by_text", text=text, exact=exact, case_sensitive=case_sensitive, regex=regex, limit=limit
    )

@mcp.tool()
@tool_envelope
async def get_test_ids(
    attributes: Annotated[Optional[str], Field(
        description="Comma-separated test id attributes (default: 'data-testid,data-test,data-cy')",
    )] = None,
    show_all: Annotated[bool, Field(
        validation_alias="showAll",
        description="List every test id instead of the first 8 per attribute (default false)",
    )] = False,
) -> str:
    """
    Discover the test identifiers on the page, grouped by attribute, with a
    warning for duplicates. Use them with shortcuts like 'testid:submit-button'.
    """
    return await _call("get_test_ids", attributes=attributes, show_all=show_all)
#endregion

#region Tools -- Page interaction
@mcp.tool()
@tool_envelope
async def navigate(
    url: Annotated[str, Field(description="Absolute URL to load (http, https, file, about or data)")],
    wait_until: Annotated[Literal["load", "domcontentloaded"], Field(
        validation_alias="waitUntil",
        description="Document state to wait for (default load)",
    )] = "load",
    timeout: Annotated[Optional[float], Field(description="Seconds to wait for the document state")] = None,
) -> str:
    """Navigate the browser to a URL. Launches the browser if needed."""
    return await _call("navigate", url=url, wait_until=wait_until, timeout=timeout)

@mcp.tool()
@tool_envelope
async def click(selector: Selector) -> str:
    """Click an element. The selector must match exactly one element."""
    return await _call("click", selector=selector)

@mcp.tool()
@tool_envelope
async def fill(
    selector: Selector,
    value: Annotated[str, Field(description="Value to type")],
    clear_first: Annotated[bool, Field(
        validation_alias="clearFirst",
        description="Clear the field first (default true)",
    )] = True,
) -> str:
    """Fill an input field. The selector must match exactly one element."""
    return await _call("fill", selector=selector, value=value, clear_first=clear_first)

@mcp.tool()
@tool_envelope
async def hover(selector: Selector) -> str:
    """Move the mouse over an element. The selector must match exactly one element."""
    return await _call("hover", selector=selector)

@mcp.tool()
@tool_envelope
async def scroll_to_element(
    selector: Selector,
    position: Annotated[Literal["start", "center", "end"], Field(
        description="Where to align the element in the viewport (default center)",
    )] = "center",
) -> str:
    """Scroll an element into view."""
    return await _call("scroll_to_element", selector=selector, position=position)
#endregion

#region Tools -- Content
@mcp.tool()
@tool_envelope
async def get_text(
    selector: Annotated[Optional[str], Field(description="Element to read (default: the whole page)")] = None,
    element_index: ElementIndex = None,
    max_length: MaxLength = None,
) -> str:
    """Visible text of the page or of one element."""
    return await _call("get_text", selector=selector, element_index=element_index, max_length=max_length)

@mcp.tool()
@tool_envelope
async def get_html(
    selector: Annotated[Optional[str], Field(description="Element to read (default: the whole page)")] = None,
    element_index: ElementIndex = None,
    clean: Annotated[bool, Field(description="Also remove styles, comments and meta tags (default false)")] = False,
    max_length: MaxLength = None,
) -> str:
    """Raw HTML of the page or of one element, scripts removed. Prefer inspect_dom for structure."""
    return await _call(
        "get_html", selector=selector, element_index=element_index, clean=clean, max_length=max_length
    )

@mcp.tool()
@tool_envelope
async def evaluate(script: Annotated[str, Field(description="JavaScript expression or statements")]) -> str:
    """
    Execute JavaScript in the page and return the JSON result. Suggests
    specialized tools when the script does something one of them covers.
    """
    return await _call("evaluate", script=script)
#endregion

#region Tools -- Network
@mcp.tool()
@tool_envelope
async def list_network_requests(
    type: Annotated[Optional[str], Field(
        description="Resource type filter (document, xhr, fetch, script, stylesheet, image, ...)",
    )] = None,
    limit: Annotated[Optional[int], Field(
        description=f"Maximum requests to list (default {NETWORK_LIST_LIMIT_DEFAULT})",
    )] = None,
) -> str:
    """List captured network requests, most recent first."""
    return await _call("list_network_requests", type=type, limit=limit)

@mcp.tool()
@tool_envelope
async def get_request_details(
    index: Annotated[int, Field(description="Index from list_network_requests")],
) -> str:
    """Full details of one captured request: status, timing, important headers and bodies."""
    return await _call("get_request_details", index=index)
#endregion

#region Tools -- Session management
@mcp.tool()
@tool_envelope
async def close_browser() -> str:
    """Close the browser. The next page tool launches a fresh one."""
    return await _call("close_browser")
#endregion


def main() -> None:
    # stdout carries the MCP protocol
    logging.basicConfig(
        stream=sys.stderr,
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting mcp_web_inspector (%d tools)", len(registry.TOOLS))
    mcp.run()


if __name__ == "__main__":
    main()
