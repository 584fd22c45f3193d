"""
Static tool registry.

Every tool is one ToolSpec entry in TOOLS: its MCP name and async handler.
The FastMCP functions in ``__main__`` declare the wire (camelCase) argument
names and types; FastMCP validates incoming arguments against them and hands
the snake_case keywords to ``call_tool``, which serializes calls on the
session lock.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from . import tools
from .context import BrowserSession
from .responses import ErrorKind, ToolResponse, error_response

import logging
logger = logging.getLogger(__name__)


Handler = Callable[..., Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    handler: Handler
    group: str


# ============================================================================
# Tool table
# ============================================================================

_GROUPS = {
    "inspection": (
        tools.inspect_ancestors,
        tools.inspect_dom,
        tools.measure_element,
        tools.get_computed_styles,
        tools.compare_element_alignment,
        tools.check_visibility,
        tools.element_exists,
        tools.query_selector,
        tools.find_by_text,
        tools.get_test_ids,
    ),
    "interaction": (
        tools.click,
        tools.fill,
        tools.hover,
        tools.scroll_to_element,
        tools.navigate,
    ),
    "content": (
        tools.get_text,
        tools.get_html,
        tools.evaluate,
    ),
    "network": (
        tools.list_network_requests,
        tools.get_request_details,
    ),
    "session": (
        tools.close_browser,
    ),
}

TOOLS: Dict[str, ToolSpec] = {
    handler.__name__: ToolSpec(handler.__name__, handler, group)
    for group, handlers in _GROUPS.items()
    for handler in handlers
}


# ============================================================================
# Dispatch
# ============================================================================

async def call_tool(name: str, arguments: Optional[Dict[str, Any]], session: BrowserSession) -> ToolResponse:
    """
    Run one tool under the session lock.

    ``arguments`` are handler keywords; None values are dropped so the
    handler's own defaults apply.
    """
    spec = TOOLS.get(name)
    if spec is None:
        return error_response(f"Unknown tool: {name}", ErrorKind.INVALID_ARGUMENT)
    kwargs = {key: value for key, value in (arguments or {}).items() if value is not None}

    async with session.get_lock():
        logger.debug("Calling %s with %s", name, kwargs)
        return await spec.handler(session, **kwargs)


__all__ = [
    "ToolSpec",
    "TOOLS",
    "call_tool",
]
