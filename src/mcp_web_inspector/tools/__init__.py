# mcp_web_inspector/tools/__init__.py
"""
MCP tool handlers - async functions taking the BrowserSession first and
returning a ToolResponse.

Handlers that need a page are wrapped in ensure_driver_ready and run their
browser work through tools.base.safe_execute, which maps Selenium exceptions
onto the error taxonomy.
"""

from .browser_management import close_browser

from .content import get_html, get_text

from .evaluation import evaluate

from .inspection import (
    check_visibility,
    compare_element_alignment,
    element_exists,
    find_by_text,
    get_computed_styles,
    get_test_ids,
    inspect_ancestors,
    inspect_dom,
    measure_element,
    query_selector,
)

from .interaction import click, fill, hover

from .navigation import navigate, scroll_to_element

from .network import get_request_details, list_network_requests

__all__ = [
    # Inspection
    'inspect_ancestors',
    'inspect_dom',
    'measure_element',
    'get_computed_styles',
    'compare_element_alignment',
    'check_visibility',
    'element_exists',
    'query_selector',
    'find_by_text',
    'get_test_ids',
    # Interaction
    'click',
    'fill',
    'hover',
    # Navigation
    'navigate',
    'scroll_to_element',
    # Content
    'get_text',
    'get_html',
    'evaluate',
    # Network
    'list_network_requests',
    'get_request_details',
    # Browser management
    'close_browser',
]
