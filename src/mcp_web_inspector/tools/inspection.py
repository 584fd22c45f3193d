"""Inspection tool handlers."""

from typing import Optional

from ..context import BrowserSession
from ..decorators import ensure_driver_ready
from ..inspection import ancestors, box_model, discovery, dom, visibility
from ..responses import ToolResponse
from .base import safe_execute


@ensure_driver_ready
async def inspect_ancestors(
    session: BrowserSession,
    selector: str,
    limit: Optional[int] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(
        session, lambda driver: ancestors.inspect_ancestors(driver, selector, limit, element_index)
    )


@ensure_driver_ready
async def inspect_dom(
    session: BrowserSession,
    selector: Optional[str] = None,
    include_hidden: bool = False,
    max_children: Optional[int] = None,
    max_depth: Optional[int] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(
        session,
        lambda driver: dom.inspect_dom(driver, selector, include_hidden, max_children, max_depth, element_index),
    )


@ensure_driver_ready
async def measure_element(
    session: BrowserSession, selector: str, element_index: Optional[int] = None
) -> ToolResponse:
    return safe_execute(session, lambda driver: box_model.measure_element(driver, selector, element_index))


@ensure_driver_ready
async def get_computed_styles(
    session: BrowserSession,
    selector: str,
    properties: Optional[str] = None,
    element_index: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(
        session, lambda driver: box_model.get_computed_styles(driver, selector, properties, element_index)
    )


@ensure_driver_ready
async def compare_element_alignment(session: BrowserSession, selector1: str, selector2: str) -> ToolResponse:
    return safe_execute(
        session, lambda driver: box_model.compare_element_alignment(driver, selector1, selector2)
    )


@ensure_driver_ready
async def check_visibility(
    session: BrowserSession, selector: str, element_index: Optional[int] = None
) -> ToolResponse:
    return safe_execute(session, lambda driver: visibility.check_visibility(driver, selector, element_index))


@ensure_driver_ready
async def element_exists(session: BrowserSession, selector: str) -> ToolResponse:
    return safe_execute(session, lambda driver: visibility.element_exists(driver, selector))


@ensure_driver_ready
async def query_selector(
    session: BrowserSession,
    selector: str,
    limit: Optional[int] = None,
    only_visible: Optional[bool] = None,
    show_attributes: Optional[str] = None,
) -> ToolResponse:
    return safe_execute(
        session,
        lambda driver: discovery.query_selector(driver, selector, limit, only_visible, show_attributes),
    )


@ensure_driver_ready
async def find_by_text(
    session: BrowserSession,
    text: str,
    exact: bool = False,
    case_sensitive: bool = False,
    regex: bool = False,
    limit: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(
        session, lambda driver: discovery.find_by_text(driver, text, exact, case_sensitive, regex, limit)
    )


@ensure_driver_ready
async def get_test_ids(
    session: BrowserSession, attributes: Optional[str] = None, show_all: bool = False
) -> ToolResponse:
    return safe_execute(session, lambda driver: discovery.get_test_ids(driver, attributes, show_all))


__all__ = [
    "inspect_ancestors",
    "inspect_dom",
    "measure_element",
    "get_computed_styles",
    "compare_element_alignment",
    "check_visibility",
    "element_exists",
    "query_selector",
    "find_by_text",
    "get_test_ids",
]
