"""Page content tool handlers."""

from typing import Optional

from ..actions import content
from ..context import BrowserSession
from ..decorators import ensure_driver_ready
from ..responses import ToolResponse
from .base import safe_execute


@ensure_driver_ready
async def get_text(
    session: BrowserSession,
    selector: Optional[str] = None,
    element_index: Optional[int] = None,
    max_length: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(session, lambda driver: content.get_text(driver, selector, element_index, max_length))


@ensure_driver_ready
async def get_html(
    session: BrowserSession,
    selector: Optional[str] = None,
    element_index: Optional[int] = None,
    clean: bool = False,
    max_length: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(
        session, lambda driver: content.get_html(driver, selector, element_index, clean, max_length)
    )


__all__ = ["get_text", "get_html"]
