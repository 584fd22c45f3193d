"""Navigation and scrolling tool handlers."""

from typing import Optional

from ..actions import navigation
from ..context import BrowserSession
from ..decorators import ensure_driver_ready
from ..responses import ToolResponse
from .base import safe_execute


@ensure_driver_ready
async def navigate(
    session: BrowserSession,
    url: str,
    wait_until: str = "load",
    timeout: Optional[float] = None,
) -> ToolResponse:
    """Load ``url``; the network log is kept across navigations."""
    return safe_execute(session, lambda driver: navigation.navigate(driver, url, wait_until, timeout))


@ensure_driver_ready
async def scroll_to_element(session: BrowserSession, selector: str, position: str = "center") -> ToolResponse:
    return safe_execute(session, lambda driver: navigation.scroll_to_element(driver, selector, position))


__all__ = ["navigate", "scroll_to_element"]
