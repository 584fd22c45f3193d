"""Element interaction tool handlers."""

from ..actions import interaction
from ..context import BrowserSession
from ..decorators import ensure_driver_ready
from ..responses import ToolResponse
from .base import safe_execute


@ensure_driver_ready
async def click(session: BrowserSession, selector: str) -> ToolResponse:
    return safe_execute(session, lambda driver: interaction.click(driver, selector))


@ensure_driver_ready
async def fill(session: BrowserSession, selector: str, value: str, clear_first: bool = True) -> ToolResponse:
    return safe_execute(session, lambda driver: interaction.fill(driver, selector, value, clear_first))


@ensure_driver_ready
async def hover(session: BrowserSession, selector: str) -> ToolResponse:
    return safe_execute(session, lambda driver: interaction.hover(driver, selector))


__all__ = ["click", "fill", "hover"]
