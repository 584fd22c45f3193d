"""Browser lifecycle tool handlers."""

from ..browser.driver import close_driver
from ..context import BrowserSession
from ..responses import ToolResponse, success_response


async def close_browser(session: BrowserSession) -> ToolResponse:
    if close_driver(session):
        return success_response("Browser closed successfully")
    return success_response("No browser instance to close")


__all__ = ["close_browser"]
