"""Network log tool handlers. They read the log without launching a browser."""

from typing import Optional

from ..actions import network
from ..context import BrowserSession
from ..responses import ToolResponse
from .base import safe_execute


async def list_network_requests(
    session: BrowserSession,
    type: Optional[str] = None,
    limit: Optional[int] = None,
) -> ToolResponse:
    return safe_execute(session, lambda _driver: network.list_network_requests(session, type, limit))


async def get_request_details(session: BrowserSession, index: int) -> ToolResponse:
    return safe_execute(session, lambda _driver: network.get_request_details(session, index))


__all__ = ["list_network_requests", "get_request_details"]
