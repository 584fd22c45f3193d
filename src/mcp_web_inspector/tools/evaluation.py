"""JavaScript evaluation tool handler."""

from ..actions import evaluation
from ..context import BrowserSession
from ..decorators import ensure_driver_ready
from ..responses import ToolResponse
from .base import safe_execute


@ensure_driver_ready
async def evaluate(session: BrowserSession, script: str) -> ToolResponse:
    return safe_execute(session, lambda driver: evaluation.evaluate(driver, script))


__all__ = ["evaluate"]
