# mcp_web_inspector/decorators/envelope.py

import asyncio
import inspect
import functools
from typing import Any, Callable

from mcp.server.fastmcp.exceptions import ToolError

from ..responses import ToolResponse

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "tool_envelope",
    "unwrap_response",
]


def unwrap_response(value: Any) -> str:
    """
    Convert a handler result into the text FastMCP sends back.

    An error ToolResponse raises ToolError, which FastMCP reports as a result
    with ``isError: true``.
    """
    if isinstance(value, ToolResponse):
        if value.is_error:
            raise ToolError(value.text)
        return value.text
    if value is None:
        return ""
    return str(value)


def tool_envelope(func: Callable):
    """
    Decorator for MCP tool functions:
      - Works with both async and sync callables.
      - On success: returns the response text.
      - On error responses and unexpected exceptions: raises ToolError.
    """
    def _unexpected(err: Exception) -> ToolError:
        logger.exception("Unhandled error in %s", func.__name__)
        return ToolError(f"{err.__class__.__name__}: {err}")

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                # Preserve cooperative cancellation semantics
                raise
            except ToolError:
                raise
            except Exception as e:
                raise _unexpected(e) from e
            return unwrap_response(result)
        return wrapper
    else:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except ToolError:
                raise
            except Exception as e:
                raise _unexpected(e) from e
            return unwrap_response(result)
        return wrapper
