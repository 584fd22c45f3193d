# mcp_web_inspector/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .ensure import ensure_driver_ready
from .envelope import tool_envelope, unwrap_response

__all__ = [
    "ensure_driver_ready",
    "tool_envelope",
    "unwrap_response",
]
