"""Configuration management for mcp_web_inspector."""

from .environment import get_env_config, get_log_level

__all__ = [
    "get_env_config",
    "get_log_level",
]
