"""Environment configuration and validation."""

import os
import re
from typing import Optional

from dotenv import load_dotenv

import logging
logger = logging.getLogger(__name__)


_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")
_WINDOW_SIZE_PAT = re.compile(r"^\s*(\d+)\s*[xX,]\s*(\d+)\s*$")


def _parse_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise EnvironmentError(f"{name} must be a boolean (got {raw!r}).")


def _parse_positive_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise EnvironmentError(f"{name} must be a number (got {raw!r}).")
    if value <= 0:
        raise EnvironmentError(f"{name} must be positive (got {raw!r}).")
    return value


def get_env_config(dotenv_path: Optional[str] = None) -> dict:
    """
    Read environment variables (and a .env file when present) and validate them.

    Optional:   CHROME_EXECUTABLE_PATH
                CHROME_PROFILE_USER_DATA_DIR
                MCP_WEB_INSPECTOR_HEADLESS (default on)
                MCP_WEB_INSPECTOR_WINDOW_SIZE (default 1280x720)
                MCP_WEB_INSPECTOR_PAGE_LOAD_TIMEOUT (seconds, default 30)
                MCP_WEB_INSPECTOR_SCRIPT_TIMEOUT (seconds, default 30)
    """
    load_dotenv(dotenv_path=dotenv_path, override=False)

    chrome_path = (os.getenv("CHROME_EXECUTABLE_PATH") or "").strip() or None
    user_data_dir = (os.getenv("CHROME_PROFILE_USER_DATA_DIR") or "").strip() or None

    size_raw = (os.getenv("MCP_WEB_INSPECTOR_WINDOW_SIZE") or "1280x720").strip()
    m = _WINDOW_SIZE_PAT.match(size_raw)
    if not m:
        raise EnvironmentError(
            f"MCP_WEB_INSPECTOR_WINDOW_SIZE must look like WIDTHxHEIGHT (got {size_raw!r})."
        )
    window_width, window_height = int(m.group(1)), int(m.group(2))

    config = {
        "chrome_path": chrome_path,
        "user_data_dir": user_data_dir,
        "headless": _parse_bool("MCP_WEB_INSPECTOR_HEADLESS", True),
        "window_width": window_width,
        "window_height": window_height,
        "page_load_timeout": _parse_positive_float("MCP_WEB_INSPECTOR_PAGE_LOAD_TIMEOUT", 30.0),
        "script_timeout": _parse_positive_float("MCP_WEB_INSPECTOR_SCRIPT_TIMEOUT", 30.0),
    }
    logger.debug("Environment config: %s", config)
    return config


def get_log_level() -> str:
    level = (os.getenv("MCP_WEB_INSPECTOR_LOG_LEVEL") or "WARNING").strip().upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise EnvironmentError(f"MCP_WEB_INSPECTOR_LOG_LEVEL is not a logging level (got {level!r}).")
    return level


__all__ = [
    "get_env_config",
    "get_log_level",
]
