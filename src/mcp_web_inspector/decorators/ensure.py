# mcp_web_inspector/decorators/ensure.py
import inspect
import functools

from selenium.common.exceptions import WebDriverException

import logging
logger = logging.getLogger(__name__)


def ensure_driver_ready(fn):
    """
    Launch the browser before a page tool runs.

    The wrapped handler takes the BrowserSession as its first argument. A
    failed launch is reported as an error response instead of reaching the
    handler.
    """
    if not inspect.iscoroutinefunction(fn):
        raise TypeError(f"ensure_driver_ready expects an async handler, got {fn!r}")

    @functools.wraps(fn)
    async def wrapper(session, *args, **kwargs):
        from ..browser.driver import ensure_driver
        from ..responses import ErrorKind, error_response

        try:
            ensure_driver(session)
        except WebDriverException as e:
            logger.error("Could not launch Chrome: %s", e.msg)
            return error_response(
                f"Failed to launch browser: {e.msg}. Check CHROME_EXECUTABLE_PATH and that Chrome is installed.",
                ErrorKind.OPERATION_FAILED,
            )
        return await fn(session, *args, **kwargs)
    return wrapper


__all__ = [
    "ensure_driver_ready",
]
