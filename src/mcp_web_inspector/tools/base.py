"""Shared error boundary for tool handlers."""

from typing import Callable

from selenium.common.exceptions import (
    InvalidSelectorException,
    InvalidSessionIdException,
    NoSuchWindowException,
    TimeoutException,
    WebDriverException,
)

from ..context import BrowserSession
from ..responses import ErrorKind, ToolResponse, error_response
from ..selectors.normalize import sanitize_selector_engine_message

import logging
logger = logging.getLogger(__name__)


_DISCONNECT_MARKERS = (
    "disconnected",
    "not reachable",
    "connection refused",
    "target window already closed",
    "session deleted",
    "no such window",
)


def exception_message(exc: BaseException) -> str:
    msg = getattr(exc, "msg", None)
    return (msg or str(exc) or exc.__class__.__name__).strip()


def is_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (InvalidSessionIdException, NoSuchWindowException, ConnectionError)):
        return True
    if isinstance(exc, WebDriverException):
        text = exception_message(exc).lower()
        return any(marker in text for marker in _DISCONNECT_MARKERS)
    return False


def classify_exception(exc: Exception) -> ErrorKind:
    if isinstance(exc, InvalidSelectorException):
        return ErrorKind.INVALID_SELECTOR
    # script and page-load timeouts both surface as TimeoutException
    if isinstance(exc, TimeoutException):
        return ErrorKind.TIMEOUT
    if is_disconnect(exc):
        return ErrorKind.DISCONNECTED
    return ErrorKind.OPERATION_FAILED


def exception_response(session: BrowserSession, exc: Exception) -> ToolResponse:
    """
    Map a browser exception to an error envelope.

    A disconnect also drops the dead driver so the next call relaunches.
    """
    kind = classify_exception(exc)
    message = exception_message(exc)
    if kind == ErrorKind.INVALID_SELECTOR:
        return error_response(f"Invalid selector: {sanitize_selector_engine_message(message)}", kind)
    if kind == ErrorKind.TIMEOUT:
        return error_response(f"Operation timed out: {message}. The page may still be loading - please retry.", kind)
    if kind == ErrorKind.DISCONNECTED:
        logger.warning("Browser connection lost: %s", message)
        session.mark_disconnected()
        return error_response(
            f"Browser connection error: {message}. Connection has been reset - please retry the operation.",
            kind,
        )
    logger.debug("Tool operation failed", exc_info=exc)
    return error_response(f"Operation failed: {message}", kind)


def safe_execute(session: BrowserSession, operation: Callable[..., ToolResponse]) -> ToolResponse:
    """Run ``operation(driver)`` and turn browser exceptions into error responses."""
    try:
        return operation(session.driver)
    except (WebDriverException, ConnectionError) as e:
        return exception_response(session, e)


__all__ = [
    "exception_message",
    "is_disconnect",
    "classify_exception",
    "exception_response",
    "safe_execute",
]
