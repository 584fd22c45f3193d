"""
Browser session state.

The server owns exactly one BrowserSession and passes it explicitly into every
tool handler. Inspection code only queries the driver held here; launching,
replacing and closing the driver is left to browser.driver.

Usage:
    from mcp_web_inspector.context import get_session

    session = get_session()
    if not session.is_driver_initialized():
        session.driver = create_webdriver(session.config)
"""

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from selenium import webdriver

import logging
logger = logging.getLogger(__name__)


@dataclass
class NetworkRecord:
    """
    One captured request/response pair.

    Attributes:
        index: Position in the session log, stable for the lifetime of the session
        request_id: DevTools request id (used to fetch the response body lazily)
        method: HTTP method
        url: Request URL
        resource_type: Lowercased DevTools resource type (document, xhr, fetch, script, ...)
        timestamp: Wall time of the request in seconds
        started: DevTools monotonic timestamp of the request, used for timing
        status: HTTP status, None while pending
        status_text: HTTP status text
        timing: Duration in milliseconds, None while pending
        request_headers: Request headers as sent
        post_data: Request body, if any
        response_headers: Response headers
        response_body: Response body text once fetched, None otherwise
        encoded_length: Bytes received on the wire, from loadingFinished
        failed: Error text when loading failed
    """

    index: int
    request_id: str
    method: str
    url: str
    resource_type: str = "other"
    timestamp: float = 0.0
    started: float = 0.0
    status: Optional[int] = None
    status_text: str = ""
    timing: Optional[int] = None
    request_headers: Dict[str, str] = field(default_factory=dict)
    post_data: Optional[str] = None
    response_headers: Dict[str, str] = field(default_factory=dict)
    response_body: Optional[str] = None
    encoded_length: Optional[int] = None
    body_fetched: bool = False
    finished: bool = False
    failed: Optional[str] = None


@dataclass
class BrowserSession:
    """
    Encapsulates all browser session state.

    Attributes:
        driver: Selenium WebDriver instance, None until the first page tool runs
        config: Environment configuration dictionary
        network_log: Captured network records, oldest first
        requests_by_id: DevTools request id -> record, for pairing response events
        next_network_index: Index handed to the next captured record
        lock: Asyncio lock serializing tool calls over this session
    """

    driver: Optional[webdriver.Chrome] = None
    config: dict = field(default_factory=dict)

    network_log: Deque[NetworkRecord] = field(default_factory=deque)
    requests_by_id: Dict[str, NetworkRecord] = field(default_factory=dict)
    next_network_index: int = 0

    lock: Optional[asyncio.Lock] = None

    def is_driver_initialized(self) -> bool:
        """Check if driver is initialized."""
        return self.driver is not None

    def get_lock(self) -> asyncio.Lock:
        """Get or create the asyncio lock serializing tool calls."""
        if self.lock is None:
            self.lock = asyncio.Lock()
        return self.lock

    def clear_network_log(self) -> None:
        self.network_log.clear()
        self.requests_by_id.clear()
        self.next_network_index = 0

    def get_network_record(self, index: int) -> Optional[NetworkRecord]:
        for record in self.network_log:
            if record.index == index:
                return record
        return None

    def mark_disconnected(self) -> None:
        """Forget a driver whose browser is gone so the next call relaunches."""
        driver = self.driver
        self.driver = None
        self.clear_network_log()
        if driver is None:
            return
        try:
            driver.quit()
        except Exception as e:
            logger.debug("Ignoring error while quitting a disconnected driver: %s", e)


# ============================================================================
# Process-level Session
# ============================================================================

_global_session: Optional[BrowserSession] = None


def get_session() -> BrowserSession:
    """
    Get or create the process-level browser session.

    Only the server entry point should call this; everything below it receives
    the session as a parameter.
    """
    global _global_session

    if _global_session is None:
        from .config.environment import get_env_config

        _global_session = BrowserSession(config=get_env_config())
    return _global_session


def reset_session() -> None:
    """Drop the process-level session (mainly for testing)."""
    global _global_session
    _global_session = None


__all__ = [
    "NetworkRecord",
    "BrowserSession",
    "get_session",
    "reset_session",
]
