"""
Network capture from Chrome's performance log.

Chrome records DevTools ``Network.*`` events in the ``performance`` log when
the driver is created with ``goog:loggingPrefs``. Each call to
``sync_network_log`` drains the pending entries and folds them into the
session's NetworkRecord log; response bodies are only fetched on demand.
"""

import base64
import binascii
import json
from typing import Iterable, Optional

from selenium.common.exceptions import WebDriverException

from ..constants import NETWORK_LOG_CAPACITY
from ..context import BrowserSession, NetworkRecord

import logging
logger = logging.getLogger(__name__)


def _lower_headers(headers: Optional[dict]) -> dict:
    return {str(k).lower(): str(v) for k, v in (headers or {}).items()}


def parse_log_entries(entries: Iterable[dict]) -> list:
    """Decode performance-log entries into ``(method, params)`` pairs, skipping non-Network events."""
    events = []
    for entry in entries:
        try:
            message = json.loads(entry.get("message") or "{}").get("message") or {}
        except (TypeError, ValueError):
            logger.debug("Skipping undecodable performance log entry")
            continue
        method = message.get("method") or ""
        if method.startswith("Network."):
            events.append((method, message.get("params") or {}))
    return events


def _add_record(session: BrowserSession, params: dict, capacity: int) -> NetworkRecord:
    request = params.get("request") or {}
    record = NetworkRecord(
        index=session.next_network_index,
        request_id=str(params.get("requestId") or ""),
        method=request.get("method") or "GET",
        url=request.get("url") or "",
        resource_type=(params.get("type") or "other").lower(),
        timestamp=float(params.get("wallTime") or 0.0),
        started=float(params.get("timestamp") or 0.0),
        request_headers=_lower_headers(request.get("headers")),
        post_data=request.get("postData"),
    )
    session.next_network_index += 1
    session.network_log.append(record)
    session.requests_by_id[record.request_id] = record

    while len(session.network_log) > capacity:
        evicted = session.network_log.popleft()
        if session.requests_by_id.get(evicted.request_id) is evicted:
            del session.requests_by_id[evicted.request_id]
    return record


def apply_event(session: BrowserSession, method: str, params: dict, capacity: int = NETWORK_LOG_CAPACITY) -> None:
    """
    Fold one DevTools Network event into the session log.

    A redirect reuses the request id, so a second ``requestWillBeSent``
    starts a new record and the id points at the newest hop.
    """
    if method == "Network.requestWillBeSent":
        _add_record(session, params, capacity)
        return

    record = session.requests_by_id.get(str(params.get("requestId") or ""))
    if record is None:
        return

    if method == "Network.responseReceived":
        response = params.get("response") or {}
        record.status = response.get("status")
        record.status_text = response.get("statusText") or ""
        record.response_headers = _lower_headers(response.get("headers"))
        if params.get("type"):
            record.resource_type = params["type"].lower()
        if params.get("timestamp") and record.started:
            record.timing = int(round((float(params["timestamp"]) - record.started) * 1000))
    elif method == "Network.loadingFinished":
        record.finished = True
        if params.get("encodedDataLength") is not None:
            record.encoded_length = int(params["encodedDataLength"])
    elif method == "Network.loadingFailed":
        record.finished = True
        record.failed = params.get("errorText") or "failed"


def sync_network_log(session: BrowserSession) -> int:
    """Drain the driver's performance log into ``session``. Returns the number of events applied."""
    if session.driver is None:
        return 0
    try:
        entries = session.driver.get_log("performance")
    except WebDriverException as e:
        logger.debug("Could not read performance log: %s", e.msg)
        return 0
    events = parse_log_entries(entries)
    for method, params in events:
        apply_event(session, method, params)
    return len(events)


def decode_body(result: dict) -> Optional[str]:
    """Text of a ``Network.getResponseBody`` result; None for binary payloads."""
    body = result.get("body")
    if body is None:
        return None
    if not result.get("base64Encoded"):
        return body
    try:
        return base64.b64decode(body).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


def fetch_response_body(session: BrowserSession, record: NetworkRecord) -> Optional[str]:
    """Fetch (once) and cache the response body of a finished request."""
    if record.body_fetched or session.driver is None or not record.finished or record.failed:
        return record.response_body
    record.body_fetched = True
    try:
        result = session.driver.execute_cdp_cmd("Network.getResponseBody", {"requestId": record.request_id})
    except WebDriverException as e:
        logger.debug("No body for request %s: %s", record.request_id, e.msg)
        return None
    record.response_body = decode_body(result or {})
    return record.response_body


__all__ = [
    "parse_log_entries",
    "apply_event",
    "sync_network_log",
    "decode_body",
    "fetch_response_body",
]
