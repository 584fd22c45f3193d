"""Listing and detailing captured network requests."""

import json
from typing import List, Optional

from ..browser.network import fetch_response_body, sync_network_log
from ..constants import NETWORK_BODY_PREVIEW_CHARS, NETWORK_LIST_LIMIT_DEFAULT
from ..context import BrowserSession, NetworkRecord
from ..responses import ErrorKind, ToolResponse, error_response, success_response


IMPORTANT_REQUEST_HEADERS = ("content-type", "authorization", "cookie", "user-agent", "accept")
IMPORTANT_RESPONSE_HEADERS = ("content-type", "set-cookie", "cache-control", "location", "x-cache")
MASKED_BODY_FIELDS = ("password", "pass")


def truncate_value(value: str, limit: int) -> str:
    if len(value) > limit:
        return value[:limit - 3] + "..."
    return value


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size}B"
    return f"{size / 1024:.1f}KB"


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 bytes"
    if size < 1024:
        return f"{size} bytes"
    return f"{size / 1024:.1f}KB"


def is_cached(record: NetworkRecord) -> bool:
    headers = record.response_headers
    return "max-age" in headers.get("cache-control", "") or headers.get("x-cache") == "HIT"


def response_size(record: NetworkRecord) -> Optional[int]:
    if record.response_body is not None:
        return len(record.response_body)
    return record.encoded_length or None


def format_request_line(record: NetworkRecord) -> str:
    if record.status:
        status = f"{record.status} {record.status_text or 'OK'}"
    elif record.failed:
        status = f"failed ({record.failed})"
    else:
        status = "pending"
    parts = [
        f"[{record.index}]",
        record.method,
        truncate_value(record.url, 80),
        status,
        "|",
        record.resource_type,
        "|",
        f"{record.timing}ms" if record.timing is not None else "...",
    ]
    size = response_size(record)
    if size:
        parts.extend(["|", format_size(size)])
    if is_cached(record):
        parts.extend(["|", "cached"])
    return " ".join(parts)


def format_request_list(records: List[NetworkRecord], total: int, resource_type: Optional[str] = None) -> str:
    """``records`` is already filtered and ordered most recent first."""
    if not records:
        if resource_type:
            return f"No network requests found for type: {resource_type}"
        return "No network requests captured yet"
    lines = [f"Network Requests ({len(records)} of {total}, recent first):\n"]
    lines.extend(format_request_line(r) for r in records)
    lines.append("\nUse get_request_details(index) for full info")
    return "\n".join(lines)


def list_network_requests(
    session: BrowserSession,
    resource_type: Optional[str] = None,
    limit: Optional[int] = None,
) -> ToolResponse:
    sync_network_log(session)
    limit = limit if limit and limit > 0 else NETWORK_LIST_LIMIT_DEFAULT
    log = list(session.network_log)
    filtered = [r for r in log if r.resource_type == resource_type.lower()] if resource_type else log
    recent = list(reversed(filtered[-limit:]))
    return success_response(format_request_list(recent, len(log), resource_type))


def mask_body(body: str) -> str:
    """Replace password-like fields of a JSON body with ``***``; other bodies pass through."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if not isinstance(parsed, dict):
        return body
    changed = False
    for key in MASKED_BODY_FIELDS:
        if parsed.get(key):
            parsed[key] = "***"
            changed = True
    return json.dumps(parsed, separators=(",", ":")) if changed else body


def _body_lines(body: str, limit: int = NETWORK_BODY_PREVIEW_CHARS) -> List[str]:
    if len(body) > limit:
        return [f"  {body[:limit]}", f"  ... [{len(body) - limit} more chars]"]
    return [f"  {body}"]


def format_request_details(record: NetworkRecord) -> str:
    lines = [f"Request Details [{record.index}]:\n", f"{record.method} {record.url}"]
    if record.status:
        took = f" (took {record.timing}ms)" if record.timing is not None else ""
        lines.append(f"Status: {record.status} {record.status_text or 'OK'}{took}")
    elif record.failed:
        lines.append(f"Status: Failed ({record.failed})")
    else:
        lines.append("Status: Pending (no response yet)")

    request_size = len(record.post_data) if record.post_data else 0
    body_size = len(record.response_body) if record.response_body else 0
    if body_size > 0:
        lines.append(f"Size: {format_bytes(request_size)} → {format_bytes(body_size)}")
    elif request_size > 0:
        lines.append(f"Size: {format_bytes(request_size)} →")

    req_headers = [(k, v) for k, v in record.request_headers.items() if k in IMPORTANT_REQUEST_HEADERS]
    if req_headers:
        lines.append("\nRequest Headers:")
        for key, value in req_headers:
            if key in ("authorization", "cookie"):
                value = truncate_value(value, 20)
            lines.append(f"  {key}: {value}")

    if record.post_data:
        lines.append("\nRequest Body:")
        lines.extend(_body_lines(mask_body(record.post_data)))

    resp_headers = [(k, v) for k, v in record.response_headers.items() if k in IMPORTANT_RESPONSE_HEADERS]
    if resp_headers:
        lines.append("\nResponse Headers:")
        for key, value in resp_headers:
            if key == "set-cookie":
                value = truncate_value(value, 60)
            lines.append(f"  {key}: {value}")

    if record.response_body:
        lines.append(f"\nResponse Body (truncated at {NETWORK_BODY_PREVIEW_CHARS} chars):")
        lines.extend(_body_lines(record.response_body))
    elif record.status:
        lines.append("\nResponse Body: (none or binary data)")
    return "\n".join(lines)


def get_request_details(session: BrowserSession, index: int) -> ToolResponse:
    sync_network_log(session)
    record = session.get_network_record(index)
    if record is None:
        if not session.network_log:
            return error_response(
                f"Error: Invalid index {index}. No network requests captured yet",
                ErrorKind.INVALID_ARGUMENT,
            )
        first = session.network_log[0].index
        last = session.network_log[-1].index
        return error_response(
            f"Error: Invalid index {index}. Valid range: {first}-{last}",
            ErrorKind.INVALID_ARGUMENT,
        )
    fetch_response_body(session, record)
    return success_response(format_request_details(record))


__all__ = [
    "IMPORTANT_REQUEST_HEADERS",
    "IMPORTANT_RESPONSE_HEADERS",
    "format_size",
    "format_bytes",
    "format_request_line",
    "format_request_list",
    "list_network_requests",
    "mask_body",
    "format_request_details",
    "get_request_details",
]
