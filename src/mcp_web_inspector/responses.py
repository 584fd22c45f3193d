"""
Tool response envelope and error taxonomy.

Every tool handler returns a ToolResponse. Success and failure share the same
shape and differ only in ``isError``:

    {"content": [{"type": "text", "text": "..."}], "isError": false}
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    INVALID_SELECTOR = "invalid_selector"
    INVALID_ARGUMENT = "invalid_argument"
    DISCONNECTED = "disconnected"
    TIMEOUT = "timeout"
    OPERATION_FAILED = "operation_failed"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.DISCONNECTED, ErrorKind.TIMEOUT)


_STACK_FRAME_PAT = re.compile(r"^\s*at\b|<anonymous>:\d+:\d+")


def strip_stack_frames(message: str) -> str:
    """Drop stack-frame lines (``at foo (...)``, ``<anonymous>:1:2``) from a message."""
    lines = [line for line in str(message).split("\n") if not _STACK_FRAME_PAT.search(line)]
    return "\n".join(lines).strip()


@dataclass
class ToolResponse:
    content: List[dict] = field(default_factory=list)
    is_error: bool = False
    error_kind: Optional[ErrorKind] = None

    @property
    def text(self) -> str:
        return "\n".join(part.get("text", "") for part in self.content if part.get("type") == "text")

    def to_dict(self) -> dict:
        return {"content": [dict(part) for part in self.content], "isError": self.is_error}


def _text_parts(text: Union[str, Sequence[str]]) -> List[dict]:
    if isinstance(text, str):
        return [{"type": "text", "text": text}]
    return [{"type": "text", "text": "\n".join(text)}]


def success_response(text: Union[str, Sequence[str]]) -> ToolResponse:
    """Build a success envelope; a list of lines is joined with newlines."""
    return ToolResponse(content=_text_parts(text), is_error=False)


def error_response(message: str, kind: ErrorKind = ErrorKind.OPERATION_FAILED) -> ToolResponse:
    return ToolResponse(content=_text_parts(strip_stack_frames(message)), is_error=True, error_kind=kind)


def failure_response(failure) -> ToolResponse:
    """Error envelope for a selection failure (anything with ``kind`` and ``message``)."""
    return error_response(failure.message, failure.kind)


__all__ = [
    "ErrorKind",
    "ToolResponse",
    "strip_stack_frames",
    "success_response",
    "error_response",
    "failure_response",
]
