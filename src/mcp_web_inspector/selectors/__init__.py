"""Selector normalization, matching and disambiguation."""

from .normalize import normalize_selector, sanitize_selector_engine_message
from .engine import query_all
from .resolver import Selection, SelectionError, format_selection_info, resolve, select_preferred

__all__ = [
    "normalize_selector",
    "sanitize_selector_engine_message",
    "query_all",
    "Selection",
    "SelectionError",
    "format_selection_info",
    "resolve",
    "select_preferred",
]
