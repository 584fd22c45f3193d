"""
Global constants and tool defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Ancestor Inspection
# ============================================================================

ANCESTOR_LIMIT_DEFAULT = int(os.getenv("MCP_INSPECTOR_ANCESTOR_LIMIT", "10"))
"""Number of ancestors walked by inspect_ancestors when no limit is given."""

ANCESTOR_LIMIT_MAX = 15
"""Hard cap on the ancestor walk."""


# ============================================================================
# Ambiguity Reporting
# ============================================================================

MAX_MATCH_DESCRIPTIONS = 5
"""Number of matches described when a selector is ambiguous."""

MATCH_TEXT_LIMIT = 80
"""Inner text longer than this is cut in match descriptions."""


# ============================================================================
# DOM Inspection
# ============================================================================

DOM_MAX_CHILDREN_DEFAULT = int(os.getenv("MCP_INSPECTOR_DOM_MAX_CHILDREN", "20"))
"""Semantic children shown by inspect_dom."""

DOM_MAX_DEPTH_DEFAULT = int(os.getenv("MCP_INSPECTOR_DOM_MAX_DEPTH", "5"))
"""Wrapper levels inspect_dom drills through when looking for semantic children."""


# ============================================================================
# Element Discovery
# ============================================================================

QUERY_LIMIT_DEFAULT = 10
"""Matches detailed by query_selector and find_by_text when no limit is given."""

QUERY_LIMIT_SUGGESTED_MAX = 50
"""Largest limit query_selector suggests when matches were omitted."""

TEST_IDS_INLINE_MAX = 10
"""get_test_ids lists every value of an attribute up to this many."""

TEST_IDS_PREVIEW = 8
"""Values shown per attribute past TEST_IDS_INLINE_MAX (unless showAll)."""


# ============================================================================
# Layout Comparison
# ============================================================================

ALIGNMENT_TOLERANCE_PX = 2
"""Pixel difference still treated as aligned."""


# ============================================================================
# Network Log
# ============================================================================

NETWORK_LOG_CAPACITY = int(os.getenv("MCP_INSPECTOR_NETWORK_LOG_CAPACITY", "500"))
"""Oldest records are evicted past this size."""

NETWORK_LIST_LIMIT_DEFAULT = 50
"""Records shown by list_network_requests when no limit is given."""

NETWORK_BODY_PREVIEW_CHARS = 500
"""Request/response bodies are truncated at this length."""


# ============================================================================
# Page Content
# ============================================================================

MAX_CONTENT_CHARS = int(os.getenv("MCP_INSPECTOR_MAX_CONTENT_CHARS", "20000"))
"""Maximum characters returned by get_text / get_html."""


__all__ = [
    "ANCESTOR_LIMIT_DEFAULT",
    "ANCESTOR_LIMIT_MAX",
    "MAX_MATCH_DESCRIPTIONS",
    "MATCH_TEXT_LIMIT",
    "DOM_MAX_CHILDREN_DEFAULT",
    "DOM_MAX_DEPTH_DEFAULT",
    "QUERY_LIMIT_DEFAULT",
    "QUERY_LIMIT_SUGGESTED_MAX",
    "TEST_IDS_INLINE_MAX",
    "TEST_IDS_PREVIEW",
    "ALIGNMENT_TOLERANCE_PX",
    "NETWORK_LOG_CAPACITY",
    "NETWORK_LIST_LIMIT_DEFAULT",
    "NETWORK_BODY_PREVIEW_CHARS",
    "MAX_CONTENT_CHARS",
]
