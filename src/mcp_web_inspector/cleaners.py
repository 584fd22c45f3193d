# mcp_web_inspector/cleaners.py

import re
from typing import Dict, Tuple

import bs4
from bs4 import Comment


NON_CONTENT_TAGS = ("style", "noscript", "template")


def _remove_comments(soup, pruned_counts: Dict[str, int]) -> None:
    for c in soup.find_all(string=lambda t: isinstance(t, Comment)):
        c.extract()
        pruned_counts["comments_removed"] += 1


def _remove_tags(soup, names, pruned_counts: Dict[str, int], key: str) -> None:
    for name in names:
        for t in soup.find_all(name):
            t.decompose()
            pruned_counts[key] += 1


def strip_markup(html: str, clean: bool = False) -> Tuple[str, Dict[str, int]]:
    """
    Remove non-content markup from an HTML fragment or document.

    Args:
        html: Raw HTML (``outerHTML`` of an element or the full page source).
        clean: Scripts are always removed. With ``clean`` also drop styles,
            comments, ``<meta>`` and other non-content tags.

    Returns:
        The cleaned HTML and a dict of removal counts.
    """
    pruned_counts = {
        "script": 0,
        "style": 0,
        "meta": 0,
        "comments_removed": 0,
    }
    if not html:
        return "", pruned_counts

    soup = bs4.BeautifulSoup(html, "html.parser")

    # Phase 0: scripts are never returned
    _remove_tags(soup, ("script",), pruned_counts, "script")

    # Phase 1: presentation and metadata noise
    if clean:
        _remove_tags(soup, NON_CONTENT_TAGS, pruned_counts, "style")
        _remove_tags(soup, ("meta",), pruned_counts, "meta")
        _remove_comments(soup, pruned_counts)

    return str(soup), pruned_counts


def normalize_text(text: str) -> str:
    """Collapse runs of blank lines and trailing spaces in ``innerText`` output."""
    if not text:
        return ""
    lines = [line.rstrip() for line in text.replace("\r\n", "\n").split("\n")]
    out = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", out).strip()


def truncate_content(text: str, max_length: int, marker: str) -> Tuple[str, bool]:
    """Cut ``text`` at ``max_length`` characters and append ``marker`` on its own line."""
    if len(text) <= max_length:
        return text, False
    return f"{text[:max_length]}\n{marker}", True


__all__ = [
    "NON_CONTENT_TAGS",
    "strip_markup",
    "normalize_text",
    "truncate_content",
]
