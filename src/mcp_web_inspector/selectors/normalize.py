"""
Selector normalization.

Rewrites shorthand prefixes and over-escaped CSS into a form the selector
engine accepts:

    testid:submit            -> [data-testid="submit"]
    #radix-\\:r1\\:          -> id=radix-:r1:
    .min-w-\\\\[300px\\\\]   -> .min-w-\\[300px\\]
"""

import re

SHORTHAND_PREFIXES = (
    ("testid:", "data-testid"),
    ("data-test:", "data-test"),
    ("data-cy:", "data-cy"),
)

_SIMPLE_ID_PAT = re.compile(r"^#[^\s>+~]+$")
_ID_SPECIAL_CHARS = ("\\", ":", "[", "]")
_REDUNDANT_ESCAPE_PAT = re.compile(r"\\{2,}(?=[\[\]:])")
_INVALID_SELECTOR_PHRASE = "is not a valid selector"
_STACK_FRAME_PAT = re.compile(r"^\s*at\b|<anonymous>:\d+:\d+")


def _unescape_id(value: str) -> str:
    value = re.sub(r"\\+:", ":", value)
    value = re.sub(r"\\+\[", "[", value)
    value = re.sub(r"\\+\]", "]", value)
    return value.replace("\\", "")


def _collapse_escapes(value: str) -> str:
    return _REDUNDANT_ESCAPE_PAT.sub(lambda _m: "\\", value)


def normalize_selector(selector: str) -> str:
    """
    Normalize a selector string for the selector engine.

    Shorthand prefixes only apply at position 0; whatever follows the value is
    kept verbatim apart from the escape collapsing below, so normalizing the
    output again is a no-op. A standalone ``#id`` carrying ``\\``, ``:``,
    ``[`` or ``]`` becomes ``id=<unescaped>``. Anything else is trimmed and
    has runs of backslashes before ``[``, ``]`` and ``:`` collapsed to one.
    """
    for prefix, attribute in SHORTHAND_PREFIXES:
        if selector.startswith(prefix):
            value = _collapse_escapes(selector[len(prefix):])
            return f'[{attribute}="{value}"]'

    trimmed = selector.strip()
    if _SIMPLE_ID_PAT.match(trimmed):
        token = trimmed[1:]
        if any(ch in token for ch in _ID_SPECIAL_CHARS):
            return f"id={_unescape_id(token)}"
        return trimmed

    return _collapse_escapes(trimmed)


def sanitize_selector_engine_message(message: str) -> str:
    """Reduce a raw selector-engine error to its first meaningful sentence."""
    text = str(message or "")
    pos = text.find(_INVALID_SELECTOR_PHRASE)
    if pos != -1:
        end = pos + len(_INVALID_SELECTOR_PHRASE)
        if text[end:end + 1] == ".":
            end += 1
        return text[:end].strip()
    lines = [line for line in text.split("\n") if not _STACK_FRAME_PAT.search(line)]
    return "\n".join(lines).strip()


def invalid_selector_message(selector: str, raw_message: str) -> str:
    concise = sanitize_selector_engine_message(raw_message)
    lines = [
        f'Invalid CSS selector: "{selector}"',
        "",
        f"Selector syntax error: {concise}",
        "",
        "💡 Tips:",
        "  • Tailwind arbitrary values need escaping in class selectors: .min-w-\\[300px\\]",
        "  • Colons in class names must be escaped: .dark\\:bg-gray-700",
        '  • Prefer robust selectors: use testid:name or [data-testid="..."]',
        '  • Attribute selectors avoid escaping issues: [class*="min-w-[300px]"]',
        "",
        "Examples:",
        "  ✓ .min-w-\\[300px\\] .flex-1",
        "  ✓ testid:submit-button",
        "  ✓ #login-form",
    ]
    return "\n".join(lines)


def is_testid_selector(selector: str) -> bool:
    if any(selector.startswith(prefix) for prefix, _attr in SHORTHAND_PREFIXES):
        return True
    return re.match(r"^\[data-(testid|test|cy)=", selector) is not None


__all__ = [
    "SHORTHAND_PREFIXES",
    "normalize_selector",
    "sanitize_selector_engine_message",
    "invalid_selector_message",
    "is_testid_selector",
]
