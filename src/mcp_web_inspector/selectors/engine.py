"""
Selector engine on top of Selenium.

Understands the selector dialect the tools accept and turns it into Selenium
locator calls. CSS and XPath evaluation stay in the browser; this module only
parses the outer syntax:

    css=main .card          plain CSS (the default when no engine is named)
    xpath=//button          XPath, also bare selectors starting with // or ..
    id=radix-:r1:           exact id match without CSS escaping
    text=Add Recipe         case-insensitive substring of the normalized text
    text="Add Recipe"       exact match of the normalized text
    text=/\\d+ items?/i     JavaScript regular expression over the normalized text
    data-testid=submit      attribute engines (data-testid, data-test, data-cy)
    form >> button          chain: right side is searched inside the left matches
    button >> nth=1         pick one match (0-based, negative, first, last)
"""

import re
from typing import List, Sequence, Tuple, Union

from selenium.common.exceptions import InvalidSelectorException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

_ENGINE_PAT = re.compile(r"^(css|xpath|text|id|nth|data-testid|data-test|data-cy)\s*=\s*(.*)$", re.S)
_TEXT_PATTERN_PAT = re.compile(r"^text\s*=\s*/(.+)/([a-z]*)$", re.S)
_TEXT_PATTERN_OPEN_PAT = re.compile(r"^\s*text\s*=\s*$")
_TEXT_SKIP_TAGS = ("script", "style", "head", "title", "noscript")
_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZÀÁÂÃÄÅÆÇÈÉÊËÌÍÎÏÐÑÒÓÔÕÖØÙÚÛÜÝÞ"
_LOWER = "abcdefghijklmnopqrstuvwxyzàáâãäåæçèéêëìíîïðñòóôõöøùúûüýþ"

Locator = Tuple[str, str]

# arguments: scope element (or null for the document), pattern, flags
TEXT_PATTERN_JS = """
const scope = arguments[0] || document;
let re;
try {
  re = new RegExp(arguments[1], (arguments[2] || '').replace(/[gy]/g, ''));
} catch (e) {
  return {error: String((e && e.message) || e)};
}
const skip = new Set(['SCRIPT', 'STYLE', 'HEAD', 'TITLE', 'NOSCRIPT']);
const matched = Array.from(scope.querySelectorAll('*')).filter(el =>
  !skip.has(el.tagName.toUpperCase()) &&
  re.test((el.textContent || '').replace(/\\s+/g, ' ').trim()));
const inMatch = new Set(matched);
const outer = new Set();
for (const el of matched) {
  for (let p = el.parentElement; p && p !== scope; p = p.parentElement) {
    if (inMatch.has(p)) outer.add(p);
  }
}
return {elements: matched.filter(el => !outer.has(el))};
"""


class InvalidTextPattern(InvalidSelectorException):
    """A ``text=/pattern/flags`` part the browser's RegExp rejects."""

    def __init__(self, part: str, reason: str):
        super().__init__(f'"{part}" is not a valid selector: {reason}')
        self.reason = reason


def split_chain(selector: str) -> List[str]:
    """
    Split a selector on ``>>`` that is outside quotes, brackets and parentheses.

    The ``/.../`` body of a ``text=/pattern/`` part counts as quoted.
    """
    parts: List[str] = []
    buf: List[str] = []
    quote = None
    depth = 0
    i = 0
    n = len(selector)
    while i < n:
        ch = selector[i]
        if ch == "\\" and i + 1 < n:
            buf.append(selector[i:i + 2])
            i += 2
            continue
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "/" and _TEXT_PATTERN_OPEN_PAT.match("".join(buf)):
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth = max(0, depth - 1)
        elif ch == ">" and depth == 0 and selector.startswith(">>", i):
            parts.append("".join(buf).strip())
            buf = []
            i += 2
            continue
        buf.append(ch)
        i += 1
    parts.append("".join(buf).strip())
    if any(not part for part in parts):
        raise InvalidSelectorException(f'"{selector}" is not a valid selector: empty part around ">>"')
    return parts


def xpath_literal(value: str) -> str:
    """Quote ``value`` as an XPath string literal."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    pieces = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{p}"' for p in pieces) + ")"


def _css_attr_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _unquote(value: str) -> Tuple[str, bool]:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1], True
    return value, False


def text_xpath(value: str, exact: bool) -> str:
    """XPath selecting the deepest elements whose normalized text matches."""
    if exact:
        cond = f"normalize-space(.)={xpath_literal(' '.join(value.split()))}"
    else:
        needle = " ".join(value.split()).lower()
        cond = (
            f"contains(translate(normalize-space(.), {xpath_literal(_UPPER)}, {xpath_literal(_LOWER)}), "
            f"{xpath_literal(needle)})"
        )
    skip = " or ".join(f"self::{tag}" for tag in _TEXT_SKIP_TAGS)
    return f".//*[not({skip})][{cond}][not(.//*[not({skip})][{cond}])]"


def parse_nth(value: str) -> Union[int, str]:
    value = value.strip()
    if value in ("first", "last"):
        return value
    try:
        return int(value)
    except ValueError:
        raise InvalidSelectorException(f'"nth={value}" is not a valid selector: nth expects an integer')


def to_locator(part: str) -> Locator:
    """Translate one chain part (not ``nth=`` or ``text=/pattern/``) into a Selenium locator."""
    m = _ENGINE_PAT.match(part)
    if m:
        engine, body = m.group(1), m.group(2).strip()
        if not body:
            raise InvalidSelectorException(f'"{part}" is not a valid selector: missing value after "{engine}="')
        if engine == "css":
            return By.CSS_SELECTOR, body
        if engine == "xpath":
            return By.XPATH, body
        if engine == "text":
            value, quoted = _unquote(body)
            return By.XPATH, text_xpath(value, exact=quoted)
        if engine == "id":
            return By.CSS_SELECTOR, f'[id="{_css_attr_value(body)}"]'
        value, _quoted = _unquote(body)
        return By.CSS_SELECTOR, f'[{engine}="{_css_attr_value(value)}"]'

    if part.startswith("//") or part.startswith(".."):
        return By.XPATH, part
    value, quoted = _unquote(part)
    if quoted:
        return By.XPATH, text_xpath(value, exact=True)
    return By.CSS_SELECTOR, part


def _relative_xpath(value: str) -> str:
    if value.startswith("/"):
        return "." + value
    return value


def _pick_nth(elements: Sequence[WebElement], nth: Union[int, str]) -> List[WebElement]:
    if not elements:
        return []
    if nth == "first":
        return [elements[0]]
    if nth == "last":
        return [elements[-1]]
    if -len(elements) <= nth < len(elements):
        return [elements[nth]]
    return []


def _element_key(element) -> object:
    return getattr(element, "id", None) or id(element)


def match_text_pattern(driver, scope, part: str, pattern: str, flags: str) -> List[WebElement]:
    """Deepest elements under ``scope`` (the document when None) whose text matches the RegExp."""
    result = driver.execute_script(TEXT_PATTERN_JS, scope, pattern, flags) or {}
    if result.get("error"):
        raise InvalidTextPattern(part, result["error"])
    return list(result.get("elements") or [])


def query_all(driver, selector: str) -> List[WebElement]:
    """
    Return every element matching ``selector`` in document order.

    Raises:
        InvalidSelectorException: when the selector (or a chain part) cannot be parsed
            here or is rejected by the browser.
    """
    parts = split_chain(selector)
    current: List[WebElement] = []
    for position, part in enumerate(parts):
        if part.startswith("nth="):
            if position == 0:
                raise InvalidSelectorException(f'"{selector}" is not a valid selector: nth= cannot start a chain')
            current = _pick_nth(current, parse_nth(part[len("nth="):]))
            continue

        text_pattern = _TEXT_PATTERN_PAT.match(part)
        if text_pattern:
            pattern, flags = text_pattern.groups()
            find = lambda scope: match_text_pattern(driver, scope, part, pattern, flags)
        else:
            by, value = to_locator(part)
            if position == 0:
                if by == By.XPATH and value.startswith(".//"):
                    value = value[1:]
                find = lambda scope: driver.find_elements(by, value)
            else:
                if by == By.XPATH:
                    value = _relative_xpath(value)
                find = lambda scope: scope.find_elements(by, value)

        if position == 0:
            current = list(find(None))
            continue

        seen = set()
        found: List[WebElement] = []
        for scope in current:
            for el in find(scope):
                key = _element_key(el)
                if key in seen:
                    continue
                seen.add(key)
                found.append(el)
        current = found
    return current


def uses_nth(selector: str) -> bool:
    return ">> nth=" in selector


__all__ = [
    "TEXT_PATTERN_JS",
    "InvalidTextPattern",
    "split_chain",
    "xpath_literal",
    "text_xpath",
    "parse_nth",
    "to_locator",
    "match_text_pattern",
    "query_all",
    "uses_nth",
]
