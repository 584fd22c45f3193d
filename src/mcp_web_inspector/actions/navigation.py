"""Navigation, document-ready waits and scrolling."""

from typing import List, Optional
from urllib.parse import urlparse

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.support.ui import WebDriverWait

from ..responses import ErrorKind, ToolResponse, error_response, success_response
from ..selectors.resolver import SelectionError, query_matches, resolve
from .elements import describe_element

import logging
logger = logging.getLogger(__name__)


ALLOWED_SCHEMES = ("http", "https", "file", "about", "data")

SCROLL_POSITIONS = {
    "start": "{block: 'start', inline: 'nearest'}",
    "center": "{block: 'center', inline: 'center'}",
    "end": "{block: 'end', inline: 'end'}",
}


def wait_document_ready(driver, timeout: float = 10.0, state: str = "interactive") -> bool:
    """
    Wait until ``document.readyState`` reaches ``state``.

    A page that never settles is not an error here; the return value tells
    the caller whether the wait finished in time.
    """
    accepted = ("complete",) if state == "complete" else ("interactive", "complete")
    try:
        WebDriverWait(driver, timeout).until(
            lambda d: d.execute_script("return document.readyState") in accepted
        )
        return True
    except TimeoutException:
        logger.debug("Document did not reach %r within %.1fs", state, timeout)
        return False


def validate_url(url: str) -> Optional[str]:
    """Return an error message for an unusable URL, None when it can be loaded."""
    if not url or not url.strip():
        return "URL must not be empty"
    scheme = urlparse(url.strip()).scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return (
            f"Unsupported URL: {url}. Use an absolute URL with one of: "
            + ", ".join(f"{s}:" for s in ALLOWED_SCHEMES)
        )
    return None


def navigate(driver, url: str, wait_until: str = "load", timeout: Optional[float] = None) -> ToolResponse:
    problem = validate_url(url)
    if problem:
        return error_response(problem, ErrorKind.INVALID_ARGUMENT)

    driver.get(url.strip())
    ready = wait_document_ready(
        driver,
        timeout=timeout or 10.0,
        state="complete" if wait_until == "load" else "interactive",
    )

    lines = [f"Navigated to {url.strip()}"]
    title = driver.title
    if title:
        lines.append(f"Title: {title}")
    if not ready:
        lines.append("⚠ Page is still loading; content may be incomplete")
    return success_response(lines)


def scroll_to_element(driver, selector: str, position: str = "center") -> ToolResponse:
    matches = query_matches(driver, selector)
    if isinstance(matches, SelectionError):
        return matches.to_response()
    if not matches:
        return success_response([
            f"✗ Element not found: {selector}",
            "",
            "💡 Try:",
            "   • Use inspect_dom() to explore page structure",
            f'   • Use element_exists({{ selector: "{selector}" }}) after the page has loaded',
        ])

    selection = resolve(driver, selector, error_on_multiple=True)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    if position not in SCROLL_POSITIONS:
        return error_response(
            f"Invalid position: {position}. Use one of: {', '.join(SCROLL_POSITIONS)}",
            ErrorKind.INVALID_ARGUMENT,
        )
    driver.execute_script(f"arguments[0].scrollIntoView({SCROLL_POSITIONS[position]});", selection.element)

    lines: List[str] = [
        f"✓ Scrolled to element (position: {position})",
        describe_element(driver, selection.element, selector),
        "",
        "💡 Common next step - Verify visibility:",
        f'   check_visibility({{ selector: "{selector}" }}) - Check if element is in viewport',
    ]
    return success_response(lines)


__all__ = [
    "ALLOWED_SCHEMES",
    "SCROLL_POSITIONS",
    "wait_document_ready",
    "validate_url",
    "navigate",
    "scroll_to_element",
]
