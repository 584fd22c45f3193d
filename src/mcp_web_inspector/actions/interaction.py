"""Click, fill and hover on a single unambiguous element."""

from typing import List

from selenium.common.exceptions import ElementClickInterceptedException, StaleElementReferenceException
from selenium.webdriver.common.action_chains import ActionChains

from ..responses import ToolResponse, success_response
from ..selectors.resolver import SelectionError, resolve
from .navigation import wait_document_ready

import logging
logger = logging.getLogger(__name__)


def page_change_lines(before_url: str, before_title: str, after_url: str, after_title: str) -> List[str]:
    lines = []
    if after_url != before_url:
        lines.append(f"→ URL changed: {after_url}")
    if after_title != before_title:
        lines.append(f"→ Title changed: {after_title}")
    return lines


def click(driver, selector: str) -> ToolResponse:
    """
    Click the element ``selector`` points at.

    Interactions refuse ambiguous selectors outright; a click intercepted
    by an overlay is retried once through a page-context ``click()``.
    """
    selection = resolve(driver, selector, error_on_multiple=True)
    if isinstance(selection, SelectionError):
        return selection.to_response()

    before_url, before_title = driver.current_url, driver.title
    try:
        selection.element.click()
    except (ElementClickInterceptedException, StaleElementReferenceException) as e:
        logger.debug("Native click on %r failed (%s), falling back to script click", selector, e.__class__.__name__)
        retry = resolve(driver, selector, error_on_multiple=True)
        if isinstance(retry, SelectionError):
            return retry.to_response()
        driver.execute_script("arguments[0].click();", retry.element)

    wait_document_ready(driver, timeout=5.0)
    lines = [f"Clicked element: {selector}"]
    lines.extend(page_change_lines(before_url, before_title, driver.current_url, driver.title))
    return success_response(lines)


def fill(driver, selector: str, value: str, clear_first: bool = True) -> ToolResponse:
    selection = resolve(driver, selector, error_on_multiple=True)
    if isinstance(selection, SelectionError):
        return selection.to_response()
    if clear_first:
        selection.element.clear()
    selection.element.send_keys(value)
    return success_response(f"Filled {selector} with: {value}")


def hover(driver, selector: str) -> ToolResponse:
    selection = resolve(driver, selector, error_on_multiple=True)
    if isinstance(selection, SelectionError):
        return selection.to_response()
    ActionChains(driver).move_to_element(selection.element).perform()
    return success_response(f"Hovered {selector}")


__all__ = [
    "page_change_lines",
    "click",
    "fill",
    "hover",
]
