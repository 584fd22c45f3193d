# tests/test_page_actions.py
import pytest
from selenium.common.exceptions import ElementClickInterceptedException
from selenium.webdriver.common.by import By

from mcp_web_inspector.actions import interaction
from mcp_web_inspector.actions.elements import ELEMENT_INFO_JS
from mcp_web_inspector.actions.interaction import click, fill, hover, page_change_lines
from mcp_web_inspector.actions.navigation import (
    navigate,
    scroll_to_element,
    validate_url,
    wait_document_ready,
)
from mcp_web_inspector.responses import ErrorKind

from _fakes import FakeDriver, FakeElement, element_info

READY_JS = "return document.readyState"


def _ready_driver(state="complete", **kwargs):
    driver = FakeDriver(**kwargs)
    driver.scripts[READY_JS] = state
    return driver


class InterceptedElement(FakeElement):
    def click(self):
        raise ElementClickInterceptedException("element click intercepted: <div class='overlay'>")


# ============================================================================
# navigation
# ============================================================================

@pytest.mark.parametrize("url", ["https://example.com", "about:blank", "file:///tmp/x.html", "data:text/html,hi"])
def test_validate_url_accepts(url):
    assert validate_url(url) is None


@pytest.mark.parametrize("url", ["", "   ", "example.com", "javascript:alert(1)"])
def test_validate_url_rejects(url):
    assert validate_url(url)


def test_wait_document_ready_states():
    assert wait_document_ready(_ready_driver("interactive"), timeout=0.1)
    assert not wait_document_ready(_ready_driver("interactive"), timeout=0.1, state="complete")


def test_navigate_reports_title():
    driver = _ready_driver(title="Example Domain")
    response = navigate(driver, " https://example.com ")
    assert driver.visited == ["https://example.com"]
    assert response.text == "Navigated to https://example.com\nTitle: Example Domain"


def test_navigate_warns_when_still_loading():
    driver = _ready_driver("loading", title="")
    text = navigate(driver, "https://slow.test", timeout=0.1).text
    assert text == "Navigated to https://slow.test\n⚠ Page is still loading; content may be incomplete"


def test_navigate_rejects_bad_url():
    driver = _ready_driver()
    response = navigate(driver, "ftp://files.test")
    assert response.is_error
    assert response.error_kind == ErrorKind.INVALID_ARGUMENT
    assert driver.visited == []


def test_scroll_to_element():
    el = FakeElement(results={ELEMENT_INFO_JS: element_info("footer", element_id="bottom")})
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "#bottom"): [el]})
    text = scroll_to_element(driver, "#bottom", position="end").text
    assert text.startswith("✓ Scrolled to element (position: end)\n<footer #bottom>")
    assert ("arguments[0].scrollIntoView({block: 'end', inline: 'end'});", (el,)) in driver.script_calls


def test_scroll_to_missing_element_is_not_an_error():
    response = scroll_to_element(FakeDriver(), "#nowhere")
    assert not response.is_error
    assert response.text.startswith("✗ Element not found: #nowhere")


def test_scroll_to_ambiguous_element():
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "li"): [FakeElement("li"), FakeElement("li")]})
    response = scroll_to_element(driver, "li")
    assert response.error_kind == ErrorKind.AMBIGUOUS


# ============================================================================
# interaction
# ============================================================================

def test_page_change_lines():
    assert page_change_lines("a", "T", "a", "T") == []
    assert page_change_lines("a", "T", "b", "U") == ["→ URL changed: b", "→ Title changed: U"]


def test_click_single_match():
    button = FakeElement("button")
    driver = _ready_driver(matches={(By.CSS_SELECTOR, "#save"): [button]})
    response = click(driver, "#save")
    assert button.clicked == 1
    assert response.text == "Clicked element: #save"


def test_click_refuses_ambiguous_selector():
    a, b = FakeElement("button"), FakeElement("button")
    driver = _ready_driver(matches={(By.CSS_SELECTOR, "button"): [a, b]})
    response = click(driver, "button")
    assert response.is_error
    assert response.error_kind == ErrorKind.AMBIGUOUS
    assert a.clicked == 0 and b.clicked == 0


def test_click_falls_back_to_script_click():
    button = InterceptedElement("button")
    driver = _ready_driver(matches={(By.CSS_SELECTOR, "#buy"): [button]})
    response = click(driver, "#buy")
    assert not response.is_error
    assert ("arguments[0].click();", (button,)) in driver.script_calls


def test_fill_clears_then_types():
    field = FakeElement("input")
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "#email"): [field]})
    assert fill(driver, "#email", "a@b.c").text == "Filled #email with: a@b.c"
    assert field.cleared == 1
    assert field.typed == ["a@b.c"]

    fill(driver, "#email", "x", clear_first=False)
    assert field.cleared == 1


def test_fill_missing_element():
    response = fill(FakeDriver(), "#email", "x")
    assert response.error_kind == ErrorKind.NOT_FOUND


def test_hover_moves_pointer(monkeypatch):
    moves = []

    class RecordingChains:
        def __init__(self, driver):
            self.driver = driver

        def move_to_element(self, element):
            moves.append(element)
            return self

        def perform(self):
            moves.append("performed")

    monkeypatch.setattr(interaction, "ActionChains", RecordingChains)
    link = FakeElement("a")
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "a.menu"): [link]})
    assert hover(driver, "a.menu").text == "Hovered a.menu"
    assert moves == [link, "performed"]
