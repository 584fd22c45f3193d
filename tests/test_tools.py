# tests/test_tools.py
import asyncio
import pytest

from selenium.common.exceptions import (
    InvalidSessionIdException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from mcp_web_inspector import tools
from mcp_web_inspector.browser import driver as driver_module
from mcp_web_inspector.context import BrowserSession
from mcp_web_inspector.responses import ErrorKind, success_response
from mcp_web_inspector.tools.base import (
    classify_exception,
    exception_response,
    is_disconnect,
    safe_execute,
)

from _fakes import FakeDriver, FakeElement

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture
def no_launch(monkeypatch):
    """Page tools must not start Chrome in unit tests."""
    def fake_ensure(session):
        if session.driver is None:
            raise WebDriverException("no browser in tests")
        return session.driver

    monkeypatch.setattr(driver_module, "ensure_driver", fake_ensure)


def test_classify_exception():
    assert classify_exception(TimeoutException("slow")) == ErrorKind.TIMEOUT
    assert classify_exception(InvalidSessionIdException("gone")) == ErrorKind.DISCONNECTED
    assert classify_exception(WebDriverException("chrome not reachable")) == ErrorKind.DISCONNECTED
    assert classify_exception(WebDriverException("something else")) == ErrorKind.OPERATION_FAILED
    assert classify_exception(ConnectionRefusedError()) == ErrorKind.DISCONNECTED


def test_is_disconnect_ignores_plain_errors():
    assert not is_disconnect(ValueError("disconnected"))


def test_disconnect_resets_session():
    driver = FakeDriver()
    session = BrowserSession(driver=driver)
    response = exception_response(session, WebDriverException("disconnected: not connected to DevTools"))
    assert response.error_kind == ErrorKind.DISCONNECTED
    assert response.error_kind.retryable
    assert response.text.startswith("Browser connection error: disconnected: not connected to DevTools.")
    assert session.driver is None
    assert driver.quit_called


def test_timeout_message():
    response = exception_response(BrowserSession(), TimeoutException("script timeout"))
    assert response.text == (
        "Operation timed out: script timeout. The page may still be loading - please retry."
    )


def test_script_timeout_inside_operation_is_retryable():
    def slow_script(driver):
        raise TimeoutException("script timeout: result was not received in 30 seconds")

    session = BrowserSession(driver=FakeDriver())
    response = safe_execute(session, slow_script)
    assert response.is_error
    assert response.error_kind == ErrorKind.TIMEOUT
    assert response.error_kind.retryable
    assert session.driver is not None


def test_safe_execute_passes_driver_and_catches():
    driver = FakeDriver()
    session = BrowserSession(driver=driver)
    assert safe_execute(session, lambda d: success_response(str(d is driver))).text == "True"

    def explode(_driver):
        raise WebDriverException("javascript error: x is not defined")

    response = safe_execute(session, explode)
    assert response.error_kind == ErrorKind.OPERATION_FAILED
    assert response.text == "Operation failed: javascript error: x is not defined"
    assert session.driver is driver


def test_page_tool_reports_launch_failure(no_launch, event_loop):
    response = event_loop.run_until_complete(tools.element_exists(BrowserSession(), "#a"))
    assert response.is_error
    assert response.text.startswith("Failed to launch browser: no browser in tests.")


def test_page_tool_runs_against_session_driver(no_launch, event_loop):
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "#a"): [FakeElement()]})
    session = BrowserSession(driver=driver)
    response = event_loop.run_until_complete(tools.element_exists(session, "#a"))
    assert response.text.startswith("✓ exists:")


def test_network_tools_do_not_launch(monkeypatch, event_loop):
    def forbidden(session):
        raise AssertionError("network tools must not launch the browser")

    monkeypatch.setattr(driver_module, "ensure_driver", forbidden)
    response = event_loop.run_until_complete(tools.list_network_requests(BrowserSession()))
    assert response.text == "No network requests captured yet"


def test_close_browser(event_loop):
    driver = FakeDriver()
    session = BrowserSession(driver=driver)
    assert event_loop.run_until_complete(tools.close_browser(session)).text == "Browser closed successfully"
    assert driver.quit_called
    assert session.driver is None
    assert event_loop.run_until_complete(tools.close_browser(session)).text == "No browser instance to close"
