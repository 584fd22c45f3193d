# tests/tests_decorators/test_ensure.py
import asyncio
import pytest

from selenium.common.exceptions import WebDriverException

from mcp_web_inspector.browser import driver as driver_module
from mcp_web_inspector.context import BrowserSession
from mcp_web_inspector.decorators import ensure_driver_ready
from mcp_web_inspector.responses import ErrorKind, success_response

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


def install_fake_ensure(monkeypatch, *, driver=None, error=None, calls=None):
    """Replace browser.driver.ensure_driver so no real Chrome is launched."""
    if calls is None:
        calls = []

    def fake_ensure(session):
        calls.append(session)
        if error is not None:
            raise error
        if session.driver is None:
            session.driver = driver if driver is not None else object()
        return session.driver

    monkeypatch.setattr(driver_module, "ensure_driver", fake_ensure)
    return calls


def test_rejects_sync_handlers():
    with pytest.raises(TypeError):
        @ensure_driver_ready
        def handler(session):
            return None


def test_launches_before_handler(monkeypatch, event_loop):
    calls = install_fake_ensure(monkeypatch, driver="drv")
    seen = []

    @ensure_driver_ready
    async def handler(session, selector):
        seen.append((session.driver, selector))
        return success_response("ok")

    session = BrowserSession()
    result = event_loop.run_until_complete(handler(session, "#a"))
    assert result.text == "ok"
    assert calls == [session]
    assert seen == [("drv", "#a")]


def test_launch_failure_becomes_error_response(monkeypatch, event_loop):
    install_fake_ensure(monkeypatch, error=WebDriverException("cannot find Chrome binary"))
    called = []

    @ensure_driver_ready
    async def handler(session):
        called.append(True)
        return success_response("never")

    result = event_loop.run_until_complete(handler(BrowserSession()))
    assert result.is_error
    assert result.error_kind == ErrorKind.OPERATION_FAILED
    assert result.text.startswith("Failed to launch browser: cannot find Chrome binary.")
    assert called == []


def test_existing_driver_is_reused(monkeypatch, event_loop):
    calls = install_fake_ensure(monkeypatch)

    @ensure_driver_ready
    async def handler(session):
        return success_response(str(session.driver))

    session = BrowserSession(driver="already-running")
    result = event_loop.run_until_complete(handler(session))
    assert result.text == "already-running"
    assert len(calls) == 1
