# tests/test_responses.py
from mcp_web_inspector.context import BrowserSession, NetworkRecord, get_session, reset_session
from mcp_web_inspector.responses import (
    ErrorKind,
    error_response,
    failure_response,
    strip_stack_frames,
    success_response,
)
from mcp_web_inspector.selectors.resolver import SelectionError

from _fakes import FakeDriver


def test_success_shape():
    response = success_response(["line 1", "line 2"])
    assert response.to_dict() == {
        "content": [{"type": "text", "text": "line 1\nline 2"}],
        "isError": False,
    }


def test_error_shape_strips_stack_frames():
    response = error_response("Boom\n    at eval (<anonymous>:1:7)\nmore", ErrorKind.OPERATION_FAILED)
    assert response.to_dict() == {"content": [{"type": "text", "text": "Boom\nmore"}], "isError": True}


def test_strip_stack_frames():
    assert strip_stack_frames("a\n  at b (c.js:1:2)\n<anonymous>:3:4") == "a"


def test_retryable_kinds():
    assert ErrorKind.DISCONNECTED.retryable
    assert ErrorKind.TIMEOUT.retryable
    assert not ErrorKind.NOT_FOUND.retryable
    assert not ErrorKind.AMBIGUOUS.retryable


def test_failure_response():
    response = failure_response(SelectionError(ErrorKind.AMBIGUOUS, "matched 2 elements"))
    assert response.is_error
    assert response.error_kind == ErrorKind.AMBIGUOUS
    assert response.text == "matched 2 elements"


def test_session_lock_is_reused():
    session = BrowserSession()
    assert session.get_lock() is session.get_lock()


def test_mark_disconnected_drops_driver_and_log():
    driver = FakeDriver()
    session = BrowserSession(driver=driver)
    session.network_log.append(NetworkRecord(index=0, request_id="1", method="GET", url="https://x.test"))
    session.next_network_index = 1
    session.mark_disconnected()
    assert session.driver is None
    assert driver.quit_called
    assert not session.network_log
    assert session.next_network_index == 0
    assert session.get_network_record(0) is None


def test_process_session(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    reset_session()
    try:
        assert get_session() is get_session()
    finally:
        reset_session()
