# tests/test_evaluation.py
from mcp_web_inspector.actions.evaluation import (
    EVALUATE_JS,
    detect_tool_suggestions,
    evaluate,
    format_result,
)
from mcp_web_inspector.responses import ErrorKind

from _fakes import FakeDriver


def test_format_result():
    assert format_result({"a": [1, 2]}) == '{\n  "a": [\n    1,\n    2\n  ]\n}'
    assert format_result("ü") == '"ü"'
    assert format_result(None) == "null"
    assert format_result(object).startswith("<class")


def test_suggestions_follow_table_order():
    suggestions = detect_tool_suggestions("document.querySelector('.x').getBoundingClientRect()")
    assert suggestions[0].startswith("📍 DOM Inspection")
    assert suggestions[1].startswith("📏 Element Measurements")
    assert len(suggestions) == 2


def test_no_suggestions_for_plain_expression():
    assert detect_tool_suggestions("1 + 1") == []


def test_evaluate_passes_script_and_reports_result():
    driver = FakeDriver(scripts={EVALUATE_JS: lambda script: {"title": "Home"}})
    text = evaluate(driver, "({title: document.title})").text
    assert text == '✓ JavaScript execution result:\n{\n  "title": "Home"\n}'
    assert driver.script_calls == [(EVALUATE_JS, ("({title: document.title})",))]


def test_evaluate_appends_suggestions():
    driver = FakeDriver(scripts={EVALUATE_JS: "Hello"})
    text = evaluate(driver, "document.body.innerText").text
    assert "💡 Consider using specialized tools instead:" in text
    assert "   📝 Text Content" in text
    assert text.endswith("ℹ️  Specialized tools are more reliable and token-efficient than evaluate()")


def test_evaluate_rejects_empty_script():
    response = evaluate(FakeDriver(), "   ")
    assert response.is_error
    assert response.error_kind == ErrorKind.INVALID_ARGUMENT
