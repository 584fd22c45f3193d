# tests/test_selectors_resolver.py
from selenium.webdriver.common.by import By

from mcp_web_inspector.responses import ErrorKind
from mcp_web_inspector.selectors.resolver import (
    MATCH_INFO_JS,
    Selection,
    SelectionError,
    build_nth_selector_hint,
    format_match_description,
    format_selection_info,
    resolve,
    select_preferred,
    truncate_text,
)

from _fakes import FakeDriver, FakeElement


def _buttons(n, **info):
    return [
        FakeElement("button", results={MATCH_INFO_JS: dict({"tag": "button", "text": f"Item {i}"}, **info)})
        for i in range(n)
    ]


def test_no_match_is_not_found():
    result = select_preferred(FakeDriver(), [], original_selector=".missing")
    assert isinstance(result, SelectionError)
    assert result.kind == ErrorKind.NOT_FOUND
    assert result.message == "Element not found: .missing"


def test_single_match():
    el = FakeElement()
    result = select_preferred(FakeDriver(), [el], original_selector="div")
    assert result == Selection(el, 0, 1)


def test_prefers_first_visible_match():
    hidden, visible, later = FakeElement(displayed=False), FakeElement(), FakeElement()
    result = select_preferred(FakeDriver(), [hidden, visible, later], original_selector="div")
    assert result.element is visible
    assert result.element_index == 1
    assert result.total_count == 3


def test_stale_match_counts_as_hidden():
    stale, visible = FakeElement(stale=True), FakeElement()
    result = select_preferred(FakeDriver(), [stale, visible], original_selector="div")
    assert result.element is visible


def test_falls_back_to_first_when_none_visible():
    a, b = FakeElement(displayed=False), FakeElement(displayed=False)
    result = select_preferred(FakeDriver(), [a, b], original_selector="div")
    assert result.element is a
    assert result.element_index == 0


def test_explicit_index_is_one_based():
    a, b, c = FakeElement(), FakeElement(), FakeElement()
    result = select_preferred(FakeDriver(), [a, b, c], element_index=2, original_selector="div")
    assert result.element is b
    assert result.element_index == 1


def test_index_out_of_range():
    result = select_preferred(FakeDriver(), [FakeElement()], element_index=3, original_selector="div")
    assert result.kind == ErrorKind.INDEX_OUT_OF_RANGE
    assert result.message == "Only 1 element(s) found, cannot select element 3"

    result = select_preferred(FakeDriver(), [FakeElement()], element_index=0, original_selector="div")
    assert result.kind == ErrorKind.INDEX_OUT_OF_RANGE


def test_ambiguity_lists_at_most_five_matches():
    elements = _buttons(6)
    result = select_preferred(FakeDriver(), elements, error_on_multiple=True, original_selector="button")
    assert result.kind == ErrorKind.AMBIGUOUS
    text = result.message
    assert text.startswith('Selector "button" matched 6 elements. Please use a more specific selector.')
    assert '[0] <button> "Item 0"' in text
    assert "    selector: button >> nth=4" in text
    assert "[5]" not in text
    assert "… and 1 more matches (use >> nth=<index> to target)." in text


def test_ambiguity_checked_before_element_index():
    result = select_preferred(
        FakeDriver(), _buttons(2), element_index=1, error_on_multiple=True, original_selector="button"
    )
    assert result.kind == ErrorKind.AMBIGUOUS


def test_match_description_prefers_testid_then_id():
    text = format_match_description(
        1, {"tag": "a", "text": "Go", "testid": "go-link", "parentLabel": "#nav"}, "a.link"
    )
    assert text.split("\n") == [
        '[1] <a> "Go"',
        "    parent: #nav",
        "    selector: testid:go-link",
        "    alt: a.link >> nth=1",
    ]

    text = format_match_description(0, {"tag": "a", "text": "", "id": "home"}, "a")
    assert text.split("\n") == ["[0] <a>", "    selector: id=home", "    alt: a >> nth=0"]


def test_truncate_text():
    assert truncate_text("x" * 80) == "x" * 80
    assert truncate_text("x" * 81) == "x" * 77 + "..."


def test_resolve_normalizes_shorthand():
    el = FakeElement()
    driver = FakeDriver(matches={(By.CSS_SELECTOR, '[data-testid="submit"]'): [el]})
    result = resolve(driver, "testid:submit")
    assert result.element is el


def test_resolve_reports_invalid_selector():
    driver = FakeDriver(invalid={".a[": "'.a[' is not a valid selector.\n    at foo (x.js:1:1)"})
    result = resolve(driver, ".a[")
    assert result.kind == ErrorKind.INVALID_SELECTOR
    assert result.message.startswith('Invalid CSS selector: ".a["')
    assert "at foo" not in result.message
    response = result.to_response()
    assert response.is_error
    assert response.error_kind == ErrorKind.INVALID_SELECTOR


def test_selection_info_empty_for_single_match():
    assert format_selection_info("div", 0, 1) == ""


def test_selection_info_for_duplicates():
    text = format_selection_info(".card", 1, 2)
    assert text.startswith('⚠ Found 2 elements matching ".card", using element 2 (first visible)')
    assert "💡 Tip: Consider adding a unique data-testid attribute" in text
    assert "   Or: .card >> nth=1 (last match)" in text


def test_selection_info_for_duplicate_testid():
    text = format_selection_info("testid:row", 0, 3, preferred_visible=False)
    assert text.startswith('⚠ Found 3 elements matching "testid:row", using element 1\n')
    assert "Test IDs should be unique" in text


def test_nth_hint_skipped_for_nth_selectors():
    assert build_nth_selector_hint("li >> nth=0", 4) == ""
    assert "Example: li >> nth=0 (first match)" in build_nth_selector_hint("li", 4)
    assert "Or: li >> nth=1 (last match)" in build_nth_selector_hint("li", 1)


def test_nth_hint_for_text_selector_with_three_matches():
    hint = build_nth_selector_hint("text=Add Recipe", 3)
    assert "   Example: text=Add Recipe >> nth=0 (first match)" in hint
    assert "   Or: text=Add Recipe >> nth=2 (last match)" in hint


def test_nth_hint_empty_when_selector_already_uses_nth():
    assert build_nth_selector_hint("button >> nth=1", 4) == ""
    info = format_selection_info("button >> nth=1", 0, 4)
    assert "Example:" not in info
    assert "Avoid relying on '>> nth='" in info
