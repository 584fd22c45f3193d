# tests/test_discovery.py
import pytest
from selenium.webdriver.common.by import By

from mcp_web_inspector.inspection.discovery import (
    QUERY_INFO_JS,
    TEST_IDS_JS,
    TEXT_MATCH_INFO_JS,
    find_by_text,
    find_duplicates,
    format_query_match,
    get_test_ids,
    query_selector,
    split_list_argument,
    text_search_selector,
)
from mcp_web_inspector.responses import ErrorKind
from mcp_web_inspector.selectors.engine import TEXT_PATTERN_JS, text_xpath

from _fakes import FakeDriver, FakeElement


def _query_info(**overrides):
    info = {
        "tag": "button",
        "selector": "#save",
        "text": "Save",
        "x": 10, "y": 20, "width": 80, "height": 30,
        "visible": True,
        "interactive": True,
        "opacity": 1,
        "display": "inline-block",
        "attributes": {},
    }
    info.update(overrides)
    return info


def _text_info(**overrides):
    info = {
        "tag": "button",
        "id": "add",
        "classes": "btn primary",
        "testIdAttr": "data-testid",
        "testId": "add-recipe",
        "name": None,
        "type": "button",
        "href": None,
        "ariaLabel": None,
        "box": {"x": 10, "y": 20, "width": 120, "height": 40},
        "text": "  Add   Recipe ",
        "hiddenReason": "",
        "interactive": True,
        "enabled": True,
    }
    info.update(overrides)
    return info


def _buttons():
    save = FakeElement("button", results={QUERY_INFO_JS: _query_info()})
    cancel = FakeElement("button", results={QUERY_INFO_JS: _query_info(selector="#cancel", text="Cancel", x=100)})
    hidden = FakeElement("button", displayed=False, results={
        QUERY_INFO_JS: _query_info(selector="#undo", text="Undo", visible=False, display="none", width=0, height=0),
    })
    return FakeDriver(matches={(By.CSS_SELECTOR, "button"): [save, cancel, hidden]})


def test_split_list_argument():
    assert split_list_argument("id, name,,href ") == ["id", "name", "href"]
    assert split_list_argument(None) == []
    assert split_list_argument("") == []


# ============================================================================
# query_selector
# ============================================================================

def test_query_selector_lists_every_match():
    response = query_selector(_buttons(), "button")
    assert not response.is_error
    assert response.text.split("\n") == [
        'Found 3 elements matching "button":',
        "",
        "[0] <button #save>",
        "    @ (10,20) 80x30px",
        '    "Save"',
        "    ✓ visible, ⚡ interactive",
        "",
        "[1] <button #cancel>",
        "    @ (100,20) 80x30px",
        '    "Cancel"',
        "    ✓ visible, ⚡ interactive",
        "",
        "[2] <button #undo>",
        "    @ (10,20) 0x0px",
        '    "Undo"',
        "    ✗ hidden, display: none, ⚡ interactive",
        "",
        "Showing all 3 matches",
    ]


def test_query_selector_only_visible():
    text = query_selector(_buttons(), "button", only_visible=True).text
    assert text.startswith('Found 3 elements matching "button" (2 visible):')
    assert "#undo" not in text
    assert text.endswith("Showing 2 visible matches")


def test_query_selector_only_hidden():
    text = query_selector(_buttons(), "button", only_visible=False).text
    assert text.startswith('Found 3 elements matching "button" (1 hidden):')
    assert "[0] <button #undo>" in text
    assert text.endswith("Showing 1 hidden match")


def test_query_selector_limit_footer():
    lines = query_selector(_buttons(), "button", limit=1).text.split("\n")
    assert "[1] <button #cancel>" not in lines
    assert lines[-2:] == [
        "Showing 1 of 3 matches (2 omitted)",
        'Use limit parameter to show more: { selector: "button", limit: 3 }',
    ]


def test_query_selector_requested_attributes():
    seen = []

    def info(driver, el, attributes):
        seen.append(attributes)
        return _query_info(tag="a", selector="", text="", attributes={"href": "/docs"}, interactive=True)

    link = FakeElement("a", results={QUERY_INFO_JS: info})
    driver = FakeDriver(matches={(By.CSS_SELECTOR, "a.nav"): [link]})

    lines = query_selector(driver, "a.nav", show_attributes="href, aria-label").text.split("\n")
    assert seen == [["href", "aria-label"]]
    assert lines[:5] == [
        'Found 1 element matching "a.nav":',
        "",
        "[0] <a>",
        "    @ (10,20) 80x30px",
        '    href: "/docs"',
    ]
    assert lines[-1] == "Showing all 1 match"


def test_query_selector_nothing_found_is_not_an_error():
    response = query_selector(FakeDriver(), ".missing")
    assert not response.is_error
    assert response.text == (
        'No elements found matching ".missing"\n\nTip: Try using inspect_dom to explore the page structure.'
    )


def test_query_selector_invalid_selector():
    driver = FakeDriver(invalid={"div[": "invalid selector: An invalid or illegal selector was specified"})
    response = query_selector(driver, "div[")
    assert response.is_error
    assert response.error_kind == ErrorKind.INVALID_SELECTOR


def test_format_query_match_zero_size_reason():
    lines = format_query_match(4, _query_info(visible=False, display="block", width=0, interactive=False))
    assert lines[-1] == "    ✗ hidden, zero size"


# ============================================================================
# find_by_text
# ============================================================================

@pytest.mark.parametrize("kwargs, expected", [
    ({"text": "Add Recipe"}, "text=/Add Recipe/i"),
    ({"text": "Add Recipe", "case_sensitive": True}, "text=/Add Recipe/"),
    ({"text": "$5.00 (sale)"}, r"text=/\$5\.00 \(sale\)/i"),
    ({"text": "Add Recipe", "exact": True}, 'text="Add Recipe"'),
    ({"text": "/sign.*in/i", "regex": True}, "text=/sign.*in/i"),
    ({"text": "sign.*in", "regex": True}, "text=/sign.*in/"),
])
def test_text_search_selector(kwargs, expected):
    assert text_search_selector(**kwargs) == expected


def _recipe_driver():
    first = FakeElement("button", results={TEXT_MATCH_INFO_JS: _text_info()})
    second = FakeElement("a", results={TEXT_MATCH_INFO_JS: _text_info(
        tag="a", id=None, classes="", testIdAttr=None, testId=None, type=None,
        href="/recipes/new?source=header-navigation", text="Add Recipe",
    )})
    hidden = FakeElement("button", displayed=False, results={TEXT_MATCH_INFO_JS: _text_info(
        id=None, classes="", testId=None, box=None, hiddenReason="display: none",
    )})
    calls = []

    def run(scope, pattern, flags):
        calls.append((scope, pattern, flags))
        return {"elements": [first, second, hidden]}

    return FakeDriver(scripts={TEXT_PATTERN_JS: run}), calls


def test_find_by_text_partial_match():
    driver, calls = _recipe_driver()
    response = find_by_text(driver, "Add Recipe")
    assert not response.is_error
    assert calls == [(None, "Add Recipe", "i")]
    assert response.text.split("\n") == [
        'Found 3 elements containing "Add Recipe":',
        "",
        '[0] <button#add class="btn primary" data-testid="add-recipe" type="button">',
        "    @ (10,20) 120x40px",
        '    "Add Recipe"',
        "    ✓ visible, ⚡ interactive",
        "    selector: text=/Add Recipe/i >> nth=0",
        "",
        '[1] <a href="/recipes/new?source=header-nav...">',
        "    @ (10,20) 120x40px",
        '    "Add Recipe"',
        "    ✓ visible, ⚡ interactive",
        "    selector: text=/Add Recipe/i >> nth=1",
        "",
        '[2] <button type="button">',
        "    @ (no bounding box)",
        '    "Add Recipe"',
        "    ✗ hidden (display: none)",
        "    selector: text=/Add Recipe/i >> nth=2",
    ]


def test_find_by_text_limit():
    driver, _calls = _recipe_driver()
    text = find_by_text(driver, "Add Recipe", limit=2).text
    assert text.startswith('Found 3 elements containing "Add Recipe" (showing first 2):')
    assert "[2]" not in text


def test_find_by_text_exact():
    button = FakeElement("button", results={TEXT_MATCH_INFO_JS: _text_info(enabled=False)})
    xpath = text_xpath("Add Recipe", exact=True)[1:]
    driver = FakeDriver(matches={(By.XPATH, xpath): [button]})

    lines = find_by_text(driver, "Add Recipe", exact=True).text.split("\n")
    assert lines[0] == 'Found 1 element with exact text "Add Recipe":'
    assert lines[-2:] == ["    ✓ visible, ✗ disabled", '    selector: text="Add Recipe" >> nth=0']


def test_find_by_text_nothing_found_is_not_an_error():
    driver = FakeDriver(scripts={TEXT_PATTERN_JS: {"elements": []}})
    response = find_by_text(driver, "Ghost")
    assert not response.is_error
    assert response.text == '✗ No elements found containing "Ghost"'

    response = find_by_text(driver, "/gh.st/", regex=True)
    assert response.text == "✗ No elements found matching regex /gh.st/"


def test_find_by_text_invalid_regex():
    driver = FakeDriver(scripts={
        TEXT_PATTERN_JS: {"error": "Invalid regular expression: /(/: Unterminated group"},
    })
    response = find_by_text(driver, "(", regex=True)
    assert response.is_error
    assert response.error_kind == ErrorKind.INVALID_ARGUMENT
    assert response.text == "✗ Invalid regex pattern: Invalid regular expression: /(/: Unterminated group"


# ============================================================================
# get_test_ids
# ============================================================================

def _test_id_driver(found):
    seen = []

    def run(attributes):
        seen.append(list(attributes))
        return [[attr, found.get(attr, [])] for attr in attributes]

    return FakeDriver(scripts={TEST_IDS_JS: run}), seen


def test_find_duplicates_keeps_first_appearance_order():
    assert find_duplicates(["b", "a", "b", "c", "a", "b"]) == [("b", 3), ("a", 2)]
    assert find_duplicates(["a", "b"]) == []


def test_get_test_ids_none_on_page():
    driver, seen = _test_id_driver({})
    response = get_test_ids(driver)
    assert not response.is_error
    assert seen == [["data-testid", "data-test", "data-cy"]]
    assert response.text.split("\n")[:8] == [
        "Found 0 test IDs",
        "",
        "⚠ No test ID attributes found on this page.",
        "",
        "Searched for:",
        "  • data-testid",
        "  • data-test",
        "  • data-cy",
    ]


def test_get_test_ids_grouped_by_attribute():
    driver, _seen = _test_id_driver({"data-testid": ["save", "cancel"], "data-cy": ["login"]})
    assert get_test_ids(driver).text.split("\n") == [
        "Found 3 test IDs:",
        "",
        "data-testid (2):",
        "  save, cancel",
        "",
        "data-cy (1):",
        "  login",
        "",
        "💡 Tip: Use these test IDs with selector shortcuts:",
        '   testid:save → [data-testid="save"]',
    ]


def test_get_test_ids_warns_about_duplicates():
    driver, _seen = _test_id_driver({"data-testid": ["save", "cancel", "save"]})
    lines = get_test_ids(driver).text.split("\n")
    assert "⚠ Warning: Duplicate test IDs found (test IDs should be unique):" in lines
    assert '  data-testid: "save" appears 2 times' in lines
    assert '      query_selector({ selector: "testid:save" })' in lines
    assert '      Example: "save" → "save-primary", "save-mobile"' in lines


def test_get_test_ids_truncates_long_lists():
    values = [f"row-{i}" for i in range(12)]
    driver, _seen = _test_id_driver({"data-testid": values})
    lines = get_test_ids(driver).text.split("\n")
    assert lines[2:6] == [
        "data-testid (12):",
        "  row-0, row-1, row-2, row-3, row-4, row-5, row-6, row-7,",
        "  ... and 4 more",
        "  💡 Use showAll: true to see all 12 test IDs",
    ]

    lines = get_test_ids(driver, show_all=True).text.split("\n")
    assert lines[3] == "  " + ", ".join(values)
    assert "  ... and 4 more" not in lines


def test_get_test_ids_custom_attribute():
    driver, seen = _test_id_driver({"data-qa": ["checkout"]})
    text = get_test_ids(driver, attributes="data-qa").text
    assert seen == [["data-qa"]]
    assert text.endswith("   [data-qa='checkout'] → [data-qa=\"checkout\"]")
