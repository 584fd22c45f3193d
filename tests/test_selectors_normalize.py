# tests/test_selectors_normalize.py
import pytest

from mcp_web_inspector.selectors.normalize import (
    invalid_selector_message,
    is_testid_selector,
    normalize_selector,
    sanitize_selector_engine_message,
)


@pytest.mark.parametrize("raw, expected", [
    ("testid:submit", '[data-testid="submit"]'),
    ("data-test:login-form", '[data-test="login-form"]'),
    ("data-cy:nav", '[data-cy="nav"]'),
    ("testid:", '[data-testid=""]'),
])
def test_shorthand_prefixes(raw, expected):
    assert normalize_selector(raw) == expected


def test_shorthand_keeps_rest_verbatim():
    assert normalize_selector("testid:card >> nth=1") == '[data-testid="card >> nth=1"]'


def test_shorthand_only_at_position_zero():
    assert normalize_selector("div testid:foo") == "div testid:foo"


def test_id_with_escaped_colons_uses_id_engine():
    assert normalize_selector("#radix-\\:r1\\:") == "id=radix-:r1:"


def test_id_with_brackets_uses_id_engine():
    assert normalize_selector("#w-\\[300px\\]") == "id=w-[300px]"


def test_plain_id_unchanged():
    assert normalize_selector("#login-form") == "#login-form"


def test_compound_id_selector_is_not_rewritten():
    assert normalize_selector("#app .child\\:x") == "#app .child\\:x"
    assert normalize_selector("#app>span") == "#app>span"


def test_redundant_escapes_collapsed():
    assert normalize_selector(".min-w-\\\\[300px\\\\]") == ".min-w-\\[300px\\]"
    assert normalize_selector(".dark\\\\\\:bg-gray-700") == ".dark\\:bg-gray-700"


def test_single_escapes_untouched():
    assert normalize_selector(".min-w-\\[300px\\]") == ".min-w-\\[300px\\]"


def test_idempotent_on_shorthand_output():
    once = normalize_selector("testid:submit")
    assert normalize_selector(once) == once


def test_sanitize_cuts_after_invalid_phrase():
    raw = (
        "Failed to execute 'querySelectorAll' on 'Document': '.a[' is not a valid selector.\n"
        "    at Object.query (<anonymous>:3:12)"
    )
    assert sanitize_selector_engine_message(raw) == (
        "Failed to execute 'querySelectorAll' on 'Document': '.a[' is not a valid selector."
    )


def test_sanitize_drops_stack_frames():
    raw = "Unexpected token\n    at parse (engine.js:1:2)\n<anonymous>:4:5\nmore detail"
    assert sanitize_selector_engine_message(raw) == "Unexpected token\nmore detail"


def test_invalid_selector_message_has_tips():
    text = invalid_selector_message(".a[", "'.a[' is not a valid selector. at x")
    assert text.startswith('Invalid CSS selector: ".a["')
    assert "Selector syntax error: '.a[' is not a valid selector." in text
    assert "💡 Tips:" in text
    assert "  ✓ testid:submit-button" in text


def test_is_testid_selector():
    assert is_testid_selector("testid:x")
    assert is_testid_selector('[data-cy="x"]')
    assert not is_testid_selector("#x")


@pytest.mark.parametrize("raw", [
    "testid:a\\\\:b",
    "testid:submit",
    "#radix-\\:r1\\:",
    ".min-w-\\\\[300px\\\\]",
    "  .card  ",
    "text=Add Recipe",
])
def test_normalizing_twice_changes_nothing(raw):
    once = normalize_selector(raw)
    assert normalize_selector(once) == once


def test_over_escaped_shorthand_value_is_collapsed():
    assert normalize_selector("testid:a\\\\:b") == '[data-testid="a\\:b"]'


def test_surrounding_whitespace_is_trimmed():
    assert normalize_selector("  .a  ") == ".a"
    assert normalize_selector(" #login-form ") == "#login-form"
    assert normalize_selector(" #radix-\\:r1\\: ") == "id=radix-:r1:"
