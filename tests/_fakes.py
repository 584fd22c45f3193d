# tests/_fakes.py
"""
In-memory stand-ins for the Selenium driver and element API.

Only the calls the inspector makes are modelled:
find_elements, is_displayed, execute_script and a few page properties.
"""

import itertools

from selenium.common.exceptions import (
    InvalidSelectorException,
    StaleElementReferenceException,
)

_ids = itertools.count(1)


class FakeElement:
    def __init__(self, tag="div", displayed=True, stale=False, results=None, children=None, name=None):
        self.id = name or f"el-{next(_ids)}"
        self.tag = tag
        self.displayed = displayed
        self.stale = stale
        # script -> value (or callable(driver, *args)) answered when this element is arguments[0]
        self.results = dict(results or {})
        # (by, value) -> [FakeElement] for chained lookups
        self.children = dict(children or {})
        self.clicked = 0
        self.typed = []
        self.cleared = 0

    def __repr__(self):
        return f"<FakeElement {self.id} {self.tag}>"

    def is_displayed(self):
        if self.stale:
            raise StaleElementReferenceException("stale element reference")
        return self.displayed

    def find_elements(self, by, value):
        return list(self.children.get((by, value), []))

    def click(self):
        self.clicked += 1

    def clear(self):
        self.cleared += 1

    def send_keys(self, value):
        self.typed.append(value)


class FakeDriver:
    def __init__(self, matches=None, scripts=None, invalid=None, title="Test Page", url="about:blank"):
        # (by, value) -> [FakeElement]
        self.matches = dict(matches or {})
        # script -> value or callable(*args)
        self.scripts = dict(scripts or {})
        # selector values that make the browser reject the selector
        self.invalid = dict(invalid or {})
        self.title = title
        self.current_url = url
        self.page_source = "<html><head></head><body></body></html>"
        self.script_calls = []
        self.visited = []
        self.performance_log = []
        self.cdp_results = {}
        self.quit_called = False

    def find_elements(self, by, value):
        if value in self.invalid:
            raise InvalidSelectorException(msg=self.invalid[value])
        return list(self.matches.get((by, value), []))

    def execute_script(self, script, *args):
        self.script_calls.append((script, args))
        if args and isinstance(args[0], FakeElement) and script in args[0].results:
            value = args[0].results[script]
            return value(self, *args) if callable(value) else value
        if script in self.scripts:
            value = self.scripts[script]
            return value(*args) if callable(value) else value
        return None

    def get(self, url):
        self.visited.append(url)
        self.current_url = url

    def get_log(self, name):
        assert name == "performance"
        entries, self.performance_log = self.performance_log, []
        return entries

    def execute_cdp_cmd(self, cmd, params):
        key = (cmd, params.get("requestId"))
        return self.cdp_results.get(key, {})

    def quit(self):
        self.quit_called = True


def element_info(tag="div", test_id=None, test_id_attr="data-testid", element_id=None, classes=()):
    """Payload shaped like ELEMENT_INFO_JS output."""
    return {
        "tag": tag,
        "testIdAttr": test_id_attr if test_id else None,
        "testId": test_id,
        "id": element_id,
        "classes": list(classes),
    }
