"""
Shared pytest configuration.

``--scenario`` points the end-to-end test at a scenario file; without
it that test is skipped. The ``FakeDriver``/``FakeElement`` pair is an
in-memory browser: elements are registered under the locator value
objects the resolver and strategies ask for.
"""

from typing import Dict, List, Optional

import pytest

from smartui.browser.driver import BrowserDriver, ElementHandle
from smartui.browser.locators import AnyOf, Locator
from smartui.core.config import Settings


def pytest_addoption(parser):
    """Hook to add custom command-line options to pytest."""
    parser.addoption("--scenario", action="store", default=None)


@pytest.fixture(scope="session")
def scenario_path(pytestconfig):
    """Path given with ``--scenario``; skips the requesting test when absent."""
    path = pytestconfig.getoption("--scenario")
    if not path:
        pytest.skip("no --scenario given")
    return path


class FakeElement(ElementHandle):
    def __init__(self, value: Optional[str] = None, text: str = "", attrs: Optional[Dict[str, str]] = None, fail: Optional[Dict[str, Exception]] = None):
        self.attrs = dict(attrs or {})
        if value is not None:
            self.attrs["value"] = value
        self.text = text
        self.fail = dict(fail or {})
        self.calls: List[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.fail:
            raise self.fail[name]

    @property
    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def get_attribute(self, name):
        return self.attrs.get(name)

    def get_text(self):
        return self.text

    def click(self):
        self._record("click")

    def clear(self):
        self._record("clear")
        self.attrs["value"] = ""

    def type(self, text):
        self._record("type", text)
        self.attrs["value"] = self.attrs.get("value", "") + text

    def submit(self):
        self._record("submit")

    def press_key(self, key):
        self._record("press_key", key)

    def scroll_into_view(self):
        self._record("scroll_into_view")

    def wait_until_interactable(self, timeout_ms):
        self._record("wait_until_interactable", timeout_ms)


class FakeDriver(BrowserDriver):
    def __init__(self, elements: Optional[Dict[Locator, FakeElement]] = None, html: str = "<html></html>"):
        self.elements: Dict[Locator, FakeElement] = dict(elements or {})
        self.html = html
        self.queries: List[Locator] = []
        self.navigations: List[str] = []
        self.screenshots: List[str] = []
        self.fail_screenshots = False
        self.lookup_failures: Dict[Locator, Exception] = {}

    def add(self, locator: Locator, element: FakeElement) -> FakeElement:
        self.elements[locator] = element
        return element

    def navigate(self, url):
        self.navigations.append(url)

    def locate(self, locator):
        self.queries.append(locator)
        if locator in self.lookup_failures:
            raise self.lookup_failures[locator]
        if isinstance(locator, AnyOf):
            for part in locator.locators:
                if part in self.elements:
                    return self.elements[part]
            return None
        return self.elements.get(locator)

    def locate_all(self, locator):
        element = self.locate(locator)
        return [element] if element is not None else []

    def screenshot(self, path):
        if self.fail_screenshots:
            raise RuntimeError("screenshot failed")
        with open(path, "wb") as f:
            f.write(b"\x89PNG")
        self.screenshots.append(path)

    def page_source(self):
        return self.html

    @property
    def current_url(self):
        return self.navigations[-1] if self.navigations else None


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        ARTIFACT_ROOT=str(tmp_path / "artifacts"),
        SCREENSHOT_FOLDER=str(tmp_path / "screenshots"),
        ENTER_WAIT_TIMEOUT_MS=0,
        ENTER_PRESS_ENTER=False,
        SCROLL_INTO_VIEW=False,
    )
