import pytest

from conftest import FakeElement
from smartui.browser.driver import ElementHandle


def test_key_presses_are_required():
    class NoKeys(ElementHandle):
        def get_attribute(self, name):
            return None

        def get_text(self):
            return ""

        def click(self):
            pass

        def clear(self):
            pass

        def type(self, text):
            pass

        def submit(self):
            pass

    with pytest.raises(TypeError, match="press_key"):
        NoKeys()


def test_get_value_falls_back_to_text():
    assert FakeElement(text="42").get_value() == "42"
    assert FakeElement(value="", text="42").get_value() == ""
