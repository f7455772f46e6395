"""
Field resolution against a real DOM.

Loads a static form into headless Chromium and resolves field names
through ``PlaywrightDriver``, so the rendered XPath is what gets
evaluated. Skipped when no Chromium build is installed.
"""

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from smartui.browser.locators import ClickableByText, GenericSubmitControl
from smartui.browser.playwright_driver import PlaywrightDriver
from smartui.core.errors import FieldNotFoundError
from smartui.runner.resolver import ElementResolver

FORM = """
<html><body>
  <form>
    <label for="fn">  First
        Name </label>
    <input id="fn" placeholder="First Name" value="by-label">
    <input placeholder="Last Name" value="by-placeholder">
    <input name="EMAILADDRESS" value="by-name">
    <label>Phone number (mobile)</label><span>hint</span><input value="by-sibling"><input value="second">
    <textarea title="Notes">by-title</textarea>
    <input aria-label="Search" value="by-aria">
    <label>O'Brien "quoted"</label><input value="quoted">
    <button type="button">  Go  </button>
    <button type="submit" id="send">Send</button>
  </form>
</body></html>
"""


@pytest.fixture(scope="module")
def dom_driver():
    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"chromium not available: {e}")
        page = browser.new_page()
        page.set_content(FORM)
        yield PlaywrightDriver(page)
        browser.close()


@pytest.mark.parametrize(
    "field_name, expected",
    [
        ("First Name", "by-label"),
        ("Last Name", "by-placeholder"),
        ("Email Address", "by-name"),
        ("Phone number", "by-sibling"),
        ("Notes", "by-title"),
        ("Search", "by-aria"),
        ('O\'Brien "quoted"', "quoted"),
    ],
)
def test_resolve_against_dom(dom_driver, field_name, expected):
    assert ElementResolver(dom_driver).value_of(field_name) == expected


def test_unknown_field(dom_driver):
    with pytest.raises(FieldNotFoundError):
        ElementResolver(dom_driver).resolve("Fax")


def test_clickable_and_submit_controls(dom_driver):
    assert dom_driver.locate(ClickableByText("Go")) is not None
    assert dom_driver.locate(GenericSubmitControl()).get_attribute("id") == "send"
