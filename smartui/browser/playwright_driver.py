"""
Playwright implementation of the browser driver interface.

Locators are evaluated as XPath (``xpath=`` selectors). Each handle wraps
a Playwright ``Locator`` pinned to the first match, so interactions
re-query the DOM and do not go stale the way raw element handles do.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator as PwLocator
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from smartui.browser.driver import BrowserDriver, ElementHandle
from smartui.browser.locators import Locator
from smartui.core.config import settings
from smartui.core.errors import InteractionError, InteractionTimeoutError

logger = logging.getLogger(__name__)

FORM_CONTROL_TAGS = ("input", "textarea", "select")

_SUBMIT_OWNING_FORM = """
el => {
    const form = el.form || el.closest('form');
    if (!form) throw new Error('Element is not inside a form');
    if (typeof form.requestSubmit === 'function') {
        form.requestSubmit();
    } else {
        form.submit();
    }
}
"""


class PlaywrightElement(ElementHandle):
    def __init__(self, locator: PwLocator):
        self._locator = locator

    def get_attribute(self, name: str) -> Optional[str]:
        return self._locator.get_attribute(name)

    def get_text(self) -> str:
        return self._locator.inner_text()

    def get_value(self) -> str:
        tag = self._locator.evaluate("el => el.tagName.toLowerCase()")
        if tag in FORM_CONTROL_TAGS:
            return self._locator.input_value()
        return super().get_value()

    def click(self) -> None:
        self._locator.click()

    def clear(self) -> None:
        self._locator.clear()

    def type(self, text: str) -> None:
        if text:
            self._locator.press_sequentially(text)

    def submit(self) -> None:
        self._locator.evaluate(_SUBMIT_OWNING_FORM)

    def press_key(self, key: str) -> None:
        self._locator.press(key)

    def scroll_into_view(self) -> None:
        self._locator.scroll_into_view_if_needed()

    def wait_until_interactable(self, timeout_ms: int) -> None:
        try:
            self._locator.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError(
                f"Element did not become visible within {timeout_ms}ms", timeout_ms
            ) from e
        except PlaywrightError as e:
            raise InteractionError(f"Waiting for element failed: {e}") from e
        # visible but still disabled: poll via Playwright's own auto-wait
        try:
            self._locator.click(trial=True, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError(
                f"Element did not become interactable within {timeout_ms}ms", timeout_ms
            ) from e
        except PlaywrightError as e:
            raise InteractionError(f"Waiting for element failed: {e}") from e


class PlaywrightDriver(BrowserDriver):
    def __init__(self, page: Page, navigation_timeout_ms: Optional[int] = None):
        self.page = page
        self.navigation_timeout_ms = (
            settings.NAVIGATION_TIMEOUT_MS if navigation_timeout_ms is None else navigation_timeout_ms
        )

    def navigate(self, url: str) -> None:
        logger.debug("navigating to %s", url)
        try:
            self.page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise InteractionTimeoutError(
                f"Navigation to {url} timed out", self.navigation_timeout_ms
            ) from e
        except PlaywrightError as e:
            raise InteractionError(f"Navigation to {url} failed: {e}") from e

    def _query(self, locator: Locator) -> PwLocator:
        return self.page.locator(f"xpath={locator.to_xpath()}")

    def _count(self, locator: Locator) -> tuple[PwLocator, int]:
        matches = self._query(locator)
        try:
            return matches, matches.count()
        except PlaywrightError as e:
            raise InteractionError(f"Query {locator.to_xpath()} failed: {e}") from e

    def locate(self, locator: Locator) -> Optional[ElementHandle]:
        matches, count = self._count(locator)
        if count == 0:
            return None
        return PlaywrightElement(matches.first)

    def locate_all(self, locator: Locator) -> List[ElementHandle]:
        matches, count = self._count(locator)
        return [PlaywrightElement(matches.nth(i)) for i in range(count)]

    def screenshot(self, path: str) -> None:
        self.page.screenshot(path=path, full_page=True)

    def page_source(self) -> str:
        return self.page.content()

    @property
    def current_url(self) -> Optional[str]:
        return self.page.url
