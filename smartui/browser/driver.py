"""
Browser driver collaborator interface.

The scenario runner, the element resolver and the action strategies only
talk to these two abstractions. ``smartui.browser.playwright_driver``
implements them on top of Playwright; tests use in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from smartui.browser.locators import Locator


class ElementHandle(ABC):
    """A concrete element on the current page."""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def get_text(self) -> str:
        ...

    @abstractmethod
    def click(self) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def type(self, text: str) -> None:
        ...

    @abstractmethod
    def submit(self) -> None:
        """Submit the form owning this element."""

    def get_value(self) -> str:
        """Live value of a form control; falls back to the element text."""
        value = self.get_attribute("value")
        if value is None:
            return self.get_text()
        return value

    @abstractmethod
    def press_key(self, key: str) -> None:
        """Press a single named key (``"Enter"``) with this element focused."""

    def scroll_into_view(self) -> None:
        pass

    def wait_until_interactable(self, timeout_ms: int) -> None:
        """Block until visible and enabled; raise ``InteractionTimeoutError`` after ``timeout_ms``."""


class BrowserDriver(ABC):
    """One browser page driven by a scenario run."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        ...

    @abstractmethod
    def locate(self, locator: Locator) -> Optional[ElementHandle]:
        """Return the first element matching ``locator`` or ``None``."""

    @abstractmethod
    def locate_all(self, locator: Locator) -> List[ElementHandle]:
        ...

    def screenshot(self, path: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support screenshots")

    def page_source(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not expose the page source")

    @property
    def current_url(self) -> Optional[str]:
        return None
