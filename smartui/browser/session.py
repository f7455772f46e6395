"""
Browser session lifecycle.

``BrowserSession`` owns one Playwright instance, browser, context and
page for the duration of a single scenario run. Used as a context
manager it always releases all of them, whether the run succeeded or
failed.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

from playwright.sync_api import sync_playwright

from smartui.browser.playwright_driver import PlaywrightDriver
from smartui.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Scoped Chromium session.

    :param config: Settings to read browser options from
    :param run_dir: Where ``trace.zip`` is written when tracing is enabled
    """

    def __init__(self, config: Optional[Settings] = None, run_dir: Optional[str] = None):
        self.config = config or default_settings
        self.run_dir = run_dir
        self.session_id = str(uuid.uuid4())
        self._playwright = None
        self._browser = None
        self._context = None
        self._tracing = False
        self.driver: Optional[PlaywrightDriver] = None

    def open(self) -> PlaywrightDriver:
        logger.debug("opening browser session %s", self.session_id)
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.config.PLAYWRIGHT_HEADLESS)
            self._context = self._browser.new_context(
                viewport={
                    "width": self.config.BROWSER_VIEWPORT_WIDTH,
                    "height": self.config.BROWSER_VIEWPORT_HEIGHT,
                },
                locale=self.config.BROWSER_LOCALE,
            )
            if self.config.TRACE_ENABLED and self.run_dir:
                self._context.tracing.start(screenshots=True, snapshots=True, sources=True)
                self._tracing = True
            page = self._context.new_page()
        except Exception:
            self.close()
            raise
        self.driver = PlaywrightDriver(page, navigation_timeout_ms=self.config.NAVIGATION_TIMEOUT_MS)
        return self.driver

    def close(self) -> None:
        """Release context, browser and Playwright. Safe to call more than once."""
        if self._tracing:
            try:
                os.makedirs(self.run_dir, exist_ok=True)
                self._context.tracing.stop(path=os.path.join(self.run_dir, "trace.zip"))
            except Exception as e:
                logger.warning("could not save trace for session %s: %s", self.session_id, e)
            self._tracing = False
        for name in ("_context", "_browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                resource.close()
            except Exception as e:
                logger.warning("error closing %s of session %s: %s", name.strip("_"), self.session_id, e)
            setattr(self, name, None)
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self.driver = None
        logger.debug("browser session %s closed", self.session_id)

    def __enter__(self) -> PlaywrightDriver:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
