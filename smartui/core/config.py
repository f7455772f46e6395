"""
Centralised configuration using Pydantic settings.

This module defines a ``Settings`` class which encapsulates
configuration for the runner. Environment variables can override
defaults defined here by creating a ``.env`` file at the project
root or by exporting variables before starting a run.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runner configuration loaded from environment variables.

    ``ARTIFACT_ROOT``: Directory where per-run artifacts (step log,
    failure screenshots, HTML dumps, traces) are persisted.
    ``SCREENSHOT_FOLDER``: Directory for the screenshot taken right
    before each page's action is performed.
    ``ENTER_WAIT_TIMEOUT_MS``: Upper bound for waiting on an Enter target
    to become interactable. ``0`` disables the wait.
    ``SCENARIO_PATTERNS``: Comma-separated glob patterns picked up when a
    whole directory of scenarios is run.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ARTIFACT_ROOT: str = "./artifacts"
    SCREENSHOT_FOLDER: str = "./artifacts/screenshots"

    # Browser
    PLAYWRIGHT_HEADLESS: bool = True
    BROWSER_VIEWPORT_WIDTH: int = 1440
    BROWSER_VIEWPORT_HEIGHT: int = 900
    BROWSER_LOCALE: str = "en-US"
    NAVIGATION_TIMEOUT_MS: int = 15000
    TRACE_ENABLED: bool = False

    # Action behaviour
    ENTER_WAIT_TIMEOUT_MS: int = 15000
    ENTER_PRESS_ENTER: bool = True
    SCROLL_INTO_VIEW: bool = True

    SCENARIO_PATTERNS: str = "*.json,*.yaml,*.yml,*.scenario"

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""  # empty -> console only

    def scenario_patterns(self) -> List[str]:
        return [p.strip() for p in self.SCENARIO_PATTERNS.split(",") if p.strip()]


settings = Settings()
