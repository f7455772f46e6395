"""
Screenshots and failure artifacts for scenario runs.

Nothing in here raises: a run must not fail because a screenshot or a
debug dump could not be written. Problems are logged and, for failure
artifacts, recorded in the returned dict under ``*_error`` keys.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime
from typing import Any, Dict, Optional

from smartui.browser.driver import BrowserDriver

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_name(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name)


class ExecutionPhotographer:
    """Takes timestamped screenshots named after the scenario and page."""

    def __init__(self, clock=datetime.now):
        self._clock = clock

    def screenshot_path(self, name: str, page_number: int, base_dir: str) -> str:
        timestamp = self._clock().strftime("%Y%m%d_%H%M%S")
        file_name = f"{sanitize_name(name)}_page{page_number}_{timestamp}.png"
        return os.path.join(os.path.abspath(base_dir), file_name)

    def take_screenshot(self, driver: BrowserDriver, name: str, page_number: int, base_dir: str) -> Optional[str]:
        """
        Save a screenshot of the current page.

        :return: Path of the saved file, ``None`` when it could not be taken
        """
        path = self.screenshot_path(name, page_number, base_dir)
        try:
            os.makedirs(base_dir, exist_ok=True)
            driver.screenshot(path)
        except NotImplementedError:
            logger.warning("driver %s does not support screenshots", type(driver).__name__)
            return None
        except Exception as e:
            logger.error("failed to save screenshot %s: %s", path, e)
            return None
        logger.info("screenshot saved to %s", path)
        return path


def collect_failure_artifacts(
    driver: BrowserDriver,
    run_dir: str,
    page_index: int,
    page_name: str,
    error: Exception | None = None,
) -> Dict[str, Any]:
    """
    Collect debugging artifacts after a page failed.

    Writes ``failure_page_NNN.png``, ``failure_page_NNN.html`` and
    ``failure_context.json`` into ``run_dir``.

    Returns: what was collected
    """
    artifacts: Dict[str, Any] = {
        "page_index": page_index,
        "page": page_name,
        "error": str(error) if error else None,
        "error_type": type(error).__name__ if error else None,
    }
    try:
        os.makedirs(run_dir, exist_ok=True)
    except OSError as e:
        logger.error("cannot create run directory %s: %s", run_dir, e)
        artifacts["run_dir_error"] = str(e)
        return artifacts

    # 1. last screen
    try:
        screenshot_path = os.path.join(run_dir, f"failure_page_{page_index:03d}.png")
        driver.screenshot(screenshot_path)
        artifacts["screenshot_path"] = screenshot_path
    except Exception as e:
        artifacts["screenshot_error"] = str(e)

    # 2. HTML dump
    try:
        html_path = os.path.join(run_dir, f"failure_page_{page_index:03d}.html")
        html_content = driver.page_source()
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(html_content)
        artifacts["html_path"] = html_path
        artifacts["html_size"] = len(html_content)
    except Exception as e:
        artifacts["html_error"] = str(e)

    try:
        artifacts["current_url"] = driver.current_url
    except Exception as e:
        artifacts["current_url_error"] = str(e)

    try:
        context_path = os.path.join(run_dir, "failure_context.json")
        with open(context_path, "w", encoding="utf-8") as f:
            json.dump(artifacts, f, ensure_ascii=False, indent=2)
        artifacts["context_path"] = context_path
    except (OSError, TypeError) as e:
        logger.error("failed to write failure context: %s", e)
        artifacts["context_error"] = str(e)

    return artifacts
