"""
Scenario execution.

``ScenarioRunner.run`` drives one parsed scenario against a browser
driver: feature flags once, then for every page in order navigate to the
host, check the expected values and dispatch the page's action. The
first failure aborts the remaining pages and propagates after failure
artifacts have been written.

``ScenarioRunner.run_file`` and ``run_directory`` are the batch layer:
each file gets its own browser session, which is closed on every exit
path, and a failing file is recorded without stopping the batch.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import os
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from smartui.browser.driver import BrowserDriver
from smartui.core.config import Settings, settings as default_settings
from smartui.core.errors import AssertionMismatchError
from smartui.runner.artifact_collector import ExecutionPhotographer, collect_failure_artifacts, sanitize_name
from smartui.runner.feature_flags import CacheManager, FeatureFlagClient, FeatureFlagService
from smartui.runner.resolver import ElementResolver
from smartui.runner.scenario import ExpectedElement, TestScenario, load_scenario
from smartui.runner.strategies import ActionStrategyRegistry, default_registry

logger = logging.getLogger(__name__)

SessionFactory = Callable[[Optional[str]], AbstractContextManager]


@dataclass
class ScenarioResult:
    name: str
    passed: bool
    error: Optional[str] = None
    error_type: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    pages_run: int = 0
    run_dir: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "error": self.error,
            "error_type": self.error_type,
            "warnings": list(self.warnings),
            "pages_run": self.pages_run,
            "run_dir": self.run_dir,
        }


@dataclass
class BatchResult:
    results: List[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failed(self) -> List[ScenarioResult]:
        return [r for r in self.results if not r.passed]


def _append_step_log(run_dir: Optional[str], entry: Dict[str, Any]) -> None:
    if not run_dir:
        return
    try:
        os.makedirs(run_dir, exist_ok=True)
        with open(os.path.join(run_dir, "step_log.jsonl"), "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as e:
        logger.error("failed to write step log in %s: %s", run_dir, e)


def check_expected(resolver: ElementResolver, expected: Sequence[ExpectedElement]) -> None:
    """
    Compare live values against ``expected`` in order.

    :raises AssertionMismatchError: On the first differing value
    :raises FieldNotFoundError: A target could not be resolved
    """
    for element in expected:
        actual = resolver.value_of(element.target)
        if actual != element.value:
            raise AssertionMismatchError(element.target, element.value, actual)
        logger.debug("field '%s' has expected value", element.target)


def _default_session_factory(config: Settings) -> SessionFactory:
    from smartui.browser.session import BrowserSession

    return lambda run_dir: BrowserSession(config, run_dir=run_dir)


class ScenarioRunner:
    """
    Runs scenarios.

    :param registry: Action dispatch; defaults to ``default_registry(config)``
    :param feature_flags: Flag service applied before the first page
    :param photographer: Takes the ``<page>-On_Page`` screenshot right
        before each action touches the page; ``None`` disables it
    :param config: Settings for artifact locations and strategy options
    """

    def __init__(
        self,
        registry: Optional[ActionStrategyRegistry] = None,
        feature_flags: Optional[FeatureFlagService] = None,
        photographer: Optional[ExecutionPhotographer] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.registry = registry or default_registry(self.config)
        self.feature_flags = feature_flags or FeatureFlagClient(CacheManager())
        self.photographer = photographer

    def run(
        self,
        scenario: TestScenario,
        driver: BrowserDriver,
        name: str = "scenario",
        run_dir: Optional[str] = None,
    ) -> ScenarioResult:
        """
        Run every page of ``scenario``.

        :return: Result of a passing run, with any action warnings
        :raises AssertionMismatchError: An expected value differed
        :raises SmartUIError: Resolution, dispatch or interaction failed
        """
        logger.info("running scenario %s against %s (%d pages)", name, scenario.host, len(scenario.pages))
        result = ScenarioResult(name=name, passed=False, run_dir=run_dir)
        self.feature_flags.apply(scenario.features)
        resolver = ElementResolver(driver)

        for i, page in enumerate(scenario.pages, start=1):
            started = time.monotonic()
            warnings: List[str] = []
            try:
                driver.navigate(scenario.host)
                check_expected(resolver, page.expected)
                outcome = self.registry.dispatch(page.action, resolver, self._before_interaction(driver, page.name, i))
                warnings = outcome.warnings
            except Exception as e:
                logger.error("page %d (%s) of %s failed: %s", i, page.name, name, e)
                if run_dir:
                    collect_failure_artifacts(driver, run_dir, i, page.name, e)
                _append_step_log(run_dir, self._step_entry(i, page.name, "FAILED", started, warnings, e))
                result.pages_run = i
                raise
            result.warnings.extend(warnings)
            result.pages_run = i
            _append_step_log(run_dir, self._step_entry(i, page.name, "PASSED", started, warnings))
            logger.info("page %d (%s) passed", i, page.name)

        result.passed = True
        logger.info("scenario %s passed", name)
        return result

    def _before_interaction(self, driver: BrowserDriver, page_name: str, page_number: int):
        if self.photographer is None:
            return None
        base_dir = self.config.SCREENSHOT_FOLDER

        def hook(element) -> None:
            self.photographer.take_screenshot(driver, f"{page_name}-On_Page", page_number, base_dir)

        return hook

    @staticmethod
    def _step_entry(i: int, page: str, status: str, started: float, warnings: List[str], error: Exception | None = None) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "i": i,
            "page": page,
            "status": status,
            "duration_ms": int((time.monotonic() - started) * 1000),
            "warnings": list(warnings),
        }
        if error is not None:
            entry["error"] = str(error)
        return entry

    def run_file(self, path: str, session_factory: Optional[SessionFactory] = None) -> ScenarioResult:
        """
        Parse and run one scenario file in its own browser session.

        Never raises for a failing scenario: parse errors, mismatches and
        interaction failures are returned as a failed result.
        """
        name = os.path.splitext(os.path.basename(path))[0]
        run_dir = os.path.join(self.config.ARTIFACT_ROOT, sanitize_name(name))
        session_factory = session_factory or _default_session_factory(self.config)
        try:
            scenario = load_scenario(path)
            with session_factory(run_dir) as driver:
                return self.run(scenario, driver, name=name, run_dir=run_dir)
        except Exception as e:
            logger.exception("scenario %s failed", path)
            return ScenarioResult(
                name=name,
                passed=False,
                error=str(e),
                error_type=type(e).__name__,
                run_dir=run_dir,
            )


def scan_directory(directory: str, patterns: Sequence[str]) -> List[str]:
    """
    Regular files in ``directory`` matching any of ``patterns``, sorted.

    :raises OSError: The directory cannot be listed
    """
    with os.scandir(directory) as entries:
        matches = [
            entry.path
            for entry in entries
            if entry.is_file() and any(fnmatch.fnmatch(entry.name, p) for p in patterns)
        ]
    return sorted(matches)


def run_directory(
    directory: str,
    runner: Optional[ScenarioRunner] = None,
    session_factory: Optional[SessionFactory] = None,
) -> BatchResult:
    runner = runner or ScenarioRunner(photographer=ExecutionPhotographer())
    files = scan_directory(directory, runner.config.scenario_patterns())
    logger.info("found %d scenario file(s) in %s", len(files), directory)
    batch = BatchResult()
    for path in files:
        result = runner.run_file(path, session_factory)
        batch.results.append(result)
        logger.info("%s: %s", result.name, "PASSED" if result.passed else f"FAILED ({result.error})")
    return batch
