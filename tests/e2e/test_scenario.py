"""
Runs one scenario file against a real Chromium browser.

This test expects a ``--scenario`` option pointing at a scenario file
(``.json``, ``.yaml``/``.yml`` or the line DSL). The scenario is loaded,
a browser session is opened and every page is run through the runner.
Failure artifacts and ``step_log.jsonl`` are written under
``ARTIFACT_ROOT``. Any exception propagates to pytest, which records a
value mismatch as a test failure and anything else as an error.
"""

import os

from smartui.browser.session import BrowserSession
from smartui.core.config import settings
from smartui.runner.artifact_collector import ExecutionPhotographer, sanitize_name
from smartui.runner.scenario import load_scenario
from smartui.runner.scenario_runner import ScenarioRunner


def _infer_run_dir(scenario_path: str) -> str:
    name = os.path.splitext(os.path.basename(scenario_path))[0]
    return os.path.join(settings.ARTIFACT_ROOT, sanitize_name(name))


def test_scenario(scenario_path: str) -> None:
    """
    Playwright-based test that exercises an entire scenario.

    :param scenario_path: Path to the scenario file
    :raises AssertionError: Propagated from a failing expected value
    """
    scenario = load_scenario(scenario_path)
    run_dir = _infer_run_dir(scenario_path)
    os.makedirs(run_dir, exist_ok=True)

    runner = ScenarioRunner(photographer=ExecutionPhotographer())
    with BrowserSession(settings, run_dir=run_dir) as driver:
        result = runner.run(scenario, driver, name=os.path.basename(scenario_path), run_dir=run_dir)

    assert result.passed
    assert result.pages_run == len(scenario.pages)
