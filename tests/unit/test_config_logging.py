import logging
import os

from smartui.core import logging as smartui_logging
from smartui.core.config import Settings
from smartui.core.errors import ScenarioFormatError


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ENTER_WAIT_TIMEOUT_MS", "250")
    monkeypatch.setenv("SCENARIO_PATTERNS", "*.json, *.scenario ,")
    s = Settings(_env_file=None)
    assert s.ENTER_WAIT_TIMEOUT_MS == 250
    assert s.scenario_patterns() == ["*.json", "*.scenario"]


def test_configure_logging_writes_files_once(tmp_path, monkeypatch):
    logger = logging.getLogger("smartui")
    monkeypatch.setattr(smartui_logging, "_configured", False)
    monkeypatch.setattr(logger, "handlers", [])

    smartui_logging.configure_logging(level="debug", log_dir=str(tmp_path))
    smartui_logging.configure_logging(level="debug", log_dir=str(tmp_path))

    assert len(logger.handlers) == 3
    assert logger.level == logging.DEBUG
    logging.getLogger("smartui.runner.test").warning("something odd")
    for h in logger.handlers:
        h.flush()
    with open(os.path.join(tmp_path, "error.log"), encoding="utf-8") as f:
        assert "something odd" in f.read()
    for h in logger.handlers:
        h.close()


def test_format_error_rendering():
    assert str(ScenarioFormatError("bad", line=3, source="a.scenario")) == "a.scenario:3: bad"
    assert str(ScenarioFormatError("bad", path="$.host", source="a.json")) == "a.json at $.host: bad"
    assert str(ScenarioFormatError("bad")) == "<scenario>: bad"
