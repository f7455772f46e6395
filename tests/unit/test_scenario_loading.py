import os

import pytest

from smartui.core.errors import ScenarioFormatError, ScenarioSourceError
from smartui.runner.actions import ClickAction
from smartui.runner.scenario import format_for_path, load_scenario, parse_scenario_text, summarize

SAMPLES = os.path.join(os.path.dirname(__file__), "..", "..", "scenarios")


@pytest.mark.parametrize(
    "path, fmt",
    [("a.json", "json"), ("a.YAML", "yaml"), ("a.yml", "yaml"), ("a.scenario", "dsl"), ("a", "dsl")],
)
def test_format_for_path(path, fmt):
    assert format_for_path(path) == fmt


def test_missing_file_is_source_error(tmp_path):
    with pytest.raises(ScenarioSourceError, match="does not exist"):
        load_scenario(tmp_path / "nope.json")


def test_directory_is_source_error(tmp_path):
    with pytest.raises(ScenarioSourceError, match="regular file"):
        load_scenario(tmp_path)


def test_format_error_names_file(tmp_path):
    path = tmp_path / "bad.scenario"
    path.write_text("Host: http://x\nnonsense\n", encoding="utf-8")
    with pytest.raises(ScenarioFormatError) as exc:
        load_scenario(path)
    assert str(exc.value) == f"{path}:2: Invalid line format: nonsense"


def test_unknown_format():
    with pytest.raises(ValueError, match="Unknown scenario format"):
        parse_scenario_text("", "xml")


@pytest.mark.parametrize("name", ["search.scenario", "signup.json", "login.yaml"])
def test_sample_scenarios_parse(name):
    scenario = load_scenario(os.path.join(SAMPLES, name))
    assert scenario.host.startswith("https://")
    assert scenario.pages


def test_model_is_read_only():
    scenario = parse_scenario_text("Host: http://x\nPage P\naction:\n type: Click\n target: Go\n")
    with pytest.raises(AttributeError):
        scenario.host = "http://y"
    with pytest.raises(TypeError):
        scenario.features["F"] = None
    assert isinstance(scenario.pages, tuple)


def test_summarize_matches_document_layout():
    scenario = parse_scenario_text("Host: http://x\nPage P\naction:\n type: Click\n target: Go\n")
    assert summarize(scenario) == {
        "host": "http://x",
        "features": {},
        "pages": [{"name": "P", "expected": [], "action": {"actionType": "Click", "target": "Go"}}],
    }
    assert scenario.pages[0].action == ClickAction("Go")
