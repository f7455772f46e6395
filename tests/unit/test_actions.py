import pytest

from smartui.core.errors import ScenarioFormatError
from smartui.runner.actions import (
    ActionType,
    ClickAction,
    EnterAction,
    SubmitAction,
    action_type_of,
    build_action,
)


@pytest.mark.parametrize(
    "action, expected",
    [
        (ClickAction("Go"), ActionType.CLICK),
        (EnterAction("Search", ""), ActionType.ENTER),
        (SubmitAction(), ActionType.SUBMIT),
    ],
)
def test_action_type_of(action, expected):
    assert action_type_of(action) is expected


def test_action_type_of_rejects_other_objects():
    with pytest.raises(TypeError):
        action_type_of("Click")


def test_submit_fields_are_read_only():
    fields = {"A": "1"}
    action = SubmitAction(fields)
    fields["B"] = "2"
    assert dict(action.fields) == {"A": "1"}
    with pytest.raises(TypeError):
        action.fields["C"] = "3"


def test_build_action_missing_type_reports_location():
    with pytest.raises(ScenarioFormatError, match="Action type is missing") as exc:
        build_action(None, {}, {"line": 7})
    assert exc.value.line == 7


def test_build_action_lists_supported_types():
    with pytest.raises(ScenarioFormatError, match="Supported types: Click, Enter, Submit"):
        build_action("click", {"target": "Go"})


def test_build_submit_rejects_non_string_values():
    with pytest.raises(ScenarioFormatError, match="string value"):
        build_action("Submit", {"fields": {"A": 1}})


def test_build_click_rejects_blank_target():
    with pytest.raises(ScenarioFormatError, match="cannot be empty"):
        build_action("Click", {"target": "  "})
