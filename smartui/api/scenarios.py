from __future__ import annotations

from typing import Any, Dict, Literal

from fastapi import APIRouter
from pydantic import BaseModel

from smartui.core.errors import ScenarioFormatError
from smartui.runner.scenario import parse_scenario_text, summarize


router = APIRouter(prefix="/scenarios", tags=["scenarios"])


class ScenarioSourceIn(BaseModel):
    content: str
    format: Literal["dsl", "json", "yaml"] = "json"


class ScenarioValidationOut(BaseModel):
    valid: bool
    errors: list[str]
    scenario: dict | None = None


def get_scenario_schema_example() -> Dict[str, Any]:
    return {
        "host": "https://www.google.com",
        "features": {
            "DUMMY_FEATURE": {"enable": False, "context": {"store": "N/A"}},
        },
        "pages": [
            {
                "name": "Search",
                "expected": [{"target": "Search", "value": ""}],
                "action": {"actionType": "Enter", "targetField": "Search", "value": "playwright"},
            },
            {
                "name": "Results",
                "expected": [],
                "action": {"actionType": "Click", "target": "Images"},
            },
            {
                "name": "Login",
                "expected": [],
                "action": {
                    "actionType": "Submit",
                    "fields": {"Username": "demo", "Password": "secret"},
                },
            },
        ],
    }


@router.post(
    "/validate",
    response_model=ScenarioValidationOut,
    summary="Validate a scenario",
    description="""
    Parses a scenario without running it.

    - **format**: `dsl`, `json` or `yaml`
    - **response**: `valid`, parse errors with line number or JSON path,
      and the parsed scenario when valid
    """,
)
def validate_scenario_api(body: ScenarioSourceIn):
    try:
        scenario = parse_scenario_text(body.content, body.format, source="<request>")
    except (ScenarioFormatError, ValueError) as e:
        return ScenarioValidationOut(valid=False, errors=[str(e)])
    return ScenarioValidationOut(valid=True, errors=[], scenario=summarize(scenario))


@router.get("/schema-example", summary="Example JSON scenario document")
def schema_example_api() -> Dict[str, Any]:
    return get_scenario_schema_example()
