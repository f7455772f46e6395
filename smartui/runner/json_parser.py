"""
JSON and YAML front-ends for scenario definitions.

Both formats share one document schema::

    {
      "host": "https://example.com",
      "features": {"DUMMY_FEATURE": {"enable": false, "context": {"store": "N/A"}}},
      "pages": [
        {
          "name": "Search",
          "expected": [{"target": "Search", "value": ""}],
          "action": {"actionType": "Enter", "targetField": "Search", "value": "chatgpt"}
        }
      ]
    }

The document is validated with Pydantic models and then converted to
the immutable scenario model. Unknown properties are ignored so older
runners accept newer documents. Absent or ``null`` collections become
empty collections.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, ValidationInfo, field_validator

from smartui.core.errors import ScenarioFormatError
from smartui.runner.actions import build_action
from smartui.runner.scenario import RESERVED_FEATURE_KEYS, ExpectedElement, Feature, Page, TestScenario


class _Document(BaseModel):
    # YAML turns unquoted 50 into an int; scenario values are always text
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class FeatureDocument(_Document):
    enable: StrictBool
    context: Dict[str, str] = Field(default_factory=dict)

    @field_validator("context", mode="before")
    @classmethod
    def _null_context(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("context")
    @classmethod
    def _no_shadowing(cls, v: Dict[str, str]) -> Dict[str, str]:
        shadowed = RESERVED_FEATURE_KEYS.intersection(v)
        if shadowed:
            raise ValueError(f"context cannot redefine {sorted(shadowed)}")
        return v


class ExpectedDocument(_Document):
    target: str = Field(min_length=1)
    value: str

    @field_validator("target")
    @classmethod
    def _target_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("target cannot be blank")
        return v


class ActionDocument(_Document):
    actionType: str
    target: Optional[str] = None
    targetField: Optional[str] = None
    value: Optional[str] = None
    fields: Optional[Dict[str, str]] = None


class PageDocument(_Document):
    name: str = Field(min_length=1)
    expected: List[ExpectedDocument] = Field(default_factory=list)
    action: ActionDocument

    @field_validator("expected", mode="before")
    @classmethod
    def _null_expected(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("page name cannot be blank")
        return v


class ScenarioDocument(_Document):
    host: str = Field(min_length=1)
    features: Dict[str, FeatureDocument] = Field(default_factory=dict)
    pages: List[PageDocument] = Field(default_factory=list)

    @field_validator("host")
    @classmethod
    def _host_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("host cannot be blank")
        return v

    @field_validator("features", "pages", mode="before")
    @classmethod
    def _null_collections(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return {} if info.field_name == "features" else []
        return v


def _json_path(loc: tuple) -> str:
    path = "$"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def document_to_scenario(doc: ScenarioDocument) -> TestScenario:
    features = {
        name: Feature(name=name, enabled=f.enable, context=f.context)
        for name, f in doc.features.items()
    }
    pages = []
    for i, p in enumerate(doc.pages):
        data = p.action.model_dump(exclude_none=True)
        action = build_action(data.pop("actionType"), data, {"path": f"$.pages[{i}].action"})
        expected = [ExpectedElement(target=e.target, value=e.value) for e in p.expected]
        pages.append(Page(name=p.name, expected=expected, action=action))
    return TestScenario(host=doc.host, features=features, pages=pages)


class JsonScenarioParser:
    """Parses the JSON document form."""

    default_source = "<json>"

    def load(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ScenarioFormatError(f"Invalid JSON: {e.msg} (column {e.colno})", line=e.lineno) from e

    def parse_data(self, data: Any) -> TestScenario:
        if not isinstance(data, dict):
            raise ScenarioFormatError("Scenario document must be an object", path="$")
        try:
            doc = ScenarioDocument.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            raise ScenarioFormatError(first["msg"], path=_json_path(first["loc"])) from e
        return document_to_scenario(doc)

    def parse_text(self, text: str, source: Optional[str] = None) -> TestScenario:
        try:
            return self.parse_data(self.load(text))
        except ScenarioFormatError as e:
            raise e.with_source(source or self.default_source)


class YamlScenarioParser(JsonScenarioParser):
    """Parses the same document schema written in YAML."""

    default_source = "<yaml>"

    def load(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise ScenarioFormatError(f"Invalid YAML: {getattr(e, 'problem', None) or e}", line=line) from e
