"""
Scenario data model and loading of scenario definitions.

A scenario describes an end-to-end check against one host: feature
flags to apply first, then an ordered list of pages. Each page asserts
the values of some fields and then performs exactly one action.

Scenarios are read from three interchangeable formats which all produce
the same ``TestScenario`` value:

- ``.json``: the JSON document form
- ``.yaml`` / ``.yml``: the same document schema written in YAML
- anything else: the line-oriented scenario DSL

The model is immutable once built: collections are tuples and
read-only mappings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from smartui.core.errors import ScenarioSourceError
from smartui.runner.actions import Action, ClickAction, EnterAction, SubmitAction, action_type_of

# keys a feature context may not redefine
RESERVED_FEATURE_KEYS = frozenset({"name", "enable", "enabled"})


@dataclass(frozen=True)
class Feature:
    name: str
    enabled: bool = False
    context: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        shadowed = RESERVED_FEATURE_KEYS.intersection(self.context)
        if shadowed:
            raise ValueError(f"Feature '{self.name}' context cannot redefine {sorted(shadowed)}")
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))


@dataclass(frozen=True)
class ExpectedElement:
    target: str
    # "" means the field must be blank
    value: str

    def __post_init__(self) -> None:
        if not self.target or not self.target.strip():
            raise ValueError("Expected element target cannot be empty")
        if self.value is None:
            raise ValueError(f"Expected element '{self.target}' has no value")


@dataclass(frozen=True)
class Page:
    name: str
    action: Action
    expected: Tuple[ExpectedElement, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Page name cannot be empty")
        if self.action is None:
            raise ValueError(f"Page '{self.name}' has no action")
        object.__setattr__(self, "expected", tuple(self.expected))


@dataclass(frozen=True)
class TestScenario:
    host: str
    features: Mapping[str, Feature] = field(default_factory=dict)
    pages: Tuple[Page, ...] = ()

    # keep pytest from collecting this class
    __test__ = False

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("Scenario host cannot be empty")
        for key, feature in self.features.items():
            if key != feature.name:
                raise ValueError(f"Feature key '{key}' does not match feature name '{feature.name}'")
        object.__setattr__(self, "features", MappingProxyType(dict(self.features)))
        object.__setattr__(self, "pages", tuple(self.pages))


def read_source(path: str | os.PathLike) -> str:
    """
    Read a scenario file as UTF-8 text.

    :raises ScenarioSourceError: The file does not exist, is not a regular
        file, or cannot be read
    """
    p = Path(path)
    if not p.exists():
        raise ScenarioSourceError(f"Scenario file does not exist: {p}", path=str(p))
    if not p.is_file():
        raise ScenarioSourceError(f"Path does not point to a regular file: {p}", path=str(p))
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScenarioSourceError(f"Cannot read scenario file {p}: {e}", path=str(p)) from e


def format_for_path(path: str | os.PathLike) -> str:
    ext = os.path.splitext(str(path))[1].lower()
    if ext == ".json":
        return "json"
    if ext in (".yaml", ".yml"):
        return "yaml"
    return "dsl"


def parse_scenario_text(text: str, fmt: str = "dsl", source: str | None = None) -> TestScenario:
    """
    Parse in-memory scenario content.

    :param text: Scenario source
    :param fmt: ``dsl``, ``json`` or ``yaml``
    :param source: Name reported in format errors
    :raises ScenarioFormatError: Malformed content
    :raises ValueError: Unknown ``fmt``
    """
    # imported here: the parsers import this module for the model classes
    from smartui.runner.dsl_parser import DslScenarioParser
    from smartui.runner.json_parser import JsonScenarioParser, YamlScenarioParser

    parsers = {"dsl": DslScenarioParser, "json": JsonScenarioParser, "yaml": YamlScenarioParser}
    try:
        parser_cls = parsers[fmt]
    except KeyError:
        raise ValueError(f"Unknown scenario format '{fmt}'. Expected one of {sorted(parsers)}") from None
    return parser_cls().parse_text(text, source=source)


def load_scenario(path: str | os.PathLike) -> TestScenario:
    """Load a scenario file, choosing the front-end from the file extension."""
    text = read_source(path)
    return parse_scenario_text(text, format_for_path(path), source=str(path))


def _action_summary(action: Action) -> Dict[str, Any]:
    summary: Dict[str, Any] = {"actionType": action_type_of(action).value}
    if isinstance(action, ClickAction):
        summary["target"] = action.target
    elif isinstance(action, EnterAction):
        summary["targetField"] = action.target_field
        summary["value"] = action.value
    elif isinstance(action, SubmitAction):
        summary["fields"] = dict(action.fields)
    return summary


def summarize(scenario: TestScenario) -> Dict[str, Any]:
    """Return a JSON-serialisable dict in the JSON document layout."""
    return {
        "host": scenario.host,
        "features": {
            name: {"enable": f.enabled, "context": dict(f.context)}
            for name, f in scenario.features.items()
        },
        "pages": [
            {
                "name": p.name,
                "expected": [{"target": e.target, "value": e.value} for e in p.expected],
                "action": _action_summary(p.action),
            }
            for p in scenario.pages
        ],
    }
