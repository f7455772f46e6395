"""
Parser for the line-oriented scenario DSL.

Example::

    Host: https://www.example.com

    Features:
     - DUMMY_FEATURE:
      enable: false
      on:
       province: N/A

    Page Search
    expected:
     - Search: ""
    action:
     type: Enter
     target-field: Search
     value: chatgpt

    Page Sign up
    action:
     type: Submit
     fields:
      - Username: jdoe
      - Email: jdoe@example.com

The parser is a single-pass finite-state machine. Every line is trimmed
and classified by its prefix; the current state decides which prefixes
are legal. Blank lines and ``//`` comments are ignored everywhere. Any
other line that is not legal in the current state is a
``ScenarioFormatError`` citing its line number.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from smartui.core.errors import ScenarioFormatError
from smartui.runner.actions import build_action
from smartui.runner.scenario import ExpectedElement, Feature, Page, TestScenario

HOST_PREFIX = "Host:"
FEATURES_KEYWORD = "Features:"
EXPECTED_KEYWORD = "expected:"
ACTION_KEYWORD = "action:"
FIELDS_KEYWORD = "fields:"
ENABLE_KEY = "enable"
ON_KEY = "on"
LIST_ITEM_PREFIX = "-"
COMMENT_PREFIX = "//"

PAGE_RE = re.compile(r"^Page(?:\s+(?P<name>.*))?$")

# DSL key -> action data key
ACTION_KEYS = {
    "type": "type",
    "target": "target",
    "target-field": "targetField",
    "value": "value",
}


class State(enum.Enum):
    EXPECT_HOST = "expect-host"
    IN_FEATURES = "in-features"
    IN_PAGE = "in-page"
    IN_EXPECTED = "in-expected"
    IN_ACTION = "in-action"
    IN_FIELDS = "in-fields"


PAGE_STATES = (State.IN_PAGE, State.IN_EXPECTED, State.IN_ACTION, State.IN_FIELDS)


@dataclass
class _FeatureDraft:
    name: str
    line: int
    enabled: bool = False
    context: Dict[str, str] = field(default_factory=dict)


@dataclass
class _PageDraft:
    name: str
    line: int
    expected: List[ExpectedElement] = field(default_factory=list)
    action_line: Optional[int] = None
    action_data: Dict[str, Any] = field(default_factory=dict)
    fields: Dict[str, str] = field(default_factory=dict)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def _split_pair(text: str, line_no: int, what: str) -> tuple[str, str]:
    """Split ``key: value`` on the first colon."""
    key, sep, value = text.partition(":")
    key = key.strip()
    if not sep or not key:
        raise ScenarioFormatError(f"Invalid {what} format, expected '<name>: <value>': {text}", line=line_no)
    return key, value.strip()


def _parse_bool(raw: str, line_no: int) -> bool:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ScenarioFormatError(f"Invalid boolean for 'enable': {raw!r}", line=line_no)


class DslScenarioParser:
    """Turns DSL text into a ``TestScenario``."""

    def parse_text(self, text: str, source: Optional[str] = None) -> TestScenario:
        try:
            return _DslRun(text).run()
        except ScenarioFormatError as e:
            raise e.with_source(source or "<dsl>")


class _DslRun:
    """State for a single parse; discarded afterwards."""

    def __init__(self, text: str):
        self.lines = text.splitlines()
        self.state = State.EXPECT_HOST
        self.host: Optional[str] = None
        self.features: Dict[str, Feature] = {}
        self.pages: List[Page] = []
        self.feature: Optional[_FeatureDraft] = None
        self.page: Optional[_PageDraft] = None

    def run(self) -> TestScenario:
        for line_no, raw in enumerate(self.lines, start=1):
            line = raw.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue
            self._feed(line, line_no)

        self._close_feature()
        self._close_page()
        if self.host is None:
            raise ScenarioFormatError("Missing 'Host' definition in test scenario")
        return TestScenario(host=self.host, features=self.features, pages=self.pages)

    def _feed(self, line: str, line_no: int) -> None:
        # block keywords are recognised in every state
        if line.startswith(HOST_PREFIX):
            self._on_host(line, line_no)
            return
        if line == FEATURES_KEYWORD:
            self._on_features(line_no)
            return
        page_match = PAGE_RE.match(line)
        if page_match:
            self._on_page(page_match.group("name"), line_no)
            return

        handler = {
            State.EXPECT_HOST: self._in_top_level,
            State.IN_FEATURES: self._in_features,
            State.IN_PAGE: self._in_page,
            State.IN_EXPECTED: self._in_expected,
            State.IN_ACTION: self._in_action,
            State.IN_FIELDS: self._in_fields,
        }[self.state]
        handler(line, line_no)

    # -- block transitions -------------------------------------------------

    def _on_host(self, line: str, line_no: int) -> None:
        if self.state in PAGE_STATES or self.pages:
            raise ScenarioFormatError("'Host' must be declared before the first Page block", line=line_no)
        if self.host is not None:
            raise ScenarioFormatError("Duplicate 'Host' definition", line=line_no)
        host = line[len(HOST_PREFIX):].strip()
        if not host:
            raise ScenarioFormatError("'Host' cannot be empty", line=line_no)
        self._close_feature()
        self.host = host
        self.state = State.EXPECT_HOST

    def _on_features(self, line_no: int) -> None:
        if self.state in PAGE_STATES or self.pages:
            raise ScenarioFormatError("'Features:' must appear before the first Page block", line=line_no)
        self._close_feature()
        self.state = State.IN_FEATURES

    def _on_page(self, name: Optional[str], line_no: int) -> None:
        if self.host is None:
            raise ScenarioFormatError("Page block found before 'Host' definition", line=line_no)
        name = (name or "").strip()
        if not name:
            raise ScenarioFormatError("Page name cannot be empty", line=line_no)
        self._close_feature()
        self._close_page()
        self.page = _PageDraft(name=name, line=line_no)
        self.state = State.IN_PAGE

    # -- per-state line handlers -------------------------------------------

    def _in_top_level(self, line: str, line_no: int) -> None:
        raise ScenarioFormatError(f"Invalid line format: {line}", line=line_no)

    def _in_features(self, line: str, line_no: int) -> None:
        if line.startswith(LIST_ITEM_PREFIX):
            rest = line[len(LIST_ITEM_PREFIX):].strip()
            if not rest.endswith(":") or not rest[:-1].strip():
                raise ScenarioFormatError(f"Invalid feature format, expected '- <name>:': {line}", line=line_no)
            name = rest[:-1].strip()
            if name in self.features or (self.feature and self.feature.name == name):
                raise ScenarioFormatError(f"Duplicate feature '{name}'", line=line_no)
            self._close_feature()
            self.feature = _FeatureDraft(name=name, line=line_no)
            return

        if self.feature is None:
            raise ScenarioFormatError(f"Feature setting outside of a feature block: {line}", line=line_no)
        key, value = _split_pair(line, line_no, "feature setting")
        if key == ENABLE_KEY:
            self.feature.enabled = _parse_bool(value, line_no)
        elif key == ON_KEY and not value:
            # "on:" only introduces the context lines
            pass
        elif key in ("name", "enabled"):
            raise ScenarioFormatError(f"Feature context cannot redefine '{key}'", line=line_no)
        else:
            self.feature.context[key] = value

    def _in_page(self, line: str, line_no: int) -> None:
        if line == EXPECTED_KEYWORD:
            self.state = State.IN_EXPECTED
        elif line == ACTION_KEYWORD:
            self._start_action(line_no)
        else:
            raise ScenarioFormatError(f"Expected 'expected:' or 'action:' in page block: {line}", line=line_no)

    def _in_expected(self, line: str, line_no: int) -> None:
        if line == ACTION_KEYWORD:
            self._start_action(line_no)
            return
        if not line.startswith(LIST_ITEM_PREFIX):
            raise ScenarioFormatError(f"Invalid expected element format: {line}", line=line_no)
        target, value = _split_pair(line[len(LIST_ITEM_PREFIX):], line_no, "expected element")
        self.page.expected.append(ExpectedElement(target=target, value=_unquote(value)))

    def _in_action(self, line: str, line_no: int) -> None:
        if line == ACTION_KEYWORD:
            self._start_action(line_no)
            return
        if line.startswith(FIELDS_KEYWORD):
            if line[len(FIELDS_KEYWORD):].strip():
                raise ScenarioFormatError("'fields:' must be followed by '- <name>: <value>' lines", line=line_no)
            self.state = State.IN_FIELDS
            return
        key, value = _split_pair(line, line_no, "action property")
        data_key = ACTION_KEYS.get(key)
        if data_key is None:
            raise ScenarioFormatError(f"Unknown action property '{key}'", line=line_no)
        if data_key in self.page.action_data:
            raise ScenarioFormatError(f"Duplicate action property '{key}'", line=line_no)
        self.page.action_data[data_key] = _unquote(value)

    def _in_fields(self, line: str, line_no: int) -> None:
        if not line.startswith(LIST_ITEM_PREFIX):
            # the fields block ends at the next action property
            self.state = State.IN_ACTION
            self._in_action(line, line_no)
            return
        name, value = _split_pair(line[len(LIST_ITEM_PREFIX):], line_no, "field")
        self.page.fields[name] = _unquote(value)

    # -- finalisation --------------------------------------------------------

    def _start_action(self, line_no: int) -> None:
        if self.page.action_line is not None:
            raise ScenarioFormatError(f"Page '{self.page.name}' declares more than one action", line=line_no)
        self.page.action_line = line_no
        self.state = State.IN_ACTION

    def _close_feature(self) -> None:
        draft = self.feature
        if draft is None:
            return
        self.feature = None
        self.features[draft.name] = Feature(name=draft.name, enabled=draft.enabled, context=draft.context)

    def _close_page(self) -> None:
        draft = self.page
        if draft is None:
            return
        self.page = None
        if draft.action_line is None:
            raise ScenarioFormatError(f"Page '{draft.name}' has no action", line=draft.line)
        data = dict(draft.action_data)
        if draft.fields:
            data["fields"] = draft.fields
        action = build_action(data.get("type"), data, {"line": draft.action_line})
        self.pages.append(Page(name=draft.name, expected=draft.expected, action=action))
