"""
The closed set of UI actions a page can perform.

A page performs exactly one action: ``ClickAction``, ``EnterAction`` or
``SubmitAction``. ``Action`` is the union of the three; code that
branches on the variant goes through ``action_type_of`` so that adding
a variant only requires touching one ``match`` statement.

``build_action`` is the single factory used by every scenario
front-end (line DSL, JSON, YAML) to turn raw key/value data into a
validated action.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from smartui.core.errors import ScenarioFormatError


class ActionType(str, enum.Enum):
    CLICK = "Click"
    ENTER = "Enter"
    SUBMIT = "Submit"


@dataclass(frozen=True)
class ClickAction:
    target: str


@dataclass(frozen=True)
class EnterAction:
    target_field: str
    # empty string is a valid value ("type nothing"), None is not
    value: str


@dataclass(frozen=True)
class SubmitAction:
    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


Action = Union[ClickAction, EnterAction, SubmitAction]


def action_type_of(action: Action) -> ActionType:
    """Return the discriminator for ``action``; raises ``TypeError`` for non-actions."""
    match action:
        case ClickAction():
            return ActionType.CLICK
        case EnterAction():
            return ActionType.ENTER
        case SubmitAction():
            return ActionType.SUBMIT
        case _:
            raise TypeError(f"Not an action: {action!r}")


def _required_str(data: Dict[str, Any], key: str, action_type: str, where: Dict[str, Any], allow_empty: bool = False) -> str:
    value = data.get(key)
    if value is None:
        raise ScenarioFormatError(f"{action_type} action requires '{key}'", **where)
    if not isinstance(value, str):
        raise ScenarioFormatError(f"{action_type} action '{key}' must be a string", **where)
    if not allow_empty and not value.strip():
        raise ScenarioFormatError(f"{action_type} action '{key}' cannot be empty", **where)
    return value


def _build_click(data: Dict[str, Any], where: Dict[str, Any]) -> ClickAction:
    return ClickAction(target=_required_str(data, "target", "Click", where))


def _build_enter(data: Dict[str, Any], where: Dict[str, Any]) -> EnterAction:
    target_field = _required_str(data, "targetField", "Enter", where)
    value = _required_str(data, "value", "Enter", where, allow_empty=True)
    return EnterAction(target_field=target_field, value=value)


def _build_submit(data: Dict[str, Any], where: Dict[str, Any]) -> SubmitAction:
    fields = data.get("fields")
    if fields is None:
        return SubmitAction()
    if not isinstance(fields, Mapping):
        raise ScenarioFormatError("Submit action 'fields' must be a mapping of field name to value", **where)
    for name, value in fields.items():
        if not isinstance(name, str) or not name.strip():
            raise ScenarioFormatError("Submit action field names cannot be empty", **where)
        if not isinstance(value, str):
            raise ScenarioFormatError(f"Submit action field '{name}' must have a string value", **where)
    return SubmitAction(fields=fields)


_BUILDERS: Dict[ActionType, Callable[[Dict[str, Any], Dict[str, Any]], Action]] = {
    ActionType.CLICK: _build_click,
    ActionType.ENTER: _build_enter,
    ActionType.SUBMIT: _build_submit,
}


def build_action(action_type: Optional[str], data: Dict[str, Any], where: Optional[Dict[str, Any]] = None) -> Action:
    """
    Build an action of ``action_type`` from ``data``.

    :param action_type: Discriminator value, one of ``Click``, ``Enter``, ``Submit``
    :param data: Raw fields (``target``, ``targetField``, ``value``, ``fields``)
    :param where: Location keywords (``line`` or ``path``) forwarded to
        ``ScenarioFormatError`` so the fault can be located in the source
    :raises ScenarioFormatError: Unknown type or missing/invalid fields
    """
    where = where or {}
    if action_type is None or (isinstance(action_type, str) and not action_type.strip()):
        raise ScenarioFormatError("Action type is missing", **where)
    try:
        kind = ActionType(action_type)
    except ValueError:
        supported = ", ".join(t.value for t in ActionType)
        raise ScenarioFormatError(
            f"Unknown action type '{action_type}'. Supported types: {supported}", **where
        ) from None
    return _BUILDERS[kind](data, where)
