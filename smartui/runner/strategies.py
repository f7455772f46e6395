"""
Action strategies and the registry that dispatches to them.

Each action variant has exactly one strategy. A strategy receives the
action, an ``ElementResolver`` bound to the current page and an optional
``before_interaction`` hook. The hook is called once per dispatch,
immediately before the first element is touched (clicked, cleared or
typed into), so callers can take a screenshot at that moment.

Fallback chains here are alternative algorithms, never retries:
Click tries clickable controls by text before the resolver, Submit tries
the owning form before a generic submit control.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from smartui.browser.driver import ElementHandle
from smartui.browser.locators import ClickableByText, GenericSubmitControl
from smartui.core.config import Settings, settings as default_settings
from smartui.core.errors import (
    InteractionError,
    NoStrategyError,
    RegistryConfigurationError,
    SmartUIError,
)
from smartui.runner.actions import Action, ActionType, ClickAction, EnterAction, SubmitAction, action_type_of
from smartui.runner.resolver import ElementResolver

logger = logging.getLogger(__name__)

BeforeInteraction = Callable[[ElementHandle], None]


@dataclass
class ActionOutcome:
    """Result of a dispatched action. ``warnings`` collects non-fatal failures."""

    action_type: ActionType
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    @property
    def clean(self) -> bool:
        return not self.warnings


def _interact(description: str, fn: Callable[[], None]) -> None:
    """Run one driver interaction, reporting driver failures as ``InteractionError``."""
    try:
        fn()
    except SmartUIError:
        raise
    except Exception as e:
        raise InteractionError(f"Failed to {description}: {e}") from e


class _HookOnce:
    def __init__(self, hook: Optional[BeforeInteraction]):
        self._hook = hook
        self._called = False

    def __call__(self, element: ElementHandle) -> None:
        if self._hook is None or self._called:
            return
        self._called = True
        self._hook(element)


class ActionStrategy(ABC):
    action_type: ActionType

    @abstractmethod
    def execute(
        self,
        action: Action,
        resolver: ElementResolver,
        before_interaction: Optional[BeforeInteraction] = None,
    ) -> ActionOutcome:
        ...


class ClickStrategy(ActionStrategy):
    action_type = ActionType.CLICK

    def execute(self, action: ClickAction, resolver, before_interaction=None) -> ActionOutcome:
        target = action.target
        element = resolver.find(ClickableByText(target))
        if element is None:
            logger.debug("no clickable control with text '%s', falling back to field resolution", target)
            element = resolver.resolve(target)
        _HookOnce(before_interaction)(element)
        _interact(f"click '{target}'", element.click)
        logger.info("clicked '%s'", target)
        return ActionOutcome(self.action_type)


class EnterStrategy(ActionStrategy):
    """
    Types a value into a field.

    :param wait_timeout_ms: Wait up to this long for the field to become
        interactable before typing; ``None`` or ``0`` skips the wait
    :param press_enter: Press Enter after typing
    :param scroll_into_view: Scroll the field into view before the hook runs
    """

    action_type = ActionType.ENTER

    def __init__(self, wait_timeout_ms: Optional[int] = None, press_enter: bool = False, scroll_into_view: bool = False):
        self.wait_timeout_ms = wait_timeout_ms
        self.press_enter = press_enter
        self.scroll_into_view = scroll_into_view

    def execute(self, action: EnterAction, resolver, before_interaction=None) -> ActionOutcome:
        if not action.target_field:
            raise ValueError("Enter action requires a target field")
        if action.value is None:
            raise ValueError(f"Enter action on '{action.target_field}' requires a value")
        element = resolver.resolve(action.target_field)
        if self.wait_timeout_ms:
            _interact(
                f"wait for '{action.target_field}'",
                lambda: element.wait_until_interactable(self.wait_timeout_ms),
            )
        if self.scroll_into_view:
            _interact(f"scroll '{action.target_field}' into view", element.scroll_into_view)
        _HookOnce(before_interaction)(element)
        _interact(f"clear '{action.target_field}'", element.clear)
        _interact(f"type into '{action.target_field}'", lambda: element.type(action.value))
        if self.press_enter:
            _interact(f"press Enter in '{action.target_field}'", lambda: element.press_key("Enter"))
        logger.info("entered %d characters into '%s'", len(action.value), action.target_field)
        return ActionOutcome(self.action_type)


class SubmitStrategy(ActionStrategy):
    """
    Fills fields then submits their form, best effort.

    A field that cannot be resolved or filled is skipped and recorded as
    a warning. Failing to submit is also a warning, never an error.
    """

    action_type = ActionType.SUBMIT

    def execute(self, action: SubmitAction, resolver, before_interaction=None) -> ActionOutcome:
        outcome = ActionOutcome(self.action_type)
        hook = _HookOnce(before_interaction)
        if not action.fields:
            self._click_generic_submit(resolver, hook, outcome)
            return outcome

        last_filled: Optional[ElementHandle] = None
        for name, value in action.fields.items():
            try:
                element = resolver.resolve(name)
                hook(element)
                _interact(f"clear '{name}'", element.clear)
                _interact(f"type into '{name}'", lambda: element.type(value))
            except SmartUIError as e:
                outcome.warn(f"Skipped field '{name}': {e}")
                continue
            last_filled = element

        if last_filled is not None:
            try:
                _interact("submit form", last_filled.submit)
                logger.info("submitted form with %d field(s)", len(action.fields))
                return outcome
            except InteractionError as e:
                outcome.warn(f"Form submit failed, trying a submit control: {e}")
        self._click_generic_submit(resolver, hook, outcome)
        return outcome

    def _click_generic_submit(self, resolver: ElementResolver, hook: _HookOnce, outcome: ActionOutcome) -> None:
        try:
            control = resolver.find(GenericSubmitControl())
        except InteractionError as e:
            outcome.warn(f"Submit control lookup failed: {e}")
            return
        if control is None:
            outcome.warn("No submit control found on page")
            return
        try:
            hook(control)
            _interact("click submit control", control.click)
        except InteractionError as e:
            outcome.warn(f"Submit control click failed: {e}")
            return
        logger.info("clicked submit control")


class ActionStrategyRegistry:
    """
    Maps each action variant to its strategy.

    :raises RegistryConfigurationError: No strategies were given, or a
        strategy declares no action type
    """

    def __init__(self, strategies: Iterable[ActionStrategy]):
        self._strategies: Dict[ActionType, ActionStrategy] = {}
        for strategy in strategies:
            if not isinstance(getattr(strategy, "action_type", None), ActionType):
                raise RegistryConfigurationError(f"{type(strategy).__name__} declares no action type")
            if strategy.action_type in self._strategies:
                logger.warning(
                    "duplicate strategy for %s ignored: %s",
                    strategy.action_type.value,
                    type(strategy).__name__,
                )
                continue
            self._strategies[strategy.action_type] = strategy
        if not self._strategies:
            raise RegistryConfigurationError("Action strategy registry has no strategies")

    @property
    def action_types(self) -> List[ActionType]:
        return list(self._strategies)

    def dispatch(
        self,
        action: Action,
        resolver: ElementResolver,
        before_interaction: Optional[BeforeInteraction] = None,
    ) -> ActionOutcome:
        action_type = action_type_of(action)
        strategy = self._strategies.get(action_type)
        if strategy is None:
            raise NoStrategyError(action_type.value, [t.value for t in self._strategies])
        logger.debug("dispatching %s via %s", action_type.value, type(strategy).__name__)
        return strategy.execute(action, resolver, before_interaction)


def default_registry(config: Optional[Settings] = None) -> ActionStrategyRegistry:
    config = config or default_settings
    return ActionStrategyRegistry(
        [
            ClickStrategy(),
            EnterStrategy(
                wait_timeout_ms=config.ENTER_WAIT_TIMEOUT_MS,
                press_enter=config.ENTER_PRESS_ENTER,
                scroll_into_view=config.SCROLL_INTO_VIEW,
            ),
            SubmitStrategy(),
        ]
    )
