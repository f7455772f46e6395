"""
Resolution of human-readable field names to page elements.

``ElementResolver.resolve`` runs an ordered chain of lookup strategies
and returns the first element found. The order is fixed:

1. label with exactly this text, followed through its ``for`` attribute
2. ``placeholder`` equal to the name, or ``name``/``id`` equal to the
   lower-cased name with spaces removed (input and textarea only)
3. first input/textarea sibling following a label containing the name
4. ``title`` attribute equal to the name
5. ``aria-label`` attribute equal to the name

Strategies do not rank or disambiguate: when a lookup matches several
elements, the first in document order wins. A strategy that finds
nothing falls through to the next one.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from smartui.browser.driver import BrowserDriver, ElementHandle
from smartui.browser.locators import (
    INPUT_TAGS,
    AnyOf,
    ByAttribute,
    ById,
    ByLabelText,
    LabelFollowingSibling,
    Locator,
)
from smartui.core.errors import FieldNotFoundError, InteractionError, SmartUIError

logger = logging.getLogger(__name__)

LookupStrategy = Callable[[BrowserDriver, str], Optional[ElementHandle]]


def attribute_key(field_name: str) -> str:
    """``"First Name"`` -> ``"firstname"``: the form matched against name/id attributes."""
    return field_name.lower().replace(" ", "")


def by_label_for(driver: BrowserDriver, field_name: str) -> Optional[ElementHandle]:
    label = driver.locate(ByLabelText(field_name, exact=True))
    if label is None:
        return None
    for_id = label.get_attribute("for")
    if not for_id:
        return None
    return driver.locate(ById(for_id))


def by_placeholder_name_or_id(driver: BrowserDriver, field_name: str) -> Optional[ElementHandle]:
    key = attribute_key(field_name)
    return driver.locate(
        AnyOf(
            (
                ByAttribute("placeholder", field_name, tags=INPUT_TAGS),
                ByAttribute("name", key, tags=INPUT_TAGS, case_insensitive=True),
                ByAttribute("id", key, tags=INPUT_TAGS, case_insensitive=True),
            )
        )
    )


def by_adjacent_label(driver: BrowserDriver, field_name: str) -> Optional[ElementHandle]:
    return driver.locate(LabelFollowingSibling(field_name))


def by_title(driver: BrowserDriver, field_name: str) -> Optional[ElementHandle]:
    return driver.locate(ByAttribute("title", field_name))


def by_aria_label(driver: BrowserDriver, field_name: str) -> Optional[ElementHandle]:
    return driver.locate(ByAttribute("aria-label", field_name))


DEFAULT_STRATEGIES: Tuple[Tuple[str, LookupStrategy], ...] = (
    ("label-for", by_label_for),
    ("placeholder-name-id", by_placeholder_name_or_id),
    ("adjacent-label", by_adjacent_label),
    ("title", by_title),
    ("aria-label", by_aria_label),
)


class ElementResolver:
    """
    Maps field names to elements on the driver's current page.

    Driver failures during a lookup (detached page, closed context, ...)
    surface as ``InteractionError``; only a lookup that completes with no
    match falls through to the next strategy.

    :param driver: Browser driver to query
    :param strategies: ``(name, lookup)`` pairs tried in order; defaults
        to ``DEFAULT_STRATEGIES``
    """

    def __init__(self, driver: BrowserDriver, strategies: Optional[Sequence[Tuple[str, LookupStrategy]]] = None):
        if driver is None:
            raise ValueError("ElementResolver requires a driver")
        self.driver = driver
        self.strategies: List[Tuple[str, LookupStrategy]] = list(strategies or DEFAULT_STRATEGIES)

    def find(self, locator: Locator) -> Optional[ElementHandle]:
        """``driver.locate`` with driver failures reported as ``InteractionError``."""
        try:
            return self.driver.locate(locator)
        except SmartUIError:
            raise
        except Exception as e:
            raise InteractionError(f"Lookup of {type(locator).__name__} failed: {e}") from e

    def resolve(self, field_name: str) -> ElementHandle:
        """
        Return the element for ``field_name``.

        :raises ValueError: ``field_name`` is empty
        :raises FieldNotFoundError: No strategy matched
        :raises InteractionError: The driver failed during a lookup
        """
        if field_name is None or not field_name.strip():
            raise ValueError("Field name cannot be empty")
        for name, lookup in self.strategies:
            try:
                element = lookup(self.driver, field_name)
            except SmartUIError:
                raise
            except Exception as e:
                raise InteractionError(f"{name} lookup for field '{field_name}' failed: {e}") from e
            if element is not None:
                logger.debug("resolved field '%s' using %s lookup", field_name, name)
                return element
            logger.debug("field '%s' not matched by %s lookup", field_name, name)
        logger.info("field '%s' not found by any lookup", field_name)
        raise FieldNotFoundError(field_name)

    def value_of(self, field_name: str) -> str:
        """Live value of the field, as compared against expected elements."""
        element = self.resolve(field_name)
        try:
            return element.get_value()
        except SmartUIError:
            raise
        except Exception as e:
            raise InteractionError(f"Reading value of '{field_name}' failed: {e}") from e
