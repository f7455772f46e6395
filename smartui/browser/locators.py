"""
Locator value objects understood by the browser driver.

The element resolver and the action strategies describe *what* they
are looking for with these small immutable objects; the driver decides
*how* to query for them. Every locator can render itself as an XPath 1.0
expression, which is what the Playwright adapter evaluates. Fake drivers
in tests can match on the objects directly since they compare by value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_LOWER = "abcdefghijklmnopqrstuvwxyz"

INPUT_TAGS = ("input", "textarea")


def xpath_literal(value: str) -> str:
    """
    Quote ``value`` as an XPath string literal.

    XPath 1.0 has no escape sequences, so a value containing both quote
    characters is assembled with ``concat()``.
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    pieces = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f"'{part}'")
        if i < len(parts) - 1:
            pieces.append('"\'"')
    return "concat(" + ", ".join(pieces) + ")"


def _lower(expr: str) -> str:
    return f"translate({expr}, '{_UPPER}', '{_LOWER}')"


class Locator:
    """Base class; subclasses are frozen dataclasses."""

    def to_xpath(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ById(Locator):
    element_id: str

    def to_xpath(self) -> str:
        return f"//*[@id={xpath_literal(self.element_id)}]"


@dataclass(frozen=True)
class ByLabelText(Locator):
    """A ``<label>`` whose whitespace-normalised text equals (or contains) ``text``."""

    text: str
    exact: bool = True

    def to_xpath(self) -> str:
        lit = xpath_literal(self.text)
        if self.exact:
            return f"//label[normalize-space(.)={lit}]"
        return f"//label[contains(normalize-space(.), {lit})]"


@dataclass(frozen=True)
class ByAttribute(Locator):
    """
    Elements whose ``attribute`` equals ``value``.

    :param tags: Restrict to these tag names; empty means any element
    :param case_insensitive: Lower-case the attribute before comparing
        (``value`` is expected to be lower case already)
    """

    attribute: str
    value: str
    tags: Tuple[str, ...] = ()
    case_insensitive: bool = False

    def to_xpath(self) -> str:
        attr = f"@{self.attribute}"
        if self.case_insensitive:
            attr = _lower(attr)
        predicate = f"[{attr}={xpath_literal(self.value)}]"
        if not self.tags:
            return f"//*{predicate}"
        return " | ".join(f"//{tag}{predicate}" for tag in self.tags)


@dataclass(frozen=True)
class LabelFollowingSibling(Locator):
    """The first input/textarea sibling following a label that contains ``text``."""

    text: str
    tags: Tuple[str, ...] = INPUT_TAGS

    def to_xpath(self) -> str:
        label = ByLabelText(self.text, exact=False).to_xpath()
        return " | ".join(f"{label}/following-sibling::{tag}[1]" for tag in self.tags)


@dataclass(frozen=True)
class ClickableByText(Locator):
    """Buttons and links whose text, or submit/button inputs whose value, equals ``text``."""

    text: str

    def to_xpath(self) -> str:
        lit = xpath_literal(self.text)
        return (
            f"//button[normalize-space(.)={lit}] | "
            f"//a[normalize-space(.)={lit}] | "
            f"//input[@type='button' and @value={lit}] | "
            f"//input[@type='submit' and @value={lit}]"
        )


@dataclass(frozen=True)
class GenericSubmitControl(Locator):
    """
    A form's submit control: ``input[type=submit]``, ``button[type=submit]``
    or a button whose text, id or name contains "submit" (any case).
    """

    def to_xpath(self) -> str:
        keyword = "'submit'"
        return (
            "//input[@type='submit'] | "
            "//button[@type='submit'] | "
            f"//button[contains({_lower('normalize-space(.)')}, {keyword})] | "
            f"//button[contains({_lower('@id')}, {keyword})] | "
            f"//button[contains({_lower('@name')}, {keyword})]"
        )


@dataclass(frozen=True)
class AnyOf(Locator):
    """Union of several locators, in document order."""

    locators: Tuple[Locator, ...]

    def to_xpath(self) -> str:
        return " | ".join(loc.to_xpath() for loc in self.locators)
