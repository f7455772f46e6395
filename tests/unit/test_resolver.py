import pytest

from conftest import FakeDriver, FakeElement
from smartui.browser.locators import (
    INPUT_TAGS,
    ByAttribute,
    ById,
    ByLabelText,
    LabelFollowingSibling,
)
from smartui.core.errors import FieldNotFoundError, InteractionError
from smartui.runner.resolver import ElementResolver, attribute_key


def test_attribute_key():
    assert attribute_key("First Name") == "firstname"


def test_label_for_wins_over_placeholder():
    driver = FakeDriver()
    driver.add(ByLabelText("First Name"), FakeElement(attrs={"for": "fn"}))
    by_id = driver.add(ById("fn"), FakeElement(value="from-label"))
    driver.add(ByAttribute("placeholder", "First Name", tags=INPUT_TAGS), FakeElement(value="from-placeholder"))

    assert ElementResolver(driver).resolve("First Name") is by_id


def test_label_without_for_falls_through():
    driver = FakeDriver()
    driver.add(ByLabelText("Email"), FakeElement())
    placeholder = driver.add(ByAttribute("placeholder", "Email", tags=INPUT_TAGS), FakeElement())

    assert ElementResolver(driver).resolve("Email") is placeholder


def test_label_for_missing_target_falls_through():
    driver = FakeDriver()
    driver.add(ByLabelText("Email"), FakeElement(attrs={"for": "gone"}))
    titled = driver.add(ByAttribute("title", "Email"), FakeElement())

    assert ElementResolver(driver).resolve("Email") is titled


def test_name_or_id_uses_lowercase_space_stripped_key():
    driver = FakeDriver()
    by_name = driver.add(ByAttribute("name", "firstname", tags=INPUT_TAGS, case_insensitive=True), FakeElement())

    assert ElementResolver(driver).resolve("First Name") is by_name


def test_adjacent_label_before_title_and_aria():
    driver = FakeDriver()
    sibling = driver.add(LabelFollowingSibling("Phone"), FakeElement())
    driver.add(ByAttribute("title", "Phone"), FakeElement())
    driver.add(ByAttribute("aria-label", "Phone"), FakeElement())

    assert ElementResolver(driver).resolve("Phone") is sibling


def test_aria_label_is_last_resort():
    driver = FakeDriver()
    aria = driver.add(ByAttribute("aria-label", "Search"), FakeElement())

    resolver = ElementResolver(driver)
    assert resolver.resolve("Search") is aria
    # one query per lookup, in order; the first has no match so no id query follows
    assert driver.queries[0] == ByLabelText("Search")
    assert driver.queries[-1] == ByAttribute("aria-label", "Search")
    assert len(driver.queries) == 5


def test_not_found():
    with pytest.raises(FieldNotFoundError) as exc:
        ElementResolver(FakeDriver()).resolve("Nope")
    assert exc.value.field_name == "Nope"
    assert str(exc.value) == "Field not found: 'Nope'"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_empty_field_name(name):
    with pytest.raises(ValueError):
        ElementResolver(FakeDriver()).resolve(name)


def test_value_of_prefers_value_attribute():
    driver = FakeDriver()
    driver.add(ByAttribute("title", "Total"), FakeElement(text="42"))
    driver.add(ByAttribute("title", "Name"), FakeElement(value="Ann", text="ignored"))

    resolver = ElementResolver(driver)
    assert resolver.value_of("Total") == "42"
    assert resolver.value_of("Name") == "Ann"


def test_driver_failure_during_lookup_is_interaction_error():
    driver = FakeDriver()
    cause = RuntimeError("page detached")
    driver.lookup_failures[ByAttribute("title", "Email")] = cause
    driver.add(ByAttribute("aria-label", "Email"), FakeElement())

    with pytest.raises(InteractionError, match="title lookup for field 'Email'") as exc:
        ElementResolver(driver).resolve("Email")
    assert exc.value.__cause__ is cause


def test_find_wraps_driver_failures():
    driver = FakeDriver()
    driver.lookup_failures[ById("x")] = RuntimeError("closed")
    with pytest.raises(InteractionError):
        ElementResolver(driver).find(ById("x"))
