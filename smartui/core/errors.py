"""
Error taxonomy for scenario parsing and execution.

Every error raised by the runner derives from ``SmartUIError`` so
callers can tell tooling failures apart from unrelated exceptions.
``AssertionMismatchError`` additionally derives from ``AssertionError``:
a value mismatch is a failed test, not broken tooling, and pytest
reports it as such.
"""

from __future__ import annotations

from typing import Optional


class SmartUIError(Exception):
    """Base class for all runner errors."""


class ScenarioSourceError(SmartUIError):
    """The scenario source could not be read (missing, not a file, unreadable)."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ScenarioFormatError(SmartUIError):
    """
    Malformed scenario source.

    :param message: Human readable description of the fault
    :param line: 1-based line number (line DSL, JSON syntax errors)
    :param path: JSON path of the offending node (JSON/YAML documents)
    :param source: Name of the file or resource being parsed
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        path: Optional[str] = None,
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.path = path
        self.source = source

    def with_source(self, source: str) -> "ScenarioFormatError":
        self.source = source
        return self

    def __str__(self) -> str:
        where = self.source or "<scenario>"
        if self.line is not None:
            return f"{where}:{self.line}: {self.message}"
        if self.path:
            return f"{where} at {self.path}: {self.message}"
        return f"{where}: {self.message}"


class FieldNotFoundError(SmartUIError):
    """No resolver strategy located an element for ``field_name``."""

    def __init__(self, field_name: str):
        super().__init__(f"Field not found: '{field_name}'")
        self.field_name = field_name


class AssertionMismatchError(SmartUIError, AssertionError):
    """The live value of an expected element differs from the declared value."""

    def __init__(self, target: str, expected: str, actual: Optional[str]):
        super().__init__(f"Expected field '{target}' to be '{expected}' but found '{actual}'")
        self.target = target
        self.expected = expected
        self.actual = actual


class RegistryConfigurationError(SmartUIError):
    """The action strategy registry was configured incorrectly."""


class NoStrategyError(SmartUIError):
    """No strategy is registered for the dispatched action variant."""

    def __init__(self, action_type: str, available: Optional[list] = None):
        msg = f"No strategy registered for action type: {action_type}"
        if available is not None:
            msg += f". Registered types: {available}"
        super().__init__(msg)
        self.action_type = action_type


class InteractionError(SmartUIError):
    """An underlying driver call failed (not interactable, stale, detached, ...)."""


class InteractionTimeoutError(InteractionError):
    """A bounded wait on an element expired."""

    def __init__(self, message: str, timeout_ms: int):
        super().__init__(message)
        self.timeout_ms = timeout_ms
