"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from jafar.core import SuiteBuilder, default_builder

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from jafar.core import Stack


class RecordingListener:
    """Listener collecting entry and exit notifications.

    Each event is recorded as a tuple of the event kind, the names on the
    stack joined with ` > `, and the absorbed error (exit events only).
    """

    def __init__(self) -> None:
        self.events: list[tuple[str, str, Exception | None]] = []

    def before(self, stack: 'Stack') -> None:
        self.events.append(('before', self.path(stack), None))

    def after(self, stack: 'Stack', error: Exception | None) -> None:
        self.events.append(('after', self.path(stack), error))

    @staticmethod
    def path(stack: 'Stack') -> str:
        return ' > '.join(node.name for node in stack)

    def errors(self) -> dict[str, Exception]:
        """Return absorbed errors keyed by node path."""
        return {
            path: error
            for kind, path, error in self.events
            if kind == 'after' and error is not None
        }

    def outcomes(self) -> list[tuple[str, str | None]]:
        """Return exit events as path and error class name pairs."""
        return [
            (path, type(error).__name__ if error is not None else None)
            for kind, path, error in self.events
            if kind == 'after'
        ]


@pytest.fixture
def listener() -> RecordingListener:
    """Provide a listener recording every runner notification."""
    return RecordingListener()


@pytest.fixture
def builder() -> SuiteBuilder:
    """Provide an isolated suite builder.

    Suites declared through this builder never leak into the module-level
    DSL functions or other tests.
    """
    return SuiteBuilder()


@pytest.fixture
def clean_builder() -> 'Iterator[SuiteBuilder]':
    """Provide the module-level builder, reset before and after the test.

    Needed by tests that load test files or use the `jafar` DSL functions,
    which always register against the default builder.
    """
    default_builder.reset()
    yield default_builder
    default_builder.reset()
