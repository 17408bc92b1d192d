"""Runner interfaces and the top-level entry point.

The `Listener` protocol is implemented by reporters and is notified on
entry and exit of every node. Calls are always paired, even when a suite
aborts its remaining children because of a hook failure.
"""

from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from jafar.context import ContextDict

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from jafar.core.tree import Suite, Test
    from jafar.values import RuntimeValue

#: Ancestors of the node being run, from the root suite to the node itself.
type Stack = tuple['Suite | Test', ...]

logger = getLogger(__name__)


@runtime_checkable
class Listener(Protocol):
    """Receiver of node entry and exit notifications."""

    def before(self, stack: Stack) -> None:
        """Handle entry into the last node of the stack."""

    def after(self, stack: Stack, error: Exception | None) -> None:
        """Handle exit from the last node of the stack.

        Args:
            stack: Ancestors of the node, the node included.
            error: Exception absorbed by the node, or `None`.
        """


@runtime_checkable
class Runnable(Protocol):
    """Uniform entry point of suites and tests."""

    def run(self, stack: Stack, context: ContextDict, listener: Listener) -> None:
        """Run the node and its subtree."""


def run_suites(suites: 'Iterable[Runnable]', listener: Listener,
               context: 'Mapping[str, RuntimeValue] | None' = None) -> None:
    """Run root suites one after another.

    Args:
        suites: Root suites in load order.
        listener: Receiver of entry and exit notifications.
        context: Optional initial fixtures shared by all suites.
    """
    initial = ContextDict(context or {})

    for suite in suites:
        logger.debug('Running %r', getattr(suite, 'name', suite))
        suite.run((), initial, listener)
