"""Suite registration stack.

Nested `describe` calls build a tree through sequential declarations
only: each describe pushes its suite, runs its body (which registers
tests, hooks, and nested suites against the top of the stack), and pops
it. Suites completed at the top level are buffered until collected.
"""

from logging import getLogger
from typing import TYPE_CHECKING, Any, overload

from jafar.core.tree import Hook, Suite, Test
from jafar.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

type Body = Callable[..., Any]
type Decorator = Callable[[Body], Body]

logger = getLogger(__name__)


class SuiteBuilder:
    """Stateful builder of execution trees.

    Attributes:
        stack: Suites whose describe bodies are currently running.
        completed: Root suites ready to run, in completion order.
    """

    def __init__(self) -> None:
        """Initialize an idle builder."""
        self.stack: list[Suite] = []
        self.completed: list[Suite] = []

    @property
    def current(self) -> Suite | None:
        """Return the suite at the top of the stack, if any."""
        return self.stack[-1] if self.stack else None

    @property
    def idle(self) -> bool:
        """Return whether no describe body is running."""
        return not self.stack

    def require_current(self, caller: str) -> Suite:
        """Return the current suite or fail outside of a describe.

        Args:
            caller: DSL function name used in the error message.

        Raises:
            ConfigurationError: If no describe body is running.
        """
        if (suite := self.current) is None:
            raise ConfigurationError(f'{caller}() is only valid inside a describe()')

        return suite

    def define_suite(self, name: str, body: 'Callable[[], Any]') -> Suite:
        """Create a suite and run its body with the suite on top of the stack.

        Args:
            name: Thing being described.
            body: Zero-argument callable declaring the suite contents.

        Returns:
            The populated suite.
        """
        parent = self.current
        suite = Suite(name=name)

        if parent is not None:
            parent.children.append(suite)

        self.stack.append(suite)
        try:
            body()
        finally:
            self.stack.pop()

        if not self.stack:
            logger.debug('Suite %r completed with %d children', name, len(suite.children))
            self.completed.append(suite)

        return suite

    @overload
    def describe(self, name: str) -> 'Decorator': ...  # pragma: no cover

    @overload
    def describe(self, name: str, body: 'Callable[[], Any]') -> Suite: ...  # pragma: no cover

    def describe(self, name: str, body: 'Callable[[], Any] | None' = None) -> 'Suite | Decorator':
        """Declare a suite.

        May be used as a decorator on the body function, in which case
        the suite is defined immediately and the function is returned.
        """
        if body is not None:
            return self.define_suite(name, body)

        def decorator(func: 'Body') -> 'Body':
            self.define_suite(name, func)
            return func

        return decorator

    @overload
    def it(self, name: str, *,
           fixtures: 'Iterable[str] | None' = None) -> 'Decorator': ...  # pragma: no cover

    @overload
    def it(self, name: str, body: 'Body', *,
           fixtures: 'Iterable[str] | None' = None) -> Test: ...  # pragma: no cover

    def it(self, name: str, body: 'Body | None' = None, *,
           fixtures: 'Iterable[str] | None' = None) -> 'Test | Decorator':
        """Declare a test within the current suite.

        Args:
            name: Behavior being tested.
            body: Test callable; fixtures are bound to its parameters.
            fixtures: Explicit fixture names overriding introspection.

        Returns:
            The registered test, or a decorator when body is omitted.

        Raises:
            ConfigurationError: If called outside of a describe.
        """
        suite = self.require_current('it')

        def register(func: 'Body') -> Test:
            test = Test.from_callable(func, fixtures, name=name)
            suite.children.append(test)
            return test

        if body is not None:
            return register(body)

        def decorator(func: 'Body') -> 'Body':
            register(func)
            return func

        return decorator

    def before(self, body: 'Body | None' = None, *,
               fixtures: 'Iterable[str] | None' = None) -> 'Body | Decorator':
        """Declare a hook called before each child of the current suite.

        The hook may return a mapping of fixture values which is merged
        into the context of the child and its descendants.

        Raises:
            ConfigurationError: If called outside of a describe.
        """
        return self._register_hook('before', body, fixtures)

    def after(self, body: 'Body | None' = None, *,
              fixtures: 'Iterable[str] | None' = None) -> 'Body | Decorator':
        """Declare a hook called after each child of the current suite.

        Raises:
            ConfigurationError: If called outside of a describe.
        """
        return self._register_hook('after', body, fixtures)

    def _register_hook(self, kind: str, body: 'Body | None',
                       fixtures: 'Iterable[str] | None') -> 'Body | Decorator':
        """Register a before or after hook on the current suite."""
        suite = self.require_current(kind)
        hooks: list[Hook] = getattr(suite, kind)

        def decorator(func: 'Body') -> 'Body':
            hooks.append(Hook.from_callable(func, fixtures))
            return func

        if body is not None:
            return decorator(body)

        return decorator

    def collect(self) -> list[Suite]:
        """Return completed root suites and clear the buffer."""
        suites, self.completed = self.completed, []
        return suites

    def reset(self) -> None:
        """Drop any partially built and completed suites."""
        self.stack.clear()
        self.completed.clear()


#: Builder used by the module-level DSL functions.
default_builder = SuiteBuilder()
