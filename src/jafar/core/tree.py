"""Execution tree nodes and the recursive runner.

A tree is made of `Suite` nodes (named groups with before/after hooks)
and `Test` leaves. Both implement `run(stack, context, listener)`.

Failure handling is asymmetric:

- a test absorbs every exception raised by its own body and reports it
  through the listener, so siblings keep running;
- a suite absorbs exceptions raised by its own hooks, and listener faults
  escaping a child. Such a failure aborts the remaining children and is
  reported as the suite error.
"""

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Any, Self

from pydantic import Field, ValidationError

from jafar.context import ContextDict, declared_fixtures
from jafar.errors import ConfigurationError
from jafar.models import SchemaModel
from jafar.names import Fixture  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jafar.core.runner import Listener, Stack
    from jafar.values import RuntimeValue

logger = getLogger(__name__)


class FixturedMixin(SchemaModel):
    """Mixin for callables receiving fixtures by name."""

    body: Callable[..., Any] = Field(
        title='Body',
        description='Callable invoked with the requested fixtures.',
    )

    fixtures: tuple[Fixture, ...] = Field(
        default=(),
        title='Fixtures',
        description=(
            'Names of the fixtures passed positionally to the body. '
            'Determined from the body signature unless given explicitly.'
        ),
    )

    @classmethod
    def from_callable(cls, body: 'Callable[..., Any]',
                      fixtures: 'Iterable[str] | None' = None,
                      **kwargs: Any) -> Self:  # noqa: ANN401
        """Create a node from a callable.

        Args:
            body: Test or hook callable.
            fixtures: Explicit fixture names overriding introspection.
            **kwargs: Extra model fields.

        Returns:
            A validated model instance.

        Raises:
            ConfigurationError: If the body is not callable or a field,
                such as a fixture name, is invalid.
        """
        if not callable(body):
            raise ConfigurationError(f'{body!r} is not callable')

        fixtures = declared_fixtures(body) if fixtures is None else tuple(fixtures)

        try:
            return cls(body=body, fixtures=fixtures, **kwargs)
        except ValidationError as base:
            fields = {f'{error['loc'][0]}' for error in base.errors() if error['loc']}
            if fields == {'fixtures'}:
                message = f'Invalid fixture names {fixtures!r}'
            else:
                message = f'Invalid {cls.__name__.lower()} definition: {base}'

            raise ConfigurationError(message) from base

    def apply(self, context: ContextDict) -> 'RuntimeValue':
        """Invoke the body with fixtures from the context."""
        return context.apply(self.body, self.fixtures)


class Hook(FixturedMixin):
    """Before/after procedure owned by a suite.

    A before hook may return a mapping of fixture values which is merged
    into the context seen by the child it runs for.
    """


class Test(FixturedMixin):
    """Single named behavior check.

    Always a leaf of the execution tree.
    """

    __test__ = False

    name: str = Field(
        title='Name',
        description='Behavior being tested.',
    )

    def run(self, stack: 'Stack', context: ContextDict, listener: 'Listener') -> None:
        """Run the test body and report its outcome.

        Any exception raised while binding fixtures or running the body
        is reported through the listener and never re-raised.

        Args:
            stack: Ancestors of this test, from the root suite.
            context: Fixture values visible to the test.
            listener: Receiver of entry and exit notifications.
        """
        stack = (*stack, self)
        error: Exception | None = None

        listener.before(stack)

        try:
            self.apply(context)
        except Exception as base:  # noqa: BLE001
            error = base

        listener.after(stack, error)


class Suite(SchemaModel):
    """Named group of tests and nested suites.

    Children lists are filled while the describe body runs and are not
    modified afterwards.
    """

    name: str = Field(
        title='Name',
        description='Thing being described.',
    )

    before: list[Hook] = Field(
        default_factory=list,
        title='Before hooks',
        description='Hooks invoked before each child, in order.',
    )

    after: list[Hook] = Field(
        default_factory=list,
        title='After hooks',
        description='Hooks invoked after each child, in order.',
    )

    children: list['Suite | Test'] = Field(
        default_factory=list,
        title='Children',
        description='Nested suites and tests, in declaration order.',
    )

    def prepare(self, context: ContextDict) -> ContextDict:
        """Build a fresh child context by running the before hooks.

        Args:
            context: Context inherited by this suite.

        Returns:
            Inherited context merged with each before hook result.
        """
        for hook in self.before:
            context = context.merge(hook.apply(context))

        return context

    def cleanup(self, context: ContextDict) -> None:
        """Run the after hooks with the child context."""
        for hook in self.after:
            hook.apply(context)

    def run(self, stack: 'Stack', context: ContextDict, listener: 'Listener') -> None:
        """Run every child between the before and after hooks.

        Hooks and the descent into each child run in separate guarded
        regions. Children absorb their own test and hook failures, so the
        descent guard only sees listener faults. The first error caught
        aborts the remaining children and is reported as the suite error,
        so every ancestor still receives its `after` notification.

        Args:
            stack: Ancestors of this suite.
            context: Fixture values inherited from the ancestors.
            listener: Receiver of entry and exit notifications.
        """
        stack = (*stack, self)
        error: Exception | None = None

        listener.before(stack)

        for child in self.children:
            try:
                child_context = self.prepare(context)
            except Exception as base:  # noqa: BLE001
                error = base
                break

            try:
                child.run(stack, child_context, listener)
            except Exception as base:  # noqa: BLE001
                error = base
                break

            try:
                self.cleanup(child_context)
            except Exception as base:  # noqa: BLE001
                error = base
                break

        if error is not None:
            logger.debug('Suite %r failed, skipping remaining children', self.name)

        listener.after(stack, error)


Suite.model_rebuild()
