"""Fixture context and by-name binding.

This module defines the context object passed down the execution tree and
the resolver that binds its values to the parameters declared by test and
hook callables.
"""

from inspect import Parameter, signature
from typing import TYPE_CHECKING, Any

from jafar.errors import ConfigurationError, MissingFixtureError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from jafar.values import RuntimeValue

POSITIONAL = (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)


def declared_fixtures(func: 'Callable[..., Any]') -> tuple[str, ...]:
    """Determine the fixture names a callable declares.

    Every positional parameter without a default is a required fixture,
    in declaration order. Parameters with a default keep it, so loop
    variables can be captured as `lambda n=n: ...`. Variadic parameters
    are ignored.

    Args:
        func: Test or hook callable.

    Returns:
        Tuple of fixture names.

    Raises:
        ConfigurationError: If the callable can not be introspected or
            declares a keyword-only parameter without a default.
    """
    try:
        parameters = signature(func).parameters.values()
    except (TypeError, ValueError) as base:
        raise ConfigurationError(
            f'Can not determine fixtures of {func!r}, pass them explicitly',
        ) from base

    names = []
    for parameter in parameters:
        if parameter.kind in POSITIONAL and parameter.default is Parameter.empty:
            names.append(parameter.name)
        elif parameter.kind == Parameter.KEYWORD_ONLY and parameter.default is Parameter.empty:
            raise ConfigurationError(
                f'Keyword-only parameter {parameter.name!r} of '
                f'{getattr(func, '__qualname__', func)!r} can not be bound to a fixture',
            )

    return tuple(names)


class ContextDict(dict[str, 'RuntimeValue']):
    """Execution context mapping fixture names to values.

    Context instances are expected to be immutable in practice, although
    this is not strictly enforced at the type level: `merge` always
    returns a new context.
    """

    def merge(self, values: 'Mapping[str, RuntimeValue] | None') -> 'ContextDict':
        """Return a new context with values merged over this one.

        Args:
            values: Values contributed by a hook, or `None`.

        Returns:
            A new context where later keys override earlier ones.

        Raises:
            ConfigurationError: If values is neither a mapping nor `None`.
        """
        if values is None:
            return ContextDict(self)

        if not hasattr(values, 'keys'):
            raise ConfigurationError(
                f'Hooks must return a mapping of fixtures or None, got {type(values).__name__}',
            )

        return ContextDict({**self, **values})

    def apply(self, func: 'Callable[..., Any]', fixtures: 'Iterable[str]') -> 'RuntimeValue':
        """Invoke a callable with fixtures looked up by name.

        Args:
            func: Test or hook callable.
            fixtures: Names of the fixtures, in parameter order.

        Returns:
            The callable result, unchanged.

        Raises:
            MissingFixtureError: If a requested fixture is absent.
            Any exception raised by the callable.
        """
        args = []
        for name in fixtures:
            if name not in self:
                raise MissingFixtureError.from_callable(name, func, self)
            args.append(self[name])

        return func(*args)
