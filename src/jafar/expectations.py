"""Expectation engine.

`expect(value)` wraps a value into an `ExpectationVerifier` whose matcher
methods raise `AssertionFailure` when the expectation does not hold.
Matchers return the verifier itself so they can be chained, except the
throw-assertions and `to_be_iterable` which end the chain.

Example:

    expect(total).to_be_an(int).to_equal('42')
    expect(KeyError).to_be_thrown_from(lambda: {}['missing'])
"""

import builtins
from collections.abc import Iterable
from importlib import import_module
from re import compile as regexp
from typing import TYPE_CHECKING, Any, Self

from jafar.errors import AssertionFailure, UnknownTypeError
from jafar.values import MAPPINGS, SEQUENCES, SETS, inspect, loose_equals, strict_equals

if TYPE_CHECKING:
    from collections.abc import Callable

    from jafar.values import RuntimeValue

#: Values which are not considered objects by `to_be_a`.
PRIMITIVES = (type(None), str, bytes, int, float, bool, *MAPPINGS, *SEQUENCES, *SETS)

#: Placeholders substituted in failure messages.
PLACEHOLDER_PATTERN = regexp(r'\{(actual|expected)\}')


def _type_name(cls: type) -> str:
    """Return a readable name of a class."""
    if cls.__module__ == 'builtins':
        return cls.__qualname__

    return f'{cls.__module__}.{cls.__qualname__}'


def resolve_class(name: 'str | type') -> type | None:
    """Resolve a class given by value, builtin name, or dotted path.

    Args:
        name: A class, a builtin class name, or `package.module.Class`.

    Returns:
        The resolved class, or `None` when nothing matches.
    """
    if isinstance(name, type):
        return name

    if not isinstance(name, str) or not name:
        return None

    value = getattr(builtins, name, None)
    if value is None and '.' in name:
        module_name, _, attribute = name.rpartition('.')
        try:
            value = getattr(import_module(module_name), attribute, None)
        except (ImportError, ValueError, TypeError):
            value = None

    return value if isinstance(value, type) else None


class ExpectationVerifier:
    """Chainable assertions about a single value.

    Failure messages use `{actual}` and `{expected}` placeholders which
    are substituted with inspected values.
    """

    def __init__(self, value: 'RuntimeValue') -> None:
        """Bind the verifier to a value."""
        self.value = value

    def to_be(self, expected: 'RuntimeValue', message: str | None = None) -> Self:
        """Assert that the value is strictly equal to `expected`."""
        return self._check_binary(strict_equals(self.value, expected), '===', expected, message)

    def to_not_be(self, expected: 'RuntimeValue', message: str | None = None) -> Self:
        """Assert that the value is not strictly equal to `expected`."""
        return self._check_binary(not strict_equals(self.value, expected), '!==', expected, message)

    def to_equal(self, expected: 'RuntimeValue', message: str | None = None) -> Self:
        """Assert that the value is loosely equal to `expected`.

        See `jafar.values.loose_equals` for the coercion rules.
        """
        return self._check_binary(loose_equals(self.value, expected), '==', expected, message)

    def to_not_equal(self, expected: 'RuntimeValue', message: str | None = None) -> Self:
        """Assert that the value is not loosely equal to `expected`."""
        return self._check_binary(not loose_equals(self.value, expected), '!=', expected, message)

    def to_ring_true(self, message: str | None = None) -> Self:
        """Assert that the value evaluates to true in a boolean context.

        Named after the English idiom "to ring true".
        """
        return self._check(bool(self.value), message or 'Expected {actual} to evaluate to true')

    def to_ring_false(self, message: str | None = None) -> Self:
        """Assert that the value evaluates to false in a boolean context."""
        return self._check(not self.value, message or 'Expected {actual} to evaluate to false')

    def to_be_a(self, cls: 'str | type') -> Self:
        """Assert that the value is an object and an instance of `cls`.

        Args:
            cls: A class, a builtin class name, or a dotted class path.

        Raises:
            UnknownTypeError: If `cls` can not be resolved.
            AssertionFailure: If the value is a primitive or not an instance.
        """
        resolved = self._require_class(cls)

        if isinstance(self.value, PRIMITIVES):
            self._raise('Expected {actual} to be an object.')
        elif not isinstance(self.value, resolved):
            self._raise(f'Expected {{actual}} to be a(n) {_type_name(resolved)} object.')

        return self

    def to_be_an(self, cls: 'str | type') -> Self:
        """Alias of `to_be_a` for class names starting with a vowel."""
        return self.to_be_a(cls)

    def to_be_iterable(self) -> bool:
        """Assert that the value is a collection or an iterable object.

        Strings and bytes are not considered iterable.

        Returns:
            True; the chain ends here.
        """
        iterable = (
            isinstance(self.value, (*MAPPINGS, *SEQUENCES, *SETS))
            or (isinstance(self.value, Iterable) and not isinstance(self.value, (str, bytes)))
        )
        if not iterable:
            self._raise('Expected {actual} to be a sequence, a mapping or an iterable object.')

        return True

    def to_be_thrown_from(self, fn: 'Callable[[], Any]') -> BaseException:
        """Assert that calling `fn` raises an instance of the wrapped type.

        The wrapped value is an exception class, a builtin exception
        name, or a dotted path to an exception class.

        Args:
            fn: Zero-argument callable.

        Returns:
            The raised exception.

        Raises:
            UnknownTypeError: If the exception type is unknown.
            AssertionFailure: If nothing or an unrelated exception is raised.
        """
        cls = self._require_exception()

        try:
            fn()
        except cls as error:
            return error
        except Exception as error:
            raise AssertionFailure(
                f'Block raised an unexpected {_type_name(type(error))} exception.',
            ) from error

        raise AssertionFailure(f'Expected block to raise a {_type_name(cls)} exception.')

    def to_not_be_thrown_from(self, fn: 'Callable[[], Any]') -> None:
        """Assert that calling `fn` does not raise the wrapped type.

        Exceptions of unrelated types propagate unchanged.

        Args:
            fn: Zero-argument callable.

        Raises:
            UnknownTypeError: If the exception type is unknown.
            AssertionFailure: If an instance of the wrapped type is raised.
        """
        cls = self._require_exception()

        try:
            fn()
        except cls as error:
            raise AssertionFailure(
                f'Block should not have raised a {_type_name(cls)} exception, but it did.',
            ) from error

    def _require_class(self, cls: 'str | type') -> type:
        """Resolve a class argument or fail with a configuration error."""
        if (resolved := resolve_class(cls)) is None:
            raise UnknownTypeError(f'No such class: {inspect(cls)}.')

        return resolved

    def _require_exception(self) -> type[BaseException]:
        """Resolve the wrapped value into an exception class."""
        resolved = resolve_class(self.value)
        if resolved is None or not issubclass(resolved, BaseException):
            raise UnknownTypeError(f'No such exception class: {inspect(self.value)}.')

        return resolved

    def _check_binary(self, condition: bool, operator: str,
                      expected: 'RuntimeValue', message: str | None) -> Self:
        """Check a binary comparison with the standard message."""
        return self._check(condition, message or f'Expected {{actual}} {operator} {{expected}}', expected)

    def _check(self, condition: bool, message: str,
               expected: 'RuntimeValue' = None) -> Self:
        """Raise with the message unless the condition holds."""
        if not condition:
            self._raise(message, expected)

        return self

    def _raise(self, message: str, expected: 'RuntimeValue' = None) -> None:
        """Substitute placeholders and raise an assertion failure."""
        values = {
            'actual': inspect(self.value),
            'expected': inspect(expected),
        }
        message = PLACEHOLDER_PATTERN.sub(lambda found: values[found[1]], message)

        raise AssertionFailure(message)

    def __str__(self) -> str:
        """String represenatation."""
        return f'{type(self).__name__}({inspect(self.value)})'


def expect(value: 'RuntimeValue') -> ExpectationVerifier:
    """Return a verifier for assertions about the value."""
    return ExpectationVerifier(value)


def check(condition: 'RuntimeValue', message: str | None = None) -> None:
    """Shorthand for verifying that a condition is true.

    Use `check` where you would otherwise be tempted to use `assert`.
    """
    expect(condition).to_ring_true(message)
