"""Value inspection and comparison rules.

This module renders arbitrary runtime values into stable, human-readable
strings for expectation messages, and defines the two equality relations
used by expectations:

- strict equality: same type and same value, recursively;
- loose equality: a documented coercion table on top of `==`.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from fractions import Fraction
from json import dumps
from typing import Any

#: A value in runtime represents any Python object received from
#: user-defined code under test.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (date, datetime, time, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple)
SETS = (set, frozenset)
NUMBERS = (int, float, Decimal, Fraction)

RECURSION_MARKER = '...'


def _is_sequence_mapping(value: Mapping[Any, RuntimeValue]) -> bool:
    """Check whether mapping keys are exactly `0..n-1` in order."""
    return all(
        type(key) is int and key == index
        for index, key in enumerate(value)
    )


def _has_own_str(value: RuntimeValue) -> bool:
    """Check whether the value class defines its own string conversion."""
    return type(value).__str__ is not object.__str__


def _inspect(value: RuntimeValue, seen: frozenset[int]) -> str:
    """Render a value, tracking containers already on the rendering path."""
    if isinstance(value, (*MAPPINGS, *SEQUENCES, *SETS)):
        if id(value) in seen:
            return RECURSION_MARKER
        seen = seen | {id(value)}

    if isinstance(value, str):
        return dumps(value, ensure_ascii=False)

    if value is None or isinstance(value, (bool, int, float, bytes, Decimal, Fraction)):
        return repr(value)

    if isinstance(value, MAPPINGS):
        if _is_sequence_mapping(value):
            return _inspect_items(value.values(), seen)
        parts = (
            f'{_inspect(key, seen)}: {_inspect(item, seen)}'
            for key, item in value.items()
        )
        return f'{{{', '.join(parts)}}}'

    if isinstance(value, SEQUENCES):
        return _inspect_items(value, seen)

    if isinstance(value, SETS):
        parts = sorted(_inspect(item, seen) for item in value)
        return f'{{{', '.join(parts)}}}'

    if isinstance(value, (date, time)):
        return f'({type(value).__name__} {value.isoformat()})'

    if isinstance(value, BaseException) or _has_own_str(value):
        return f'({type(value).__name__} {value})'

    return f'({type(value).__name__} object)'


def _inspect_items(values: 'Any', seen: frozenset[int]) -> str:  # noqa: ANN401
    """Render an ordered collection of values."""
    return f'[{', '.join(_inspect(item, seen) for item in values)}]'


def inspect(value: RuntimeValue) -> str:
    """Build a stable human-readable representation of a value.

    Strings are rendered as quoted and escaped literals, sequences as
    `[e1, e2]`, mappings as `{k1: v1}`, and objects as `(ClassName object)`
    or `(ClassName <str>)` when the class defines a string conversion.
    A mapping whose keys are exactly `0..n-1` in order is rendered as
    a sequence.

    Args:
        value: Arbitrary value to render.

    Returns:
        A single-line string representation.
    """
    return _inspect(value, frozenset())


def strict_equals(actual: RuntimeValue, expected: RuntimeValue) -> bool:
    """Compare two values for identity or same-type equality.

    Containers are compared element-wise with the same rule, so
    `[1, 2]` and `[1.0, 2.0]` are not strictly equal.

    Args:
        actual: Actual value.
        expected: Expected value.

    Returns:
        True if values are strictly equal.
    """
    if actual is expected:
        return True

    if type(actual) is not type(expected):
        return False

    if isinstance(actual, SEQUENCES):
        return len(actual) == len(expected) and all(
            strict_equals(left, right)
            for left, right in zip(actual, expected, strict=True)
        )

    if isinstance(actual, MAPPINGS):
        return list(actual) == list(expected) and all(
            strict_equals(actual[key], expected[key])
            for key in actual
        )

    return bool(actual == expected)


def _to_number(value: str, like: RuntimeValue) -> RuntimeValue:
    """Parse a numeric string as the numeric type of `like`.

    Returns None when the string is not numeric.
    """
    text = value.strip()
    if not text:
        return None

    if isinstance(like, (Decimal, Fraction)):
        try:
            return type(like)(text)
        except (ValueError, ArithmeticError):
            return None

    try:
        return int(text)
    except ValueError:
        pass

    try:
        return float(text)
    except ValueError:
        return None


def _is_number(value: RuntimeValue) -> bool:
    """Check for a real number which is not a boolean."""
    return isinstance(value, NUMBERS) and not isinstance(value, bool)


def loose_equals(actual: RuntimeValue, expected: RuntimeValue) -> bool:  # noqa: PLR0911
    """Compare two values with coercion.

    Coercion table, applied in order:

    1. values equal with `==` are equal;
    2. `None` equals any falsy value;
    3. a boolean equals any value with the same truthiness;
    4. a numeric string equals a number with the same numeric value;
    5. sequences of equal length are compared element-wise;
    6. mappings with the same keys are compared value-wise.

    Anything else is not equal.

    Args:
        actual: Actual value.
        expected: Expected value.

    Returns:
        True if values are loosely equal.
    """
    if actual == expected:
        return True

    if actual is None or expected is None:
        return not actual and not expected

    if isinstance(actual, bool) or isinstance(expected, bool):
        return bool(actual) == bool(expected)

    if isinstance(actual, str) and _is_number(expected):
        number = _to_number(actual, expected)
        return number is not None and number == expected

    if isinstance(expected, str) and _is_number(actual):
        number = _to_number(expected, actual)
        return number is not None and number == actual

    if isinstance(actual, SEQUENCES) and isinstance(expected, SEQUENCES):
        return len(actual) == len(expected) and all(
            loose_equals(left, right)
            for left, right in zip(actual, expected, strict=True)
        )

    if isinstance(actual, MAPPINGS) and isinstance(expected, MAPPINGS):
        return actual.keys() == expected.keys() and all(
            loose_equals(actual[key], expected[key])
            for key in actual
        )

    return False
