"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report DSL misuse, expectation failures, test discovery problems, and
test file loading issues in a structured and extensible way.

Two kinds of errors matter to the runner: `AssertionFailure` (the behavior
under test did not hold) and everything else (an unexpected fault).
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

from jafar.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Self

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the test file where the error occurred.
    filename: str | None

    #: Names of the suites and the test leading to the failing node.
    path: list[str] | None

    #: Fixture name involved in the error.
    fixture: str | None

    #: Fixture values available at the moment of failure.
    context: dict[str, Any] | None


class ErrorFormatter:
    """Utility class for formatting DSL-related errors.

    This formatter is responsible for producing human-readable
    error messages with optional location and YAML-based
    contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        snippet = cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)
        if not location and not snippet:
            return message

        return f'{message}{linesep}{location}{snippet}'.rstrip()

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format the file and suite path of the failing node.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string, or an empty string if no
            location is known.
        """
        indent = cls._ensure_indent(indent)

        message = ''
        if filename := context.get('filename'):
            message += f'{indent}in "{filename}"{linesep}'

        if path := context.get('path'):
            names = ' > '.join(f'"{name}"' for name in path)
            message += f'{indent}at {names}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet with the available fixture values.

        Args:
            context: Error context containing runtime values.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        values = context.get('context')
        if values is None:
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml({'context': {**values}}, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with
        a placeholder to prevent leaking opaque data.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                f'{key}': cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a sanitized value to an indented YAML string."""
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation given as a string or a number of spaces."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class JafarWarning(UserWarning):
    """Warning emitted for non-fatal issues.

    Used when something looks wrong but does not prevent the run
    from continuing.
    """


class EmptySpecWarning(JafarWarning):
    """Warning emitted when a test file does not define any suite."""


class AssertionFailure(AssertionError):
    """Error raised when an expectation is not met.

    This is the only exception kind the runner reports as a failure
    rather than an error. It derives from the builtin `AssertionError`
    so plain `assert` statements in test bodies are reported the same way.
    """


class JafarError(Exception, ErrorFormatter):
    """Base exception for all jafar errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)


class ConfigurationError(JafarError):
    """Error raised when the DSL is misused.

    Examples are declaring a test outside of a suite, requesting a
    fixture nobody provides, or naming an unknown exception type in a
    throw-assertion.
    """


class MissingFixtureError(ConfigurationError):
    """Error raised when a fixture requested by name is not available."""

    def __init__(self, message: str, *, fixture: str,
                 context: ErrorContext | None = None) -> None:
        """Initialize a missing fixture error.

        Args:
            message: Human-readable error description.
            fixture: Name of the missing fixture.
            context: Error context containing optional runtime values.
        """
        self.fixture = fixture

        super().__init__(message, context=context)

    @classmethod
    def from_callable(cls, fixture: str, func: 'Callable[..., Any]',
                      available: 'Mapping[str, Any]') -> 'Self':
        """Create an error for a callable which needs an absent fixture.

        Args:
            fixture: Name of the missing fixture.
            func: Callable that requested the fixture.
            available: Fixture values present in the context.

        Returns:
            An initialized MissingFixtureError instance.
        """
        name = getattr(func, '__qualname__', None) or f'{func!r}'

        return cls(
            f'{name} needs a {fixture!r} fixture',
            fixture=fixture,
            context=ErrorContext(
                fixture=fixture,
                context=dict(available),
            ),
        )


class UnknownTypeError(ConfigurationError):
    """Error raised when an expectation names an unknown class or exception type."""


class DiscoveryError(JafarError):
    """Error raised when test files can not be discovered."""


class TestPathNotFoundError(DiscoveryError, FileNotFoundError):
    """Error raised when a path is neither a file nor a directory."""

    __test__ = False


class SuiteLoadError(JafarError):
    """Error raised when loading a test file leaves the builder inconsistent."""
