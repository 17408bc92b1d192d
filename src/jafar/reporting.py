"""Terminal reporting of test results.

`TerminalReporter` implements the runner `Listener` protocol and prints
an indented tree of suites and tests with pass, fail, and error markers.
It also keeps a `Summary` of the run.
"""

from dataclasses import dataclass
from traceback import format_exception
from typing import TYPE_CHECKING, ClassVar

from click import echo, style

from jafar.core.tree import Suite, Test

if TYPE_CHECKING:
    from typing import IO

    from jafar.config import Charset
    from jafar.core.runner import Stack

INDENT = '  '

MARKERS: dict[str, dict[str, str]] = {
    'utf-8': {
        'pass': ' ✔',
        'fail': ' ✘',
        'error': ' [ERROR]',
    },
    'ascii': {
        'pass': ': ok',
        'fail': ': fail',
        'error': ': ERROR',
    },
}


def is_failure(error: BaseException) -> bool:
    """Return whether an error is an expectation failure.

    `AssertionFailure` derives from `AssertionError`, so plain `assert`
    statements count as failures too.
    """
    return isinstance(error, AssertionError)


@dataclass
class Summary:
    """Counters of a finished or running test run."""

    passed: int = 0
    failed: int = 0
    errored: int = 0
    suite_errors: int = 0

    @property
    def total(self) -> int:
        """Return the number of tests which have run."""
        return self.passed + self.failed + self.errored

    @property
    def ok(self) -> bool:
        """Return whether nothing failed."""
        return not (self.failed or self.errored or self.suite_errors)

    def __str__(self) -> str:
        """String represenatation."""
        parts = [f'{self.total} tests', f'{self.passed} passed']
        if self.failed:
            parts.append(f'{self.failed} failed')
        if self.errored:
            parts.append(f'{self.errored} errors')
        if self.suite_errors:
            parts.append(f'{self.suite_errors} suite errors')

        return ', '.join(parts)


class TerminalReporter:
    """Reports test results to a terminal."""

    COLORS: ClassVar[dict[str, dict[str, object]]] = {
        'pass': {'fg': 'green'},
        'fail': {'fg': 'yellow', 'bold': True},
        'error': {'fg': 'red', 'bold': True},
    }

    def __init__(self, charset: 'Charset' = 'utf-8', color: bool = True,
                 file: 'IO[str] | None' = None) -> None:
        """Initialize a reporter.

        Args:
            charset: Marker set, `utf-8` or `ascii`.
            color: Whether to colorize output with ANSI codes.
            file: Output stream, standard output by default.
        """
        self.markers = MARKERS[charset]
        self.color = color
        self.file = file
        self.summary = Summary()

    def before(self, stack: 'Stack') -> None:
        """Print the name of the entered node."""
        top = stack[-1]
        line = f'{self.indent(len(stack) - 1)}{top.name}'

        self.write(line, newline=isinstance(top, Suite))

    def after(self, stack: 'Stack', error: Exception | None) -> None:
        """Print the outcome of the exited node."""
        top = stack[-1]
        depth = len(stack)

        if isinstance(top, Test):
            self.after_test(depth, error)
        elif error is not None:
            self.summary.suite_errors += 1
            self.write_error(depth, error)

    def after_test(self, depth: int, error: Exception | None) -> None:
        """Print a test marker and failure details."""
        if error is None:
            self.summary.passed += 1
            self.write(self.paint('pass', self.markers['pass']))

        elif is_failure(error):
            self.summary.failed += 1
            self.write(self.paint('fail', self.markers['fail']))
            self.write_lines(depth, 'fail', f'{error}'.splitlines() or [type(error).__name__])

        else:
            self.summary.errored += 1
            self.write(self.paint('error', self.markers['error']))
            self.write_error(depth, error)

    def write_error(self, depth: int, error: Exception) -> None:
        """Print an error message followed by its traceback."""
        self.write_lines(depth, 'error', f'[{type(error).__name__}]: {error}'.splitlines())
        trace = ''.join(format_exception(error)).rstrip()
        self.write_lines(depth, None, trace.splitlines())

    def write_lines(self, depth: int, kind: str | None, lines: list[str]) -> None:
        """Print indented lines, optionally colorized."""
        indent = self.indent(depth)
        for line in lines:
            text = f'{indent}{line}'
            self.write(self.paint(kind, text) if kind else text)

    def report_summary(self) -> None:
        """Print the final summary line."""
        kind = 'pass' if self.summary.ok else 'fail'
        self.write('')
        self.write(self.paint(kind, f'{self.summary}'))

    def paint(self, kind: str, text: str) -> str:
        """Colorize text when colors are enabled."""
        if not self.color:
            return text

        return style(text, **self.COLORS[kind])  # type: ignore[arg-type]

    def write(self, text: str, *, newline: bool = True) -> None:
        """Write text to the output stream."""
        echo(text, file=self.file, nl=newline, color=self.color)

    @staticmethod
    def indent(count: int) -> str:
        """Return indentation for a depth."""
        return INDENT * count
