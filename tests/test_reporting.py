"""Tests for terminal reporting."""

from io import StringIO
from typing import TYPE_CHECKING

import pytest

from jafar.core import run_suites
from jafar.errors import AssertionFailure
from jafar.expectations import expect
from jafar.reporting import Summary, TerminalReporter, is_failure

if TYPE_CHECKING:
    from jafar.core import Suite, SuiteBuilder


def fail(error: Exception) -> None:
    raise error


@pytest.fixture
def math_suite(builder: 'SuiteBuilder') -> 'Suite':
    """Provide a suite with a passing, a failing, and an erroring test."""
    def body() -> None:
        builder.it('adds', lambda: expect(1 + 1).to_be(2))
        builder.it('fails', lambda: expect(1).to_be(2))
        builder.it('errors', lambda: fail(KeyError('missing')))

    return builder.describe('math', body)


def report(suite: 'Suite', **options: object) -> tuple[TerminalReporter, list[str]]:
    output = StringIO()
    reporter = TerminalReporter(file=output, **options)  # type: ignore[arg-type]

    run_suites([suite], reporter)
    reporter.report_summary()

    return reporter, output.getvalue().splitlines()


def test_report_tree(math_suite: 'Suite') -> None:
    """Print an indented tree with markers and details."""
    reporter, lines = report(math_suite, color=False)

    assert lines[:6] == [
        'math',
        '  adds ✔',
        '  fails ✘',
        '    Expected 1 === 2',
        '  errors [ERROR]',
        "    [KeyError]: 'missing'",
    ]
    assert lines[6] == '    Traceback (most recent call last):'
    assert lines[-2:] == ['', '3 tests, 1 passed, 1 failed, 1 errors']
    assert reporter.summary == Summary(passed=1, failed=1, errored=1)
    assert not reporter.summary.ok


def test_report_ascii(math_suite: 'Suite') -> None:
    """Print ASCII markers."""
    _, lines = report(math_suite, charset='ascii', color=False)

    assert lines[1:3] == ['  adds: ok', '  fails: fail']
    assert '  errors: ERROR' in lines


def test_report_color(math_suite: 'Suite') -> None:
    """Colorize markers when colors are enabled."""
    _, lines = report(math_suite, color=True)

    assert lines[1].startswith('  adds\x1b[32m ✔')
    assert '\x1b[0m' in lines[1]


def test_report_suite_error(builder: 'SuiteBuilder') -> None:
    """Report hook errors under the suite."""
    def setup() -> None:
        raise RuntimeError('setup failed\nsecond line')

    def body() -> None:
        builder.before(setup)
        builder.it('never runs', lambda: None)

    suite = builder.describe('broken', body)
    reporter, lines = report(suite, color=False)

    assert lines[:3] == [
        'broken',
        '  [RuntimeError]: setup failed',
        '  second line',
    ]
    assert 'never runs' not in '\n'.join(lines)
    assert lines[-1] == '0 tests, 0 passed, 1 suite errors'
    assert reporter.summary.suite_errors == 1
    assert not reporter.summary.ok


def test_report_nested(builder: 'SuiteBuilder') -> None:
    """Indent nested suites and tests by depth."""
    def inner() -> None:
        builder.it('works', lambda: None)

    suite = builder.describe('outer', lambda: builder.describe('inner', inner))
    reporter, lines = report(suite, color=False)

    assert lines[:3] == ['outer', '  inner', '    works ✔']
    assert lines[-1] == '1 tests, 1 passed'
    assert reporter.summary.ok


def test_report_failure_without_message(builder: 'SuiteBuilder') -> None:
    """Print the failure class name for failures without a message."""
    suite = builder.describe('plain', lambda: builder.it('asserts', lambda: fail(AssertionError())))
    _, lines = report(suite, color=False)

    assert lines[1:3] == ['  asserts ✘', '    AssertionError']


@pytest.mark.parametrize(('error', 'expected'), (
    pytest.param(AssertionFailure('x'), True, id='failure'),
    pytest.param(AssertionError('x'), True, id='assertion'),
    pytest.param(ValueError('x'), False, id='error'),
))
def test_is_failure(error: Exception, expected: bool) -> None:
    """Classify assertion errors as failures."""
    assert is_failure(error) is expected


def test_summary() -> None:
    """Count outcomes and render a summary line."""
    summary = Summary(passed=2, failed=1)

    assert summary.total == 3
    assert not summary.ok
    assert f'{summary}' == '3 tests, 2 passed, 1 failed'
    assert Summary().ok
