"""Behavior testing DSL in the spirit of Jasmine.

Nested `describe` blocks build a tree of suites; `it` declares tests;
`before` and `after` declare hooks running around each child of a suite.
Values returned by `before` hooks are passed to tests and hooks whose
parameters have matching names:

    from jafar import before, describe, expect, it

    def calculator():
        @before
        def setup():
            return {'total': 1 + 1}

        it('adds', lambda total: expect(total).to_be(2))

    describe('calculator', calculator)

Test files are discovered and executed with the `jafar` command.
"""

from jafar.core.builder import default_builder
from jafar.errors import AssertionFailure, ConfigurationError
from jafar.expectations import check, expect

__all__ = (
    'AssertionFailure',
    'ConfigurationError',
    'after',
    'before',
    'check',
    'describe',
    'expect',
    'it',
)

#: Open a suite describing `name`, declared by the `body` callable.
describe = default_builder.describe

#: Open a test within the current suite.
it = default_builder.it

#: Declare a hook called before each child of the current suite.
before = default_builder.before

#: Declare a hook called after each child of the current suite.
after = default_builder.after
