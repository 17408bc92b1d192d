"""Tests for test file loading."""

import sys
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

from jafar.core import Suite, load_all, load_suites
from jafar.core.loader import MODULE_PREFIX, module_name
from jafar.errors import EmptySpecWarning, SuiteLoadError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from jafar.core import SuiteBuilder


CALCULATOR_SPEC = '''
from jafar import before, describe, expect, it


@describe('calculator')
def calculator():
    @before
    def setup():
        return {'total': 1 + 1}

    it('adds', lambda total: expect(total).to_be(2))


describe('strings', lambda: it('joins', lambda: expect('a' + 'b').to_be('ab')))
'''

UNFINISHED_SPEC = '''
from jafar.core import Suite, default_builder

default_builder.stack.append(Suite(name='dangling'))
'''


@pytest.fixture
def write_file(tmp_path: 'Path') -> 'Callable[[str, str], Path]':
    """Provide a factory writing test files into a temporary directory."""
    def write(name: str, content: str) -> 'Path':
        path = tmp_path / name
        path.write_text(dedent(content), encoding='utf-8')
        return path

    return write


def test_load_suites(clean_builder: 'SuiteBuilder',
                     write_file: 'Callable[[str, str], Path]') -> None:
    """Collect root suites declared by a file."""
    path = write_file('calculator_spec.py', CALCULATOR_SPEC)

    suites = load_suites(path)

    assert [suite.name for suite in suites] == ['calculator', 'strings']
    assert [child.name for child in suites[0].children] == ['adds']
    assert clean_builder.idle
    assert clean_builder.collect() == []


def test_load_module_name(clean_builder: 'SuiteBuilder',
                          write_file: 'Callable[[str, str], Path]') -> None:
    """Register the module under a unique, stable name."""
    path = write_file('calculator_spec.py', CALCULATOR_SPEC)

    name = module_name(path)
    load_suites(path)

    assert name.startswith(f'{MODULE_PREFIX}calculator_spec_')
    assert name == module_name(path)
    assert name in sys.modules

    sys.modules.pop(name)


def test_load_empty(clean_builder: 'SuiteBuilder',
                    write_file: 'Callable[[str, str], Path]') -> None:
    """Warn about files without suites."""
    path = write_file('empty_spec.py', 'VALUE = 1\n')

    with pytest.warns(EmptySpecWarning, match=r'does not define any suite$'):
        assert load_suites(path) == []


def test_load_error(clean_builder: 'SuiteBuilder',
                    write_file: 'Callable[[str, str], Path]') -> None:
    """Propagate errors raised by a file and reset the builder."""
    path = write_file('broken_spec.py', '''
        from jafar import describe, it

        def body():
            it('declared', lambda: None)
            raise RuntimeError('broken file')

        describe('broken', body)
    ''')

    with pytest.raises(RuntimeError, match=r'^broken file$'):
        load_suites(path)

    assert clean_builder.idle
    assert clean_builder.collect() == []
    assert module_name(path) not in sys.modules


def test_load_unfinished(clean_builder: 'SuiteBuilder',
                         write_file: 'Callable[[str, str], Path]') -> None:
    """Reject files leaving a describe open."""
    path = write_file('unfinished_spec.py', UNFINISHED_SPEC)

    with pytest.raises(SuiteLoadError) as error:
        load_suites(path)

    assert error.value.message == 'Test file left an unfinished describe()'
    assert f'{error.value}'.splitlines()[1:] == [
        f'    in "{path}"',
        '    at "dangling"',
    ]
    assert clean_builder.idle


def test_load_busy(builder: 'SuiteBuilder',
                   write_file: 'Callable[[str, str], Path]') -> None:
    """Refuse to load while a describe is running."""
    path = write_file('calculator_spec.py', CALCULATOR_SPEC)
    builder.stack.append(Suite(name='running'))

    with pytest.raises(SuiteLoadError, match=r'while a describe\(\) is running') as error:
        load_suites(path, builder)

    assert error.value.context == {'path': ['running']}


def test_load_not_python(write_file: 'Callable[[str, str], Path]') -> None:
    """Reject files which are not Python modules."""
    path = write_file('notes.txt', 'nothing here\n')

    with pytest.raises(SuiteLoadError, match=r'^Can not load'):
        load_suites(path)


def test_load_all(clean_builder: 'SuiteBuilder',
                  write_file: 'Callable[[str, str], Path]') -> None:
    """Concatenate suites of several files in order."""
    paths = [
        write_file('b_spec.py', "from jafar import describe\ndescribe('b', lambda: None)\n"),
        write_file('a_spec.py', "from jafar import describe\ndescribe('a', lambda: None)\n"),
    ]

    assert [suite.name for suite in load_all(paths)] == ['b', 'a']
