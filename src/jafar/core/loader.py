"""Test file loading.

Loading a test file executes it as a Python module. Its top-level
`describe` calls register root suites in a builder as a side effect;
those suites are collected, returned to the caller, and cleared from the
builder buffer.
"""

import sys
from hashlib import sha1
from importlib.util import module_from_spec, spec_from_file_location
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING
from warnings import warn

from jafar.core.builder import default_builder
from jafar.errors import EmptySpecWarning, ErrorContext, SuiteLoadError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from os import PathLike
    from types import ModuleType

    from jafar.core.builder import SuiteBuilder
    from jafar.core.tree import Suite

MODULE_PREFIX = '_jafar_spec_'

logger = getLogger(__name__)


def module_name(path: Path) -> str:
    """Build a unique, stable module name for a test file."""
    digest = sha1(f'{path.resolve()}'.encode(), usedforsecurity=False).hexdigest()[:12]
    return f'{MODULE_PREFIX}{path.stem}_{digest}'


def import_file(path: Path) -> 'ModuleType':
    """Execute a Python file as a fresh module.

    The module is registered in `sys.modules` while it runs so that
    dataclasses, pickling, and relative lookups behave as usual.

    Args:
        path: Test file path.

    Returns:
        The executed module.

    Raises:
        SuiteLoadError: If the file can not be imported as a module.
        Any exception raised while executing the file.
    """
    name = module_name(path)

    spec = spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise SuiteLoadError(f'Can not load {path} as a Python module')

    module = module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    return module


def load_suites(path: 'str | PathLike[str]',
                builder: 'SuiteBuilder' = default_builder) -> list['Suite']:
    """Load a test file and return the root suites it defines.

    Errors raised while building the tree propagate to the caller.

    Args:
        path: Test file path.
        builder: Builder receiving the suites declared by the file.

    Returns:
        Root suites in declaration order.

    Raises:
        SuiteLoadError: If the builder is busy or left inconsistent.
    """
    path = Path(path)

    if not builder.idle:
        raise SuiteLoadError(
            f'Can not load {path} while a describe() is running',
            context=ErrorContext(path=[suite.name for suite in builder.stack]),
        )

    logger.debug('Loading suites from %s', path)
    try:
        import_file(path)
    except BaseException:
        builder.reset()
        raise

    if not builder.idle:
        names = [suite.name for suite in builder.stack]
        builder.reset()
        raise SuiteLoadError(
            'Test file left an unfinished describe()',
            context=ErrorContext(filename=f'{path}', path=names),
        )

    suites = builder.collect()
    if not suites:
        warn(f'{path} does not define any suite', category=EmptySpecWarning, stacklevel=2)

    return suites


def load_all(paths: 'Iterable[str | PathLike[str]]',
             builder: 'SuiteBuilder' = default_builder) -> list['Suite']:
    """Load several test files, concatenating their root suites."""
    suites: list[Suite] = []
    for path in paths:
        suites.extend(load_suites(path, builder))

    return suites
