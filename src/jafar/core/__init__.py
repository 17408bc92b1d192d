"""Core execution engine.

This package defines the execution tree, the registration stack used
to build it from nested declarations, the recursive runner, and the
test file loading boundary.

The primary public entry points are `SuiteBuilder` for building trees,
`run_suites` for executing them, and `load_suites` for collecting the
suites declared by a test file.
"""

from .builder import SuiteBuilder, default_builder
from .loader import load_all, load_suites
from .runner import Listener, Runnable, Stack, run_suites
from .tree import Hook, Suite, Test

__all__ = (
    'Hook',
    'Listener',
    'Runnable',
    'Stack',
    'Suite',
    'SuiteBuilder',
    'Test',
    'default_builder',
    'load_all',
    'load_suites',
    'run_suites',
)
