"""Test file discovery.

Given a list of paths, discovery returns the ordered list of test files
to load:

- a file path is used as-is;
- a directory is walked recursively, entries sorted by name;
- inside a directory whose name starts with `test` or `spec`, and in all
  of its subdirectories, every file with the test extension is selected;
- elsewhere only files named like `*_test.py`, `*_spec.py`, `*Test.py`,
  or `*Spec.py` are selected.
"""

from logging import getLogger
from pathlib import Path
from re import compile as regexp
from re import escape
from typing import TYPE_CHECKING, Protocol

from jafar.errors import TestPathNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from os import PathLike
    from re import Pattern

DEFAULT_EXTENSION = '.py'

#: Directory names which mark a test directory.
TEST_DIR_PATTERN = regexp(r'^(test|spec)')

#: Module files that never hold suites.
IGNORED_FILES = frozenset({'__init__.py', 'conftest.py'})

logger = getLogger(__name__)


class Filesystem(Protocol):
    """Filesystem operations needed by discovery."""

    def enumerate(self, path: Path) -> 'Iterable[Path]':
        """Return the entries of a directory."""

    def is_file(self, path: Path) -> bool:
        """Return whether the path is a regular file."""

    def is_dir(self, path: Path) -> bool:
        """Return whether the path is a directory."""


class RealFilesystem:
    """Filesystem backed by `pathlib`."""

    def enumerate(self, path: Path) -> 'Iterable[Path]':
        """Return the entries of a directory."""
        return path.iterdir()

    def is_file(self, path: Path) -> bool:
        """Return whether the path is a regular file."""
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        """Return whether the path is a directory."""
        return path.is_dir()


def file_pattern(extension: str, *, inside_test_dir: bool) -> 'Pattern[str]':
    """Build the file name pattern for a directory.

    Args:
        extension: Test file extension, including the dot.
        inside_test_dir: Whether the directory is a test directory.

    Returns:
        Compiled file name pattern.
    """
    suffix = '' if inside_test_dir else '(_test|_spec|Test|Spec)'
    return regexp(f'{suffix}{escape(extension)}$')


def collect_files(fs: Filesystem, path: Path, *,
                  inside_test_dir: bool = False,
                  extension: str = DEFAULT_EXTENSION) -> list[Path]:
    """Recursively collect test files under a directory.

    Args:
        fs: Filesystem to walk.
        path: Directory to walk.
        inside_test_dir: Whether an ancestor is a test directory.
        extension: Test file extension, including the dot.

    Returns:
        Test file paths, sorted by name within each directory.
    """
    is_test_dir = inside_test_dir or bool(TEST_DIR_PATTERN.match(path.name))
    pattern = file_pattern(extension, inside_test_dir=is_test_dir)

    test_files: list[Path] = []

    for entry in sorted(fs.enumerate(path), key=lambda item: item.name):
        if fs.is_file(entry):
            if entry.name not in IGNORED_FILES and pattern.search(entry.name):
                test_files.append(entry)
        elif fs.is_dir(entry):
            test_files.extend(collect_files(
                fs,
                entry,
                inside_test_dir=is_test_dir,
                extension=extension,
            ))

    return test_files


def discover_test_files(fs: Filesystem,
                        paths: 'Iterable[str | PathLike[str]]' = (), *,
                        extension: str = DEFAULT_EXTENSION) -> list[Path]:
    """Resolve paths given by the user into test files.

    Args:
        fs: Filesystem to inspect.
        paths: Files and directories; the current directory when empty.
        extension: Test file extension, including the dot.

    Returns:
        Test file paths in discovery order.

    Raises:
        TestPathNotFoundError: If a path is neither a file nor a directory.
    """
    targets = [Path(path) for path in paths] or [Path()]

    test_files: list[Path] = []

    for path in targets:
        if fs.is_file(path):
            test_files.append(path)
        elif fs.is_dir(path):
            found = collect_files(fs, path, extension=extension)
            logger.debug('Found %d test files in %s', len(found), path)
            test_files.extend(found)
        else:
            raise TestPathNotFoundError(f'{path} does not exist.')

    return test_files
