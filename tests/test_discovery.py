"""Tests for test file discovery."""

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from jafar.discovery import RealFilesystem, discover_test_files, file_pattern
from jafar.errors import DiscoveryError, TestPathNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


PROJECT_FILES = (
    'README.md',
    'calc_spec.py',
    'calcTest.py',
    'helpers.py',
    'specs/z.py',
    'src/module.py',
    'src/module_test.py',
    'tests/__init__.py',
    'tests/conftest.py',
    'tests/test_a.py',
    'tests/unit/b.py',
    'tests/unit/notes.txt',
)


@pytest.fixture
def project(fs: 'FakeFilesystem') -> Path:
    """Provide a fake project tree with test and regular files."""
    root = Path('/project')
    for name in PROJECT_FILES:
        fs.create_file(root / name)

    return root


class MemoryFilesystem:
    """Filesystem listing a fixed set of files."""

    def __init__(self, *files: str) -> None:
        self.files = {Path(name) for name in files}
        self.dirs = {parent for name in self.files for parent in name.parents}

    def enumerate(self, path: Path) -> 'Iterable[Path]':
        return [
            entry
            for entry in self.files | self.dirs
            if entry.parent == path and entry != path
        ]

    def is_file(self, path: Path) -> bool:
        return path in self.files

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs


def test_discover_directory(project: Path) -> None:
    """Walk directories recursively, sorted by name."""
    found = discover_test_files(RealFilesystem(), [project])

    assert [path.relative_to(project).as_posix() for path in found] == [
        'calcTest.py',
        'calc_spec.py',
        'specs/z.py',
        'src/module_test.py',
        'tests/test_a.py',
        'tests/unit/b.py',
    ]


def test_discover_current_directory(project: Path) -> None:
    """Walk the current directory when no path is given."""
    os.chdir(project)

    assert discover_test_files(RealFilesystem()) == [
        Path('calcTest.py'),
        Path('calc_spec.py'),
        Path('specs/z.py'),
        Path('src/module_test.py'),
        Path('tests/test_a.py'),
        Path('tests/unit/b.py'),
    ]


def test_discover_explicit_file(project: Path) -> None:
    """Use explicit file paths as-is, in the given order."""
    found = discover_test_files(RealFilesystem(), [
        project / 'helpers.py',
        project / 'specs',
        project / 'README.md',
    ])

    assert found == [
        project / 'helpers.py',
        project / 'specs' / 'z.py',
        project / 'README.md',
    ]


def test_discover_missing_path(project: Path) -> None:
    """Reject paths which do not exist."""
    missing = project / 'missing'

    with pytest.raises(TestPathNotFoundError, match=r'missing does not exist\.$') as error:
        discover_test_files(RealFilesystem(), [project, missing])

    assert isinstance(error.value, DiscoveryError)


def test_discover_extension(fs: 'FakeFilesystem') -> None:
    """Select files by a custom extension."""
    fs.create_file('/suite/spec/a.jf')
    fs.create_file('/suite/spec/b.py')
    fs.create_file('/suite/calc_spec.jf')

    found = discover_test_files(RealFilesystem(), ['/suite'], extension='.jf')

    assert found == [Path('/suite/calc_spec.jf'), Path('/suite/spec/a.jf')]


def test_discover_custom_filesystem() -> None:
    """Discover through any filesystem implementation."""
    fs = MemoryFilesystem(
        'root/b_spec.py',
        'root/a_spec.py',
        'root/test/x.py',
        'root/other.py',
    )

    assert discover_test_files(fs, ['root']) == [
        Path('root/a_spec.py'),
        Path('root/b_spec.py'),
        Path('root/test/x.py'),
    ]


@pytest.mark.parametrize(('name', 'inside_test_dir', 'matches'), (
    pytest.param('calc_test.py', False, True, id='suffix-test'),
    pytest.param('calc_spec.py', False, True, id='suffix-spec'),
    pytest.param('CalcTest.py', False, True, id='suffix-camel-test'),
    pytest.param('CalcSpec.py', False, True, id='suffix-camel-spec'),
    pytest.param('calc.py', False, False, id='plain'),
    pytest.param('calc_test.pyc', False, False, id='other-extension'),
    pytest.param('calc.py', True, True, id='inside-test-dir'),
    pytest.param('calc.txt', True, False, id='inside-test-dir-extension'),
))
def test_file_pattern(name: str, inside_test_dir: bool, matches: bool) -> None:
    """Match test file names."""
    pattern = file_pattern('.py', inside_test_dir=inside_test_dir)

    assert bool(pattern.search(name)) is matches
