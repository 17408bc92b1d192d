"""Command-line runner for jafar test files.

Test files are discovered under the given paths, loaded into suites,
and executed with a terminal reporter.
"""

from logging import basicConfig, getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from click import Choice, UsageError, argument, echo, group, option, pass_context
from click import Path as PathParam
from pydantic import ValidationError

from jafar.config import LOG_LEVELS, Settings
from jafar.core import default_builder, load_all, run_suites
from jafar.discovery import RealFilesystem, discover_test_files
from jafar.errors import DiscoveryError
from jafar.reporting import TerminalReporter

if TYPE_CHECKING:
    from click import Context

TestPaths = PathParam(
    exists=False,
    path_type=Path,
)

logger = getLogger(__name__)


@group(help='Behavior testing for Python in the spirit of Jasmine.')
@option(
    '--log-level',
    type=Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help='Log level of the runner itself (default: JAFAR_LOG_LEVEL or WARNING).',
)
@pass_context
def cli(ctx: 'Context', log_level: str | None) -> None:
    """Root CLI group for jafar tools."""
    overrides = {'log_level': log_level} if log_level else {}

    try:
        settings = Settings(**overrides)
    except ValidationError as base:
        raise UsageError(f'Invalid settings: {base}') from base

    basicConfig(level=settings.log_level)

    ctx.obj = settings


def discover(settings: Settings, paths: tuple[Path, ...]) -> list[Path]:
    """Discover test files, converting errors into usage errors."""
    try:
        return discover_test_files(
            RealFilesystem(),
            paths,
            extension=settings.extension,
        )
    except DiscoveryError as base:
        raise UsageError(base.message) from base


@cli.command(
    name='discover',
    help='Print the test files found under PATHS (default: current directory).',
)
@argument('paths', nargs=-1, type=TestPaths)
@pass_context
def print_files(ctx: 'Context', paths: tuple[Path, ...]) -> None:
    """Print discovered test files, one per line."""
    for path in discover(ctx.obj, paths):
        echo(f'{path}')


@cli.command(
    name='run',
    help='Run the test files found under PATHS (default: current directory).',
)
@option(
    '--charset',
    type=Choice(['utf-8', 'ascii']),
    default=None,
    help='Marker set of the reporter (default: JAFAR_CHARSET or utf-8).',
)
@option(
    '--color/--no-color',
    default=None,
    help='Colorize the output (default: JAFAR_COLOR or enabled).',
)
@argument('paths', nargs=-1, type=TestPaths)
@pass_context
def run_files(ctx: 'Context', charset: str | None, color: bool | None,
              paths: tuple[Path, ...]) -> None:
    """Discover, load, and run test files.

    Exits with status 1 when any test fails or errors.
    """
    settings: Settings = ctx.obj

    overrides = {
        key: value
        for key, value in (('charset', charset), ('color', color))
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    test_files = discover(settings, paths)
    logger.info('Loading %d test files', len(test_files))

    suites = load_all(test_files, default_builder)

    reporter = TerminalReporter(settings.charset, settings.color)
    run_suites(suites, reporter)
    reporter.report_summary()

    ctx.exit(0 if reporter.summary.ok else 1)


if __name__ == '__main__':
    cli()
