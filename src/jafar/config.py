"""Runtime settings for the command-line runner.

Settings are read from `JAFAR_*` environment variables and may be
overridden by command-line options.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from jafar.models import SettingsModel

#: Supported marker sets of the terminal reporter.
type Charset = Literal['utf-8', 'ascii']

LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


class Settings(SettingsModel):
    """Resolved runtime settings."""

    model_config = SettingsConfigDict(
        env_prefix='JAFAR_',
        frozen=True,
        extra='ignore',
    )

    charset: Charset = Field(
        default='utf-8',
        title='Charset',
        description='Marker set used by the terminal reporter.',
    )

    color: bool = Field(
        default=True,
        title='Colored output',
        description='Whether the terminal reporter uses ANSI colors.',
    )

    extension: str = Field(
        default='.py',
        pattern=r'^\.\w+$',
        title='Test file extension',
        description='Extension of files considered by test discovery.',
    )

    log_level: str = Field(
        default='WARNING',
        title='Log level',
        description='Threshold of the standard library root logger.',
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept log level names in any case."""
        if isinstance(value, str):
            value = value.strip().upper()
            if value not in LOG_LEVELS:
                raise ValueError(f'unknown log level {value!r}')

        return value
