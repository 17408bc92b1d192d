"""Fixture names primitive types and validation rules.

This module defines the name pattern and strongly-typed alias used by the
DSL to validate fixture names requested by tests and hooks.

Fixture names are bound to Python parameter names, so the rule follows
Python identifiers: a letter or underscore followed by letters, digits,
or underscores.
"""

from typing import Annotated

from pydantic import Field

#: Base pattern for all fixture identifiers.
_NAME_PATTERN = r'[^\W\d]\w*'


Fixture = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Fixture identifier',
        description=(
            'Name of a fixture value requested by a test or a hook. '
            'The value is looked up by this name in the context built '
            'from the results of `before` hooks.'
        ),
        examples=[
            'user',
            'api_client',
        ],
    ),
]
